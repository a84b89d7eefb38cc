"""Tests for match setup."""

import pytest

from duel_sim.domain.types import RequestState, SideId
from duel_sim.rules.ruleset import default_ruleset
from duel_sim.sim.match import AI_TRAINERS, start_match


def test_match_skips_preview() -> None:
    match = start_match(seed=123)
    assert match.battle.request_state is RequestState.MOVE
    assert match.battle.turn == 1
    assert match.ai_trainer in AI_TRAINERS
    assert match.player_trainer == "Penny"
    assert len(match.battle.side(SideId.P1).combatants) == 6


def test_match_can_stop_at_preview() -> None:
    match = start_match(seed=5, ai_trainer="Cynthia", skip_preview=False)
    assert match.battle.request_state is RequestState.TEAM_PREVIEW
    assert match.ai_trainer == "Cynthia"


def test_same_seed_same_teams() -> None:
    first = start_match(seed=77)
    second = start_match(seed=77)
    assert first.ai_trainer == second.ai_trainer
    for side_id in SideId:
        assert first.battle.side(side_id) == second.battle.side(side_id)


def test_unknown_trainer_fails() -> None:
    with pytest.raises(ValueError):
        start_match(default_ruleset(), seed=1, ai_trainer="Nobody")


def test_match_carries_ruleset_weights() -> None:
    rules = default_ruleset()
    match = start_match(rules, seed=9)
    assert match.weights is rules.weights
