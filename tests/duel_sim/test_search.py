"""Tests for the one-ply decision search."""

import json
import logging
import shutil
from random import Random

from hypothesis import given, settings
from hypothesis import strategies as st

from duel_sim.decision.choices import enumerate_choices
from duel_sim.decision.search import SHARPEN_BASE, decide, fallback_choice, policy_weights, score_choices
from duel_sim.domain.commands import TEAM_PLACEHOLDER
from duel_sim.domain.types import MoveRequest, MoveSlot, SideId, WaitRequest
from duel_sim.rules.loader import DATA_DIR
from duel_sim.rules.ruleset import Ruleset
from tests.helpers.factories import StaticSnapshot, make_battle, make_combatant, make_snapshot, p2_state


class _NoClone(StaticSnapshot):
    def clone(self):
        raise AssertionError("clone should not be called")


class _BrokenApply(StaticSnapshot):
    def apply_turn(self, p1_choice: str, p2_choice: str) -> None:
        raise RuntimeError("engine exploded")


def _with_requests(cls, requests):
    base = make_snapshot([make_combatant(active=True)], [make_combatant("Garchomp", active=True)])
    return cls(sides=base.sides, requests=requests)


def test_policy_weights_follow_exponent() -> None:
    weights = policy_weights({"a": 2.0, "b": 0.0, "c": 1.0})
    assert weights["a"] == 1.0
    assert weights["b"] == SHARPEN_BASE**-2
    assert weights["c"] == SHARPEN_BASE**-1


def test_policy_weights_stay_positive() -> None:
    weights = policy_weights({"a": 0.0, "b": -10_000.0})
    assert weights["b"] > 0.0


def test_waiting_side_decides_nothing_without_search() -> None:
    snapshot = _with_requests(_NoClone, {SideId.P2: WaitRequest()})
    assert decide(snapshot, SideId.P2, SideId.P1, rng=Random(0)) == ""


def test_team_preview_returns_placeholder() -> None:
    battle = make_battle(preview=True)
    assert decide(battle, SideId.P2, SideId.P1, rng=Random(0)) == TEAM_PLACEHOLDER


def test_lookahead_failure_falls_back(caplog) -> None:
    request = MoveRequest(moves=(MoveSlot("tackle", "Tackle", 35, 35), MoveSlot("growl", "Growl", 40, 40)))
    snapshot = _with_requests(_BrokenApply, {SideId.P2: request, SideId.P1: WaitRequest()})
    with caplog.at_level(logging.ERROR, logger="duel_sim.decision.search"):
        choice = decide(snapshot, SideId.P2, SideId.P1, rng=Random(0))
    assert choice in ("move tackle", "move growl")
    assert "Lookahead failed" in caplog.text


def test_score_choices_leaves_snapshot_untouched() -> None:
    battle = make_battle()
    before = battle.log
    ai_cmds = enumerate_choices(battle, SideId.P2)
    human_cmds = enumerate_choices(battle, SideId.P1)
    advantages = score_choices(battle, SideId.P2, SideId.P1, ai_cmds, human_cmds)
    assert set(advantages) == set(ai_cmds)
    assert battle.log == before


def test_switching_carries_a_penalty() -> None:
    battle = make_battle()
    # Moonlight fails at full HP, so the human reply changes nothing.
    advantages = score_choices(
        battle, SideId.P2, SideId.P1, ["move swordsdance", "switch Corviknight"], ["move moonlight"]
    )
    assert advantages["switch Corviknight"] < advantages["move swordsdance"]


@settings(max_examples=10, deadline=None)
@given(seed=st.integers(min_value=0, max_value=10_000))
def test_decide_returns_enumerated_command(seed: int) -> None:
    battle = make_battle(seed=seed)
    choice = decide(battle, SideId.P2, SideId.P1, rng=Random(seed))
    assert choice in enumerate_choices(battle, SideId.P2)


def test_fallback_respects_trapping() -> None:
    battle = make_battle()
    state = p2_state(battle)
    state.active.volatiles["trapped"] = 1
    for move in state.active.moves:
        move.pp = 0
    # with every move spent the request offers Struggle
    assert fallback_choice(battle, SideId.P2, Random(1)) == "move struggle"


def test_fallback_switches_when_forced() -> None:
    battle = make_battle()
    p2_state(battle).active.hp = 1
    battle.apply_turn("move foulplay", "move swordsdance")
    assert fallback_choice(battle, SideId.P2, Random(1)) in ("switch Toxapex", "switch Corviknight")
    assert fallback_choice(battle, SideId.P1, Random(1)) == ""


def _rules_with(tmp_path, **changes) -> Ruleset:
    data_dir = tmp_path / "data"
    shutil.copytree(DATA_DIR, data_dir)
    path = data_dir / "heuristics.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    data.update(changes)
    path.write_text(json.dumps(data), encoding="utf-8")
    return Ruleset.load(data_dir)


def test_configured_weights_reach_the_search(tmp_path) -> None:
    rules = _rules_with(tmp_path, stat_boost=50.0)
    battle = make_battle()
    # Swords Dance always lands and Moonlight fails at full HP.
    default = score_choices(battle, SideId.P2, SideId.P1, ["move swordsdance"], ["move moonlight"])
    tuned = score_choices(battle, SideId.P2, SideId.P1, ["move swordsdance"], ["move moonlight"], rules.weights)
    assert default["move swordsdance"] == 2 * 2.0
    assert tuned["move swordsdance"] == 2 * 50.0
