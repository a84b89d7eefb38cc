"""Tests for free-text command validation."""

from hypothesis import given, settings

from duel_sim.decision.validation import validate
from duel_sim.domain.types import Phase, SideId
from duel_sim.sim.turns import submit_choice
from tests.helpers.factories import make_battle, p1_state
from tests.helpers.strategies import TEAM_CODES, bad_team_code_strategy


def test_all_team_permutations_accepted() -> None:
    battle = make_battle(preview=True)
    assert len(TEAM_CODES) == 720
    for code in TEAM_CODES:
        assert validate(f"team {code}", Phase.TEAM, SideId.P1, battle).is_valid


@settings(max_examples=50)
@given(code=bad_team_code_strategy())
def test_non_permutations_rejected(code: str) -> None:
    battle = make_battle(preview=True)
    assert not validate(f"team {code}", Phase.TEAM, SideId.P1, battle).is_valid


def test_team_code_messages() -> None:
    battle = make_battle(preview=True)
    assert validate("team 112345", Phase.TEAM, SideId.P1, battle).msg == (
        "Team code digits must be unique (no duplicates)"
    )
    assert validate("team 123450", Phase.TEAM, SideId.P1, battle).msg == (
        "Team code must be exactly six digits from 1 to 6"
    )
    assert validate("team 11111", Phase.TEAM, SideId.P1, battle).msg == (
        "Team code must be exactly six digits from 1 to 6"
    )
    assert validate("team", Phase.TEAM, SideId.P1, battle).msg == "Expected exactly one argument after 'team'"
    assert validate("move tackle", Phase.TEAM, SideId.P1, battle).msg == "Expected 'team' command for team preview"


def test_wait_phase_requires_empty_input() -> None:
    battle = make_battle()
    assert validate("", Phase.WAIT, SideId.P1, battle).is_valid
    assert validate("   ", Phase.WAIT, SideId.P1, battle).is_valid
    result = validate("move foulplay", Phase.WAIT, SideId.P1, battle)
    assert not result.is_valid
    assert result.msg == "No valid moves available, input must be empty"


def test_team_outside_preview_rejected() -> None:
    battle = make_battle()
    result = validate("team 123456", Phase.MOVE, SideId.P1, battle)
    assert result.msg == "Unexpected 'team' command outside of team preview"


def test_switch_targets_only_bench() -> None:
    battle = make_battle()
    p1_state(battle).team[2].hp = 0
    p1_state(battle).team[2].fainted = True

    fainted = validate("switch Jolteon", Phase.MOVE, SideId.P1, battle)
    active = validate("switch Umbreon", Phase.MOVE, SideId.P1, battle)
    bench = validate("switch sylveon", Phase.MOVE, SideId.P1, battle)

    assert fainted.msg == "Cannot switch to Jolteon. Valid choices are: Sylveon"
    assert active.msg == "Cannot switch to Umbreon. Valid choices are: Sylveon"
    assert bench.is_valid
    assert bench.msg == "Input validation passed"


def test_switch_without_target() -> None:
    battle = make_battle()
    result = validate("switch", Phase.MOVE, SideId.P1, battle)
    assert result.msg == "Expected a combatant after 'switch'. Valid choices are: Sylveon, Jolteon"


def test_forced_switch_requires_switch() -> None:
    battle = make_battle()
    result = validate("move foulplay", Phase.SWITCH, SideId.P1, battle)
    assert result.msg == "Expected 'switch' command for force switch"


def test_move_commands_pass_through() -> None:
    battle = make_battle()
    assert validate("move anything", Phase.MOVE, SideId.P1, battle).is_valid


def test_short_team_code_reported_end_to_end() -> None:
    battle = make_battle(preview=True)
    before = battle.log
    result = submit_choice(battle, "team 11111")
    assert not result.ok
    assert result.message == "Team code must be exactly six digits from 1 to 6"
    assert battle.log == before
