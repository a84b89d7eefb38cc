"""Tests for phase classification and command enumeration."""

from duel_sim.decision.choices import enumerate_all, enumerate_choices
from duel_sim.decision.phase import classify
from duel_sim.domain.commands import TEAM_PLACEHOLDER
from duel_sim.domain.types import Phase, SideId
from tests.helpers.factories import make_battle, make_build, p1_state, p2_state


def test_team_preview_is_team_for_both() -> None:
    battle = make_battle(preview=True)
    assert classify(battle) == {SideId.P1: Phase.TEAM, SideId.P2: Phase.TEAM}
    assert enumerate_all(battle) == {SideId.P1: [TEAM_PLACEHOLDER], SideId.P2: [TEAM_PLACEHOLDER]}


def test_move_phase_lists_moves_then_switches() -> None:
    battle = make_battle()
    assert classify(battle) == {SideId.P1: Phase.MOVE, SideId.P2: Phase.MOVE}
    assert enumerate_choices(battle, SideId.P1) == [
        "move foulplay",
        "move toxic",
        "move moonlight",
        "move meanlook",
        "switch Sylveon",
        "switch Jolteon",
    ]


def test_classify_is_pure() -> None:
    battle = make_battle()
    before = battle.log
    first = classify(battle)
    second = classify(battle)
    assert first == second
    assert battle.log == before


def test_enumerate_is_pure() -> None:
    battle = make_battle()
    before = battle.log
    for side_id in SideId:
        first = enumerate_choices(battle, side_id)
        second = enumerate_choices(battle, side_id)
        assert first == second
    assert enumerate_all(battle) == enumerate_all(battle)
    assert battle.log == before
    assert battle.turn == 1


def test_trapped_side_gets_no_switches() -> None:
    battle = make_battle()
    p2_state(battle).active.volatiles["partiallytrapped"] = 3
    choices = enumerate_choices(battle, SideId.P2)
    assert choices
    assert all(choice.startswith("move ") for choice in choices)


def test_disabled_moves_are_left_out() -> None:
    battle = make_battle()
    p1_state(battle).active.moves[1].pp = 0
    assert "move toxic" not in enumerate_choices(battle, SideId.P1)


def test_forced_switch_phase_per_side() -> None:
    battle = make_battle()
    p1_state(battle).active.hp = 1
    battle.apply_turn("move moonlight", "move earthquake")

    assert classify(battle) == {SideId.P1: Phase.SWITCH, SideId.P2: Phase.WAIT}
    assert enumerate_choices(battle, SideId.P1) == ["switch Sylveon", "switch Jolteon"]
    assert enumerate_choices(battle, SideId.P2) == [""]


def test_ended_battle_waits() -> None:
    battle = make_battle(
        p1=[make_build("Garchomp", ["Earthquake"])],
        p2=[make_build("Jolteon", ["Thunderbolt"])],
    )
    p2_state(battle).active.hp = 1
    battle.apply_turn("move earthquake", "move thunderbolt")
    assert battle.ended
    assert classify(battle) == {SideId.P1: Phase.WAIT, SideId.P2: Phase.WAIT}
    assert enumerate_all(battle) == {SideId.P1: [""], SideId.P2: [""]}
