from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from duel_sim.domain.commands import TEAM_PLACEHOLDER
from duel_sim.domain.types import (
    Combatant,
    CombatantSet,
    PendingRequest,
    RequestState,
    SideId,
    SideView,
    WaitRequest,
)
from duel_sim.engine.battle import Battle
from duel_sim.engine.state import SideState
from duel_sim.rules.ruleset import default_ruleset

P1_TEAM = (
    ("Umbreon", ("Foul Play", "Toxic", "Moonlight", "Mean Look"), "Leftovers"),
    ("Sylveon", ("Moonblast", "Hyper Voice", "Wish", "Quick Attack"), "Leftovers"),
    ("Jolteon", ("Thunderbolt", "Volt Switch", "Thunder Wave", "Shadow Ball"), "Choice Specs"),
)
P2_TEAM = (
    ("Garchomp", ("Earthquake", "Dragon Claw", "Stone Edge", "Swords Dance"), "Life Orb"),
    ("Toxapex", ("Scald", "Toxic", "Recover", "Spikes"), "Heavy-Duty Boots"),
    ("Corviknight", ("Brave Bird", "Iron Head", "Roost", "U-turn"), "Leftovers"),
)


def make_build(species: str, moves: Sequence[str], item: str = "", *, level: int = 100) -> CombatantSet:
    return CombatantSet(species=species, moves=tuple(moves), item=item, level=level)


def make_team(roster=P1_TEAM) -> list[CombatantSet]:
    return [make_build(species, moves, item) for species, moves, item in roster]


def make_battle(
    *,
    seed: int = 1,
    p1: Sequence[CombatantSet] | None = None,
    p2: Sequence[CombatantSet] | None = None,
    preview: bool = False,
    apply: Callable[[Battle], None] | None = None,
) -> Battle:
    """A battle at turn 1 (or at team preview with `preview=True`), with optional overrides."""
    battle = Battle.new(
        p1 if p1 is not None else make_team(P1_TEAM),
        p2 if p2 is not None else make_team(P2_TEAM),
        dex=default_ruleset().dex,
        seed=seed,
    )
    if not preview:
        battle.apply_turn(TEAM_PLACEHOLDER, TEAM_PLACEHOLDER)
    if apply is not None:
        apply(battle)
    return battle


def p1_state(battle: Battle) -> SideState:
    return battle.side_state(SideId.P1)


def p2_state(battle: Battle) -> SideState:
    return battle.side_state(SideId.P2)


def make_combatant(species: str = "Umbreon", *, hp: int = 100, max_hp: int = 100, **kwargs) -> Combatant:
    return Combatant(species=species, hp=hp, max_hp=max_hp, **kwargs)


@dataclass
class StaticSnapshot:
    """Read-only snapshot built from plain views, for evaluator tests."""

    sides: dict[SideId, SideView]
    winner: str | None = None
    ended: bool = False
    turn: int = 1
    request_state: RequestState = RequestState.MOVE
    log: tuple[str, ...] = ()
    requests: dict[SideId, PendingRequest] = field(default_factory=dict)

    def side(self, side_id: SideId) -> SideView:
        return self.sides[side_id]

    def request(self, side_id: SideId) -> PendingRequest:
        return self.requests.get(side_id, WaitRequest())

    def clone(self) -> "StaticSnapshot":
        return self

    def apply_turn(self, p1_choice: str, p2_choice: str) -> None:
        raise RuntimeError("static snapshot cannot advance")


def make_snapshot(
    p1: Sequence[Combatant],
    p2: Sequence[Combatant] = (),
    *,
    p1_conditions: dict[str, int] | None = None,
    winner: str | None = None,
) -> StaticSnapshot:
    return StaticSnapshot(
        sides={
            SideId.P1: SideView(
                id=SideId.P1, name="Player 1", combatants=tuple(p1), side_conditions=dict(p1_conditions or {})
            ),
            SideId.P2: SideView(id=SideId.P2, name="Player 2", combatants=tuple(p2)),
        },
        winner=winner,
    )
