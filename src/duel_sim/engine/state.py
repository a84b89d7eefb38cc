"""Mutable engine state. Only the engine writes these; everyone else reads views."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from duel_sim.domain.commands import to_id
from duel_sim.domain.types import BOOST_STATS, Combatant, CombatantSet, SideId, SideView
from duel_sim.rules.dex import NATURES, Dex

CHOICE_ITEMS = frozenset({"choiceband", "choicespecs", "choicescarf"})
TRAPPING_VOLATILES = frozenset({"partiallytrapped", "trapped"})


def calc_stat(stat: str, base: int, iv: int, ev: int, level: int, nature: str) -> int:
    core = (2 * base + iv + ev // 4) * level // 100
    if stat == "hp":
        return core + level + 10
    value = core + 5
    plus, minus = NATURES.get(nature, (None, None))
    if plus == stat:
        value = math.floor(value * 1.1)
    elif minus == stat:
        value = math.floor(value * 0.9)
    return value


def boost_multiplier(stage: int) -> float:
    if stage >= 0:
        return (2 + stage) / 2
    return 2 / (2 - stage)


@dataclass()
class MoveState:
    move_id: str
    name: str
    pp: int
    max_pp: int


@dataclass()
class CombatantState:
    build: CombatantSet
    species: str
    types: tuple[str, ...]
    stats: dict[str, int]
    max_hp: int
    hp: int
    moves: list[MoveState]
    item: str
    ability: str
    level: int
    status: str | None = None
    # sleep: turns left asleep; tox: current toxic counter
    status_turns: int = 0
    volatiles: dict[str, int] = field(default_factory=dict)
    boosts: dict[str, int] = field(default_factory=lambda: {k: 0 for k in BOOST_STATS})
    active: bool = False
    fainted: bool = False
    choice_lock: str | None = None
    substitute_hp: int = 0

    @staticmethod
    def from_set(build: CombatantSet, dex: Dex) -> "CombatantState":
        species = dex.get_species(build.species)
        stats = {
            stat: calc_stat(
                stat,
                species.base_stats[stat],
                int(build.ivs.get(stat, 31)),
                int(build.evs.get(stat, 0)),
                build.level,
                build.nature,
            )
            for stat in species.base_stats
        }
        moves = []
        for name in build.moves:
            move = dex.get_move(name)
            moves.append(MoveState(move_id=move.id, name=move.name, pp=move.pp, max_pp=move.pp))
        return CombatantState(
            build=build,
            species=species.name,
            types=species.types,
            stats=stats,
            max_hp=stats["hp"],
            hp=stats["hp"],
            moves=moves,
            item=to_id(build.item),
            ability=build.ability,
            level=build.level,
        )

    @property
    def trapped(self) -> bool:
        return any(v in self.volatiles for v in TRAPPING_VOLATILES)

    def move_disabled(self, move: MoveState) -> bool:
        if move.pp <= 0:
            return True
        if self.choice_lock is not None and self.item in CHOICE_ITEMS:
            return move.move_id != self.choice_lock
        return False

    def effective_stat(self, stat: str) -> float:
        return self.stats[stat] * boost_multiplier(self.boosts.get(stat, 0))

    def speed(self) -> float:
        value = self.effective_stat("spe")
        if self.status == "par":
            value *= 0.5
        if self.item == "choicescarf":
            value *= 1.5
        return value

    def clear_on_switch_out(self) -> None:
        self.volatiles.clear()
        self.boosts = {k: 0 for k in BOOST_STATS}
        self.choice_lock = None
        self.substitute_hp = 0
        if self.status == "tox":
            self.status_turns = 0

    def view(self) -> Combatant:
        return Combatant(
            species=self.species,
            hp=self.hp,
            max_hp=self.max_hp,
            status=self.status,
            volatiles=frozenset(self.volatiles),
            boosts=dict(self.boosts),
            item=self.item,
            active=self.active,
            fainted=self.fainted,
            ability=self.ability,
            moves=tuple(m.move_id for m in self.moves),
        )


@dataclass()
class SideState:
    id: SideId
    name: str
    team: list[CombatantState]
    side_conditions: dict[str, int] = field(default_factory=dict)

    @property
    def active(self) -> CombatantState | None:
        for combatant in self.team:
            if combatant.active:
                return combatant
        return None

    @property
    def combatants_left(self) -> int:
        return sum(1 for c in self.team if not c.fainted)

    def bench(self) -> list[CombatantState]:
        return [c for c in self.team if not c.fainted and not c.active]

    def find_bench(self, species: str) -> CombatantState | None:
        wanted = to_id(species)
        for combatant in self.bench():
            if to_id(combatant.species) == wanted:
                return combatant
        return None

    def view(self) -> SideView:
        return SideView(
            id=self.id,
            name=self.name,
            combatants=tuple(c.view() for c in self.team),
            side_conditions=dict(self.side_conditions),
        )
