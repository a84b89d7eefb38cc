"""Read-only battle views shared by the engine and the decision layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Literal, Mapping, TypeAlias, Union


class SideId(str, Enum):
    P1 = "p1"
    P2 = "p2"

    @property
    def foe(self) -> "SideId":
        return SideId.P2 if self is SideId.P1 else SideId.P1


class Phase(str, Enum):
    """Kind of command a side is currently expected to send."""

    TEAM = "team"
    MOVE = "move"
    SWITCH = "switch"
    WAIT = "wait"


class RequestState(str, Enum):
    TEAM_PREVIEW = "teampreview"
    MOVE = "move"
    SWITCH = "switch"
    NONE = ""


BOOST_STATS = ("atk", "def", "spa", "spd", "spe", "accuracy", "evasion")


def _frozen_map(values: Mapping[str, int] | None = None) -> Mapping[str, int]:
    return MappingProxyType(dict(values or {}))


def _max_ivs() -> dict[str, int]:
    return {"hp": 31, "atk": 31, "def": 31, "spa": 31, "spd": 31, "spe": 31}


def _zero_evs() -> dict[str, int]:
    return {"hp": 0, "atk": 0, "def": 0, "spa": 0, "spd": 0, "spe": 0}


@dataclass(frozen=True)
class CombatantSet:
    """A concrete build handed to the engine when a battle starts."""

    species: str
    moves: tuple[str, ...]
    ability: str = ""
    item: str = ""
    nature: str = "Hardy"
    evs: dict[str, int] = field(default_factory=_zero_evs)
    ivs: dict[str, int] = field(default_factory=_max_ivs)
    level: int = 100
    role: str | None = None


@dataclass(frozen=True)
class PlayerInfo:
    id: SideId
    name: str


@dataclass(frozen=True)
class MoveSlot:
    move_id: str
    name: str
    pp: int
    max_pp: int
    disabled: bool = False


@dataclass(frozen=True)
class Combatant:
    species: str
    hp: int
    max_hp: int
    status: str | None = None
    volatiles: frozenset[str] = frozenset()
    boosts: Mapping[str, int] = field(default_factory=_frozen_map)
    item: str = ""
    active: bool = False
    fainted: bool = False
    ability: str = ""
    moves: tuple[str, ...] = ()

    @property
    def has_item(self) -> bool:
        return self.item != ""

    @property
    def hp_ratio(self) -> float:
        return self.hp / self.max_hp

    @property
    def on_bench(self) -> bool:
        """True when the combatant can be switched in."""
        return not self.fainted and not self.active


@dataclass(frozen=True)
class SideView:
    id: SideId
    name: str
    combatants: tuple[Combatant, ...]
    side_conditions: Mapping[str, int] = field(default_factory=_frozen_map)

    @property
    def active(self) -> Combatant | None:
        for combatant in self.combatants:
            if combatant.active:
                return combatant
        return None

    @property
    def bench(self) -> tuple[Combatant, ...]:
        return tuple(c for c in self.combatants if c.on_bench)

    @property
    def combatants_left(self) -> int:
        return sum(1 for c in self.combatants if not c.fainted)


@dataclass(frozen=True)
class TeamRequest:
    phase: Literal[Phase.TEAM] = Phase.TEAM


@dataclass(frozen=True)
class MoveRequest:
    moves: tuple[MoveSlot, ...] = ()
    trapped: bool = False
    phase: Literal[Phase.MOVE] = Phase.MOVE


@dataclass(frozen=True)
class SwitchRequest:
    wait: bool = False
    phase: Literal[Phase.SWITCH] = Phase.SWITCH


@dataclass(frozen=True)
class WaitRequest:
    phase: Literal[Phase.WAIT] = Phase.WAIT


PendingRequest: TypeAlias = Union[TeamRequest, MoveRequest, SwitchRequest, WaitRequest]
