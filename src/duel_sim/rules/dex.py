"""Species, move and type data used by the reference engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from duel_sim.domain.commands import to_id
from duel_sim.rules.loader import RulesError, load_json

STAT_KEYS = ("hp", "atk", "def", "spa", "spd", "spe")

# name -> (raised stat, lowered stat); neutral natures map to (None, None)
NATURES: dict[str, tuple[str | None, str | None]] = {
    "Hardy": (None, None),
    "Docile": (None, None),
    "Serious": (None, None),
    "Bashful": (None, None),
    "Quirky": (None, None),
    "Lonely": ("atk", "def"),
    "Adamant": ("atk", "spa"),
    "Naughty": ("atk", "spd"),
    "Brave": ("atk", "spe"),
    "Bold": ("def", "atk"),
    "Impish": ("def", "spa"),
    "Lax": ("def", "spd"),
    "Relaxed": ("def", "spe"),
    "Modest": ("spa", "atk"),
    "Mild": ("spa", "def"),
    "Rash": ("spa", "spd"),
    "Quiet": ("spa", "spe"),
    "Calm": ("spd", "atk"),
    "Gentle": ("spd", "def"),
    "Careful": ("spd", "spa"),
    "Sassy": ("spd", "spe"),
    "Timid": ("spe", "atk"),
    "Hasty": ("spe", "def"),
    "Jolly": ("spe", "spa"),
    "Naive": ("spe", "spd"),
}


def find_nature(raised: str | None, lowered: str | None) -> str | None:
    if raised is None or lowered is None or raised == lowered:
        return None
    for name, (plus, minus) in NATURES.items():
        if plus == raised and minus == lowered:
            return name
    return None


@dataclass(frozen=True)
class Secondary:
    chance: int
    status: str | None = None
    boosts: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MoveData:
    id: str
    name: str
    type: str
    category: str  # "Physical" | "Special" | "Status"
    power: int
    accuracy: int | None  # None: never misses
    pp: int
    priority: int = 0
    target: str = "foe"  # "foe" | "self"
    status: str | None = None
    boosts: dict[str, int] = field(default_factory=dict)
    self_boosts: dict[str, int] = field(default_factory=dict)
    volatile: str | None = None
    side_condition: str | None = None
    heal: float = 0.0
    drain: float = 0.0
    recoil: float = 0.0
    self_switch: bool = False
    use_target_attack: bool = False
    type_immune: bool = False
    flags: frozenset[str] = frozenset()
    secondary: Secondary | None = None

    @property
    def is_damaging(self) -> bool:
        return self.category in ("Physical", "Special") and self.power > 0


@dataclass(frozen=True)
class SpeciesData:
    id: str
    name: str
    types: tuple[str, ...]
    base_stats: dict[str, int]


@dataclass(frozen=True)
class Dex:
    species: dict[str, SpeciesData]
    moves: dict[str, MoveData]
    type_chart: dict[str, dict[str, float]]
    status_immunities: dict[str, tuple[str, ...]]

    def get_species(self, name: str) -> SpeciesData:
        try:
            return self.species[to_id(name)]
        except KeyError as exc:
            raise RulesError(f"Unknown species: {name}") from exc

    def get_move(self, name: str) -> MoveData:
        try:
            return self.moves[to_id(name)]
        except KeyError as exc:
            raise RulesError(f"Unknown move: {name}") from exc

    def effectiveness(self, attack_type: str, defender_types: tuple[str, ...]) -> float:
        row = self.type_chart.get(attack_type, {})
        multiplier = 1.0
        for def_type in defender_types:
            multiplier *= row.get(def_type, 1.0)
        return multiplier

    def status_immune(self, status: str, defender_types: tuple[str, ...]) -> bool:
        immune = self.status_immunities.get(status, ())
        return any(t in immune for t in defender_types)

    @staticmethod
    def load(data_dir: Path) -> "Dex":
        species = _load_species(data_dir / "species.json")
        moves = _load_moves(data_dir / "moves.json")
        chart, immunities = _load_type_chart(data_dir / "type_chart.json")
        return Dex(species=species, moves=moves, type_chart=chart, status_immunities=immunities)


def _load_species(path: Path) -> dict[str, SpeciesData]:
    data = load_json(path)
    if "species" not in data:
        raise RulesError(f"{path}: missing 'species' key")
    out: dict[str, SpeciesData] = {}
    for item in data["species"]:
        if not isinstance(item, dict):
            raise RulesError(f"{path}: species entry must be object")
        name = item.get("name")
        if not isinstance(name, str):
            raise RulesError(f"{path}: species.name must be string")
        types = item.get("types", [])
        if not isinstance(types, list) or not types:
            raise RulesError(f"{path}: {name}.types must be a non-empty array")
        base_stats = item.get("base_stats", {})
        missing = [k for k in STAT_KEYS if k not in base_stats]
        if missing:
            raise RulesError(f"{path}: {name}.base_stats missing {missing}")
        out[to_id(name)] = SpeciesData(
            id=to_id(name),
            name=name,
            types=tuple(str(t) for t in types),
            base_stats={k: int(base_stats[k]) for k in STAT_KEYS},
        )
    return out


def _load_moves(path: Path) -> dict[str, MoveData]:
    data = load_json(path)
    if "moves" not in data:
        raise RulesError(f"{path}: missing 'moves' key")
    out: dict[str, MoveData] = {}
    for item in data["moves"]:
        if not isinstance(item, dict):
            raise RulesError(f"{path}: move entry must be object")
        name = item.get("name")
        if not isinstance(name, str):
            raise RulesError(f"{path}: move.name must be string")
        category = item.get("category", "Status")
        if category not in ("Physical", "Special", "Status"):
            raise RulesError(f"{path}: {name}.category must be Physical, Special or Status")
        accuracy = item.get("accuracy", True)
        move_id = to_id(item.get("id", name))
        out[move_id] = MoveData(
            id=move_id,
            name=name,
            type=str(item.get("type", "Normal")),
            category=category,
            power=int(item.get("power", 0)),
            accuracy=None if accuracy is True else int(accuracy),
            pp=int(item.get("pp", 10)),
            priority=int(item.get("priority", 0)),
            target=str(item.get("target", "foe")),
            status=item.get("status"),
            boosts=_int_map(item.get("boosts")),
            self_boosts=_int_map(item.get("self_boosts")),
            volatile=item.get("volatile"),
            side_condition=item.get("side_condition"),
            heal=float(item.get("heal", 0.0)),
            drain=float(item.get("drain", 0.0)),
            recoil=float(item.get("recoil", 0.0)),
            self_switch=bool(item.get("self_switch", False)),
            use_target_attack=bool(item.get("use_target_attack", False)),
            type_immune=bool(item.get("type_immune", False)),
            flags=frozenset(str(f) for f in item.get("flags", [])),
            secondary=_parse_secondary(item.get("secondary")),
        )
    return out


def _parse_secondary(value: Any) -> Secondary | None:
    if not isinstance(value, dict):
        return None
    return Secondary(
        chance=int(value.get("chance", 100)),
        status=value.get("status"),
        boosts=_int_map(value.get("boosts")),
    )


def _int_map(value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        return {}
    return {str(k): int(v) for k, v in value.items()}


def _load_type_chart(path: Path) -> tuple[dict[str, dict[str, float]], dict[str, tuple[str, ...]]]:
    data = load_json(path)
    chart_raw = data.get("chart")
    if not isinstance(chart_raw, dict):
        raise RulesError(f"{path}: missing 'chart' object")
    chart = {
        str(attack): {str(defend): float(mult) for defend, mult in row.items()}
        for attack, row in chart_raw.items()
    }
    immunities = {
        str(status): tuple(str(t) for t in types)
        for status, types in dict(data.get("status_immunities", {})).items()
    }
    return chart, immunities
