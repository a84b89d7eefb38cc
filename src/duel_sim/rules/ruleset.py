"""Data-driven rules: dex, heuristic weights, preset builds and trainers."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from duel_sim.rules.dex import Dex
from duel_sim.rules.loader import DATA_DIR, RulesError, load_json


WEIGHT_SCALARS = ("win", "alive", "hp_ratio", "stat_boost", "has_item")


@dataclass(frozen=True)
class HeuristicWeights:
    """Weights for the state evaluator, read from ``heuristics.json``."""

    win: float
    alive: float
    hp_ratio: float
    stat_boost: float
    has_item: float
    status: dict[str, float] = field(default_factory=dict)
    side_conditions: dict[str, tuple[float, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class PresetSet:
    """A preset build; ability/item/moves may be weighted lists like "(3,1) A, B"."""

    id: str
    species: str
    ability: str
    item: str
    moves: tuple[str, ...]
    spread: str = ""
    role: str | None = None


@dataclass(frozen=True)
class TrainerDef:
    name: str
    difficulty: str
    team: tuple[tuple[str, float], ...]


@dataclass(frozen=True)
class Ruleset:
    dex: Dex
    weights: HeuristicWeights
    set_lists: dict[str, dict[str, tuple[PresetSet, ...]]]
    trainers: dict[str, TrainerDef]

    @staticmethod
    def load(data_dir: Path | None = None) -> "Ruleset":
        data_dir = data_dir or DATA_DIR
        return Ruleset(
            dex=Dex.load(data_dir),
            weights=load_weights(data_dir / "heuristics.json"),
            set_lists={
                "sets": _load_sets(data_dir / "sets.json"),
                "sets_easy": _load_sets(data_dir / "sets_easy.json"),
            },
            trainers=_load_trainers(data_dir / "trainers.json"),
        )

    def find_trainer(self, name: str) -> TrainerDef | None:
        return self.trainers.get(str(name).lower())


@lru_cache(maxsize=1)
def default_ruleset() -> Ruleset:
    """Packaged rules, loaded once per process."""
    return Ruleset.load(DATA_DIR)


def load_weights(path: Path) -> HeuristicWeights:
    data = load_json(path)
    missing = [key for key in WEIGHT_SCALARS if key not in data]
    if missing:
        raise RulesError(f"{path}: missing weights {', '.join(missing)}")
    status = {str(key): float(value) for key, value in dict(data.get("status", {})).items()}
    side_conditions: dict[str, tuple[float, ...]] = {}
    for key, table in dict(data.get("side_conditions", {})).items():
        if not isinstance(table, list) or not table:
            raise RulesError(f"{path}: side_conditions.{key} must be a non-empty array")
        side_conditions[str(key)] = tuple(float(v) for v in table)
    return HeuristicWeights(
        **{key: float(data[key]) for key in WEIGHT_SCALARS},
        status=status,
        side_conditions=side_conditions,
    )


def _load_sets(path: Path) -> dict[str, tuple[PresetSet, ...]]:
    data = load_json(path)
    if "sets" not in data:
        raise RulesError(f"{path}: missing 'sets' key")
    out: dict[str, tuple[PresetSet, ...]] = {}
    for entry in data["sets"]:
        if not isinstance(entry, dict):
            raise RulesError(f"{path}: species entry must be object")
        species = entry.get("species")
        if not isinstance(species, str):
            raise RulesError(f"{path}: species must be string")
        raw_sets = entry.get("sets", [])
        if not isinstance(raw_sets, list) or not raw_sets:
            raise RulesError(f"{path}: {species}.sets must be a non-empty array")
        out[species.lower()] = tuple(_parse_set(path, species, idx, item) for idx, item in enumerate(raw_sets))
    return out


def _parse_set(path: Path, species: str, idx: int, item: Any) -> PresetSet:
    if not isinstance(item, dict):
        raise RulesError(f"{path}: {species} set entry must be object")
    moves = item.get("moves", [])
    if not isinstance(moves, list):
        raise RulesError(f"{path}: {species}.moves must be array")
    role = item.get("role")
    return PresetSet(
        id=str(item.get("id", idx)),
        species=species,
        ability=str(item.get("ability", "")),
        item=str(item.get("item", "")),
        moves=tuple(str(m) for m in moves),
        spread=str(item.get("spread", "")),
        role=str(role) if role is not None else None,
    )


def _load_trainers(path: Path) -> dict[str, TrainerDef]:
    data = load_json(path)
    if "trainers" not in data:
        raise RulesError(f"{path}: missing 'trainers' key")
    out: dict[str, TrainerDef] = {}
    for item in data["trainers"]:
        if not isinstance(item, dict):
            raise RulesError(f"{path}: trainer entry must be object")
        name = item.get("name")
        if not isinstance(name, str):
            raise RulesError(f"{path}: trainer.name must be string")
        team = item.get("team", [])
        if not isinstance(team, list):
            raise RulesError(f"{path}: {name}.team must be array")
        out[name.lower()] = TrainerDef(
            name=name,
            difficulty=str(item.get("difficulty", "normal")),
            team=tuple((str(p["species"]), float(p.get("weight") or 1)) for p in team),
        )
    return out
