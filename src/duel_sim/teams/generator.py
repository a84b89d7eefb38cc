"""Team generation from preset builds.

Preset fields may carry weights, e.g. ``"(3,1) Leftovers, Life Orb"``; each
field is resolved independently with a weighted pick when a build is made.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from random import Random

from duel_sim.domain.types import CombatantSet
from duel_sim.rules.dex import Dex, find_nature
from duel_sim.rules.ruleset import PresetSet, Ruleset
from duel_sim.sim.rng import weighted_pick

logger = logging.getLogger(__name__)

WEAK_POWER = 60
FULL_EVS = 252
LEFTOVER_EVS = 4
LEFTOVER_ORDER = ("hp", "spe", "def")
SPREAD_CODES = {"H": "hp", "A": "atk", "B": "def", "C": "spa", "D": "spd", "S": "spe"}
EASY_DIFFICULTY = "noob"

_WEIGHTED = re.compile(r"^\s*\((\s*\d+\s*(?:,\s*\d+\s*)*)\)\s*(.+)$")


@dataclass(frozen=True)
class MovesetMetadata:
    uses_atk: bool
    uses_spa: bool
    only_weak_physical: bool
    only_weak_special: bool


def parse_weighted_list(text: str | list[str] | None) -> list[tuple[str, float]]:
    """Parse ``"(n,n) a, b"`` / ``"a, b"`` / ``"a"`` into ``[(item, weight)]``.

    Missing weights default to 1 and extra weights are ignored. If every
    weight is 0 the items are weighted equally.
    """
    if text is None:
        return []
    if isinstance(text, list):
        return [(str(item).strip(), 1.0) for item in text]
    text = str(text).strip()
    match = _WEIGHTED.match(text)
    if match is None:
        return [(item, 1.0) for item in _split(text)]

    weights = [int(w) for w in re.split(r"\s*,\s*", match.group(1).strip())]
    items = _split(match.group(2))
    parsed = [(item, float(weights[idx]) if idx < len(weights) else 1.0) for idx, item in enumerate(items)]
    if not sum(w for _, w in parsed):
        return [(item, 1.0) for item, _ in parsed]
    return parsed


def _split(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def get_set_for_species(
    rules: Ruleset,
    species: str,
    list_name: str = "sets",
    set_id: int | str | None = None,
    rng: Random | None = None,
) -> PresetSet | None:
    """A preset by index or id, or a random one when `set_id` is None."""
    presets = rules.set_lists.get(list_name, rules.set_lists["sets"]).get(str(species).lower())
    if not presets:
        logger.warning("Species %s not found in list %s", species, list_name)
        return None
    if set_id is None:
        return (rng or Random()).choice(presets)
    if str(set_id).isdigit() and int(set_id) < len(presets):
        return presets[int(set_id)]
    for preset in presets:
        if preset.id == str(set_id):
            return preset
    return None


def moveset_metadata(moves: list[str], dex: Dex) -> MovesetMetadata:
    uses_atk = uses_spa = False
    only_weak_physical = only_weak_special = True
    for name in moves:
        move = dex.get_move(name)
        if move.category == "Physical" and not move.use_target_attack:
            uses_atk = True
            if move.power > WEAK_POWER:
                only_weak_physical = False
        elif move.category == "Special":
            uses_spa = True
            if move.power > WEAK_POWER:
                only_weak_special = False
    return MovesetMetadata(uses_atk, uses_spa, only_weak_physical, only_weak_special)


def parse_spread(spread: str, moves: list[str], dex: Dex) -> tuple[str, dict[str, int]]:
    """Nature and EVs from a spread code like ``"HD"``.

    Every letter puts 252 EVs into its stat and the 4 leftover EVs go to the
    first empty stat among HP, Spe, Def. The nature raises the first non-HP
    letter and lowers an attacking stat the moveset does not rely on (SpD
    when both are used).
    """
    evs = {"hp": 0, "atk": 0, "def": 0, "spa": 0, "spd": 0, "spe": 0}
    if not spread:
        return "Hardy", evs

    raised: str | None = None
    for code in str(spread).upper():
        stat = SPREAD_CODES.get(code)
        if stat is None:
            continue
        evs[stat] = FULL_EVS
        if raised is None and stat != "hp":
            raised = stat

    meta = moveset_metadata(moves, dex)
    if not meta.uses_atk:
        lowered = "atk"
    elif not meta.uses_spa:
        lowered = "spa"
    elif meta.only_weak_physical and not meta.only_weak_special:
        lowered = "atk"
    elif meta.only_weak_special and not meta.only_weak_physical:
        lowered = "spa"
    else:
        lowered = "spd"

    for stat in LEFTOVER_ORDER:
        if evs[stat] == 0:
            evs[stat] = LEFTOVER_EVS
            break
    return find_nature(raised, lowered) or "Hardy", evs


def to_build(preset: PresetSet, dex: Dex, rng: Random | None = None) -> CombatantSet:
    rng = rng or Random()
    ability = weighted_pick(parse_weighted_list(preset.ability), rng) or ""
    item = weighted_pick(parse_weighted_list(preset.item), rng) or ""
    moves = [weighted_pick(parse_weighted_list(slot), rng) for slot in preset.moves]
    moves = [m for m in moves if m]
    nature, evs = parse_spread(preset.spread, moves, dex)
    atk_iv = 31 if moveset_metadata(moves, dex).uses_atk else 0
    return CombatantSet(
        species=preset.species,
        moves=tuple(moves),
        ability=ability,
        item=item,
        nature=nature,
        evs=evs,
        ivs={"hp": 31, "atk": atk_iv, "def": 31, "spa": 31, "spd": 31, "spe": 31},
        role=preset.role,
    )


def generate_trainer_team(
    trainer_name: str,
    size: int,
    rules: Ruleset,
    rng: Random | None = None,
) -> list[CombatantSet]:
    """Up to `size` builds for a trainer, without repeating a species."""
    trainer = rules.find_trainer(trainer_name)
    if trainer is None:
        logger.warning("Unknown trainer %s", trainer_name)
        return []
    rng = rng or Random()
    list_name = "sets_easy" if trainer.difficulty == EASY_DIFFICULTY else "sets"

    pool = list(trainer.team)
    team: list[CombatantSet] = []
    while pool and len(team) < size:
        species = weighted_pick(pool, rng)
        preset = get_set_for_species(rules, species, list_name, rng=rng)
        if preset is not None:
            team.append(to_build(preset, rules.dex, rng))
        pool = _drop_first(pool, species)
    return team


def _drop_first(pool: list[tuple[str, float]], species: str) -> list[tuple[str, float]]:
    for idx, (name, _) in enumerate(pool):
        if name == species:
            return pool[:idx] + pool[idx + 1 :]
    return pool
