from __future__ import annotations

import math
from dataclasses import dataclass
from random import Random

from duel_sim.engine.state import CombatantState, boost_multiplier
from duel_sim.rules.dex import Dex, MoveData

CRIT_CHANCE = 1 / 24
CRIT_MULTIPLIER = 1.5
STAB = 1.5


@dataclass(frozen=True)
class DamageRoll:
    damage: int
    effectiveness: float
    crit: bool


def calc_damage(
    attacker: CombatantState,
    defender: CombatantState,
    move: MoveData,
    dex: Dex,
    rng: Random,
) -> DamageRoll:
    effectiveness = dex.effectiveness(move.type, defender.types)
    if effectiveness == 0:
        return DamageRoll(damage=0, effectiveness=0.0, crit=False)

    crit = rng.random() < CRIT_CHANCE
    physical = move.category == "Physical"
    atk_key, def_key = ("atk", "def") if physical else ("spa", "spd")
    source = defender if move.use_target_attack else attacker

    atk_stage = source.boosts.get(atk_key, 0)
    def_stage = defender.boosts.get(def_key, 0)
    if crit:
        atk_stage = max(0, atk_stage)
        def_stage = min(0, def_stage)
    attack = source.stats[atk_key] * boost_multiplier(atk_stage)
    defense = defender.stats[def_key] * boost_multiplier(def_stage)
    if attacker.item == "choiceband" and physical:
        attack *= 1.5
    elif attacker.item == "choicespecs" and not physical:
        attack *= 1.5

    level_factor = 2 * attacker.level // 5 + 2
    base = math.floor(math.floor(level_factor * move.power * attack / max(1.0, defense)) / 50) + 2

    modifier = rng.randint(85, 100) / 100
    if crit:
        modifier *= CRIT_MULTIPLIER
    if move.type in attacker.types:
        modifier *= STAB
    modifier *= effectiveness
    if physical and attacker.status == "brn":
        modifier *= 0.5
    if attacker.item == "lifeorb":
        modifier *= 1.3

    return DamageRoll(damage=max(1, math.floor(base * modifier)), effectiveness=effectiveness, crit=crit)
