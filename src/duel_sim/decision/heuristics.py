"""Static evaluation of a battle snapshot from one side's point of view."""

from __future__ import annotations

import logging

from duel_sim.domain.types import Combatant, SideId, SideView
from duel_sim.engine.protocol import Snapshot
from duel_sim.rules.ruleset import HeuristicWeights, default_ruleset

logger = logging.getLogger(__name__)


def resolve_weights(weights: HeuristicWeights | None) -> HeuristicWeights:
    return weights if weights is not None else default_ruleset().weights


def side_condition_penalty(side: SideView, weights: HeuristicWeights | None = None) -> float:
    weights = resolve_weights(weights)
    total = 0.0
    for condition, count in side.side_conditions.items():
        table = weights.side_conditions.get(condition)
        if not table or count <= 0:
            continue
        # 1-indexed stack count, clamped to the table
        total += table[min(count, len(table)) - 1]
    return total


def combatant_score(combatant: Combatant, weights: HeuristicWeights | None = None) -> float:
    """Per-combatant contribution, never below zero."""
    weights = resolve_weights(weights)
    score = weights.hp_ratio * (combatant.hp / combatant.max_hp)
    if combatant.status:
        score += weights.status.get(combatant.status, 0.0)
    for volatile in combatant.volatiles:
        score += weights.status.get(volatile, 0.0)
    score += weights.stat_boost * sum(combatant.boosts.values())
    if combatant.has_item:
        score += weights.has_item
    return max(0.0, score)


def evaluate(
    snapshot: Snapshot,
    self_side: SideId,
    foe_side: SideId,
    weights: HeuristicWeights | None = None,
) -> float:
    """Score `snapshot` for `self_side`; higher is better.

    A declared winner is matched against the side's display name.
    Returns 0.0 instead of raising when the snapshot cannot be read.
    """
    weights = resolve_weights(weights)
    try:
        side = snapshot.side(self_side)
        if snapshot.winner and snapshot.winner == side.name:
            return weights.win
        score = weights.alive * side.combatants_left
        score += side_condition_penalty(side, weights)
        for combatant in side.combatants:
            score += combatant_score(combatant, weights)
        return float(score)
    except Exception as exc:
        logger.debug("evaluate failed for %s: %s", self_side, exc)
        return 0.0
