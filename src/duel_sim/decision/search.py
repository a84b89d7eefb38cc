"""One-ply lookahead for the scripted side.

Every (ai, human) command pair is played out on its own clone of the
snapshot. Each AI command is scored by its average advantage over all human
replies, and the final choice is sampled from weights `SHARPEN_BASE ** adv`,
so weaker options keep a small nonzero chance.
"""

from __future__ import annotations

import logging
import sys
from random import Random
from typing import Sequence

from duel_sim.decision.choices import enumerate_choices
from duel_sim.decision.heuristics import evaluate, resolve_weights
from duel_sim.domain.commands import TEAM_PLACEHOLDER, is_switch, move_command, switch_command
from duel_sim.domain.types import MoveRequest, SideId, SwitchRequest, TeamRequest
from duel_sim.engine.protocol import Snapshot
from duel_sim.rules.ruleset import HeuristicWeights
from duel_sim.sim.rng import pick_random, weighted_pick

logger = logging.getLogger(__name__)

SWITCH_SCALE = 0.2
SWITCH_BIAS = -0.7
SHARPEN_BASE = 3.0


def _scale(command: str) -> float:
    return SWITCH_SCALE if is_switch(command) else 1.0


def _bias(command: str) -> float:
    return SWITCH_BIAS if is_switch(command) else 0.0


def _ordered(ai_side: SideId, ai_cmd: str, human_cmd: str) -> tuple[str, str]:
    """Place the two commands into (p1, p2) order."""
    if ai_side is SideId.P1:
        return ai_cmd, human_cmd
    return human_cmd, ai_cmd


def score_choices(
    snapshot: Snapshot,
    ai_side: SideId,
    human_side: SideId,
    ai_cmds: Sequence[str],
    human_cmds: Sequence[str],
    weights: HeuristicWeights | None = None,
) -> dict[str, float]:
    """Average advantage of each AI command over every human reply."""
    weights = resolve_weights(weights)
    baseline_ai = evaluate(snapshot, ai_side, human_side, weights)
    baseline_human = evaluate(snapshot, human_side, ai_side, weights)

    advantages: dict[str, float] = {}
    for ai_cmd in ai_cmds:
        total = 0.0
        for human_cmd in human_cmds:
            branch = snapshot.clone()
            branch.apply_turn(*_ordered(ai_side, ai_cmd, human_cmd))
            post_ai = evaluate(branch, ai_side, human_side, weights)
            post_human = evaluate(branch, human_side, ai_side, weights)
            human_delta = (post_human - baseline_human) * _scale(human_cmd)
            ai_delta = (post_ai - baseline_ai) * _scale(ai_cmd) + _bias(ai_cmd)
            total += ai_delta - human_delta
        advantages[ai_cmd] = total / len(human_cmds)
    return advantages


def policy_weights(advantages: dict[str, float]) -> dict[str, float]:
    # Shifted by the best advantage; proportions match SHARPEN_BASE ** adv.
    best = max(advantages.values())
    return {
        command: max(SHARPEN_BASE ** (advantage - best), sys.float_info.min)
        for command, advantage in advantages.items()
    }


def fallback_choice(snapshot: Snapshot, side_id: SideId, rng: Random | None = None) -> str:
    """Uniform pick: a usable move, else a bench switch, else nothing."""
    request = snapshot.request(side_id)
    if isinstance(request, TeamRequest):
        return TEAM_PLACEHOLDER
    switches = [switch_command(c.species) for c in snapshot.side(side_id).bench]
    if isinstance(request, MoveRequest):
        moves = [move_command(slot.move_id) for slot in request.moves if not slot.disabled]
        if moves:
            return pick_random(moves, rng)
        if request.trapped:
            return ""
        return pick_random(switches, rng) or ""
    if isinstance(request, SwitchRequest) and not request.wait:
        return pick_random(switches, rng) or ""
    return ""


def decide(
    snapshot: Snapshot,
    ai_side: SideId,
    human_side: SideId,
    *,
    rng: Random | None = None,
    weights: HeuristicWeights | None = None,
) -> str:
    rng = rng or Random()
    ai_cmds = enumerate_choices(snapshot, ai_side)
    if ai_cmds == [""]:
        return ""
    if not ai_cmds:
        return fallback_choice(snapshot, ai_side, rng)

    try:
        human_cmds = enumerate_choices(snapshot, human_side) or [""]
        advantages = score_choices(snapshot, ai_side, human_side, ai_cmds, human_cmds, weights)
    except Exception:
        logger.exception("Lookahead failed for %s; using fallback policy", ai_side.value)
        return fallback_choice(snapshot, ai_side, rng)

    logger.debug("advantages for %s: %s", ai_side.value, advantages)
    choice = weighted_pick(list(policy_weights(advantages).items()), rng)
    return choice if choice is not None else fallback_choice(snapshot, ai_side, rng)
