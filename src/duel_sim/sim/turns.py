"""Turn resolution: validate, decide, then apply both commands together."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from random import Random
from typing import Callable

from duel_sim.decision.phase import Phases, classify
from duel_sim.decision.search import decide, fallback_choice
from duel_sim.decision.validation import validate
from duel_sim.domain.types import Phase, SideId
from duel_sim.engine.battle import Battle, ChoiceError
from duel_sim.engine.protocol import Snapshot
from duel_sim.rules.ruleset import HeuristicWeights

logger = logging.getLogger(__name__)

DEFAULT_AI_RETRIES = 5

Policy = Callable[[Snapshot, SideId, Random], str]


@dataclass()
class TurnResult:
    ok: bool
    message: str | None
    message_kind: str | None
    phases: Phases
    ai_commands: list[str] = field(default_factory=list)

    @property
    def ai_command(self) -> str | None:
        return self.ai_commands[0] if self.ai_commands else None


def _ordered(side_id: SideId, own: str, other: str) -> tuple[str, str]:
    if side_id is SideId.P1:
        return own, other
    return other, own


def _summary(battle: Battle) -> tuple[str, str]:
    if battle.ended:
        if battle.winner:
            return f"{battle.winner} won the battle!", "accent"
        return "The battle ended in a tie.", "accent"
    return f"Turn {battle.turn}", "info"


def _ai_choice(
    battle: Battle,
    ai: SideId,
    human: SideId,
    phase: Phase,
    rng: Random,
    retries: int,
    weights: HeuristicWeights | None = None,
) -> tuple[str, int]:
    command = decide(battle, ai, human, rng=rng, weights=weights)
    check = validate(command, phase, ai, battle)
    if check.is_valid:
        return command, retries
    logger.warning("AI produced an invalid command %r (%s); using fallback", command, check.msg)
    return fallback_choice(battle, ai, rng), retries - 1


def _apply_with_ai(
    battle: Battle,
    human: SideId,
    human_cmd: str,
    ai: SideId,
    ai_cmd: str,
    rng: Random,
    retries: int,
) -> tuple[str, int]:
    """Apply a joint command; an AI command the engine refuses is replaced while retries last."""
    while True:
        try:
            battle.apply_turn(*_ordered(human, human_cmd, ai_cmd))
            return ai_cmd, retries
        except ChoiceError as exc:
            if exc.side is not ai or retries <= 0:
                raise
            logger.warning("Engine rejected AI command %r: %s", ai_cmd, exc)
            retries -= 1
            ai_cmd = fallback_choice(battle, ai, rng)


def submit_choice(
    battle: Battle,
    human_input: str,
    *,
    human: SideId = SideId.P1,
    ai: SideId = SideId.P2,
    rng: Random | None = None,
    ai_retries: int = DEFAULT_AI_RETRIES,
    weights: HeuristicWeights | None = None,
) -> TurnResult:
    """Resolve one human command against the scripted side.

    Nothing is applied when the human command is rejected. After the joint
    turn, the AI keeps acting alone while the human has nothing to do (for
    example after its own combatant fainted), bounded by `ai_retries`.
    `weights` defaults to the packaged ruleset.
    """
    rng = rng or Random()

    def fail(message: str) -> TurnResult:
        return TurnResult(ok=False, message=message, message_kind="error", phases=classify(battle))

    if battle.ended:
        return fail("The battle is over. Restart to play again.")

    human_cmd = str(human_input or "").strip()
    phases = classify(battle)
    check = validate(human_cmd, phases[human], human, battle)
    if not check.is_valid:
        return fail(check.msg)

    retries = ai_retries
    ai_cmd, retries = _ai_choice(battle, ai, human, phases[ai], rng, retries, weights)
    try:
        ai_cmd, retries = _apply_with_ai(battle, human, human_cmd, ai, ai_cmd, rng, retries)
    except ChoiceError as exc:
        return fail(str(exc))
    ai_commands = [ai_cmd]

    while not battle.ended and retries > 0:
        phases = classify(battle)
        if phases[human] is not Phase.WAIT or phases[ai] is Phase.WAIT:
            break
        ai_cmd, retries = _ai_choice(battle, ai, human, phases[ai], rng, retries, weights)
        try:
            ai_cmd, retries = _apply_with_ai(battle, human, "", ai, ai_cmd, rng, retries)
        except ChoiceError as exc:
            logger.warning("AI could not act alone: %s", exc)
            break
        ai_commands.append(ai_cmd)

    message, kind = _summary(battle)
    return TurnResult(ok=True, message=message, message_kind=kind, phases=classify(battle), ai_commands=ai_commands)


def resolve_turn(battle: Battle, p1_cmd: str, p2_cmd: str) -> TurnResult:
    """Validate both commands, then apply them jointly."""
    phases = classify(battle)

    def fail(message: str) -> TurnResult:
        return TurnResult(ok=False, message=message, message_kind="error", phases=phases)

    if battle.ended:
        return fail("The battle is over.")
    for side_id, command in ((SideId.P1, p1_cmd), (SideId.P2, p2_cmd)):
        check = validate(command, phases[side_id], side_id, battle)
        if not check.is_valid:
            return fail(f"{side_id.value}: {check.msg}")
    try:
        battle.apply_turn(p1_cmd, p2_cmd)
    except ChoiceError as exc:
        return fail(str(exc))
    message, kind = _summary(battle)
    return TurnResult(ok=True, message=message, message_kind=kind, phases=classify(battle))


def search_policy(
    snapshot: Snapshot, side_id: SideId, rng: Random, weights: HeuristicWeights | None = None
) -> str:
    return decide(snapshot, side_id, side_id.foe, rng=rng, weights=weights)


def play_out(
    battle: Battle,
    p1: Policy | None = None,
    p2: Policy | None = None,
    *,
    rng: Random | None = None,
    weights: HeuristicWeights | None = None,
    max_decisions: int = 500,
) -> str | None:
    """Drive a battle with two policies until it ends; returns the winner.

    A missing policy plays the lookahead search with `weights`.
    """
    rng = rng or Random()
    p1 = p1 or partial(search_policy, weights=weights)
    p2 = p2 or partial(search_policy, weights=weights)
    for _ in range(max_decisions):
        if battle.ended:
            break
        result = resolve_turn(battle, p1(battle, SideId.P1, rng), p2(battle, SideId.P2, rng))
        if not result.ok:
            logger.warning("self-play command rejected (%s); using fallback", result.message)
            result = resolve_turn(
                battle,
                fallback_choice(battle, SideId.P1, rng),
                fallback_choice(battle, SideId.P2, rng),
            )
            if not result.ok:
                raise RuntimeError(f"self-play stalled: {result.message}")
    return battle.winner
