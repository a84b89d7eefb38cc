from __future__ import annotations

import logging

from duel_sim.domain.types import Phase, RequestState, SideId, SwitchRequest
from duel_sim.engine.protocol import Snapshot

logger = logging.getLogger(__name__)

Phases = dict[SideId, Phase]


def _both(phase: Phase) -> Phases:
    return {SideId.P1: phase, SideId.P2: phase}


def classify(snapshot: Snapshot) -> Phases:
    """Kind of command each side must send at the current decision point."""
    if snapshot.ended:
        return _both(Phase.WAIT)

    state = snapshot.request_state
    if state is RequestState.TEAM_PREVIEW:
        return _both(Phase.TEAM)
    if state is RequestState.MOVE:
        return _both(Phase.MOVE)
    if state is RequestState.SWITCH:
        phases: Phases = {}
        for side_id in SideId:
            request = snapshot.request(side_id)
            waiting = not isinstance(request, SwitchRequest) or request.wait
            phases[side_id] = Phase.WAIT if waiting else Phase.SWITCH
        return phases

    logger.warning("Unrecognized request state %r; both sides wait", state)
    return _both(Phase.WAIT)
