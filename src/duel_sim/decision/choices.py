"""Legal command enumeration.

Output order follows the engine: moves in slot order, then bench combatants
in team order. Nothing here is random.
"""

from __future__ import annotations

from duel_sim.domain.commands import TEAM_PLACEHOLDER, move_command, switch_command
from duel_sim.domain.types import MoveRequest, SideId, SwitchRequest, TeamRequest, WaitRequest
from duel_sim.engine.protocol import Snapshot


def bench_switches(snapshot: Snapshot, side_id: SideId) -> list[str]:
    return [switch_command(c.species) for c in snapshot.side(side_id).bench]


def enumerate_choices(snapshot: Snapshot, side_id: SideId) -> list[str]:
    if snapshot.ended:
        return [""]
    request = snapshot.request(side_id)
    if isinstance(request, WaitRequest):
        return [""]
    if isinstance(request, TeamRequest):
        return [TEAM_PLACEHOLDER]
    if isinstance(request, SwitchRequest):
        if request.wait:
            return [""]
        return bench_switches(snapshot, side_id)
    if isinstance(request, MoveRequest):
        choices = [move_command(slot.move_id) for slot in request.moves if not slot.disabled]
        if not request.trapped:
            choices.extend(bench_switches(snapshot, side_id))
        return choices
    return [""]


def enumerate_all(snapshot: Snapshot) -> dict[SideId, list[str]]:
    return {side_id: enumerate_choices(snapshot, side_id) for side_id in SideId}

