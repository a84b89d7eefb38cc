"""The engine boundary seen by the decision layer."""

from __future__ import annotations

from typing import Protocol, Sequence

from duel_sim.domain.types import PendingRequest, RequestState, SideId, SideView


class Snapshot(Protocol):
    """Independently cloneable battle state at one decision point."""

    @property
    def ended(self) -> bool: ...

    @property
    def turn(self) -> int: ...

    @property
    def winner(self) -> str | None: ...

    @property
    def request_state(self) -> RequestState: ...

    @property
    def log(self) -> Sequence[str]: ...

    def side(self, side_id: SideId) -> SideView: ...

    def request(self, side_id: SideId) -> PendingRequest: ...

    def clone(self) -> "Snapshot": ...

    def apply_turn(self, p1_choice: str, p2_choice: str) -> None:
        """Advance exactly one decision point with both sides' commands."""
        ...
