from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from random import Random

from duel_sim.sim.match import Match, start_match


@dataclass
class ArenaSession:
    match: Match
    rng: Random = field(default_factory=Random)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def battle(self):
        return self.match.battle

    def reset(self, match: Match) -> None:
        self.match = match


_sessions: dict[str, ArenaSession] = {}


def reset_session(session: ArenaSession) -> None:
    session.reset(start_match())


def get_or_create_session(session_id: str | None) -> tuple[str, ArenaSession]:
    if session_id and session_id in _sessions:
        return session_id, _sessions[session_id]

    new_id = str(uuid.uuid4())
    session = ArenaSession(match=start_match())
    _sessions[new_id] = session
    return new_id, session


def get_session(session_id: str) -> ArenaSession | None:
    return _sessions.get(session_id)
