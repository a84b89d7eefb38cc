"""WebSocket fan-out, server log forwarding and connect throttling."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import defaultdict, deque
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)

CONNECT_WINDOW_S = 60.0
CONNECT_THRESHOLD = 6
THROTTLE_CLOSE_CODE = 1013


class ConnectionManager:
    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = defaultdict(set)

    def add(self, session_id: str, websocket: WebSocket) -> None:
        self._connections[session_id].add(websocket)

    def remove(self, session_id: str, websocket: WebSocket) -> None:
        sockets = self._connections.get(session_id)
        if sockets is None:
            return
        sockets.discard(websocket)
        if not sockets:
            del self._connections[session_id]

    @property
    def count(self) -> int:
        return sum(len(s) for s in self._connections.values())

    async def send_session(self, session_id: str, payload: dict[str, Any]) -> None:
        for websocket in list(self._connections.get(session_id, ())):
            await self._send(session_id, websocket, payload)

    async def broadcast(self, payload: dict[str, Any]) -> None:
        for session_id, sockets in list(self._connections.items()):
            for websocket in list(sockets):
                await self._send(session_id, websocket, payload)

    async def _send(self, session_id: str, websocket: WebSocket, payload: dict[str, Any]) -> None:
        try:
            await websocket.send_json(payload)
        except (RuntimeError, OSError) as exc:
            # Below the forwarding level so a dead socket cannot feed itself log records.
            logger.debug("dropping websocket after failed send: %s", exc)
            self.remove(session_id, websocket)


class ConnectThrottle:
    """Sliding-window connect counter per client host."""

    def __init__(self, window_s: float = CONNECT_WINDOW_S, threshold: int = CONNECT_THRESHOLD) -> None:
        self.window_s = window_s
        self.threshold = threshold
        self._attempts: dict[str, deque[float]] = defaultdict(deque)

    def allow(self, host: str, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        self._prune(now)
        attempts = self._attempts[host]
        attempts.append(now)
        return len(attempts) <= self.threshold

    def _prune(self, now: float) -> None:
        for host in list(self._attempts):
            attempts = self._attempts[host]
            while attempts and now - attempts[0] > self.window_s:
                attempts.popleft()
            if not attempts:
                del self._attempts[host]

    @property
    def tracked_hosts(self) -> int:
        return len(self._attempts)


class LogBroadcastHandler(logging.Handler):
    """Forwards log records to every connected client as ``server-log`` messages."""

    def __init__(self, manager: ConnectionManager, level: int = logging.INFO) -> None:
        super().__init__(level)
        self.manager = manager
        self._loop: asyncio.AbstractEventLoop | None = None
        self._emitting = False

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def emit(self, record: logging.LogRecord) -> None:
        loop = self._loop
        if self._emitting or loop is None or loop.is_closed() or not self.manager.count:
            return
        self._emitting = True
        try:
            payload = {"type": "server-log", "level": record.levelname.lower(), "msg": self.format(record)}
            asyncio.run_coroutine_threadsafe(self.manager.broadcast(payload), loop)
        except Exception:
            self.handleError(record)
        finally:
            self._emitting = False
