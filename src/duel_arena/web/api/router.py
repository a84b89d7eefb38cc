from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request, Response, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from duel_arena.web.api import mappers, schemas
from duel_arena.web.broadcast import THROTTLE_CLOSE_CODE
from duel_arena.web.session import ArenaSession, get_or_create_session, reset_session
from duel_sim.decision.phase import classify
from duel_sim.sim.match import AI, HUMAN
from duel_sim.sim.turns import submit_choice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")
ws_router = APIRouter()


def _state_message(session: ArenaSession) -> dict:
    state = mappers.build_state_response(session.match, HUMAN.id)
    return {"type": "state", "data": state.model_dump(by_alias=True)}


def _build_response(
    session: ArenaSession, *, ok: bool, message: str | None = None, kind: str = "info"
) -> schemas.ApiResponse:
    payload = schemas.ApiResponse(ok=ok, message=message, message_kind=kind)
    payload.state = mappers.build_state_response(session.match, HUMAN.id)
    return payload


async def _apply_choice(session: ArenaSession, choice: str) -> schemas.ApiResponse:
    result = await run_in_threadpool(
        submit_choice,
        session.battle,
        choice,
        human=HUMAN.id,
        ai=AI.id,
        rng=session.rng,
        weights=session.match.weights,
    )
    if result.ok:
        logger.info("Receiving choices: %r, %r", choice, result.ai_command)
    else:
        logger.info("Player 1 input invalid: %s", result.message)
    return _build_response(session, ok=result.ok, message=result.message, kind=result.message_kind or "info")


async def _restart(session: ArenaSession) -> schemas.ApiResponse:
    await run_in_threadpool(reset_session, session)
    return _build_response(session, ok=True, message=f"New battle against {session.match.ai_trainer}", kind="accent")


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/state", response_model=schemas.BattleStateResponse)
async def get_state(request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    async with session.lock:
        data = mappers.build_state_response(session.match, HUMAN.id)
    response.set_cookie("session_id", session_id, httponly=True)
    return data


@router.post("/choice", response_model=schemas.ApiResponse)
async def post_choice(payload: schemas.ChoiceRequest, request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    response.set_cookie("session_id", session_id, httponly=True)
    async with session.lock:
        result = await _apply_choice(session, payload.choice)
    await request.app.state.connections.send_session(session_id, _state_message(session))
    return result


@router.post("/restart", response_model=schemas.ApiResponse)
async def post_restart(request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    response.set_cookie("session_id", session_id, httponly=True)
    async with session.lock:
        result = await _restart(session)
    await request.app.state.connections.send_session(session_id, _state_message(session))
    return result


def _debug_dump(session: ArenaSession) -> None:
    battle = session.battle
    logger.info("Start debug log")
    logger.info("Battle requestState: %r", battle.request_state.value)
    logger.info("Requested actions: %s", {k.value: v.value for k, v in classify(battle).items()})
    for side_id in (HUMAN.id, AI.id):
        logger.info("Request %s: %s", side_id.value, battle.request(side_id))
    logger.info("End debug log")


@ws_router.websocket("/ws")
async def battle_socket(websocket: WebSocket):
    app = websocket.app
    host = websocket.client.host if websocket.client else "unknown"
    await websocket.accept()
    if not app.state.throttle.allow(host):
        logger.warning("WS: too many recent connections from %s - throttling", host)
        await websocket.close(code=THROTTLE_CLOSE_CODE, reason="throttled")
        return

    session_id, session = get_or_create_session(websocket.cookies.get("session_id"))
    connections = app.state.connections
    connections.add(session_id, websocket)
    logger.info("WS: client connected from %s", host)
    try:
        async with session.lock:
            await websocket.send_json(_state_message(session))
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
                kind = message.get("type")
            except (ValueError, AttributeError):
                logger.warning("WS: invalid message payload from %s", host)
                await websocket.send_json({"type": "error", "error": "invalid message"})
                continue

            async with session.lock:
                if kind == "choice":
                    result = await _apply_choice(session, str(message.get("choice") or ""))
                    if not result.ok:
                        await websocket.send_json({"type": "error", "error": result.message})
                elif kind == "restart":
                    await _restart(session)
                elif kind == "debug":
                    _debug_dump(session)
                    continue
                else:
                    logger.warning("WS: unknown message type %r", kind)
                    await websocket.send_json({"type": "error", "error": f"unknown message type {kind!r}"})
                    continue
                state = _state_message(session)
            await connections.send_session(session_id, state)
    except WebSocketDisconnect as exc:
        logger.info("WS: client closed %s", exc.code)
    finally:
        connections.remove(session_id, websocket)
