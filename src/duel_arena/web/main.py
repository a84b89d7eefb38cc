from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, HTMLResponse

from duel_arena.web.api import router as api_router
from duel_arena.web.api import ws_router
from duel_arena.web.broadcast import ConnectionManager, ConnectThrottle, LogBroadcastHandler

WEB_DIR = Path(__file__).resolve().parent
INDEX_FILE = WEB_DIR / "static" / "index.html"
FORWARDED_LOGGERS = ("duel_sim", "duel_arena")


@asynccontextmanager
async def lifespan(app: FastAPI):
    handler = app.state.log_handler
    handler.bind(asyncio.get_running_loop())
    for name in FORWARDED_LOGGERS:
        logging.getLogger(name).addHandler(handler)
    try:
        yield
    finally:
        for name in FORWARDED_LOGGERS:
            logging.getLogger(name).removeHandler(handler)


def create_app() -> FastAPI:
    app = FastAPI(title="Duel Arena", lifespan=lifespan)
    app.state.connections = ConnectionManager()
    app.state.throttle = ConnectThrottle()
    app.state.log_handler = LogBroadcastHandler(app.state.connections)

    app.include_router(api_router)
    app.include_router(ws_router)

    @app.get("/{path:path}")
    async def serve_index(path: str):
        if path == "api" or path.startswith("api/"):
            raise HTTPException(status_code=404)
        if INDEX_FILE.exists():
            return FileResponse(INDEX_FILE)
        return HTMLResponse("<h1>Duel Arena</h1>\n<p>Client page missing; the JSON API is under /api.</p>", status_code=501)

    return app


app = create_app()
