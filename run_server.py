#!/usr/bin/env python3
"""Start the Duel Arena web server from a source checkout.

    python run_server.py [--port 8000] [--no-open]

The requested port is a starting point: when it is busy the next free one is
used. The browser opens on the chosen URL once uvicorn has had a moment to
bind.
"""
from __future__ import annotations

import argparse
import logging
import os
import socket
import sys
import threading
import webbrowser
from pathlib import Path

import uvicorn

SRC_DIR = Path(__file__).resolve().parent / "src"
DEFAULT_PORT = 3000
APP_PATH = "duel_arena.web.main:app"

logger = logging.getLogger("duel_arena.launcher")


def _ensure_src_on_path() -> None:
    src = str(SRC_DIR)
    if src not in sys.path:
        sys.path.insert(0, src)


def _local_url(host: str, port: int) -> str:
    # wildcard binds are reachable on loopback
    if host in ("0.0.0.0", "::"):
        host = "127.0.0.1"
    return f"http://{host}:{port}"


def default_port(environ: dict[str, str] | None = None) -> int:
    """$PORT when it holds an integer, else DEFAULT_PORT."""
    environ = os.environ if environ is None else environ
    raw = environ.get("PORT", "").strip()
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid PORT=%r", raw)
        return DEFAULT_PORT


def find_available_port(host: str, start_port: int, *, max_tries: int = 50) -> tuple[int, bool]:
    """First bindable port in ``start_port .. start_port + max_tries - 1``.

    The flag is True when a port other than ``start_port`` was chosen.
    """
    if max_tries < 1:
        raise ValueError("max_tries must be >= 1")

    failure: OSError | None = None
    for port in range(start_port, start_port + max_tries):
        try:
            with socket.create_server((host, port)):
                return port, port != start_port
        except OSError as exc:
            failure = exc

    raise RuntimeError(f"Ports {start_port}-{start_port + max_tries - 1} on {host} are all busy ({failure})")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="python run_server.py", description="Serve the Duel Arena API and web client.")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: %(default)s).")
    parser.add_argument("--port", type=int, default=default_port(), help="First port to try (default: $PORT or 3000).")
    parser.add_argument("--reload", action="store_true", help="Restart the server when sources change.")
    parser.add_argument("--no-open", action="store_true", help="Do not open a browser tab.")
    parser.add_argument("--log-level", default="info", help="Log level (default: %(default)s).")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        port, moved = find_available_port(args.host, args.port)
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 2

    url = _local_url(args.host, port)
    if moved:
        logger.info("Port %s is in use; serving on %s", args.port, url)
    else:
        logger.info("Serving on %s", url)

    if not args.no_open:
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()

    _ensure_src_on_path()
    try:
        uvicorn.run(APP_PATH, host=args.host, port=port, reload=args.reload, log_level=args.log_level.lower())
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
