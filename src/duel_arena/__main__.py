from __future__ import annotations

import argparse
import logging

from duel_arena.ui.app import DuelArenaApp


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m duel_arena", description="Play a battle in the terminal.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for teams and battle randomness.")
    parser.add_argument("--trainer", default=None, help="Opponent trainer (default: random).")
    parser.add_argument("--log-file", default=None, help="Write debug logs to this file.")
    args = parser.parse_args(argv)

    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=logging.DEBUG)
    DuelArenaApp(seed=args.seed, ai_trainer=args.trainer).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
