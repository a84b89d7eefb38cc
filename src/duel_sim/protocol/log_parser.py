"""Battle protocol log -> display entries.

Lines look like ``|move|p1a: Umbreon|Wish|p1a: Umbreon``. Each is turned
into a `LogEntry` whose header is a message key (see
`duel_arena.render.format`) and whose args fill that message. Lines that are
not understood pass through with an empty header and the raw line as the
only argument.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from duel_sim.domain.events import LogEntry

logger = logging.getLogger(__name__)

TURN_MARKER = "|t:|"
OPPOSING_PREFIX = "The opposing "

IGNORED_HEADERS = frozenset(
    {
        "",
        "t:",
        "gametype",
        "player",
        "teamsize",
        "gen",
        "clearpoke",
        "poke",
        "teampreview",
        "start",
        "split",
        "upkeep",
        "debug",
        "-nothing",
    }
)

STATUS_NAMES = {
    "brn": "BURN",
    "psn": "POISON",
    "tox": "TOXIC",
    "slp": "SLEEP",
    "par": "PARALYSIS",
    "frz": "FROZEN",
}

STAT_NAMES = {
    "atk": "Attack",
    "def": "Defense",
    "spa": "Special Attack",
    "spd": "Special Defense",
    "spe": "Speed",
    "accuracy": "Accuracy",
    "evasion": "Evasion",
}

BOOST_HEADERS = {0: "BATTLE_BOOST_STAT_CAPPED", 1: "BATTLE_BOOST_STAT_NORMAL", 2: "BATTLE_BOOST_STAT_SHARPLY"}
UNBOOST_HEADERS = {0: "BATTLE_UNBOOST_STAT_CAPPED", 1: "BATTLE_UNBOOST_STAT_NORMAL", 2: "BATTLE_UNBOOST_STAT_HARSHLY"}

CANT_HEADERS = {"slp": "BATTLE_CANT_SLEEP", "frz": "BATTLE_CANT_FROZEN", "par": "BATTLE_CANT_PARALYSIS"}
START_HEADERS = {
    "Yawn": "BATTLE_APPLY_YAWN",
    "Leech Seed": "BATTLE_APPLY_LEECH_SEED",
    "Substitute": "BATTLE_APPLY_SUBSTITUTE",
    "Mean Look": "BATTLE_APPLY_TRAPPED",
}

NO_ARG_HEADERS = {
    "-resisted": "BATTLE_RESISTED_MOVE",
    "-supereffective": "BATTLE_SUPER_EFFECTIVE_MOVE",
    "-crit": "BATTLE_CRIT_MOVE",
    "-fail": "BATTLE_FAIL_MOVE",
    "fail": "BATTLE_FAIL_MOVE",
    "-notarget": "BATTLE_FAIL_MOVE",
    "tie": "BATTLE_TIE",
}


def filter_redundant_logs(lines: Iterable[str]) -> list[str]:
    """Drop lines identical to the line right before them."""
    out: list[str] = []
    last: str | None = None
    for line in lines:
        if line == last:
            continue
        out.append(line)
        last = line
    return out


def _owner(position: str, player: str, capitalize: bool = True) -> tuple[str, str]:
    """``"p2a: Umbreon"`` seen by p1 -> ``("The opposing ", "Umbreon")``."""
    side, _, name = position.partition(": ")
    if side.strip().startswith(player):
        return "", name.strip()
    prefix = OPPOSING_PREFIX if capitalize else OPPOSING_PREFIX.lower()
    return prefix, name.strip()


def _raw(line: str) -> LogEntry:
    return LogEntry(header="", args=(line,))


def _source(parts: Sequence[str]) -> str:
    for part in parts:
        if part.startswith("[from] "):
            return part[len("[from] ") :].removeprefix("item: ").removeprefix("move: ")
    return ""


def parse_log_line(line: str, player: str = "p1") -> LogEntry | None:
    """Translate one protocol line; None for lines that are not shown."""
    try:
        if not line.startswith("|"):
            return None
        parts = line[1:].split("|")
        header = parts[0]
        if header in IGNORED_HEADERS:
            return None
        if header in NO_ARG_HEADERS:
            return LogEntry(NO_ARG_HEADERS[header])

        if header == "turn":
            return LogEntry("BATTLE_TURN", (parts[1],))
        if header == "win":
            return LogEntry("BATTLE_WIN", (parts[1],))
        if header == "move":
            prefix, name = _owner(parts[1], player)
            return LogEntry("BATTLE_USE_MOVE", (prefix, name, parts[2]))
        if header == "switch":
            side, _, name = parts[1].partition(": ")
            return LogEntry("BATTLE_SWITCH_POKEMON", ("P1" if side.startswith("p1") else "P2", name.strip()))
        if header == "-status":
            prefix, name = _owner(parts[1], player)
            return LogEntry(f"BATTLE_APPLY_{STATUS_NAMES.get(parts[2], parts[2])}", (prefix, name))
        if header == "-curestatus":
            prefix, name = _owner(parts[1], player)
            return LogEntry(f"BATTLE_CURE_{STATUS_NAMES.get(parts[2], parts[2])}", (prefix, name))
        if header in ("-boost", "-unboost"):
            prefix, name = _owner(parts[1], player)
            stat = STAT_NAMES.get(parts[2], parts[2])
            if parts[2] not in STAT_NAMES:
                logger.debug("unknown stat name: %s", parts[2])
            amount = int(parts[3])
            if header == "-boost":
                key = BOOST_HEADERS.get(amount, "BATTLE_BOOST_STAT_DRASTICALLY")
            else:
                key = UNBOOST_HEADERS.get(amount, "BATTLE_UNBOOST_STAT_SEVERELY")
            return LogEntry(key, (prefix, name, stat))
        if header == "-immune":
            prefix, name = _owner(parts[1], player, capitalize=False)
            return LogEntry("BATTLE_IMMUNE_MOVE", (prefix, name))
        if header == "-miss":
            prefix, name = _owner(parts[1], player)
            return LogEntry("BATTLE_MISS_MOVE", (prefix, name))
        if header == "-start":
            prefix, name = _owner(parts[1], player)
            effect = parts[2].split(": ")[-1]
            if effect in START_HEADERS:
                return LogEntry(START_HEADERS[effect], (prefix, name))
            logger.debug("unhandled start effect: %s", effect)
            return _raw(line)
        if header == "-sidestart":
            side = parts[1].partition(": ")[0]
            effect = parts[2].split(": ")[-1]
            owner = "your" if side.startswith(player) else "the opposing"
            return LogEntry("BATTLE_SET_HAZARD", (effect, owner))
        if header in ("-damage", "-heal"):
            prefix, name = _owner(parts[1], player)
            source = _source(parts[3:])
            if "[silent]" in parts[3:]:
                return None
            if header == "-heal":
                return LogEntry("BATTLE_HEAL_FROM" if source else "BATTLE_HEAL", (prefix, name, source))
            if source:
                return LogEntry("BATTLE_HURT_FROM", (prefix, name, source))
            return None
        if header == "-activate":
            prefix, name = _owner(parts[1], player)
            effect = parts[2].split(": ")[-1]
            if effect == "Substitute":
                return LogEntry("BATTLE_SUBSTITUTE_HIT", (prefix, name))
            return LogEntry("BATTLE_TRAPPED_BY", (prefix, name, effect))
        if header == "-end":
            if "[silent]" in parts[3:]:
                return None
            prefix, name = _owner(parts[1], player)
            if parts[2] == "Substitute":
                return LogEntry("BATTLE_SUBSTITUTE_FADE", (prefix, name))
            if parts[2] == "partiallytrapped":
                return LogEntry("BATTLE_FREED", (prefix, name))
            return _raw(line)
        if header == "-enditem":
            prefix, name = _owner(parts[1], player)
            return LogEntry("BATTLE_EAT_ITEM", (prefix, name, parts[2]))
        if header == "faint":
            prefix, name = _owner(parts[1], player)
            return LogEntry("BATTLE_FAINT_POKEMON", (prefix, name))
        if header == "cant":
            prefix, name = _owner(parts[1], player)
            if parts[2] in CANT_HEADERS:
                return LogEntry(CANT_HEADERS[parts[2]], (prefix, name))
            return _raw(line)
        return _raw(line)
    except (IndexError, ValueError) as exc:
        logger.warning("Error parsing log line %r: %s", line, exc)
        return None


def get_recent_logs(log: Sequence[str], turns: int, player: str = "p1") -> list[LogEntry]:
    """Entries for the last `turns` decision points, oldest first.

    Decision points are delimited by ``|t:|`` markers.
    """
    seen = 0
    recent: list[LogEntry | None] = []
    lines = filter_redundant_logs(log)
    for line in reversed(lines):
        recent.append(parse_log_line(line, player))
        if line.startswith(TURN_MARKER):
            seen += 1
            if seen >= turns:
                break
    recent.reverse()
    return [entry for entry in recent if entry is not None]
