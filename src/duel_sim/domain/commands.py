"""Command grammar.

    ""                  wait / nothing to do
    team DDDDDD         reveal order, a permutation of the six team slots
    move <moveId>       use a move of the active combatant
    switch <species>    bring in a benched combatant
"""

from __future__ import annotations

import re
from dataclasses import dataclass

TEAM_VERB = "team"
MOVE_VERB = "move"
SWITCH_VERB = "switch"

TEAM_SIZE = 6
DEFAULT_TEAM_ORDER = "123456"
TEAM_PLACEHOLDER = f"{TEAM_VERB} {DEFAULT_TEAM_ORDER}"

_ID_STRIP = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    msg: str

    @staticmethod
    def ok() -> "ValidationResult":
        return ValidationResult(is_valid=True, msg="Input validation passed")

    @staticmethod
    def fail(msg: str) -> "ValidationResult":
        return ValidationResult(is_valid=False, msg=msg)


def to_id(name: str) -> str:
    """'Stealth Rock' -> 'stealthrock'."""
    return _ID_STRIP.sub("", str(name).lower())


def tokenize(raw: str) -> list[str]:
    return str(raw).split()


def verb_of(command: str) -> str:
    tokens = tokenize(command)
    return tokens[0].lower() if tokens else ""


def is_switch(command: str) -> bool:
    return verb_of(command) == SWITCH_VERB


def move_command(move_id: str) -> str:
    return f"{MOVE_VERB} {move_id}"


def switch_command(species: str) -> str:
    return f"{SWITCH_VERB} {species}"
