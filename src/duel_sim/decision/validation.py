"""Free-text command checks for the human side.

Runs before anything reaches the engine, so a rejected command never
changes battle state. Move ids are not checked here; the engine rejects
unknown or disabled moves itself.
"""

from __future__ import annotations

from duel_sim.domain.commands import (
    SWITCH_VERB,
    TEAM_SIZE,
    TEAM_VERB,
    ValidationResult,
    tokenize,
)
from duel_sim.domain.types import Phase, SideId
from duel_sim.engine.protocol import Snapshot

_TEAM_DIGITS = frozenset("123456")


def validate(raw_input: str, phase: Phase, side_id: SideId, snapshot: Snapshot) -> ValidationResult:
    if phase is Phase.WAIT:
        if str(raw_input or "").strip():
            return ValidationResult.fail("No valid moves available, input must be empty")
        return ValidationResult.ok()

    tokens = tokenize(raw_input or "")
    verb = tokens[0].lower() if tokens else ""

    if phase is Phase.TEAM:
        return _validate_team(verb, tokens)
    if verb == TEAM_VERB:
        return ValidationResult.fail("Unexpected 'team' command outside of team preview")
    if phase is Phase.SWITCH and verb != SWITCH_VERB:
        return ValidationResult.fail("Expected 'switch' command for force switch")
    if verb == SWITCH_VERB:
        return _validate_switch(tokens, side_id, snapshot)
    return ValidationResult.ok()


def _validate_team(verb: str, tokens: list[str]) -> ValidationResult:
    if verb != TEAM_VERB:
        return ValidationResult.fail("Expected 'team' command for team preview")
    if len(tokens) != 2:
        return ValidationResult.fail("Expected exactly one argument after 'team'")
    code = tokens[1]
    if len(code) != TEAM_SIZE or any(ch not in _TEAM_DIGITS for ch in code):
        return ValidationResult.fail("Team code must be exactly six digits from 1 to 6")
    if len(set(code)) != TEAM_SIZE:
        return ValidationResult.fail("Team code digits must be unique (no duplicates)")
    return ValidationResult.ok()


def _validate_switch(tokens: list[str], side_id: SideId, snapshot: Snapshot) -> ValidationResult:
    valid = [c.species for c in snapshot.side(side_id).bench]
    listing = ", ".join(valid) if valid else "none"
    if len(tokens) < 2:
        return ValidationResult.fail(f"Expected a combatant after 'switch'. Valid choices are: {listing}")
    wanted = " ".join(tokens[1:]).lower()
    if any(species.lower() == wanted for species in valid):
        return ValidationResult.ok()
    return ValidationResult.fail(f"Cannot switch to {' '.join(tokens[1:])}. Valid choices are: {listing}")
