"""English text for parsed log entries, plus small display helpers."""

from __future__ import annotations

from typing import Iterable

from duel_sim.domain.events import LogEntry
from duel_sim.domain.types import Combatant

# {0}, {1}, ... are the entry args in order. Owner prefixes ("The opposing ")
# come first and run straight into the name.
MESSAGES: dict[str, str] = {
    "BATTLE_TURN": "== Turn {0} ==",
    "BATTLE_WIN": "{0} won the battle!",
    "BATTLE_TIE": "The battle ended in a tie!",
    "BATTLE_USE_MOVE": "{0}{1} used {2}!",
    "BATTLE_SWITCH_POKEMON": "{0} sent out {1}!",
    "BATTLE_APPLY_BURN": "{0}{1} was burned!",
    "BATTLE_APPLY_POISON": "{0}{1} was poisoned!",
    "BATTLE_APPLY_TOXIC": "{0}{1} was badly poisoned!",
    "BATTLE_APPLY_SLEEP": "{0}{1} fell asleep!",
    "BATTLE_APPLY_PARALYSIS": "{0}{1} is paralyzed! It may be unable to move!",
    "BATTLE_APPLY_FROZEN": "{0}{1} was frozen solid!",
    "BATTLE_CURE_BURN": "{0}{1}'s burn was healed.",
    "BATTLE_CURE_POISON": "{0}{1} was cured of its poisoning.",
    "BATTLE_CURE_TOXIC": "{0}{1} was cured of its poisoning.",
    "BATTLE_CURE_SLEEP": "{0}{1} woke up!",
    "BATTLE_CURE_PARALYSIS": "{0}{1} was cured of paralysis.",
    "BATTLE_CURE_FROZEN": "{0}{1} thawed out!",
    "BATTLE_BOOST_STAT_NORMAL": "{0}{1}'s {2} rose!",
    "BATTLE_BOOST_STAT_SHARPLY": "{0}{1}'s {2} rose sharply!",
    "BATTLE_BOOST_STAT_DRASTICALLY": "{0}{1}'s {2} rose drastically!",
    "BATTLE_BOOST_STAT_CAPPED": "{0}{1}'s {2} won't go any higher!",
    "BATTLE_UNBOOST_STAT_NORMAL": "{0}{1}'s {2} fell!",
    "BATTLE_UNBOOST_STAT_HARSHLY": "{0}{1}'s {2} harshly fell!",
    "BATTLE_UNBOOST_STAT_SEVERELY": "{0}{1}'s {2} severely fell!",
    "BATTLE_UNBOOST_STAT_CAPPED": "{0}{1}'s {2} won't go any lower!",
    "BATTLE_RESISTED_MOVE": "It's not very effective...",
    "BATTLE_SUPER_EFFECTIVE_MOVE": "It's super effective!",
    "BATTLE_CRIT_MOVE": "A critical hit!",
    "BATTLE_IMMUNE_MOVE": "It doesn't affect {0}{1}...",
    "BATTLE_FAIL_MOVE": "But it failed!",
    "BATTLE_MISS_MOVE": "{0}{1}'s attack missed!",
    "BATTLE_APPLY_YAWN": "{0}{1} grew drowsy!",
    "BATTLE_APPLY_LEECH_SEED": "{0}{1} was seeded!",
    "BATTLE_APPLY_SUBSTITUTE": "{0}{1} put in a substitute!",
    "BATTLE_APPLY_TRAPPED": "{0}{1} can no longer escape!",
    "BATTLE_SUBSTITUTE_HIT": "The substitute took damage for {0}{1}!",
    "BATTLE_SUBSTITUTE_FADE": "{0}{1}'s substitute faded!",
    "BATTLE_TRAPPED_BY": "{0}{1} was trapped by {2}!",
    "BATTLE_FREED": "{0}{1} was freed!",
    "BATTLE_SET_HAZARD": "{0} was set around {1} team!",
    "BATTLE_HURT_FROM": "{0}{1} was hurt by {2}!",
    "BATTLE_HEAL": "{0}{1} had its HP restored.",
    "BATTLE_HEAL_FROM": "{0}{1} restored HP using {2}!",
    "BATTLE_EAT_ITEM": "{0}{1} ate its {2}!",
    "BATTLE_FAINT_POKEMON": "{0}{1} fainted!",
    "BATTLE_CANT_SLEEP": "{0}{1} is fast asleep.",
    "BATTLE_CANT_FROZEN": "{0}{1} is frozen solid!",
    "BATTLE_CANT_PARALYSIS": "{0}{1} is paralyzed! It can't move!",
}

STATUS_LABELS = {"brn": "BRN", "par": "PAR", "psn": "PSN", "tox": "TOX", "slp": "SLP", "frz": "FRZ"}


def format_entry(entry: LogEntry) -> str:
    if not entry.header:
        return entry.args[0] if entry.args else ""
    template = MESSAGES.get(entry.header)
    if template is None:
        return " ".join([entry.header, *entry.args])
    try:
        return template.format(*entry.args)
    except IndexError:
        return " ".join([entry.header, *entry.args])


def format_entries(entries: Iterable[LogEntry]) -> list[str]:
    return [format_entry(e) for e in entries]


def hp_percent(combatant: Combatant) -> int:
    if combatant.max_hp <= 0:
        return 0
    pct = round(100 * combatant.hp / combatant.max_hp)
    # a combatant that is still standing never shows 0%
    if combatant.hp > 0:
        return max(1, pct)
    return 0


def hp_bar(combatant: Combatant, width: int = 20) -> str:
    filled = int(width * max(0, combatant.hp) / max(1, combatant.max_hp))
    if combatant.hp > 0:
        filled = max(1, filled)
    return "[" + ("█" * filled) + (" " * (width - filled)) + "]"


def status_label(combatant: Combatant) -> str:
    if combatant.fainted:
        return "FNT"
    if combatant.status is None:
        return ""
    return STATUS_LABELS.get(combatant.status, combatant.status.upper())
