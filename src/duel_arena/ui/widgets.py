from __future__ import annotations

from textual.widgets import Static

from duel_arena.render.format import hp_bar, hp_percent, status_label
from duel_sim.domain.types import Combatant, MoveRequest, SideId
from duel_sim.engine.battle import Battle

STATUS_COLORS = {
    "BRN": "#ff7b3b",
    "PAR": "#f0d429",
    "PSN": "#c56cf0",
    "TOX": "#a040d0",
    "SLP": "#a7adb5",
    "FRZ": "#7fd4ff",
    "FNT": "#666666",
}


def _hp_color(pct: int) -> str:
    if pct > 50:
        return "#4ade80"
    if pct > 20:
        return "#f0b429"
    return "#ff3b3b"


def _combatant_line(combatant: Combatant, *, reveal: bool) -> str:
    pct = hp_percent(combatant)
    marker = ">" if combatant.active else " "
    label = status_label(combatant)
    status = f" [{STATUS_COLORS.get(label, '#e5e7eb')}]{label}[/]" if label else ""
    line = f"{marker} {combatant.species:<12} [{_hp_color(pct)}]{hp_bar(combatant, 16)}[/] {pct:>3}%{status}"
    if reveal and combatant.item:
        line += f"  @ {combatant.item}"
    return line


class SidePanel(Static):
    """Roster for one side; the opposing side hides held items."""

    def __init__(self, battle: Battle, side_id: SideId, *, reveal: bool, **kwargs) -> None:
        super().__init__(markup=True, **kwargs)
        self.battle = battle
        self.side_id = side_id
        self.reveal = reveal

    def render(self) -> str:
        side = self.battle.side(self.side_id)
        title = "YOUR TEAM" if self.reveal else "OPPONENT"
        lines = [f"[bold]{title}[/] ({side.name})"]
        lines.extend(_combatant_line(c, reveal=self.reveal) for c in side.combatants)
        hazards = [f"{name} x{count}" if count > 1 else name for name, count in side.side_conditions.items()]
        if hazards:
            lines.append(f"[#f0b429]HAZARDS:[/] {', '.join(hazards)}")
        return "\n".join(lines)


class MovesPanel(Static):
    def __init__(self, battle: Battle, side_id: SideId, **kwargs) -> None:
        super().__init__(markup=True, **kwargs)
        self.battle = battle
        self.side_id = side_id

    def render(self) -> str:
        request = self.battle.request(self.side_id)
        if not isinstance(request, MoveRequest):
            return "[bold]MOVES:[/] -"
        parts = []
        for slot in request.moves:
            text = f"{slot.name} ({slot.pp}/{slot.max_pp})"
            parts.append(f"[#666666]{text}[/]" if slot.disabled else text)
        line = "[bold]MOVES:[/] " + "  ".join(parts)
        if request.trapped:
            line += "  [#ff3b3b]TRAPPED[/]"
        return line


class HeaderBar(Static):
    def __init__(self, battle: Battle, ai_trainer: str, **kwargs) -> None:
        super().__init__(markup=True, **kwargs)
        self.battle = battle
        self.ai_trainer = ai_trainer

    def render(self) -> str:
        if self.battle.ended:
            result = f"WINNER: {self.battle.winner}" if self.battle.winner else "TIE"
            return f"[bold]DUEL ARENA[/]  vs {self.ai_trainer}  |  [#f0b429]{result}[/]"
        return f"[bold]DUEL ARENA[/]  vs {self.ai_trainer}  |  TURN {self.battle.turn}"


def command_hint(choices: list[str]) -> str:
    """Short list of legal commands for the input placeholder."""
    shown = [c for c in choices if c]
    if not shown:
        return "Nothing to do; press enter to continue"
    return " | ".join(shown)
