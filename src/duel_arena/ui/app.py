from __future__ import annotations

from random import Random

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Input, RichLog, Static

from duel_arena.render.format import format_entry
from duel_arena.ui.widgets import HeaderBar, MovesPanel, SidePanel, command_hint
from duel_sim.decision.choices import enumerate_choices
from duel_sim.protocol.log_parser import parse_log_line
from duel_sim.sim.match import AI, HUMAN, Match, start_match
from duel_sim.sim.turns import submit_choice

MESSAGE_COLORS = {"error": "#ff3b3b", "accent": "#f0b429", "info": "#e5e7eb"}


class DuelArenaApp(App[None]):
    CSS_PATH = "app.tcss"

    BINDINGS = [
        Binding("ctrl+r", "restart", "Restart"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, seed: int | None = None, ai_trainer: str | None = None) -> None:
        super().__init__()
        self.rng = Random(seed)
        self.ai_trainer = ai_trainer
        self.match: Match = start_match(seed=seed, ai_trainer=ai_trainer)
        self._log_cursor = 0

    def compose(self) -> ComposeResult:
        battle = self.match.battle
        yield HeaderBar(battle, self.match.ai_trainer, classes="header-bar")
        with Horizontal(id="sides"):
            yield SidePanel(battle, HUMAN.id, reveal=True, classes="box", id="own-panel")
            yield SidePanel(battle, AI.id, reveal=False, classes="box", id="foe-panel")
        yield MovesPanel(battle, HUMAN.id, classes="box", id="moves-panel")
        yield RichLog(id="battle-log", classes="box", wrap=True, markup=False)
        yield Static("", id="message")
        yield Input(id="command-input")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_battle()
        self.query_one("#command-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        result = submit_choice(
            self.match.battle,
            event.value,
            human=HUMAN.id,
            ai=AI.id,
            rng=self.rng,
            weights=self.match.weights,
        )
        event.input.value = ""
        self.show_message(result.message, result.message_kind)
        self.refresh_battle()

    def action_restart(self) -> None:
        self.match = start_match(ai_trainer=self.ai_trainer)
        self._log_cursor = 0
        self.query_one("#battle-log", RichLog).clear()
        for panel in self.query(SidePanel):
            panel.battle = self.match.battle
        self.query_one(MovesPanel).battle = self.match.battle
        header = self.query_one(HeaderBar)
        header.battle = self.match.battle
        header.ai_trainer = self.match.ai_trainer
        self.show_message(f"New battle against {self.match.ai_trainer}", "accent")
        self.refresh_battle()

    def show_message(self, message: str | None, kind: str | None) -> None:
        color = MESSAGE_COLORS.get(kind or "info", MESSAGE_COLORS["info"])
        self.query_one("#message", Static).update(f"[{color}]{message or ''}[/]")

    def refresh_battle(self) -> None:
        battle = self.match.battle
        log = self.query_one("#battle-log", RichLog)
        lines = battle.log
        for line in lines[self._log_cursor :]:
            entry = parse_log_line(line, HUMAN.id.value)
            if entry is not None:
                log.write(format_entry(entry))
        self._log_cursor = len(lines)

        self.query_one(HeaderBar).refresh()
        for panel in self.query(SidePanel):
            panel.refresh()
        self.query_one(MovesPanel).refresh()
        self.query_one("#command-input", Input).placeholder = command_hint(enumerate_choices(battle, HUMAN.id))
