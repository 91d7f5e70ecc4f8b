"""Textual runtime shell for the ghamon dashboard.

The shell owns no dashboard logic.  It turns terminal events (keys,
resizes, the refresh timer, finished fetch workers) into machine events,
applies the effects the machine returns, and repaints the board.
"""

from __future__ import annotations

import logging
from typing import Any

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.timer import Timer
from textual.widgets import Static
from textual.worker import get_current_worker

from ghamon.core.fetch_pipeline import FetchPipeline
from ghamon.core.refresh_machine import RefreshMachine
from ghamon.models.state import (
    Effect,
    Event,
    FetchStep,
    KeyPressed,
    PassCompleted,
    Quit,
    ScheduleTick,
    Started,
    TerminalResized,
    TimerElapsed,
)
from ghamon.monitor.renderer import DEFAULT_PALETTE, StatusPalette, render_dashboard

logger = logging.getLogger(__name__)


class DashboardApp(App):
    """Live workflow status table."""

    TITLE = "GHA Monitor"

    CSS = """
    Screen {
        background: $surface;
    }

    #board {
        width: 1fr;
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "press('q')", "Quit", priority=True),
        Binding("ctrl+c", "press('ctrl+c')", "Quit", priority=True, show=False),
        Binding("r", "press('r')", "Refresh"),
        Binding("up", "press('up')", "Up", show=False),
        Binding("k", "press('k')", "Up", show=False),
        Binding("down", "press('down')", "Down", show=False),
        Binding("j", "press('j')", "Down", show=False),
        Binding("pageup", "press('pageup')", "Page up", show=False),
        Binding("pagedown", "press('pagedown')", "Page down", show=False),
        Binding("home", "press('home')", "Top", show=False),
        Binding("end", "press('end')", "Bottom", show=False),
    ]

    def __init__(
        self,
        machine: RefreshMachine,
        pipeline: FetchPipeline,
        palette: StatusPalette = DEFAULT_PALETTE,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.machine = machine
        self.pipeline = pipeline
        self.palette = palette
        self._tick_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield Static(id="board")

    def on_mount(self) -> None:
        logger.debug("DashboardApp mounted at %dx%d", self.size.width, self.size.height)
        self.feed(TerminalResized(width=self.size.width, height=self.size.height))
        self.feed(Started())

    def on_resize(self, event: events.Resize) -> None:
        self.feed(TerminalResized(width=event.size.width, height=event.size.height))

    def action_press(self, key: str) -> None:
        self.feed(KeyPressed(key=key))

    # ------------------------------------------------------------------
    # Event loop plumbing
    # ------------------------------------------------------------------

    def feed(self, event: Event) -> None:
        """Feed ``event`` to the machine, repaint, then apply its effects."""
        transition = self.machine.handle(event)
        self._repaint()
        for effect in transition.effects:
            self._apply(effect)

    def _repaint(self) -> None:
        try:
            board = self.query_one("#board", Static)
        except NoMatches:
            return
        board.update(render_dashboard(self.machine.state, self.palette))

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, FetchStep):
            self._fetch(effect)
        elif isinstance(effect, ScheduleTick):
            if self._tick_timer is not None:
                self._tick_timer.stop()
            self._tick_timer = self.set_timer(effect.seconds, self._on_tick)
        elif isinstance(effect, PassCompleted):
            logger.debug("Pass %d completed (failed=%s)", effect.generation, effect.failed)
        elif isinstance(effect, Quit):
            self.exit()

    def _on_tick(self) -> None:
        self._tick_timer = None
        self.feed(TimerElapsed())

    @work(thread=True, group="fetch")
    def _fetch(self, effect: FetchStep) -> None:
        """Run one fetch step off the event loop and post the result back."""
        event = self.pipeline.run_effect(effect)
        if not get_current_worker().is_cancelled:
            self.call_from_thread(self.feed, event)


def run_dashboard(
    machine: RefreshMachine,
    pipeline: FetchPipeline,
    palette: StatusPalette = DEFAULT_PALETTE,
) -> None:
    """Run the dashboard until the user quits."""
    logger.info("Starting dashboard for %d repositories", machine.state.total_repositories)
    DashboardApp(machine, pipeline, palette).run()
