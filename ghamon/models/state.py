"""Dashboard state, the events that drive it and the effects it requests.

Every model here is frozen.  The refresh machine never mutates a state in
place; each transition returns a new ``DashboardState`` built with
``model_copy(update=...)``.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict

from ghamon.models.runs import STATUS_PENDING, WorkflowRun


class RefreshPhase(str, Enum):
    """Lifecycle of the refresh loop."""

    IDLE = "idle"
    FETCHING = "fetching"
    ERROR = "error"
    QUIT = "quit"


class ViewState(BaseModel):
    """Scroll position and terminal size, owned by the viewport controller."""

    model_config = ConfigDict(frozen=True)

    scroll_offset: int = 0
    width: int = 80
    height: int = 24


class DashboardState(BaseModel):
    """Everything the renderer needs, as one immutable value.

    ``groups`` holds one tuple of rows per configured repository, at the
    repository's position in ``repositories``.  A fetch step replaces only
    its own group, so earlier rows never move during a pass.
    """

    model_config = ConfigDict(frozen=True)

    repositories: tuple[str, ...] = ()
    workflow: str = ""
    refresh_seconds: int = 30
    restart_in_flight: bool = False

    phase: RefreshPhase = RefreshPhase.IDLE
    generation: int = 0
    next_index: int = 0
    completed_count: int = 0
    failed_count: int = 0
    # Generation of the one outstanding provider call, if any.
    in_flight_generation: int | None = None
    error: str | None = None

    groups: tuple[tuple[WorkflowRun, ...], ...] = ()
    view: ViewState = ViewState()

    @classmethod
    def initial(
        cls,
        repositories: list[str] | tuple[str, ...],
        *,
        workflow: str = "",
        refresh_seconds: int = 30,
        restart_in_flight: bool = False,
        width: int = 80,
        height: int = 24,
    ) -> DashboardState:
        """Idle state with a pending placeholder row per repository."""
        repos = tuple(repositories)
        return cls(
            repositories=repos,
            workflow=workflow,
            refresh_seconds=refresh_seconds,
            restart_in_flight=restart_in_flight,
            groups=tuple(
                (WorkflowRun.sentinel(repo, STATUS_PENDING),) for repo in repos
            ),
            view=ViewState(width=width, height=height),
        )

    @property
    def rows(self) -> list[WorkflowRun]:
        """Snapshot rows flattened in repository order."""
        return [row for group in self.groups for row in group]

    @property
    def total_rows(self) -> int:
        return sum(len(group) for group in self.groups)

    @property
    def total_repositories(self) -> int:
        return len(self.repositories)

    @property
    def is_fetching(self) -> bool:
        return self.phase == RefreshPhase.FETCHING


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True)


class Started(_Message):
    """The runtime shell is up; kick off the first pass and the timer."""


class TimerElapsed(_Message):
    """The refresh interval has elapsed."""


class KeyPressed(_Message):
    key: str


class TerminalResized(_Message):
    width: int
    height: int


class FetchStepCompleted(_Message):
    """Result of fetching one repository; ``error`` is set on failure."""

    generation: int
    index: int
    rows: tuple[WorkflowRun, ...] = ()
    error: str | None = None


Event = Union[Started, TimerElapsed, KeyPressed, TerminalResized, FetchStepCompleted]


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


class FetchStep(_Message):
    """Fetch ``repository`` (position ``index``) for pass ``generation``."""

    generation: int
    index: int
    repository: str


class ScheduleTick(_Message):
    """Arm the one-shot refresh timer."""

    seconds: float


class PassCompleted(_Message):
    generation: int
    failed: bool = False


class Quit(_Message):
    """Tear down the dashboard."""


Effect = Union[FetchStep, ScheduleTick, PassCompleted, Quit]
