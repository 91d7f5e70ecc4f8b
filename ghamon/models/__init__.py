"""ghamon data models — all Pydantic v2, all frozen (immutable)."""

from ghamon.models.runs import (
    STATUS_ERROR,
    STATUS_NO_RUNS,
    STATUS_NO_WORKFLOWS,
    STATUS_PENDING,
    ResultRow,
    StatusKind,
    WorkflowRun,
    display_status,
)
from ghamon.models.state import (
    DashboardState,
    Effect,
    Event,
    FetchStep,
    FetchStepCompleted,
    KeyPressed,
    PassCompleted,
    Quit,
    RefreshPhase,
    ScheduleTick,
    Started,
    TerminalResized,
    TimerElapsed,
    ViewState,
)

__all__ = [
    # runs
    "STATUS_ERROR",
    "STATUS_NO_RUNS",
    "STATUS_NO_WORKFLOWS",
    "STATUS_PENDING",
    "ResultRow",
    "StatusKind",
    "WorkflowRun",
    "display_status",
    # state
    "DashboardState",
    "RefreshPhase",
    "ViewState",
    # events
    "Event",
    "Started",
    "TimerElapsed",
    "KeyPressed",
    "TerminalResized",
    "FetchStepCompleted",
    # effects
    "Effect",
    "FetchStep",
    "ScheduleTick",
    "PassCompleted",
    "Quit",
]
