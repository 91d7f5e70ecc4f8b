"""Workflow run models — one row per (repository, workflow) pair."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

# Synthetic statuses used when no real run data is available.
STATUS_NO_RUNS = "no runs"
STATUS_NO_WORKFLOWS = "no workflows"
STATUS_ERROR = "error"
STATUS_PENDING = "..."


class StatusKind(str, Enum):
    """Closed set of display statuses the renderer knows how to style."""

    SUCCESS = "success"
    FAILURE = "failure"
    IN_PROGRESS = "in progress"
    QUEUED = "queued"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    SKIPPED = "skipped"
    NO_RUNS = STATUS_NO_RUNS
    NO_WORKFLOWS = STATUS_NO_WORKFLOWS
    ERROR = STATUS_ERROR
    PENDING = STATUS_PENDING
    OTHER = "other"

    @classmethod
    def classify(cls, display_status: str) -> StatusKind:
        """Map a display status to its kind; unrecognized values are OTHER."""
        try:
            return cls(display_status)
        except ValueError:
            return cls.OTHER


def display_status(status: str, conclusion: str = "") -> str:
    """Combine a run's status and conclusion into a human-readable label.

    Total over all inputs: never returns an empty string.
    """
    if status == "completed":
        return conclusion or "completed"
    if status == "in_progress":
        return "in progress"
    if status == "queued":
        return "queued"
    return status or "unknown"


class WorkflowRun(BaseModel):
    """Latest known run of a single workflow in a repository.

    Also used for sentinel rows (``no runs``, ``no workflows``, ``error``),
    in which case ``workflow`` may be empty.
    """

    model_config = ConfigDict(frozen=True)

    repository: str
    workflow: str = ""
    status: str = ""
    conclusion: str = ""
    updated_at: datetime | None = None
    url: str = ""

    @property
    def display_status(self) -> str:
        return display_status(self.status, self.conclusion)

    @property
    def kind(self) -> StatusKind:
        return StatusKind.classify(self.display_status)

    @classmethod
    def sentinel(cls, repository: str, status: str, workflow: str = "") -> WorkflowRun:
        """Build a placeholder row carrying only a synthetic status."""
        return cls(repository=repository, workflow=workflow, status=status)


# Rows are displayed exactly as fetched.
ResultRow = WorkflowRun
