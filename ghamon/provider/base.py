"""Status provider protocol and its error types."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ghamon.models.runs import WorkflowRun


class StatusProviderError(RuntimeError):
    """Raised when a repository's statuses cannot be fetched.

    Expected in normal operation (missing repository, network trouble);
    callers degrade the affected repository instead of aborting.
    """


class RateLimitError(StatusProviderError):
    """Raised when the API rate limit is exhausted."""


@runtime_checkable
class StatusProvider(Protocol):
    """Anything that can report the latest workflow runs of a repository."""

    def get_statuses(self, owner: str, repo: str, workflow: str = "") -> list[WorkflowRun]:
        """Return the latest run(s) for ``owner/repo``.

        With ``workflow`` empty, one row per distinct workflow; otherwise a
        single row for that workflow (``no runs`` when it never ran).
        """
        ...
