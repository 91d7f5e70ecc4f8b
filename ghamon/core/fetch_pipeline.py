"""Fetch pipeline — one provider call per repository, strictly in order.

The pipeline itself is stateless.  Which repository comes next, and when,
is decided by the refresh machine through ``FetchStep`` effects; the
pipeline only turns one step into one ``FetchStepCompleted`` event.
"""

from __future__ import annotations

import logging

from ghamon.core.refresh_machine import RefreshMachine
from ghamon.core.repositories import split_repository
from ghamon.models.runs import STATUS_NO_WORKFLOWS, WorkflowRun
from ghamon.models.state import FetchStep, FetchStepCompleted, Started
from ghamon.provider.base import StatusProvider, StatusProviderError

logger = logging.getLogger(__name__)


class FetchPipeline:
    """Runs single fetch steps against a ``StatusProvider``.

    Parameters
    ----------
    provider:
        Source of workflow run data.
    workflow:
        Workflow filter; empty means every workflow in the repository.
    """

    def __init__(self, provider: StatusProvider, workflow: str = "") -> None:
        self._provider = provider
        self._workflow = workflow

    @property
    def workflow(self) -> str:
        return self._workflow

    def fetch_one(self, repository: str) -> list[WorkflowRun]:
        """Fetch ``repository``; never returns an empty list.

        Raises ``StatusProviderError`` when the provider fails.
        """
        owner, name = split_repository(repository)
        runs = self._provider.get_statuses(owner, name, self._workflow)
        if not runs:
            return [WorkflowRun.sentinel(repository, STATUS_NO_WORKFLOWS)]
        return list(runs)

    def step(self, generation: int, index: int, repository: str) -> FetchStepCompleted:
        """Run one step and report it as an event, converting failures."""
        try:
            rows = self.fetch_one(repository)
        except StatusProviderError as exc:
            return FetchStepCompleted(generation=generation, index=index, error=str(exc))
        except Exception as exc:
            # Anything else from the provider still only degrades this repository.
            logger.exception("Unexpected error fetching %s", repository)
            return FetchStepCompleted(
                generation=generation, index=index, error=f"{type(exc).__name__}: {exc}"
            )
        return FetchStepCompleted(generation=generation, index=index, rows=tuple(rows))

    def run_effect(self, effect: FetchStep) -> FetchStepCompleted:
        return self.step(effect.generation, effect.index, effect.repository)

    def run_pass(self, machine: RefreshMachine) -> None:
        """Drive one complete pass through ``machine`` on the calling thread.

        Used by one-shot mode; the timer effect of ``Started`` is ignored.
        """
        pending = list(machine.handle(Started()).effects)
        while pending:
            effect = pending.pop(0)
            if isinstance(effect, FetchStep):
                pending.extend(machine.handle(self.run_effect(effect)).effects)
