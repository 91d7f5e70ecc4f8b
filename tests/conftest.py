"""Shared test fixtures for ghamon."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from ghamon.models.runs import WorkflowRun
from ghamon.models.state import DashboardState
from ghamon.provider.base import StatusProviderError


class FakeProvider:
    """In-memory ``StatusProvider``.

    ``responses`` maps ``owner/repo`` to either a list of runs or an
    exception instance to raise.  Every call is recorded in ``calls``.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, str, str]] = []

    def get_statuses(self, owner: str, repo: str, workflow: str = "") -> list[WorkflowRun]:
        self.calls.append((owner, repo, workflow))
        result = self.responses.get(f"{owner}/{repo}", [])
        if isinstance(result, Exception):
            raise result
        return list(result)


@pytest.fixture
def make_run() -> Callable[..., WorkflowRun]:
    """Factory fixture: build a WorkflowRun with sensible defaults."""

    def _factory(
        repository: str = "a/b",
        workflow: str = "CI",
        status: str = "completed",
        conclusion: str = "success",
        **overrides: Any,
    ) -> WorkflowRun:
        return WorkflowRun(
            repository=repository,
            workflow=workflow,
            status=status,
            conclusion=conclusion,
            **overrides,
        )

    return _factory


@pytest.fixture
def scenario_provider(make_run: Callable[..., WorkflowRun]) -> FakeProvider:
    """``a/b`` has CI (success) and Deploy (in progress); ``c/d`` has none."""
    return FakeProvider(
        {
            "a/b": [
                make_run("a/b", "CI", "completed", "success"),
                make_run("a/b", "Deploy", "in_progress", ""),
            ],
            "c/d": [],
        }
    )


@pytest.fixture
def failing_provider(make_run: Callable[..., WorkflowRun]) -> FakeProvider:
    """``a/b`` succeeds; ``c/d`` raises."""
    return FakeProvider(
        {
            "a/b": [make_run("a/b", "CI", "completed", "success")],
            "c/d": StatusProviderError("GitHub API returned 404"),
        }
    )


@pytest.fixture
def two_repo_state() -> DashboardState:
    """Idle state over ``a/b`` and ``c/d`` with a 40-line terminal."""
    return DashboardState.initial(["a/b", "c/d"], width=100, height=40)


@pytest.fixture
def make_provider() -> Callable[..., FakeProvider]:
    """Factory fixture: build a FakeProvider from a responses mapping."""
    return FakeProvider


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Clear token and ``GHAMON_*`` variables and run from an empty directory.

    Keeps a developer's real token, ``.env`` file and ``~/.ghamon/default``
    out of the tests.  Returns the temporary directory.
    """
    for name in list(os.environ):
        if name.startswith("GHAMON_") or name == "GITHUB_TOKEN":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GHAMON_CONFIG_PATH", str(tmp_path / "missing-config"))
    monkeypatch.chdir(tmp_path)
    return tmp_path
