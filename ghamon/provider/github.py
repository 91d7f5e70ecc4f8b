"""GitHub Actions status provider over the REST API (httpx, synchronous)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from ghamon.models.runs import STATUS_ERROR, STATUS_NO_RUNS, WorkflowRun
from ghamon.provider.base import RateLimitError, StatusProviderError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# Workflows GitHub manages on the repository's behalf (dependabot, pages).
_DYNAMIC_PREFIX = "dynamic/"


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def run_from_api(repository: str, workflow: str, payload: dict[str, Any]) -> WorkflowRun:
    """Build a ``WorkflowRun`` from one entry of ``workflow_runs``."""
    return WorkflowRun(
        repository=repository,
        workflow=workflow,
        status=payload.get("status") or "",
        conclusion=payload.get("conclusion") or "",
        updated_at=_parse_timestamp(payload.get("updated_at")),
        url=payload.get("html_url") or "",
    )


class GitHubStatusProvider:
    """Fetches the latest workflow runs for a repository.

    Parameters
    ----------
    token:
        GitHub token sent as a bearer credential.
    api_url:
        REST API root; override for GitHub Enterprise.
    timeout:
        Per-request timeout in seconds.
    client:
        Pre-built ``httpx.Client``; tests pass one with a mock transport.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(
            base_url=api_url.rstrip("/"),
            headers=_headers(token),
            timeout=httpx.Timeout(timeout),
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubStatusProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # StatusProvider
    # ------------------------------------------------------------------

    def get_statuses(self, owner: str, repo: str, workflow: str = "") -> list[WorkflowRun]:
        if workflow:
            return [self._latest_run(owner, repo, workflow, workflow)]
        return self._all_workflows(owner, repo)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise StatusProviderError(f"GET {path} failed: {exc}") from exc

        if response.status_code in (403, 429) and response.headers.get(
            "x-ratelimit-remaining"
        ) == "0":
            raise RateLimitError(
                f"GitHub API rate limit exhausted (resets at "
                f"{response.headers.get('x-ratelimit-reset', 'unknown')})"
            )
        if response.is_error:
            raise StatusProviderError(
                f"GitHub API returned {response.status_code} for {path}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise StatusProviderError(f"decoding response for {path}: {exc}") from exc

    def _latest_run(self, owner: str, repo: str, workflow_ref: str | int, name: str) -> WorkflowRun:
        repository = f"{owner}/{repo}"
        data = self._get(
            f"/repos/{owner}/{repo}/actions/workflows/{workflow_ref}/runs",
            params={"per_page": 1},
        )
        runs = data.get("workflow_runs") or []
        if not runs:
            return WorkflowRun.sentinel(repository, STATUS_NO_RUNS, workflow=name)
        return run_from_api(repository, name, runs[0])

    def _all_workflows(self, owner: str, repo: str) -> list[WorkflowRun]:
        repository = f"{owner}/{repo}"
        data = self._get(
            f"/repos/{owner}/{repo}/actions/workflows", params={"per_page": 100}
        )

        seen: set[Any] = set()
        results: list[WorkflowRun] = []
        for wf in data.get("workflows") or []:
            path = wf.get("path") or ""
            if path.startswith(_DYNAMIC_PREFIX):
                continue
            # Two workflows may share a display name; the id is the identity.
            workflow_id = wf.get("id", path)
            if workflow_id in seen:
                continue
            seen.add(workflow_id)

            name = wf.get("name") or path.rsplit("/", 1)[-1]
            try:
                results.append(self._latest_run(owner, repo, workflow_id, name))
            except RateLimitError:
                raise
            except StatusProviderError as exc:
                logger.warning("Workflow %s in %s failed: %s", name, repository, exc)
                results.append(
                    WorkflowRun.sentinel(repository, STATUS_ERROR, workflow=name)
                )

        logger.debug("%s: %d workflows", repository, len(results))
        return results
