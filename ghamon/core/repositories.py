"""Repository references — ``owner/name`` validation and de-duplication."""

from __future__ import annotations

from collections.abc import Iterable


class InvalidRepositoryError(ValueError):
    """Raised when a string is not in ``owner/repo`` form."""


def validate_repository(value: str) -> str:
    """Return ``value`` stripped, or raise if it is not ``owner/repo``.

    Both sides of the first ``/`` must be non-empty.
    """
    candidate = value.strip()
    owner, sep, name = candidate.partition("/")
    if not sep or not owner or not name:
        raise InvalidRepositoryError(
            f"invalid repository {candidate!r}: must be in owner/repo format"
        )
    return candidate


def split_repository(value: str) -> tuple[str, str]:
    """Split a validated ``owner/repo`` string into its two parts."""
    owner, _, name = validate_repository(value).partition("/")
    return owner, name


def dedupe_repositories(repositories: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping first-seen order and casing."""
    seen: set[str] = set()
    result: list[str] = []
    for repo in repositories:
        key = repo.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(repo)
    return result
