"""Status providers — where workflow run data comes from."""

from ghamon.provider.base import RateLimitError, StatusProvider, StatusProviderError
from ghamon.provider.github import GitHubStatusProvider

__all__ = [
    "GitHubStatusProvider",
    "RateLimitError",
    "StatusProvider",
    "StatusProviderError",
]
