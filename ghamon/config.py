"""Runtime settings — env-driven, overridable from the command line.

Reads ``GHAMON_*`` environment variables and an optional ``.env`` file.
The GitHub token is also accepted from the conventional ``GITHUB_TOKEN``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghamon.core.repo_config import default_config_path

DEFAULT_REFRESH_SECONDS = 30


class Settings(BaseSettings):
    """ghamon settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export GITHUB_TOKEN=ghp_...
        export GHAMON_REFRESH_SECONDS=60
        export GHAMON_LOG_FILE=/tmp/ghamon.log
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GHAMON_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("GHAMON_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    api_url: str = "https://api.github.com"
    request_timeout: float = 10.0

    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    restart_in_flight: bool = False
    config_path: Path = Field(default_factory=default_config_path)

    # Observability
    log_file: Path | None = None
    log_level: str = "INFO"

    @property
    def has_token(self) -> bool:
        return bool(self.github_token)


def effective_rate(rate: int | None) -> int:
    """Refresh interval in seconds; values below 1 fall back to the default."""
    if rate is None or rate < 1:
        return DEFAULT_REFRESH_SECONDS
    return rate


def configure_logging(settings: Settings) -> None:
    """Send ``ghamon`` logs to ``settings.log_file``, or nowhere.

    The dashboard owns the terminal, so nothing is ever logged to stderr.
    """
    package_logger = logging.getLogger("ghamon")
    if settings.log_file is None:
        package_logger.addHandler(logging.NullHandler())
        return

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(settings.log_file, mode="a", encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(settings.log_level.upper())
    package_logger.propagate = False
