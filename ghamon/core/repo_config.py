"""Repository list file — one ``owner/repo`` per line.

Blank lines and lines starting with ``#`` are ignored.  A missing file is
not an error; it simply contributes no repositories.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ghamon.core.repositories import InvalidRepositoryError, validate_repository

logger = logging.getLogger(__name__)


class ConfigFileError(OSError):
    """Raised when the repository list file exists but cannot be read."""


def default_config_path() -> Path:
    """``~/.ghamon/default``."""
    return Path.home() / ".ghamon" / "default"


def load_repositories(path: Path) -> list[str]:
    """Read the repository list at ``path``.

    Raises
    ------
    InvalidRepositoryError
        If a non-comment line is not ``owner/repo``; the message names the
        file and the 1-based line number.
    ConfigFileError
        If the file exists but cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("Config file %s not found; no repositories loaded", path)
        return []
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigFileError(f"reading config file {str(path)!r}: {exc}") from exc

    repos: list[str] = []
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            repos.append(validate_repository(line))
        except InvalidRepositoryError as exc:
            raise InvalidRepositoryError(
                f"config file {str(path)!r} line {line_no}: {exc}"
            ) from exc

    logger.info("Loaded %d repositories from %s", len(repos), path)
    return repos
