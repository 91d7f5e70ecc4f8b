"""Tests for runtime settings and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from ghamon.config import (
    DEFAULT_REFRESH_SECONDS,
    Settings,
    configure_logging,
    effective_rate,
)
from ghamon.core.repo_config import default_config_path


@pytest.fixture
def package_logger():
    logger = logging.getLogger("ghamon")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestSettings:
    def test_defaults(self, isolated_env):
        settings = Settings()
        assert settings.github_token == ""
        assert settings.has_token is False
        assert settings.api_url == "https://api.github.com"
        assert settings.refresh_seconds == 30
        assert settings.restart_in_flight is False
        assert settings.log_file is None
        assert settings.log_level == "INFO"

    def test_conventional_token_variable(self, isolated_env, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_abc")
        settings = Settings()
        assert settings.github_token == "ghp_abc"
        assert settings.has_token is True

    def test_prefixed_token_variable(self, isolated_env, monkeypatch):
        monkeypatch.setenv("GHAMON_GITHUB_TOKEN", "ghp_prefixed")
        assert Settings().github_token == "ghp_prefixed"

    def test_prefixed_overrides(self, isolated_env, monkeypatch):
        monkeypatch.setenv("GHAMON_REFRESH_SECONDS", "60")
        monkeypatch.setenv("GHAMON_RESTART_IN_FLIGHT", "true")
        monkeypatch.setenv("GHAMON_API_URL", "https://ghe.example.com/api/v3")
        settings = Settings()
        assert settings.refresh_seconds == 60
        assert settings.restart_in_flight is True
        assert settings.api_url == "https://ghe.example.com/api/v3"

    def test_config_path_from_environment(self, isolated_env):
        assert Settings().config_path == isolated_env / "missing-config"

    def test_dotenv_file(self, isolated_env):
        (isolated_env / ".env").write_text("GITHUB_TOKEN=from-dotenv\n", encoding="utf-8")
        assert Settings().github_token == "from-dotenv"

    def test_default_config_path(self):
        assert default_config_path() == Path.home() / ".ghamon" / "default"


class TestEffectiveRate:
    @pytest.mark.parametrize("rate", [None, 0, -5])
    def test_invalid_falls_back_to_default(self, rate):
        assert effective_rate(rate) == DEFAULT_REFRESH_SECONDS

    def test_positive_is_kept(self):
        assert effective_rate(5) == 5


class TestConfigureLogging:
    def test_no_log_file_installs_null_handler(self, isolated_env, package_logger):
        configure_logging(Settings())
        assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)

    def test_log_file_receives_records(self, isolated_env, monkeypatch, package_logger):
        log_file = isolated_env / "logs" / "ghamon.log"
        monkeypatch.setenv("GHAMON_LOG_FILE", str(log_file))
        monkeypatch.setenv("GHAMON_LOG_LEVEL", "debug")

        configure_logging(Settings())
        logging.getLogger("ghamon.core.fetch_pipeline").debug("fetching %s", "a/b")
        for handler in package_logger.handlers:
            handler.flush()

        assert package_logger.level == logging.DEBUG
        assert package_logger.propagate is False
        assert "fetching a/b" in log_file.read_text(encoding="utf-8")
