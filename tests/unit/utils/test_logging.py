"""Unit tests for logging setup."""

import logging
import os
from unittest.mock import patch

import pytest
from imgst.utils.logging import LOG_ENV_VAR, LOGGER_NAME, configure_logging, resolve_level


class TestResolveLevel:
    """Tests for resolve_level function."""

    @pytest.fixture(autouse=True)
    def _no_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(LOG_ENV_VAR, raising=False)

    def test_default_is_info(self) -> None:
        assert resolve_level() == logging.INFO

    def test_verbose_is_debug(self) -> None:
        assert resolve_level(verbose=1) == logging.DEBUG
        assert resolve_level(verbose=3) == logging.DEBUG

    def test_quiet_is_warning(self) -> None:
        assert resolve_level(quiet=True) == logging.WARNING

    def test_quiet_wins_over_verbose(self) -> None:
        assert resolve_level(verbose=2, quiet=True) == logging.WARNING

    def test_env_var_takes_precedence(self) -> None:
        with patch.dict(os.environ, {LOG_ENV_VAR: "debug"}):
            assert resolve_level(quiet=True) == logging.DEBUG

    def test_invalid_env_var_ignored(self) -> None:
        with patch.dict(os.environ, {LOG_ENV_VAR: "chatty"}):
            assert resolve_level(verbose=1) == logging.DEBUG


class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.fixture(autouse=True)
    def _no_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(LOG_ENV_VAR, raising=False)

    def test_sets_level(self) -> None:
        logger = configure_logging(verbose=1)

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG

    def test_replaces_own_handler(self) -> None:
        """Repeated calls keep a single installed handler."""
        logger = logging.getLogger(LOGGER_NAME)
        before = len(logger.handlers)

        configure_logging()
        configure_logging(quiet=True)

        assert len(logger.handlers) == before + 1
        assert logger.level == logging.WARNING

    def test_line_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        logger = configure_logging()

        logger.info("done: processed=%d", 3)

        assert "[INFO]: done: processed=3" in capsys.readouterr().err
