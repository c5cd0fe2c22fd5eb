"""Tests for the logging helpers."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

import pytest

from smartpaste.utils import logging as smartpaste_logging


@pytest.fixture(autouse=True)
def _restore_root_logger(monkeypatch: pytest.MonkeyPatch):
    root = logging.getLogger()
    level = root.level
    monkeypatch.setattr(smartpaste_logging, "_CONFIGURED", False)
    monkeypatch.setattr(smartpaste_logging, "_LOG_PATH", None)
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.handlers.RotatingFileHandler, logging.StreamHandler):
            root.removeHandler(handler)
            handler.close()
    logging.captureWarnings(False)
    root.setLevel(level)


def test_setup_logging_writes_rotating_file(tmp_path: Path) -> None:
    log_path = smartpaste_logging.setup_logging(log_dir=tmp_path, console=False, force=True)

    smartpaste_logging.get_logger("smartpaste.test").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_path == tmp_path / "smartpaste.log"
    assert smartpaste_logging.get_log_path() == log_path
    assert "| INFO     | smartpaste.test | hello" in log_path.read_text(encoding="utf-8")


def test_log_dir_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMARTPASTE_LOG_DIR", str(tmp_path / "env-logs"))

    log_path = smartpaste_logging.setup_logging(console=False)

    assert log_path == tmp_path / "env-logs" / "smartpaste.log"
    assert log_path.exists()


def test_setup_is_idempotent_without_force(tmp_path: Path) -> None:
    first = smartpaste_logging.setup_logging(log_dir=tmp_path / "a", console=False)
    second = smartpaste_logging.setup_logging(log_dir=tmp_path / "b", console=False)

    assert first == second


def test_get_logger_returns_named_logger() -> None:
    assert smartpaste_logging.get_logger("smartpaste.x") is logging.getLogger("smartpaste.x")


def test_level_names_are_accepted(tmp_path: Path) -> None:
    smartpaste_logging.setup_logging("debug", log_dir=tmp_path, console=False, force=True)

    assert logging.getLogger().level == logging.DEBUG


def test_set_debug_toggles_package_logger() -> None:
    package = logging.getLogger(smartpaste_logging.PACKAGE_LOGGER)
    try:
        smartpaste_logging.set_debug(True)
        assert package.level == logging.DEBUG
        smartpaste_logging.set_debug(False)
        assert package.level == logging.NOTSET
    finally:
        package.setLevel(logging.NOTSET)
