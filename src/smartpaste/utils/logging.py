"""Logging setup for applications embedding smartpaste.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed by the embedding application through :func:`setup_logging`.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

__all__ = ["PACKAGE_LOGGER", "get_log_path", "get_logger", "set_debug", "setup_logging"]

PACKAGE_LOGGER = "smartpaste"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_DEFAULT_LOG_DIR = Path.home() / ".smartpaste" / "logs"
_LOG_FILE_NAME = "smartpaste.log"
_QUIET_LOGGERS: tuple[str, ...] = ("asyncio",)
_CONFIGURED = False
_LOG_PATH: Path | None = None


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Install a rotating log file (and optionally a console stream) on the root logger.

    Calling this again is a no-op returning the existing log path unless
    ``force`` is set. ``SMARTPASTE_LOG_DIR`` overrides the default directory
    when ``log_dir`` is not given.
    """

    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force and _LOG_PATH is not None:
        return _LOG_PATH

    numeric_level = _coerce_level(level)
    directory = _resolve_log_dir(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / _LOG_FILE_NAME

    logging.basicConfig(
        level=numeric_level,
        handlers=_build_handlers(log_path, numeric_level, console, max_bytes, backup_count),
        force=True,
    )
    logging.captureWarnings(True)
    quiet_level = max(numeric_level, logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    _CONFIGURED = True
    _LOG_PATH = log_path
    return log_path


def set_debug(enabled: bool) -> None:
    """Toggle DEBUG output for every ``smartpaste.*`` logger."""

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if enabled else logging.NOTSET)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_log_path() -> Path | None:
    """Return the log file installed by :func:`setup_logging`, if any."""

    return _LOG_PATH


def _build_handlers(
    log_path: Path,
    level: int,
    console: bool,
    max_bytes: int,
    backup_count: int,
) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    return Path(log_dir or os.environ.get("SMARTPASTE_LOG_DIR") or _DEFAULT_LOG_DIR).expanduser()
