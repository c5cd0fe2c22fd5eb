"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

from smartpaste.editor.headless import HeadlessEditor

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def editor() -> HeadlessEditor:
    return HeadlessEditor()


@pytest.fixture(autouse=True)
def _clean_smartpaste_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SMARTPASTE_EXCLUDE_FILETYPES",
        "SMARTPASTE_SCOPE_NODE_TYPES",
        "SMARTPASTE_DEBUG_LOGGING",
        "SMARTPASTE_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
