"""Host-side pieces: protocols, the headless editor and the Qt adapter."""

from importlib import import_module
from typing import Any

from . import host
from .host import EditorHost, FormatOptions

__all__ = ["EditorHost", "FormatOptions", "host"]


def __getattr__(name: str) -> Any:
	if name in {"headless", "qt_host", "capabilities"}:
		module = import_module(f"{__name__}.{name}")
		globals()[name] = module
		return module
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
