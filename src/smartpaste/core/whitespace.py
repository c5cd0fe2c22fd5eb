"""Visual-column helpers for leading whitespace."""

from __future__ import annotations

import re

_LEADING_WS_RE = re.compile(r"^\s*")

DEFAULT_TAB_WIDTH = 8


def is_blank(line: str) -> bool:
    """Return ``True`` for empty or whitespace-only lines."""

    return not line or line.isspace()


def leading_whitespace(line: str) -> str:
    match = _LEADING_WS_RE.match(line)
    return match.group(0) if match else ""


def display_width(text: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Return the on-screen width of ``text`` starting at column zero.

    Tabs advance to the next multiple of ``tab_width``; every other character
    occupies a single column.
    """

    step = tab_width if tab_width > 0 else DEFAULT_TAB_WIDTH
    column = 0
    for char in text:
        if char == "\t":
            column += step - (column % step)
        else:
            column += 1
    return column


def leading_width(line: str, tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Return the visual width of the leading whitespace in ``line``."""

    return display_width(leading_whitespace(line), tab_width)


def render_indent(columns: int, *, use_spaces: bool, tab_width: int) -> str:
    """Render ``columns`` of indentation as spaces or as tabs plus spaces."""

    columns = max(0, columns)
    if use_spaces or tab_width <= 0:
        return " " * columns
    tabs, spaces = divmod(columns, tab_width)
    return "\t" * tabs + " " * spaces


__all__ = [
    "DEFAULT_TAB_WIDTH",
    "display_width",
    "is_blank",
    "leading_whitespace",
    "leading_width",
    "render_indent",
]
