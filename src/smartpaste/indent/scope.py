"""Scope-boundary detection for insertion points.

Line classification here is pattern based, not a parse: it looks at trailing
brackets, colons and block keywords, leading closers, and multi-line tag
syntax. A line it fails to recognise simply classifies as ``NEITHER`` and the
insertion lands at the baseline indent of the cursor row.
"""

from __future__ import annotations

import logging
import re
from enum import Enum

from ..core.whitespace import is_blank, leading_width
from ..editor.host import BufferId, EditorHost
from .resolver import IndentResolver

LOGGER = logging.getLogger(__name__)

_TRAILING_BRACKET_RE = re.compile(r"([\{\[\(])\s*$")
_TRAILING_COLON_RE = re.compile(r":\s*$")
_TRAILING_KEYWORD_RE = re.compile(
    r"(?:\b(?:then|do|else|begin|repeat)|\bfunction\b[^()]*\([^()]*\))\s*$"
)
_OPEN_TAG_RE = re.compile(r"^\s*<([A-Za-z][\w:.-]*)(?:\s[^<>]*)?>\s*$")
# last line of a multi-line open tag: a quoted or braced attribute value, or a lone ">"
_TAG_CONTINUATION_RE = re.compile(
    r"""^(?:[^<>]*[\w:.-]\s*=\s*(?:"[^"]*"|'[^']*'|\{[^{}<>]*\})\s*|\s*)>\s*$"""
)

_LEADING_BRACKET_RE = re.compile(r"^\s*([\}\]\)])")
_LEADING_KEYWORD_RE = re.compile(r"^\s*(?:end|fi|done|esac|until)\b")
_CLOSE_TAG_RE = re.compile(r"^\s*(?:</[A-Za-z][\w:.-]*\s*>|/>)\s*$")

_VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)
_CLOSER_FOR = {"{": "}", "[": "]", "(": ")", "keyword": "keyword", "tag": "tag"}


class ScopeClassification(Enum):
    OPENER = "opener"
    CLOSER = "closer"
    NEITHER = "neither"


def opener_kind(line: str) -> str | None:
    """Return the kind of block ``line`` opens, or ``None``."""

    text = line.rstrip()
    if not text:
        return None
    match = _TRAILING_BRACKET_RE.search(text)
    if match:
        return match.group(1)
    tag = _OPEN_TAG_RE.match(text)
    if tag and not text.endswith("/>") and tag.group(1).lower() not in _VOID_TAGS:
        if f"</{tag.group(1)}" not in text:
            return "tag"
    if _TAG_CONTINUATION_RE.match(text):
        return "tag"
    if _TRAILING_COLON_RE.search(text):
        return ":"
    if _TRAILING_KEYWORD_RE.search(text):
        return "keyword"
    return None


def closer_kind(line: str) -> str | None:
    """Return the kind of block ``line`` closes, or ``None``."""

    match = _LEADING_BRACKET_RE.match(line)
    if match:
        return match.group(1)
    if _CLOSE_TAG_RE.match(line):
        return "tag"
    if _LEADING_KEYWORD_RE.match(line):
        return "keyword"
    return None


def closes(opener: str, closer: str) -> bool:
    """Whether a ``closer`` kind ends a block opened with ``opener`` kind."""

    return _CLOSER_FOR.get(opener) == closer


def classify_line(line: str) -> ScopeClassification:
    """Classify ``line``; a line that both closes and opens (``} else {``) is an opener."""

    if opener_kind(line) is not None:
        return ScopeClassification.OPENER
    if closer_kind(line) is not None:
        return ScopeClassification.CLOSER
    return ScopeClassification.NEITHER


class ScopeBoundaryResolver:
    """Resolves the indent for an insertion before or after a cursor row."""

    def __init__(self, host: EditorHost, resolver: IndentResolver) -> None:
        self._host = host
        self._resolver = resolver

    def baseline_indent(self, buffer_id: BufferId, row: int) -> int:
        """Actual indent of a non-blank row; the resolver cascade for blank rows."""

        line = self._line(buffer_id, row)
        if line is not None and not is_blank(line):
            options = self._host.get_format_options(buffer_id)
            return leading_width(line, options.tab_width)
        return self._resolver.target_indent(buffer_id, row)

    def resolve_target(self, buffer_id: BufferId, cursor_row: int, insert_after: bool) -> int:
        total = self._host.line_count(buffer_id)
        if total <= 0:
            return 0
        row = max(0, min(cursor_row, total - 1))
        options = self._host.get_format_options(buffer_id)
        step = options.effective_shift_width
        baseline = self.baseline_indent(buffer_id, row)
        line = self._line(buffer_id, row) or ""

        if insert_after:
            kind = opener_kind(line)
            if kind is None:
                return baseline
            if row + 1 >= total:
                return baseline + step
            neighbour = self._line(buffer_id, row + 1) or ""
            neighbour_indent = self.baseline_indent(buffer_id, row + 1)
            if neighbour_indent > baseline:
                return neighbour_indent
            if is_blank(neighbour):
                return baseline + step
            mate = closer_kind(neighbour)
            if mate is not None and closes(kind, mate) and leading_width(neighbour, options.tab_width) <= baseline:
                LOGGER.debug("Empty block after row %d; indenting one level", row)
                return baseline + step
            return baseline

        kind = closer_kind(line)
        if kind is None or row == 0:
            return baseline
        neighbour = self._line(buffer_id, row - 1) or ""
        neighbour_indent = self.baseline_indent(buffer_id, row - 1)
        if neighbour_indent > baseline:
            return neighbour_indent
        if is_blank(neighbour):
            return baseline + step
        mate = opener_kind(neighbour)
        if mate is not None and closes(mate, kind) and leading_width(neighbour, options.tab_width) <= baseline:
            LOGGER.debug("Empty block before row %d; indenting one level", row)
            return baseline + step
        return baseline

    def _line(self, buffer_id: BufferId, row: int) -> str | None:
        lines = self._host.get_lines(buffer_id, row, row + 1)
        return lines[0] if lines else None


__all__ = [
    "ScopeBoundaryResolver",
    "ScopeClassification",
    "classify_line",
    "closer_kind",
    "closes",
    "opener_kind",
]
