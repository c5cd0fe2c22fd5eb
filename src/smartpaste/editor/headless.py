"""In-memory editor host.

``HeadlessEditor`` keeps buffers, registers, cursor and selection state in
plain Python objects so the paste engine can run (and be tested) without a
GUI toolkit. Like a Vim buffer, every buffer holds at least one line, and
every top-level edit or :meth:`HeadlessEditor.atomic` block is exactly one
undo step.
"""

from __future__ import annotations

import contextlib
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping, Sequence

from ..core.registers import RegisterKind, RegisterSnapshot
from ..core.whitespace import leading_whitespace
from ..indent.structure import ScopeNode, smallest_node_at
from .capabilities import IndentExpression, default_structure_parsers, evaluate_expression, parse_structure
from .host import FormatOptions

LOGGER = logging.getLogger(__name__)

_BLACK_HOLE_REGISTER = "_"


@dataclass(slots=True)
class _UndoEntry:
    """Line snapshot for undo/redo bookkeeping."""

    lines: list[str]
    cursor_row: int


@dataclass(slots=True)
class NativeReplayCall:
    """Record of a paste delegated to the host's native behaviour."""

    register: str
    count: int
    key: str
    visual: bool = False


@dataclass(slots=True)
class HeadlessBuffer:
    """State of a single in-memory buffer."""

    lines: list[str] = field(default_factory=lambda: [""])
    cursor_row: int = 0
    cursor_col: int = 0
    selection: tuple[int, int] | None = None
    options: FormatOptions = field(default_factory=FormatOptions)
    filetype: str = ""
    indent_expression: IndentExpression | None = None
    undo_stack: list[_UndoEntry] = field(default_factory=list)
    redo_stack: list[_UndoEntry] = field(default_factory=list)
    edit_depth: int = 0


class HeadlessEditor:
    """Multi-buffer host implementing every protocol in :mod:`smartpaste.editor.host`."""

    MAX_HISTORY = 100

    def __init__(self, *, structure_parsers: Mapping[str, Any] | None = None) -> None:
        self._buffers: dict[int, HeadlessBuffer] = {}
        self._ids = itertools.count(1)
        self._current: int | None = None
        self._registers: dict[str, RegisterSnapshot] = {}
        self._pending: tuple[str, int] = ('"', 1)
        self._last_token: Callable[[], Any] | None = None
        self._structure_parsers = dict(structure_parsers or default_structure_parsers())
        self.native_replays: list[NativeReplayCall] = []

    # ------------------------------------------------------------------
    # Buffer management
    # ------------------------------------------------------------------
    def create_buffer(
        self,
        lines: Sequence[str] | None = None,
        *,
        use_spaces: bool = True,
        tab_width: int = 8,
        shift_width: int = 8,
        filetype: str = "",
        indent_expression: IndentExpression | None = None,
    ) -> int:
        """Create a buffer, make it current and return its id."""

        buffer_id = next(self._ids)
        self._buffers[buffer_id] = HeadlessBuffer(
            lines=list(lines) if lines else [""],
            options=FormatOptions(use_spaces=use_spaces, tab_width=tab_width, shift_width=shift_width),
            filetype=filetype,
            indent_expression=indent_expression,
        )
        self._current = buffer_id
        return buffer_id

    def buffer(self, buffer_id: int | None = None) -> HeadlessBuffer:
        key = self._current if buffer_id is None else buffer_id
        if key is None or key not in self._buffers:
            raise KeyError(f"Unknown buffer: {buffer_id!r}")
        return self._buffers[key]

    def set_current_buffer(self, buffer_id: int) -> None:
        self.buffer(buffer_id)
        self._current = buffer_id

    def lines(self, buffer_id: int | None = None) -> list[str]:
        return list(self.buffer(buffer_id).lines)

    def set_lines(self, lines: Sequence[str], buffer_id: int | None = None) -> None:
        """Replace buffer content without recording undo history."""

        buf = self.buffer(buffer_id)
        buf.lines = list(lines) or [""]
        buf.undo_stack.clear()
        buf.redo_stack.clear()
        self._clamp_cursor(buf)

    def set_indent_expression(self, expression: IndentExpression | None, buffer_id: int | None = None) -> None:
        self.buffer(buffer_id).indent_expression = expression

    def set_format_options(self, options: FormatOptions, buffer_id: int | None = None) -> None:
        self.buffer(buffer_id).options = options

    def cursor_position(self, buffer_id: int | None = None) -> tuple[int, int]:
        buf = self.buffer(buffer_id)
        return buf.cursor_row, buf.cursor_col

    def select_rows(self, start: int, end: int, buffer_id: int | None = None) -> None:
        self.buffer(buffer_id).selection = (start, end)

    def clear_selection(self, buffer_id: int | None = None) -> None:
        self.buffer(buffer_id).selection = None

    # ------------------------------------------------------------------
    # Registers and pending invocation
    # ------------------------------------------------------------------
    def set_register(
        self,
        name: str,
        content: str | Sequence[str],
        kind: RegisterKind | str | None = None,
    ) -> RegisterSnapshot:
        """Store register content; plain text without a kind is split like a clipboard."""

        if isinstance(content, str):
            snapshot = RegisterSnapshot.from_text(content) if kind is None else RegisterSnapshot.of(kind, content.split("\n"))
        else:
            snapshot = RegisterSnapshot.of(kind or RegisterKind.LINEWISE, content)
        self._registers[name] = snapshot
        return snapshot

    def set_pending(self, register: str = '"', count: int = 1) -> None:
        """Simulate the register prefix and count typed before a paste key."""

        self._pending = (register or '"', max(1, count))

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------
    def undo(self, buffer_id: int | None = None) -> bool:
        buf = self.buffer(buffer_id)
        if not buf.undo_stack:
            return False
        entry = buf.undo_stack.pop()
        buf.redo_stack.append(_UndoEntry(list(buf.lines), buf.cursor_row))
        buf.lines = entry.lines
        buf.cursor_row = entry.cursor_row
        self._clamp_cursor(buf)
        return True

    def redo(self, buffer_id: int | None = None) -> bool:
        buf = self.buffer(buffer_id)
        if not buf.redo_stack:
            return False
        entry = buf.redo_stack.pop()
        buf.undo_stack.append(_UndoEntry(list(buf.lines), buf.cursor_row))
        buf.lines = entry.lines
        buf.cursor_row = entry.cursor_row
        self._clamp_cursor(buf)
        return True

    def undo_depth(self, buffer_id: int | None = None) -> int:
        return len(self.buffer(buffer_id).undo_stack)

    def repeat_last(self) -> Any:
        """Re-run the last scheduled paste, like Vim's ``.``."""

        if self._last_token is None:
            return None
        return self._last_token()

    # ------------------------------------------------------------------
    # EditorHost protocol
    # ------------------------------------------------------------------
    def current_buffer(self) -> int:
        if self._current is None:
            self._current = self.create_buffer()
        return self._current

    def line_count(self, buffer_id: int) -> int:
        return len(self.buffer(buffer_id).lines)

    def get_lines(self, buffer_id: int, start: int, end: int) -> list[str]:
        lines = self.buffer(buffer_id).lines
        return list(lines[max(0, start):max(0, end)])

    def get_cursor(self, buffer_id: int) -> int:
        return self.buffer(buffer_id).cursor_row

    def set_cursor(self, buffer_id: int, row: int) -> None:
        buf = self.buffer(buffer_id)
        buf.cursor_row = row
        buf.cursor_col = 0
        self._clamp_cursor(buf)

    def get_selection_rows(self, buffer_id: int) -> tuple[int, int] | None:
        return self.buffer(buffer_id).selection

    def get_format_options(self, buffer_id: int) -> FormatOptions:
        return self.buffer(buffer_id).options

    def get_filetype(self, buffer_id: int) -> str:
        return self.buffer(buffer_id).filetype

    def get_register(self, name: str) -> RegisterSnapshot | None:
        if name == _BLACK_HOLE_REGISTER:
            return None
        return self._registers.get(name)

    def pending_invocation(self) -> tuple[str, int]:
        return self._pending

    def insert_lines(
        self,
        buffer_id: int,
        lines: Sequence[str],
        *,
        linewise: bool,
        after: bool,
        follow: bool,
    ) -> None:
        buf = self.buffer(buffer_id)
        with self._edit(buf):
            if linewise:
                self._insert_linewise(buf, list(lines), after=after, follow=follow)
            else:
                self._insert_charwise(buf, "\n".join(lines), after=after)

    def delete_range(self, buffer_id: int, start: int, end: int) -> None:
        buf = self.buffer(buffer_id)
        with self._edit(buf):
            del buf.lines[max(0, start):max(0, end)]
            if not buf.lines:
                buf.lines.append("")
            self._clamp_cursor(buf)

    @contextlib.contextmanager
    def atomic(self, buffer_id: int) -> Iterator[HeadlessBuffer]:
        buf = self.buffer(buffer_id)
        with self._edit(buf):
            yield buf

    def replay_native(self, register: str, count: int, key: str, *, visual: bool = False) -> None:
        LOGGER.debug("Native paste requested: register=%r count=%d key=%r visual=%s", register, count, key, visual)
        self.native_replays.append(NativeReplayCall(register, count, key, visual))

    def schedule_apply(self, token: Callable[[], Any]) -> Any:
        self._last_token = token
        self._pending = ('"', 1)
        return token()

    # ------------------------------------------------------------------
    # Optional capabilities
    # ------------------------------------------------------------------
    def evaluate_indent_expression(self, buffer_id: int, row: int) -> Any:
        buf = self.buffer(buffer_id)
        return evaluate_expression(buf.indent_expression, row, buf.lines, buf.options)

    def get_structural_parse(self, buffer_id: int) -> ScopeNode | None:
        buf = self.buffer(buffer_id)
        return parse_structure(self._structure_parsers, buf.filetype, buf.lines)

    def smallest_node_at(self, tree: ScopeNode, row: int) -> ScopeNode | None:
        return smallest_node_at(tree, row)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @contextlib.contextmanager
    def _edit(self, buf: HeadlessBuffer) -> Iterator[None]:
        before = _UndoEntry(list(buf.lines), buf.cursor_row) if buf.edit_depth == 0 else None
        buf.edit_depth += 1
        try:
            yield
        finally:
            buf.edit_depth -= 1
        if before is not None and before.lines != buf.lines:
            buf.undo_stack.append(before)
            if len(buf.undo_stack) > self.MAX_HISTORY:
                buf.undo_stack.pop(0)
            buf.redo_stack.clear()

    def _insert_linewise(self, buf: HeadlessBuffer, lines: list[str], *, after: bool, follow: bool) -> None:
        index = buf.cursor_row + 1 if after else buf.cursor_row
        index = max(0, min(index, len(buf.lines)))
        buf.lines[index:index] = lines
        if follow:
            buf.cursor_row = index + len(lines)
            buf.cursor_col = 0
        else:
            buf.cursor_row = index
            buf.cursor_col = len(leading_whitespace(lines[0])) if lines else 0
        self._clamp_cursor(buf)

    def _insert_charwise(self, buf: HeadlessBuffer, text: str, *, after: bool) -> None:
        line = buf.lines[buf.cursor_row]
        column = min(buf.cursor_col + (1 if after and line else 0), len(line))
        merged = (line[:column] + text + line[column:]).split("\n")
        buf.lines[buf.cursor_row:buf.cursor_row + 1] = merged
        buf.cursor_col = max(0, column + len(text) - 1)
        self._clamp_cursor(buf)

    @staticmethod
    def _clamp_cursor(buf: HeadlessBuffer) -> None:
        buf.cursor_row = max(0, min(buf.cursor_row, len(buf.lines) - 1))
        buf.cursor_col = max(0, min(buf.cursor_col, max(0, len(buf.lines[buf.cursor_row]) - 1)))


__all__ = ["HeadlessBuffer", "HeadlessEditor", "NativeReplayCall"]
