"""PySide6 host adapter for ``QPlainTextEdit`` widgets.

Every edit runs inside a ``QTextCursor`` edit block, so one paste (including
the delete + insert of a selection replace) is one entry on the document's
undo stack. The ``+`` and ``*`` registers read the system clipboard; other
registers live in an in-memory table owned by the adapter.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Callable, Iterator, Mapping, Sequence

from PySide6.QtGui import QGuiApplication, QTextCursor, QTextDocument
from PySide6.QtWidgets import QPlainTextEdit

from ..core.registers import RegisterKind, RegisterSnapshot
from ..core.whitespace import leading_whitespace
from ..indent.structure import ScopeNode, smallest_node_at
from .capabilities import IndentExpression, default_structure_parsers, evaluate_expression, parse_structure
from .host import FormatOptions

LOGGER = logging.getLogger(__name__)

_CLIPBOARD_REGISTERS = frozenset({"+", "*"})


class QtEditorHost:
    """Exposes a single ``QPlainTextEdit`` as a smartpaste host."""

    def __init__(
        self,
        editor: QPlainTextEdit,
        *,
        options: FormatOptions | None = None,
        filetype: str = "",
        indent_expression: IndentExpression | None = None,
        structure_parsers: Mapping[str, Any] | None = None,
    ) -> None:
        self._editor = editor
        self._options = options or FormatOptions()
        self._filetype = filetype
        self._indent_expression = indent_expression
        self._structure_parsers = dict(structure_parsers or default_structure_parsers())
        self._registers: dict[str, RegisterSnapshot] = {}
        self._pending: tuple[str, int] = ('"', 1)
        self._last_token: Callable[[], Any] | None = None
        self._apply_tab_stop()

    @property
    def editor(self) -> QPlainTextEdit:
        return self._editor

    @property
    def document(self) -> QTextDocument:
        return self._editor.document()

    def set_register(self, name: str, content: str | Sequence[str], kind: RegisterKind | str | None = None) -> None:
        if isinstance(content, str):
            snapshot = RegisterSnapshot.from_text(content) if kind is None else RegisterSnapshot.of(kind, content.split("\n"))
        else:
            snapshot = RegisterSnapshot.of(kind or RegisterKind.LINEWISE, content)
        if name in _CLIPBOARD_REGISTERS:
            QGuiApplication.clipboard().setText(snapshot.as_text())
            return
        self._registers[name] = snapshot

    def set_pending(self, register: str = '"', count: int = 1) -> None:
        self._pending = (register or '"', max(1, count))

    def set_format_options(self, options: FormatOptions) -> None:
        self._options = options
        self._apply_tab_stop()

    def set_indent_expression(self, expression: IndentExpression | None) -> None:
        self._indent_expression = expression

    def text_lines(self) -> list[str]:
        return self._editor.toPlainText().split("\n")

    def repeat_last(self) -> Any:
        if self._last_token is None:
            return None
        return self._last_token()

    # ------------------------------------------------------------------
    # EditorHost protocol
    # ------------------------------------------------------------------
    def current_buffer(self) -> QTextDocument:
        return self.document

    def line_count(self, buffer_id: Any) -> int:
        return self.document.blockCount()

    def get_lines(self, buffer_id: Any, start: int, end: int) -> list[str]:
        document = self.document
        end = min(end, document.blockCount())
        return [document.findBlockByNumber(row).text() for row in range(max(0, start), end)]

    def get_cursor(self, buffer_id: Any) -> int:
        return self._editor.textCursor().blockNumber()

    def set_cursor(self, buffer_id: Any, row: int, column: int = 0) -> None:
        document = self.document
        row = max(0, min(row, document.blockCount() - 1))
        block = document.findBlockByNumber(row)
        cursor = QTextCursor(block)
        cursor.setPosition(block.position() + max(0, min(column, len(block.text()))))
        self._editor.setTextCursor(cursor)

    def get_selection_rows(self, buffer_id: Any) -> tuple[int, int] | None:
        cursor = self._editor.textCursor()
        if not cursor.hasSelection():
            return None
        document = self.document
        start_block = document.findBlock(cursor.selectionStart())
        end_block = document.findBlock(cursor.selectionEnd())
        start_row, end_row = start_block.blockNumber(), end_block.blockNumber()
        if end_row > start_row and cursor.selectionEnd() == end_block.position():
            end_row -= 1
        return start_row, end_row

    def get_format_options(self, buffer_id: Any) -> FormatOptions:
        return self._options

    def get_filetype(self, buffer_id: Any) -> str:
        return self._filetype

    def get_register(self, name: str) -> RegisterSnapshot | None:
        if name in _CLIPBOARD_REGISTERS:
            text = QGuiApplication.clipboard().text()
            return RegisterSnapshot.from_text(text) if text else None
        return self._registers.get(name)

    def pending_invocation(self) -> tuple[str, int]:
        return self._pending

    def insert_lines(
        self,
        buffer_id: Any,
        lines: Sequence[str],
        *,
        linewise: bool,
        after: bool,
        follow: bool,
    ) -> None:
        text = "\n".join(lines)
        with self.atomic(buffer_id):
            if not linewise:
                cursor = self._editor.textCursor()
                if after and not cursor.atBlockEnd():
                    cursor.movePosition(QTextCursor.MoveOperation.NextCharacter)
                cursor.insertText(text)
                self._editor.setTextCursor(cursor)
                return
            row = self.get_cursor(buffer_id)
            cursor = QTextCursor(self.document.findBlockByNumber(row))
            if after:
                cursor.movePosition(QTextCursor.MoveOperation.EndOfBlock)
                cursor.insertText("\n" + text)
                first_row = row + 1
            else:
                cursor.movePosition(QTextCursor.MoveOperation.StartOfBlock)
                cursor.insertText(text + "\n")
                first_row = row
        if follow:
            self.set_cursor(buffer_id, first_row + len(lines))
        else:
            self.set_cursor(buffer_id, first_row, len(leading_whitespace(lines[0])) if lines else 0)

    def delete_range(self, buffer_id: Any, start: int, end: int) -> None:
        document = self.document
        total = document.blockCount()
        start, end = max(0, start), min(end, total)
        if start >= end:
            return
        cursor = QTextCursor(document)
        if end < total:
            cursor.setPosition(document.findBlockByNumber(start).position())
            cursor.setPosition(document.findBlockByNumber(end).position(), QTextCursor.MoveMode.KeepAnchor)
        elif start > 0:
            previous = document.findBlockByNumber(start - 1)
            cursor.setPosition(previous.position() + previous.length() - 1)
            cursor.movePosition(QTextCursor.MoveOperation.End, QTextCursor.MoveMode.KeepAnchor)
        else:
            cursor.select(QTextCursor.SelectionType.Document)
        with self.atomic(buffer_id):
            cursor.removeSelectedText()

    @contextlib.contextmanager
    def atomic(self, buffer_id: Any) -> Iterator[QTextCursor]:
        cursor = QTextCursor(self.document)
        cursor.beginEditBlock()
        try:
            yield cursor
        finally:
            cursor.endEditBlock()

    def replay_native(self, register: str, count: int, key: str, *, visual: bool = False) -> None:
        snapshot = self.get_register(register)
        if snapshot is None or snapshot.is_empty:
            return
        LOGGER.debug("Native paste: register=%r count=%d key=%r visual=%s", register, count, key, visual)
        cursor = self._editor.textCursor()
        if not visual:
            cursor.clearSelection()
            if key in {"p", "gp", "]p"} and not cursor.atBlockEnd():
                cursor.movePosition(QTextCursor.MoveOperation.NextCharacter)
        with self.atomic(self.document):
            cursor.insertText("".join([snapshot.as_text()] * max(1, count)))
        self._editor.setTextCursor(cursor)

    def schedule_apply(self, token: Callable[[], Any]) -> Any:
        self._last_token = token
        self._pending = ('"', 1)
        return token()

    # ------------------------------------------------------------------
    # Optional capabilities
    # ------------------------------------------------------------------
    def evaluate_indent_expression(self, buffer_id: Any, row: int) -> Any:
        return evaluate_expression(self._indent_expression, row, self.text_lines(), self._options)

    def get_structural_parse(self, buffer_id: Any) -> ScopeNode | None:
        return parse_structure(self._structure_parsers, self._filetype, self.text_lines())

    def smallest_node_at(self, tree: ScopeNode, row: int) -> ScopeNode | None:
        return smallest_node_at(tree, row)

    def _apply_tab_stop(self) -> None:
        metrics = self._editor.fontMetrics()
        self._editor.setTabStopDistance(metrics.horizontalAdvance(" ") * max(1, self._options.tab_width))


__all__ = ["QtEditorHost"]
