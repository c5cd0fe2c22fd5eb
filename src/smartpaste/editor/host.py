"""Protocols describing what smartpaste consumes from and emits to a host editor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ContextManager, Hashable, Protocol, Sequence, runtime_checkable

from ..core.registers import RegisterSnapshot

BufferId = Hashable


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Per-buffer formatting options used when measuring and rendering indent."""

    use_spaces: bool = True
    tab_width: int = 8
    shift_width: int = 8

    @property
    def effective_shift_width(self) -> int:
        """Shift width with ``0`` ("auto") falling back to the tab width."""

        if self.shift_width > 0:
            return self.shift_width
        return self.tab_width if self.tab_width > 0 else 8


class StructuralNode(Protocol):
    """Node of a structural parse tree, addressed by 0-based rows."""

    type: str
    start_row: int
    end_row: int
    parent: "StructuralNode | None"


class EditorHost(Protocol):
    """Required host surface: buffers, cursor, registers and edit effects."""

    def current_buffer(self) -> BufferId:
        ...

    def line_count(self, buffer_id: BufferId) -> int:
        ...

    def get_lines(self, buffer_id: BufferId, start: int, end: int) -> list[str]:
        ...

    def get_cursor(self, buffer_id: BufferId) -> int:
        ...

    def set_cursor(self, buffer_id: BufferId, row: int) -> None:
        ...

    def get_selection_rows(self, buffer_id: BufferId) -> tuple[int, int] | None:
        ...

    def get_format_options(self, buffer_id: BufferId) -> FormatOptions:
        ...

    def get_filetype(self, buffer_id: BufferId) -> str:
        ...

    def get_register(self, name: str) -> RegisterSnapshot | None:
        ...

    def pending_invocation(self) -> tuple[str, int]:
        """Return the ambient register name and count (at least 1)."""
        ...

    def insert_lines(
        self,
        buffer_id: BufferId,
        lines: Sequence[str],
        *,
        linewise: bool,
        after: bool,
        follow: bool,
    ) -> None:
        ...

    def delete_range(self, buffer_id: BufferId, start: int, end: int) -> None:
        ...

    def atomic(self, buffer_id: BufferId) -> ContextManager[Any]:
        """Group every edit made inside the block into a single undo step."""
        ...

    def replay_native(self, register: str, count: int, key: str, *, visual: bool = False) -> None:
        ...

    def schedule_apply(self, token: Any) -> None:
        ...


@runtime_checkable
class IndentExpressionProvider(Protocol):
    """Optional capability: a custom per-buffer indent evaluator."""

    def evaluate_indent_expression(self, buffer_id: BufferId, row: int) -> int | float | None:
        ...


@runtime_checkable
class StructureProvider(Protocol):
    """Optional capability: a structural parse of the buffer."""

    def get_structural_parse(self, buffer_id: BufferId) -> Any | None:
        ...

    def smallest_node_at(self, tree: Any, row: int) -> StructuralNode | None:
        ...


__all__ = [
    "BufferId",
    "EditorHost",
    "FormatOptions",
    "IndentExpressionProvider",
    "StructuralNode",
    "StructureProvider",
]
