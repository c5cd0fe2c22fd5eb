"""Pluggable indentation oracles consulted before the text heuristic.

Each oracle wraps one optional host capability and answers "how many columns
should new content at this row be indented" or ``None`` when it has no
opinion. Oracles never raise: evaluator and parser failures are logged and
reported as ``None`` so the resolver can fall through to the next tier.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Protocol

from ..core.whitespace import is_blank
from ..editor.host import (
    BufferId,
    EditorHost,
    FormatOptions,
    IndentExpressionProvider,
    StructuralNode,
    StructureProvider,
)
from .structure import DEFAULT_SCOPE_NODE_TYPES

LOGGER = logging.getLogger(__name__)


class IndentOracle(Protocol):
    """Strategy answering the indentation wanted at a buffer row."""

    name: str

    def indent_for(self, buffer_id: BufferId, row: int, options: FormatOptions) -> int | None:
        ...


class ExpressionIndentOracle:
    """Tier 1: the buffer's explicit indent expression."""

    name = "expression"

    def __init__(self, provider: IndentExpressionProvider) -> None:
        self._provider = provider

    def indent_for(self, buffer_id: BufferId, row: int, options: FormatOptions) -> int | None:
        try:
            value = self._provider.evaluate_indent_expression(buffer_id, row)
        except Exception as exc:
            LOGGER.debug("Indent expression failed for buffer %s row %d: %s", buffer_id, row, exc)
            return None
        if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if value < 0:
            return None
        return int(value)


class ScopeDepthOracle:
    """Tier 2: count enclosing scope-bearing nodes of a structural parse."""

    name = "scope_depth"

    def __init__(
        self,
        host: EditorHost,
        provider: StructureProvider,
        *,
        scope_node_types: Iterable[str] | None = None,
    ) -> None:
        self._host = host
        self._provider = provider
        self.scope_node_types = frozenset(scope_node_types or DEFAULT_SCOPE_NODE_TYPES)

    def indent_for(self, buffer_id: BufferId, row: int, options: FormatOptions) -> int | None:
        try:
            tree = self._provider.get_structural_parse(buffer_id)
        except Exception as exc:
            LOGGER.debug("Structural parse failed for buffer %s: %s", buffer_id, exc)
            return None
        if tree is None:
            return None

        lookup_row = self._lookup_row(buffer_id, row)
        if lookup_row is None:
            return None
        try:
            node = self._provider.smallest_node_at(tree, lookup_row)
        except Exception as exc:
            LOGGER.debug("Node lookup failed for buffer %s row %d: %s", buffer_id, lookup_row, exc)
            return None
        if node is None:
            return None
        if lookup_row != row and not (node.start_row <= row <= node.end_row):
            LOGGER.debug("Node at row %d does not reach blank row %d; no scope answer", lookup_row, row)
            return None
        return self.scope_depth(node, row) * options.effective_shift_width

    def scope_depth(self, node: StructuralNode, row: int) -> int:
        """Count multi-line scope-bearing ancestors that enclose ``row``.

        Ancestors opening on ``row`` itself do not contain it, and stacked
        openers sharing a start row count once.
        """

        counted: set[int] = set()
        current: StructuralNode | None = node
        while current is not None:
            if (
                current.type in self.scope_node_types
                and current.end_row > current.start_row
                and current.start_row < row <= current.end_row
                and current.start_row not in counted
            ):
                counted.add(current.start_row)
            current = current.parent
        return len(counted)

    def _lookup_row(self, buffer_id: BufferId, row: int) -> int | None:
        lines = self._host.get_lines(buffer_id, 0, row + 1)
        for candidate in range(min(row, len(lines) - 1), -1, -1):
            if not is_blank(lines[candidate]):
                return candidate
        return None


def oracles_for_host(host: EditorHost, *, scope_node_types: Iterable[str] | None = None) -> list[IndentOracle]:
    """Build the ordered oracle chain from the capabilities ``host`` offers."""

    chain: list[IndentOracle] = []
    if isinstance(host, IndentExpressionProvider):
        chain.append(ExpressionIndentOracle(host))
    if isinstance(host, StructureProvider):
        chain.append(ScopeDepthOracle(host, host, scope_node_types=scope_node_types))
    return chain


__all__ = [
    "ExpressionIndentOracle",
    "IndentOracle",
    "ScopeDepthOracle",
    "oracles_for_host",
]
