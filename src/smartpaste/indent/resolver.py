"""Indent resolution: how deep is the register content, how deep should it land.

``target_indent`` runs a three-tier cascade. The first oracle with an answer
wins (explicit indent expression, then structural scope depth); the
nearest-nonblank-line heuristic is always computed and replaces any oracle
answer that strays more than one shift width away from it.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..core.whitespace import DEFAULT_TAB_WIDTH, is_blank, leading_width
from ..editor.host import BufferId, EditorHost, FormatOptions
from .oracles import IndentOracle, oracles_for_host

LOGGER = logging.getLogger(__name__)


def source_indent(lines: Sequence[str], tab_width: int = DEFAULT_TAB_WIDTH) -> int:
    """Return the visual indent of the first non-blank line (0 if none)."""

    for line in lines:
        if not is_blank(line):
            return leading_width(line, tab_width)
    return 0


class IndentResolver:
    """Computes source and target indentation for a host's buffers."""

    def __init__(self, host: EditorHost, oracles: Iterable[IndentOracle] = ()) -> None:
        self._host = host
        self._oracles: tuple[IndentOracle, ...] = tuple(oracles)

    @classmethod
    def for_host(cls, host: EditorHost, *, scope_node_types: Iterable[str] | None = None) -> "IndentResolver":
        return cls(host, oracles_for_host(host, scope_node_types=scope_node_types))

    @property
    def oracles(self) -> tuple[IndentOracle, ...]:
        return self._oracles

    def source_indent(self, lines: Sequence[str], tab_width: int = DEFAULT_TAB_WIDTH) -> int:
        return source_indent(lines, tab_width)

    def heuristic_indent(self, buffer_id: BufferId, row: int, options: FormatOptions | None = None) -> int:
        """Indent of the nearest non-blank line at or above ``row``."""

        options = options or self._host.get_format_options(buffer_id)
        lines = self._host.get_lines(buffer_id, 0, row + 1)
        for candidate in range(min(row, len(lines) - 1), -1, -1):
            line = lines[candidate]
            if not is_blank(line):
                return leading_width(line, options.tab_width)
        return 0

    def target_indent(self, buffer_id: BufferId, row: int) -> int:
        """Visual-column indent new content at ``row`` should receive."""

        total = self._host.line_count(buffer_id)
        row = max(0, min(row, total - 1)) if total else 0
        options = self._host.get_format_options(buffer_id)
        heuristic = self.heuristic_indent(buffer_id, row, options)

        for oracle in self._oracles:
            answer = oracle.indent_for(buffer_id, row, options)
            if answer is None:
                continue
            if abs(answer - heuristic) > options.effective_shift_width:
                LOGGER.debug(
                    "Discarding %s indent %d for row %d; heuristic says %d",
                    oracle.name,
                    answer,
                    row,
                    heuristic,
                )
                return heuristic
            return answer
        return heuristic


__all__ = ["IndentResolver", "source_indent"]
