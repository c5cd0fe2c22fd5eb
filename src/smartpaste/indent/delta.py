"""Shift a block of lines by a signed number of visual columns."""

from __future__ import annotations

from typing import Sequence

from ..core.whitespace import display_width, is_blank, leading_whitespace, render_indent
from ..editor.host import FormatOptions


def apply_delta(lines: Sequence[str], delta: int, options: FormatOptions) -> list[str]:
    """Return ``lines`` re-indented by ``delta`` columns.

    Blank lines are copied unchanged. Each non-blank line's leading whitespace
    is measured in visual columns, shifted, clamped at zero and re-rendered with
    the destination's tabs-vs-spaces convention. The input is never mutated.
    """

    if delta == 0:
        return list(lines)

    result: list[str] = []
    for line in lines:
        if is_blank(line):
            result.append(line)
            continue
        leading = leading_whitespace(line)
        columns = max(0, display_width(leading, options.tab_width) + delta)
        indent = render_indent(columns, use_spaces=options.use_spaces, tab_width=options.tab_width)
        result.append(indent + line[len(leading):])
    return result


__all__ = ["apply_delta"]
