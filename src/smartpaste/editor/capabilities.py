"""Shared implementations of the optional indent capabilities for bundled hosts."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence, Union

from ..editor.host import FormatOptions
from ..indent.expression import evaluate_indent_expression
from ..indent.structure import PythonStructure, ScopeNode

IndentExpression = Union[str, Callable[[int], Any]]


def default_structure_parsers() -> dict[str, PythonStructure]:
    return {"python": PythonStructure()}


def evaluate_expression(
    expression: IndentExpression | None,
    row: int,
    lines: Sequence[str],
    options: FormatOptions,
) -> Any:
    """Evaluate a buffer's indent expression; ``None`` when it declares none."""

    if expression is None or (isinstance(expression, str) and not expression.strip()):
        return None
    if callable(expression):
        return expression(row)
    return evaluate_indent_expression(expression, row, lines, options)


def parse_structure(parsers: Mapping[str, Any], filetype: str, lines: Sequence[str]) -> ScopeNode | None:
    parser = parsers.get(filetype)
    if parser is None:
        return None
    return parser.parse(lines)
