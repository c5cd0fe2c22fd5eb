"""Restricted evaluator for per-buffer indent expressions.

Expressions use Python syntax but only a tiny, side-effect free subset of it:
integer arithmetic, comparisons, ``and``/``or``/``not``, conditional
expressions, the names ``lnum`` (1-based target line), ``shiftwidth``/``sw``
and ``tabstop``/``ts``, and the helpers ``indent(lnum)``,
``prevnonblank(lnum)`` and ``nextnonblank(lnum)``. The expression is parsed
with :mod:`ast` and walked node by node; nothing is ever passed to ``eval``.
"""

from __future__ import annotations

import ast
import operator
from typing import Any, Callable, Sequence

from ..core.whitespace import is_blank, leading_width
from ..editor.host import FormatOptions
from ..errors import IndentExpressionError

_BINARY_OPS: dict[type[ast.operator], Callable[[int, int], int]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
}

_COMPARE_OPS: dict[type[ast.cmpop], Callable[[int, int], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}


def evaluate_indent_expression(
    expression: str,
    row: int,
    lines: Sequence[str],
    options: FormatOptions,
) -> int:
    """Evaluate ``expression`` for the 0-based ``row`` of ``lines``."""

    source = (expression or "").strip()
    if not source:
        raise IndentExpressionError("Indent expression is empty", reason="empty_expression")
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as exc:
        raise IndentExpressionError(
            f"Indent expression is not valid syntax: {exc.msg}",
            reason="syntax_error",
            expression=source,
        ) from exc
    return _ExpressionWalker(source, row, lines, options).value(tree.body)


class _ExpressionWalker:
    def __init__(self, source: str, row: int, lines: Sequence[str], options: FormatOptions) -> None:
        self._source = source
        self._lines = lines
        self._options = options
        self._names: dict[str, int] = {
            "lnum": row + 1,
            "shiftwidth": options.effective_shift_width,
            "sw": options.effective_shift_width,
            "tabstop": options.tab_width,
            "ts": options.tab_width,
        }
        self._functions: dict[str, Callable[[int], int]] = {
            "indent": self._indent,
            "prevnonblank": self._prevnonblank,
            "nextnonblank": self._nextnonblank,
        }

    def value(self, node: ast.AST) -> int:
        result = self._visit(node)
        if isinstance(result, bool):
            return int(result)
        return result

    def _visit(self, node: ast.AST) -> Any:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, int):
                raise self._error(f"Unsupported literal {node.value!r}", "unsupported_literal")
            return node.value
        if isinstance(node, ast.Name):
            if node.id not in self._names:
                raise self._error(f"Unknown name '{node.id}'", "unknown_name")
            return self._names[node.id]
        if isinstance(node, ast.UnaryOp):
            operand = self.value(node.operand)
            if isinstance(node.op, ast.USub):
                return -operand
            if isinstance(node.op, ast.UAdd):
                return operand
            if isinstance(node.op, ast.Not):
                return not operand
        if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
            left = self.value(node.left)
            right = self.value(node.right)
            try:
                return _BINARY_OPS[type(node.op)](left, right)
            except ZeroDivisionError as exc:
                raise self._error("Division by zero", "division_by_zero") from exc
        if isinstance(node, ast.Compare):
            left = self.value(node.left)
            for op, comparator in zip(node.ops, node.comparators):
                if type(op) not in _COMPARE_OPS:
                    break
                right = self.value(comparator)
                if not _COMPARE_OPS[type(op)](left, right):
                    return False
                left = right
            else:
                return True
        if isinstance(node, ast.BoolOp):
            values = (self.value(item) for item in node.values)
            if isinstance(node.op, ast.And):
                return all(values)
            return any(values)
        if isinstance(node, ast.IfExp):
            return self.value(node.body) if self.value(node.test) else self.value(node.orelse)
        if isinstance(node, ast.Call):
            return self._call(node)
        raise self._error(f"Unsupported syntax: {type(node).__name__}", "unsupported_syntax")

    def _call(self, node: ast.Call) -> int:
        if not isinstance(node.func, ast.Name) or node.func.id not in self._functions:
            raise self._error("Only indent(), prevnonblank() and nextnonblank() may be called", "unknown_function")
        if len(node.args) != 1 or node.keywords:
            raise self._error(f"{node.func.id}() takes exactly one argument", "bad_arguments")
        return self._functions[node.func.id](self.value(node.args[0]))

    def _indent(self, lnum: int) -> int:
        if lnum < 1 or lnum > len(self._lines):
            return -1
        return leading_width(self._lines[lnum - 1], self._options.tab_width)

    def _prevnonblank(self, lnum: int) -> int:
        lnum = min(lnum, len(self._lines))
        while lnum >= 1:
            if not is_blank(self._lines[lnum - 1]):
                return lnum
            lnum -= 1
        return 0

    def _nextnonblank(self, lnum: int) -> int:
        lnum = max(lnum, 1)
        while lnum <= len(self._lines):
            if not is_blank(self._lines[lnum - 1]):
                return lnum
            lnum += 1
        return 0

    def _error(self, message: str, reason: str) -> IndentExpressionError:
        return IndentExpressionError(message, reason=reason, expression=self._source)


__all__ = ["evaluate_indent_expression"]
