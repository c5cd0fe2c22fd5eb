"""Structural parse trees used by the scope-depth indent tier.

``PythonStructure`` turns a Python buffer into a light tree of
:class:`ScopeNode` objects using the standard :mod:`ast` module. Node types are
snake_case versions of the AST class names (``function_def``, ``if``,
``for``...), with two renames that keep depth counting honest: ``elif``
branches become ``elif_clause`` and ``except`` handlers become
``except_handler``. Buffers that do not parse have no structure.
"""

from __future__ import annotations

import ast
import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Sequence

LOGGER = logging.getLogger(__name__)

DEFAULT_SCOPE_NODE_TYPES: frozenset[str] = frozenset(
    {
        # function / method / class definitions
        "function_def",
        "async_function_def",
        "function_definition",
        "function_declaration",
        "method_definition",
        "method_declaration",
        "class_def",
        "class_definition",
        # conditionals
        "if",
        "if_statement",
        "match",
        "match_statement",
        "match_case",
        "switch_statement",
        "case_clause",
        # loops
        "for",
        "async_for",
        "while",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "do_statement",
        "repeat_statement",
        # blocks and bodies
        "with",
        "async_with",
        "try",
        "try_star",
        "with_statement",
        "try_statement",
        "block",
        "body",
        "statement_block",
        "compound_statement",
        # container literals
        "dict",
        "list",
        "set",
        "tuple",
        "dictionary",
        "array",
        "object",
        "table_constructor",
    }
)

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(slots=True, eq=False)
class ScopeNode:
    """Node of a structural parse tree addressed by 0-based, inclusive rows."""

    type: str
    start_row: int
    end_row: int
    parent: "ScopeNode | None" = None
    children: list["ScopeNode"] = field(default_factory=list)

    def covers(self, row: int) -> bool:
        return self.start_row <= row <= self.end_row

    @property
    def is_multiline(self) -> bool:
        return self.end_row > self.start_row

    def walk(self) -> Iterator["ScopeNode"]:
        """Yield this node and its descendants in pre-order."""

        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def ancestors(self) -> Iterator["ScopeNode"]:
        node: ScopeNode | None = self
        while node is not None:
            yield node
            node = node.parent


def smallest_node_at(root: ScopeNode, row: int) -> ScopeNode | None:
    """Return the narrowest node covering ``row`` (deepest wins on ties)."""

    best: ScopeNode | None = None
    for node in root.walk():
        if not node.covers(row):
            continue
        if best is None or (node.end_row - node.start_row) <= (best.end_row - best.start_row):
            best = node
    return best


class PythonStructure:
    """Structural parser for Python buffers backed by :mod:`ast`."""

    language = "python"

    def parse(self, lines: Sequence[str]) -> ScopeNode | None:
        source = "\n".join(lines)
        try:
            tree = ast.parse(source)
        except (SyntaxError, ValueError) as exc:
            LOGGER.debug("Python structure unavailable: %s", exc)
            return None
        root = ScopeNode(type="module", start_row=0, end_row=max(0, len(lines) - 1))
        for child in ast.iter_child_nodes(tree):
            self._attach(child, root, lines)
        return root

    def smallest_node_at(self, tree: ScopeNode, row: int) -> ScopeNode | None:
        return smallest_node_at(tree, row)

    def _attach(self, node: ast.AST, parent: ScopeNode, lines: Sequence[str]) -> None:
        span = _node_span(node)
        if span is None:
            # expression contexts and operators carry no rows
            return
        scope = ScopeNode(type=_node_type(node, parent, lines), start_row=span[0], end_row=span[1], parent=parent)
        parent.children.append(scope)
        for child in ast.iter_child_nodes(node):
            self._attach(child, scope, lines)


def _node_span(node: ast.AST) -> tuple[int, int] | None:
    lineno = getattr(node, "lineno", None)
    if lineno is not None:
        end_lineno = getattr(node, "end_lineno", None) or lineno
        return lineno - 1, end_lineno - 1
    rows = [span for child in ast.iter_child_nodes(node) if (span := _node_span(child)) is not None]
    if not rows:
        return None
    return min(start for start, _ in rows), max(end for _, end in rows)


def _node_type(node: ast.AST, parent: ScopeNode, lines: Sequence[str]) -> str:
    if isinstance(node, ast.ExceptHandler):
        return "except_handler"
    if isinstance(node, ast.If) and parent.type in {"if", "elif_clause"}:
        row = node.lineno - 1
        if 0 <= row < len(lines) and lines[row].lstrip().startswith("elif"):
            return "elif_clause"
    return _CAMEL_BOUNDARY_RE.sub("_", type(node).__name__).lower()


__all__ = ["DEFAULT_SCOPE_NODE_TYPES", "PythonStructure", "ScopeNode", "smallest_node_at"]
