"""Indent resolution: oracles, the heuristic cascade, scope boundaries and delta shifting."""

from .delta import apply_delta
from .expression import evaluate_indent_expression
from .oracles import ExpressionIndentOracle, IndentOracle, ScopeDepthOracle, oracles_for_host
from .resolver import IndentResolver, source_indent
from .scope import ScopeBoundaryResolver, ScopeClassification, classify_line
from .structure import DEFAULT_SCOPE_NODE_TYPES, PythonStructure, ScopeNode

__all__ = [
    "DEFAULT_SCOPE_NODE_TYPES",
    "ExpressionIndentOracle",
    "IndentOracle",
    "IndentResolver",
    "PythonStructure",
    "ScopeBoundaryResolver",
    "ScopeClassification",
    "ScopeDepthOracle",
    "ScopeNode",
    "apply_delta",
    "classify_line",
    "evaluate_indent_expression",
    "oracles_for_host",
    "source_indent",
]
