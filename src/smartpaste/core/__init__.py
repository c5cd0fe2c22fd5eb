"""Core value types shared by the indent engine and the paste orchestrator."""

from .registers import Eligible, Ineligible, RegisterKind, RegisterSnapshot, classify
from .whitespace import display_width, is_blank, leading_whitespace, leading_width, render_indent

__all__ = [
    "Eligible",
    "Ineligible",
    "RegisterKind",
    "RegisterSnapshot",
    "classify",
    "display_width",
    "is_blank",
    "leading_whitespace",
    "leading_width",
    "render_indent",
]
