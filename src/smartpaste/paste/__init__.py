"""Paste orchestration entry points."""

from .invocation import INFERRED_FLAGS, InvocationState, KeyEntry, ReplayToken, VISUAL_ELIGIBLE, key_entry_for
from .orchestrator import NativeReplay, PasteOrchestrator, PastePlan, SelectionKind

__all__ = [
    "INFERRED_FLAGS",
    "InvocationState",
    "KeyEntry",
    "NativeReplay",
    "PasteOrchestrator",
    "PastePlan",
    "ReplayToken",
    "SelectionKind",
    "VISUAL_ELIGIBLE",
    "key_entry_for",
]
