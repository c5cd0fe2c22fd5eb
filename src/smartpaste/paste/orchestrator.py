"""Paste orchestration: capture an invocation, plan the re-indented block, apply it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..core.registers import Eligible, RegisterKind, classify, replicate
from ..editor.host import BufferId, EditorHost
from ..indent.delta import apply_delta
from ..indent.resolver import IndentResolver, source_indent
from ..indent.scope import ScopeBoundaryResolver
from .invocation import DEFAULT_REGISTER, InvocationState, KeyEntry, ReplayToken, key_entry_for

LOGGER = logging.getLogger(__name__)


class SelectionKind(Enum):
    CHARWISE = "v"
    LINEWISE = "V"
    BLOCKWISE = "\x16"

    @classmethod
    def coerce(cls, value: "SelectionKind | str") -> "SelectionKind":
        if isinstance(value, SelectionKind):
            return value
        if value in {"V", "linewise"}:
            return cls.LINEWISE
        if value.startswith("\x16") or value == "blockwise":
            return cls.BLOCKWISE
        return cls.CHARWISE


@dataclass(frozen=True, slots=True)
class PastePlan:
    """Re-indented lines plus where and how they go."""

    buffer_id: BufferId
    lines: tuple[str, ...]
    after: bool
    follow: bool
    source_indent: int
    target_indent: int
    linewise: bool = True

    @property
    def delta(self) -> int:
        return self.target_indent - self.source_indent


@dataclass(frozen=True, slots=True)
class NativeReplay:
    """Instruction to let the host perform its own paste."""

    register: str
    count: int
    key: str
    reason: str
    visual: bool = False


class PasteOrchestrator:
    """Drives classifier, resolvers and delta transform for one host."""

    def __init__(
        self,
        host: EditorHost,
        resolver: IndentResolver | None = None,
        *,
        scope_node_types: Iterable[str] | None = None,
    ) -> None:
        self._host = host
        self._resolver = resolver or IndentResolver.for_host(host, scope_node_types=scope_node_types)
        self._scope = ScopeBoundaryResolver(host, self._resolver)
        self._slot: InvocationState | None = None

    @property
    def resolver(self) -> IndentResolver:
        return self._resolver

    @property
    def scope(self) -> ScopeBoundaryResolver:
        return self._scope

    @property
    def last_invocation(self) -> InvocationState | None:
        return self._slot

    # ------------------------------------------------------------------
    # Normal-mode paste
    # ------------------------------------------------------------------
    def capture(
        self,
        entry: KeyEntry | str,
        *,
        register: str | None = None,
        count: int | None = None,
    ) -> ReplayToken:
        """Record register, count and key flags before the host resets them."""

        if isinstance(entry, str):
            entry = key_entry_for(entry)
        if register is None or count is None:
            pending_register, pending_count = self._host.pending_invocation()
            register = pending_register if register is None else register
            count = pending_count if count is None else count
        state = InvocationState.from_entry(entry, register, count)
        self._slot = state
        return ReplayToken(state=state, runner=self.apply)

    def plan(self, state: InvocationState) -> PastePlan | NativeReplay | None:
        """Compute the paste for ``state`` against the current cursor context."""

        snapshot = self._host.get_register(state.register)
        if snapshot is None or snapshot.is_empty:
            LOGGER.debug("Register %r is empty; nothing to paste", state.register)
            return None

        verdict = classify(
            snapshot,
            register=state.register,
            count=state.count,
            key=state.key,
            charwise_newline=state.charwise_newline,
        )
        if not isinstance(verdict, Eligible):
            return NativeReplay(verdict.register, verdict.count, verdict.key, verdict.reason)

        lines = list(verdict.lines)
        if verdict.converted_charwise:
            lines[0] = lines[0].lstrip()

        buffer_id = self._host.current_buffer()
        options = self._host.get_format_options(buffer_id)
        source = source_indent(lines, options.tab_width)
        row = self._host.get_cursor(buffer_id)
        target = self._scope.resolve_target(buffer_id, row, state.after)
        adjusted = apply_delta(lines, target - source, options)
        return PastePlan(
            buffer_id=buffer_id,
            lines=tuple(replicate(adjusted, state.count)),
            after=state.after,
            follow=state.follow,
            source_indent=source,
            target_indent=target,
        )

    def apply(self, state: InvocationState | None = None) -> PastePlan | NativeReplay | None:
        """Perform the captured paste as a single insertion (or a native replay)."""

        if state is not None:
            self._slot = state
        state = self._slot
        if state is None:
            LOGGER.debug("apply() called before any capture")
            return None

        outcome = self.plan(state)
        if isinstance(outcome, NativeReplay):
            LOGGER.debug("Replaying native paste for %r (%s)", outcome.register, outcome.reason)
            self._host.replay_native(outcome.register, outcome.count, outcome.key)
        elif isinstance(outcome, PastePlan):
            self._host.insert_lines(
                outcome.buffer_id,
                list(outcome.lines),
                linewise=outcome.linewise,
                after=outcome.after,
                follow=outcome.follow,
            )
        return outcome

    # ------------------------------------------------------------------
    # Selection replace
    # ------------------------------------------------------------------
    def apply_to_selection(
        self,
        register: str | None,
        key: str | None,
        selection_kind: SelectionKind | str,
        count_override: int | None = None,
    ) -> PastePlan | NativeReplay | None:
        """Replace a linewise selection with the re-indented register content."""

        register = register or DEFAULT_REGISTER
        key = key or "p"
        count = count_override if count_override and count_override > 0 else self._host.pending_invocation()[1]
        count = max(1, count)

        if SelectionKind.coerce(selection_kind) is not SelectionKind.LINEWISE:
            return self._replay_visual(register, count, key, "selection_not_linewise")

        snapshot = self._host.get_register(register)
        if snapshot is None or snapshot.is_empty:
            return None
        if snapshot.kind is not RegisterKind.LINEWISE:
            return self._replay_visual(register, count, key, f"register_{snapshot.kind.value}")

        buffer_id = self._host.current_buffer()
        rows = self._host.get_selection_rows(buffer_id)
        if rows is None:
            return None
        start, end = sorted(rows)

        options = self._host.get_format_options(buffer_id)
        target = self._scope.baseline_indent(buffer_id, start)
        source = source_indent(snapshot.lines, options.tab_width)
        final_lines = replicate(apply_delta(snapshot.lines, target - source, options), count)
        covers_all = start == 0 and end >= self._host.line_count(buffer_id) - 1

        with self._host.atomic(buffer_id):
            self._host.delete_range(buffer_id, start, end + 1)
            remaining = self._host.line_count(buffer_id)
            after = not covers_all and start >= remaining
            self._host.set_cursor(buffer_id, max(0, min(start, remaining - 1)))
            self._host.insert_lines(buffer_id, final_lines, linewise=True, after=after, follow=False)
            if covers_all:
                self._trim_artifact(buffer_id, len(final_lines))

        return PastePlan(
            buffer_id=buffer_id,
            lines=tuple(final_lines),
            after=after,
            follow=False,
            source_indent=source,
            target_indent=target,
        )

    def _trim_artifact(self, buffer_id: BufferId, expected: int) -> None:
        total = self._host.line_count(buffer_id)
        if total <= expected:
            return
        if self._host.get_lines(buffer_id, total - 1, total) == [""]:
            self._host.delete_range(buffer_id, total - 1, total)

    def _replay_visual(self, register: str, count: int, key: str, reason: str) -> NativeReplay:
        LOGGER.debug("Replaying native selection paste for %r (%s)", register, reason)
        self._host.replay_native(register, count, key, visual=True)
        return NativeReplay(register, count, key, reason, visual=True)


__all__ = ["NativeReplay", "PasteOrchestrator", "PastePlan", "SelectionKind"]
