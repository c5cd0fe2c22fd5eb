"""User-facing entry point wiring settings, host and orchestrator together."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from .editor.host import EditorHost
from .indent.structure import DEFAULT_SCOPE_NODE_TYPES
from .paste.invocation import VISUAL_ELIGIBLE, KeyEntry
from .paste.orchestrator import NativeReplay, PasteOrchestrator, SelectionKind
from .services.settings import Settings, SettingsStore
from .utils.logging import set_debug

LOGGER = logging.getLogger(__name__)


class SmartPaste:
    """Dispatches paste keys for one editor host.

    Keys come from :attr:`Settings.keys`; pressing a key that was not
    configured raises :class:`KeyError`. Buffers whose filetype is listed in
    ``exclude_filetypes`` always get the host's native paste.

    Every press goes through :meth:`EditorHost.schedule_apply`, so a pending
    register or count prefix is consumed whichever path handles the key.

    When ``debug_logging`` is set, construction calls :func:`set_debug`, which
    lowers the whole ``smartpaste`` logger hierarchy to ``DEBUG`` for the
    process and not only for this instance.
    """

    def __init__(self, host: EditorHost, settings: Settings | None = None) -> None:
        self._host = host
        self._settings = settings or Settings()
        self._keymap = self._settings.key_entries()
        self._entries = {entry.lhs: entry for entry in self._keymap}
        self._excluded = frozenset(self._settings.exclude_filetypes)
        scope_types = DEFAULT_SCOPE_NODE_TYPES | frozenset(self._settings.scope_node_types)
        self._orchestrator = PasteOrchestrator(host, scope_node_types=scope_types)
        if self._settings.debug_logging:
            set_debug(True)
        LOGGER.debug("Smart paste ready for keys: %s", ", ".join(self._entries))

    @classmethod
    def from_store(cls, host: EditorHost, store: SettingsStore | None = None) -> "SmartPaste":
        """Build an instance from settings persisted on disk."""

        return cls(host, (store or SettingsStore()).load())

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def keymap(self) -> tuple[KeyEntry, ...]:
        return self._keymap

    @property
    def orchestrator(self) -> PasteOrchestrator:
        return self._orchestrator

    def press(self, lhs: str, *, register: str | None = None, count: int | None = None) -> Any:
        """Handle a normal-mode paste key."""

        entry = self._entry(lhs)
        if self._is_excluded():
            register, count = self._resolve_pending(register, count)
            token = partial(self._native, register, count, entry.lhs, "excluded_filetype")
            return self._host.schedule_apply(token)
        token = self._orchestrator.capture(entry, register=register, count=count)
        return self._host.schedule_apply(token)

    def press_visual(
        self,
        lhs: str,
        selection_kind: SelectionKind | str,
        *,
        register: str | None = None,
        count: int | None = None,
    ) -> Any:
        """Handle a paste key over the active selection."""

        entry = self._entry(lhs)
        register, count = self._resolve_pending(register, count)
        if self._is_excluded() or entry.lhs not in VISUAL_ELIGIBLE:
            reason = "excluded_filetype" if self._is_excluded() else "key_not_visual"
            token = partial(self._native, register, count, entry.lhs, reason, visual=True)
        else:
            token = partial(
                self._orchestrator.apply_to_selection, register, entry.lhs, selection_kind, count
            )
        return self._host.schedule_apply(token)

    def repeat(self) -> Any:
        """Replay the last normal-mode paste at the current cursor."""

        state = self._orchestrator.last_invocation
        if state is None:
            return None
        return self._orchestrator.apply(state.copy())

    def _entry(self, lhs: str) -> KeyEntry:
        try:
            return self._entries[lhs]
        except KeyError:
            raise KeyError(f"No smart paste mapping for {lhs!r}") from None

    def _native(
        self, register: str, count: int, lhs: str, reason: str, *, visual: bool = False
    ) -> NativeReplay:
        self._host.replay_native(register, count, lhs, visual=visual)
        return NativeReplay(register, count, lhs, reason, visual=visual)

    def _is_excluded(self) -> bool:
        if not self._excluded:
            return False
        buffer_id = self._host.current_buffer()
        return self._host.get_filetype(buffer_id) in self._excluded

    def _resolve_pending(self, register: str | None, count: int | None) -> tuple[str, int]:
        pending_register, pending_count = self._host.pending_invocation()
        register = register or pending_register or '"'
        count = count if count and count > 0 else pending_count
        return register, max(1, count)


__all__ = ["SmartPaste"]
