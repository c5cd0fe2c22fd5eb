"""Service layer: settings persistence."""

from .settings import Settings, SettingsStore, normalize_key_entries, normalize_key_entry

__all__ = ["Settings", "SettingsStore", "normalize_key_entries", "normalize_key_entry"]
