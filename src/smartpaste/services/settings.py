"""Settings dataclasses, key entry normalization and persistence helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Sequence

import jsonschema
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import SettingsError
from ..paste.invocation import INFERRED_FLAGS, KeyEntry, key_entry_for

__all__ = [
    "DEFAULT_KEYS",
    "SETTINGS_SCHEMA",
    "Settings",
    "SettingsStore",
    "normalize_key_entries",
    "normalize_key_entry",
    "validate_settings_payload",
]

LOGGER = logging.getLogger(__name__)
_SETTINGS_DIR = Path.home() / ".smartpaste"
_DEFAULT_SETTINGS_PATH = _SETTINGS_DIR / "settings.json"
_SETTINGS_VERSION = 1
_YAML_SUFFIXES = {".yaml", ".yml"}
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_LIST_ENV_OVERRIDES: Mapping[str, str] = {
    "SMARTPASTE_EXCLUDE_FILETYPES": "exclude_filetypes",
    "SMARTPASTE_SCOPE_NODE_TYPES": "scope_node_types",
}
_BOOL_ENV_OVERRIDES: Mapping[str, str] = {
    "SMARTPASTE_DEBUG_LOGGING": "debug_logging",
}
MAX_SCHEMA_ERRORS = 25

DEFAULT_KEYS: tuple[str, ...] = ("p", "P", "gp", "gP")

_KEY_OBJECT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "lhs": {"type": "string", "minLength": 1},
        "like": {"type": "string", "minLength": 1},
        "after": {"type": "boolean"},
        "follow": {"type": "boolean"},
        "charwise_newline": {"type": "boolean"},
    },
}

SETTINGS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "version": {"type": "integer"},
        "keys": {
            "type": "array",
            "items": {"anyOf": [{"type": "string", "minLength": 1}, _KEY_OBJECT_SCHEMA]},
        },
        "exclude_filetypes": {"type": "array", "items": {"type": "string"}},
        "scope_node_types": {"type": "array", "items": {"type": "string"}},
        "debug_logging": {"type": "boolean"},
    },
}


@dataclass(slots=True)
class Settings:
    """User-configurable smartpaste settings."""

    keys: list[Any] = field(default_factory=lambda: list(DEFAULT_KEYS))
    exclude_filetypes: list[str] = field(default_factory=list)
    scope_node_types: list[str] = field(default_factory=list)
    debug_logging: bool = False

    def key_entries(self) -> tuple[KeyEntry, ...]:
        return normalize_key_entries(self.keys)


def normalize_key_entry(entry: Any) -> KeyEntry | None:
    """Normalize a string or mapping key entry; invalid entries return ``None``.

    Mapping entries may name a known key in ``like`` to inherit its flags;
    explicitly given flags always win. Without ``like``, unset flags are off.
    """

    if isinstance(entry, str):
        return key_entry_for(entry) if entry else None
    if not isinstance(entry, Mapping):
        return None
    lhs = entry.get("lhs")
    if not isinstance(lhs, str) or not lhs:
        return None
    base = KeyEntry(lhs, after=False, follow=False, charwise_newline=False)
    like = entry.get("like")
    if isinstance(like, str):
        inherited = INFERRED_FLAGS.get(like)
        if inherited is None:
            LOGGER.warning("Key entry %r inherits from unknown key %r; using defaults", lhs, like)
        else:
            base = replace(inherited, lhs=lhs)
    return KeyEntry(
        lhs=lhs,
        after=bool(entry.get("after", base.after)),
        follow=bool(entry.get("follow", base.follow)),
        charwise_newline=bool(entry.get("charwise_newline", base.charwise_newline)),
    )


def normalize_key_entries(entries: Iterable[Any]) -> tuple[KeyEntry, ...]:
    """Normalize every entry, skipping invalid ones; a later ``lhs`` replaces an earlier one."""

    normalized: dict[str, KeyEntry] = {}
    for entry in entries:
        key = normalize_key_entry(entry)
        if key is None:
            LOGGER.warning("Skipping invalid key entry: %r", entry)
            continue
        normalized[key.lhs] = key
    return tuple(normalized.values())


def validate_settings_payload(payload: Any) -> list[str]:
    """Validate a raw settings payload and return readable error messages."""

    validator = jsonschema.Draft202012Validator(SETTINGS_SCHEMA)
    errors: list[str] = []
    for issue in validator.iter_errors(payload):
        path = _format_schema_path(issue.absolute_path)
        errors.append(f"{path}: {issue.message}" if path else issue.message)
        if len(errors) >= MAX_SCHEMA_ERRORS:
            errors.append("Too many validation errors; stopping early.")
            break
    return errors


class SettingsStore:
    """Persistence adapter for :class:`Settings` (JSON or YAML files)."""

    def __init__(self, path: Path | str | None = None) -> None:
        self._path = Path(path) if path is not None else _DEFAULT_SETTINGS_PATH

    @property
    def path(self) -> Path:
        """Return the resolved path backing this store."""

        return self._path

    def load(self, overrides: Mapping[str, Any] | None = None, *, strict: bool = False) -> Settings:
        """Load settings from disk, applying explicit then environment overrides."""

        payload = self._read_payload(strict=strict)
        settings = Settings()
        if payload:
            errors = validate_settings_payload(payload)
            if errors:
                if strict:
                    raise SettingsError("; ".join(errors), path=str(self._path))
                LOGGER.warning("Settings file %s failed validation: %s", self._path, "; ".join(errors))
            else:
                settings = Settings(**_filter_fields(payload))
            LOGGER.debug("Settings loaded from %s: %d key entries", self._path, len(settings.keys))

        if overrides:
            settings = self._apply_overrides(settings, overrides, source="runtime")
        return self._apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        """Persist settings with an atomic write."""

        data = asdict(settings)
        data["version"] = _SETTINGS_VERSION
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        if self._path.suffix in _YAML_SUFFIXES:
            yaml = YAML(typ="safe")
            yaml.default_flow_style = False
            with tmp_path.open("w", encoding="utf-8") as handle:
                yaml.dump(data, handle)
        else:
            tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self._path)
        LOGGER.debug("Settings saved to %s", self._path)
        return self._path

    def _read_payload(self, *, strict: bool) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
            if self._path.suffix in _YAML_SUFFIXES:
                payload = YAML(typ="safe").load(text)
            else:
                payload = json.loads(text)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, YAMLError) as exc:
            if strict:
                raise SettingsError(f"Settings file is not parseable: {exc}", reason="parse_error", path=str(self._path)) from exc
            LOGGER.warning("Settings file %s is not parseable: %s", self._path, exc)
            return {}
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            if strict:
                raise SettingsError("Settings payload must be a mapping", path=str(self._path))
            LOGGER.warning("Settings file %s does not contain a mapping", self._path)
            return {}
        return payload

    def _apply_overrides(self, settings: Settings, overrides: Mapping[str, Any], *, source: str) -> Settings:
        allowed = {item.name for item in fields(Settings)}
        filtered: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in allowed:
                LOGGER.debug("Ignoring unknown %s override %r", source, key)
                continue
            filtered[key] = value
        if not filtered:
            return settings
        return replace(settings, **filtered)

    def _apply_env_overrides(self, settings: Settings) -> Settings:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _LIST_ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None:
                continue
            overrides[field_name] = [item.strip() for item in raw.split(",") if item.strip()]
        for env_name, field_name in _BOOL_ENV_OVERRIDES.items():
            raw = os.environ.get(env_name)
            if raw is None:
                continue
            overrides[field_name] = raw.strip().lower() in _TRUE_VALUES
        if not overrides:
            return settings
        return self._apply_overrides(settings, overrides, source="environment")


def _filter_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    allowed = {item.name for item in fields(Settings)}
    return {key: value for key, value in payload.items() if key in allowed}


def _format_schema_path(path: Sequence[Any]) -> str:
    if not path:
        return ""
    components: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            if components:
                components[-1] = f"{components[-1]}[{segment}]"
            else:
                components.append(f"[{segment}]")
        else:
            components.append(str(segment))
    return ".".join(filter(None, components))
