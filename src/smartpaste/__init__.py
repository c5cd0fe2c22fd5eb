"""Indentation-aware paste for text editors.

The :class:`~smartpaste.plugin.SmartPaste` facade re-indents linewise
register content to the indent of the insertion point while keeping the
block's relative indentation intact. Hosts implement
:class:`~smartpaste.editor.host.EditorHost`; an in-memory host and a PySide6
adapter ship with the package.
"""

from .errors import IndentExpressionError, SettingsError, SmartPasteError
from .plugin import SmartPaste
from .services.settings import Settings, SettingsStore

__all__ = [
    "IndentExpressionError",
    "Settings",
    "SettingsError",
    "SettingsStore",
    "SmartPaste",
    "SmartPasteError",
    "__version__",
]

__version__ = "0.1.0"
