"""Error types raised by smartpaste components."""

from __future__ import annotations


class SmartPasteError(RuntimeError):
    """Base class for smartpaste failures that carry a machine-readable reason."""

    def __init__(self, message: str, *, reason: str = "internal_error") -> None:
        super().__init__(message)
        self.reason = reason

    def details(self) -> dict[str, str]:
        return {"reason": self.reason, "message": str(self)}


class IndentExpressionError(SmartPasteError):
    """Raised when a per-buffer indent expression cannot be evaluated."""

    def __init__(self, message: str, *, reason: str = "invalid_expression", expression: str | None = None) -> None:
        super().__init__(message, reason=reason)
        self.expression = expression

    def details(self) -> dict[str, str]:
        payload = super().details()
        if self.expression is not None:
            payload["expression"] = self.expression
        return payload


class SettingsError(SmartPasteError):
    """Raised when a settings payload fails validation in strict mode."""

    def __init__(self, message: str, *, reason: str = "invalid_settings", path: str | None = None) -> None:
        super().__init__(message, reason=reason)
        self.path = path


__all__ = ["IndentExpressionError", "SettingsError", "SmartPasteError"]
