from __future__ import annotations
from typing import Any


class ApplicationError(Exception):
    def __init__(self, message, extra=None):
        super().__init__(message)
        self.message = message
        self.extra = extra or {}


class ValidationError(ApplicationError):
    """Erreur de validation métier"""
    pass


class GrammarError(ValidationError):
    """A scanner found no character of its class where at least one is required."""

    def __init__(self, expected: str, position: int, extra: dict[str, Any] | None = None):
        super().__init__(f"expected at least one {expected}", extra=extra)
        self.expected = expected
        self.position = position
