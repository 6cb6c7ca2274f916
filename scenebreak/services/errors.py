"""Error taxonomy shared by the scene breakdown pipeline and the scene store."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class SceneBreakdownError(RuntimeError):
    """Base class for failures raised by the breakdown services."""


class InputValidationError(SceneBreakdownError):
    """Raised when a request is missing data the caller can supply."""


class ModelConfigurationError(SceneBreakdownError):
    """Raised when the model provider is not configured (missing credential)."""


class ModelInvocationError(SceneBreakdownError):
    """Raised when the model provider fails or returns no text."""


class ParseError(SceneBreakdownError):
    """Raised when model output does not contain a usable JSON object."""

    def __init__(self, message: str, *, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text

    def debug_excerpt(self, limit: int = 500) -> str:
        text = (self.raw_text or "").strip()
        return (text[:limit] + "…") if len(text) > limit else text


class BreakdownSchemaError(ParseError):
    """Raised when a JSON object is found but its fields have the wrong types."""

    def __init__(
        self,
        message: str,
        *,
        errors: Optional[List[Dict[str, Any]]] = None,
        raw_text: Optional[str] = None,
    ) -> None:
        super().__init__(message, raw_text=raw_text)
        self.errors = errors or []


class PersistenceError(SceneBreakdownError):
    """Raised when the storage backend rejects a write or delete."""


class SceneNotFoundError(SceneBreakdownError):
    """Raised when a scene does not exist for the requesting owner."""
