"""Service layer for the scene breakdown workflow."""

from __future__ import annotations

from .breakdown import analyze_scene  # noqa: F401
from .errors import (  # noqa: F401
    BreakdownSchemaError,
    InputValidationError,
    ModelConfigurationError,
    ModelInvocationError,
    ParseError,
    PersistenceError,
    SceneBreakdownError,
    SceneNotFoundError,
)
from .model_client import ChatCompletionClient, get_model_client  # noqa: F401
from .schemas import BreakdownPayload  # noqa: F401

__all__ = [
    "BreakdownPayload",
    "BreakdownSchemaError",
    "ChatCompletionClient",
    "InputValidationError",
    "ModelConfigurationError",
    "ModelInvocationError",
    "ParseError",
    "PersistenceError",
    "SceneBreakdownError",
    "SceneNotFoundError",
    "analyze_scene",
    "get_model_client",
]
