from __future__ import annotations

from typing import Any, Optional

from .errors import InputValidationError

SCENE_TEXT_REQUIRED = "Scene text is required"


def validate_scene_text(scene_text: Any) -> str:
    """Return ``scene_text`` unchanged, or raise when it is absent or empty.

    No length cap is applied and whitespace is not stripped: any non-empty
    string is forwarded to the model as submitted.
    """

    if scene_text is None or scene_text == "":
        raise InputValidationError(SCENE_TEXT_REQUIRED)
    if not isinstance(scene_text, str):
        raise InputValidationError("Scene text must be a string.")
    return scene_text


def require_owner(owner_id: Optional[int]) -> int:
    if owner_id is None:
        raise InputValidationError("An authenticated user is required to store scenes.")
    return owner_id
