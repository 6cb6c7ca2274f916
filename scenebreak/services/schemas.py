"""Typed schema for a scene breakdown."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, model_validator

from .errors import BreakdownSchemaError

LIST_FIELDS = ("characters", "locations", "themes")
TEXT_FIELDS = ("tone", "structure", "technical_notes", "visual_elements", "emotional_arc")


class BreakdownPayload(BaseModel):
    """The eight-field analysis of one scene.

    Keys are accepted in camelCase (as the model is instructed to answer) or
    snake_case. Missing or ``null`` values take their defaults; present values
    of the wrong type are rejected rather than silently replaced.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    characters: List[StrictStr] = Field(default_factory=list, description="Character names in order of appearance")
    locations: List[StrictStr] = Field(default_factory=list, description="Place names")
    themes: List[StrictStr] = Field(default_factory=list, description="Short thematic phrases")
    tone: StrictStr = ""
    structure: StrictStr = ""
    technical_notes: StrictStr = Field(default="", alias="technicalNotes")
    visual_elements: StrictStr = Field(default="", alias="visualElements")
    emotional_arc: StrictStr = Field(default="", alias="emotionalArc")

    @model_validator(mode="before")
    @classmethod
    def _drop_null_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_columns(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=False)


def validate_breakdown(data: Any, *, raw_text: str | None = None) -> BreakdownPayload:
    """Validate ``data`` into a :class:`BreakdownPayload`.

    Raises :class:`BreakdownSchemaError` listing every offending field.
    """

    if not isinstance(data, dict):
        raise BreakdownSchemaError(
            "Breakdown must be a JSON object.",
            errors=[{"field": "", "message": "Expected an object"}],
            raw_text=raw_text,
        )
    try:
        return BreakdownPayload.model_validate(data)
    except ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        fields = ", ".join(sorted({error["field"].split(".")[0] for error in errors}))
        raise BreakdownSchemaError(
            f"Breakdown has invalid fields: {fields}",
            errors=errors,
            raw_text=raw_text,
        ) from exc
