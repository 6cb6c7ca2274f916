"""Scene breakdown pipeline: validate, prompt, invoke the model, parse."""

from __future__ import annotations

from typing import Any, Optional

from flask import current_app

from .errors import ModelInvocationError, ParseError
from .prompt_builder import build_breakdown_messages
from .response_parser import parse_breakdown
from .schemas import BreakdownPayload
from .validation import validate_scene_text


def analyze_scene(scene_text: Any, *, client: Any, user_id: Optional[Any] = None) -> BreakdownPayload:
    """Produce a structured breakdown for ``scene_text``.

    Parameters
    ----------
    scene_text:
        The raw scene as submitted. Must be a non-empty string.
    client:
        Model adapter exposing ``complete(messages) -> str``. One call is made
        and failures are not retried.
    user_id:
        Optional identity of the requester, used for logging only. The
        analysis is a preview and is never persisted here.
    """

    text = validate_scene_text(scene_text)
    messages = build_breakdown_messages(text)

    logger = current_app.logger
    logger.info("Generating breakdown (user=%s, %d characters of scene text)", user_id or "anonymous", len(text))

    raw_output = client.complete(messages)
    if not raw_output:
        raise ModelInvocationError("The model returned an empty response.")
    logger.debug("Raw model output: %s", raw_output[:200])

    try:
        breakdown = parse_breakdown(raw_output)
    except ParseError as exc:
        logger.warning("Failed to parse breakdown from model output: %s", exc)
        raise

    logger.info(
        "Breakdown parsed: %d characters, %d locations, %d themes",
        len(breakdown.characters),
        len(breakdown.locations),
        len(breakdown.themes),
    )
    return breakdown
