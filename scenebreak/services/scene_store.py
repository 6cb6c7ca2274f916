"""Persistence, history and deletion for saved scenes and their breakdowns."""

from __future__ import annotations

from typing import Any, List, Optional

from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..extensions import db
from ..models import DEFAULT_SCENE_TITLE, SCENE_TITLE_MAX_LENGTH, Breakdown, Scene
from .errors import InputValidationError, PersistenceError, SceneNotFoundError
from .schemas import BreakdownPayload
from .validation import require_owner, validate_scene_text


def save_scene_breakdown(
    breakdown: BreakdownPayload,
    *,
    scene_text: Any,
    owner_id: Optional[int],
    title: Optional[str] = None,
    description: Optional[str] = None,
    session: Optional[Session] = None,
) -> Scene:
    """Store a scene and its breakdown as one unit of work.

    The scene row is flushed to obtain its identifier, the breakdown row is
    added with that reference, and both are committed together. Any database
    failure rolls back both rows and raises :class:`PersistenceError`.
    """

    owner = require_owner(owner_id)
    text = validate_scene_text(scene_text)
    session = session or db.session

    cleaned_title = _clean_field(title) or DEFAULT_SCENE_TITLE
    if len(cleaned_title) > SCENE_TITLE_MAX_LENGTH:
        raise InputValidationError(f"Scene title must be at most {SCENE_TITLE_MAX_LENGTH} characters.")

    scene = Scene(
        user_id=owner,
        title=cleaned_title,
        description=_clean_field(description),
        scene_text=text,
    )
    try:
        session.add(scene)
        session.flush()

        session.add(
            Breakdown(
                user_id=owner,
                scene_id=scene.id,
                **breakdown.to_columns(),
            )
        )
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        current_app.logger.error("Failed to save scene breakdown for user %s: %s", owner, exc)
        raise PersistenceError("Failed to save breakdown.") from exc

    current_app.logger.info("Saved scene %s with breakdown for user %s", scene.id, owner)
    return scene


def list_scene_history(owner_id: Optional[int], *, session: Optional[Session] = None) -> List[Scene]:
    """Return the owner's scenes that have a breakdown, most recent first."""

    owner = require_owner(owner_id)
    session = session or db.session

    statement = (
        select(Scene)
        .where(Scene.user_id == owner, Scene.breakdowns.any())
        .options(selectinload(Scene.breakdowns))
        .order_by(Scene.created_at.desc(), Scene.id.desc())
    )
    return list(session.scalars(statement).all())


def get_scene_detail(scene_id: int, owner_id: Optional[int], *, session: Optional[Session] = None) -> Scene:
    owner = require_owner(owner_id)
    session = session or db.session

    statement = (
        select(Scene)
        .where(Scene.id == scene_id, Scene.user_id == owner)
        .options(selectinload(Scene.breakdowns))
    )
    scene = session.scalars(statement).first()
    if scene is None:
        raise SceneNotFoundError("We couldn't find that scene.")
    return scene


def delete_scene(scene_id: int, owner_id: Optional[int], *, session: Optional[Session] = None) -> None:
    """Delete one owned scene.

    Only the scene row is deleted here; dependent breakdowns are removed by
    the backend's ``ON DELETE CASCADE`` rule.
    """

    owner = require_owner(owner_id)
    session = session or db.session

    scene = session.scalars(select(Scene).where(Scene.id == scene_id, Scene.user_id == owner)).first()
    if scene is None:
        raise SceneNotFoundError("We couldn't find that scene.")

    try:
        session.delete(scene)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        current_app.logger.error("Failed to delete scene %s: %s", scene_id, exc)
        raise PersistenceError("Failed to delete scene.") from exc

    current_app.logger.info("Deleted scene %s for user %s", scene_id, owner)


def _clean_field(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None
