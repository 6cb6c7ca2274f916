from __future__ import annotations

from typing import Any, Dict

from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from ..extensions import csrf
from ..services.breakdown import analyze_scene
from ..services.errors import (
    BreakdownSchemaError,
    InputValidationError,
    ModelConfigurationError,
    ModelInvocationError,
    ParseError,
    PersistenceError,
    SceneNotFoundError,
)
from ..services.model_client import get_model_client
from ..services.scene_store import (
    delete_scene as delete_owned_scene,
    get_scene_detail,
    list_scene_history,
    save_scene_breakdown,
)
from ..services.schemas import validate_breakdown
from ..services.validation import validate_scene_text
from . import bp


def _error_response(message: str, status: int, **extra: Any):
    body: Dict[str, Any] = {"error": message}
    body.update({key: value for key, value in extra.items() if value})
    return jsonify(body), status


def _current_user_id():
    return current_user.id if current_user.is_authenticated else None


# Stateless preview: nothing is stored, so no CSRF token is required.
@bp.route("/breakdown", methods=["POST"])
@csrf.exempt
def create_breakdown():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    scene_text = payload.get("sceneText")
    requester = _current_user_id() or payload.get("userId")

    try:
        validate_scene_text(scene_text)
        client = get_model_client()
        breakdown = analyze_scene(scene_text, client=client, user_id=requester)
    except InputValidationError as exc:
        return _error_response(str(exc), 400)
    except ModelConfigurationError as exc:
        current_app.logger.error("Model provider is not configured: %s", exc)
        return _error_response(str(exc), 503)
    except BreakdownSchemaError as exc:
        return _error_response(str(exc), 500, debug=exc.debug_excerpt(), fields=exc.errors)
    except ParseError as exc:
        return _error_response(str(exc), 500, debug=exc.debug_excerpt())
    except ModelInvocationError as exc:
        current_app.logger.warning("Breakdown generation failed: %s", exc)
        return _error_response(str(exc), 500, debug=f"{type(exc).__name__}: {exc}")
    except Exception as exc:
        current_app.logger.exception("Unexpected error while generating scene breakdown")
        return _error_response(str(exc) or "Failed to analyze scene", 500, debug=f"{type(exc).__name__}: {exc}")

    return jsonify(breakdown.to_api()), 200


@bp.route("/scenes", methods=["POST"])
@login_required
def save_scene():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    try:
        breakdown = validate_breakdown(payload.get("breakdown"))
        scene = save_scene_breakdown(
            breakdown,
            scene_text=payload.get("sceneText"),
            owner_id=current_user.id,
            title=payload.get("title"),
            description=payload.get("description"),
        )
    except BreakdownSchemaError as exc:
        return _error_response(str(exc), 400, fields=exc.errors)
    except InputValidationError as exc:
        return _error_response(str(exc), 400)
    except PersistenceError as exc:
        return _error_response(str(exc), 500)

    return jsonify(scene.to_detail()), 201


@bp.route("/scenes", methods=["GET"])
@login_required
def scene_history():
    scenes = list_scene_history(current_user.id)
    return jsonify({"scenes": [scene.to_summary() for scene in scenes]})


@bp.route("/scenes/<int:scene_id>", methods=["GET"])
@login_required
def scene_detail(scene_id: int):
    try:
        scene = get_scene_detail(scene_id, current_user.id)
    except SceneNotFoundError as exc:
        return _error_response(str(exc), 404)
    return jsonify(scene.to_detail())


@bp.route("/scenes/<int:scene_id>", methods=["DELETE"])
@login_required
def delete_scene(scene_id: int):
    try:
        delete_owned_scene(scene_id, current_user.id)
    except SceneNotFoundError as exc:
        return _error_response(str(exc), 404)
    except PersistenceError as exc:
        return _error_response(str(exc), 500)
    return jsonify({"deleted": scene_id})
