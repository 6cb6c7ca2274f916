from flask import jsonify
from flask_wtf.csrf import generate_csrf

from . import bp


@bp.route("/")
def index():
    return jsonify({"name": "SceneBreak", "status": "running"})


@bp.route("/csrf-token")
def csrf_token():
    return jsonify({"csrf_token": generate_csrf()})
