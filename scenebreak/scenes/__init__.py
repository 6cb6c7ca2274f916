from flask import Blueprint

bp = Blueprint("scenes", __name__)

from . import routes  # noqa: E402,F401
