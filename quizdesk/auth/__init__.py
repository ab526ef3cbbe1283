from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from quizdesk.auth import routes  # noqa: E402,F401

__all__ = ['auth_bp']
