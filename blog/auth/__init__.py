"""
Auth Blueprint

Login and logout, as JSON endpoints and as the server-rendered admin
login page.
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from blog.auth import routes  # noqa: E402, F401
