"""
Admin Blueprint

Server-rendered back-office screens. Every view is behind `admin_required`,
which re-checks the cookie against the user table on each request.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from blog.admin import routes  # noqa: E402, F401
