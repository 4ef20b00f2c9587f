"""
JSON API Blueprints

`admin_api_bp` (mounted at /api/admin) requires an admin session on every
handler. `public_api_bp` (mounted at /api) serves read-only published
content and site settings.
"""

from flask import Blueprint

from blog.errors import register_json_error_handlers

admin_api_bp = Blueprint('admin_api', __name__)
public_api_bp = Blueprint('public_api', __name__)

register_json_error_handlers(admin_api_bp)
register_json_error_handlers(public_api_bp)

from blog.api import admin_routes, public_routes  # noqa: E402, F401
