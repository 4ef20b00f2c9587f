"""
Site Blueprint

Public, server-rendered pages. Only published posts are visible here.
"""

from flask import Blueprint

site_bp = Blueprint('site', __name__)

from blog.site import routes  # noqa: E402, F401
