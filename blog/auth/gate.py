"""
Edge Gate

Runs before every request under the admin UI and admin API prefixes. It
only looks at whether the session cookie is present; whether the cookie
names a real admin is decided by the guard on each view. The gate exists
to redirect early, not to secure anything.
"""

import logging

from flask import request, redirect, current_app

from blog.auth.session import has_session_cookie

logger = logging.getLogger(__name__)

ROBOTS_HEADER = 'X-Robots-Tag'
ROBOTS_VALUE = 'noindex, nofollow'


def _under(path, prefix):
    return path == prefix or path.startswith(prefix.rstrip('/') + '/')


def classify_path(path, config):
    """Return one of 'login', 'logout', 'admin', 'admin_api' or None."""
    if path == config['LOGIN_PATH']:
        return 'login'
    if path == config['LOGOUT_PATH']:
        return 'logout'
    if _under(path, config['ADMIN_API_PREFIX']):
        return 'admin_api'
    if _under(path, config['ADMIN_PREFIX']):
        return 'admin'
    return None


def decide(path_class, cookie_present, config):
    """Pure decision table. Returns a redirect target or None to allow."""
    if path_class == 'login':
        return config['DASHBOARD_PATH'] if cookie_present else None
    if path_class == 'admin' and not cookie_present:
        return config['LOGIN_PATH']
    return None


def edge_gate():
    path_class = classify_path(request.path, current_app.config)
    if path_class is None:
        return None
    
    cookie_present = has_session_cookie(request.cookies)
    target = decide(path_class, cookie_present, current_app.config)
    logger.debug('Edge gate: path=%s class=%s cookie=%s -> %s',
                 request.path, path_class, cookie_present, target or 'allow')
    if target:
        return redirect(target)
    return None


def add_robots_header(response):
    if classify_path(request.path, current_app.config) is not None:
        response.headers[ROBOTS_HEADER] = ROBOTS_VALUE
    return response


def init_gate(app):
    app.before_request(edge_gate)
    app.after_request(add_robots_header)
