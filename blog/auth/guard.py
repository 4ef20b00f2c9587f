"""
Authorization Guard

`authorize` is the one place the role check lives. The decorators resolve a
fresh session for every request and hand it to the view as the `session`
keyword argument, so no view mutates anything before the check passes.
"""

import logging
from functools import wraps

from flask import request, redirect, render_template, flash, current_app

from blog.auth.session import resolve_session, clear_session_cookie, has_session_cookie
from blog.errors import Unauthenticated, Forbidden
from blog.models import Role

logger = logging.getLogger(__name__)


def authorize(session, required_role=Role.ADMIN):
    """Raise Unauthenticated or Forbidden unless `session` carries `required_role`."""
    if session is None or not session.is_authenticated:
        raise Unauthenticated()
    if not session.has_role(required_role):
        logger.info('Role check failed for %s (has %s, needs %s)',
                    session.user.email, session.role,
                    getattr(required_role, 'value', required_role))
        raise Forbidden()
    return session


def admin_api_required(f):
    """JSON handlers: 401 without a valid session, 403 for non-admins."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        session = resolve_session(request.cookies)
        try:
            authorize(session, Role.ADMIN)
        except (Unauthenticated, Forbidden) as e:
            return e.to_response()
        kwargs['session'] = session
        return f(*args, **kwargs)
    return wrapper


def admin_required(f):
    """Server-rendered admin screens.
    
    - no valid session: redirect to the login page and drop any stale cookie
    - non-admin: 403 page
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        session = resolve_session(request.cookies)
        try:
            authorize(session, Role.ADMIN)
        except Unauthenticated:
            if has_session_cookie(request.cookies):
                flash('Your session has expired. Please sign in again.', 'warning')
            response = redirect(current_app.config['LOGIN_PATH'])
            return clear_session_cookie(response)
        except Forbidden:
            return render_template('admin/403.html', identity=session), 403
        kwargs['session'] = session
        return f(*args, **kwargs)
    return wrapper
