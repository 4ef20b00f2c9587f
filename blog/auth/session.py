"""
Session Resolution

There is no server-side session store. The `admin-auth` cookie carries the
user's email and every request re-reads the user from the database to find
out who is calling and with which role.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from blog.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Identity derived from the request cookie. `user` is None when anonymous."""
    user: Optional[User] = None
    
    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
    
    @property
    def role(self) -> Optional[str]:
        if self.user is None:
            return None
        return (self.user.role or '').upper()
    
    def has_role(self, role) -> bool:
        return self.user is not None and self.user.has_role(role)
    
    def to_dict(self) -> dict:
        return {
            'isLoggedIn': self.is_authenticated,
            'user': self.user.to_dict() if self.user else None,
        }


ANONYMOUS = Session()


def cookie_name() -> str:
    return current_app.config.get('AUTH_COOKIE_NAME', 'admin-auth')


def has_session_cookie(cookies) -> bool:
    return bool(cookies.get(cookie_name()))


def find_user_by_email(email):
    return User.query.filter_by(email=email).first()


def resolve_session(cookies) -> Session:
    """Resolve the caller from the request cookies.
    
    Absent or empty cookie, unknown email and datastore errors all resolve
    to the anonymous session.
    """
    email = cookies.get(cookie_name())
    if not email:
        return ANONYMOUS
    
    try:
        user = find_user_by_email(email)
    except SQLAlchemyError:
        logger.exception('Session lookup failed; treating request as anonymous')
        return ANONYMOUS
    
    if user is None:
        logger.debug('Session cookie names no existing user')
        return ANONYMOUS
    return Session(user=user)


def _is_production() -> bool:
    return current_app.config.get('ENVIRONMENT') == 'production'


def same_site_policy(host: str) -> str:
    """Lax on localhost and in production, None for other development hosts."""
    host = (host or '').lower()
    is_localhost = 'localhost' in host or '127.0.0.1' in host
    if is_localhost or _is_production():
        return 'Lax'
    return 'None'


def set_session_cookie(response, email, host=''):
    response.set_cookie(
        cookie_name(),
        email,
        max_age=current_app.config.get('AUTH_COOKIE_MAX_AGE', 60 * 60 * 24),
        path='/',
        httponly=True,
        secure=_is_production(),
        samesite=same_site_policy(host),
    )
    return response


def clear_session_cookie(response):
    response.set_cookie(
        cookie_name(),
        '',
        expires=0,
        max_age=0,
        path='/',
        httponly=True,
        secure=_is_production(),
        samesite='Lax',
    )
    return response
