"""
Credential verification against the user table.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from blog.auth.session import find_user_by_email

logger = logging.getLogger(__name__)


def authenticate(email, password):
    """Return the user for a matching email/password pair, otherwise None.
    
    Unknown email and wrong password look the same to the caller.
    """
    if not email or not password:
        return None
    try:
        user = find_user_by_email(email.strip().lower())
    except SQLAlchemyError:
        logger.exception('Credential lookup failed')
        return None
    if user is None or not user.check_password(password):
        return None
    return user
