"""
User Services

Back-office accounts. Passwords are hashed with Werkzeug before they reach
the database.
"""

import logging

from blog.errors import ValidationError, NotFound, Conflict, Forbidden
from blog.extensions import db
from blog.models import User, Role, normalize_role
from blog.services.content import clean_text
from blog.services.persistence import commit

logger = logging.getLogger(__name__)

EMAIL_TAKEN = 'Email already in use'
MIN_PASSWORD_LENGTH = 6


def _clean_email(email):
    email = clean_text(email, 'email').lower()
    if not email or '@' not in email:
        raise ValidationError('Please provide a valid email address.')
    return email


def _clean_role(role):
    if role in (None, ''):
        return Role.USER.value
    normalized = normalize_role(role)
    if normalized is None:
        raise ValidationError(f'Unknown role: {role}')
    return normalized


def _check_password(password):
    if not isinstance(password, str):
        raise ValidationError('password must be a string')
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long.')


def list_users():
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()


def get_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound('User not found')
    return user


def create_user(name, email, password, role=None):
    name = clean_text(name, 'name')
    if not name or not email or not password:
        raise ValidationError('Name, email, and password are required')
    email = _clean_email(email)
    _check_password(password)
    if User.query.filter_by(email=email).first() is not None:
        raise Conflict(EMAIL_TAKEN)
    
    user = User(name=name, email=email, role=_clean_role(role))
    user.set_password(password)
    db.session.add(user)
    commit('create user', EMAIL_TAKEN)
    logger.info('Created user %s with role %s', user.id, user.role)
    return user


def update_user(user_id, name, email, password=None, role=None):
    """Returns (user, previous_email)."""
    user = get_user(user_id)
    previous_email = user.email
    
    name = clean_text(name, 'name')
    if not name:
        raise ValidationError('Name is required')
    email = _clean_email(email or user.email)
    if email != user.email:
        taken = User.query.filter(User.email == email, User.id != user.id).first()
        if taken is not None:
            raise Conflict(EMAIL_TAKEN)
    
    new_role = _clean_role(role) if role not in (None, '') else (user.role or Role.USER.value).upper()
    if user.is_admin and new_role != Role.ADMIN.value and _admin_count() <= 1:
        raise Forbidden('Cannot demote the last admin account')
    
    user.name = name
    user.email = email
    user.role = new_role
    if password:
        _check_password(password)
        user.set_password(password)
    commit('update user', EMAIL_TAKEN)
    return user, previous_email


def _admin_count():
    return User.query.filter(db.func.upper(User.role) == Role.ADMIN.value).count()


def delete_user(user_id, session):
    user = get_user(user_id)
    if user.is_admin and _admin_count() <= 1:
        raise Forbidden('Cannot delete the last admin account')
    if session.is_authenticated and session.user.id == user.id:
        raise Forbidden('Cannot delete your own account while logged in')
    db.session.delete(user)
    commit('delete user')
    logger.info('Deleted user %s', user_id)


def ensure_admin(name, email, password):
    """Create the admin account if missing, promote it if it exists."""
    email = _clean_email(email)
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(name=name, email=email, role=Role.ADMIN.value)
        user.set_password(password)
        db.session.add(user)
        created = True
    else:
        user.role = Role.ADMIN.value
        created = False
    commit('ensure admin account')
    return user, created
