"""
User Model
"""

import enum

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from blog.extensions import db


class Role(str, enum.Enum):
    USER = 'USER'
    ADMIN = 'ADMIN'


def normalize_role(value):
    """Return the canonical role string, or None for unknown roles."""
    if value is None:
        return None
    candidate = str(value).strip().upper()
    return candidate if candidate in Role.__members__ else None


class User(UserMixin, db.Model):
    """Back-office account. The role is kept as a string because seed data
    has historically written it in lower case; comparisons go through
    `has_role`."""
    __tablename__ = 'users'
    
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=Role.USER.value)
    created_at = db.Column(db.DateTime, default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, default=db.func.current_timestamp(),
                           onupdate=db.func.current_timestamp())
    
    def set_password(self, raw_password):
        self.password = generate_password_hash(raw_password, method='pbkdf2:sha256')
    
    def check_password(self, raw_password):
        if not self.password:
            return False
        return check_password_hash(self.password, raw_password)
    
    def has_role(self, role):
        wanted = role.value if isinstance(role, Role) else str(role)
        return (self.role or '').upper() == wanted.upper()
    
    @property
    def is_admin(self):
        return self.has_role(Role.ADMIN)
    
    def to_dict(self):
        # never includes the password hash
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': (self.role or '').upper(),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
    
    def __repr__(self):
        return f'<User {self.email}>'
