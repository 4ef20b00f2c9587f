"""
Flask Extensions

The admin session is a plain cookie holding the user's email. Flask-Login
does not issue it; its request loader only resolves it so templates can
use `current_user`.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance
db = SQLAlchemy()

# Exposes the cookie-resolved user as `current_user`
login_manager = LoginManager()
