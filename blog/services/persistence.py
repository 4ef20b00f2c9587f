"""
Commit helper shared by the content services.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from blog.errors import Conflict, Internal
from blog.extensions import db

logger = logging.getLogger(__name__)


def commit(action, conflict_message='Resource already exists'):
    """Commit the session, rolling back on failure.
    
    Unique-constraint violations become Conflict; any other datastore error
    is logged and becomes a generic Internal error.
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.warning('Integrity error while trying to %s', action)
        raise Conflict(conflict_message)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Database error while trying to %s', action)
        raise Internal(f'Could not {action}.')
