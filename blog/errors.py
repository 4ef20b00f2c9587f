"""
Error taxonomy shared by services, the admin API and the admin screens.

Services raise these; the JSON blueprints turn them into
`{"success": false, "message": ...}` responses and the admin screens flash
the message as a banner.
"""

import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from blog.extensions import db

logger = logging.getLogger(__name__)


class BlogError(Exception):
    status_code = 500
    message = 'An unexpected error occurred'
    
    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
    
    def to_response(self):
        return jsonify({'success': False, 'message': self.message}), self.status_code


class ValidationError(BlogError):
    status_code = 400
    message = 'Invalid request'


class Unauthenticated(BlogError):
    status_code = 401
    message = 'Unauthorized - Authentication required'


class Forbidden(BlogError):
    status_code = 403
    message = 'Forbidden - Admin privileges required'


class NotFound(BlogError):
    status_code = 404
    message = 'Not found'


class Conflict(BlogError):
    status_code = 409
    message = 'Resource already exists'


class Internal(BlogError):
    status_code = 500


class StorageError(BlogError):
    status_code = 502
    message = 'Blob storage request failed'


def register_json_error_handlers(blueprint):
    """Render BlogError (and anything unexpected) as JSON for an API blueprint."""
    
    @blueprint.errorhandler(BlogError)
    def handle_blog_error(error):
        if error.status_code >= 500:
            logger.error('%s: %s', type(error).__name__, error.message)
        return error.to_response()
    
    @blueprint.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.error('Unhandled database error', exc_info=error)
        return Internal('A database error occurred').to_response()
