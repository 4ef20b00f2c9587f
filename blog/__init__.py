"""
Blog - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask, render_template, request
from sqlalchemy.exc import SQLAlchemyError

from blog.extensions import db, login_manager
from blog.config import Config

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Create and configure the Flask application.
    
    Args:
        config_class: Configuration class to use (default: Config)
    
    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)
    
    # `current_user` in templates is whoever the session cookie resolves to
    @login_manager.request_loader
    def load_user_from_request(req):
        from blog.auth.session import resolve_session
        return resolve_session(req.cookies).user
    
    # Edge gate for /admin and /api/admin
    from blog.auth.gate import init_gate
    init_gate(app)
    
    # Register blueprints
    from blog.auth import auth_bp
    from blog.admin import admin_bp
    from blog.api import admin_api_bp, public_api_bp
    from blog.site import site_bp
    
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix=app.config['ADMIN_PREFIX'])
    app.register_blueprint(admin_api_bp, url_prefix=app.config['ADMIN_API_PREFIX'])
    app.register_blueprint(public_api_bp, url_prefix='/api')
    app.register_blueprint(site_bp)
    
    # Site settings for every template
    @app.context_processor
    def inject_site_settings():
        from blog.services import settings
        values = settings.get_all_or_defaults()
        return dict(site=values, footer_links=settings.footer_links(values))
    
    @app.template_filter('date')
    def format_date(value, fmt='%B %d, %Y'):
        return value.strftime(fmt) if value else ''
    
    @app.template_filter('read_time')
    def read_time_filter(content):
        from blog.services.content import calculate_read_time
        return calculate_read_time(content)
    
    _register_error_pages(app)
    
    # Create database tables
    with app.app_context():
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') and \
                ':memory:' not in app.config['SQLALCHEMY_DATABASE_URI']:
            os.makedirs(os.path.join(Config.basedir, 'instance'), exist_ok=True)
        db.create_all()
        _ensure_default_data(app)
    
    return app


def _register_error_pages(app):
    @app.errorhandler(404)
    def page_not_found(error):
        if request.path.startswith('/api/'):
            return {'success': False, 'message': 'Not found'}, 404
        return render_template('site/404.html'), 404
    
    @app.errorhandler(405)
    def method_not_allowed(error):
        if request.path.startswith('/api/'):
            return {'success': False, 'message': 'Method not allowed'}, 405
        return error
    
    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        logger.error('Unhandled database error on %s', request.path, exc_info=error)
        if request.path.startswith('/api/'):
            return {'success': False, 'message': 'A database error occurred'}, 500
        return render_template('site/500.html'), 500


def _ensure_default_data(app):
    """Ensure default settings (and, outside tests, the seed admin) exist."""
    from blog.errors import BlogError
    from blog.services import settings, users
    
    try:
        settings.initialize()
    except BlogError as e:
        logger.warning('Could not initialize settings: %s', e.message)
    
    if app.config.get('SEED_ADMIN'):
        from blog.models import User
        if User.query.count() == 0:
            try:
                users.ensure_admin(app.config['ADMIN_NAME'], app.config['ADMIN_EMAIL'],
                                   app.config['ADMIN_PASSWORD'])
                logger.info('Created seed admin %s', app.config['ADMIN_EMAIL'])
            except BlogError as e:
                logger.warning('Could not create seed admin: %s', e.message)
