"""
Site Settings Service

Settings are key/value rows. Missing keys fall back to DEFAULT_SETTINGS so
templates always have something to render.
"""

import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from blog.errors import ValidationError
from blog.extensions import db
from blog.models import SiteSetting
from blog.services.persistence import commit

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    # General
    'site_title': 'Blog',
    'site_description': 'A server-rendered blog',
    'site_logo': '/static/logo.png',
    'site_favicon': '/favicon.ico',
    
    # SEO
    'meta_title': 'Blog',
    'meta_description': 'Articles, tutorials and news',
    'meta_keywords': 'blog, python, flask',
    'og_image': '/static/og-image.jpg',
    'twitter_handle': '',
    
    # Contact and social
    'contact_email': 'contact@example.com',
    'social_twitter': '',
    'social_facebook': '',
    'social_instagram': '',
    'social_linkedin': '',
    'social_github': '',
    
    # Analytics
    'google_analytics_id': '',
    
    # Footer
    'footer_text': 'All rights reserved.',
    'footer_links': json.dumps([
        {'name': 'Home', 'url': '/'},
        {'name': 'About', 'url': '/about'},
    ]),
}


def initialize():
    """Insert a row for every default key that is not stored yet."""
    existing = {s.key for s in SiteSetting.query.all()}
    missing = [key for key in DEFAULT_SETTINGS if key not in existing]
    for key in missing:
        db.session.add(SiteSetting(key=key, value=DEFAULT_SETTINGS[key]))
    if missing:
        commit('initialize settings')
        logger.info('Initialized %d missing settings', len(missing))
    return len(missing)


def get_all():
    settings = dict(DEFAULT_SETTINGS)
    for row in SiteSetting.query.all():
        settings[row.key] = row.value
    return settings


def get_all_or_defaults():
    """Like get_all, but a broken database yields the defaults instead of an error."""
    try:
        return get_all()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception('Could not load site settings, using defaults')
        return dict(DEFAULT_SETTINGS)


def get(key, default=None):
    row = SiteSetting.query.filter_by(key=key).first()
    if row is not None:
        return row.value
    return DEFAULT_SETTINGS.get(key, default)


def update_batch(values):
    """Upsert every key in `values`; returns the stored values."""
    if not isinstance(values, dict):
        raise ValidationError('Settings must be an object of key/value pairs')
    
    rows = {s.key: s for s in SiteSetting.query.filter(SiteSetting.key.in_(list(values))).all()}
    updated = {}
    for key, value in values.items():
        key = str(key).strip()
        if not key:
            raise ValidationError('Setting keys cannot be empty')
        value = '' if value is None else str(value)
        row = rows.get(key)
        if row is None:
            row = SiteSetting(key=key, value=value)
            db.session.add(row)
        else:
            row.value = value
        updated[key] = value
    commit('update settings')
    return updated


def footer_links(settings):
    try:
        links = json.loads(settings.get('footer_links') or '[]')
    except ValueError:
        logger.warning('footer_links setting is not valid JSON')
        return []
    return links if isinstance(links, list) else []
