"""
Text helpers for posts and taxonomy: slugs, excerpts, read time.
"""

import math
import re
import unicodedata

from blog.errors import ValidationError

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

WORDS_PER_MINUTE = 200


def slugify(text):
    """'Web Dev' -> 'web-dev'"""
    if not text:
        return ''
    # fold accents so "Café" becomes "cafe"
    slug = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    slug = slug.lower()
    slug = re.sub(r'[^\w\s-]', '', slug, flags=re.ASCII)
    slug = re.sub(r'[\s_]+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')


def is_valid_slug(slug):
    return bool(slug) and SLUG_PATTERN.match(slug) is not None


def calculate_read_time(content):
    words = len((content or '').split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def create_excerpt(content, max_length=160):
    """Plain-text excerpt with markdown stripped, cut at `max_length`."""
    text = content or ''
    text = re.sub(r'```[\s\S]*?```', '', text)
    text = re.sub(r'#+\s+(.*)', r'\1', text)
    text = re.sub(r'!\[(.*?)\]\((.*?)\)', '', text)
    text = re.sub(r'\[(.*?)\]\((.*?)\)', r'\1', text)
    text = re.sub(r'\*\*(.*?)\*\*', r'\1', text)
    text = re.sub(r'\*(.*?)\*', r'\1', text)
    text = re.sub(r'`(.*?)`', r'\1', text)
    text = re.sub(r'<[^>]+>', '', text)
    text = re.sub(r'\s+', ' ', text).strip()
    
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + '...'


def clean_text(value, field):
    """Stripped string for a free-text field; None becomes ''."""
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    return value.strip()
