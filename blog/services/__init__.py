"""
Services Package

Business operations for the blog. Each module raises blog.errors types and
commits through blog.services.persistence.
"""

from blog.services import authors, blob, content, posts, settings, taxonomy, users

__all__ = ['authors', 'blob', 'content', 'posts', 'settings', 'taxonomy', 'users']
