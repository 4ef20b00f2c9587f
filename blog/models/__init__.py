"""
Models Package

Exports all models for easy importing.
"""

from blog.models.user import User, Role, normalize_role
from blog.models.author import Author
from blog.models.taxonomy import Category, Tag
from blog.models.post import Post, PostStatus, post_tags
from blog.models.setting import SiteSetting

__all__ = ['User', 'Role', 'normalize_role', 'Author', 'Category', 'Tag',
           'Post', 'PostStatus', 'post_tags', 'SiteSetting']
