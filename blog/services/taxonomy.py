"""
Category and Tag Services
"""

import logging

from blog.errors import ValidationError, NotFound, Conflict
from blog.extensions import db
from blog.models import Category, Tag, Post, PostStatus, post_tags
from blog.services.content import slugify, is_valid_slug, clean_text
from blog.services.persistence import commit

logger = logging.getLogger(__name__)


def _clean_name_and_slug(name, slug, kind):
    name = clean_text(name, 'name')
    if not name:
        raise ValidationError(f'{kind} name is required')
    slug = clean_text(slug, 'slug').lower() or slugify(name)
    if not is_valid_slug(slug):
        raise ValidationError('Invalid slug format. Use lowercase letters, numbers, and hyphens only.')
    return name, slug


def _ensure_slug_free(model, slug, kind, exclude_id=None):
    query = model.query.filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        raise Conflict(f'A {kind.lower()} with this slug already exists')


# Categories

def _post_join(condition, published_only):
    if published_only:
        return db.and_(condition, Post.status == PostStatus.PUBLISHED.value)
    return condition


def list_categories(published_only=False):
    """[(category, post_count), ...] ordered by name
    
    With `published_only` drafts are left out of the counts.
    """
    return db.session.query(Category, db.func.count(Post.id))\
        .outerjoin(Post, _post_join(Post.category_id == Category.id, published_only))\
        .group_by(Category.id)\
        .order_by(Category.name)\
        .all()


def get_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFound('Category not found')
    return category


def get_category_by_slug(slug):
    category = Category.query.filter_by(slug=slug).first()
    if category is None:
        raise NotFound('Category not found')
    return category


def create_category(name, slug=None, description=None):
    name, slug = _clean_name_and_slug(name, slug, 'Category')
    _ensure_slug_free(Category, slug, 'Category')
    
    category = Category(name=name, slug=slug, description=clean_text(description, 'description') or None)
    db.session.add(category)
    commit('create category', 'A category with this slug already exists')
    logger.info('Created category %s', slug)
    return category


def update_category(category_id, name, slug=None, description=None):
    category = get_category(category_id)
    name, slug = _clean_name_and_slug(name, slug, 'Category')
    _ensure_slug_free(Category, slug, 'Category', exclude_id=category.id)
    
    category.name = name
    category.slug = slug
    category.description = clean_text(description, 'description') or None
    commit('update category', 'A category with this slug already exists')
    return category


def delete_category(category_id):
    category = get_category(category_id)
    post_count = Post.query.filter_by(category_id=category.id).count()
    if post_count:
        raise Conflict(f"Cannot delete category because it's used by {post_count} posts")
    db.session.delete(category)
    commit('delete category')


# Tags

def list_tags(published_only=False):
    """[(tag, post_count), ...] ordered by name"""
    return db.session.query(Tag, db.func.count(Post.id))\
        .outerjoin(post_tags, post_tags.c.tag_id == Tag.id)\
        .outerjoin(Post, _post_join(Post.id == post_tags.c.post_id, published_only))\
        .group_by(Tag.id)\
        .order_by(Tag.name)\
        .all()


def get_tag(tag_id):
    tag = db.session.get(Tag, tag_id)
    if tag is None:
        raise NotFound('Tag not found')
    return tag


def get_tag_by_slug(slug):
    tag = Tag.query.filter_by(slug=slug).first()
    if tag is None:
        raise NotFound('Tag not found')
    return tag


def create_tag(name, slug=None):
    name, slug = _clean_name_and_slug(name, slug, 'Tag')
    _ensure_slug_free(Tag, slug, 'Tag')
    
    tag = Tag(name=name, slug=slug)
    db.session.add(tag)
    commit('create tag', 'A tag with this slug already exists')
    logger.info('Created tag %s', slug)
    return tag


def update_tag(tag_id, name, slug=None):
    tag = get_tag(tag_id)
    name, slug = _clean_name_and_slug(name, slug, 'Tag')
    _ensure_slug_free(Tag, slug, 'Tag', exclude_id=tag.id)
    
    tag.name = name
    tag.slug = slug
    commit('update tag', 'A tag with this slug already exists')
    return tag


def delete_tag(tag_id):
    """Tags are detached from their posts, never blocking the delete."""
    tag = get_tag(tag_id)
    db.session.execute(post_tags.delete().where(post_tags.c.tag_id == tag.id))
    db.session.delete(tag)
    commit('delete tag')
