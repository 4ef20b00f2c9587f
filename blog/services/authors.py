"""
Author Services
"""

from blog.errors import ValidationError, NotFound, Conflict
from blog.extensions import db
from blog.models import Author, Post, PostStatus
from blog.services.content import clean_text
from blog.services.persistence import commit

SOCIAL_NETWORKS = ('twitter', 'github', 'linkedin', 'website')


def clean_social(social):
    if not social:
        return {}
    if not isinstance(social, dict):
        raise ValidationError('Social links must be an object')
    return {k: str(v).strip() for k, v in social.items()
            if k in SOCIAL_NETWORKS and v and str(v).strip()}


def list_authors(published_only=False):
    """[(author, post_count), ...] ordered by name"""
    condition = Post.author_id == Author.id
    if published_only:
        condition = db.and_(condition, Post.status == PostStatus.PUBLISHED.value)
    return db.session.query(Author, db.func.count(Post.id))\
        .outerjoin(Post, condition)\
        .group_by(Author.id)\
        .order_by(Author.name)\
        .all()


def get_author(author_id):
    author = db.session.get(Author, author_id)
    if author is None:
        raise NotFound('Author not found')
    return author


def _apply(author, name, avatar, bio, social):
    name = clean_text(name, 'name')
    if not name:
        raise ValidationError('Author name is required')
    author.name = name
    author.avatar = clean_text(avatar, 'avatar') or None
    author.bio = clean_text(bio, 'bio') or None
    author.social = clean_social(social)


def create_author(name, avatar=None, bio=None, social=None):
    author = Author()
    _apply(author, name, avatar, bio, social)
    db.session.add(author)
    commit('create author')
    return author


def update_author(author_id, name, avatar=None, bio=None, social=None):
    author = get_author(author_id)
    _apply(author, name, avatar, bio, social)
    commit('update author')
    return author


def delete_author(author_id):
    author = get_author(author_id)
    post_count = Post.query.filter_by(author_id=author.id).count()
    if post_count:
        raise Conflict(f"Cannot delete author because they have {post_count} posts")
    db.session.delete(author)
    commit('delete author')
