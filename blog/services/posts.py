"""
Post Services

Create/update validation, admin listing, public listing and search.
"""

import logging
from datetime import datetime, timezone

from blog.errors import ValidationError, NotFound, Conflict
from blog.extensions import db
from blog.models import Post, PostStatus, Author, Category, Tag, User
from blog.services.content import slugify, is_valid_slug, create_excerpt, clean_text
from blog.services.persistence import commit

logger = logging.getLogger(__name__)

SLUG_TAKEN = 'A post with this slug already exists. Please choose a different slug.'


def _naive_utc(value):
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date(value):
    """Accept a datetime, 'YYYY-MM-DD' or an ISO timestamp; None means now.
    
    Stored dates are naive UTC.
    """
    if value is None or value == '':
        return _naive_utc(datetime.now(timezone.utc))
    if isinstance(value, datetime):
        return _naive_utc(value)
    try:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        return _naive_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError('Invalid date format. Please use YYYY-MM-DD format.')


def to_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'on', 'yes')
    return bool(value)


def parse_status(value):
    status = (clean_text(value, 'status') or PostStatus.DRAFT.value).upper()
    if status not in PostStatus.__members__:
        raise ValidationError(f'Unknown post status: {value}')
    return status


def _to_int(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field} id')


def _resolve_tags(tag_ids):
    if isinstance(tag_ids, (str, int)):
        tag_ids = [tag_ids]
    ids = [_to_int(t, 'tag') for t in (tag_ids or []) if t not in (None, '')]
    if not ids:
        return []
    tags = Tag.query.filter(Tag.id.in_(ids)).all()
    if len(tags) != len(set(ids)):
        raise ValidationError('Invalid tag ID. Please check your selection.')
    return tags


def _apply(post, data):
    missing = [field for field in ('title', 'content', 'author_id', 'category_id')
               if not data.get(field)]
    if missing:
        raise ValidationError('Missing required fields: ' + ', '.join(missing))
    
    title = clean_text(data['title'], 'title')
    content = clean_text(data['content'], 'content')
    if not title or not content:
        raise ValidationError('Title and content cannot be blank')
    slug = clean_text(data.get('slug'), 'slug').lower() or slugify(title)
    if not is_valid_slug(slug):
        raise ValidationError('Invalid slug format. Use lowercase letters, numbers, and hyphens only.')
    
    duplicate = Post.query.filter(Post.slug == slug)
    if post.id is not None:
        duplicate = duplicate.filter(Post.id != post.id)
    if duplicate.first() is not None:
        raise Conflict(SLUG_TAKEN)
    
    author_id = _to_int(data['author_id'], 'author')
    if db.session.get(Author, author_id) is None:
        raise ValidationError('Invalid author. Please check your selection.')
    category_id = _to_int(data['category_id'], 'category')
    if db.session.get(Category, category_id) is None:
        raise ValidationError('Invalid category. Please check your selection.')
    
    status = parse_status(data.get('status'))
    date = parse_date(data.get('date'))
    tags = _resolve_tags(data.get('tag_ids'))
    excerpt = clean_text(data.get('excerpt'), 'excerpt')
    cover_image = clean_text(data.get('cover_image'), 'coverImage')
    
    post.title = title
    post.slug = slug
    post.content = content
    post.excerpt = excerpt or create_excerpt(content)
    post.cover_image = cover_image or None
    post.featured = to_bool(data.get('featured'))
    post.status = status
    post.date = date
    post.author_id = author_id
    post.category_id = category_id
    post.tags = tags


def create_post(data):
    post = Post(views=0)
    _apply(post, data)
    db.session.add(post)
    commit('create post', SLUG_TAKEN)
    logger.info('Created post %s (%s)', post.slug, post.status)
    return post


def update_post(post_id, data):
    post = get_post(post_id)
    _apply(post, data)
    commit('update post', SLUG_TAKEN)
    return post


def delete_post(post_id):
    post = get_post(post_id)
    post.tags = []
    db.session.delete(post)
    commit('delete post')


def get_post(post_id):
    post = db.session.get(Post, post_id)
    if post is None:
        raise NotFound('Post not found')
    return post


def get_published_by_slug(slug):
    post = Post.query.filter_by(slug=slug, status=PostStatus.PUBLISHED.value).first()
    if post is None:
        raise NotFound('Post not found')
    return post


def list_for_admin():
    return Post.query.order_by(Post.date.desc()).all()


def published_query():
    return Post.query.filter_by(status=PostStatus.PUBLISHED.value)


def list_published(page=1, per_page=10, category_id=None, tag_id=None, author_id=None):
    query = published_query()
    if category_id is not None:
        query = query.filter(Post.category_id == category_id)
    if author_id is not None:
        query = query.filter(Post.author_id == author_id)
    if tag_id is not None:
        query = query.filter(Post.tags.any(Tag.id == tag_id))
    return query.order_by(Post.date.desc()).paginate(page=page, per_page=per_page, error_out=False)


def featured_posts(limit=3):
    return published_query().filter_by(featured=True).order_by(Post.date.desc()).limit(limit).all()


def recent_posts(limit=5):
    return Post.query.order_by(Post.date.desc()).limit(limit).all()


def top_posts(limit=5):
    return Post.query.order_by(Post.views.desc()).limit(limit).all()


def search_posts(term, limit=50):
    term = (term or '').strip()
    if not term:
        return []
    pattern = f'%{term}%'
    return published_query().filter(
        db.or_(Post.title.ilike(pattern), Post.excerpt.ilike(pattern), Post.content.ilike(pattern))
    ).order_by(Post.date.desc()).limit(limit).all()


def record_view(post):
    post.views = (post.views or 0) + 1
    commit('record post view')
    return post


def counts():
    """Totals shown on the admin dashboard"""
    return {
        'posts': Post.query.count(),
        'published': published_query().count(),
        'authors': Author.query.count(),
        'categories': Category.query.count(),
        'tags': Tag.query.count(),
        'users': User.query.count(),
    }
