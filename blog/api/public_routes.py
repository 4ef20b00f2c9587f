"""
Public API Routes

Read-only JSON for published content and site settings.
"""

from flask import request, jsonify, current_app

from blog.api import public_api_bp
from blog.services import authors, posts, settings, taxonomy


@public_api_bp.route('/settings')
def get_settings():
    return jsonify({'settings': settings.get_all()})


@public_api_bp.route('/posts')
def list_posts():
    page = request.args.get('page', 1, type=int)
    per_page = current_app.config['POSTS_PER_PAGE']
    pagination = posts.list_published(page=page, per_page=per_page)
    return jsonify({
        'posts': [p.to_dict(with_content=False) for p in pagination.items],
        'page': pagination.page,
        'pages': pagination.pages,
        'total': pagination.total,
    })


@public_api_bp.route('/posts/<slug>')
def get_post(slug):
    return jsonify(posts.get_published_by_slug(slug).to_dict())


@public_api_bp.route('/categories')
def list_categories():
    return jsonify([dict(c.to_dict(), postCount=n) for c, n in taxonomy.list_categories(published_only=True)])


@public_api_bp.route('/tags')
def list_tags():
    return jsonify([dict(t.to_dict(), postCount=n) for t, n in taxonomy.list_tags(published_only=True)])


@public_api_bp.route('/authors')
def list_authors():
    return jsonify([dict(a.to_dict(), postCount=n) for a, n in authors.list_authors(published_only=True)])
