"""
Admin API Routes

Every handler is wrapped in `admin_api_required`, which resolves a fresh
session from the cookie, answers 401/403 before the handler runs, and
passes the session in as `session`.
"""

import logging

from flask import request, jsonify

from blog.api import admin_api_bp
from blog.auth.guard import admin_api_required
from blog.auth.session import set_session_cookie
from blog.errors import ValidationError, StorageError
from blog.services import authors, blob, posts, settings, taxonomy, users
from blog.services.content import clean_text

logger = logging.getLogger(__name__)


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _post_fields(data):
    """Map the API's camelCase payload onto the post service fields."""
    return {
        'title': data.get('title'),
        'slug': data.get('slug'),
        'content': data.get('content'),
        'excerpt': data.get('excerpt'),
        'cover_image': data.get('coverImage'),
        'featured': data.get('featured'),
        'status': data.get('status'),
        'date': data.get('date'),
        'author_id': data.get('authorId'),
        'category_id': data.get('categoryId'),
        'tag_ids': data.get('tags') or [],
    }


def _with_count(obj, count):
    data = obj.to_dict()
    data['postCount'] = count
    return data


# Posts

@admin_api_bp.route('/posts', methods=['GET'])
@admin_api_required
def list_posts(session):
    return jsonify({'posts': [p.to_dict(with_content=False) for p in posts.list_for_admin()]})


@admin_api_bp.route('/posts', methods=['POST'])
@admin_api_required
def create_post(session):
    post = posts.create_post(_post_fields(_json_body()))
    logger.info('Post %s created by %s', post.id, session.user.email)
    return jsonify({'post': post.to_dict()}), 201


@admin_api_bp.route('/posts/<int:post_id>', methods=['GET'])
@admin_api_required
def get_post(post_id, session):
    return jsonify({'post': posts.get_post(post_id).to_dict()})


@admin_api_bp.route('/posts/<int:post_id>', methods=['PUT'])
@admin_api_required
def update_post(post_id, session):
    post = posts.update_post(post_id, _post_fields(_json_body()))
    return jsonify({'post': post.to_dict()})


@admin_api_bp.route('/posts/<int:post_id>', methods=['DELETE'])
@admin_api_required
def delete_post(post_id, session):
    posts.delete_post(post_id)
    return jsonify({'success': True, 'message': 'Post deleted successfully'})


# Categories

@admin_api_bp.route('/categories', methods=['GET'])
@admin_api_required
def list_categories(session):
    return jsonify({'categories': [_with_count(c, n) for c, n in taxonomy.list_categories()]})


@admin_api_bp.route('/categories', methods=['POST'])
@admin_api_required
def create_category(session):
    data = _json_body()
    category = taxonomy.create_category(data.get('name'), data.get('slug'), data.get('description'))
    return jsonify(category.to_dict()), 201


@admin_api_bp.route('/categories/<int:category_id>', methods=['GET'])
@admin_api_required
def get_category(category_id, session):
    return jsonify(taxonomy.get_category(category_id).to_dict())


@admin_api_bp.route('/categories/<int:category_id>', methods=['PUT'])
@admin_api_required
def update_category(category_id, session):
    data = _json_body()
    category = taxonomy.update_category(category_id, data.get('name'), data.get('slug'),
                                        data.get('description'))
    return jsonify(category.to_dict())


@admin_api_bp.route('/categories/<int:category_id>', methods=['DELETE'])
@admin_api_required
def delete_category(category_id, session):
    taxonomy.delete_category(category_id)
    return jsonify({'success': True})


# Tags

@admin_api_bp.route('/tags', methods=['GET'])
@admin_api_required
def list_tags(session):
    return jsonify({'tags': [_with_count(t, n) for t, n in taxonomy.list_tags()]})


@admin_api_bp.route('/tags', methods=['POST'])
@admin_api_required
def create_tag(session):
    data = _json_body()
    tag = taxonomy.create_tag(data.get('name'), data.get('slug'))
    return jsonify(tag.to_dict()), 201


@admin_api_bp.route('/tags/<int:tag_id>', methods=['PUT'])
@admin_api_required
def update_tag(tag_id, session):
    data = _json_body()
    return jsonify(taxonomy.update_tag(tag_id, data.get('name'), data.get('slug')).to_dict())


@admin_api_bp.route('/tags/<int:tag_id>', methods=['DELETE'])
@admin_api_required
def delete_tag(tag_id, session):
    taxonomy.delete_tag(tag_id)
    return jsonify({'success': True})


# Authors

@admin_api_bp.route('/authors', methods=['GET'])
@admin_api_required
def list_authors(session):
    return jsonify({'authors': [_with_count(a, n) for a, n in authors.list_authors()]})


@admin_api_bp.route('/authors', methods=['POST'])
@admin_api_required
def create_author(session):
    data = _json_body()
    author = authors.create_author(data.get('name'), data.get('avatar'), data.get('bio'),
                                   data.get('social'))
    return jsonify(author.to_dict()), 201


@admin_api_bp.route('/authors/<int:author_id>', methods=['PUT'])
@admin_api_required
def update_author(author_id, session):
    data = _json_body()
    author = authors.update_author(author_id, data.get('name'), data.get('avatar'),
                                   data.get('bio'), data.get('social'))
    return jsonify(author.to_dict())


@admin_api_bp.route('/authors/<int:author_id>', methods=['DELETE'])
@admin_api_required
def delete_author(author_id, session):
    authors.delete_author(author_id)
    return jsonify({'success': True})


# Users

@admin_api_bp.route('/users', methods=['GET'])
@admin_api_required
def list_users(session):
    return jsonify({'success': True, 'users': [u.to_dict() for u in users.list_users()]})


@admin_api_bp.route('/users', methods=['POST'])
@admin_api_required
def create_user(session):
    data = _json_body()
    user = users.create_user(data.get('name'), data.get('email'), data.get('password'),
                             data.get('role'))
    return jsonify({'success': True, 'message': 'User created successfully',
                    'user': user.to_dict()}), 201


@admin_api_bp.route('/users/<int:user_id>', methods=['GET'])
@admin_api_required
def get_user(user_id, session):
    return jsonify({'success': True, 'user': users.get_user(user_id).to_dict()})


@admin_api_bp.route('/users/<int:user_id>', methods=['PUT'])
@admin_api_required
def update_user(user_id, session):
    data = _json_body()
    user, previous_email = users.update_user(user_id, data.get('name'), data.get('email'),
                                             data.get('password'), data.get('role'))
    response = jsonify({'success': True, 'message': 'User updated successfully',
                        'user': user.to_dict()})
    # the caller renamed their own account: keep them signed in
    if user.id == session.user.id and user.email != previous_email:
        set_session_cookie(response, user.email, host=request.host)
    return response


@admin_api_bp.route('/users/<int:user_id>', methods=['DELETE'])
@admin_api_required
def delete_user(user_id, session):
    users.delete_user(user_id, session)
    return jsonify({'success': True, 'message': 'User deleted successfully'})


# Settings

@admin_api_bp.route('/settings', methods=['GET'])
@admin_api_required
def get_settings(session):
    return jsonify({'settings': settings.get_all()})


@admin_api_bp.route('/settings', methods=['PUT'])
@admin_api_required
def update_settings(session):
    updated = settings.update_batch(_json_body())
    return jsonify({'success': True, 'message': 'Settings updated successfully',
                    'settings': updated})


# Media

@admin_api_bp.route('/media', methods=['GET'])
@admin_api_required
def list_media(session):
    folder = request.args.get('folder', 'uploads')
    return jsonify({'images': blob.list_images(folder)})


@admin_api_bp.route('/media/upload', methods=['POST'])
@admin_api_required
def upload_media(session):
    result = blob.upload_image(request.files.get('file'),
                               filename=request.form.get('filename') or None,
                               folder=request.form.get('folder') or 'uploads')
    return jsonify({'success': True, 'url': result['url'], 'pathname': result['pathname'],
                    'message': 'Image uploaded successfully'})


@admin_api_bp.route('/media', methods=['DELETE'])
@admin_api_required
def delete_media(session):
    url = clean_text(_json_body().get('url'), 'url')
    if not url:
        raise ValidationError('Image URL is required')
    if not blob.delete_image(url):
        raise StorageError('Could not delete image')
    logger.info('Image %s deleted by %s', url, session.user.email)
    return jsonify({'success': True, 'message': 'Image deleted successfully'})
