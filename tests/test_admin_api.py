import io

import pytest
import requests

from blog.extensions import db
from blog.models import Category, Post, User, Role
from blog.services import blob
from tests.conftest import make_user


def _count(app, model):
    with app.app_context():
        return db.session.query(model).count()


@pytest.fixture()
def author_id(admin_client):
    r = admin_client.post('/api/admin/authors', json={'name': 'Ada Lovelace', 'bio': 'Analyst'})
    return r.get_json()['id']


@pytest.fixture()
def category_id(admin_client):
    r = admin_client.post('/api/admin/categories', json={'name': 'Web Dev'})
    return r.get_json()['id']


def _post_payload(author_id, category_id, **overrides):
    payload = {
        'title': 'Hello World',
        'content': '# Hello\n\nSome **bold** words for the first post.',
        'authorId': author_id,
        'categoryId': category_id,
        'status': 'PUBLISHED',
    }
    payload.update(overrides)
    return payload


# Access control

@pytest.mark.parametrize('method, path', [
    ('get', '/api/admin/posts'),
    ('post', '/api/admin/categories'),
    ('get', '/api/admin/users'),
    ('put', '/api/admin/settings'),
    ('post', '/api/admin/media/upload'),
])
def test_requires_session(client, method, path):
    r = getattr(client, method)(path, json={'name': 'X'})
    assert r.status_code == 401
    assert r.get_json() == {'success': False, 'message': 'Unauthorized - Authentication required'}


def test_unknown_cookie_is_unauthenticated(client):
    client.set_cookie('admin-auth', 'ghost@example.com')
    r = client.post('/api/admin/categories', json={'name': 'Web Dev'})
    assert r.status_code == 401


def test_non_admin_is_forbidden_and_nothing_changes(app, user_client):
    r = user_client.post('/api/admin/categories', json={'name': 'Web Dev'})
    assert r.status_code == 403
    assert r.get_json()['message'] == 'Forbidden - Admin privileges required'
    assert _count(app, Category) == 0


def test_anonymous_create_changes_nothing(app, client):
    client.post('/api/admin/categories', json={'name': 'Web Dev'})
    assert _count(app, Category) == 0


def test_lowercase_admin_role_is_accepted(app, client):
    make_user(app, 'lower@example.com', role='admin')
    client.set_cookie('admin-auth', 'lower@example.com')
    assert client.get('/api/admin/posts').status_code == 200


def test_role_change_applies_on_next_request(app, admin_client):
    make_user(app, 'second@example.com', role=Role.ADMIN.value)
    admin_client.set_cookie('admin-auth', 'second@example.com')
    assert admin_client.get('/api/admin/tags').status_code == 200

    with app.app_context():
        user = User.query.filter_by(email='second@example.com').first()
        user.role = Role.USER.value
        db.session.commit()
    assert admin_client.get('/api/admin/tags').status_code == 403


# Categories and tags

def test_create_category_derives_slug(admin_client):
    r = admin_client.post('/api/admin/categories', json={'name': 'Web Dev'})
    assert r.status_code == 201
    data = r.get_json()
    assert data['name'] == 'Web Dev'
    assert data['slug'] == 'web-dev'


def test_duplicate_category_slug_conflicts(app, admin_client):
    admin_client.post('/api/admin/categories', json={'name': 'Web Dev'})
    r = admin_client.post('/api/admin/categories', json={'name': 'Web  Dev!'})
    assert r.status_code == 409
    assert r.get_json()['success'] is False
    assert _count(app, Category) == 1


def test_category_requires_name_and_valid_slug(admin_client):
    assert admin_client.post('/api/admin/categories', json={}).status_code == 400
    r = admin_client.post('/api/admin/categories', json={'name': 'Bad', 'slug': 'Not A Slug'})
    assert r.status_code == 400


def test_category_list_reports_post_counts(admin_client, author_id, category_id):
    admin_client.post('/api/admin/posts', json=_post_payload(author_id, category_id))
    categories = admin_client.get('/api/admin/categories').get_json()['categories']
    assert categories == [{'id': category_id, 'name': 'Web Dev', 'slug': 'web-dev',
                           'description': None, 'postCount': 1}]


def test_category_in_use_cannot_be_deleted(admin_client, author_id, category_id):
    admin_client.post('/api/admin/posts', json=_post_payload(author_id, category_id))
    r = admin_client.delete(f'/api/admin/categories/{category_id}')
    assert r.status_code == 409


def test_tag_crud(admin_client):
    r = admin_client.post('/api/admin/tags', json={'name': 'Python Tips'})
    assert r.status_code == 201
    tag = r.get_json()
    assert tag['slug'] == 'python-tips'

    r = admin_client.put(f"/api/admin/tags/{tag['id']}", json={'name': 'Python'})
    assert r.get_json()['slug'] == 'python'

    assert admin_client.delete(f"/api/admin/tags/{tag['id']}").status_code == 200
    assert admin_client.get('/api/admin/tags').get_json()['tags'] == []


def test_missing_resource_is_404(admin_client):
    r = admin_client.get('/api/admin/categories/999')
    assert r.status_code == 404
    assert r.get_json() == {'success': False, 'message': 'Category not found'}


def test_non_json_body_is_rejected(admin_client):
    r = admin_client.post('/api/admin/tags', data='name=x')
    assert r.status_code == 400


# Posts

def test_create_post(admin_client, author_id, category_id):
    tag_id = admin_client.post('/api/admin/tags', json={'name': 'Flask'}).get_json()['id']
    r = admin_client.post('/api/admin/posts',
                          json=_post_payload(author_id, category_id, tags=[tag_id], featured=True))
    assert r.status_code == 201
    post = r.get_json()['post']
    assert post['slug'] == 'hello-world'
    assert post['status'] == 'PUBLISHED'
    assert post['featured'] is True
    assert post['views'] == 0
    assert post['excerpt'] == 'Hello Some bold words for the first post.'
    assert post['author']['name'] == 'Ada Lovelace'
    assert [t['slug'] for t in post['tags']] == ['flask']


def test_create_post_defaults_to_draft(admin_client, author_id, category_id):
    payload = _post_payload(author_id, category_id)
    del payload['status']
    post = admin_client.post('/api/admin/posts', json=payload).get_json()['post']
    assert post['status'] == 'DRAFT'


@pytest.mark.parametrize('overrides', [
    {'title': ''},
    {'content': None},
    {'slug': 'Bad Slug'},
    {'status': 'ARCHIVED'},
    {'date': 'yesterday'},
    {'tags': [999]},
])
def test_invalid_post_is_rejected(app, admin_client, author_id, category_id, overrides):
    r = admin_client.post('/api/admin/posts', json=_post_payload(author_id, category_id, **overrides))
    assert r.status_code == 400
    assert _count(app, Post) == 0


def test_post_with_unknown_author_is_rejected(app, admin_client, category_id):
    r = admin_client.post('/api/admin/posts', json=_post_payload(999, category_id))
    assert r.status_code == 400
    assert _count(app, Post) == 0


def test_duplicate_post_slug_conflicts(admin_client, author_id, category_id):
    admin_client.post('/api/admin/posts', json=_post_payload(author_id, category_id))
    r = admin_client.post('/api/admin/posts', json=_post_payload(author_id, category_id))
    assert r.status_code == 409


def test_update_and_delete_post(app, admin_client, author_id, category_id):
    post_id = admin_client.post('/api/admin/posts',
                                json=_post_payload(author_id, category_id)).get_json()['post']['id']

    r = admin_client.put(f'/api/admin/posts/{post_id}',
                         json=_post_payload(author_id, category_id, title='Renamed', slug='renamed'))
    assert r.status_code == 200
    assert r.get_json()['post']['slug'] == 'renamed'

    assert admin_client.delete(f'/api/admin/posts/{post_id}').status_code == 200
    assert _count(app, Post) == 0
    assert admin_client.get(f'/api/admin/posts/{post_id}').status_code == 404


def test_author_with_posts_cannot_be_deleted(admin_client, author_id, category_id):
    admin_client.post('/api/admin/posts', json=_post_payload(author_id, category_id))
    assert admin_client.delete(f'/api/admin/authors/{author_id}').status_code == 409


def test_author_social_links_are_filtered(admin_client):
    r = admin_client.post('/api/admin/authors', json={
        'name': 'Grace',
        'social': {'github': 'grace', 'myspace': 'grace', 'twitter': ' '},
    })
    assert r.status_code == 201
    assert r.get_json()['social'] == {'github': 'grace'}


# Users

def test_create_user_normalizes_email_and_hides_password(admin_client):
    r = admin_client.post('/api/admin/users', json={
        'name': 'Writer', 'email': ' Writer@Example.com ', 'password': 'writer123', 'role': 'user',
    })
    assert r.status_code == 201
    user = r.get_json()['user']
    assert user['email'] == 'writer@example.com'
    assert user['role'] == 'USER'
    assert 'password' not in user

    users = admin_client.get('/api/admin/users').get_json()['users']
    assert all('password' not in u for u in users)


def test_create_user_rejects_duplicates_and_short_passwords(admin_client, admin_user):
    r = admin_client.post('/api/admin/users', json={
        'name': 'Again', 'email': admin_user, 'password': 'secret123',
    })
    assert r.status_code == 409
    r = admin_client.post('/api/admin/users', json={
        'name': 'Short', 'email': 'short@example.com', 'password': '123',
    })
    assert r.status_code == 400


def test_cannot_delete_last_admin(app, admin_client, admin_user):
    with app.app_context():
        admin_id = User.query.filter_by(email=admin_user).first().id
    r = admin_client.delete(f'/api/admin/users/{admin_id}')
    assert r.status_code == 403
    assert r.get_json()['message'] == 'Cannot delete the last admin account'
    assert _count(app, User) == 1


def test_cannot_delete_self(app, admin_client, admin_user):
    make_user(app, 'other-admin@example.com', role=Role.ADMIN.value)
    with app.app_context():
        admin_id = User.query.filter_by(email=admin_user).first().id
    r = admin_client.delete(f'/api/admin/users/{admin_id}')
    assert r.status_code == 403
    assert r.get_json()['message'] == 'Cannot delete your own account while logged in'


def test_delete_other_user(app, admin_client):
    user_id = make_user(app, 'bye@example.com')
    assert admin_client.delete(f'/api/admin/users/{user_id}').status_code == 200
    assert admin_client.get(f'/api/admin/users/{user_id}').status_code == 404


def test_cannot_demote_last_admin(app, admin_client, admin_user):
    with app.app_context():
        admin_id = User.query.filter_by(email=admin_user).first().id
    r = admin_client.put(f'/api/admin/users/{admin_id}', json={'name': 'Admin User', 'role': 'USER'})
    assert r.status_code == 403


def test_changing_own_email_reissues_cookie(app, admin_client, admin_user):
    with app.app_context():
        admin_id = User.query.filter_by(email=admin_user).first().id
    r = admin_client.put(f'/api/admin/users/{admin_id}',
                         json={'name': 'Admin User', 'email': 'boss@example.com'})
    assert r.status_code == 200
    assert admin_client.get_cookie('admin-auth').value == 'boss@example.com'
    assert admin_client.get('/api/admin/users').status_code == 200


def test_changing_someone_elses_email_keeps_cookie(app, admin_client, admin_user):
    user_id = make_user(app, 'writer@example.com')
    r = admin_client.put(f'/api/admin/users/{user_id}',
                         json={'name': 'Writer', 'email': 'author@example.com'})
    assert r.status_code == 200
    assert admin_client.get_cookie('admin-auth').value == admin_user


# Settings

def test_settings_round_trip(admin_client):
    settings = admin_client.get('/api/admin/settings').get_json()['settings']
    assert settings['site_title'] == 'Blog'

    r = admin_client.put('/api/admin/settings', json={'site_title': 'My Blog', 'custom_key': 'x'})
    assert r.status_code == 200
    assert r.get_json()['settings'] == {'site_title': 'My Blog', 'custom_key': 'x'}

    settings = admin_client.get('/api/admin/settings').get_json()['settings']
    assert settings['site_title'] == 'My Blog'
    assert settings['custom_key'] == 'x'


def test_public_settings_do_not_need_a_session(admin_client, client):
    admin_client.put('/api/admin/settings', json={'site_title': 'My Blog'})
    client.delete_cookie('admin-auth')
    assert client.get('/api/settings').get_json()['settings']['site_title'] == 'My Blog'


# Media

def _image(name='cat.png', mimetype='image/png', payload=b'\x89PNG fake'):
    return {'file': (io.BytesIO(payload), name, mimetype)}


def test_upload_without_token_returns_placeholder(app, admin_client):
    r = admin_client.post('/api/admin/media/upload', data=_image(), content_type='multipart/form-data')
    assert r.status_code == 200
    data = r.get_json()
    assert data['url'] == app.config['BLOB_PLACEHOLDER_URL']
    assert data['pathname'].startswith('uploads/')
    assert data['pathname'].endswith('-cat.png')


def test_upload_rejects_missing_and_unsupported_files(admin_client):
    r = admin_client.post('/api/admin/media/upload', data={}, content_type='multipart/form-data')
    assert r.status_code == 400
    r = admin_client.post('/api/admin/media/upload', data=_image('notes.txt', 'text/plain'),
                          content_type='multipart/form-data')
    assert r.status_code == 400


class _FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body or {}

    def json(self):
        return self._body


def test_upload_sends_file_to_blob_store(app, admin_client, monkeypatch):
    app.config['BLOB_READ_WRITE_TOKEN'] = 'token-123'
    calls = []

    def fake_put(url, data=None, headers=None, timeout=None):
        calls.append((url, data, headers))
        return _FakeResponse(200, {'url': 'https://cdn.example.com/cat.png', 'pathname': 'uploads/cat.png'})

    monkeypatch.setattr(blob.requests, 'put', fake_put)
    r = admin_client.post('/api/admin/media/upload', data=_image(), content_type='multipart/form-data')

    assert r.status_code == 200
    assert r.get_json()['url'] == 'https://cdn.example.com/cat.png'
    url, data, headers = calls[0]
    assert url.startswith('https://blob.vercel-storage.com/uploads/')
    assert data == b'\x89PNG fake'
    assert headers['authorization'] == 'Bearer token-123'
    assert headers['x-content-type'] == 'image/png'


@pytest.mark.parametrize('outcome', [
    _FakeResponse(403),
    _FakeResponse(500),
    requests.exceptions.ConnectionError('down'),
])
def test_blob_store_failures_become_502(app, admin_client, monkeypatch, outcome):
    app.config['BLOB_READ_WRITE_TOKEN'] = 'token-123'

    def fake_put(*args, **kwargs):
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(blob.requests, 'put', fake_put)
    r = admin_client.post('/api/admin/media/upload', data=_image(), content_type='multipart/form-data')
    assert r.status_code == 502
    assert r.get_json()['success'] is False


def test_media_listing_is_empty_without_token(admin_client):
    assert admin_client.get('/api/admin/media').get_json() == {'images': []}


def test_delete_media(app, admin_client, monkeypatch):
    app.config['BLOB_READ_WRITE_TOKEN'] = 'token-123'
    sent = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        sent.update(url=url, json=json)
        return _FakeResponse(200)

    monkeypatch.setattr(blob.requests, 'post', fake_post)
    r = admin_client.delete('/api/admin/media', json={'url': 'https://cdn.example.com/cat.png'})
    assert r.status_code == 200
    assert sent['url'].endswith('/delete')
    assert sent['json'] == {'urls': ['https://cdn.example.com/cat.png']}


def test_delete_media_needs_url_and_token(admin_client):
    assert admin_client.delete('/api/admin/media', json={}).status_code == 400
    assert admin_client.delete('/api/admin/media', json={'url': 5}).status_code == 400
    r = admin_client.delete('/api/admin/media', json={'url': 'https://cdn.example.com/cat.png'})
    assert r.status_code == 502


def test_accented_category_name_gets_ascii_slug(admin_client):
    r = admin_client.post('/api/admin/categories', json={'name': 'Café Culture'})
    assert r.status_code == 201
    assert r.get_json()['slug'] == 'cafe-culture'


@pytest.mark.parametrize('overrides', [
    {'title': 123},
    {'status': 1},
    {'content': ['not', 'text']},
    {'excerpt': 5},
])
def test_non_string_post_fields_are_rejected(app, admin_client, author_id, category_id, overrides):
    r = admin_client.post('/api/admin/posts', json=_post_payload(author_id, category_id, **overrides))
    assert r.status_code == 400
    assert r.get_json()['success'] is False
    assert _count(app, Post) == 0


@pytest.mark.parametrize('path, payload', [
    ('/api/admin/categories', {'name': 42}),
    ('/api/admin/tags', {'name': 'Flask', 'slug': 7}),
    ('/api/admin/authors', {'name': ['Ada']}),
    ('/api/admin/users', {'name': 'W', 'email': 1, 'password': 'secret123'}),
    ('/api/admin/users', {'name': 'W', 'email': 'w@example.com', 'password': 123456}),
])
def test_non_string_fields_are_rejected(admin_client, path, payload):
    r = admin_client.post(path, json=payload)
    assert r.status_code == 400
    assert r.get_json()['success'] is False


def test_unsupported_method_is_json_405(admin_client):
    r = admin_client.patch('/api/admin/posts')
    assert r.status_code == 405
    assert r.get_json() == {'success': False, 'message': 'Method not allowed'}
