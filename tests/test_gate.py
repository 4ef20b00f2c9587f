import pytest

from blog.auth.gate import classify_path, decide
from blog.config import TestConfig

CONFIG = {k: getattr(TestConfig, k) for k in
          ('ADMIN_PREFIX', 'ADMIN_API_PREFIX', 'LOGIN_PATH', 'LOGOUT_PATH', 'DASHBOARD_PATH')}


@pytest.mark.parametrize('path, expected', [
    ('/admin/login', 'login'),
    ('/admin/logout', 'logout'),
    ('/admin', 'admin'),
    ('/admin/posts/3/edit', 'admin'),
    ('/api/admin/categories', 'admin_api'),
    ('/administrator', None),
    ('/posts/hello', None),
    ('/api/posts', None),
])
def test_classify_path(path, expected):
    assert classify_path(path, CONFIG) == expected


def test_decision_table():
    assert decide('login', True, CONFIG) == '/admin/dashboard'
    assert decide('login', False, CONFIG) is None
    assert decide('admin', True, CONFIG) is None
    assert decide('admin', False, CONFIG) == '/admin/login'
    assert decide('logout', True, CONFIG) is None
    assert decide('logout', False, CONFIG) is None
    assert decide('admin_api', False, CONFIG) is None


@pytest.mark.parametrize('path', ['/admin/dashboard', '/admin/posts', '/admin/users/create', '/admin/settings'])
def test_admin_paths_without_cookie_redirect_to_login(client, path):
    r = client.get(path)
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/login')
    assert r.headers['X-Robots-Tag'] == 'noindex, nofollow'


def test_login_page_with_cookie_redirects_to_dashboard(client):
    # presence is enough; the gate does not look the user up
    client.set_cookie('admin-auth', 'anyone@example.com')
    r = client.get('/admin/login')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/dashboard')


def test_login_page_without_cookie_is_served(client):
    r = client.get('/admin/login')
    assert r.status_code == 200
    assert 'Admin Sign In' in r.get_data(as_text=True)
    assert r.headers['X-Robots-Tag'] == 'noindex, nofollow'


def test_logout_path_is_always_allowed(client):
    r = client.get('/admin/logout')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/login')


def test_admin_api_without_cookie_reaches_handler(client):
    r = client.get('/api/admin/posts')
    assert r.status_code == 401
    assert r.get_json()['success'] is False
    assert r.headers['X-Robots-Tag'] == 'noindex, nofollow'


def test_public_pages_are_not_gated(client):
    r = client.get('/')
    assert r.status_code == 200
    assert 'X-Robots-Tag' not in r.headers


def test_stale_cookie_passes_gate_but_not_guard(client):
    client.set_cookie('admin-auth', 'ghost@example.com')
    r = client.get('/admin/dashboard')
    assert r.status_code == 302
    assert r.headers['Location'].endswith('/admin/login')
    # the stale cookie is dropped so the login page does not bounce back
    assert client.get_cookie('admin-auth') is None
    assert client.get('/admin/login').status_code == 200


def test_non_admin_cookie_gets_forbidden_page(user_client):
    r = user_client.get('/admin/dashboard')
    assert r.status_code == 403
    assert 'Access denied' in r.get_data(as_text=True)


def test_admin_cookie_reaches_dashboard(admin_client):
    r = admin_client.get('/admin/dashboard')
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'Dashboard' in body
    assert 'admin@example.com' in body
