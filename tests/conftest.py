import pytest

from blog import create_app
from blog.config import TestConfig
from blog.extensions import db
from blog.models import User, Role


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_user(app, email, password='secret123', role=Role.USER.value, name='Test User'):
    with app.app_context():
        user = User(name=name, email=email, role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


@pytest.fixture()
def admin_user(app):
    make_user(app, 'admin@example.com', 'admin123', Role.ADMIN.value, 'Admin User')
    return 'admin@example.com'


@pytest.fixture()
def regular_user(app):
    make_user(app, 'writer@example.com', 'writer123', Role.USER.value, 'Writer')
    return 'writer@example.com'


@pytest.fixture()
def admin_client(client, admin_user):
    client.set_cookie('admin-auth', admin_user)
    return client


@pytest.fixture()
def user_client(client, regular_user):
    client.set_cookie('admin-auth', regular_user)
    return client
