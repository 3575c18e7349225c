import pytest

from app import create_app
from config import TestingConfig
from database import db
from models import ControllerApiKey, User


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_key(app):
    """Insert a controller key row directly and return its id and secret."""
    def _make(api_key='abc123', controller_name='Main Entrance', is_active=True):
        with app.app_context():
            key = ControllerApiKey(controller_name=controller_name, api_key=api_key, is_active=is_active)
            db.session.add(key)
            db.session.commit()
            return {'id': key.id, 'api_key': key.api_key}
    return _make


@pytest.fixture
def controller_key(make_key):
    return make_key()


@pytest.fixture
def make_user(app):
    """Insert a credential holder directly, bypassing the admin checks."""
    def _make(name='Alice Example', card_number='1001', pin='4321', disabled=False,
              pin_disabled=False, role=User.ROLE_STAFF, username=None, password=None):
        with app.app_context():
            user = User(name=name, card_number=card_number, disabled=disabled,
                        pin_disabled=pin_disabled, role=role, username=username)
            if pin is not None:
                user.set_pin(pin)
            if password is not None:
                user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture
def login(client):
    def _login(username, password):
        return client.post('/auth/login', json={'username': username, 'password': password})
    return _login


@pytest.fixture
def admin_client(client, make_user, login):
    make_user(name='Site Admin', card_number=None, pin=None, role=User.ROLE_ADMIN,
              username='admin', password='correct-horse')
    response = login('admin', 'correct-horse')
    assert response.status_code == 200
    return client


@pytest.fixture
def staff_client(client, make_user, login):
    make_user(name='Front Desk', card_number='2002', pin='1111', role=User.ROLE_STAFF,
              username='frontdesk', password='staff-password')
    response = login('frontdesk', 'staff-password')
    assert response.status_code == 200
    return client
