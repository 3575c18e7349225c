import pytest

from app import create_app
from config import TestingConfig
from database import db
from models import AccessLog, ControllerApiKey, User


class CsrfEnabledConfig(TestingConfig):
    WTF_CSRF_ENABLED = True


@pytest.fixture
def csrf_app():
    app = create_app(CsrfEnabledConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


# Auth

def test_login_rejects_bad_password(client, make_user, login):
    make_user(username='admin', password='correct-horse', role=User.ROLE_ADMIN)

    response = login('admin', 'wrong-password')

    assert response.status_code == 401
    assert response.get_json() == {'error': 'Invalid username or password.'}


def test_disabled_account_cannot_log_in(client, make_user, login):
    make_user(username='former', password='correct-horse', disabled=True)

    assert login('former', 'correct-horse').status_code == 403


def test_me_and_logout(admin_client):
    me = admin_client.get('/auth/me')
    assert me.status_code == 200
    assert me.get_json()['user']['username'] == 'admin'

    assert admin_client.post('/auth/logout').status_code == 200
    assert admin_client.get('/auth/me').status_code == 401


def test_bootstrap_creates_first_admin_only(client, login):
    created = client.post('/auth/bootstrap', json={'username': 'root', 'password': 'long-enough-pw'})
    assert created.status_code == 201
    assert created.get_json()['user']['role'] == 'admin'

    again = client.post('/auth/bootstrap', json={'username': 'other', 'password': 'long-enough-pw'})
    assert again.status_code == 409

    assert login('root', 'long-enough-pw').status_code == 200


def test_bootstrap_validates_login(client):
    assert client.post('/auth/bootstrap', json={'username': 'ab', 'password': 'long-enough-pw'}).status_code == 400
    assert client.post('/auth/bootstrap', json={'username': 'root', 'password': 'short'}).status_code == 400


def test_controller_endpoints_skip_csrf(csrf_app):
    with csrf_app.app_context():
        db.session.add(ControllerApiKey(controller_name='Lobby', api_key='abc123'))
        db.session.commit()
    client = csrf_app.test_client()

    response = client.post('/log-access', json={
        'card_number': '1001', 'pin': '4321', 'door_id': 'lobby', 'access_type': 'granted',
    }, headers={'x-api-key': 'abc123'})

    assert response.status_code == 200


def test_admin_writes_require_csrf_token(csrf_app):
    with csrf_app.app_context():
        user = User(name='Site Admin', role=User.ROLE_ADMIN, username='admin')
        user.set_password('correct-horse')
        db.session.add(user)
        db.session.commit()
    client = csrf_app.test_client()

    without_token = client.post('/auth/login', json={'username': 'admin', 'password': 'correct-horse'})
    assert without_token.status_code == 400

    token = client.get('/auth/csrf').get_json()['csrf_token']
    with_token = client.post('/auth/login', json={'username': 'admin', 'password': 'correct-horse'},
                             headers={'X-CSRFToken': token})
    assert with_token.status_code == 200


# Doors

def test_admin_manages_doors(admin_client):
    created = admin_client.post('/api/doors', json={'name': 'Lobby', 'location': 'Ground floor'})
    assert created.status_code == 201
    door = created.get_json()['door']
    assert door['status'] == 'locked'

    patched = admin_client.patch(f"/api/doors/{door['id']}", json={'status': 'maintenance', 'disabled': True})
    assert patched.status_code == 200
    assert patched.get_json()['door']['status'] == 'maintenance'
    assert patched.get_json()['door']['disabled'] is True

    listed = admin_client.get('/api/doors').get_json()['doors']
    assert [d['name'] for d in listed] == ['Lobby']


def test_door_validation(admin_client):
    assert admin_client.post('/api/doors', json={}).status_code == 400
    assert admin_client.post('/api/doors', json={'name': 'X', 'status': 'ajar'}).status_code == 400
    assert admin_client.patch('/api/doors/no-such-door', json={'name': 'Y'}).status_code == 404


def test_staff_cannot_manage_doors(staff_client):
    assert staff_client.get('/api/doors').status_code == 403


# Access log queries

def _report(client, **overrides):
    body = {'card_number': '1001', 'pin': '4321', 'door_id': 'lobby', 'access_type': 'granted', **overrides}
    return client.post('/log-access', json=body, headers={'x-api-key': 'abc123'})


def test_staff_can_read_access_log_newest_first(app, staff_client, controller_key):
    _report(staff_client, door_id='lobby')
    _report(staff_client, door_id='dock')
    with app.app_context():
        assert AccessLog.query.count() == 2

    response = staff_client.get('/api/access-logs')

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['limit'] == 100
    timestamps = [entry['timestamp'] for entry in payload['entries']]
    assert timestamps == sorted(timestamps, reverse=True)
    assert {entry['door_id'] for entry in payload['entries']} == {'lobby', 'dock'}


def test_access_log_filters_and_limit(admin_client, controller_key):
    _report(admin_client, door_id='lobby', access_type='granted')
    _report(admin_client, door_id='lobby', access_type='denied')
    _report(admin_client, door_id='dock', access_type='granted')

    lobby = admin_client.get('/api/access-logs?door_id=lobby').get_json()
    assert lobby['filters'] == {'door_id': 'lobby'}
    assert len(lobby['entries']) == 2

    denied = admin_client.get('/api/access-logs?door_id=lobby&access_type=denied').get_json()
    assert len(denied['entries']) == 1

    limited = admin_client.get('/api/access-logs?limit=1').get_json()
    assert limited['limit'] == 1
    assert len(limited['entries']) == 1

    clamped = admin_client.get('/api/access-logs?limit=100000').get_json()
    assert clamped['limit'] == 500


def test_access_log_requires_login(client):
    assert client.get('/api/access-logs').status_code == 401


# Health

def test_health(client):
    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}


def test_health_deps_reports_tables(client):
    response = client.get('/api/health/deps')

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['db_ok'] is True
    assert payload['required_tables_present'] is True
    assert payload['missing_tables'] == []


@pytest.mark.parametrize('body, message', [
    ({'name': 123}, 'name must be a string.'),
    ({'name': 'Lobby', 'location': ['ground']}, 'location must be a string.'),
    ({'name': 'Lobby', 'status': 1}, 'Status must be one of: locked, unlocked, maintenance.'),
])
def test_door_fields_must_have_the_right_type(admin_client, body, message):
    response = admin_client.post('/api/doors', json=body)

    assert response.status_code == 400
    assert response.get_json() == {'error': message}
    assert admin_client.get('/api/doors').get_json()['doors'] == []


def test_door_patch_rejects_bad_types_without_saving(admin_client):
    door = admin_client.post('/api/doors', json={'name': 'Lobby'}).get_json()['door']

    bad_flag = admin_client.patch(f"/api/doors/{door['id']}", json={'name': 'Renamed', 'disabled': 'yes'})
    bad_name = admin_client.patch(f"/api/doors/{door['id']}", json={'name': 7})

    assert bad_flag.status_code == 400
    assert bad_flag.get_json() == {'error': 'disabled must be true or false.'}
    assert bad_name.status_code == 400
    assert bad_name.get_json() == {'error': 'name must be a string.'}
    assert admin_client.get('/api/doors').get_json()['doors'][0]['name'] == 'Lobby'


def test_login_with_non_string_fields_is_a_failed_login(client, make_user, login):
    make_user(username='admin', password='correct-horse', role=User.ROLE_ADMIN)

    assert login(123, 'correct-horse').status_code == 401
    assert login('admin', ['correct-horse']).status_code == 401


def test_bootstrap_rejects_non_string_fields(client):
    response = client.post('/auth/bootstrap', json={'username': 12345, 'password': 'long-enough-pw'})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'name must be a string.'}
