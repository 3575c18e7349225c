import pytest

import config
from database import db
from models import AuditLog, ControllerApiKey
from services.controller_keys import (
    ControllerKeyError,
    generate_api_key,
    issue_controller_key,
    list_controller_keys,
    revoke_controller_key,
)


def test_generated_keys_are_long_alphanumeric_and_distinct():
    keys = {generate_api_key() for _ in range(50)}

    assert len(keys) == 50
    for key in keys:
        assert len(key) == 40
        assert set(key) <= set(config.CONTROLLER_KEY_ALPHABET)


def test_generated_keys_never_drop_below_minimum_length():
    assert len(generate_api_key(8)) == config.MIN_CONTROLLER_KEY_LENGTH


def test_short_configured_key_length_fails_at_startup():
    from app import create_app
    from config import TestingConfig

    class ShortKeys(TestingConfig):
        CONTROLLER_KEY_LENGTH = 12

    with pytest.raises(RuntimeError):
        create_app(ShortKeys)


def test_issue_stores_active_key_and_audits(app):
    with app.app_context():
        key = issue_controller_key('  Loading Dock  ')

        assert key.controller_name == 'Loading Dock'
        assert key.is_active is True
        assert key.revoked_at is None
        assert len(key.api_key) == app.config['CONTROLLER_KEY_LENGTH']
        audit = AuditLog.query.filter_by(action='controller_key_issued').one()
        assert audit.entity_id == key.id
        assert key.api_key not in audit.details_json


def test_issue_requires_a_name(app):
    with app.app_context():
        with pytest.raises(ControllerKeyError) as exc_info:
            issue_controller_key('   ')
        assert exc_info.value.status_code == 400
        assert ControllerApiKey.query.count() == 0


def test_revoke_is_idempotent(app):
    with app.app_context():
        key_id = issue_controller_key('Side Gate').id

        first = revoke_controller_key(key_id)
        revoked_at = first.revoked_at
        second = revoke_controller_key(key_id)

        assert second.is_active is False
        assert second.revoked_at == revoked_at
        assert AuditLog.query.filter_by(action='controller_key_revoked').count() == 1


def test_revoke_unknown_key(app):
    with app.app_context():
        with pytest.raises(ControllerKeyError) as exc_info:
            revoke_controller_key('no-such-id')
        assert exc_info.value.status_code == 404


def test_list_is_newest_first(app):
    with app.app_context():
        older = issue_controller_key('Older')
        newer = issue_controller_key('Newer')
        newer.created_at = older.created_at.replace(year=older.created_at.year + 1)
        db.session.commit()

        assert [key.controller_name for key in list_controller_keys()] == ['Newer', 'Older']


def test_admin_issues_key_once_and_it_authenticates(admin_client):
    created = admin_client.post('/api/controller-keys', json={'controller_name': 'Lobby'})

    assert created.status_code == 201
    key = created.get_json()['key']
    assert key['controller_name'] == 'Lobby'
    assert key['is_active'] is True
    secret = key['api_key']
    assert key['key_hint'] == secret[:config.CONTROLLER_KEY_HINT_LENGTH] + '...'

    listed = admin_client.get('/api/controller-keys').get_json()['keys']
    assert len(listed) == 1
    assert 'api_key' not in listed[0]

    response = admin_client.post('/validate-cardpin', json={'card_number': 'x', 'pin': 'y'},
                                 headers={'x-api-key': secret})
    assert response.status_code == 403
    assert response.get_json() == {'error': 'Not found or access denied'}


def test_admin_revokes_key(admin_client):
    key = admin_client.post('/api/controller-keys', json={'controller_name': 'Lobby'}).get_json()['key']

    revoked = admin_client.post(f"/api/controller-keys/{key['id']}/revoke")
    again = admin_client.post(f"/api/controller-keys/{key['id']}/revoke")

    assert revoked.status_code == 200
    assert revoked.get_json()['key']['is_active'] is False
    assert revoked.get_json()['key']['revoked_at'] is not None
    assert again.status_code == 200

    response = admin_client.post('/log-access', json={
        'card_number': '1', 'pin': '1', 'door_id': 'd', 'access_type': 'granted',
    }, headers={'x-api-key': key['api_key']})
    assert response.status_code == 403
    assert response.get_json() == {'error': 'Invalid or inactive API key'}


def test_admin_key_errors(admin_client):
    assert admin_client.post('/api/controller-keys', json={}).status_code == 400
    missing = admin_client.post('/api/controller-keys/no-such-id/revoke')
    assert missing.status_code == 404
    assert missing.get_json() == {'error': 'Controller API key not found'}


def test_key_management_requires_admin(client, staff_client):
    assert staff_client.get('/api/controller-keys').status_code == 403
    assert staff_client.post('/api/controller-keys', json={'controller_name': 'Lobby'}).status_code == 403


def test_key_management_requires_login(client):
    response = client.get('/api/controller-keys')

    assert response.status_code == 401
    assert response.get_json() == {'error': 'Authentication required'}


def test_created_by_is_recorded(app, admin_client):
    key = admin_client.post('/api/controller-keys', json={'controller_name': 'Lobby'}).get_json()['key']

    with app.app_context():
        row = db.session.get(ControllerApiKey, key['id'])
        assert row.created_by_id is not None
        assert row.created_by_id == AuditLog.query.filter_by(action='controller_key_issued').one().actor_user_id
