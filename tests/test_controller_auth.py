from services.controller_auth import (
    REASON_INVALID,
    REASON_MISSING,
    ControllerAuthorized,
    ControllerRejected,
    authenticate_controller,
)
from services.controller_keys import revoke_controller_key


def test_missing_key_is_rejected_with_401(app):
    with app.app_context():
        for presented in (None, ''):
            result = authenticate_controller(presented)
            assert isinstance(result, ControllerRejected)
            assert result.reason == REASON_MISSING
            assert result.status_code == 401
            assert result.message == 'Missing API key'


def test_unknown_key_is_rejected_with_403(app, controller_key):
    with app.app_context():
        result = authenticate_controller('not-a-real-key')
        assert isinstance(result, ControllerRejected)
        assert result.reason == REASON_INVALID
        assert result.status_code == 403
        assert result.message == 'Invalid or inactive API key'


def test_active_key_yields_controller_identity(app, controller_key):
    with app.app_context():
        result = authenticate_controller(controller_key['api_key'])
        assert result == ControllerAuthorized(controller_id=controller_key['id'], controller_name='Main Entrance')


def test_key_match_is_exact(app, controller_key):
    with app.app_context():
        assert isinstance(authenticate_controller('ABC123'), ControllerRejected)
        assert isinstance(authenticate_controller('abc123 '), ControllerRejected)


def test_inactive_key_is_indistinguishable_from_unknown(app, make_key):
    make_key(api_key='revoked-key-value', is_active=False)
    with app.app_context():
        revoked = authenticate_controller('revoked-key-value')
        unknown = authenticate_controller('never-issued')
        assert revoked == unknown


def test_revocation_is_permanent(app, controller_key):
    with app.app_context():
        assert isinstance(authenticate_controller(controller_key['api_key']), ControllerAuthorized)
        revoke_controller_key(controller_key['id'])
        # Revoking again must not bring it back.
        revoke_controller_key(controller_key['id'])
    for _ in range(3):
        with app.app_context():
            assert isinstance(authenticate_controller(controller_key['api_key']), ControllerRejected)
