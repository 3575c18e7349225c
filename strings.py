"""
Centralized response messages for the door access server.

Controller-facing messages are part of the wire contract with door firmware;
change them only together with the firmware.
"""
from __future__ import annotations

MESSAGES = {
    'CONTROLLER': {
        'missing_api_key': 'Missing API key',
        'invalid_api_key': 'Invalid or inactive API key',
        'invalid_json': 'Invalid JSON',
        'cardpin_required': 'card_number and pin required',
        'log_fields_required': 'card_number, pin, door_id, access_type required',
        'access_denied': 'Not found or access denied',
        'db_error': 'DB error',
    },
    'HTTP': {
        '400': 'Bad request',
        '401': 'Authentication required',
        '403': 'Forbidden',
        '404': 'Not found',
        '405': 'Method not allowed',
        '413': 'Request body too large',
        '500': 'Internal server error',
    },
    'AUTH': {
        'invalid_login': 'Invalid username or password.',
        'account_disabled': 'This account is disabled.',
        'bootstrap_disabled': 'Bootstrap is disabled because an administrator already exists.',
        'username_too_short': 'Username must be at least {min_length} characters.',
        'password_too_short': 'Password must be at least {min_length} characters.',
        'username_taken': 'That username is already in use.',
    },
    'KEYS': {
        'name_required': 'Controller name required',
        'not_found': 'Controller API key not found',
    },
    'CREDENTIALS': {
        'name_required': 'Name is required.',
        'invalid_pin': 'PIN must be {min_length} to {max_length} digits.',
        'card_required': 'Card number is required.',
        'card_in_use': 'Card number {card_number} is already assigned to an enabled user.',
        'delete_enabled': 'Disable the user before deleting it.',
        'invalid_role': 'Invalid role selection.',
        'invalid_flag': '{field} must be true or false.',
        'no_pin_without_card': 'A PIN requires a card number.',
        'invalid_text': '{field} must be a string.',
    },
    'DOORS': {
        'name_required': 'Door name is required.',
        'invalid_status': 'Status must be one of: {statuses}.',
        'invalid_flag': '{field} must be true or false.',
        'invalid_text': '{field} must be a string.',
    },
}


def section(name: str) -> dict:
    return MESSAGES.get(name, {})


def tr(section_name: str, key: str, **kwargs) -> str:
    text_value = section(section_name).get(key, key)
    return text_value.format(**kwargs) if kwargs else text_value


def controller(key: str) -> str:
    return tr('CONTROLLER', key)


def http_error(code: int, default: str = '') -> str:
    return section('HTTP').get(str(code), default or str(code))
