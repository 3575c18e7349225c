"""
Controller-facing endpoints called by door hardware.

Every request is checked in the same order: API key header, API key lookup,
JSON body, required fields. Nothing past a failed step runs.
"""
import logging
from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest
import config
import strings as text
from services.access_decision import AccessGranted, decide_access
from services.access_recorder import AccessLogWriteError, record_access_event
from services.controller_auth import ControllerRejected, authenticate_controller

controller_bp = Blueprint('controller', __name__)
logger = logging.getLogger(__name__)

CONTROLLER_PATHS = ('/validate-cardpin', '/log-access')


def _error(message: str, status_code: int, **extra):
    return jsonify({'error': message, **extra}), status_code


def _read_body():
    """Parse the request body as JSON regardless of Content-Type.

    Returns ``(body, None)`` or ``(None, error_response)``. A JSON ``null`` or
    a non-object payload is treated as an empty object.
    """
    try:
        body = request.get_json(force=True)
    except BadRequest:
        return None, _error(text.controller('invalid_json'), 400)
    if not isinstance(body, dict):
        body = {}
    return body, None


def _field(body: dict, name: str) -> str | None:
    """Return a required field as a string, or None when it is missing or empty."""
    value = body.get(name)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)):
        return str(value) if value else None
    return None


def _authenticate():
    result = authenticate_controller(request.headers.get(config.CONTROLLER_API_KEY_HEADER))
    if isinstance(result, ControllerRejected):
        return None, _error(result.message, result.status_code)
    return result, None


@controller_bp.route('/validate-cardpin', methods=['POST'])
def validate_cardpin():
    """Decide whether a card + PIN pair identifies a usable person."""
    controller, rejected = _authenticate()
    if rejected:
        return rejected

    body, invalid = _read_body()
    if invalid:
        return invalid

    card_number = _field(body, 'card_number')
    pin = _field(body, 'pin')
    if not card_number or not pin:
        return _error(text.controller('cardpin_required'), 400)

    decision = decide_access(card_number, pin)
    if not isinstance(decision, AccessGranted):
        logger.info('Access denied', extra={'controller_id': controller.controller_id})
        return _error(text.controller('access_denied'), 403)

    logger.info('Access granted', extra={'controller_id': controller.controller_id, 'user_id': decision.user_id})
    return jsonify(decision.to_dict()), 200


@controller_bp.route('/log-access', methods=['POST'])
def log_access():
    """Record a door event reported by a controller."""
    controller, rejected = _authenticate()
    if rejected:
        return rejected

    body, invalid = _read_body()
    if invalid:
        return invalid

    card_number = _field(body, 'card_number')
    pin = _field(body, 'pin')
    door_id = _field(body, 'door_id')
    access_type = _field(body, 'access_type')
    if not (card_number and pin and door_id and access_type):
        return _error(text.controller('log_fields_required'), 400)

    notes = body.get('notes')
    if notes is not None and not isinstance(notes, str):
        notes = str(notes)

    try:
        record_access_event(
            controller_id=controller.controller_id,
            card_number=card_number,
            pin=pin,
            door_id=door_id,
            access_type=access_type,
            notes=notes,
            record_pin=bool(current_app.config.get('ACCESS_LOG_RECORD_PIN', True)),
        )
    except AccessLogWriteError as exc:
        return _error(text.controller('db_error'), 500, details=exc.details)

    return jsonify({'success': True}), 200
