"""Door records referenced by access log entries."""
from flask import Blueprint, abort, jsonify, request
from flask_login import current_user
from database import db
from models.door import Door
from services.audit import log_action
import config
import strings as text

doors_bp = Blueprint('doors', __name__)


class DoorInputError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _text(body: dict, field: str) -> str:
    value = body.get(field)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise DoorInputError(text.tr('DOORS', 'invalid_text', field=field))
    return value.strip()


def _name(body: dict) -> str:
    name = _text(body, 'name')
    if not name:
        raise DoorInputError(text.tr('DOORS', 'name_required'))
    return name


def _status(value) -> str:
    if not isinstance(value, str) or value not in config.DOOR_STATUSES:
        raise DoorInputError(text.tr('DOORS', 'invalid_status', statuses=', '.join(config.DOOR_STATUSES)))
    return value


@doors_bp.errorhandler(DoorInputError)
def door_input_error(exc):
    return jsonify({'error': exc.message}), 400


@doors_bp.route('', methods=['GET'])
def list_doors():
    doors = Door.query.order_by(Door.name).all()
    return jsonify({'doors': [door.to_dict() for door in doors]})


@doors_bp.route('', methods=['POST'])
def create_door():
    body = _json_body()
    name = _name(body)
    location = _text(body, 'location')
    status = _status(body.get('status') or Door.STATUS_LOCKED)

    door = Door(name=name, location=location, status=status)
    db.session.add(door)
    db.session.flush()
    log_action('door_created', 'door', door.id, {'name': name}, actor=current_user)
    db.session.commit()
    return jsonify({'door': door.to_dict()}), 201


@doors_bp.route('/<door_id>', methods=['PATCH'])
def update_door(door_id):
    door = db.session.get(Door, door_id)
    if door is None:
        abort(404)

    body = _json_body()
    changed = {}
    if 'name' in body:
        changed['name'] = _name(body)
    if 'location' in body:
        changed['location'] = _text(body, 'location')
    if 'status' in body:
        changed['status'] = _status(body.get('status'))
    if 'disabled' in body:
        if not isinstance(body['disabled'], bool):
            raise DoorInputError(text.tr('DOORS', 'invalid_flag', field='disabled'))
        changed['disabled'] = body['disabled']

    for field, value in changed.items():
        setattr(door, field, value)
    if changed:
        log_action('door_updated', 'door', door.id, changed, actor=current_user)
        db.session.commit()
    return jsonify({'door': door.to_dict()})
