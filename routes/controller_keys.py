"""Controller API key lifecycle: issue, list and revoke."""
from flask import Blueprint, jsonify, request
from flask_login import current_user
from services.controller_keys import (
    ControllerKeyError,
    issue_controller_key,
    list_controller_keys,
    revoke_controller_key,
)

controller_keys_bp = Blueprint('controller_keys', __name__)


@controller_keys_bp.route('', methods=['GET'])
def list_keys():
    return jsonify({'keys': [key.to_dict() for key in list_controller_keys()]})


@controller_keys_bp.route('', methods=['POST'])
def create_key():
    """Issue a key; the secret is only ever shown in this response."""
    body = request.get_json(silent=True)
    body = body if isinstance(body, dict) else {}
    try:
        key = issue_controller_key(body.get('controller_name') or '', actor=current_user)
    except ControllerKeyError as exc:
        return jsonify({'error': exc.message}), exc.status_code
    return jsonify({'key': key.to_dict(include_secret=True)}), 201


@controller_keys_bp.route('/<key_id>/revoke', methods=['POST'])
def revoke_key(key_id):
    try:
        key = revoke_controller_key(key_id, actor=current_user)
    except ControllerKeyError as exc:
        return jsonify({'error': exc.message}), exc.status_code
    return jsonify({'key': key.to_dict()})
