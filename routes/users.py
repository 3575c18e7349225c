"""
Credential-holder administration: card, PIN and account flags only.
"""
from flask import Blueprint, abort, jsonify, request
from flask_login import current_user
from database import db
from models.user import User
from services.credentials import (
    CredentialError,
    create_credential_holder,
    delete_credential_holder,
    reset_pin,
    set_account_flags,
    update_credentials,
)

users_bp = Blueprint('users', __name__)


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _get_user_or_404(user_id: str) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        abort(404)
    return user


def _credential_error(exc: CredentialError):
    return jsonify({'error': exc.message}), exc.status_code


@users_bp.route('', methods=['GET'])
def list_users():
    query = User.query
    card_number = request.args.get('card_number')
    if card_number:
        query = query.filter_by(card_number=card_number)
    users = query.order_by(User.name).all()
    return jsonify({'users': [user.to_dict() for user in users]})


@users_bp.route('', methods=['POST'])
def create_user():
    body = _json_body()
    try:
        user = create_credential_holder(
            name=body.get('name') or '',
            card_number=body.get('card_number'),
            pin=body.get('pin'),
            email=body.get('email'),
            role=body.get('role') or User.ROLE_STAFF,
            username=body.get('username'),
            password=body.get('password'),
            actor=current_user,
        )
    except CredentialError as exc:
        return _credential_error(exc)
    return jsonify({'user': user.to_dict()}), 201


@users_bp.route('/<user_id>', methods=['GET'])
def get_user(user_id):
    return jsonify({'user': _get_user_or_404(user_id).to_dict()})


@users_bp.route('/<user_id>', methods=['PATCH'])
def update_user(user_id):
    """Change card number, PIN, or the disabled / pin_disabled flags."""
    user = _get_user_or_404(user_id)
    body = _json_body()
    # All or nothing: both steps stage their changes and the route commits once.
    try:
        if 'disabled' in body or 'pin_disabled' in body:
            set_account_flags(
                user,
                disabled=body.get('disabled'),
                pin_disabled=body.get('pin_disabled'),
                actor=current_user,
                commit=False,
            )
        if 'card_number' in body or 'pin' in body:
            update_credentials(
                user,
                card_number=body.get('card_number'),
                pin=body.get('pin'),
                actor=current_user,
                commit=False,
            )
    except CredentialError as exc:
        db.session.rollback()
        return _credential_error(exc)
    db.session.commit()
    return jsonify({'user': user.to_dict()})


@users_bp.route('/<user_id>/pin/reset', methods=['POST'])
def reset_user_pin(user_id):
    """Generate a new PIN; the response is the only place it is shown."""
    user = _get_user_or_404(user_id)
    try:
        pin = reset_pin(user, actor=current_user)
    except CredentialError as exc:
        return _credential_error(exc)
    return jsonify({'user': user.to_dict(), 'pin': pin})


@users_bp.route('/<user_id>', methods=['DELETE'])
def delete_user(user_id):
    user = _get_user_or_404(user_id)
    try:
        delete_credential_holder(user, actor=current_user)
    except CredentialError as exc:
        return _credential_error(exc)
    return jsonify({'success': True})
