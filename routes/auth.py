"""
Admin authentication routes (session based, JSON in and out).
"""
from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf
from database import db
from models.user import User
from services.audit import log_action
from services.credentials import CredentialError, create_credential_holder
import strings as text

auth_bp = Blueprint('auth', __name__)


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@auth_bp.route('/csrf', methods=['GET'])
def csrf_token():
    """Token to send back in the X-CSRFToken header on admin writes."""
    return jsonify({'csrf_token': generate_csrf()})


@auth_bp.route('/login', methods=['POST'])
def login():
    """Log in a dashboard account."""
    body = _json_body()
    username = body.get('username')
    password = body.get('password')
    if not isinstance(username, str) or not isinstance(password, str):
        return jsonify({'error': text.tr('AUTH', 'invalid_login')}), 401
    username = username.strip()

    user = User.query.filter_by(username=username).first() if username else None
    if not user or not user.check_password(password):
        return jsonify({'error': text.tr('AUTH', 'invalid_login')}), 401
    if user.disabled:
        return jsonify({'error': text.tr('AUTH', 'account_disabled')}), 403

    login_user(user)
    log_action('login', 'user', user.id, {'username': user.username, 'role': user.role}, actor=user)
    db.session.commit()
    return jsonify({'user': user.to_dict()})


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Log out current user."""
    log_action('logout', 'user', current_user.id, {'username': current_user.username})
    db.session.commit()
    logout_user()
    return jsonify({'success': True})


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'user': current_user.to_dict()})


@auth_bp.route('/bootstrap', methods=['POST'])
def bootstrap():
    """Create the first administrator when none exists."""
    if User.query.filter_by(role=User.ROLE_ADMIN).count() > 0:
        return jsonify({'error': text.tr('AUTH', 'bootstrap_disabled')}), 409

    body = _json_body()
    try:
        user = create_credential_holder(
            name=body.get('name') or body.get('username') or '',
            email=body.get('email'),
            role=User.ROLE_ADMIN,
            username=body.get('username') or '',
            password=body.get('password') or '',
        )
    except CredentialError as exc:
        return jsonify({'error': exc.message}), exc.status_code

    return jsonify({'user': user.to_dict()}), 201
