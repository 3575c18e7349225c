"""Issue, revoke and list controller API keys."""
from __future__ import annotations

import logging
import secrets
from datetime import datetime

from flask import current_app, has_app_context

from database import db
from models.controller_api_key import ControllerApiKey
from services.audit import log_action
import config
import strings as text

logger = logging.getLogger(__name__)

_MAX_GENERATION_ATTEMPTS = 5


class ControllerKeyError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _key_length() -> int:
    length = config.BaseConfig.CONTROLLER_KEY_LENGTH
    if has_app_context():
        length = int(current_app.config.get('CONTROLLER_KEY_LENGTH', length))
    return max(length, config.MIN_CONTROLLER_KEY_LENGTH)


def generate_api_key(length: int | None = None) -> str:
    """Return a cryptographically random alphanumeric secret."""
    length = max(length or _key_length(), config.MIN_CONTROLLER_KEY_LENGTH)
    return ''.join(secrets.choice(config.CONTROLLER_KEY_ALPHABET) for _ in range(length))


def issue_controller_key(controller_name: str, actor=None) -> ControllerApiKey:
    name = (controller_name or '').strip()
    if not name:
        raise ControllerKeyError(text.tr('KEYS', 'name_required'))

    api_key = generate_api_key()
    for _ in range(_MAX_GENERATION_ATTEMPTS):
        if not ControllerApiKey.query.filter_by(api_key=api_key).first():
            break
        api_key = generate_api_key()
    else:
        raise RuntimeError('Could not generate a unique controller API key.')

    key = ControllerApiKey(
        controller_name=name,
        api_key=api_key,
        is_active=True,
        created_by_id=getattr(actor, 'id', None),
    )
    db.session.add(key)
    db.session.flush()
    log_action('controller_key_issued', 'controller_api_key', key.id,
               {'controller_name': name}, actor=actor)
    db.session.commit()
    logger.info('Controller API key issued', extra={'controller_id': key.id})
    return key


def revoke_controller_key(key_id: str, actor=None) -> ControllerApiKey:
    """Deactivate a key. There is no way back; revoking twice is a no-op."""
    key = db.session.get(ControllerApiKey, key_id)
    if key is None:
        raise ControllerKeyError(text.tr('KEYS', 'not_found'), status_code=404)
    if not key.is_active:
        return key

    key.is_active = False
    key.revoked_at = datetime.utcnow()
    log_action('controller_key_revoked', 'controller_api_key', key.id,
               {'controller_name': key.controller_name}, actor=actor)
    db.session.commit()
    logger.info('Controller API key revoked', extra={'controller_id': key.id})
    return key


def list_controller_keys() -> list[ControllerApiKey]:
    return ControllerApiKey.query.order_by(ControllerApiKey.created_at.desc()).all()
