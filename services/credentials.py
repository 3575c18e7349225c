"""
Credential administration for card + PIN holders.

Covers only the fields the access decision depends on:
- card number (unique among enabled users)
- PIN (stored as a salted hash, never returned except on reset)
- the disabled / pin_disabled account flags
"""
from __future__ import annotations

import secrets

from database import db
from models.user import User
from services.audit import log_action
import config
import strings as text


class CredentialError(Exception):
    """Rejected credential change; ``status_code`` is 400 or 409."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def is_valid_pin(pin) -> bool:
    return (
        isinstance(pin, str)
        and pin.isdigit()
        and config.PIN_MIN_LENGTH <= len(pin) <= config.PIN_MAX_LENGTH
    )


def generate_pin(length: int = config.GENERATED_PIN_LENGTH) -> str:
    return ''.join(secrets.choice('0123456789') for _ in range(length))


def _require_valid_pin(pin):
    if not is_valid_pin(pin):
        raise CredentialError(text.tr(
            'CREDENTIALS', 'invalid_pin',
            min_length=config.PIN_MIN_LENGTH, max_length=config.PIN_MAX_LENGTH,
        ))


def _clean_text(value, field: str) -> str:
    """Strip a free-text field; anything but a string or None is rejected."""
    if value is None:
        return ''
    if not isinstance(value, str):
        raise CredentialError(text.tr('CREDENTIALS', 'invalid_text', field=field))
    return value.strip()


def _normalize_card(card_number) -> str | None:
    if card_number is None:
        return None
    if isinstance(card_number, bool) or not isinstance(card_number, (str, int)):
        raise CredentialError(text.tr('CREDENTIALS', 'card_required'))
    value = str(card_number).strip()
    return value or None


def ensure_card_available(card_number: str | None, exclude_user_id: str | None = None) -> None:
    """Reject a card number already held by another enabled user."""
    if not card_number:
        return
    query = User.query.filter_by(card_number=card_number, disabled=False)
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    if query.first() is not None:
        raise CredentialError(text.tr('CREDENTIALS', 'card_in_use', card_number=card_number), status_code=409)


def create_credential_holder(name: str, card_number=None, pin=None, email: str | None = None,
                             role: str = User.ROLE_STAFF, username: str | None = None,
                             password: str | None = None, actor=None) -> User:
    name = _clean_text(name, 'name')
    if not name:
        raise CredentialError(text.tr('CREDENTIALS', 'name_required'))
    if role not in config.USER_ROLES:
        raise CredentialError(text.tr('CREDENTIALS', 'invalid_role'))

    card = _normalize_card(card_number)
    if pin is not None:
        _require_valid_pin(pin)
        if not card:
            raise CredentialError(text.tr('CREDENTIALS', 'no_pin_without_card'))
    ensure_card_available(card)

    user = User(name=name, email=_clean_text(email, 'email') or None, role=role, card_number=card)
    if pin is not None:
        user.set_pin(pin)
    if username is not None or password is not None:
        set_login(user, username, password)

    db.session.add(user)
    db.session.flush()
    log_action('user_created', 'user', user.id,
               {'name': name, 'role': role, 'card_number': card, 'has_pin': pin is not None}, actor=actor)
    db.session.commit()
    return user


def set_login(user: User, username: str, password: str | None) -> None:
    """Attach dashboard login credentials to ``user`` (not committed)."""
    username = _clean_text(username, 'username')
    if len(username) < config.MIN_USERNAME_LENGTH:
        raise CredentialError(text.tr('AUTH', 'username_too_short', min_length=config.MIN_USERNAME_LENGTH))
    if not isinstance(password, str) or len(password) < config.MIN_PASSWORD_LENGTH:
        raise CredentialError(text.tr('AUTH', 'password_too_short', min_length=config.MIN_PASSWORD_LENGTH))
    existing = User.query.filter_by(username=username).first()
    if existing is not None and existing.id != user.id:
        raise CredentialError(text.tr('AUTH', 'username_taken'), status_code=409)
    user.username = username
    user.set_password(password)


def update_credentials(user: User, card_number=None, pin=None, actor=None, commit: bool = True) -> User:
    changed = {}
    if card_number is not None:
        card = _normalize_card(card_number)
        if not card:
            raise CredentialError(text.tr('CREDENTIALS', 'card_required'))
        if not user.disabled:
            ensure_card_available(card, exclude_user_id=user.id)
        user.card_number = card
        changed['card_number'] = card
    if pin is not None:
        _require_valid_pin(pin)
        if not user.card_number:
            raise CredentialError(text.tr('CREDENTIALS', 'no_pin_without_card'))
        user.set_pin(pin)
        changed['pin'] = 'changed'

    if changed:
        log_action('credentials_updated', 'user', user.id, changed, actor=actor)
        if commit:
            db.session.commit()
    return user


def set_account_flags(user: User, disabled=None, pin_disabled=None, actor=None, commit: bool = True) -> User:
    """Apply the disabled / pin_disabled flags.

    Pass ``commit=False`` to stage the change in a larger edit; the caller then
    commits or rolls back.
    """
    changed = {}
    for field, value in (('disabled', disabled), ('pin_disabled', pin_disabled)):
        if value is None:
            continue
        if not isinstance(value, bool):
            raise CredentialError(text.tr('CREDENTIALS', 'invalid_flag', field=field))
        if getattr(user, field) != value:
            changed[field] = value

    if changed.get('disabled') is False:
        # Re-enabling must not create a second enabled holder of the card.
        ensure_card_available(user.card_number, exclude_user_id=user.id)

    for field, value in changed.items():
        setattr(user, field, value)
    if changed:
        log_action('account_flags_changed', 'user', user.id, changed, actor=actor)
        if commit:
            db.session.commit()
    return user


def reset_pin(user: User, actor=None) -> str:
    """Assign a fresh random PIN and return it; it is not retrievable later."""
    if not user.card_number:
        raise CredentialError(text.tr('CREDENTIALS', 'no_pin_without_card'))
    pin = generate_pin()
    user.set_pin(pin)
    log_action('pin_reset', 'user', user.id, actor=actor)
    db.session.commit()
    return pin


def delete_credential_holder(user: User, actor=None) -> None:
    if not user.disabled:
        raise CredentialError(text.tr('CREDENTIALS', 'delete_enabled'), status_code=409)
    user_id = user.id
    details = {'name': user.name, 'card_number': user.card_number}
    db.session.delete(user)
    log_action('user_deleted', 'user', user_id, details, actor=actor)
    db.session.commit()
