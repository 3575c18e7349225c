"""Access decision: does a presented card + PIN identify a usable person?"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from werkzeug.security import check_password_hash, generate_password_hash

from models.user import User

logger = logging.getLogger(__name__)

# Verified when no candidate exists so a miss costs the same as a wrong PIN.
_DUMMY_PIN_HASH = generate_password_hash('0000-no-such-credential')


@dataclass(frozen=True)
class AccessGranted:
    user_id: str
    name: str
    card_number: str

    def to_dict(self) -> dict:
        return {'user_id': self.user_id, 'name': self.name, 'card_number': self.card_number}


@dataclass(frozen=True)
class AccessDenied:
    pass


AccessDecision = Union[AccessGranted, AccessDenied]


def decide_access(card_number: str, pin: str) -> AccessDecision:
    """Decide whether ``card_number`` + ``pin`` belong to a usable credential.

    Card numbers are compared exactly and PINs are verified against their
    salted hash. Disabled accounts and accounts with the PIN disabled are
    never candidates, so a denial looks the same whatever the cause.
    Exactly one verified candidate is required.
    """
    candidates = (
        User.query
        .filter_by(card_number=card_number, disabled=False, pin_disabled=False)
        .all()
    )
    if not candidates:
        check_password_hash(_DUMMY_PIN_HASH, pin)
        return AccessDenied()

    matches = [user for user in candidates if user.check_pin(pin)]
    if len(matches) != 1:
        if len(matches) > 1:
            logger.error('Card number matches more than one enabled credential; denying',
                         extra={'reason': 'ambiguous_credential'})
        return AccessDenied()

    user = matches[0]
    return AccessGranted(user_id=user.id, name=user.name, card_number=user.card_number)
