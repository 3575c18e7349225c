"""Controller identity check shared by every controller-facing endpoint."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from models.controller_api_key import ControllerApiKey
import strings as text

logger = logging.getLogger(__name__)

REASON_MISSING = 'missing_credential'
REASON_INVALID = 'invalid_or_revoked'


@dataclass(frozen=True)
class ControllerAuthorized:
    controller_id: str
    controller_name: str


@dataclass(frozen=True)
class ControllerRejected:
    reason: str
    status_code: int
    message: str


ControllerAuthResult = Union[ControllerAuthorized, ControllerRejected]


def authenticate_controller(presented_key: str | None) -> ControllerAuthResult:
    """Resolve the calling controller from the secret it presented.

    An absent or empty secret is rejected without touching the database.
    Otherwise the secret must equal an active key exactly; revoked keys are
    indistinguishable from unknown ones.
    """
    if not presented_key:
        logger.warning('Controller request without API key', extra={'reason': REASON_MISSING})
        return ControllerRejected(REASON_MISSING, 401, text.controller('missing_api_key'))

    key = (
        ControllerApiKey.query
        .filter_by(api_key=presented_key, is_active=True)
        .first()
    )
    if key is None:
        logger.warning('Controller request with invalid or revoked API key', extra={'reason': REASON_INVALID})
        return ControllerRejected(REASON_INVALID, 403, text.controller('invalid_api_key'))

    return ControllerAuthorized(controller_id=key.id, controller_name=key.controller_name)
