"""Access event recorder: append one access log row per controller report."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from database import db
from models.access_log import AccessLog

logger = logging.getLogger(__name__)


class AccessLogWriteError(Exception):
    """The store rejected the insert; nothing was written."""

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details


def record_access_event(controller_id: str, card_number: str, pin: str, door_id: str,
                        access_type: str, notes: str | None = None,
                        record_pin: bool = True) -> AccessLog:
    """Insert exactly one access log entry stamped with the server clock.

    ``access_type`` is stored as the controller reported it; no access
    decision is made here. Identical calls produce distinct rows.
    """
    entry = AccessLog(
        card_number=card_number,
        pin_used=pin if record_pin else None,
        door_id=door_id,
        access_type=access_type,
        controller_id=controller_id,
        notes=notes,
        timestamp=datetime.utcnow(),
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        details = str(getattr(exc, 'orig', None) or exc)
        logger.exception('Failed to write access log entry',
                         extra={'controller_id': controller_id, 'door_id': door_id})
        raise AccessLogWriteError(details) from exc

    logger.info('Access event recorded', extra={
        'controller_id': controller_id,
        'door_id': door_id,
        'access_type': access_type,
    })
    return entry
