"""Access log model: one row per door event reported by a controller."""
import uuid
from datetime import datetime
from sqlalchemy import event as sa_event
from database import db


class AccessLog(db.Model):
    """Append-only record of a door interaction.

    ``door_id`` and ``card_number`` are stored verbatim as reported and are
    not foreign keys: an entry may name a door that does not exist or a card
    that has since been reassigned.
    """

    __tablename__ = 'access_logs'
    __table_args__ = (
        db.Index('ix_access_logs_timestamp', 'timestamp'),
        db.Index('ix_access_logs_card_number', 'card_number'),
        db.Index('ix_access_logs_door_id', 'door_id'),
        db.Index('ix_access_logs_controller_id', 'controller_id'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    card_number = db.Column(db.String(64), nullable=True)
    pin_used = db.Column(db.String(64), nullable=True)
    door_id = db.Column(db.String(64), nullable=True)
    access_type = db.Column(db.String(64), nullable=False)
    controller_id = db.Column(db.String(36), db.ForeignKey('controller_api_keys.id'), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<AccessLog {self.access_type} card={self.card_number} door={self.door_id}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'card_number': self.card_number,
            'pin_used': self.pin_used,
            'door_id': self.door_id,
            'access_type': self.access_type,
            'controller_id': self.controller_id,
            'notes': self.notes,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }


class AccessLogImmutableError(RuntimeError):
    pass


@sa_event.listens_for(AccessLog, 'before_update')
def _refuse_update(mapper, connection, target):
    raise AccessLogImmutableError('Access log entries cannot be modified.')


@sa_event.listens_for(AccessLog, 'before_delete')
def _refuse_delete(mapper, connection, target):
    raise AccessLogImmutableError('Access log entries cannot be deleted.')
