"""
Door model.
"""
import uuid
from datetime import datetime
from database import db


class Door(db.Model):
    """A physical door served by one or more controllers."""

    __tablename__ = 'doors'

    STATUS_LOCKED = 'locked'
    STATUS_UNLOCKED = 'unlocked'
    STATUS_MAINTENANCE = 'maintenance'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(255), nullable=False, default='')
    status = db.Column(db.String(20), nullable=False, default=STATUS_LOCKED)  # locked, unlocked, maintenance
    disabled = db.Column(db.Boolean, nullable=False, default=False)

    access_count = db.Column(db.Integer, nullable=True, default=0)
    last_access = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Door {self.name} ({self.status})>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'status': self.status,
            'disabled': bool(self.disabled),
            'access_count': self.access_count or 0,
            'last_access': self.last_access.isoformat() if self.last_access else None,
        }
