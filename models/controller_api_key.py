"""
Controller API key model: identifies the door controller calling in.
"""
import uuid
from datetime import datetime
from database import db
import config


class ControllerApiKey(db.Model):
    """Secret issued to one physical controller.

    Keys are revoked by flipping ``is_active``, never deleted, so access log
    rows keep pointing at the controller that reported them.
    """

    __tablename__ = 'controller_api_keys'
    __table_args__ = (
        db.Index('ix_controller_api_keys_active', 'api_key', 'is_active'),
    )

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    controller_name = db.Column(db.String(200), nullable=False)
    api_key = db.Column(db.String(128), nullable=False, unique=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_by_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    revoked_at = db.Column(db.DateTime, nullable=True)

    access_logs = db.relationship('AccessLog', backref='controller', lazy='dynamic')

    def __repr__(self):
        state = 'active' if self.is_active else 'revoked'
        return f'<ControllerApiKey {self.controller_name} ({state})>'

    @property
    def key_hint(self) -> str:
        return f'{self.api_key[:config.CONTROLLER_KEY_HINT_LENGTH]}...'

    def to_dict(self, include_secret: bool = False) -> dict:
        payload = {
            'id': self.id,
            'controller_name': self.controller_name,
            'key_hint': self.key_hint,
            'is_active': bool(self.is_active),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'revoked_at': self.revoked_at.isoformat() if self.revoked_at else None,
        }
        if include_secret:
            payload['api_key'] = self.api_key
        return payload
