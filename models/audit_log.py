"""Admin audit trail: who changed keys, credentials and doors, and when."""
import json
from datetime import datetime
from database import db


class AuditLog(db.Model):
    """One row per administrative change.

    Actions written today: ``controller_key_issued``, ``controller_key_revoked``,
    ``user_created``, ``credentials_updated``, ``account_flags_changed``,
    ``pin_reset``, ``user_deleted``, ``door_created``, ``door_updated``,
    ``login`` and ``logout``. Controller traffic goes to ``access_logs``
    instead. ``details_json`` never holds PINs, passwords or key secrets.
    """

    __tablename__ = 'audit_logs'
    __table_args__ = (
        db.Index('ix_audit_logs_created_at', 'created_at'),
        db.Index('ix_audit_logs_actor', 'actor_user_id'),
        db.Index('ix_audit_logs_action', 'action'),
    )

    id = db.Column(db.Integer, primary_key=True)
    # Kept as NULL when the acting admin is later deleted.
    actor_user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    action = db.Column(db.String(80), nullable=False)
    entity_type = db.Column(db.String(80), nullable=False)  # controller_api_key, user, door
    entity_id = db.Column(db.String(36), nullable=True)
    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    details_json = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<AuditLog {self.action} {self.entity_type}:{self.entity_id}>'

    @property
    def details(self) -> dict:
        return json.loads(self.details_json) if self.details_json else {}
