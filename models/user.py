"""
User model: credential holders (card + PIN) and dashboard accounts.
"""
import uuid
from datetime import datetime
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash
from database import db


def _new_id() -> str:
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    """A person who can present a card and PIN at a door.

    Administrators and staff additionally carry a username and password for
    the admin API. ``card_number`` is only unique among enabled users; the
    credential service enforces that, not the schema.
    """

    __tablename__ = 'users'
    __table_args__ = (
        db.Index('ix_users_card_number', 'card_number'),
    )

    ROLE_ADMIN = 'admin'
    ROLE_STAFF = 'staff'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=ROLE_STAFF)

    username = db.Column(db.String(80), nullable=True, unique=True)
    password_hash = db.Column(db.String(255), nullable=True)

    card_number = db.Column(db.String(64), nullable=True)
    pin_hash = db.Column(db.String(255), nullable=True)
    disabled = db.Column(db.Boolean, nullable=False, default=False)
    pin_disabled = db.Column(db.Boolean, nullable=False, default=False)

    last_access = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<User {self.name} ({self.role})>'

    @property
    def is_active(self):
        return not self.disabled

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def can_manage_keys(self):
        return self.is_admin

    @property
    def can_manage_users(self):
        return self.is_admin

    @property
    def can_manage_doors(self):
        return self.is_admin

    @property
    def can_view_logs(self):
        return self.role in {self.ROLE_ADMIN, self.ROLE_STAFF}

    @property
    def credential_usable(self) -> bool:
        return not self.disabled and not self.pin_disabled

    @property
    def has_pin(self) -> bool:
        return bool(self.pin_hash)

    def set_pin(self, pin: str):
        self.pin_hash = generate_password_hash(pin)

    def check_pin(self, pin: str) -> bool:
        if not self.pin_hash:
            return False
        return check_password_hash(self.pin_hash, pin)

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'username': self.username,
            'card_number': self.card_number,
            'has_pin': self.has_pin,
            'disabled': bool(self.disabled),
            'pin_disabled': bool(self.pin_disabled),
            'last_access': self.last_access.isoformat() if self.last_access else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
