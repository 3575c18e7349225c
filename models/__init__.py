"""
SQLAlchemy models for the door access server.
"""
from .user import User
from .door import Door
from .controller_api_key import ControllerApiKey
from .access_log import AccessLog
from .audit_log import AuditLog

__all__ = [
    'User',
    'Door',
    'ControllerApiKey',
    'AccessLog',
    'AuditLog',
]
