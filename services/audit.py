"""Helpers for writing admin audit logs."""
import json
from flask import has_request_context, request
from flask_login import current_user
from database import db
from models.audit_log import AuditLog


def log_action(action: str, entity_type: str, entity_id: str | None = None,
               details: dict | None = None, actor=None) -> None:
    """Append an audit record to the current session; the caller commits.

    ``actor`` defaults to the logged-in user when called inside a request.
    """
    if actor is None and has_request_context() and getattr(current_user, 'is_authenticated', False):
        actor = current_user
    actor_id = getattr(actor, 'id', None)

    ip_address = None
    user_agent = None
    if has_request_context():
        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        user_agent = (request.user_agent.string or '')[:255]

    entry = AuditLog(
        actor_user_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        ip_address=ip_address,
        user_agent=user_agent,
        details_json=json.dumps(details or {}),
    )
    db.session.add(entry)
