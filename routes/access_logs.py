"""Read-only queries over the access log."""
from flask import Blueprint, current_app, jsonify, request
from models.access_log import AccessLog

access_logs_bp = Blueprint('access_logs', __name__)

FILTER_FIELDS = ('card_number', 'door_id', 'controller_id', 'access_type')


@access_logs_bp.route('', methods=['GET'])
def list_access_logs():
    """Newest entries first, optionally filtered by exact field values."""
    default_limit = int(current_app.config.get('ACCESS_LOG_DEFAULT_LIMIT', 100))
    max_limit = int(current_app.config.get('ACCESS_LOG_MAX_LIMIT', 500))
    limit = request.args.get('limit', default=default_limit, type=int) or default_limit
    limit = max(1, min(limit, max_limit))

    query = AccessLog.query
    filters = {}
    for field in FILTER_FIELDS:
        value = request.args.get(field)
        if value:
            query = query.filter(getattr(AccessLog, field) == value)
            filters[field] = value

    rows = query.order_by(AccessLog.timestamp.desc()).limit(limit).all()
    return jsonify({
        'filters': filters,
        'limit': limit,
        'entries': [row.to_dict() for row in rows],
    })
