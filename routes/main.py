"""Health endpoints."""
from flask import Blueprint, jsonify
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from database import db

main_bp = Blueprint('main', __name__)

REQUIRED_TABLES = {'users', 'doors', 'controller_api_keys', 'access_logs', 'audit_logs'}


@main_bp.route('/api/health')
def health():
    return jsonify(status='ok')


@main_bp.route('/api/health/deps')
def health_deps():
    out = {
        'db_ok': False,
        'required_tables_present': False,
        'missing_tables': [],
    }
    try:
        db.session.execute(text('SELECT 1'))
        tables = set(inspect(db.engine).get_table_names())
        missing = sorted(REQUIRED_TABLES - tables)
        out['missing_tables'] = missing
        out['db_ok'] = True
        out['required_tables_present'] = not missing
    except SQLAlchemyError as exc:
        out['db_error'] = str(exc)
    return jsonify(out), (200 if out['db_ok'] and out['required_tables_present'] else 503)
