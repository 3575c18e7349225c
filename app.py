"""
Flask application entry point for the door access server.
"""
import logging
import os
from flask import Flask, abort, jsonify, request
from flask_cors import CORS
from flask_login import LoginManager, current_user
from flask_wtf.csrf import CSRFError, CSRFProtect
from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from werkzeug.exceptions import HTTPException
from database import db, init_db
import config
import strings as text
from services.logging_setup import configure_error_monitoring, configure_logging

logger = logging.getLogger(__name__)

csrf = CSRFProtect()
login_manager = LoginManager()

BLUEPRINT_PERMISSIONS = {
    'controller_keys': 'can_manage_keys',
    'users': 'can_manage_users',
    'doors': 'can_manage_doors',
    'access_logs': 'can_view_logs',
}


def create_app(config_object=None):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object or config.get_config())
    config.validate_runtime(app.config)
    configure_logging(bool(app.config.get('STRUCTURED_LOGGING', True)))
    configure_error_monitoring(app.config.get('SENTRY_DSN', ''))

    @sa_event.listens_for(Engine, 'connect')
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    init_db(app)

    from routes.controller import CONTROLLER_PATHS, controller_bp
    from routes.auth import auth_bp
    from routes.controller_keys import controller_keys_bp
    from routes.users import users_bp
    from routes.doors import doors_bp
    from routes.access_logs import access_logs_bp
    from routes.main import main_bp

    # Door controllers authenticate with x-api-key, not a session cookie.
    csrf.init_app(app)
    csrf.exempt(controller_bp)

    cors_origins = [o.strip() for o in app.config.get('CORS_ALLOW_ORIGINS', '*').split(',') if o.strip()]
    CORS(app, resources={
        path: {
            'origins': cors_origins or '*',
            'methods': ['POST', 'OPTIONS'],
            'send_wildcard': True,
            'allow_headers': config.CONTROLLER_ALLOWED_HEADERS,
        }
        for path in CONTROLLER_PATHS
    })

    login_manager.init_app(app)

    from models.user import User

    @login_manager.user_loader
    def load_user(user_id: str):
        if not user_id:
            return None
        user = db.session.get(User, user_id)
        if user is None or user.disabled:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': text.http_error(401)}), 401

    app.register_blueprint(main_bp)
    app.register_blueprint(controller_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(controller_keys_bp, url_prefix='/api/controller-keys')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(doors_bp, url_prefix='/api/doors')
    app.register_blueprint(access_logs_bp, url_prefix='/api/access-logs')

    @app.before_request
    def require_permission_for_admin_routes():
        """Admin blueprints need a logged-in account with the matching permission."""
        endpoint = request.endpoint or ''
        blueprint_name = endpoint.split('.', 1)[0]
        permission_attr = BLUEPRINT_PERMISSIONS.get(blueprint_name)
        if permission_attr is None:
            return None
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if not getattr(current_user, permission_attr, False):
            abort(403)
        return None

    @app.errorhandler(CSRFError)
    def csrf_error(exc):
        return jsonify({'error': exc.description}), 400

    @app.errorhandler(HTTPException)
    def http_error(exc):
        return jsonify({'error': text.http_error(exc.code, exc.name)}), exc.code

    @app.errorhandler(Exception)
    def unhandled_error(exc):
        logger.exception('Unhandled exception')
        db.session.rollback()
        return jsonify({'error': text.http_error(500)}), 500

    return app


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app = create_app()
    app.run(host='0.0.0.0', port=port, debug=False)
