"""Configuration constants and runtime profiles for the door access server."""
import os


def _normalized_database_url() -> str:
    url = os.environ.get('DATABASE_URL', 'sqlite:///door_access.db')
    if url.startswith('postgres://'):
        return url.replace('postgres://', 'postgresql://', 1)
    return url


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {'1', 'true', 'yes', 'on'}


class BaseConfig:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-key-change-in-production')
    SQLALCHEMY_DATABASE_URI = _normalized_database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}
    MAX_CONTENT_LENGTH = 64 * 1024  # controller payloads are tiny
    STRUCTURED_LOGGING = _flag('STRUCTURED_LOGGING', '1')
    SENTRY_DSN = os.environ.get('SENTRY_DSN', '').strip()
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    CONTROLLER_KEY_LENGTH = int(os.environ.get('CONTROLLER_KEY_LENGTH', '40'))
    ACCESS_LOG_RECORD_PIN = _flag('ACCESS_LOG_RECORD_PIN', '1')
    ACCESS_LOG_DEFAULT_LIMIT = int(os.environ.get('ACCESS_LOG_DEFAULT_LIMIT', '100'))
    ACCESS_LOG_MAX_LIMIT = int(os.environ.get('ACCESS_LOG_MAX_LIMIT', '500'))
    CORS_ALLOW_ORIGINS = os.environ.get('CORS_ALLOW_ORIGINS', '*').strip() or '*'


class DevelopmentConfig(BaseConfig):
    ENV_NAME = 'development'


class ProductionConfig(BaseConfig):
    ENV_NAME = 'production'
    SESSION_COOKIE_SECURE = True


class TestingConfig(BaseConfig):
    ENV_NAME = 'testing'
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    WTF_CSRF_ENABLED = False
    STRUCTURED_LOGGING = False
    SENTRY_DSN = ''
    ACCESS_LOG_RECORD_PIN = True


def get_config():
    env = os.environ.get('FLASK_ENV', '').strip().lower()
    if env == 'production' or os.environ.get('PRODUCTION', '').strip() == '1':
        return ProductionConfig
    return DevelopmentConfig


def validate_runtime(app_config: dict) -> None:
    """Fail fast for misconfiguration."""
    if int(app_config.get('CONTROLLER_KEY_LENGTH', 0)) < MIN_CONTROLLER_KEY_LENGTH:
        raise RuntimeError(
            f'CONTROLLER_KEY_LENGTH must be at least {MIN_CONTROLLER_KEY_LENGTH} characters.'
        )

    env_name = app_config.get('ENV_NAME', 'development')
    if env_name != 'production':
        return

    secret = app_config.get('SECRET_KEY') or ''
    weak_values = {'dev-key-change-in-production', 'changeme', 'secret', 'default'}
    if len(secret) < 16 or secret.lower() in weak_values:
        raise RuntimeError('Invalid SECRET_KEY for production. Set a strong random secret.')


# Controller API keys
MIN_CONTROLLER_KEY_LENGTH = 32
CONTROLLER_KEY_ALPHABET = 'ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789'
CONTROLLER_KEY_HINT_LENGTH = 6

# Headers a door controller may send on the controller-facing endpoints.
CONTROLLER_ALLOWED_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type', 'x-api-key']
CONTROLLER_API_KEY_HEADER = 'x-api-key'

# PIN rules for administrator-assigned PINs. Controllers may present anything.
PIN_MIN_LENGTH = 4
PIN_MAX_LENGTH = 8
GENERATED_PIN_LENGTH = 4

# Dashboard accounts
USER_ROLES = ['admin', 'staff']
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8

DOOR_STATUSES = ['locked', 'unlocked', 'maintenance']
