# dogbook/core/config.py

import os
from datetime import timedelta


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(key: str, default: list) -> list:
    value = os.getenv(key)
    if not value:
        return default
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Settings shared by every environment."""
    # Signs and verifies the bearer tokens handed out at register/login.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv('JWT_ACCESS_TOKEN_DAYS', 7)))
    JWT_TOKEN_LOCATION = ['headers']

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # Browser frontends allowed to call the API.
    CORS_ALLOWED_ORIGINS = _env_list('CORS_ALLOWED_ORIGINS', [
        'http://localhost:5173',
        'http://localhost:3000',
    ])

    # Multipart bodies (avatar uploads) are rejected above this size.
    MAX_CONTENT_LENGTH = 4 * 1024 * 1024
    AVATAR_MAX_BYTES = 2 * 1024 * 1024
    AVATAR_CONTENT_TYPES = ('image/jpeg', 'image/jpg', 'image/png', 'image/webp')

    # When False, a post may reference any existing dog, not just the author's.
    POSTS_REQUIRE_DOG_OWNERSHIP = _env_bool('POSTS_REQUIRE_DOG_OWNERSHIP', True)

    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))


class DevelopmentConfig(Config):
    """Local development."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    """Test runs. Firestore and Storage are injected by the test suite."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('TEST_JWT_SECRET_KEY', 'test-secret-key-with-enough-length-for-hs256')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    FIREBASE_STORAGE_BUCKET = os.getenv('TEST_FIREBASE_STORAGE_BUCKET', 'dogbook-test.appspot.com')
    # The minimum bcrypt allows; keeps the suite fast.
    BCRYPT_ROUNDS = 4


class ProductionConfig(Config):
    DEBUG = False
    CORS_ALLOWED_ORIGINS = _env_list('CORS_ALLOWED_ORIGINS', ['https://dogesh-book.netlify.app'])


# Selected in create_app() by the FLASK_ENV value.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
