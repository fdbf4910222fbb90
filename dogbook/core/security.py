# dogbook/core/security.py
import logging
import bcrypt
from flask import Flask, jsonify, current_app
from flask_jwt_extended import JWTManager

# bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """Returns a salted bcrypt hash of the password."""
    password_bytes = password.encode('utf-8')[:_BCRYPT_MAX_BYTES]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    password_bytes = password.encode('utf-8')[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, password_hash.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash.
        logging.warning("Password check against a malformed hash")
        return False


def _unauthorized(error_code: str, message: str):
    return jsonify({"error_code": error_code, "message": message}), 401


def init_jwt(app: Flask) -> JWTManager:
    """
    Sets up flask-jwt-extended for the app.

    Every token failure (missing header, malformed token, bad signature,
    expiry, unknown user) is answered with a 401 and the API error body.
    Protected routes get the loaded User through ``current_user``.
    """
    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return _unauthorized("TOKEN_MISSING", "Authorization header is missing or invalid")

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return _unauthorized("INVALID_TOKEN", "Invalid token")

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return _unauthorized("TOKEN_EXPIRED", "Token has expired")

    @jwt.user_lookup_loader
    def user_lookup_callback(jwt_header, jwt_data):
        auth_service = current_app.services['auth']
        return auth_service.get_user(jwt_data["sub"])

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(jwt_header, jwt_data):
        return _unauthorized("INVALID_TOKEN", "Invalid token")

    return jwt
