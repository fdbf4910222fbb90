# dogbook/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, current_user
from marshmallow import ValidationError

from dogbook.core.exceptions import AuthError, ConflictError
from .schemas import CredentialsSchema, LoginSchema, AuthResponseSchema, UserResponseSchema

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """Registers a new user and logs them in."""
    auth_service = current_app.services['auth']
    try:
        data = CredentialsSchema().load(request.get_json(silent=True) or {})
        user, token = auth_service.register(data['email'], data['password'])
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ConflictError as e:
        return jsonify(e.to_dict()), e.status_code

    return jsonify(AuthResponseSchema().dump({"token": token, "user": user.to_public_dict()})), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Email/password login. Returns a bearer token."""
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
        user, token = auth_service.login(data['email'], data['password'])
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except AuthError as e:
        logging.info("Login failed for a submitted email")
        return jsonify(e.to_dict()), e.status_code

    return jsonify(AuthResponseSchema().dump({"token": token, "user": user.to_public_dict()})), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    """Returns the user the bearer token belongs to."""
    return jsonify(UserResponseSchema().dump(current_user.to_public_dict())), 200
