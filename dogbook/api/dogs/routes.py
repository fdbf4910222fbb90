# dogbook/api/dogs/routes.py
import logging
from dataclasses import asdict
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, current_user
from marshmallow import ValidationError

from dogbook.core.exceptions import ConflictError, NotFoundError
from dogbook.models.dog import DogPatch
from .schemas import DogCreateSchema, DogUpdateSchema, DogResponseSchema

dogs_bp = Blueprint('dogs_bp', __name__)


@dogs_bp.route('', methods=['POST'])
@jwt_required()
def create_dog():
    """Creates the logged-in user's dog profile (one per user)."""
    dog_service = current_app.services['dogs']
    try:
        data = DogCreateSchema().load(request.get_json(silent=True) or {})
        dog = dog_service.create_dog(current_user.user_id, data)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ConflictError as e:
        return jsonify(e.to_dict()), e.status_code
    return jsonify(DogResponseSchema().dump(asdict(dog))), 201


@dogs_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_dog():
    """
    Returns the logged-in user's dog profile.
    A 404 here is routine: the client sends the user to profile creation.
    """
    dog_service = current_app.services['dogs']
    try:
        dog = dog_service.get_my_dog(current_user.user_id)
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    return jsonify(DogResponseSchema().dump(asdict(dog))), 200


@dogs_bp.route('/me', methods=['PUT'])
@jwt_required()
def update_my_dog():
    """
    Partially updates the logged-in user's dog profile.
    Accepts JSON or multipart form data; an 'avatar' file part replaces the avatar.
    """
    dog_service = current_app.services['dogs']
    if request.is_json:
        raw = request.get_json(silent=True) or {}
    else:
        raw = request.form.to_dict()

    avatar_file = request.files.get('avatar')
    if avatar_file is not None and not avatar_file.filename:
        # Browsers send an empty part when no file was picked.
        avatar_file = None

    try:
        data = DogUpdateSchema().load(raw)
        dog = dog_service.update_my_dog(current_user.user_id, DogPatch.from_dict(data), avatar_file=avatar_file)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404

    logging.info(f"Dog profile saved for user {current_user.user_id}")
    return jsonify(DogResponseSchema().dump(asdict(dog))), 200
