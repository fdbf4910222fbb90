# dogbook/api/posts/routes.py
import logging
from dataclasses import asdict
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, current_user
from google.api_core.exceptions import GoogleAPICallError
from marshmallow import ValidationError

from dogbook.core.exceptions import ForbiddenError, NotFoundError
from .schemas import PostCreateSchema, PostResponseSchema, LikeToggleResponseSchema

posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('', methods=['GET'])
@jwt_required(optional=True)  # the feed is public; a token only adds likedByUser
def get_posts():
    """Returns every post, newest first."""
    post_service = current_app.services['posts']
    posts = post_service.get_posts(viewer_id=get_jwt_identity())
    return jsonify(PostResponseSchema(many=True).dump(posts)), 200


@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    """
    Creates a post for the given dog.
    - The body is validated with PostCreateSchema.
    - Returns the new post as a feed item with 201 Created.
    """
    post_service = current_app.services['posts']
    user_id = current_user.user_id
    try:
        data = PostCreateSchema().load(request.get_json(silent=True) or {})
        new_post = post_service.create_post(user_id, data['dog'], data['content'], data.get('image'))
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ForbiddenError as e:
        return jsonify(e.to_dict()), 403
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    return jsonify(PostResponseSchema().dump(new_post)), 201


@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def toggle_post_like(post_id: str):
    """Likes or unlikes the post for the logged-in user."""
    post_service = current_app.services['posts']
    try:
        result = post_service.toggle_post_like(post_id, current_user.user_id)
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    except GoogleAPICallError as e:
        logging.error(f"Like toggle failed (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "LIKE_TOGGLE_FAILED", "message": "Failed to update the like."}), 500
    return jsonify(LikeToggleResponseSchema().dump(asdict(result))), 200
