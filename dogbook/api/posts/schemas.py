# dogbook/api/posts/schemas.py
from marshmallow import fields, validate, pre_load

from dogbook.api.base_schema import CamelCaseSchema, RequestSchema


# --- Nested summaries embedded in feed items ---
class AuthorSchema(CamelCaseSchema):
    user_id = fields.Str(required=True)
    email = fields.Str(allow_none=True)


class DogSummarySchema(CamelCaseSchema):
    dog_id = fields.Str(required=True)
    name = fields.Str(allow_none=True)
    breed = fields.Str(allow_none=True)
    avatar = fields.Str(allow_none=True)


# --- Request / response schemas ---

class PostCreateSchema(RequestSchema):
    """POST /api/posts request body."""
    content = fields.Str(required=True, validate=validate.Length(min=1, max=500))
    dog = fields.Str(required=True, validate=[
        validate.Length(min=1),
        validate.Regexp(r'^[^/]+$', error="Not a valid dog id."),
    ])
    image = fields.URL(allow_none=True)

    @pre_load
    def strip_fields(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}
        if data.get('image') == '':
            data['image'] = None
        return data


class PostResponseSchema(CamelCaseSchema):
    """A feed item."""
    post_id = fields.Str(dump_only=True)
    content = fields.Str(required=True)
    image = fields.Str(allow_none=True)
    author = fields.Nested(AuthorSchema, required=True)
    dog = fields.Nested(DogSummarySchema, required=True)
    likes = fields.List(fields.Str())
    likes_count = fields.Int(required=True)
    liked_by_user = fields.Bool(dump_default=False)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)


class LikeToggleResponseSchema(CamelCaseSchema):
    post_id = fields.Str(required=True)
    likes_count = fields.Int(required=True)
    liked_by_user = fields.Bool(required=True)
