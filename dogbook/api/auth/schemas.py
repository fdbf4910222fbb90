# dogbook/api/auth/schemas.py
from marshmallow import fields, validate, pre_load

from dogbook.api.base_schema import CamelCaseSchema, RequestSchema


class CredentialsSchema(RequestSchema):
    """Body of POST /api/auth/register and POST /api/auth/login."""
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.Str(required=True, validate=validate.Length(min=6, max=128))

    @pre_load
    def strip_email(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('email'), str):
            data = dict(data, email=data['email'].strip())
        return data


class LoginSchema(CredentialsSchema):
    # Login never tells the caller that a password was too short.
    password = fields.Str(required=True, validate=validate.Length(min=1))


class UserResponseSchema(CamelCaseSchema):
    user_id = fields.Str(dump_only=True)
    email = fields.Email()
    is_premium = fields.Bool()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class AuthResponseSchema(CamelCaseSchema):
    token = fields.Str(required=True)
    user = fields.Nested(UserResponseSchema, required=True)
