# dogbook/api/dogs/schemas.py
from marshmallow import fields, validate, pre_load

from dogbook.api.base_schema import CamelCaseSchema, RequestSchema


def _strip_strings(data):
    if not isinstance(data, dict):
        return data
    return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


class DogCreateSchema(RequestSchema):
    """POST /api/dogs request body."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50),
                      error_messages={"required": "Dog name is required"})
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    age = fields.Int(allow_none=True, strict=False, validate=validate.Range(min=0, max=40))
    avatar = fields.URL(allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        data = _strip_strings(data)
        if isinstance(data, dict):
            # Optional inputs left blank on the form are simply not set.
            for key in ('breed', 'age', 'avatar'):
                if data.get(key) == '':
                    data.pop(key)
        return data


class DogUpdateSchema(RequestSchema):
    """
    PUT /api/dogs/me body, JSON or multipart form fields (partial update).

    Blank ``name`` and ``age`` inputs mean "keep the stored value". A blank
    ``breed`` is kept as an empty string and clears the breed. A blank
    ``avatar`` clears the avatar.
    """
    name = fields.Str(validate=validate.Length(min=1, max=50))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    age = fields.Int(allow_none=True, strict=False, validate=validate.Range(min=0, max=40))
    avatar = fields.URL(allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        data = _strip_strings(data)
        if not isinstance(data, dict):
            return data
        for key in ('name', 'age'):
            if data.get(key) == '':
                data.pop(key)
        if data.get('avatar') == '':
            data['avatar'] = None
        return data


class DogResponseSchema(CamelCaseSchema):
    dog_id = fields.Str(dump_only=True)
    owner_id = fields.Str(dump_only=True)
    name = fields.Str()
    breed = fields.Str(allow_none=True)
    age = fields.Int(allow_none=True)
    avatar = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
