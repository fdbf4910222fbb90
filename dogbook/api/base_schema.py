# dogbook/api/base_schema.py
from marshmallow import Schema, EXCLUDE


def camelcase(s: str) -> str:
    parts = iter(s.split("_"))
    return next(parts) + "".join(part.title() for part in parts)


class CamelCaseSchema(Schema):
    """Keeps snake_case attributes in Python and camelCase keys on the wire."""

    def on_bind_field(self, field_name, field_obj):
        field_obj.data_key = camelcase(field_obj.data_key or field_name)


class RequestSchema(Schema):
    """Base for request bodies: unknown keys are dropped, not rejected."""

    class Meta:
        unknown = EXCLUDE
