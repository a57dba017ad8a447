import re

from marshmallow import Schema, ValidationError, fields, pre_load, validate, validates

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class RegisterSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=2, max=100))
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            data = dict(data)
            if "email" in data:
                data["email"] = _norm_email(data["email"])
            if isinstance(data.get("name"), str):
                data["name"] = data["name"].strip()
        return data

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")
        if len(value) > 128:
            raise ValidationError("Password must not exceed 128 characters.")
        if not PASSWORD_PATTERN.match(value):
            raise ValidationError(
                "Password must contain at least one lowercase letter, one uppercase letter, and one number."
            )


class LoginSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class PrincipalOutSchema(Schema):
    """Safe projection of an Admin or Customer; never carries the password hash."""
    id = fields.Integer()
    name = fields.String()
    email = fields.String()
    isActive = fields.Boolean(attribute="is_active")
    createdAt = fields.DateTime(attribute="created_at")
    lastLogin = fields.DateTime(attribute="last_login", allow_none=True)
