"""User and session Marshmallow schemas.

Wire names are camelCase (``fullName``, ``coverImage``...). Input schemas
trim identifier fields (never passwords) and report the first failure as
the envelope message.
"""

from __future__ import annotations

from typing import Any

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates_schema,
)

_email = validate.Email(error="Email is not valid")


class _StrippedInput(Schema):
    """Base for request payloads: unknown keys dropped, identifiers trimmed.

    Passwords are never in ``STRIPPED_KEYS``; they are hashed exactly as typed.
    """

    STRIPPED_KEYS = frozenset({"username", "email", "fullName", "refreshToken"})

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data: Any, **_: Any) -> Any:
        if not hasattr(data, "items"):
            return data
        return {
            k: v.strip() if k in self.STRIPPED_KEYS and isinstance(v, str) else v
            for k, v in data.items()
        }


class RegisterSchema(_StrippedInput):
    """Form fields of ``POST /register`` (files are read separately)."""

    username = fields.String(load_default="", validate=validate.Length(max=50))
    full_name = fields.String(data_key="fullName", load_default="", validate=validate.Length(max=100))
    email = fields.String(load_default="", validate=validate.Length(max=254))
    password = fields.String(load_default="", validate=validate.Length(max=128))

    @validates_schema
    def check_required(self, data: dict[str, Any], **_: Any) -> None:
        required = ("username", "full_name", "email", "password")
        if any(not (data.get(k) or "").strip() for k in required):
            raise ValidationError("All fields are required")
        _email(data["email"])


class LoginSchema(_StrippedInput):
    """Credentials: ``username`` or ``email`` plus ``password``."""

    username = fields.String(load_default=None)
    email = fields.String(load_default=None)
    password = fields.String(load_default=None)

    @validates_schema
    def check_identity(self, data: dict[str, Any], **_: Any) -> None:
        if not data.get("username") and not data.get("email"):
            raise ValidationError("Username or email is required")
        if not data.get("password"):
            raise ValidationError("Password is required")


class ChangePasswordSchema(_StrippedInput):
    old_password = fields.String(data_key="oldPassword", load_default=None)
    new_password = fields.String(data_key="newPassword", load_default=None)

    @validates_schema
    def check_required(self, data: dict[str, Any], **_: Any) -> None:
        if not data.get("old_password") or not data.get("new_password"):
            raise ValidationError("Old and new passwords are required")


class RefreshTokenSchema(_StrippedInput):
    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class UserSchema(Schema):
    """Public representation of a user (never the password hash or refresh token)."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    full_name = fields.String(data_key="fullName", required=True)
    avatar = fields.String(required=True)
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)


class TokenPairSchema(Schema):
    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class LoginResponseSchema(Schema):
    """``{user, accessToken, refreshToken}`` body returned by login."""

    user = fields.Nested(UserSchema, required=True)
    access_token = fields.Function(lambda out: out.tokens.access_token, data_key="accessToken")
    refresh_token = fields.Function(lambda out: out.tokens.refresh_token, data_key="refreshToken")
