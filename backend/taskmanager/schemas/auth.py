"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema

from taskmanager.models.user import ROLES
from taskmanager.schemas.common import UTCDateTime
from taskmanager.services.auth.dto import (
    LoginIn,
    PasswordChangeIn,
    ProfileUpdateIn,
    RefreshIn,
    RegisterIn,
)

_name = validate.Length(min=2, max=50, error="Name must be between {min} and {max} characters long")
_password = validate.Length(min=6, max=100, error="Password must be between {min} and {max} characters long")


class TrimmedString(fields.String):
    """String field that strips surrounding whitespace on load."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        return super()._deserialize(value, attr, data, **kwargs).strip()


class TrimmedEmail(TrimmedString, fields.Email):
    """Email field that tolerates surrounding whitespace."""


class RegisterSchema(Schema):
    """Input payload for account registration."""

    name = TrimmedString(required=True, validate=_name)
    email = TrimmedEmail(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=_password)
    role = fields.String(load_default="user", validate=validate.OneOf(ROLES))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> RegisterIn:
        return RegisterIn(**data)


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = TrimmedEmail(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1))

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> LoginIn:
        return LoginIn(**data)


class RefreshSchema(Schema):
    """Refresh request. A missing token is reported by the service as 400."""

    refresh_token = fields.String(data_key="refreshToken", load_default=None, allow_none=True)

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> RefreshIn:
        return RefreshIn(refresh_token=data.get("refresh_token"))


class ProfileUpdateSchema(Schema):
    """Partial profile update; at least one field is required."""

    name = TrimmedString(validate=_name)
    email = TrimmedEmail(validate=validate.Length(max=254))

    @validates_schema
    def require_one(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field must be provided.")

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> ProfileUpdateIn:
        return ProfileUpdateIn(**data)


class PasswordChangeSchema(Schema):
    current_password = fields.String(
        data_key="currentPassword", required=True, validate=validate.Length(min=1)
    )
    new_password = fields.String(data_key="newPassword", required=True, validate=_password)

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> PasswordChangeIn:
        return PasswordChangeIn(**data)


# ------------------------------ Output ------------------------------------ #


class UserSchema(Schema):
    """Public representation of a user (never the hash or refresh token)."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    role = fields.String(required=True)
    is_active = fields.Boolean(data_key="isActive", required=True)
    created_at = UTCDateTime(data_key="createdAt", required=True)
    updated_at = UTCDateTime(data_key="updatedAt", required=True)


class AuthResponseSchema(Schema):
    """``data`` of register/login: the user plus both tokens."""

    user = fields.Nested(UserSchema, required=True)
    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class AccessTokenSchema(Schema):
    access_token = fields.String(data_key="accessToken", required=True)
