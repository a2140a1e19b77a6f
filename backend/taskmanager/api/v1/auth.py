"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, g

from taskmanager.api.deps import (
    auth_service,
    load_body,
    optional_auth,
    require_auth,
    success,
    timing,
)
from taskmanager.core.extensions import limiter
from taskmanager.schemas import (
    AccessTokenSchema,
    AuthResponseSchema,
    LoginSchema,
    PasswordChangeSchema,
    ProfileUpdateSchema,
    RefreshSchema,
    RegisterSchema,
    UserSchema,
)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
profile_schema = ProfileUpdateSchema()
password_schema = PasswordChangeSchema()
user_schema = UserSchema()
auth_schema = AuthResponseSchema()
access_schema = AccessTokenSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "20 per minute"))


@bp.post("/register")
@optional_auth
@timing
def register():
    """Create an account and return it with a fresh token pair."""

    dto = load_body(register_schema)
    out = auth_service().register(dto)
    return success("User registered successfully", auth_schema.dump(out), status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    dto = load_body(login_schema)
    out = auth_service().login(dto)
    return success("Login successful", auth_schema.dump(out))


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    user = auth_service().get_profile(g.current_user.id)
    return success("User profile fetched successfully", {"user": user_schema.dump(user)})


@bp.post("/refresh")
@timing
def refresh():
    """Exchange the stored refresh token for a new access token."""

    dto = load_body(refresh_schema)
    out = auth_service().refresh(dto)
    return success("Access token refreshed successfully", access_schema.dump(out))


@bp.post("/logout")
@require_auth
@timing
def logout():
    auth_service().logout(g.current_user.id)
    return success("Logout successful")


@bp.put("/profile")
@require_auth
@timing
def update_profile():
    dto = load_body(profile_schema)
    user = auth_service().update_profile(g.current_user.id, dto)
    return success("Profile updated successfully", {"user": user_schema.dump(user)})


@bp.put("/change-password")
@require_auth
@timing
def change_password():
    dto = load_body(password_schema)
    auth_service().change_password(g.current_user.id, dto)
    return success("Password changed successfully")
