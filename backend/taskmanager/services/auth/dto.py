# taskmanager/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param name: Display name (2–50 chars, validated by the schema).
    :param email: Email, normalized by the model.
    :param password: Raw password; hashed before storage.
    :param role: Requested role; ``admin`` needs an admin actor.
    """

    name: str
    email: str
    password: str
    role: str = "user"


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT (may be empty; the service reports it).
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """Partial profile update; ``None`` leaves a field unchanged."""

    name: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    current_password: str
    new_password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public-safe user representation (no hash, no refresh token).
    """

    id: int
    name: str
    email: str
    role: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class AuthOut:
    """
    Output of register/login.

    :param user: Public user payload.
    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT (also stored server-side).
    """

    user: UserOut
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AccessTokenOut:
    access_token: str


@dataclass(frozen=True, slots=True)
class CurrentUser:
    """
    Identity attached to an authenticated request.

    :param id: User id.
    :param role: ``user`` or ``admin``.
    :param email: Normalized email.
    :param name: Display name.
    """

    id: int
    role: str
    email: str
    name: str
