# taskmanager/services/auth/service.py
from __future__ import annotations

import hmac
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from taskmanager.core.security import burn_verification
from taskmanager.models.user import ROLE_ADMIN, ROLES, User
from taskmanager.repositories.user import UserRepository
from taskmanager.services._shared.base import BaseService, ServiceContext
from taskmanager.services._shared.errors import (
    AccountDeactivatedError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
    violates,
)
from taskmanager.services._shared.ports import ACCESS, REFRESH, TokenProvider
from taskmanager.services.auth.dto import (
    AccessTokenOut,
    AuthOut,
    CurrentUser,
    LoginIn,
    PasswordChangeIn,
    ProfileUpdateIn,
    RefreshIn,
    RegisterIn,
    UserOut,
)

log = logging.getLogger(__name__)

EMAIL_TAKEN = "User already exists with this email"
INVALID_CREDENTIALS = "Invalid credentials"
INVALID_REFRESH = "Invalid refresh token"


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _user_id_from(claims: dict[str, Any]) -> int:
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError() from exc


class AuthService(BaseService):
    """
    Authentication lifecycle: register, login, refresh, logout and profile.

    Tokens are issued through a :class:`TokenProvider`. Each user holds at
    most one live refresh token on their row; login overwrites it and logout
    clears it, so a refresh token only works while it is the stored one.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param token_provider: Adapter for issuing/verifying JWTs.
        :param ctx: Request context (the actor matters for admin registration).
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthOut:
        """
        Create an account and open its first session.

        :raises AuthorizationError: ``admin`` requested without an admin actor.
        :raises ConflictError: Email already registered.
        """
        role = dto.role or "user"
        if role not in ROLES:
            raise ValidationError(errors=[f"role: must be one of {', '.join(ROLES)}"])
        if role == ROLE_ADMIN and self.ctx.actor_role != ROLE_ADMIN:
            raise AuthorizationError("Only administrators can create admin accounts")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if repo.exists_by_email(dto.email):
                raise ConflictError("User", EMAIL_TAKEN)

            try:
                user = User(name=dto.name, email=dto.email, password=dto.password, role=role)
                repo.add(user)
            except ValueError as exc:
                raise ValidationError(errors=[str(exc)]) from exc
            except IntegrityError as exc:
                if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                    raise ConflictError("User", EMAIL_TAKEN) from exc
                raise

            out = self._open_session(repo, user)

        log.info("user.registered", extra={"user_id": out.user.id})
        return out

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthOut:
        """
        Verify credentials and rotate the stored refresh token.

        Unknown email and wrong password fail identically. The active flag
        is only revealed once the password has been verified.

        :raises AuthenticationError: Invalid credentials.
        :raises AccountDeactivatedError: Correct password, inactive account.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email)
            if user is None:
                burn_verification(dto.password)
                log.info("user.login_failed")
                raise AuthenticationError(INVALID_CREDENTIALS)
            if not user.verify_password(dto.password):
                log.info("user.login_failed", extra={"user_id": user.id})
                raise AuthenticationError(INVALID_CREDENTIALS)
            if not user.is_active:
                raise AccountDeactivatedError()

            out = self._open_session(repo, user)

        log.info("user.login", extra={"user_id": out.user.id})
        return out

    def _open_session(self, repo: UserRepository, user: User) -> AuthOut:
        access = self.tokens.issue_access(user.id, user.role)
        refresh = self.tokens.issue_refresh(user.id)
        repo.set_refresh_token(user.id, refresh)
        return AuthOut(user=to_user_out(user), access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AccessTokenOut:
        """
        Exchange the stored refresh token for a new access token.

        The refresh token itself is not rotated.

        :raises ValidationError: No token supplied.
        :raises InvalidTokenError: Bad/expired token, unknown user, or a token
            that is no longer the stored one.
        :raises AccountDeactivatedError: The account was deactivated.
        """
        token = (dto.refresh_token or "").strip()
        if not token:
            raise ValidationError("Refresh token is required")

        try:
            claims = self.tokens.verify(token, REFRESH)
        except AuthenticationError as exc:
            raise InvalidTokenError("Invalid or expired refresh token") from exc
        user_id = _user_id_from(claims)

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise InvalidTokenError(INVALID_REFRESH)
            stored = repo.get_refresh_token(user_id)
            if stored is None or not hmac.compare_digest(stored, token):
                raise InvalidTokenError(INVALID_REFRESH)
            if not user.is_active:
                raise AccountDeactivatedError()
            access = self.tokens.issue_access(user.id, user.role)

        log.info("token.refreshed", extra={"user_id": user_id})
        return AccessTokenOut(access_token=access)

    def logout(self, user_id: int) -> None:
        """Forget the stored refresh token. Safe to call repeatedly."""
        with self.rw_uow() as uow:
            uow.users.clear_refresh_token(user_id)
        log.info("user.logout", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Bearer resolution
    # ------------------------------------------------------------------ #

    def authenticate_access_token(self, token: str) -> CurrentUser:
        """
        Resolve an access token to the live user behind it.

        :raises ExpiredTokenError: Token past ``exp``.
        :raises InvalidTokenError: Any other verification failure.
        :raises NotFoundError: The user no longer exists.
        :raises AccountDeactivatedError: The user is inactive.
        """
        claims = self.tokens.verify(token, ACCESS)
        user_id = _user_id_from(claims)
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if not user.is_active:
                raise AccountDeactivatedError()
            return CurrentUser(id=user.id, role=user.role, email=user.email, name=user.name)

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_profile(self, user_id: int) -> UserOut:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return to_user_out(user)

    def update_profile(self, user_id: int, dto: ProfileUpdateIn) -> UserOut:
        """
        Apply a partial profile update.

        :raises ConflictError: The new email belongs to another user.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            fields: dict[str, Any] = {}
            if dto.name is not None:
                fields["name"] = dto.name
            if dto.email is not None:
                if repo.email_taken_by_other(dto.email, user_id):
                    raise ConflictError("User", "Email already in use")
                fields["email"] = dto.email

            try:
                repo.assign_updates(user, fields)
            except ValueError as exc:
                raise ValidationError(errors=[str(exc)]) from exc
            out = to_user_out(user)

        log.info("user.profile_updated", extra={"user_id": user_id})
        return out

    def change_password(self, user_id: int, dto: PasswordChangeIn) -> None:
        """
        Replace the password after re-verifying the current one.

        The stored refresh token is left untouched.

        :raises AuthenticationError: ``current_password`` does not match.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            if not user.verify_password(dto.current_password):
                raise AuthenticationError("Current password is incorrect")
            try:
                repo.update_password(user, dto.new_password)
            except ValueError as exc:
                raise ValidationError(errors=[str(exc)]) from exc

        log.info("user.password_changed", extra={"user_id": user_id})
