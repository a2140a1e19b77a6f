"""Unit tests for AuthService wired to the real PyJWT adapter."""

from __future__ import annotations

import logging

import pytest
from taskmanager.core.extensions import get_auth_settings
from taskmanager.infra.jwt import PyJWTTokenProvider
from taskmanager.services._shared.base import ServiceContext
from taskmanager.services._shared.errors import (
    AccountDeactivatedError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from taskmanager.services._shared.ports import REFRESH
from taskmanager.services.auth.dto import (
    AuthOut,
    LoginIn,
    PasswordChangeIn,
    ProfileUpdateIn,
    RefreshIn,
    RegisterIn,
)
from taskmanager.services.auth.service import AuthService

from tests.factories.user import DEFAULT_PASSWORD, UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def tokens(db) -> PyJWTTokenProvider:
    return PyJWTTokenProvider(get_auth_settings())


@pytest.fixture()
def service(tokens) -> AuthService:
    """Anonymous AuthService."""
    return AuthService(token_provider=tokens)


def _as(tokens, user) -> AuthService:
    return AuthService(
        token_provider=tokens,
        ctx=ServiceContext(actor_id=user.id, actor_role=user.role),
    )


def _register(service, email="new@example.com", **kw):
    return service.register(RegisterIn(name="New User", email=email, password="secret1", **kw))


# ----------------------------- Registration -------------------------------- #
class TestRegister:
    def test_returns_user_and_token_pair(self, service, tokens):
        out = _register(service)

        assert isinstance(out, AuthOut)
        assert out.user.email == "new@example.com"
        assert out.user.role == "user"
        assert tokens.verify(out.refresh_token, REFRESH)["sub"] == str(out.user.id)
        assert not hasattr(out.user, "password_hash")

    def test_stores_refresh_token(self, service, session):
        from taskmanager.repositories.user import UserRepository

        out = _register(service)
        assert UserRepository(session).get_refresh_token(out.user.id) == out.refresh_token

    def test_duplicate_email_conflicts(self, service):
        UserFactory(email="taken@example.com")
        with pytest.raises(ConflictError, match="User already exists with this email"):
            _register(service, email="TAKEN@example.com")

    def test_admin_role_requires_admin_actor(self, service, tokens):
        with pytest.raises(AuthorizationError):
            _register(service, role="admin")

        plain = UserFactory()
        with pytest.raises(AuthorizationError):
            _register(_as(tokens, plain), role="admin")

        admin = UserFactory(admin=True)
        out = _register(_as(tokens, admin), role="admin")
        assert out.user.role == "admin"

    def test_unknown_role_is_invalid(self, service):
        with pytest.raises(ValidationError):
            _register(service, role="root")

    def test_logs_event_without_secrets(self, service, caplog):
        caplog.set_level(logging.INFO, logger="taskmanager.services.auth.service")
        out = _register(service)

        assert "user.registered" in caplog.messages
        assert {r.name for r in caplog.records if r.getMessage() == "user.registered"} == {
            "taskmanager.services.auth.service"
        }
        assert all("secret1" not in m and out.refresh_token not in m for m in caplog.messages)


# -------------------------------- Login ----------------------------------- #
class TestLogin:
    def test_unknown_email_and_wrong_password_fail_identically(self, service):
        UserFactory(email="known@example.com")

        with pytest.raises(AuthenticationError) as unknown:
            service.login(LoginIn(email="ghost@example.com", password=DEFAULT_PASSWORD))
        with pytest.raises(AuthenticationError) as wrong:
            service.login(LoginIn(email="known@example.com", password="wrong-pass"))

        assert type(unknown.value) is type(wrong.value)
        assert str(unknown.value) == str(wrong.value) == "Invalid credentials"

    def test_inactive_account_after_password_check(self, service):
        UserFactory(email="off@example.com", inactive=True)

        with pytest.raises(AuthenticationError):
            service.login(LoginIn(email="off@example.com", password="wrong-pass"))
        with pytest.raises(AccountDeactivatedError):
            service.login(LoginIn(email="off@example.com", password=DEFAULT_PASSWORD))

    def test_each_login_overwrites_the_refresh_token(self, service):
        user = UserFactory()
        first = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))
        second = service.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

        assert first.refresh_token != second.refresh_token
        with pytest.raises(InvalidTokenError):
            service.refresh(RefreshIn(refresh_token=first.refresh_token))
        assert service.refresh(RefreshIn(refresh_token=second.refresh_token)).access_token


# ------------------------------- Refresh ---------------------------------- #
class TestRefresh:
    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_missing_token(self, service, token):
        with pytest.raises(ValidationError, match="Refresh token is required"):
            service.refresh(RefreshIn(refresh_token=token))

    def test_garbage_token(self, service):
        with pytest.raises(InvalidTokenError):
            service.refresh(RefreshIn(refresh_token="garbage"))

    def test_access_token_is_not_a_refresh_token(self, service):
        out = _register(service)
        with pytest.raises(InvalidTokenError):
            service.refresh(RefreshIn(refresh_token=out.access_token))

    def test_refresh_does_not_rotate(self, service):
        out = _register(service)

        service.refresh(RefreshIn(refresh_token=out.refresh_token))
        again = service.refresh(RefreshIn(refresh_token=out.refresh_token))

        assert again.access_token

    def test_after_logout_fails(self, service):
        out = _register(service)
        service.logout(out.user.id)

        with pytest.raises(InvalidTokenError):
            service.refresh(RefreshIn(refresh_token=out.refresh_token))

    def test_logout_is_idempotent(self, service):
        out = _register(service)
        service.logout(out.user.id)
        service.logout(out.user.id)

    def test_deleted_user(self, service, session):
        from taskmanager.models.user import User

        out = _register(service)
        session.delete(session.get(User, out.user.id))
        session.commit()

        with pytest.raises(InvalidTokenError):
            service.refresh(RefreshIn(refresh_token=out.refresh_token))


# -------------------------- Bearer resolution ------------------------------ #
class TestAuthenticateAccessToken:
    def test_resolves_current_user(self, service):
        out = _register(service)
        current = service.authenticate_access_token(out.access_token)

        assert current.id == out.user.id
        assert current.role == "user"
        assert current.email == "new@example.com"

    def test_deactivated_user_is_rejected(self, service, session):
        out = _register(service)
        from taskmanager.repositories.user import UserRepository

        repo = UserRepository(session)
        repo.set_active(repo.get(out.user.id), False)
        session.commit()

        with pytest.raises(AccountDeactivatedError):
            service.authenticate_access_token(out.access_token)

    def test_missing_user(self, service, session):
        from taskmanager.models.user import User

        out = _register(service)
        session.delete(session.get(User, out.user.id))
        session.commit()

        with pytest.raises(NotFoundError):
            service.authenticate_access_token(out.access_token)

    def test_refresh_token_is_not_a_bearer(self, service):
        out = _register(service)
        with pytest.raises(InvalidTokenError):
            service.authenticate_access_token(out.refresh_token)


# ------------------------------- Profile ---------------------------------- #
class TestProfile:
    def test_get_profile(self, service):
        user = UserFactory(name="Ada")
        assert service.get_profile(user.id).name == "Ada"

    def test_get_profile_missing(self, service):
        with pytest.raises(NotFoundError):
            service.get_profile(12345)

    def test_partial_update(self, service):
        user = UserFactory(name="Ada", email="ada@example.com")

        out = service.update_profile(user.id, ProfileUpdateIn(name="Ada L."))

        assert out.name == "Ada L."
        assert out.email == "ada@example.com"

    def test_email_taken_by_other(self, service):
        UserFactory(email="taken@example.com")
        user = UserFactory()

        with pytest.raises(ConflictError, match="Email already in use"):
            service.update_profile(user.id, ProfileUpdateIn(email="taken@example.com"))

    def test_keeping_own_email_is_fine(self, service):
        user = UserFactory(email="me@example.com")
        out = service.update_profile(user.id, ProfileUpdateIn(email="ME@example.com"))
        assert out.email == "me@example.com"


class TestChangePassword:
    def test_wrong_current_password(self, service):
        user = UserFactory()
        with pytest.raises(AuthenticationError, match="Current password is incorrect"):
            service.change_password(user.id, PasswordChangeIn("nope", "newpass1"))

    def test_rehashes_and_keeps_refresh_token(self, service):
        out = _register(service)

        service.change_password(out.user.id, PasswordChangeIn("secret1", "newpass1"))

        with pytest.raises(AuthenticationError):
            service.login(LoginIn(email="new@example.com", password="secret1"))
        assert service.refresh(RefreshIn(refresh_token=out.refresh_token)).access_token
