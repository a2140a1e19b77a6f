"""Unit tests for the User model."""

import pytest
from sqlalchemy.exc import IntegrityError
from taskmanager.models.user import User

from tests.factories.user import DEFAULT_PASSWORD, UserFactory


class TestUserModel:
    def test_password_is_hashed_and_write_only(self, db):
        user = UserFactory(password="hunter22")

        assert user.password_hash != "hunter22"
        assert user.verify_password("hunter22")
        assert not user.verify_password(DEFAULT_PASSWORD)
        with pytest.raises(AttributeError):
            _ = user.password

    def test_email_is_normalized(self):
        assert User(email="  Alice@Example.COM ").email == "alice@example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "a@b"])
    def test_invalid_email(self, email):
        with pytest.raises(ValueError):
            User(email=email)

    def test_unknown_role(self):
        with pytest.raises(ValueError):
            User(role="root")

    def test_defaults(self, db):
        user = UserFactory()

        assert user.role == "user"
        assert user.is_active is True
        assert user.is_admin is False
        assert user.created_at is not None

    def test_email_unique(self, session):
        UserFactory(email="dup@example.com")
        session.add(User(name="Other", email="DUP@example.com", password="secret1"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_repr_has_no_secrets(self, db):
        user = UserFactory()
        assert repr(user) == f"<User id={user.id}>"
