"""User repository for credential lookups and session-token bookkeeping."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select, update

from taskmanager.models.user import User
from taskmanager.repositories.base import BaseRepository


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Token issuing and verification live elsewhere; this class only stores
    and compares what it is given.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _updatable_fields(self):
        """Profile fields a user may edit themselves (not role, not password)."""
        return {"name", "email"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == _normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == _normalize_email(email))
        return self.session.execute(stmt).first() is not None

    def email_taken_by_other(self, email: str, user_id: int) -> bool:
        """Return ``True`` when ``email`` belongs to a user other than ``user_id``."""
        stmt = select(User.id).where(
            User.email == _normalize_email(email),
            User.id != user_id,
        )
        return self.session.execute(stmt).first() is not None

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user: User, new_password: str) -> None:
        """Re-hash and store ``new_password``; the model setter does the hashing."""
        user.password = new_password
        self.flush()

    # ---------------------------- Refresh token ----------------------------

    def get_refresh_token(self, user_id: int) -> str | None:
        """Return the stored refresh token (the column is deferred on loads)."""
        stmt = select(User.refresh_token).where(User.id == user_id)
        return cast(str | None, self.session.execute(stmt).scalar_one_or_none())

    def set_refresh_token(self, user_id: int, token: str) -> None:
        """Overwrite the single live refresh token of a user."""
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session=False)
        )

    def clear_refresh_token(self, user_id: int) -> None:
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=None)
            .execution_options(synchronize_session=False)
        )

    # ---------------------------- Admin helpers ----------------------------

    def set_active(self, user: User, active: bool) -> User:
        user.is_active = bool(active)
        self.flush()
        return user

    def set_role(self, user: User, role: str) -> User:
        user.role = role
        self.flush()
        return user
