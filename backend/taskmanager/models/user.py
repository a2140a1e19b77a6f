"""User model definition for the task manager."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, Enum, String, Text, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from taskmanager.core.extensions import db
from taskmanager.core.security import hash_password, verify_password

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .task import Task

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES: tuple[str, ...] = (ROLE_USER, ROLE_ADMIN)

UserRole = Enum(*ROLES, name="user_role", native_enum=False, validate_strings=True)


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity and owner of tasks.

    Fields
    ------
    name : str
        Display name.
    email : str
        Login email. Stored normalized (lowercase, trimmed) and unique.
    password_hash : str
        Hashed password (write-only setter via ``password``). Never serialized.
    role : str
        ``"user"`` or ``"admin"``.
    is_active : bool
        Deactivated accounts fail every bearer check.
    refresh_token : str | None
        The single live refresh token. Overwritten on login, cleared on logout.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(UserRole, nullable=False, default=ROLE_USER)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True, deferred=True)

    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    tasks: Mapped[list[Task]] = relationship(
        "Task",
        back_populates="owner",
        cascade="all, delete-orphan",
        lazy="select",
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        self.password_hash = hash_password(raw)

    def verify_password(self, raw: str) -> bool:
        """Return ``True`` when ``raw`` matches the stored hash."""
        return verify_password(raw, self.password_hash)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    @validates("role")
    def _validate_role(self, key: str, value: str) -> str:
        if value not in ROLES:
            raise ValueError(f"Unknown role: {value!r}")
        return value
