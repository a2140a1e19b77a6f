"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic**: they never import Flask or
HTTP helpers. Translation to HTTP responses happens in
``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the column, so
    callers may pass either.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``str(exc)`` is the client-facing message.
    """


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True, eq=False)
class ValidationError(ServiceError):
    """
    Raised when input passes the schema but breaks a domain rule.

    :param message: Summary message.
    :param errors: Field-level messages.
    """

    message: str = "Validation error"
    errors: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.message


class AuthenticationError(ServiceError):
    """Credentials or a bearer token could not be verified (401)."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Bad signature, wrong token type, malformed or revoked token."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class ExpiredTokenError(AuthenticationError):
    """The token was well-formed but its ``exp`` has passed."""

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """The actor is known but not allowed to do this (403)."""

    def __init__(self, message: str = "Not authorized to access this resource") -> None:
        super().__init__(message)


class AccountDeactivatedError(AuthorizationError):
    def __init__(self, message: str = "Account is deactivated") -> None:
        super().__init__(message)


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Task").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True, eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail
