# taskmanager/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from taskmanager.core import errors as api_errors
from taskmanager.repositories.base import Pagination
from taskmanager.services._shared.dto import PaginationIn
from taskmanager.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
)
from taskmanager.services._shared.policies.common import can
from taskmanager.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry request-scoped data into services.

    :param actor_id: Authenticated user identifier.
    :param actor_role: Role of the authenticated user (``user``/``admin``).
    :param request_id: Correlation id for logging.
    """

    actor_id: int | None = None
    actor_role: str | None = None
    request_id: str | None = None

    @property
    def id(self) -> int | None:
        return self.actor_id

    @property
    def role(self) -> str | None:
        return self.actor_role


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide read-only and read-write units of work.
    * Centralize access checks and error translation.
    * Keep services thin: orchestration only, no Flask request access.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Create a read-only Unit of Work."""
        return SQLAlchemyReadOnlyUnitOfWork()

    # ----------------------- Validation utilities ---------------------------

    def ensure_pagination(self, dto: PaginationIn) -> Pagination:
        """
        Clamp page/limit and convert to repository pagination.

        :param dto: Requested page, limit and sort.
        :returns: Pagination with ``1 <= limit <= MAX_LIMIT``.
        """
        page = max(1, int(dto.page))
        limit = min(max(1, int(dto.limit)), PaginationIn.MAX_LIMIT)
        return Pagination(page=page, limit=limit, sort=dto.sort_tokens())

    # --------------------------- AuthZ --------------------------------------

    def ensure_can(self, action: str, resource: Any, *, msg: str | None = None) -> None:
        """
        Ensure the context actor may apply ``action`` to ``resource``.

        :raises AuthorizationError: If the policy denies the action.
        """
        if not can(self.ctx, action, resource):
            raise AuthorizationError(msg or "Not authorized to access this resource")

    def require_actor(self) -> int:
        """Return the actor id, or raise when the context is anonymous."""
        if self.ctx.actor_id is None:
            raise AuthenticationError("Authentication required")
        return int(self.ctx.actor_id)

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :returns: Translated exception, or ``exc`` untouched when it is not
            a :class:`ServiceError`.
        """
        if isinstance(exc, ValidationError):
            return api_errors.BadRequest(exc.message, errors=exc.errors)

        if isinstance(exc, AuthenticationError):
            return api_errors.Unauthorized(str(exc))

        if isinstance(exc, AuthorizationError):
            return api_errors.Forbidden(str(exc))

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, ConflictError):
            # Duplicate resources are rendered as 400
            return api_errors.Conflict(str(exc))

        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=400, code="bad_request")

        return exc
