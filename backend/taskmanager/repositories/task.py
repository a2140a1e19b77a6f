"""Task repository: owner-scoped listing, search and aggregate counts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.orm import selectinload

from taskmanager.models.task import PRIORITIES, STATUSES, Task
from taskmanager.repositories.base import BaseRepository, Page, Pagination, Sortable

_PRIORITY_RANK = case({p: i for i, p in enumerate(PRIORITIES)}, value=Task.priority)
_STATUS_RANK = case({s: i for i, s in enumerate(STATUSES)}, value=Task.status)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class TaskRepository(BaseRepository[Task]):
    """
    Persistence-only repository for :class:`Task`.

    Listing methods accept equality filters (``status``, ``priority``) and a
    free-text ``search`` matched case-insensitively against title and
    description. Ownership is a query predicate here; the access decision
    itself belongs to the service policy.
    """

    model = Task

    # ----------------------------- Whitelists -----------------------------
    def _sortable_fields(self) -> Mapping[str, Sortable]:
        """
        Public sort keys. ``priority`` and ``status`` sort by their natural
        rank (low < medium < high, pending < in-progress < completed).
        """
        return {
            "created_at": Task.created_at,
            "updated_at": Task.updated_at,
            "due_date": Task.due_date,
            "title": Task.title,
            "priority": _PRIORITY_RANK,
            "status": _STATUS_RANK,
        }

    def _filterable_fields(self):
        return {
            "status": Task.status,
            "priority": Task.priority,
            "user_id": Task.user_id,
        }

    def _updatable_fields(self) -> set[str]:
        # user_id stays out: ownership never moves.
        return {"title", "description", "status", "priority", "due_date", "tags"}

    # ------------------------------ Queries -------------------------------
    def _filtered(
        self,
        filters: Mapping[str, Any] | None,
        search: str | None,
    ) -> Select[Any]:
        stmt: Select[Any] = select(Task)
        stmt = self._apply_equality_filters(stmt, filters)
        term = (search or "").strip()
        if term:
            pattern = _like_pattern(term)
            stmt = stmt.where(
                or_(
                    Task.title.ilike(pattern, escape="\\"),
                    Task.description.ilike(pattern, escape="\\"),
                )
            )
        return stmt

    def paginate_for_user(
        self,
        user_id: int,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        search: str | None = None,
    ) -> Page[Task]:
        """Page through the tasks owned by ``user_id``."""
        scoped = dict(filters or {})
        scoped["user_id"] = user_id
        return self._paginate_stmt(self._filtered(scoped, search), pagination)

    def paginate_all(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        search: str | None = None,
    ) -> Page[Task]:
        """Page through every user's tasks with owners loaded."""
        stmt = self._filtered(filters, search).options(selectinload(Task.owner))
        return self._paginate_stmt(stmt, pagination)

    # ------------------------------ Aggregates ----------------------------
    def count_for_user(self, user_id: int) -> int:
        stmt = select(func.count(Task.id)).where(Task.user_id == user_id)
        return int(self.session.execute(stmt).scalar_one())

    def _grouped_counts(self, column: Any, user_id: int, keys: tuple[str, ...]) -> dict[str, int]:
        stmt = (
            select(column, func.count(Task.id))
            .where(Task.user_id == user_id)
            .group_by(column)
        )
        counts = dict.fromkeys(keys, 0)
        for key, count in self.session.execute(stmt).all():
            counts[key] = int(count)
        return counts

    def count_by_status(self, user_id: int) -> dict[str, int]:
        """Per-status counts; every status key is present."""
        return self._grouped_counts(Task.status, user_id, STATUSES)

    def count_by_priority(self, user_id: int) -> dict[str, int]:
        """Per-priority counts; every priority key is present."""
        return self._grouped_counts(Task.priority, user_id, PRIORITIES)
