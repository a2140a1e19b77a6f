# taskmanager/services/tasks/service.py
from __future__ import annotations

import logging

from taskmanager.models.task import Task
from taskmanager.models.user import ROLE_ADMIN
from taskmanager.repositories.task import TaskRepository
from taskmanager.services._shared.base import BaseService
from taskmanager.services._shared.dto import PageMeta, PaginationIn
from taskmanager.services._shared.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from taskmanager.services._shared.policies.common import DELETE, READ, UPDATE
from taskmanager.services.tasks.dto import (
    OwnerOut,
    TaskCreateIn,
    TaskFilterIn,
    TaskOut,
    TaskPageOut,
    TaskStatsOut,
    TaskUpdateIn,
)

log = logging.getLogger(__name__)


def to_task_out(task: Task, *, with_owner: bool = False) -> TaskOut:
    owner = None
    if with_owner and task.owner is not None:
        owner = OwnerOut(id=task.owner.id, name=task.owner.name, email=task.owner.email)
    return TaskOut(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        tags=list(task.tags or []),
        user_id=task.user_id,
        completed_at=task.completed_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
        owner=owner,
    )


def _filters(dto: TaskFilterIn | None) -> dict[str, str | None]:
    if dto is None:
        return {}
    return {"status": dto.status, "priority": dto.priority}


class TaskService(BaseService):
    """
    Task use cases for the actor in ``ctx``.

    Reads and writes of a single task go through ``ensure_can``: the owner
    and admins pass, everyone else gets :class:`AuthorizationError`.
    Listing and stats are always scoped to the actor's own tasks, except
    :meth:`list_all` which is reserved to admins.
    """

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(self, dto: TaskCreateIn) -> TaskOut:
        owner_id = self.require_actor()
        with self.rw_uow() as uow:
            repo: TaskRepository = uow.tasks
            try:
                task = Task(
                    title=dto.title,
                    description=dto.description,
                    priority=dto.priority,
                    due_date=dto.due_date,
                    tags=list(dto.tags),
                    user_id=owner_id,
                )
                # Assigned last so completion tracking sees the final value.
                task.status = dto.status
            except ValueError as exc:
                raise ValidationError(errors=[str(exc)]) from exc
            repo.add(task)
            out = to_task_out(task)

        log.info("task.created", extra={"user_id": owner_id, "task_id": out.id})
        return out

    def update(self, task_id: int, dto: TaskUpdateIn) -> TaskOut:
        """
        Apply a partial update.

        :raises NotFoundError: Unknown task.
        :raises AuthorizationError: Actor is neither owner nor admin.
        :raises ValidationError: Unknown field or invalid value.
        """
        with self.rw_uow() as uow:
            repo: TaskRepository = uow.tasks
            task = self._load(repo, task_id)
            self.ensure_can(UPDATE, task)
            try:
                repo.assign_updates(task, dto.changes)
            except ValueError as exc:
                raise ValidationError(errors=[str(exc)]) from exc
            out = to_task_out(task)

        log.info("task.updated", extra={"user_id": self.ctx.actor_id, "task_id": task_id})
        return out

    def delete(self, task_id: int) -> None:
        with self.rw_uow() as uow:
            repo: TaskRepository = uow.tasks
            task = self._load(repo, task_id)
            self.ensure_can(DELETE, task)
            repo.delete(task)

        log.info("task.deleted", extra={"user_id": self.ctx.actor_id, "task_id": task_id})

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get(self, task_id: int) -> TaskOut:
        with self.ro_uow() as uow:
            task = self._load(uow.tasks, task_id)
            self.ensure_can(READ, task)
            return to_task_out(task)

    def list(self, filters: TaskFilterIn | None = None, page: PaginationIn | None = None) -> TaskPageOut:
        """Page through the actor's own tasks."""
        owner_id = self.require_actor()
        pagination = self.ensure_pagination(page or PaginationIn())
        with self.ro_uow() as uow:
            result = uow.tasks.paginate_for_user(
                owner_id,
                pagination,
                filters=_filters(filters),
                search=filters.search if filters else None,
            )
            items = [to_task_out(t) for t in result.items]
        return TaskPageOut(
            items=items,
            meta=PageMeta.build(total=result.total, page=result.page, limit=result.limit),
        )

    def list_all(
        self, filters: TaskFilterIn | None = None, page: PaginationIn | None = None
    ) -> TaskPageOut:
        """Page through every user's tasks, each with an owner summary. Admins only."""
        self.require_actor()
        if self.ctx.actor_role != ROLE_ADMIN:
            raise AuthorizationError("Admin role required")
        pagination = self.ensure_pagination(page or PaginationIn())
        with self.ro_uow() as uow:
            result = uow.tasks.paginate_all(
                pagination,
                filters=_filters(filters),
                search=filters.search if filters else None,
            )
            items = [to_task_out(t, with_owner=True) for t in result.items]
        return TaskPageOut(
            items=items,
            meta=PageMeta.build(total=result.total, page=result.page, limit=result.limit),
        )

    def stats(self) -> TaskStatsOut:
        """Counts for the actor's tasks: total, per status and per priority."""
        owner_id = self.require_actor()
        with self.ro_uow() as uow:
            repo: TaskRepository = uow.tasks
            return TaskStatsOut(
                total=repo.count_for_user(owner_id),
                by_status=repo.count_by_status(owner_id),
                by_priority=repo.count_by_priority(owner_id),
            )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _load(repo: TaskRepository, task_id: int) -> Task:
        task = repo.get(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task
