# taskmanager/services/tasks/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from taskmanager.services._shared.dto import PageMeta


@dataclass(frozen=True, slots=True)
class TaskCreateIn:
    """
    Input DTO for task creation.

    :param title: Required, at most 100 chars.
    :param description: Optional, at most 500 chars.
    :param status: ``pending`` (default), ``in-progress`` or ``completed``.
    :param priority: ``low``, ``medium`` (default) or ``high``.
    :param due_date: Optional deadline.
    :param tags: Ordered list of short labels.
    """

    title: str
    description: str | None = None
    status: str = "pending"
    priority: str = "medium"
    due_date: datetime | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TaskUpdateIn:
    """
    Partial update: only the keys present in ``changes`` are applied.

    Keys use model names (``due_date``, not ``dueDate``).
    """

    changes: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class TaskFilterIn:
    status: str | None = None
    priority: str | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class OwnerOut:
    id: int
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class TaskOut:
    id: int
    title: str
    description: str | None
    status: str
    priority: str
    due_date: datetime | None
    tags: list[str]
    user_id: int
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime
    owner: OwnerOut | None = None


@dataclass(frozen=True, slots=True)
class TaskPageOut:
    """One page of tasks with its pagination metadata."""

    items: list[TaskOut]
    meta: PageMeta


@dataclass(frozen=True, slots=True)
class TaskStatsOut:
    """
    Dashboard counts for one user.

    Every status and priority value is present in the breakdowns, with 0
    when the user has no matching task.
    """

    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
