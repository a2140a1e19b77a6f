"""Task model: a to-do item owned by a user."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from taskmanager.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, utcnow

if TYPE_CHECKING:
    from .user import User

STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
STATUSES: tuple[str, ...] = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
PRIORITIES: tuple[str, ...] = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)

TaskStatus = Enum(*STATUSES, name="task_status", native_enum=False, validate_strings=True)
TaskPriority = Enum(*PRIORITIES, name="task_priority", native_enum=False, validate_strings=True)

TITLE_MAX = 100
DESCRIPTION_MAX = 500


class Task(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A to-do item.

    ``completed_at`` is stamped each time the task enters ``completed``.
    Leaving ``completed`` keeps the last stamp.
    """

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(TITLE_MAX), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(TaskStatus, nullable=False, default=STATUS_PENDING)
    priority: Mapped[str] = mapped_column(TaskPriority, nullable=False, default=PRIORITY_MEDIUM)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    owner: Mapped[User] = relationship("User", back_populates="tasks", lazy="selectin")

    __table_args__ = (
        Index("ix_tasks_user_id_status", "user_id", "status"),
        Index("ix_tasks_user_id_created_at", "user_id", "created_at"),
    )

    # -------------------- Validators --------------------
    @validates("title")
    def _validate_title(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Title is required.")
        v = value.strip()
        if len(v) > TITLE_MAX:
            raise ValueError(f"Title cannot exceed {TITLE_MAX} characters.")
        return v

    @validates("description")
    def _validate_description(self, key: str, value: str | None) -> str | None:
        if value is None:
            return None
        v = value.strip()
        if len(v) > DESCRIPTION_MAX:
            raise ValueError(f"Description cannot exceed {DESCRIPTION_MAX} characters.")
        return v

    @validates("priority")
    def _validate_priority(self, key: str, value: str) -> str:
        if value not in PRIORITIES:
            raise ValueError(f"Unknown priority: {value!r}")
        return value

    @validates("tags")
    def _normalize_tags(self, key: str, value: list[str] | None) -> list[str]:
        return [t.strip() for t in (value or []) if isinstance(t, str) and t.strip()]

    @validates("status")
    def _track_completion(self, key: str, value: str) -> str:
        """Stamp ``completed_at`` whenever the task enters ``completed``."""
        if value not in STATUSES:
            raise ValueError(f"Unknown status: {value!r}")
        previous = self.status
        if value == STATUS_COMPLETED:
            if previous != STATUS_COMPLETED or self.completed_at is None:
                self.completed_at = utcnow()
        return value
