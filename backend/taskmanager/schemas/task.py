"""Task resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema

from taskmanager.models.task import DESCRIPTION_MAX, PRIORITIES, STATUSES, TITLE_MAX
from taskmanager.schemas.auth import TrimmedString
from taskmanager.schemas.common import PaginationMetaSchema, PaginationQuerySchema, UTCDateTime
from taskmanager.services.tasks.dto import TaskCreateIn, TaskFilterIn, TaskUpdateIn

_title = validate.Length(min=1, max=TITLE_MAX, error="Title must be between {min} and {max} characters")
_description = validate.Length(max=DESCRIPTION_MAX, error="Description cannot exceed {max} characters")


class _TaskFieldsMixin(Schema):
    title = TrimmedString(required=True, validate=_title)
    description = TrimmedString(allow_none=True, validate=_description)
    status = fields.String(validate=validate.OneOf(STATUSES))
    priority = fields.String(validate=validate.OneOf(PRIORITIES))
    due_date = UTCDateTime(data_key="dueDate", allow_none=True)
    tags = fields.List(TrimmedString(validate=validate.Length(min=1, max=50)))


class TaskCreateSchema(_TaskFieldsMixin):
    """Payload for ``POST /tasks``."""

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> TaskCreateIn:
        return TaskCreateIn(**data)


class TaskUpdateSchema(_TaskFieldsMixin):
    """Payload for ``PUT /tasks/<id>``: any subset of the task fields, at least one."""

    @validates_schema
    def require_one(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field must be provided.")

    @post_load
    def to_dto(self, data: dict[str, Any], **_: Any) -> TaskUpdateIn:
        return TaskUpdateIn(changes=dict(data))


class TaskListQuerySchema(PaginationQuerySchema):
    """Query string of ``GET /tasks`` and ``GET /tasks/admin/all``."""

    sort_keys = {
        "createdAt": "created_at",
        "updatedAt": "updated_at",
        "dueDate": "due_date",
        "priority": "priority",
        "status": "status",
        "title": "title",
    }

    status = fields.String(load_default=None, validate=validate.OneOf(STATUSES))
    priority = fields.String(load_default=None, validate=validate.OneOf(PRIORITIES))
    search = fields.String(load_default=None, validate=validate.Length(max=100))

    @post_load
    def to_filters(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["filters"] = TaskFilterIn(
            status=data.pop("status", None),
            priority=data.pop("priority", None),
            search=data.pop("search", None),
        )
        return data


# ------------------------------ Output ------------------------------------ #


class OwnerSchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)


class TaskSchema(Schema):
    """Public representation of a task."""

    id = fields.Integer(required=True)
    title = fields.String(required=True)
    description = fields.String(allow_none=True)
    status = fields.String(required=True)
    priority = fields.String(required=True)
    due_date = UTCDateTime(data_key="dueDate", allow_none=True)
    tags = fields.List(fields.String())
    user_id = fields.Integer(data_key="userId", required=True)
    completed_at = UTCDateTime(data_key="completedAt", allow_none=True)
    created_at = UTCDateTime(data_key="createdAt", required=True)
    updated_at = UTCDateTime(data_key="updatedAt", required=True)


class AdminTaskSchema(TaskSchema):
    owner = fields.Nested(OwnerSchema, allow_none=True)


class TaskStatsSchema(Schema):
    total = fields.Integer(required=True)
    by_status = fields.Dict(data_key="byStatus", keys=fields.String(), values=fields.Integer())
    by_priority = fields.Dict(data_key="byPriority", keys=fields.String(), values=fields.Integer())


class TaskPageSchema(Schema):
    """``{"tasks": [...], "pagination": {...}}``."""

    tasks = fields.List(fields.Nested(TaskSchema), attribute="items")
    pagination = fields.Nested(PaginationMetaSchema, attribute="meta")


class AdminTaskPageSchema(TaskPageSchema):
    tasks = fields.List(fields.Nested(AdminTaskSchema), attribute="items")
