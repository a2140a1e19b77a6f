"""Task endpoints. Every route requires a bearer token."""

from __future__ import annotations

from flask import Blueprint, request

from taskmanager.api.deps import (
    load_body,
    require_auth,
    require_roles,
    success,
    task_service,
    timing,
)
from taskmanager.models.user import ROLE_ADMIN
from taskmanager.schemas import (
    AdminTaskPageSchema,
    TaskCreateSchema,
    TaskListQuerySchema,
    TaskPageSchema,
    TaskSchema,
    TaskStatsSchema,
    TaskUpdateSchema,
)

bp = Blueprint("tasks", __name__)

create_schema = TaskCreateSchema()
update_schema = TaskUpdateSchema(partial=True)
query_schema = TaskListQuerySchema()
task_schema = TaskSchema()
page_schema = TaskPageSchema()
admin_page_schema = AdminTaskPageSchema()
stats_schema = TaskStatsSchema()


@bp.post("")
@require_auth
@timing
def create_task():
    dto = load_body(create_schema)
    task = task_service().create(dto)
    return success("Task created successfully", {"task": task_schema.dump(task)}, status=201)


@bp.get("")
@require_auth
@timing
def list_tasks():
    """List the caller's tasks with filters, search, sorting and pagination."""

    query = query_schema.load(request.args)
    page = task_service().list(query["filters"], query["pagination"])
    return success("Tasks fetched successfully", page_schema.dump(page))


# Static paths are declared before ``/<int:task_id>``.
@bp.get("/stats")
@require_auth
@timing
def task_stats():
    stats = task_service().stats()
    return success("Task statistics fetched successfully", stats_schema.dump(stats))


@bp.get("/admin/all")
@require_auth
@require_roles(ROLE_ADMIN)
@timing
def list_all_tasks():
    """Cross-user listing with owner summaries (admin only)."""

    query = query_schema.load(request.args)
    page = task_service().list_all(query["filters"], query["pagination"])
    return success("All tasks fetched successfully", admin_page_schema.dump(page))


@bp.get("/<int:task_id>")
@require_auth
@timing
def get_task(task_id: int):
    task = task_service().get(task_id)
    return success("Task fetched successfully", {"task": task_schema.dump(task)})


@bp.put("/<int:task_id>")
@require_auth
@timing
def update_task(task_id: int):
    dto = load_body(update_schema)
    task = task_service().update(task_id, dto)
    return success("Task updated successfully", {"task": task_schema.dump(task)})


@bp.delete("/<int:task_id>")
@require_auth
@timing
def delete_task(task_id: int):
    task_service().delete(task_id)
    return success("Task deleted successfully")
