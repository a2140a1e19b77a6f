"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate, validates

from taskmanager.services._shared.dto import PaginationIn

SORT_ORDERS = ("asc", "desc")


class PaginationQuerySchema(Schema):
    """Parse ``page``, ``limit``, ``sortBy`` and ``order`` from a query string.

    ``sortBy`` is given in public camelCase and mapped to the internal key
    through ``sort_keys`` (subclasses set it). ``limit`` is capped at
    ``PaginationIn.MAX_LIMIT``.
    """

    class Meta:
        unknown = EXCLUDE

    sort_keys: dict[str, str] = {"createdAt": "created_at"}
    default_sort = "createdAt"

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1))
    sort_by = fields.String(data_key="sortBy", load_default=None)
    order = fields.String(load_default="desc", validate=validate.OneOf(SORT_ORDERS))

    @validates("sort_by")
    def check_sort_by(self, value: str | None, **_: Any) -> None:
        if value is not None and value not in self.sort_keys:
            choices = ", ".join(self.sort_keys)
            raise ValidationError(f"Must be one of: {choices}.")

    @post_load
    def to_pagination(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        sort_by = data.pop("sort_by", None) or self.default_sort
        data["pagination"] = PaginationIn(
            page=data.pop("page"),
            limit=min(data.pop("limit"), PaginationIn.MAX_LIMIT),
            sort_by=self.sort_keys[sort_by],
            order=data.pop("order"),
        )
        return data


class PaginationMetaSchema(Schema):
    """``pagination`` block of list responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total_pages = fields.Integer(data_key="totalPages", required=True)


class UTCDateTime(fields.DateTime):
    """ISO-8601 datetime that is always timezone-aware.

    Loading accepts any ``datetime.fromisoformat`` input (date-only and a
    trailing ``Z`` included); naive values are read as UTC. Dumping attaches
    UTC to naive values, which SQLite hands back.
    """

    def _serialize(self, value: datetime | None, attr: str | None, obj: Any, **kwargs: Any):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return super()._serialize(value, attr, obj, **kwargs)

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> datetime:
        if not isinstance(value, str):
            raise self.make_error("invalid", input=value, obj_type=self.OBJ_TYPE)
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise self.make_error("invalid", input=value, obj_type=self.OBJ_TYPE) from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed
