# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass
from math import ceil


@dataclass(frozen=True, slots=True)
class PaginationIn:
    """
    Input pagination contract.

    :param page: 1-based page number.
    :type page: int
    :param limit: Page size, between 1 and ``MAX_LIMIT``.
    :type limit: int
    :param sort_by: Public sort key (``created_at``, ``due_date``, ...).
    :type sort_by: str
    :param order: ``"asc"`` or ``"desc"``.
    :type order: str
    """

    page: int = 1
    limit: int = 10
    sort_by: str = "created_at"
    order: str = "desc"

    MAX_LIMIT = 100

    def sort_tokens(self) -> list[str]:
        """Render as repository sort tokens, e.g. ``["-created_at"]``."""
        prefix = "-" if self.order == "desc" else ""
        return [f"{prefix}{self.sort_by}"]


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param total: Total rows matching the filters.
    :param page: Current page (1-based).
    :param limit: Page size.
    :param total_pages: ``ceil(total / limit)``.
    """

    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, *, total: int, page: int, limit: int) -> PageMeta:
        return cls(
            total=total,
            page=page,
            limit=limit,
            total_pages=ceil(total / limit) if limit else 0,
        )
