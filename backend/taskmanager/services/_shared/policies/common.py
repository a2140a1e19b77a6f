"""Access rules shared by services."""

from __future__ import annotations

from typing import Any

READ = "read"
UPDATE = "update"
DELETE = "delete"
ACTIONS = frozenset({READ, UPDATE, DELETE})

ADMIN_ROLE = "admin"


def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    return actor_id is not None and str(actor_id) == str(owner_id)


def is_admin(actor: Any) -> bool:
    return getattr(actor, "role", None) == ADMIN_ROLE


def can(actor: Any, action: str, resource: Any) -> bool:
    """
    Decide whether ``actor`` may perform ``action`` on an owned ``resource``.

    :param actor: Object exposing ``id`` and ``role`` (``None`` for anonymous).
    :param action: One of ``read``, ``update``, ``delete``.
    :param resource: Object exposing the owner id as ``user_id``.
    :returns: ``True`` for the owner or an admin.
    :raises ValueError: For an unknown action.
    """
    if action not in ACTIONS:
        raise ValueError(f"Unknown action: {action!r}")
    if actor is None:
        return False
    if is_admin(actor):
        return True
    return is_owner(actor_id=getattr(actor, "id", None), owner_id=getattr(resource, "user_id", None))
