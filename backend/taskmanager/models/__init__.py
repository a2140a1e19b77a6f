"""ORM models. Importing this package registers every table on the metadata."""

from .task import PRIORITIES, STATUSES, Task
from .user import ROLE_ADMIN, ROLE_USER, ROLES, User

__all__ = [
    "PRIORITIES",
    "ROLE_ADMIN",
    "ROLE_USER",
    "ROLES",
    "STATUSES",
    "Task",
    "User",
]
