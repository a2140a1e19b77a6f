"""Repository layer: persistence-only access to the aggregates."""

from .base import BaseRepository, Page, Pagination
from .task import TaskRepository
from .user import UserRepository

__all__ = [
    "BaseRepository",
    "Page",
    "Pagination",
    "TaskRepository",
    "UserRepository",
]
