"""Data models for the board service."""

from board_service.models.base import (
    STATUS_LABELS,
    STATUS_ORDER,
    Category,
    DocumentModel,
    Priority,
    TaskStatus,
)
from board_service.models.board import Board, User
from board_service.models.contacts import Contact
from board_service.models.tasks import Subtask, SubtaskProgress, Task, TaskDraft, TaskLocation

__all__ = [
    # Base
    "DocumentModel",
    "TaskStatus",
    "STATUS_LABELS",
    "STATUS_ORDER",
    "Priority",
    "Category",
    # Documents
    "Contact",
    "Task",
    "Subtask",
    "Board",
    "User",
    # Engine values
    "TaskDraft",
    "TaskLocation",
    "SubtaskProgress",
]
