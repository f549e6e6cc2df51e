"""Task, subtask and task-draft models."""

from dataclasses import dataclass
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from board_service.models.base import Category, DocumentModel, Priority, TaskStatus, coerce_list
from board_service.models.contacts import Contact
from board_service.utils.ids import generate_unique_id


class Subtask(DocumentModel):
    """A checklist item, addressed only by its position in the parent task."""

    text: str
    completed: bool = False


class Task(DocumentModel):
    """A card on the board.

    ``status`` always names the board column holding the task.
    """

    id: str = Field(default_factory=generate_unique_id, min_length=1)
    title: str
    description: str = ""
    due_date: date | None = Field(default=None, alias="dueDate")
    priority: Priority = Priority.MEDIUM
    category: Category
    contacts: list[Contact] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    status: TaskStatus = TaskStatus.TODO

    @field_validator("contacts", "subtasks", mode="before")
    @classmethod
    def coerce_collections(cls, v: Any) -> Any:
        return coerce_list(v)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return TaskStatus(v) if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return Category(v) if isinstance(v, str) else v

    @field_validator("priority", mode="before")
    @classmethod
    def tolerant_priority(cls, v: Any) -> Any:
        """Unknown or missing priorities fall back to medium."""
        try:
            return Priority(v)
        except ValueError:
            return Priority.MEDIUM

    def contact_ids(self) -> list[str]:
        return [contact.id for contact in self.contacts]


class SubtaskProgress(BaseModel):
    """Completion state of a task's subtasks."""

    model_config = ConfigDict(frozen=True)

    completed: int
    total: int
    percent: float


@dataclass(frozen=True)
class TaskLocation:
    """Where a task currently sits on the board."""

    task: Task
    index: int
    status: TaskStatus


class TaskDraft(BaseModel):
    """Unvalidated task fields as entered by a user.

    Kept loose on purpose: ``validate_task_draft`` turns it into clean
    task fields or a ``ValidationFailure`` naming the bad inputs.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    description: str = ""
    due_date: date | str | None = Field(default=None, alias="dueDate")
    priority: str | None = Priority.MEDIUM.value
    category: str | None = None
    contacts: list[Contact] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
