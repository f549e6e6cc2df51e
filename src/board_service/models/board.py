"""Board and user document models."""

from collections.abc import Iterator
from typing import Any

from pydantic import Field, field_validator, model_validator

from board_service.models.base import STATUS_ORDER, DocumentModel, TaskStatus, coerce_list
from board_service.models.contacts import Contact
from board_service.models.tasks import Task

STATUS_FIELDS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "todo",
    TaskStatus.IN_PROGRESS: "in_progress",
    TaskStatus.AWAIT_FEEDBACK: "await_feedback",
    TaskStatus.DONE: "done",
}


class Board(DocumentModel):
    """Four status arrays partitioning a user's tasks.

    Missing arrays load as empty lists. Task statuses are aligned with
    their containing array on load.
    """

    todo: list[Task] = Field(default_factory=list)
    in_progress: list[Task] = Field(default_factory=list, alias="inProgress")
    await_feedback: list[Task] = Field(default_factory=list, alias="awaitFeedback")
    done: list[Task] = Field(default_factory=list)

    @field_validator("todo", "in_progress", "await_feedback", "done", mode="before")
    @classmethod
    def coerce_columns(cls, v: Any) -> Any:
        return coerce_list(v)

    @model_validator(mode="after")
    def align_statuses(self) -> "Board":
        for status in STATUS_ORDER:
            for task in self.column(status):
                if task.status != status:
                    task.status = status
        return self

    def column(self, status: TaskStatus) -> list[Task]:
        """Return the live list backing a status (mutations apply to the board)."""
        return getattr(self, STATUS_FIELDS[TaskStatus(status)])

    def iter_tasks(self) -> Iterator[tuple[TaskStatus, int, Task]]:
        """Yield ``(status, index, task)`` in fixed status order."""
        for status in STATUS_ORDER:
            for index, task in enumerate(self.column(status)):
                yield status, index, task

    def all_tasks(self) -> list[Task]:
        return [task for _, _, task in self.iter_tasks()]

    def column_document(self, status: TaskStatus) -> list[dict[str, Any]]:
        """Serialize a single status array for a narrow write."""
        return [task.to_document() for task in self.column(status)]


class User(DocumentModel):
    """Account document with its address book and board.

    ``id`` is the store key the document lives under and is not
    written back into the document itself.
    """

    id: str | None = Field(default=None, exclude=True)
    name: str = ""
    email: str = ""
    password: str = Field(default="", repr=False)
    contacts: list[Contact] = Field(default_factory=list)
    board: Board = Field(default_factory=Board)

    @field_validator("contacts", mode="before")
    @classmethod
    def coerce_contacts(cls, v: Any) -> Any:
        return coerce_list(v)

    @field_validator("board", mode="before")
    @classmethod
    def default_board(cls, v: Any) -> Any:
        return {} if v is None else v
