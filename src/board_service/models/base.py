"""Base document model and the closed enumerations used by tasks."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class TaskStatus(str, Enum):
    """Board column a task lives in.

    Values are the canonical storage keys. Lookups are case-insensitive
    because older documents carry lowercased statuses (``inprogress``).
    """

    TODO = "todo"
    IN_PROGRESS = "inProgress"
    AWAIT_FEEDBACK = "awaitFeedback"
    DONE = "done"

    @classmethod
    def _missing_(cls, value: object) -> "TaskStatus | None":
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None

    @classmethod
    def parse(cls, value: "str | TaskStatus") -> "TaskStatus":
        """Parse a status from any casing.

        Raises:
            ValueError: If the value names no board column
        """
        return cls(value)

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.TODO: "To do",
    TaskStatus.IN_PROGRESS: "In progress",
    TaskStatus.AWAIT_FEEDBACK: "Await feedback",
    TaskStatus.DONE: "Done",
}

# Fixed scan order for lookups and fan-out writes
STATUS_ORDER: tuple[TaskStatus, ...] = (
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.AWAIT_FEEDBACK,
    TaskStatus.DONE,
)


class Priority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    URGENT = "urgent"

    @classmethod
    def _missing_(cls, value: object) -> "Priority | None":
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value == wanted:
                    return member
        return None


class Category(str, Enum):
    """Task category, chosen from a closed set."""

    TECHNICAL_TASK = "Technical Task"
    USER_STORY = "User Story"

    @classmethod
    def _missing_(cls, value: object) -> "Category | None":
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


def coerce_list(value: Any) -> Any:
    """Normalize a stored collection into a list.

    The document store drops empty arrays and returns sparse arrays as
    objects keyed by index, so ``None`` and dicts are folded into lists.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        return [item for _, item in sorted(value.items(), key=lambda kv: _index_key(kv[0])) if item is not None]
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return value


def _index_key(key: Any) -> tuple[int, Any]:
    try:
        return (0, int(key))
    except (TypeError, ValueError):
        return (1, str(key))


class DocumentModel(BaseModel):
    """Base model for everything stored in the remote document store.

    Unknown keys are kept so whole-array rewrites do not drop fields
    written by other clients.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="allow",
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the JSON shape stored remotely (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)
