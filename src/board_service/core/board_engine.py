"""Board engine: task lifecycle across the four status arrays."""

from collections.abc import Callable
from datetime import date

from board_service.core.errors import NotFoundFailure, RemoteIOFailure, ValidationFailure
from board_service.core.identity import UserSession
from board_service.core.validation import validate_task_draft
from board_service.models import (
    STATUS_ORDER,
    Board,
    Subtask,
    SubtaskProgress,
    Task,
    TaskDraft,
    TaskLocation,
    TaskStatus,
)
from board_service.storage.remote_store import RemoteStoreClient
from board_service.utils.logging import get_logger
from board_service.utils.metrics import get_metrics

logger = get_logger(__name__)
metrics = get_metrics()

EDITABLE_FIELDS = ("title", "description", "due_date", "priority", "category", "contacts")


def parse_status(value: TaskStatus | str, field: str = "status") -> TaskStatus:
    """Parse a caller-supplied status, reporting unknown names as a field error."""
    try:
        return TaskStatus.parse(value)
    except ValueError:
        raise ValidationFailure.single(field, f"Unknown status: {value}") from None


def compute_progress(task: Task) -> SubtaskProgress:
    """Count completed subtasks. Pure; a task without subtasks is at 0%."""
    total = len(task.subtasks)
    completed = sum(1 for subtask in task.subtasks if subtask.completed)
    percent = completed / total * 100 if total > 0 else 0.0
    return SubtaskProgress(completed=completed, total=total, percent=percent)


class BoardEngine:
    """Creates, moves, edits and deletes tasks on the session user's board.

    In-memory state is mutated first and then written to the remote
    store. A failed write raises ``RemoteIOFailure`` and leaves the
    in-memory change in place; ``IdentityContext.reload`` restores the
    stored state. Id-based operations on unknown tasks return None.
    """

    compute_progress = staticmethod(compute_progress)

    def __init__(
        self,
        session: UserSession,
        store: RemoteStoreClient,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize board engine.

        Args:
            session: Signed-in user whose board is managed
            store: Remote store client used for persistence
            today: Clock for due-date validation
        """
        self.session = session
        self.store = store
        self.today = today

    @property
    def board(self) -> Board:
        return self.session.board

    async def _persist(self, operation: str, path: str, document: object) -> None:
        try:
            await self.store.replace(path, document)
        except RemoteIOFailure as e:
            metrics.record_board_operation(operation, "error")
            logger.error(
                "board_write_failed",
                operation=operation,
                path=path,
                status_code=e.status_code,
                error=str(e),
            )
            raise
        metrics.record_board_operation(operation, "success")

    async def _persist_task(self, operation: str, location: TaskLocation) -> None:
        path = self.session.paths.task(location.status, location.index)
        await self._persist(operation, path, location.task.to_document())

    async def _persist_board(self, operation: str) -> None:
        await self._persist(operation, self.session.paths.board(), self.board.to_document())

    # Lookup

    def find_task(self, task_id: str) -> TaskLocation | None:
        """Locate a task by id, scanning todo, inProgress, awaitFeedback, done."""
        for status, index, task in self.board.iter_tasks():
            if task.id == task_id:
                return TaskLocation(task=task, index=index, status=status)
        return None

    def find_in_status(self, task_id: str, status: TaskStatus) -> TaskLocation | None:
        """Locate a task by id within a single status array."""
        status = parse_status(status)
        for index, task in enumerate(self.board.column(status)):
            if task.id == task_id:
                return TaskLocation(task=task, index=index, status=status)
        return None

    def require_task(self, task_id: str) -> TaskLocation:
        """Like ``find_task`` but raises ``NotFoundFailure`` when absent."""
        location = self.find_task(task_id)
        if location is None:
            raise NotFoundFailure("task", task_id)
        return location

    def all_tasks(self) -> list[Task]:
        return self.board.all_tasks()

    # Task lifecycle

    async def create_task(self, draft: TaskDraft, status: TaskStatus = TaskStatus.TODO) -> Task:
        """Validate a draft and append it as a new task.

        Args:
            draft: Task fields as entered
            status: Status array to append to

        Returns:
            The created task with a fresh id

        Raises:
            ValidationFailure: If title, due date, category or status are invalid
            RemoteIOFailure: If the task cannot be written
        """
        status = parse_status(status)
        fields = validate_task_draft(draft, today=self.today())
        task = Task(**fields, status=status)

        column = self.board.column(status)
        column.append(task)
        location = TaskLocation(task=task, index=len(column) - 1, status=status)

        logger.info("task_created", task_id=task.id, status=status.value)
        await self._persist_task("create", location)
        return task

    async def move_task(
        self,
        task_id: str,
        from_status: TaskStatus,
        to_status: TaskStatus,
    ) -> Task | None:
        """Move a task to the end of another status array.

        Returns:
            The moved task, or None if it is not in ``from_status``

        Raises:
            ValidationFailure: If either status is unknown
            RemoteIOFailure: If the board cannot be written
        """
        from_status = parse_status(from_status, "from_status")
        to_status = parse_status(to_status, "to_status")
        location = self.find_in_status(task_id, from_status)
        if location is None:
            logger.debug("move_task_not_found", task_id=task_id, status=from_status.value)
            return None
        if from_status == to_status:
            return location.task

        task = self.board.column(from_status).pop(location.index)
        task.status = to_status
        self.board.column(to_status).append(task)

        logger.info(
            "task_moved",
            task_id=task_id,
            from_status=from_status.value,
            to_status=to_status.value,
        )
        await self._persist_board("move")
        return task

    async def edit_task(self, task_id: str, status: TaskStatus, draft: TaskDraft) -> Task | None:
        """Overwrite a task's editable fields; subtasks are left untouched.

        Returns:
            The edited task, or None if it is not in ``status``

        Raises:
            ValidationFailure: If the new fields are invalid
            RemoteIOFailure: If the task cannot be written
        """
        location = self.find_in_status(task_id, status)
        if location is None:
            logger.debug("edit_task_not_found", task_id=task_id)
            return None

        fields = validate_task_draft(draft, today=self.today(), allow_past_due=True)
        for name in EDITABLE_FIELDS:
            setattr(location.task, name, fields[name])

        logger.info("task_edited", task_id=task_id, status=location.status.value)
        await self._persist_task("edit", location)
        return location.task

    async def delete_task(self, task_id: str, status: TaskStatus) -> Task | None:
        """Remove a task from its status array.

        Returns:
            The removed task, or None if it is not in ``status``
        """
        location = self.find_in_status(task_id, status)
        if location is None:
            logger.debug("delete_task_not_found", task_id=task_id)
            return None

        removed = self.board.column(location.status).pop(location.index)
        logger.info("task_deleted", task_id=task_id, status=location.status.value)
        await self._persist_board("delete")
        return removed

    # Subtasks

    async def add_subtask(self, task_id: str, text: str) -> Task | None:
        """Append a subtask. Blank text is ignored."""
        location = self.find_task(task_id)
        text = text.strip()
        if location is None or not text:
            return None

        location.task.subtasks.append(Subtask(text=text))
        logger.debug("subtask_added", task_id=task_id, count=len(location.task.subtasks))
        await self._persist_task("subtask_add", location)
        return location.task

    async def edit_subtask(self, task_id: str, index: int, text: str) -> Task | None:
        """Replace a subtask's text; empty text deletes the subtask."""
        if not text.strip():
            return await self.delete_subtask(task_id, index)

        location = self.find_task(task_id)
        if location is None or not 0 <= index < len(location.task.subtasks):
            return None

        location.task.subtasks[index].text = text.strip()
        logger.debug("subtask_edited", task_id=task_id, index=index)
        await self._persist_task("subtask_edit", location)
        return location.task

    async def delete_subtask(self, task_id: str, index: int) -> Task | None:
        """Remove a subtask; later subtasks shift down by one."""
        location = self.find_task(task_id)
        if location is None or not 0 <= index < len(location.task.subtasks):
            return None

        del location.task.subtasks[index]
        logger.debug("subtask_deleted", task_id=task_id, index=index)
        await self._persist_task("subtask_delete", location)
        return location.task

    async def toggle_subtask_completed(self, task_id: str, index: int) -> Task | None:
        location = self.find_task(task_id)
        if location is None or not 0 <= index < len(location.task.subtasks):
            return None

        subtask = location.task.subtasks[index]
        subtask.completed = not subtask.completed
        logger.debug("subtask_toggled", task_id=task_id, index=index, completed=subtask.completed)
        await self._persist_task("subtask_toggle", location)
        return location.task

    # Queries

    def filter_tasks(self, predicate: Callable[[Task], bool]) -> dict[TaskStatus, list[Task]]:
        """Partition matching tasks by status without touching the board."""
        return {
            status: [task for task in self.board.column(status) if predicate(task)]
            for status in STATUS_ORDER
        }

    def search_tasks(self, term: str) -> dict[TaskStatus, list[Task]]:
        """Case-insensitive substring search over title and description."""
        needle = term.strip().lower()
        if not needle:
            return self.filter_tasks(lambda task: True)
        return self.filter_tasks(
            lambda task: needle in task.title.lower() or needle in task.description.lower()
        )
