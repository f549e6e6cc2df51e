"""Fan-out of contact edits and deletions into tasks that embed the contact.

Tasks hold their own copies of contacts. The pure functions here bring
those copies in line with the registry and report which status arrays
changed; ``ContactReconciler`` writes exactly those arrays back.
"""

from board_service.core.identity import UserSession
from board_service.models import STATUS_ORDER, Board, Contact, TaskStatus
from board_service.storage.remote_store import RemoteStoreClient
from board_service.utils.logging import get_logger
from board_service.utils.metrics import get_metrics

logger = get_logger(__name__)
metrics = get_metrics()


def apply_contact_update(board: Board, contact: Contact) -> set[TaskStatus]:
    """Replace every embedded copy of ``contact`` with a fresh snapshot.

    Returns:
        Statuses whose arrays contain at least one updated task
    """
    affected: set[TaskStatus] = set()
    for status, _, task in board.iter_tasks():
        for position, embedded in enumerate(task.contacts):
            if embedded.id == contact.id:
                task.contacts[position] = contact.snapshot()
                affected.add(status)
    return affected


def strip_contact(board: Board, contact_id: str) -> set[TaskStatus]:
    """Drop every embedded copy of a contact from the board's tasks.

    Returns:
        Statuses whose arrays contain at least one changed task
    """
    affected: set[TaskStatus] = set()
    for status, _, task in board.iter_tasks():
        remaining = [embedded for embedded in task.contacts if embedded.id != contact_id]
        if len(remaining) != len(task.contacts):
            task.contacts = remaining
            affected.add(status)
    return affected


class ContactReconciler:
    """Applies contact changes to the board and persists affected arrays."""

    def __init__(self, session: UserSession, store: RemoteStoreClient) -> None:
        self.session = session
        self.store = store

    async def _persist(self, statuses: set[TaskStatus], reason: str) -> None:
        board = self.session.board
        for status in STATUS_ORDER:
            if status not in statuses:
                continue
            await self.store.replace(
                self.session.paths.status(status),
                board.column_document(status),
            )
            metrics.reconciliation_writes_total.labels(reason=reason).inc()

    async def propagate_update(self, contact: Contact) -> set[TaskStatus]:
        """Refresh embedded copies of an edited contact.

        Raises:
            RemoteIOFailure: If an affected status array cannot be written
        """
        affected = apply_contact_update(self.session.board, contact)
        logger.info(
            "contact_update_propagated",
            contact_id=contact.id,
            statuses=sorted(status.value for status in affected),
        )
        await self._persist(affected, "update")
        return affected

    async def propagate_removal(self, contact_id: str) -> set[TaskStatus]:
        """Remove a deleted contact from every task.

        Raises:
            RemoteIOFailure: If an affected status array cannot be written
        """
        affected = strip_contact(self.session.board, contact_id)
        logger.info(
            "contact_removal_propagated",
            contact_id=contact_id,
            statuses=sorted(status.value for status in affected),
        )
        await self._persist(affected, "removal")
        return affected
