"""Contact registry: the session user's address book."""

from board_service.core.errors import RemoteIOFailure
from board_service.core.identity import UserSession
from board_service.core.reconciliation import ContactReconciler
from board_service.core.validation import validate_contact_fields
from board_service.models import Contact
from board_service.storage.remote_store import RemoteStoreClient
from board_service.utils.ids import generate_unique_id, random_color
from board_service.utils.logging import get_logger
from board_service.utils.metrics import get_metrics

logger = get_logger(__name__)
metrics = get_metrics()

UNNAMED_GROUP = "#"


def _name_parts(contact: Contact) -> tuple[str, str]:
    words = contact.name.split()
    if not words:
        return "", ""
    return words[0], words[-1]


def contact_sort_key(contact: Contact) -> tuple[str, str]:
    """Last name then first name, compared on their first three letters."""
    first, last = _name_parts(contact)
    return last[:3].lower(), first[:3].lower()


class ContactRegistry:
    """Creates, edits and deletes contacts of the session user.

    Edits and deletions are written to the contact list first and then
    propagated into the board's embedded contact copies.
    """

    def __init__(
        self,
        session: UserSession,
        store: RemoteStoreClient,
        reconciler: ContactReconciler | None = None,
    ) -> None:
        self.session = session
        self.store = store
        self.reconciler = reconciler or ContactReconciler(session, store)

    @property
    def contacts(self) -> list[Contact]:
        return self.session.contacts

    def find_contact(self, contact_id: str) -> Contact | None:
        for contact in self.contacts:
            if contact.id == contact_id:
                return contact
        return None

    async def _persist_contacts(self, operation: str) -> None:
        try:
            await self.store.replace(
                self.session.paths.contacts(),
                [contact.to_document() for contact in self.contacts],
            )
        except RemoteIOFailure as e:
            metrics.record_contact_operation(operation, "error")
            logger.error("contact_write_failed", operation=operation, error=str(e))
            raise
        metrics.record_contact_operation(operation, "success")

    async def create_contact(self, name: str, email: str, number: str) -> Contact:
        """Add a contact with a fresh id, derived initials and a random color.

        Raises:
            ValidationFailure: If a field is missing or the email is malformed
            RemoteIOFailure: If the contact list cannot be written
        """
        name, email, number = validate_contact_fields(name, email, number)
        contact = Contact(
            id=generate_unique_id(),
            name=name,
            email=email,
            number=number,
            color=random_color(),
        )
        self.contacts.append(contact)

        logger.info("contact_created", contact_id=contact.id)
        await self._persist_contacts("create")
        return contact

    async def edit_contact(
        self,
        contact_id: str,
        name: str | None = None,
        email: str | None = None,
        number: str | None = None,
    ) -> Contact | None:
        """Merge new fields into a contact and refresh every task that embeds it.

        Id and color are kept; initials follow the new name.

        Returns:
            The updated contact, or None if the id is unknown

        Raises:
            ValidationFailure: If the merged fields are invalid
            RemoteIOFailure: If the contact list or a status array cannot be written
        """
        contact = self.find_contact(contact_id)
        if contact is None:
            logger.debug("edit_contact_not_found", contact_id=contact_id)
            return None

        name, email, number = validate_contact_fields(
            contact.name if name is None else name,
            contact.email if email is None else email,
            contact.number if number is None else number,
        )
        contact.rename(name)
        contact.email = email
        contact.number = number

        logger.info("contact_edited", contact_id=contact_id)
        await self._persist_contacts("edit")
        await self.reconciler.propagate_update(contact)
        return contact

    async def delete_contact(self, contact_id: str) -> Contact | None:
        """Remove a contact and strip it from every task.

        Returns:
            The removed contact, or None if the id is unknown
        """
        contact = self.find_contact(contact_id)
        if contact is None:
            logger.debug("delete_contact_not_found", contact_id=contact_id)
            return None

        self.contacts.remove(contact)
        logger.info("contact_deleted", contact_id=contact_id)
        await self._persist_contacts("delete")
        await self.reconciler.propagate_removal(contact_id)
        return contact

    def sort_contacts(self) -> list[Contact]:
        """Return contacts in display order; the registry itself is not reordered."""
        return sorted(self.contacts, key=contact_sort_key)

    def group_by_initial(self) -> dict[str, list[Contact]]:
        """Group sorted contacts under the initial of their last name."""
        groups: dict[str, list[Contact]] = {}
        for contact in self.sort_contacts():
            _, last = _name_parts(contact)
            letter = last[:1].upper() or UNNAMED_GROUP
            groups.setdefault(letter, []).append(contact)
        return groups
