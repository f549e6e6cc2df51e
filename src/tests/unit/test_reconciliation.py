"""Unit tests for contact fan-out into embedded task copies."""

import pytest

from board_service.core.errors import RemoteIOFailure
from board_service.core.identity import UserSession
from board_service.core.reconciliation import ContactReconciler, apply_contact_update, strip_contact
from board_service.models import Board, Contact, TaskStatus
from tests.fixtures import FakeStore, TaskFactory


class TestApplyContactUpdate:
    """Tests for the pure update fan-out."""

    def test_replaces_matching_copies(self, alice: Contact, bob: Contact) -> None:
        """Test only copies with the same id are replaced."""
        board = Board(
            todo=[TaskFactory.create(contacts=[alice, bob])],
            done=[TaskFactory.create(status=TaskStatus.DONE, contacts=[bob])],
        )
        renamed = alice.model_copy(update={"name": "Alicia Keller", "initials": "AK"})

        affected = apply_contact_update(board, renamed)

        assert affected == {TaskStatus.TODO}
        assert [c.name for c in board.todo[0].contacts] == ["Alicia Keller", "Bob Stone"]
        assert board.todo[0].contacts[0] is not renamed
        assert board.done[0].contacts[0].name == "Bob Stone"

    def test_no_reference_no_change(self, alice: Contact) -> None:
        """Test unaffected boards report no statuses."""
        board = Board(todo=[TaskFactory.create()])

        assert apply_contact_update(board, alice) == set()


class TestStripContact:
    """Tests for the pure removal fan-out."""

    def test_removes_from_every_status(self, alice: Contact, bob: Contact) -> None:
        """Test the contact disappears from tasks in all statuses."""
        board = Board(
            todo=[TaskFactory.create(contacts=[alice])],
            in_progress=[TaskFactory.create(status=TaskStatus.IN_PROGRESS, contacts=[bob, alice])],
            await_feedback=[TaskFactory.create(status=TaskStatus.AWAIT_FEEDBACK, contacts=[bob])],
        )

        affected = strip_contact(board, alice.id)

        assert affected == {TaskStatus.TODO, TaskStatus.IN_PROGRESS}
        assert board.todo[0].contacts == []
        assert board.in_progress[0].contact_ids() == [bob.id]
        assert board.await_feedback[0].contact_ids() == [bob.id]

    def test_unknown_id_is_noop(self, alice: Contact) -> None:
        """Test stripping an unreferenced id changes nothing."""
        board = Board(todo=[TaskFactory.create(contacts=[alice])])

        assert strip_contact(board, "nobody") == set()
        assert board.todo[0].contact_ids() == [alice.id]


class TestContactReconciler:
    """Tests for persisting fan-out results."""

    @pytest.mark.asyncio
    async def test_writes_affected_statuses_in_order(
        self, populated_session: UserSession, fake_store: FakeStore, alice: Contact
    ) -> None:
        """Test one write per affected status array."""
        reconciler = ContactReconciler(populated_session, fake_store)

        affected = await reconciler.propagate_removal(alice.id)

        paths = populated_session.paths
        assert affected == {TaskStatus.TODO, TaskStatus.IN_PROGRESS}
        assert fake_store.writes == [
            ("PUT", paths.status(TaskStatus.TODO)),
            ("PUT", paths.status(TaskStatus.IN_PROGRESS)),
        ]
        assert fake_store.document(paths.status(TaskStatus.TODO))[0].get("contacts") is None

    @pytest.mark.asyncio
    async def test_no_affected_status_no_write(
        self, populated_session: UserSession, fake_store: FakeStore
    ) -> None:
        """Test nothing is written when no task references the contact."""
        reconciler = ContactReconciler(populated_session, fake_store)

        assert await reconciler.propagate_removal("nobody") == set()
        assert fake_store.writes == []

    @pytest.mark.asyncio
    async def test_write_failure_propagates(
        self, populated_session: UserSession, fake_store: FakeStore, bob: Contact
    ) -> None:
        """Test store failures reach the caller."""
        fake_store.fail_methods.add("PUT")
        reconciler = ContactReconciler(populated_session, fake_store)

        with pytest.raises(RemoteIOFailure):
            await reconciler.propagate_update(bob)
