"""Pytest fixtures for the board service tests."""

from datetime import date

import pytest

from board_service.core.board_engine import BoardEngine
from board_service.core.contact_registry import ContactRegistry
from board_service.core.identity import UserSession
from board_service.models import Contact, TaskStatus
from board_service.storage.paths import StorePaths
from tests.fixtures import ContactFactory, FakeStore, TaskFactory, UserFactory

TODAY = date(2030, 6, 15)


@pytest.fixture
def fake_store() -> FakeStore:
    """Create an empty in-memory store."""
    return FakeStore()


@pytest.fixture
def paths() -> StorePaths:
    return StorePaths.for_email("sofia@example.com", "user-1")


@pytest.fixture
def alice() -> Contact:
    return ContactFactory.create(name="Alice Meyer", email="alice@example.com", color="#00bee8")


@pytest.fixture
def bob() -> Contact:
    return ContactFactory.create(name="Bob Stone", email="bob@example.com", color="#9327ff")


@pytest.fixture
def session(fake_store: FakeStore, paths: StorePaths, alice: Contact, bob: Contact) -> UserSession:
    """Signed-in user with two contacts, an empty board, stored remotely."""
    user = UserFactory.create(contacts=[alice, bob])
    fake_store.seed(paths.user(), user.to_document())
    return UserSession(user=user, paths=paths)


@pytest.fixture
def populated_session(
    fake_store: FakeStore,
    paths: StorePaths,
    alice: Contact,
    bob: Contact,
) -> UserSession:
    """Signed-in user whose tasks reference contacts across several statuses."""
    tasks = [
        TaskFactory.create(id="t-todo", title="Write docs", status=TaskStatus.TODO, contacts=[alice]),
        TaskFactory.create(
            id="t-progress",
            title="Fix login bug",
            status=TaskStatus.IN_PROGRESS,
            contacts=[alice, bob],
            subtasks=["reproduce", "patch"],
        ),
        TaskFactory.create(id="t-feedback", title="Review layout", status=TaskStatus.AWAIT_FEEDBACK),
        TaskFactory.create(id="t-done", title="Set up CI", status=TaskStatus.DONE, contacts=[bob]),
    ]
    user = UserFactory.create(contacts=[alice, bob], tasks=tasks)
    fake_store.seed(paths.user(), user.to_document())
    return UserSession(user=user, paths=paths)


@pytest.fixture
def engine(session: UserSession, fake_store: FakeStore) -> BoardEngine:
    return BoardEngine(session, fake_store, today=lambda: TODAY)


@pytest.fixture
def populated_engine(populated_session: UserSession, fake_store: FakeStore) -> BoardEngine:
    return BoardEngine(populated_session, fake_store, today=lambda: TODAY)


@pytest.fixture
def registry(populated_session: UserSession, fake_store: FakeStore) -> ContactRegistry:
    return ContactRegistry(populated_session, fake_store)
