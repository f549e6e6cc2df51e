"""Test fixtures: in-memory store and model factories."""

from tests.fixtures.factories import (
    FAR_FUTURE,
    ContactFactory,
    DraftFactory,
    Factory,
    TaskFactory,
    UserFactory,
)
from tests.fixtures.fake_store import FakeStore

__all__ = [
    "FAR_FUTURE",
    # Store
    "FakeStore",
    # Factories
    "Factory",
    "ContactFactory",
    "TaskFactory",
    "DraftFactory",
    "UserFactory",
]
