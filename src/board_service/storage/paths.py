"""Remote store addressing for a user's documents."""

import re
from dataclasses import dataclass

from board_service.models.base import TaskStatus

USERS_ROOT = "users"

# ASCII word characters and whitespace survive; everything else is dropped.
_NAMESPACE_STRIP = re.compile(r"[^\w\s]", re.ASCII)


def namespace_key(email: str) -> str:
    """Derive the storage namespace key from an account email.

    ``john.doe@mail.com`` becomes ``johndoemailcom``. Emails that differ
    only in punctuation map to the same key; existing stored data depends
    on this exact derivation.

    Args:
        email: Account email

    Returns:
        Namespace key used as a path segment
    """
    return _NAMESPACE_STRIP.sub("", email)


def namespace_path(key: str) -> str:
    return f"{USERS_ROOT}/{key}"


@dataclass(frozen=True)
class StorePaths:
    """Builds every path under ``users/{namespaceKey}/{userId}``."""

    namespace_key: str
    user_id: str

    @classmethod
    def for_email(cls, email: str, user_id: str) -> "StorePaths":
        return cls(namespace_key=namespace_key(email), user_id=user_id)

    def namespace(self) -> str:
        return namespace_path(self.namespace_key)

    def user(self) -> str:
        return f"{self.namespace()}/{self.user_id}"

    def contacts(self) -> str:
        return f"{self.user()}/contacts"

    def board(self) -> str:
        return f"{self.user()}/board"

    def status(self, status: TaskStatus) -> str:
        return f"{self.board()}/{TaskStatus(status).value}"

    def task(self, status: TaskStatus, index: int) -> str:
        return f"{self.status(status)}/{index}"
