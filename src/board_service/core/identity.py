"""Identity context: which user's data is active, and how it is loaded."""

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from board_service.core.errors import RemoteIOFailure, ValidationFailure
from board_service.core.validation import validate_registration
from board_service.models import Board, Contact, User
from board_service.storage.paths import StorePaths, namespace_key, namespace_path
from board_service.storage.remote_store import RemoteStoreClient
from board_service.storage.session_cache import SessionCache
from board_service.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


def parse_user(data: dict[str, Any], user_id: str, path: str) -> User:
    """Build a ``User`` from a stored document.

    Raises:
        RemoteIOFailure: If the stored document does not describe a user
    """
    try:
        return User.model_validate({**data, "id": user_id})
    except ValidationError as e:
        logger.error("stored_user_malformed", path=path, errors=e.error_count())
        raise RemoteIOFailure("GET", path, "stored document is malformed") from e


@dataclass
class UserSession:
    """The signed-in user and where their documents live.

    Passed explicitly to the board engine and contact registry. ``user``
    may be swapped by ``IdentityContext.reload``; consumers always go
    through the session rather than holding the user or board directly.
    """

    user: User
    paths: StorePaths

    @property
    def user_id(self) -> str:
        return self.paths.user_id

    @property
    def namespace_key(self) -> str:
        return self.paths.namespace_key

    @property
    def board(self) -> Board:
        return self.user.board

    @property
    def contacts(self) -> list[Contact]:
        return self.user.contacts


class IdentityContext:
    """Resolves, registers and signs in users.

    The remote store is authoritative; the session cache only remembers
    who is signed in and keeps an advisory snapshot for quick display.
    """

    def __init__(
        self,
        store: RemoteStoreClient,
        cache: SessionCache,
        guest_email: str = "guest@example.com",
        guest_user_id: str = "guest",
    ) -> None:
        self.store = store
        self.cache = cache
        self.guest_email = guest_email
        self.guest_user_id = guest_user_id

    async def _load_session(self, paths: StorePaths) -> UserSession | None:
        data = await self.store.get(paths.user())
        if not isinstance(data, dict) or not data:
            return None
        user = parse_user(data, paths.user_id, paths.user())
        return UserSession(user=user, paths=paths)

    async def resolve_active_user(self) -> UserSession | None:
        """Load the signed-in user from the remote store.

        Returns:
            The session, or None if nobody is signed in or the user
            document no longer exists

        Raises:
            RemoteIOFailure: If the store cannot be read
        """
        reference = await self.cache.load_reference()
        if reference is None:
            return None

        user_id, key = reference
        session = await self._load_session(StorePaths(namespace_key=key, user_id=user_id))
        if session is None:
            logger.info("active_user_missing", user_id=user_id, namespace_key=key)
            return None

        logger.debug("active_user_resolved", user_id=user_id)
        return session

    async def reload(self, session: UserSession) -> UserSession:
        """Re-read the user document and swap it into the session in place.

        Used after a failed write to drop optimistic in-memory changes.

        Raises:
            RemoteIOFailure: If the store cannot be read
        """
        fresh = await self._load_session(session.paths)
        if fresh is None:
            logger.warning("reload_found_no_user", user_id=session.user_id)
            return session
        session.user = fresh.user
        logger.info("session_reloaded", user_id=session.user_id)
        return session

    async def persist_local_snapshot(self, session: UserSession) -> bool:
        """Cache the session reference and a snapshot of the user document."""
        saved_ref = await self.cache.save_reference(session.user_id, session.namespace_key)
        saved_doc = await self.cache.save_snapshot(session.user.to_document())
        return saved_ref and saved_doc

    async def load_local_snapshot(self) -> User | None:
        """Return the cached user for display; never use it as the source of truth."""
        reference = await self.cache.load_reference()
        snapshot = await self.cache.load_snapshot()
        if reference is None or snapshot is None:
            return None
        try:
            return User.model_validate({**snapshot, "id": reference[0]})
        except ValidationError:
            logger.warning("session_snapshot_malformed", user_id=reference[0])
            return None

    async def register(self, name: str, email: str, password: str) -> UserSession:
        """Create a new account under the email's namespace.

        Raises:
            ValidationFailure: On invalid fields or an already used email
            RemoteIOFailure: If the store cannot be reached
        """
        name, email = validate_registration(name, email, password)
        key = namespace_key(email)

        if await self.store.get(namespace_path(key)):
            raise ValidationFailure.single("email", "The email already exists.")

        user = User(name=name, email=email, password=password)
        created = await self.store.create(namespace_path(key), user.to_document())
        user.id = created.key

        logger.info("user_registered", user_id=created.key, namespace_key=key)
        return UserSession(user=user, paths=StorePaths(namespace_key=key, user_id=created.key))

    async def login(self, email: str, password: str) -> UserSession:
        """Sign in with email and password.

        The first account stored under the email's namespace is used.

        Raises:
            ValidationFailure: If the email is unknown or the password is wrong
            RemoteIOFailure: If the store cannot be reached
        """
        key = namespace_key(email.strip())
        accounts = await self.store.get(namespace_path(key))
        if not isinstance(accounts, dict) or not accounts:
            raise ValidationFailure.single("password", INVALID_CREDENTIALS)

        user_id = next(iter(accounts))
        data = accounts[user_id]
        if not isinstance(data, dict) or data.get("password") != password:
            raise ValidationFailure.single("password", INVALID_CREDENTIALS)

        paths = StorePaths(namespace_key=key, user_id=user_id)
        session = UserSession(user=parse_user(data, user_id, paths.user()), paths=paths)
        await self.persist_local_snapshot(session)

        logger.info("user_logged_in", user_id=user_id)
        return session

    async def login_as_guest(self) -> UserSession | None:
        """Sign in to the shared guest account, if it exists."""
        paths = StorePaths.for_email(self.guest_email, self.guest_user_id)
        session = await self._load_session(paths)
        if session is None:
            logger.warning("guest_account_missing", path=paths.user())
            return None

        await self.persist_local_snapshot(session)
        logger.info("guest_logged_in")
        return session

    async def logout(self) -> None:
        """Forget the signed-in user locally."""
        await self.cache.clear()
        logger.info("user_logged_out")
