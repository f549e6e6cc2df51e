"""SQLite-based local session cache.

Holds the reference to the signed-in user and a snapshot of their
document for fast re-display. Advisory only: the remote store is read
again on every explicit load.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import aiosqlite

from board_service.utils.logging import get_logger

logger = get_logger(__name__)

CURRENT_USER_ID = "current_user_id"
NAMESPACE_KEY = "namespace_key"
CURRENT_USER = "current_user"


class SessionCache:
    """Key/value session storage on aiosqlite.

    Read failures degrade to "nothing cached" and write failures are
    logged and reported as False; neither ever blocks a board operation.
    """

    def __init__(self, cache_path: str = ".cache/session.db") -> None:
        """Initialize session cache.

        Args:
            cache_path: Path to SQLite database file (``~`` is expanded)
        """
        self.cache_path = Path(cache_path).expanduser()
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open the database and create the session table."""
        self.cache_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._lock:
            self._db = await aiosqlite.connect(str(self.cache_path))
            await self._db.execute("PRAGMA journal_mode=WAL")
            await self._db.execute("""
                CREATE TABLE IF NOT EXISTS session (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            await self._db.commit()
            logger.debug("session_cache_initialized", path=str(self.cache_path))

    async def get(self, key: str) -> str | None:
        """Read one cached value.

        Args:
            key: Session key

        Returns:
            Stored value or None
        """
        if not self._db:
            await self.initialize()

        async with self._lock:
            try:
                cursor = await self._db.execute("SELECT value FROM session WHERE key = ?", (key,))
                row = await cursor.fetchone()
                return row[0] if row else None
            except Exception as e:
                logger.error("session_cache_get_failed", key=key, error=str(e))
                return None

    async def set_many(self, values: dict[str, str]) -> bool:
        """Store several values in one transaction.

        Args:
            values: Mapping of session key to value

        Returns:
            True if stored successfully
        """
        if not self._db:
            await self.initialize()

        async with self._lock:
            try:
                await self._db.executemany(
                    """
                    INSERT OR REPLACE INTO session (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    """,
                    list(values.items()),
                )
                await self._db.commit()
                return True
            except Exception as e:
                logger.error("session_cache_set_failed", keys=sorted(values), error=str(e))
                return False

    async def clear(self) -> None:
        """Forget the signed-in user."""
        if not self._db:
            await self.initialize()

        async with self._lock:
            await self._db.execute("DELETE FROM session")
            await self._db.commit()
            logger.debug("session_cache_cleared")

    async def save_reference(self, user_id: str, namespace_key: str) -> bool:
        return await self.set_many({CURRENT_USER_ID: user_id, NAMESPACE_KEY: namespace_key})

    async def load_reference(self) -> tuple[str, str] | None:
        """Return ``(user_id, namespace_key)`` of the signed-in user, if any."""
        user_id = await self.get(CURRENT_USER_ID)
        key = await self.get(NAMESPACE_KEY)
        if not user_id or not key:
            return None
        return user_id, key

    async def save_snapshot(self, document: dict[str, Any]) -> bool:
        return await self.set_many({CURRENT_USER: json.dumps(document)})

    async def load_snapshot(self) -> dict[str, Any] | None:
        """Return the cached user document, or None if absent or unreadable."""
        raw = await self.get(CURRENT_USER)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("session_snapshot_corrupt")
            return None
        return data if isinstance(data, dict) else None

    async def close(self) -> None:
        """Close the database connection."""
        if self._db:
            await self._db.close()
            self._db = None
