"""Remote document store client, path builder and local session cache."""

from board_service.storage.paths import StorePaths, namespace_key
from board_service.storage.remote_store import CreatedDocument, RemoteStoreClient
from board_service.storage.session_cache import SessionCache

__all__ = [
    "RemoteStoreClient",
    "CreatedDocument",
    "StorePaths",
    "namespace_key",
    "SessionCache",
]
