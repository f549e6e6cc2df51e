"""HTTP client for the hierarchical JSON document store."""

import time
from typing import Any

import httpx
from pydantic import BaseModel

from board_service.core.errors import RemoteIOFailure
from board_service.utils.logging import get_logger
from board_service.utils.metrics import get_metrics

logger = get_logger(__name__)
metrics = get_metrics()


class CreatedDocument(BaseModel):
    """Result of a ``create`` call: the server-generated key and what was stored."""

    key: str
    path: str
    document: Any


class RemoteStoreClient:
    """Path-addressed access to the remote document store.

    Every path maps to ``{base_url}/{path}.json``. Provides:
    - get: read the document at a path (``None`` when absent)
    - create: append under a path with a server-generated key
    - replace: overwrite the document at a path
    - remove: delete the document at a path

    Failures surface as ``RemoteIOFailure`` and are never retried here;
    callers decide whether to retry or abandon the mutation.
    """

    def __init__(
        self,
        base_url: str,
        auth_token: Any = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store client.

        Args:
            base_url: Root URL of the document store
            auth_token: Optional token (str or SecretStr) sent as ``?auth=``
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if hasattr(auth_token, "get_secret_value"):
            auth_token = auth_token.get_secret_value()
        self._auth_token: str | None = auth_token or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

        logger.info("remote_store_client_initialized", base_url=self.base_url)

    async def __aenter__(self) -> "RemoteStoreClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @staticmethod
    def _url(path: str) -> str:
        path = path.strip("/")
        return f"/{path}.json" if path else "/.json"

    async def _request(
        self,
        method: str,
        path: str,
        payload: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Issue one request and decode its JSON body.

        Raises:
            RemoteIOFailure: On transport errors, non-2xx responses or
                undecodable bodies
        """
        query = dict(params or {})
        if self._auth_token:
            query["auth"] = self._auth_token

        start = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                self._url(path),
                json=payload if method in ("POST", "PUT") else None,
                params=query or None,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            metrics.record_store_request(method, "error", time.perf_counter() - start)
            logger.warning(
                "remote_store_http_error",
                method=method,
                path=path,
                status=e.response.status_code,
            )
            raise RemoteIOFailure(
                method, path, f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            metrics.record_store_request(method, "error", time.perf_counter() - start)
            logger.warning("remote_store_transport_error", method=method, path=path, error=str(e))
            raise RemoteIOFailure(method, path, str(e) or type(e).__name__) from e

        duration = time.perf_counter() - start
        metrics.record_store_request(method, "success", duration)
        logger.debug(
            "remote_store_request_complete",
            method=method,
            path=path,
            duration_ms=int(duration * 1000),
        )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteIOFailure(method, path, "response is not valid JSON") from e

    async def get(self, path: str) -> Any:
        """Read the document at a path.

        Args:
            path: Store path (e.g. ``users/johndoe/abc/board``)

        Returns:
            Decoded document, or None if nothing is stored there
        """
        return await self._request("GET", path)

    async def create(self, path: str, document: Any) -> CreatedDocument:
        """Store a document under a new server-generated key below ``path``.

        Args:
            path: Parent path
            document: JSON-serializable document

        Returns:
            The generated key, full path and stored document
        """
        data = await self._request("POST", path, payload=document)
        if not isinstance(data, dict) or not data.get("name"):
            raise RemoteIOFailure("POST", path, "response carries no generated key")
        key = str(data["name"])
        return CreatedDocument(key=key, path=f"{path.strip('/')}/{key}", document=document)

    async def replace(self, path: str, document: Any) -> Any:
        """Overwrite the document at a path, creating parents as needed.

        Args:
            path: Store path
            document: JSON-serializable document

        Returns:
            The stored document as echoed by the server
        """
        return await self._request("PUT", path, payload=document)

    async def remove(self, path: str) -> None:
        """Delete the document at a path."""
        await self._request("DELETE", path)

    async def health_check(self) -> bool:
        """Check the store answers a shallow read of its root.

        Returns:
            True if reachable
        """
        try:
            await self._request("GET", "", params={"shallow": "true"})
            return True
        except RemoteIOFailure as e:
            logger.error("remote_store_health_check_failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
        logger.info("remote_store_client_closed")
