"""In-memory stand-in for the remote document store.

Mirrors the store's JSON semantics closely enough for engine tests:
arrays are kept as index-keyed objects, empty collections vanish, and
dense index-keyed objects read back as arrays.
"""

import copy
import itertools
import json
from typing import Any

from board_service.core.errors import RemoteIOFailure
from board_service.storage.remote_store import CreatedDocument


def _normalize(value: Any) -> Any:
    if isinstance(value, list):
        value = {str(i): item for i, item in enumerate(value)}
    if isinstance(value, dict):
        normalized = {str(k): _normalize(v) for k, v in value.items() if v is not None}
        return {k: v for k, v in normalized.items() if v != {}} or None
    return value


def _denormalize(value: Any) -> Any:
    if isinstance(value, dict):
        value = {k: _denormalize(v) for k, v in value.items()}
        if value and all(k.isdigit() for k in value):
            indices = sorted(int(k) for k in value)
            if indices == list(range(len(indices))):
                return [value[str(i)] for i in indices]
        return value
    return value


class FakeStore:
    """Path-addressed store backed by a nested dict.

    Records every write in ``writes`` as ``(method, path)`` and can be
    told to fail selected methods with ``fail_methods``.
    """

    def __init__(self) -> None:
        self.root: dict[str, Any] = {}
        self.writes: list[tuple[str, str]] = []
        self.fail_methods: set[str] = set()
        self._keys = itertools.count(1)

    @staticmethod
    def _segments(path: str) -> list[str]:
        return [segment for segment in path.strip("/").split("/") if segment]

    def _check(self, method: str, path: str) -> None:
        if method in self.fail_methods:
            raise RemoteIOFailure(method, path, "HTTP 503", status_code=503)

    def _set(self, path: str, document: Any) -> None:
        segments = self._segments(path)
        value = _normalize(json.loads(json.dumps(document)))
        if not segments:
            self.root = value or {}
            return
        node = self.root
        for segment in segments[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = node[segment] = {}
            node = child
        if value is None:
            node.pop(segments[-1], None)
        else:
            node[segments[-1]] = value

    def document(self, path: str) -> Any:
        """Read a path the way the store would return it."""
        node: Any = self.root
        for segment in self._segments(path):
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return _denormalize(copy.deepcopy(node))

    def seed(self, path: str, document: Any) -> None:
        self._set(path, document)

    async def get(self, path: str) -> Any:
        self._check("GET", path)
        return self.document(path)

    async def create(self, path: str, document: Any) -> CreatedDocument:
        self._check("POST", path)
        key = f"-key{next(self._keys)}"
        full_path = f"{path.strip('/')}/{key}"
        self._set(full_path, document)
        self.writes.append(("POST", full_path))
        return CreatedDocument(key=key, path=full_path, document=document)

    async def replace(self, path: str, document: Any) -> Any:
        self._check("PUT", path)
        self._set(path, document)
        self.writes.append(("PUT", path))
        return document

    async def remove(self, path: str) -> None:
        self._check("DELETE", path)
        self._set(path, None)
        self.writes.append(("DELETE", path))

    async def health_check(self) -> bool:
        return "GET" not in self.fail_methods

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> "FakeStore":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
