"""Error taxonomy shared by the board engine, contact registry and store client."""

from typing import Any


class BoardServiceError(Exception):
    """Base class for all board service failures."""


class ValidationFailure(BoardServiceError):
    """Raised before any mutation when caller-supplied fields are invalid.

    Carries one message per offending field; ``field`` is the first one
    so callers that only highlight a single input can use it directly.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        if not errors:
            raise ValueError("ValidationFailure needs at least one field error")
        self.errors = dict(errors)
        self.field, self.message = next(iter(self.errors.items()))
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailure":
        return cls({field: message})


class NotFoundFailure(BoardServiceError):
    """Raised by strict lookups when a task or contact id is absent."""

    def __init__(self, kind: str, identifier: Any) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class RemoteIOFailure(BoardServiceError):
    """Raised when a remote store request fails at the transport or HTTP level."""

    def __init__(
        self,
        method: str,
        path: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(f"{method} {path or '/'} failed: {message}")
        self.method = method
        self.path = path
        self.status_code = status_code
