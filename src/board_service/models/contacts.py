"""Contact model."""

from typing import Any

from pydantic import field_validator, model_validator

from board_service.models.base import DocumentModel
from board_service.utils.ids import initials_for


class Contact(DocumentModel):
    """An address book entry.

    Tasks embed independent copies of contacts, so a contact is matched
    across the board by ``id`` only. ``initials`` follows ``name``;
    ``color`` is assigned once and never recomputed. The registry assigns
    both on creation; stored copies missing either load them blank.
    """

    id: str = ""
    name: str
    email: str = ""
    number: str = ""
    initials: str = ""
    color: str = ""

    @model_validator(mode="before")
    @classmethod
    def derive_initials(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("initials"):
            data = {**data, "initials": initials_for(str(data.get("name") or ""))}
        return data

    @field_validator("email", "number", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str:
        """Phone numbers sometimes come back from the store as integers."""
        return "" if v is None else str(v)

    def rename(self, name: str) -> None:
        """Change the name and refresh the derived initials."""
        self.name = name
        self.initials = initials_for(name)

    def snapshot(self) -> "Contact":
        """Return an independent copy suitable for embedding in a task."""
        return self.model_copy(deep=True)
