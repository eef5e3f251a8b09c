"""
Value types that flow through a form.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


class ChoiceOption(BaseModel):
    """One selectable value of a choice field."""

    value: Any = Field(..., description="Value submitted when this option is chosen")
    label: str = Field(..., description="Text displayed for this option")

    @classmethod
    def from_source(cls, item: Any) -> "ChoiceOption":
        """
        Build an option from a fetched ``{id, text}`` entry.

        Mappings and objects with ``id``/``text`` attributes are accepted.
        """
        if isinstance(item, dict):
            value = item.get("id")
            text = item.get("text")
        else:
            value = getattr(item, "id", None)
            text = getattr(item, "text", None)
        return cls(value=value, label=str(text if text is not None else value))


@dataclass(frozen=True)
class StagedFile:
    """A file the user has picked for upload."""

    name: str
    media_type: str = ""
    size: int | None = None


def staged_files(value: Any) -> list[StagedFile]:
    """Return the staged files held by a raw field value."""
    if isinstance(value, StagedFile):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, StagedFile)]
    return []


def is_empty(value: Any) -> bool:
    """Whether a raw value counts as "no value entered"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False
