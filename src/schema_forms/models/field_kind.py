"""
Field kinds.

A field kind tells the rendering layer which control to build. Every field
has exactly one kind: a member of ``FieldKind`` or a ``CustomKind`` carrying
an unrecognized format tag that caller-supplied handlers may claim.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class FieldKind(str, Enum):
    """Closed set of built-in field kinds."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PASSWORD = "password"
    COLOR = "color"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    SELECT = "select"
    MULTISELECT = "multiselect"
    FILE = "file"
    IMAGE = "image"
    MAP = "map"
    RANGE = "range"


@dataclass(frozen=True)
class CustomKind:
    """A format tag with no built-in kind."""

    tag: str

    @property
    def value(self) -> str:
        return self.tag


Kind = Union[FieldKind, CustomKind]

NUMERIC_KINDS = frozenset({FieldKind.NUMBER, FieldKind.INTEGER, FieldKind.RANGE})
UPLOAD_KINDS = frozenset({FieldKind.FILE, FieldKind.IMAGE})


def kind_from_tag(tag: str) -> Kind:
    """Return the built-in kind named ``tag``, or a custom kind."""
    try:
        return FieldKind(tag)
    except ValueError:
        return CustomKind(tag)
