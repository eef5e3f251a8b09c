"""
Field dependencies.
"""

from schema_forms.dependencies.graph import (
    ChoiceSource,
    DependencyGraph,
    DependencyLink,
    links_from_schema,
)

__all__ = [
    "ChoiceSource",
    "DependencyGraph",
    "DependencyLink",
    "links_from_schema",
]
