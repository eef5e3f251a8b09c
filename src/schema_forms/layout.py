"""
Form layout.

Orders fields into the groups a schema declares. Fields no group claims
end up in a trailing "Other fields" group, so every field is laid out
exactly once.
"""

import logging
from dataclasses import dataclass, field

from schema_forms.models.field_descriptor import FormSchema

logger = logging.getLogger("schema-forms.layout")

OTHER_GROUP_ID = "other"
OTHER_GROUP_TITLES = {
    "en": "Other fields",
    "es": "Otros campos",
}


@dataclass
class LayoutGroup:
    """One group of the resolved layout."""

    id: str
    title: str
    fields: list[str] = field(default_factory=list)
    expanded: bool = True
    icon: str | None = None
    color: str | None = None


def resolve_layout(schema: FormSchema, locale: str = "en") -> list[LayoutGroup]:
    """
    Resolve the display order of a schema's fields.

    Without ``fieldGroups`` the result is a single untitled group in
    declaration order. Group entries naming unknown fields are dropped, and
    a field listed by more than one group stays in the first.
    """
    names = schema.field_names
    if not schema.field_groups:
        return [LayoutGroup(id=OTHER_GROUP_ID, title="", fields=names)] if names else []

    placed: set[str] = set()
    groups = []
    for group in schema.field_groups:
        fields = []
        for name in group.fields:
            if name not in schema.properties:
                logger.warning(f"Group '{group.id}' lists unknown field '{name}'")
                continue
            if name in placed:
                continue
            placed.add(name)
            fields.append(name)
        if not fields:
            continue
        groups.append(
            LayoutGroup(
                id=group.id,
                title=group.title,
                fields=fields,
                expanded=group.expanded,
                icon=group.icon,
                color=group.color,
            )
        )

    rest = [name for name in names if name not in placed]
    if rest:
        groups.append(
            LayoutGroup(
                id=OTHER_GROUP_ID,
                title=OTHER_GROUP_TITLES.get(locale, OTHER_GROUP_TITLES["en"]),
                fields=rest,
            )
        )
    return groups


def field_order(groups: list[LayoutGroup]) -> list[str]:
    """Flatten resolved groups into the field display order."""
    return [name for group in groups for name in group.fields]


class LayoutState:
    """Which groups of a rendered form are expanded."""

    def __init__(self, groups: list[LayoutGroup]):
        self.groups = groups
        self._expanded = {group.id for group in groups if group.expanded}

    def is_expanded(self, group_id: str) -> bool:
        return group_id in self._expanded

    def toggle(self, group_id: str) -> bool:
        """Flip a group and return whether it is now expanded."""
        if group_id not in {group.id for group in self.groups}:
            raise KeyError(f"Unknown group '{group_id}'")
        if group_id in self._expanded:
            self._expanded.discard(group_id)
            return False
        self._expanded.add(group_id)
        return True

    def group_of(self, field_name: str) -> str | None:
        for group in self.groups:
            if field_name in group.fields:
                return group.id
        return None
