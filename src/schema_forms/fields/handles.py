"""
Field handles.

A ``FieldHandle`` is the rendering layer's reference to one field. It is
created once per field when the form renders and carries everything a
renderer needs to build the control, so nothing has to rediscover a field
by its name afterwards.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from schema_forms.models.field_descriptor import FieldDescriptor
from schema_forms.models.field_kind import CustomKind, FieldKind, Kind

# Handler for a custom kind: (handle, initial value) -> caller's widget object
CustomHandler = Callable[["FieldHandle", Any], Any]

CONTROLS: dict[FieldKind, str] = {
    FieldKind.MAP: "map",
    FieldKind.FILE: "file",
    FieldKind.IMAGE: "file",
    FieldKind.MULTISELECT: "multiselect",
    FieldKind.SELECT: "select",
    FieldKind.BOOLEAN: "checkbox",
    FieldKind.DATE: "date",
    FieldKind.DATETIME: "date",
    FieldKind.NUMBER: "number",
    FieldKind.INTEGER: "number",
    FieldKind.EMAIL: "email",
    FieldKind.TEXTAREA: "textarea",
    FieldKind.COLOR: "color",
    FieldKind.RANGE: "range",
    FieldKind.PASSWORD: "password",
    FieldKind.TEXT: "text",
}

CUSTOM_CONTROL = "custom"

# Markers the renderer turns into styling hooks
MARKER_REQUIRED = "field-required"
MARKER_DEPENDENT = "dependent-field"
MARKER_CONTENT_TYPE = "content-type-selector"
MARKER_POLYMORPHIC = "polymorphic-field"
MARKER_OBJECT_ID = "object-id-field"

HELP_TEXT = {
    FieldKind.MULTISELECT: "Hold Ctrl (Cmd on Mac) to select several options",
    FieldKind.MAP: "Use the drawing tools to define the area",
    FieldKind.FILE: "Drop files here or click to select",
    FieldKind.IMAGE: "Drop files here or click to select",
}


def humanize_field_name(field_name: str) -> str:
    """
    Convert a field key to a readable label.

    >>> humanize_field_name("firstName")
    'First name'
    >>> humanize_field_name("postal_code")
    'Postal code'
    """
    if not field_name:
        return ""
    humanized = re.sub(r"([A-Z])", r" \1", field_name).replace("_", " ").strip()
    return humanized[:1].upper() + humanized[1:].lower()


def resolve_control(
    kind: Kind,
    custom_handlers: Mapping[str, CustomHandler] | None = None,
) -> tuple[str, CustomHandler | None]:
    """
    Pick the control for a kind.

    Built-in kinds map through ``CONTROLS``. A custom kind uses the handler
    registered under its tag, or falls back to a text input.
    """
    if isinstance(kind, CustomKind):
        handler = (custom_handlers or {}).get(kind.tag)
        if handler is not None:
            return CUSTOM_CONTROL, handler
        return CONTROLS[FieldKind.TEXT], None
    return CONTROLS[kind], None


@dataclass(frozen=True)
class FieldHandle:
    """Explicit identity of a rendered field."""

    name: str
    kind: Kind
    control: str
    label: str
    descriptor: FieldDescriptor
    required: bool = False
    depends_on: str | None = None
    group_id: str | None = None
    help_text: list[str] = field(default_factory=list)
    markers: frozenset[str] = frozenset()
    custom_handler: CustomHandler | None = None

    def build_custom(self, value: Any) -> Any:
        """Run the custom handler registered for this field's kind."""
        if self.custom_handler is None:
            raise LookupError(f"No custom handler for field '{self.name}'")
        return self.custom_handler(self, value)

    @property
    def placeholder(self) -> str | None:
        return self.descriptor.placeholder


def build_field_handle(
    name: str,
    descriptor: FieldDescriptor,
    kind: Kind,
    *,
    required: bool = False,
    group_id: str | None = None,
    content_type_pair: tuple[str | None, str | None] = (None, None),
    custom_handlers: Mapping[str, CustomHandler] | None = None,
) -> FieldHandle:
    """Create the handle of one field."""
    control, handler = resolve_control(kind, custom_handlers)

    markers = set()
    if required:
        markers.add(MARKER_REQUIRED)
    if descriptor.depends_on:
        markers.add(MARKER_DEPENDENT)
    if descriptor.is_content_type_field:
        markers.add(MARKER_CONTENT_TYPE)
    content_type_field, object_id_field = content_type_pair
    if name == content_type_field:
        markers.update({MARKER_POLYMORPHIC, MARKER_CONTENT_TYPE})
    if name == object_id_field:
        markers.update({MARKER_POLYMORPHIC, MARKER_OBJECT_ID})

    help_text = []
    if descriptor.description:
        help_text.append(descriptor.description)
    if descriptor.depends_on:
        help_text.append(f"Depends on {humanize_field_name(descriptor.depends_on)}")
    if kind in HELP_TEXT:
        help_text.append(HELP_TEXT[kind])

    return FieldHandle(
        name=name,
        kind=kind,
        control=control,
        label=descriptor.title or humanize_field_name(name),
        descriptor=descriptor,
        required=required,
        depends_on=descriptor.depends_on,
        group_id=group_id,
        help_text=help_text,
        markers=frozenset(markers),
        custom_handler=handler,
    )
