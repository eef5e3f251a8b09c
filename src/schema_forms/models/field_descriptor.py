"""
Field descriptor and form schema models.

These models read the JSON-Schema-like documents a form is rendered from.
Schema content may come from loosely governed sources, so every field
degrades to a safe default instead of failing validation.
"""

import logging
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger("schema-forms.models")

JSON_TYPES = {"string", "number", "integer", "boolean", "object", "array", "null"}
SCALAR_TYPES = {"string", "number", "integer"}


def _as_number(value: Any) -> float | int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    return None


def _member_type(member: dict[str, Any]) -> str | None:
    # Only plain string types take part in the nullable-pair check
    value = member.get("type")
    return value if isinstance(value, str) else None


class FieldDescriptor(BaseModel):
    """Immutable description of one form field."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    type: str | None = Field(default=None, description="JSON Schema type")
    format: str | None = Field(default=None, description="Presentation/format hint")
    title: str | None = Field(default=None)
    description: str | None = Field(default=None)
    placeholder: str | None = Field(default=None)

    # Choices
    enum: list[Any] | None = Field(default=None)
    enum_labels: dict[str, str] | None = Field(
        default=None,
        validation_alias=AliasChoices("enumLabels", "x-enum-labels", "enum_labels"),
        serialization_alias="enumLabels",
    )
    has_extension_labels: bool = Field(
        default=False, exclude=True, description="Labels were given under x-enum-labels"
    )
    any_of: list[dict[str, Any]] | None = Field(
        default=None,
        validation_alias=AliasChoices("anyOf", "any_of"),
        serialization_alias="anyOf",
    )

    # Constraints
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    minimum: int | float | None = Field(default=None)
    maximum: int | float | None = Field(default=None)
    pattern: str | None = Field(default=None)
    pattern_message: str | None = Field(default=None, alias="patternMessage")
    accept: list[str] | None = Field(default=None, description="Allowed upload types")
    required: bool = Field(default=False, description="Field-local required flag")

    # Relations
    depends_on: str | None = Field(default=None, alias="dependsOn")
    is_content_type_field: bool = Field(default=False, alias="isContentTypeField")
    is_many_to_many: bool = Field(default=False, alias="isManyToMany")

    @model_validator(mode="before")
    @classmethod
    def _mark_extension_labels(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {**data, "has_extension_labels": isinstance(data.get("x-enum-labels"), dict)}
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str | None:
        # ["string", "null"] style unions keep their first non-null member
        if isinstance(value, list):
            members = [item for item in value if isinstance(item, str) and item != "null"]
            return members[0] if members else None
        return value if isinstance(value, str) else None

    @field_validator("format", "title", "description", "placeholder", "pattern",
                     "pattern_message", "depends_on", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return value if isinstance(value, str) and value else None

    @field_validator("enum", mode="before")
    @classmethod
    def _coerce_enum(cls, value: Any) -> list[Any] | None:
        return list(value) if isinstance(value, (list, tuple)) else None

    @field_validator("enum_labels", mode="before")
    @classmethod
    def _coerce_labels(cls, value: Any) -> dict[str, str] | None:
        if not isinstance(value, dict):
            return None
        return {str(key): str(label) for key, label in value.items()}

    @field_validator("any_of", mode="before")
    @classmethod
    def _coerce_any_of(cls, value: Any) -> list[dict[str, Any]] | None:
        if not isinstance(value, (list, tuple)):
            return None
        return [item for item in value if isinstance(item, dict)]

    @field_validator("min_length", "max_length", mode="before")
    @classmethod
    def _coerce_length(cls, value: Any) -> int | None:
        number = _as_number(value)
        return int(number) if number is not None and number >= 0 else None

    @field_validator("minimum", "maximum", mode="before")
    @classmethod
    def _coerce_bound(cls, value: Any) -> int | float | None:
        return _as_number(value)

    @field_validator("accept", mode="before")
    @classmethod
    def _coerce_accept(cls, value: Any) -> list[str] | None:
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            return None
        entries = [str(item).strip() for item in value if str(item).strip()]
        return entries or None

    @field_validator("required", "is_content_type_field", "is_many_to_many", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return value is True

    @classmethod
    def from_raw(cls, raw: Any) -> "FieldDescriptor":
        """Build a descriptor from a schema fragment, never raising."""
        if not isinstance(raw, dict):
            return cls()
        try:
            return cls.model_validate(raw)
        except PydanticValidationError as exc:
            logger.warning(f"Unusable field descriptor, treating as text: {exc}")
            return cls()

    @property
    def effective_type(self) -> str | None:
        """
        The type used for classification and validation.

        A nullable ``anyOf`` pair such as ``[{"type": "string"}, {"type": "null"}]``
        reports the non-null member's type.
        """
        if self.type:
            return self.type
        if self.is_nullable_scalar:
            for member in self.any_of or []:
                member_type = _member_type(member)
                if member_type != "null":
                    return member_type
        return None

    @property
    def is_nullable_scalar(self) -> bool:
        """Whether ``anyOf`` only encodes an optional scalar value."""
        members = self.any_of or []
        if len(members) != 2:
            return False
        types = [_member_type(member) for member in members]
        return "null" in types and any(t in SCALAR_TYPES for t in types)


class FieldGroup(BaseModel):
    """A titled, collapsible group of fields."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Group identifier")
    title: str = Field(default="", description="Group heading")
    fields: list[str] = Field(default_factory=list, description="Field names in display order")
    expanded: bool = Field(default=True)
    icon: str | None = Field(default=None)
    color: str | None = Field(default=None)


class FormSchema(BaseModel):
    """
    A complete form schema.

    ``properties`` keeps insertion order, which is the display order unless
    ``field_groups`` say otherwise.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None)
    description: str | None = Field(default=None)
    properties: dict[str, FieldDescriptor] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    field_groups: list[FieldGroup] = Field(default_factory=list, alias="fieldGroups")
    is_polymorphic: bool = Field(default=False, alias="isPolymorphic")
    content_type_field: str | None = Field(default=None, alias="contentTypeField")
    object_id_field: str | None = Field(default=None, alias="objectIdField")
    definitions: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @classmethod
    def from_json_schema(cls, data: Any) -> "FormSchema":
        """
        Read a raw JSON Schema document.

        Missing or malformed parts fall back to empty defaults.
        """
        if not isinstance(data, dict):
            data = {}

        raw_properties = data.get("properties")
        if not isinstance(raw_properties, dict):
            raw_properties = {}
        properties = {
            str(name): FieldDescriptor.from_raw(raw)
            for name, raw in raw_properties.items()
        }

        required = data.get("required")
        if not isinstance(required, list):
            required = []

        raw_groups = data.get("fieldGroups") or []
        if not isinstance(raw_groups, list):
            logger.warning(f"Ignoring non-list fieldGroups: {raw_groups!r}")
            raw_groups = []

        groups = []
        for raw_group in raw_groups:
            if not isinstance(raw_group, dict) or "id" not in raw_group:
                logger.warning(f"Skipping malformed field group: {raw_group!r}")
                continue
            try:
                groups.append(FieldGroup.model_validate(raw_group))
            except PydanticValidationError as exc:
                logger.warning(f"Skipping malformed field group: {exc}")

        definitions = data.get("$defs") or data.get("definitions") or {}
        if not isinstance(definitions, dict):
            definitions = {}

        def _text(key: str) -> str | None:
            value = data.get(key)
            return value if isinstance(value, str) else None

        return cls(
            title=_text("title"),
            description=_text("description"),
            properties=properties,
            required=[name for name in required if isinstance(name, str)],
            field_groups=groups,
            is_polymorphic=data.get("isPolymorphic") is True,
            content_type_field=_text("contentTypeField"),
            object_id_field=_text("objectIdField"),
            definitions={
                str(name): body for name, body in definitions.items() if isinstance(body, dict)
            },
        )

    @property
    def field_names(self) -> list[str]:
        """Field names in declaration order."""
        return list(self.properties)

    def descriptor(self, name: str) -> FieldDescriptor:
        """Get the descriptor of a field."""
        return self.properties[name]
