"""
Structural checks for raw form schemas.

These checks report problems without raising. Form construction degrades
around malformed descriptors; the report tells schema authors what was
ignored.
"""

from typing import Any

from pydantic import BaseModel, Field

from schema_forms.models.field_descriptor import JSON_TYPES
from schema_forms.validation.constants import MAX_FIELD_NAME_LENGTH, VALID_FIELD_NAME


class SchemaCheckResult(BaseModel):
    """Problems found in a raw form schema."""

    is_valid: bool = Field(..., description="True when no blocking problem was found")
    errors: list[str] = Field(
        default_factory=list, description="Problems that make the schema unusable as written"
    )
    warnings: list[str] = Field(
        default_factory=list, description="Problems the form degrades around"
    )


def check_field_name(name: str) -> tuple[bool, str | None]:
    """Validate a field name."""
    if not name:
        return False, "Field name cannot be empty"
    if len(name) > MAX_FIELD_NAME_LENGTH:
        return False, "Field name too long"
    if not VALID_FIELD_NAME.match(name):
        return False, "Invalid characters in field name"
    return True, None


def check_schema(schema: Any) -> SchemaCheckResult:
    """Validate a raw JSON Schema form document."""
    errors: list[str] = []
    warnings: list[str] = []

    if not isinstance(schema, dict):
        return SchemaCheckResult(is_valid=False, errors=["Schema must be an object"])

    # Root
    if "type" not in schema:
        warnings.append("Missing 'type' field in schema")
    elif schema["type"] != "object":
        errors.append("Root schema type must be 'object'")

    properties = schema.get("properties")
    if properties is None:
        errors.append("Missing 'properties' field in schema")
        properties = {}
    elif not isinstance(properties, dict):
        errors.append("'properties' must be an object")
        properties = {}
    elif len(properties) == 0:
        warnings.append("Schema has no properties defined")

    # Field descriptors
    for prop_name, prop_def in properties.items():
        is_valid_name, name_error = check_field_name(str(prop_name))
        if not is_valid_name:
            warnings.append(f"Property '{prop_name}': {name_error}")

        if not isinstance(prop_def, dict):
            errors.append(f"Property '{prop_name}' must be an object")
            continue

        if "type" not in prop_def and "anyOf" not in prop_def and "enum" not in prop_def:
            warnings.append(f"Property '{prop_name}' has no type defined")

        if "type" in prop_def:
            prop_type = prop_def["type"]
            if isinstance(prop_type, str) and prop_type not in JSON_TYPES:
                warnings.append(f"Property '{prop_name}' has unknown type '{prop_type}', rendered as text")
            elif isinstance(prop_type, list):
                for unknown in [t for t in prop_type if not isinstance(t, str) or t not in JSON_TYPES]:
                    warnings.append(f"Property '{prop_name}' has unknown type in array: {unknown}")

        if "enum" in prop_def and not isinstance(prop_def["enum"], list):
            warnings.append(f"Property '{prop_name}' has a non-list 'enum', ignored")

        depends_on = prop_def.get("dependsOn")
        if depends_on is not None:
            if not isinstance(depends_on, str):
                warnings.append(f"Property '{prop_name}' has a non-string 'dependsOn', ignored")
            elif depends_on == prop_name:
                errors.append(f"Property '{prop_name}' depends on itself")
            elif depends_on not in properties:
                errors.append(f"Property '{prop_name}' depends on unknown field '{depends_on}'")

    # Schema-level required list
    if "required" in schema:
        if not isinstance(schema["required"], list):
            errors.append("'required' must be an array")
        else:
            for req_field in schema["required"]:
                if not isinstance(req_field, str):
                    warnings.append(f"Required entry {req_field!r} is not a field name, ignored")
                elif req_field not in properties:
                    errors.append(f"Required field '{req_field}' not in properties")

    # Groups
    groups = schema.get("fieldGroups")
    if groups is not None and not isinstance(groups, list):
        warnings.append("'fieldGroups' must be an array, ignored")
        groups = []
    for group in groups or []:
        if not isinstance(group, dict) or "id" not in group:
            warnings.append("Field group without an 'id' ignored")
            continue
        fields = group.get("fields") or []
        if not isinstance(fields, list):
            warnings.append(f"Group '{group['id']}' has a non-list 'fields', ignored")
            continue
        for field_name in fields:
            if not isinstance(field_name, str) or field_name not in properties:
                warnings.append(f"Group '{group['id']}' lists unknown field '{field_name}'")

    # Polymorphic pair
    if schema.get("isPolymorphic"):
        for key in ("contentTypeField", "objectIdField"):
            target = schema.get(key)
            if target is None:
                errors.append(f"Polymorphic schema is missing '{key}'")
            elif not isinstance(target, str) or target not in properties:
                errors.append(f"'{key}' names unknown field '{target}'")

    return SchemaCheckResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
