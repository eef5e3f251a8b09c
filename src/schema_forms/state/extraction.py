"""
Record extraction.

Projects form state into the plain record handed to the submit capability.
Extraction only reads the state.
"""

from typing import Any, Collection, Mapping

from schema_forms.models.field_descriptor import FormSchema
from schema_forms.models.field_kind import NUMERIC_KINDS, UPLOAD_KINDS, FieldKind, Kind
from schema_forms.models.field_values import is_empty, staged_files
from schema_forms.state.form_state import FormState
from schema_forms.validation.rules import parse_number

TRUE_STRINGS = {"true", "on", "1", "yes"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def _as_list(value: Any) -> list[Any]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _as_number(value: Any, whole: bool) -> int | float | None:
    number = parse_number(value)
    if number is None:
        return None
    if whole and isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def project_value(
    kind: Kind,
    json_type: str | None,
    value: Any,
    bulk_upload: bool = False,
) -> Any:
    """Convert one raw value into its submitted form."""
    if kind == FieldKind.BOOLEAN:
        return _as_bool(value)
    if kind == FieldKind.MULTISELECT:
        return _as_list(value)
    if kind in UPLOAD_KINDS:
        files = staged_files(value)
        if not files:
            return None
        return files if bulk_upload else files[0].name
    if kind == FieldKind.MAP:
        return None if is_empty(value) else value
    if kind in NUMERIC_KINDS or json_type in ("number", "integer"):
        if is_empty(value):
            return None
        return _as_number(value, whole=json_type == "integer" or kind == FieldKind.INTEGER)
    return value


def extract_record(
    schema: FormSchema,
    state: FormState,
    kinds: Mapping[str, Kind],
    required_fields: Collection[str],
    bulk_upload: bool = False,
) -> dict[str, Any]:
    """
    Build the submission record.

    Empty optional fields are left out. Empty required fields are present
    with ``""`` for string fields and ``None`` otherwise, so the receiver
    can see the gap. Upload fields without a staged file are left out
    unless required.

    Args:
        schema: The form schema.
        state: Live form state.
        kinds: Classified kind of every field.
        required_fields: Names of fields that are required.
        bulk_upload: Pass staged files as objects instead of file names.
    """
    record: dict[str, Any] = {}

    for name, descriptor in schema.properties.items():
        kind = kinds[name]
        json_type = descriptor.effective_type
        value = project_value(kind, json_type, state.get_value(name), bulk_upload)

        if not is_empty(value):
            record[name] = value
        elif name in required_fields:
            record[name] = "" if json_type == "string" else None

    return record
