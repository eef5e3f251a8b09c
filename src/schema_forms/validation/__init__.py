"""
Validation for schema-forms.

Per-field rules compiled from descriptors, plus structural checks of raw
schema documents.
"""

from schema_forms.validation.rules import (
    ValidationMessage,
    ValidationRule,
    Validator,
    accepts_file,
    parse_number,
)
from schema_forms.validation.schema_checks import (
    SchemaCheckResult,
    check_field_name,
    check_schema,
)

__all__ = [
    "ValidationMessage",
    "ValidationRule",
    "Validator",
    "accepts_file",
    "parse_number",
    "SchemaCheckResult",
    "check_field_name",
    "check_schema",
]
