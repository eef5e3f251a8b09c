"""
Data models for schema-forms.

This module contains:
- Field descriptors and form schemas (Pydantic)
- Field kinds
- Values flowing through a form (options, staged files)
- Validation results
"""

from schema_forms.models.field_descriptor import (
    FieldDescriptor,
    FieldGroup,
    FormSchema,
)
from schema_forms.models.field_kind import (
    CustomKind,
    FieldKind,
    Kind,
    kind_from_tag,
)
from schema_forms.models.field_values import (
    ChoiceOption,
    StagedFile,
    is_empty,
    staged_files,
)
from schema_forms.models.validation_result import (
    FieldValidationError,
    ValidationResult,
)

__all__ = [
    # Schema
    "FieldDescriptor",
    "FieldGroup",
    "FormSchema",
    # Kinds
    "CustomKind",
    "FieldKind",
    "Kind",
    "kind_from_tag",
    # Values
    "ChoiceOption",
    "StagedFile",
    "is_empty",
    "staged_files",
    # Validation
    "FieldValidationError",
    "ValidationResult",
]
