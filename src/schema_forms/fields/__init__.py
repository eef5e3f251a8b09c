"""
Field-level logic for schema-forms.

This module contains:
- Field classification (descriptor -> kind)
- Choice set resolution
- Field handles handed to the rendering layer
"""

from schema_forms.fields.choices import (
    ChoiceSetResolver,
    default_enum_ref_predicate,
)
from schema_forms.fields.classifier import FieldClassifier
from schema_forms.fields.handles import (
    FieldHandle,
    build_field_handle,
    humanize_field_name,
    resolve_control,
)

__all__ = [
    "ChoiceSetResolver",
    "default_enum_ref_predicate",
    "FieldClassifier",
    "FieldHandle",
    "build_field_handle",
    "humanize_field_name",
    "resolve_control",
]
