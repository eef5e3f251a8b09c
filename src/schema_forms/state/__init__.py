"""
Form state and record extraction.
"""

from schema_forms.state.extraction import extract_record, project_value
from schema_forms.state.form_state import (
    FieldResource,
    FieldSlot,
    FormState,
    ResolutionState,
)

__all__ = [
    "FieldResource",
    "FieldSlot",
    "FormState",
    "ResolutionState",
    "extract_record",
    "project_value",
]
