"""
Whole-form validation reports.

A report is a read-only snapshot of the error slots after a full pass,
plus the extracted record when the pass succeeded.
"""

from typing import Any, Mapping

from pydantic import BaseModel, Field


class FieldValidationError(BaseModel):
    """One field's failing check."""

    field_name: str = Field(..., description="Name of the failing field")
    error_type: str = Field(..., description="Code of the check that failed")
    message: str = Field(..., description="Message shown next to the field")
    received: Any | None = Field(default=None, description="Value that was checked")


class ValidationResult(BaseModel):
    """Outcome of validating every field of a form."""

    is_valid: bool = Field(..., description="True when no field has an error")
    errors: list[FieldValidationError] = Field(
        default_factory=list, description="Errors in field order"
    )
    validated_data: dict[str, Any] | None = Field(
        default=None, description="Extracted record, only set when valid"
    )

    @classmethod
    def from_field_errors(
        cls,
        errors: Mapping[str, str],
        values: Mapping[str, Any],
        validated_data: dict[str, Any] | None = None,
    ) -> "ValidationResult":
        """Build a report from the per-field error slots of a form."""
        failures = [
            FieldValidationError(
                field_name=name,
                error_type=getattr(message, "code", "invalid"),
                message=str(message),
                received=values.get(name),
            )
            for name, message in errors.items()
        ]
        return cls(
            is_valid=not failures,
            errors=failures,
            validated_data=None if failures else validated_data,
        )

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def invalid_fields(self) -> list[str]:
        """Names of failing fields, without duplicates."""
        return list(dict.fromkeys(e.field_name for e in self.errors))

    def errors_for(self, field_name: str) -> list[FieldValidationError]:
        return [e for e in self.errors if e.field_name == field_name]

    def to_error_dict(self) -> dict[str, list[str]]:
        """Map each failing field to its messages, the shape submit errors use."""
        return {name: [e.message for e in self.errors_for(name)] for name in self.invalid_fields}
