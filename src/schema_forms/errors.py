"""
Exception classes for schema-forms.

Validation and dependency errors are normally contained in the form state;
they exist as exceptions for callers that want to raise them. Submission
errors travel from the submit capability back to the form. Configuration
errors abort form construction.
"""

from typing import Any, Mapping

# Reserved key for form-level messages in a submission error payload
NON_FIELD_ERRORS = "non_field_errors"


class FormsError(Exception):
    """Base exception class for all schema-forms errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "forms_error",
        original_error: Exception | None = None,
    ):
        """
        Initialize the FormsError.

        Args:
            message: Error message
            error_type: Type of error for categorization
            original_error: Original exception if this is a wrapped error
        """
        self.message = message
        self.error_type = error_type
        self.original_error = original_error
        super().__init__(self.message)


class ValidationError(FormsError):
    """One or more fields hold values that fail their rules."""

    def __init__(self, message: str, errors: Mapping[str, str] | None = None):
        super().__init__(message, error_type="validation_error")
        self.errors: dict[str, str] = dict(errors or {})


class DependencyResolutionError(FormsError):
    """Fetching the options of a dependent field failed."""

    def __init__(
        self,
        message: str,
        dependent: str,
        driver_value: Any = None,
        original_error: Exception | None = None,
        error_type: str = "dependency_resolution_error",
    ):
        super().__init__(message, error_type=error_type, original_error=original_error)
        self.dependent = dependent
        self.driver_value = driver_value


class SubmissionError(FormsError):
    """
    The submit capability rejected or failed to store the record.

    ``errors`` maps field names to a message or a list of messages. The
    ``non_field_errors`` key holds the form-level message.
    """

    def __init__(
        self,
        message: str,
        errors: Mapping[str, Any] | None = None,
        error_type: str = "submission_error",
        original_error: Exception | None = None,
    ):
        super().__init__(message, error_type=error_type, original_error=original_error)
        self.errors: dict[str, Any] = dict(errors or {})

    @property
    def form_message(self) -> str | None:
        """Form-level message, if the payload carries one."""
        value = self.errors.get(NON_FIELD_ERRORS)
        if value is None:
            return None
        return join_messages(value)

    @property
    def field_errors(self) -> dict[str, str]:
        """Field-keyed messages with lists flattened."""
        return {
            key: join_messages(value)
            for key, value in self.errors.items()
            if key != NON_FIELD_ERRORS
        }


class ConfigurationError(FormsError):
    """The schema or the capabilities given to a form contradict each other."""

    def __init__(self, message: str, field_name: str | None = None):
        super().__init__(message, error_type="configuration_error")
        self.field_name = field_name


def join_messages(value: Any) -> str:
    """Flatten a message or a list of messages into one string."""
    if isinstance(value, (list, tuple)):
        return ". ".join(str(item) for item in value)
    return str(value)
