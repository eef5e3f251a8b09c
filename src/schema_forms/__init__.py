"""
schema-forms: Interactive data-entry forms from JSON Schema.

Classifies schema fields into controls, validates input as the user types,
resolves fields whose options depend on other fields, and extracts a typed
record for submission. Fetching options and storing records are left to
callables you provide.

Simple Usage:
    from schema_forms import render_form

    form = await render_form(
        schema,
        submit_record=save_person,
    )

    form.set_value("email", "ana@example.com")
    form.leave_field("email")

    result = await form.submit()

Dependent Fields:
    from schema_forms import FormController

    controller = FormController(
        schema,
        fetch_choice_source=fetch_cities,  # driver value -> [{id, text}]
        submit_record=save_address,
    )
    await controller.render()

    controller.set_value("country", 7)
    await controller.wait_for_dependencies()
    controller.options_for("city")

Validation Only:
    from schema_forms import FieldClassifier, Validator, FieldDescriptor

    descriptor = FieldDescriptor.from_raw({"type": "string", "format": "email"})
    rule = Validator().compile(descriptor)
    rule("not-an-email")  # "Invalid email address"
"""

from schema_forms.orchestrator import (
    FormController,
    render_form,
)
from schema_forms.models import (
    ChoiceOption,
    CustomKind,
    FieldDescriptor,
    FieldGroup,
    FieldKind,
    FieldValidationError,
    FormSchema,
    StagedFile,
    ValidationResult,
)
from schema_forms.fields import (
    ChoiceSetResolver,
    FieldClassifier,
    FieldHandle,
    humanize_field_name,
)
from schema_forms.validation import (
    SchemaCheckResult,
    Validator,
    check_schema,
)
from schema_forms.dependencies import (
    DependencyGraph,
    DependencyLink,
)
from schema_forms.state import (
    FormState,
    ResolutionState,
    extract_record,
)
from schema_forms.layout import (
    LayoutState,
    resolve_layout,
)
from schema_forms.events import (
    EventDispatcher,
    FormEventProcessor,
    LoggingEventProcessor,
)
from schema_forms.errors import (
    ConfigurationError,
    DependencyResolutionError,
    FormsError,
    SubmissionError,
    ValidationError,
)

__all__ = [
    # Main interface
    "FormController",
    "render_form",
    # Schema models
    "FieldDescriptor",
    "FieldGroup",
    "FormSchema",
    # Kinds and values
    "FieldKind",
    "CustomKind",
    "ChoiceOption",
    "StagedFile",
    # Fields
    "ChoiceSetResolver",
    "FieldClassifier",
    "FieldHandle",
    "humanize_field_name",
    # Validation
    "Validator",
    "ValidationResult",
    "FieldValidationError",
    "SchemaCheckResult",
    "check_schema",
    # Dependencies and state
    "DependencyGraph",
    "DependencyLink",
    "FormState",
    "ResolutionState",
    "extract_record",
    # Layout
    "LayoutState",
    "resolve_layout",
    # Events
    "EventDispatcher",
    "FormEventProcessor",
    "LoggingEventProcessor",
    # Errors
    "FormsError",
    "ValidationError",
    "DependencyResolutionError",
    "SubmissionError",
    "ConfigurationError",
]

__version__ = "0.1.0"
