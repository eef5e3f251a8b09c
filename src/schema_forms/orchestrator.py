"""
Form controller.

This is the main entry point for schema-forms.
It wires classification, validation, dependencies and state for one
rendered form: give it a schema, render it, feed it user edits, submit.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping

from schema_forms.config import SchemaFormsConfig, get_config
from schema_forms.dependencies.graph import ChoiceSource, DependencyGraph
from schema_forms.errors import ConfigurationError, SubmissionError, ValidationError
from schema_forms.events import EventDispatcher, FormEventProcessor, LoggingEventProcessor
from schema_forms.fields.choices import (
    ChoiceSetResolver,
    EnumRefPredicate,
    default_enum_ref_predicate,
)
from schema_forms.fields.classifier import FieldClassifier
from schema_forms.fields.handles import CustomHandler, FieldHandle, build_field_handle
from schema_forms.layout import LayoutState, field_order, resolve_layout
from schema_forms.models.field_descriptor import FormSchema
from schema_forms.models.field_kind import Kind
from schema_forms.models.field_values import ChoiceOption, is_empty
from schema_forms.models.validation_result import ValidationResult
from schema_forms.state.extraction import extract_record
from schema_forms.state.form_state import FieldResource, FormState, ResolutionState
from schema_forms.utils import call_with_timeout, maybe_await
from schema_forms.validation.rules import ValidationRule, Validator
from schema_forms.validation.schema_checks import check_schema

logger = logging.getLogger("schema-forms")

# (is_update, record) -> result
SubmitRecord = Callable[[bool, dict[str, Any]], Any]
LoadInitialValues = Callable[[], Mapping[str, Any] | Awaitable[Mapping[str, Any]]]

_MISSING = object()


class FormController:
    """
    Controller of one rendered form.

    Usage:
        controller = FormController(
            schema,
            fetch_choice_source=fetch_cities,
            submit_record=save_person,
        )
        handles = await controller.render()

        # Feed user input
        controller.set_value("email", "a@b.co")
        controller.leave_field("email")

        # Submit (validates first, returns None when the form is invalid)
        result = await controller.submit()
    """

    def __init__(
        self,
        schema: FormSchema | Mapping[str, Any],
        *,
        fetch_choice_source: ChoiceSource | None = None,
        choice_sources: Mapping[str, ChoiceSource] | None = None,
        submit_record: SubmitRecord | None = None,
        load_initial_values: LoadInitialValues | None = None,
        initial_values: Mapping[str, Any] | None = None,
        edit_mode: bool = False,
        custom_handlers: Mapping[str, CustomHandler] | None = None,
        enum_ref_predicate: EnumRefPredicate | None = None,
        config: SchemaFormsConfig | None = None,
        processors: list[FormEventProcessor] | None = None,
        on_submit_success: Callable[[Any], Any] | None = None,
        on_submit_error: Callable[[SubmissionError], Any] | None = None,
    ):
        """
        Initialize the controller.

        Args:
            schema: A FormSchema or a raw JSON Schema document.
            fetch_choice_source: Option source for dependent fields.
            choice_sources: Per-dependent option sources.
            submit_record: Stores the extracted record, sync or async.
            load_initial_values: Loads starting values at render time.
            initial_values: Starting values, overridden by loaded ones.
            edit_mode: Submit as an update of an existing record.
            custom_handlers: Widget builders for custom field kinds, by tag.
            enum_ref_predicate: Decides which ``$ref`` targets are enumerations.
                If None, uses configured names and ``$defs`` enums.
            config: Settings to use. If None, uses the global config.
            processors: Event processors. If None, events are logged.
            on_submit_success: Called with the submit result.
            on_submit_error: Called with a SubmissionError instead of raising it.

        Raises:
            ConfigurationError: If the schema's dependencies are inconsistent.
        """
        self.config = config or get_config()

        if isinstance(schema, FormSchema):
            self.schema = schema
        else:
            report = check_schema(schema)
            for problem in report.errors + report.warnings:
                logger.warning(f"Schema: {problem}")
            self.schema = FormSchema.from_json_schema(schema)

        self.edit_mode = edit_mode
        self._submit_record = submit_record
        self._load_initial_values = load_initial_values
        self._initial_values = dict(initial_values or {})
        self._custom_handlers = dict(custom_handlers or {})
        self._on_submit_success = on_submit_success
        self._on_submit_error = on_submit_error

        self.events = EventDispatcher(
            processors if processors is not None
            else [LoggingEventProcessor(verbose=self.config.verbose_output)]
        )

        predicate = enum_ref_predicate or default_enum_ref_predicate(
            self.config.enum_ref_names, self.schema.definitions
        )
        self.choices = ChoiceSetResolver(predicate, self.schema.definitions)
        self.classifier = FieldClassifier(self.choices, self.config.large_text_threshold)
        self.validator = Validator(self.config.locale)

        self._required = {
            name for name, descriptor in self.schema.properties.items() if descriptor.required
        }
        if self.config.enforce_schema_required:
            self._required.update(name for name in self.schema.required if name in self.schema.properties)

        self.kinds: dict[str, Kind] = {}
        self._rules: dict[str, ValidationRule] = {}
        for name, descriptor in self.schema.properties.items():
            kind = self.classifier.classify(name, descriptor)
            self.kinds[name] = kind
            self._rules[name] = self.validator.compile(
                descriptor, kind=kind, required=name in self._required
            )

        self.state = FormState(self.schema.field_names)
        self.graph = DependencyGraph.from_schema(
            self.schema,
            self.state,
            fetch_choice_source,
            sources=choice_sources,
            timeout=self.config.resolution_timeout,
            events=self.events,
            locale=self.config.locale,
        )
        self.layout = LayoutState(resolve_layout(self.schema, self.config.locale))
        self.handles: dict[str, FieldHandle] = {}
        self._starting_values: dict[str, Any] = dict(self._initial_values)
        self._rendered = False

        logger.debug(
            f"Form '{self.schema.title or 'untitled'}' ready: "
            f"{len(self.kinds)} fields, {len(self.graph.links)} dependencies"
        )

    # Rendering

    async def render(self) -> list[FieldHandle]:
        """
        Render the form.

        Loads and seeds the starting values, starts resolving dependents whose
        driver already holds a value, and returns one handle per field in
        display order. Rendering again releases the previous render's
        resources first.
        """
        if self._rendered:
            self.graph.close()
            self.state.release_resources()

        values = dict(self._initial_values)
        if self._load_initial_values is not None:
            loaded = await maybe_await(self._load_initial_values())
            values.update(loaded or {})

        self._starting_values = values
        self._seed(values)

        self.handles = {}
        content_type_pair = (
            (self.schema.content_type_field, self.schema.object_id_field)
            if self.schema.is_polymorphic
            else (None, None)
        )
        for name in field_order(self.layout.groups):
            self.handles[name] = build_field_handle(
                name,
                self.schema.descriptor(name),
                self.kinds[name],
                required=name in self._required,
                group_id=self.layout.group_of(name),
                content_type_pair=content_type_pair,
                custom_handlers=self._custom_handlers,
            )

        self.graph.refresh()
        self._rendered = True
        logger.info(f"Rendered {len(self.handles)} fields")
        return list(self.handles.values())

    def _seed(self, values: Mapping[str, Any]) -> None:
        self.state.reset(values)
        for name, value in self.state.values().items():
            if not is_empty(value):
                self.validate_field(name, show_error=False)

    def reset(self) -> list[asyncio.Task]:
        """
        Restore the values the form was rendered with.

        Clears every field error, touched flag and the form-level error, then
        resolves dependents again from the restored driver values.

        Returns:
            The resolution tasks started.
        """
        self.graph.close()
        self._seed(self._starting_values)
        self._set_form_error(None)
        logger.debug("Form reset")
        return self.graph.refresh()

    def handle(self, name: str) -> FieldHandle:
        """Get the handle of a rendered field."""
        try:
            return self.handles[name]
        except KeyError:
            raise KeyError(f"Field '{name}' has not been rendered") from None

    # Values

    def get_value(self, name: str) -> Any:
        return self.state.get_value(name)

    def set_value(self, name: str, value: Any) -> list[asyncio.Task]:
        """
        Record a user edit.

        Marks the field touched, validates it without showing the error, and
        restarts resolution of its dependents. Must run inside the event loop
        when the field drives other fields.

        Returns:
            The dependent resolutions started by the edit.
        """
        self.state.set_value(name, value)
        self.events.on_value_changed(name, value)
        self.validate_field(name, show_error=False)
        return self.graph.on_driver_changed(name, value)

    def leave_field(self, name: str) -> bool:
        """Validate a field the user moved away from and show its error."""
        self.state.touch(name)
        return self.validate_field(name, show_error=True)

    def is_required(self, name: str) -> bool:
        return name in self._required

    def is_visible(self, name: str) -> bool:
        """
        Whether a field should be shown.

        The object picker of a content-type pair stays hidden until a
        content type is chosen.
        """
        link = self.graph.link_of(name)
        if link is None or not link.content_type:
            return name in self.state
        return not is_empty(self.state.get_value(link.driver))

    def options_for(self, name: str) -> list[ChoiceOption]:
        """Options of a choice field: fetched ones, else the static set."""
        options = self.state.options(name)
        if options is not None:
            return options
        return self.choices.resolve_options(self.schema.descriptor(name))

    def resolution_state(self, name: str) -> ResolutionState:
        return self.state.resolution_state(name)

    def attach_resource(self, name: str, resource: FieldResource) -> None:
        """Tie an external resource (e.g. a map widget) to a field."""
        self.state.attach_resource(name, resource)

    # Validation

    def validate_field(self, name: str, value: Any = _MISSING, show_error: bool = False) -> bool:
        """
        Run a field's rule and record the result.

        Args:
            name: Field name.
            value: Value to check. If omitted, the field's current value.
            show_error: Also flag the field invalid to the user. When False,
                any shown error is cleared.

        Returns:
            Whether the value is valid.
        """
        if value is _MISSING:
            value = self.state.get_value(name)
        error = self._rules[name](value)
        self.state.record_error(name, error, show=show_error)
        self.events.on_field_validated(name, error, show_error)
        return error is None

    def validate_all(self) -> bool:
        """Validate every field from live state, showing every error."""
        results = [self.validate_field(name, show_error=True) for name in self.state.field_names]
        return all(results)

    def validation_result(self) -> ValidationResult:
        """Validate every field and summarize the outcome."""
        is_valid = self.validate_all()
        return ValidationResult.from_field_errors(
            self.state.errors(),
            self.state.values(),
            validated_data=self.extract() if is_valid else None,
        )

    def validated_record(self) -> dict[str, Any]:
        """
        Validate every field and extract the record.

        Raises:
            ValidationError: If any field is invalid.
        """
        if not self.validate_all():
            raise ValidationError(self.validator.message("form_invalid"), self.state.errors())
        return self.extract()

    def extract(self) -> dict[str, Any]:
        """Project the current state into a submission record."""
        return extract_record(
            self.schema,
            self.state,
            self.kinds,
            self._required,
            bulk_upload=self.config.bulk_upload,
        )

    # Dependencies

    async def wait_for_dependencies(self) -> None:
        """Wait until every running option resolution has settled."""
        await self.graph.wait_idle()

    # Submission

    async def submit(self) -> Any:
        """
        Validate and submit the form.

        Returns:
            The submit capability's result, or None when the form is invalid
            or the failure went to ``on_submit_error``.

        Raises:
            SubmissionError: If a submission is already running, or if it
                fails and no ``on_submit_error`` callback is set.
            ConfigurationError: If no submit capability was given.
        """
        if self.state.submitting:
            raise SubmissionError(
                self.validator.message("submit_in_progress"), error_type="in_progress"
            )
        if self._submit_record is None:
            raise ConfigurationError("No submit_record capability was given")

        self._set_form_error(None)
        if not self.validate_all():
            logger.info(f"Submission blocked by {len(self.state.errors())} invalid fields")
            return None

        record = self.extract()
        self.state.submitting = True
        self.events.on_submit_state(True)
        try:
            result = await call_with_timeout(
                self._submit_record,
                self.edit_mode,
                record,
                timeout=self.config.submission_timeout,
            )
        except SubmissionError as exc:
            failure = exc
        except asyncio.TimeoutError as exc:
            failure = SubmissionError(
                self.validator.message("submit_timeout"),
                error_type="timeout",
                original_error=exc,
            )
        except Exception as exc:
            failure = SubmissionError(
                self.validator.message("submit_failed", reason=str(exc) or type(exc).__name__),
                original_error=exc,
            )
        else:
            failure = None
        finally:
            self.state.submitting = False
            self.events.on_submit_state(False)

        if failure is not None:
            logger.warning(f"Submission failed ({failure.error_type}): {failure.message}")
            self.apply_submission_errors(failure)
            if self._on_submit_error is None:
                raise failure
            await maybe_await(self._on_submit_error(failure))
            return None

        logger.info("Form submitted" + (" (update)" if self.edit_mode else ""))
        if self._on_submit_success is not None:
            await maybe_await(self._on_submit_success(result))
        return result

    def apply_submission_errors(self, error: SubmissionError) -> None:
        """
        Merge a rejected submission into the form state.

        Field messages land in the field's error slot and are shown. The
        ``non_field_errors`` entry, or the error's own message when the
        payload names no field, becomes the form-level message. Messages
        for keys that are not fields are appended to it.
        """
        form_messages = []
        if error.form_message:
            form_messages.append(error.form_message)

        field_errors = error.field_errors
        for name, message in field_errors.items():
            if name in self.state:
                self.state.record_error(name, message, show=True)
                self.events.on_field_validated(name, message, True)
            else:
                logger.warning(f"Submission error for unknown field '{name}'")
                form_messages.append(f"{name}: {message}")

        if not form_messages and not field_errors:
            form_messages.append(error.message)

        self._set_form_error(". ".join(form_messages) if form_messages else None)

    def _set_form_error(self, message: str | None) -> None:
        self.state.form_error = message
        self.events.on_form_error(message)

    # Lifecycle

    def destroy(self) -> None:
        """Cancel pending resolutions and release every field resource."""
        self.graph.close()
        self.state.release_resources()
        self._rendered = False
        logger.debug("Form destroyed")


async def render_form(
    schema: FormSchema | Mapping[str, Any],
    **kwargs: Any,
) -> FormController:
    """
    Convenience function to build and render a form.

    Args:
        schema: A FormSchema or a raw JSON Schema document.
        **kwargs: Passed to FormController.

    Returns:
        The rendered FormController

    Example:
        >>> from schema_forms import render_form
        >>> form = await render_form(schema, submit_record=save)
        >>> form.set_value("nombre", "Ana")
    """
    controller = FormController(schema, **kwargs)
    await controller.render()
    return controller
