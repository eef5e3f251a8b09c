"""
Form lifecycle events.

Processors receive notifications about validation, value changes, option
resolution and submission. The rendering layer implements a processor to
keep controls in sync with the form state; ``LoggingEventProcessor`` writes
the same events to the log.
"""

import logging
from typing import Any, Iterable

logger = logging.getLogger("schema-forms.events")


class FormEventProcessor:
    """
    Base class for form event processors.

    Every hook is a no-op; subclasses override the ones they need.
    """

    def on_field_validated(self, field_name: str, error: str | None, shown: bool) -> None:
        """Called after a field was validated."""

    def on_value_changed(self, field_name: str, value: Any) -> None:
        """Called when a field's value changes, by the user or by resolution."""

    def on_options_changed(self, field_name: str, options: list[Any]) -> None:
        """Called when a dependent field receives a new option list."""

    def on_resolution_state(self, field_name: str, state: str) -> None:
        """Called when a dependent field's resolution state changes."""

    def on_submit_state(self, submitting: bool) -> None:
        """Called when a submission starts or ends."""

    def on_form_error(self, message: str | None) -> None:
        """Called when the form-level error message changes."""


class LoggingEventProcessor(FormEventProcessor):
    """
    A processor that logs form events.

    Useful for development and debugging.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the logging processor.

        Args:
            verbose: If True, log every validation and value change.
        """
        self.verbose = verbose

    def on_field_validated(self, field_name: str, error: str | None, shown: bool) -> None:
        if self.verbose or (error and shown):
            logger.debug(f"Validated '{field_name}': {error or 'ok'} (shown={shown})")

    def on_value_changed(self, field_name: str, value: Any) -> None:
        if self.verbose:
            logger.debug(f"Value of '{field_name}' changed")

    def on_options_changed(self, field_name: str, options: list[Any]) -> None:
        logger.debug(f"'{field_name}' received {len(options)} options")

    def on_resolution_state(self, field_name: str, state: str) -> None:
        logger.debug(f"'{field_name}' resolution -> {state}")

    def on_submit_state(self, submitting: bool) -> None:
        logger.info("Submitting form" if submitting else "Submission finished")

    def on_form_error(self, message: str | None) -> None:
        if message:
            logger.warning(f"Form error: {message}")


class EventDispatcher(FormEventProcessor):
    """Fans events out to a list of processors."""

    def __init__(self, processors: Iterable[FormEventProcessor] = ()):
        self.processors: list[FormEventProcessor] = list(processors)

    def add(self, processor: FormEventProcessor) -> None:
        self.processors.append(processor)

    def on_field_validated(self, field_name: str, error: str | None, shown: bool) -> None:
        for processor in self.processors:
            processor.on_field_validated(field_name, error, shown)

    def on_value_changed(self, field_name: str, value: Any) -> None:
        for processor in self.processors:
            processor.on_value_changed(field_name, value)

    def on_options_changed(self, field_name: str, options: list[Any]) -> None:
        for processor in self.processors:
            processor.on_options_changed(field_name, options)

    def on_resolution_state(self, field_name: str, state: str) -> None:
        for processor in self.processors:
            processor.on_resolution_state(field_name, state)

    def on_submit_state(self, submitting: bool) -> None:
        for processor in self.processors:
            processor.on_submit_state(submitting)

    def on_form_error(self, message: str | None) -> None:
        for processor in self.processors:
            processor.on_form_error(message)
