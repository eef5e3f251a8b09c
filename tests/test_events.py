"""Tests for form event processors."""

import logging

from schema_forms.events import EventDispatcher, FormEventProcessor, LoggingEventProcessor


class TestEventDispatcher:
    """Tests for fanning events out."""

    def test_fan_out(self, recorder):
        other = FormEventProcessor()
        dispatcher = EventDispatcher([other])
        dispatcher.add(recorder)

        dispatcher.on_value_changed("nombre", "Ana")
        dispatcher.on_field_validated("nombre", None, False)
        dispatcher.on_form_error("Server error")

        assert recorder.events == [
            ("value", "nombre", "Ana"),
            ("validated", "nombre", None, False),
            ("form_error", "Server error"),
        ]


class TestLoggingEventProcessor:
    """Tests for logging events."""

    def test_shown_errors_logged(self, caplog):
        caplog.set_level(logging.DEBUG, logger="schema-forms.events")
        processor = LoggingEventProcessor()

        processor.on_field_validated("email", None, False)
        processor.on_field_validated("email", "Invalid email address", True)

        assert "Validated 'email': Invalid email address" in caplog.text
        assert "Validated 'email': ok" not in caplog.text

    def test_verbose_logs_everything(self, caplog):
        caplog.set_level(logging.DEBUG, logger="schema-forms.events")
        processor = LoggingEventProcessor(verbose=True)

        processor.on_field_validated("email", None, False)
        processor.on_value_changed("email", "a@b.co")

        assert "Validated 'email': ok" in caplog.text
        assert "Value of 'email' changed" in caplog.text

    def test_form_error_warning(self, caplog):
        processor = LoggingEventProcessor()
        processor.on_form_error("Please review the form")
        assert "Form error: Please review the form" in caplog.text
