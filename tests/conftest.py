"""Shared fixtures for schema-forms tests."""

import asyncio

import pytest

from schema_forms.config import SchemaFormsConfig


@pytest.fixture
def config():
    """Default settings, independent of the environment."""
    return SchemaFormsConfig(resolution_timeout=1.0, submission_timeout=1.0)


@pytest.fixture
def person_schema():
    """The nombre / email / edad registration schema."""
    return {
        "type": "object",
        "title": "Persona",
        "properties": {
            "nombre": {"type": "string", "required": True},
            "email": {"type": "string", "format": "email"},
            "edad": {"type": "integer", "minimum": 0},
        },
    }


@pytest.fixture
def address_schema():
    """A schema whose city options depend on the chosen country."""
    return {
        "type": "object",
        "properties": {
            "country": {"type": "integer", "enum": [7, 8]},
            "city": {"type": "integer", "format": "select", "dependsOn": "country"},
            "street": {"type": "string"},
        },
    }


CITIES = {
    7: [{"id": 1, "text": "Santiago"}, {"id": 2, "text": "Valparaiso"}],
    8: [{"id": 3, "text": "Lima"}, {"id": 4, "text": "Cusco"}],
}


@pytest.fixture
def cities():
    return CITIES


@pytest.fixture
def fetch_cities():
    """Async option source keyed by country; records every call."""

    async def _fetch(country):
        _fetch.calls.append(country)
        await asyncio.sleep(0)
        return CITIES.get(int(country), [])

    _fetch.calls = []
    return _fetch


class RecordingProcessor:
    """Event processor that records every event it receives."""

    def __init__(self):
        self.events = []

    def on_field_validated(self, field_name, error, shown):
        self.events.append(("validated", field_name, error, shown))

    def on_value_changed(self, field_name, value):
        self.events.append(("value", field_name, value))

    def on_options_changed(self, field_name, options):
        self.events.append(("options", field_name, [option.value for option in options]))

    def on_resolution_state(self, field_name, state):
        self.events.append(("resolution", field_name, state))

    def on_submit_state(self, submitting):
        self.events.append(("submitting", submitting))

    def on_form_error(self, message):
        self.events.append(("form_error", message))

    def of(self, kind):
        return [event for event in self.events if event[0] == kind]


@pytest.fixture
def recorder():
    return RecordingProcessor()
