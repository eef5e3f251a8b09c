#!/usr/bin/env python3
"""
Registration form example.

Renders a small address form headlessly: the city list depends on the
chosen country, and the record goes to a fake store that rejects one
email address the way a backend would.

Usage:
    pip install -e .
    python examples/registration_form.py
"""

import asyncio
import logging

from schema_forms import FormController, FormEventProcessor, SubmissionError

SCHEMA = {
    "type": "object",
    "title": "Registration",
    "properties": {
        "nombre": {"type": "string", "title": "Nombre", "required": True, "maxLength": 80},
        "email": {"type": "string", "format": "email", "required": True},
        "edad": {"type": "integer", "minimum": 18},
        "country": {"type": "integer", "enum": [7, 8], "enumLabels": {"7": "Chile", "8": "Peru"}},
        "city": {"type": "integer", "format": "select", "dependsOn": "country"},
        "notes": {"type": "string", "maxLength": 2000},
    },
    "fieldGroups": [
        {"id": "person", "title": "Person", "fields": ["nombre", "email", "edad"]},
        {"id": "address", "title": "Address", "fields": ["country", "city"]},
    ],
}

CITIES = {
    7: [{"id": 1, "text": "Santiago"}, {"id": 2, "text": "Valparaiso"}],
    8: [{"id": 3, "text": "Lima"}, {"id": 4, "text": "Cusco"}],
}


async def fetch_cities(country):
    await asyncio.sleep(0.05)
    return CITIES.get(int(country), [])


async def save_person(is_update, record):
    await asyncio.sleep(0.05)
    if record.get("email") == "taken@example.com":
        raise SubmissionError(
            "Rejected",
            errors={"email": ["Already registered"], "non_field_errors": "Please review the form"},
        )
    return {"id": 42, **record}


class PrintingProcessor(FormEventProcessor):
    """Prints errors as they are shown."""

    def on_field_validated(self, field_name, error, shown):
        if error and shown:
            print(f"  ! {field_name}: {error}")

    def on_options_changed(self, field_name, options):
        print(f"  {field_name} options: {[option.label for option in options]}")

    def on_form_error(self, message):
        if message:
            print(f"  ! form: {message}")


async def main():
    controller = FormController(
        SCHEMA,
        fetch_choice_source=fetch_cities,
        submit_record=save_person,
        processors=[PrintingProcessor()],
    )

    print("Fields:")
    for handle in await controller.render():
        print(f"  [{handle.group_id}] {handle.label}: {handle.control}")

    print("\nFilling in the form...")
    controller.set_value("nombre", "Ana")
    controller.set_value("email", "taken@example.com")
    controller.set_value("edad", "30")
    controller.set_value("country", 7)
    await controller.wait_for_dependencies()
    controller.set_value("city", 2)

    print("\nSubmitting...")
    try:
        await controller.submit()
    except SubmissionError as e:
        print(f"  Submission rejected: {e.field_errors}")

    print("\nFixing the email and submitting again...")
    controller.set_value("email", "ana@example.com")
    result = await controller.submit()
    print(f"  Saved: {result}")

    controller.destroy()


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main())
