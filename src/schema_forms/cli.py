"""
schema-forms command line.

Check schema documents and validate records against them without a UI.

Usage:
    # Report structural problems of a schema
    schema-forms check person.schema.json

    # Validate a record and print the extracted submission
    schema-forms validate person.schema.json person.json

    # Dependent fields read their options from a JSON file
    schema-forms validate order.schema.json order.json --choices cities.json
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping

from schema_forms.config import get_config
from schema_forms.errors import FormsError
from schema_forms.orchestrator import FormController
from schema_forms.validation.schema_checks import check_schema

logger = logging.getLogger("schema-forms")


def _load_json(path: str) -> Any:
    with Path(path).open(encoding="utf-8") as handle:
        return json.load(handle)


def _dump(data: Any) -> None:
    config = get_config()
    print(json.dumps(data, indent=config.indent_json_output, ensure_ascii=False, default=str))


def choice_sources_from_table(table: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build option sources from a static table.

    The table maps each dependent field to ``{driver value: [{id, text}]}``.
    Driver values are looked up by their string form; unknown values have
    no options.
    """
    sources = {}
    for dependent, options_by_value in table.items():
        def _source(driver_value: Any, options=options_by_value) -> list[Any]:
            return list(options.get(str(driver_value), []))

        sources[dependent] = _source
    return sources


def run_check(args: argparse.Namespace) -> int:
    report = check_schema(_load_json(args.schema))
    _dump(report.model_dump())
    return 0 if report.is_valid else 1


async def run_validate(args: argparse.Namespace) -> int:
    schema = _load_json(args.schema)
    data = _load_json(args.data)
    choices = _load_json(args.choices) if args.choices else {}

    def _echo(is_update: bool, record: dict[str, Any]) -> dict[str, Any]:
        return {"update": is_update, "record": record}

    controller = FormController(
        schema,
        choice_sources=choice_sources_from_table(choices),
        submit_record=_echo,
        initial_values=data,
        edit_mode=args.update,
    )
    await controller.render()
    await controller.wait_for_dependencies()

    try:
        submitted = await controller.submit()
    finally:
        controller.destroy()

    if submitted is None:
        result = controller.validation_result()
        _dump({"valid": False, "errors": result.to_error_dict()})
        return 1

    _dump({"valid": True, **submitted})
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    config = get_config()

    parser = argparse.ArgumentParser(
        prog="schema-forms",
        description="Check form schemas and validate records against them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  SCHEMA_FORMS_LOCALE             Message language: en or es (default: en)
  SCHEMA_FORMS_LOG_LEVEL          Logging level (default: INFO)
  SCHEMA_FORMS_RESOLUTION_TIMEOUT Seconds to wait for options (default: 30)
        """,
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        help=f"Logging level (default: {config.log_level})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Report structural problems of a schema")
    check_parser.add_argument("schema", help="Path to a JSON Schema document")

    validate_parser = subparsers.add_parser("validate", help="Validate a record against a schema")
    validate_parser.add_argument("schema", help="Path to a JSON Schema document")
    validate_parser.add_argument("data", help="Path to a JSON record")
    validate_parser.add_argument(
        "--choices",
        help="JSON file mapping dependent fields to {driver value: [{id, text}]}",
    )
    validate_parser.add_argument(
        "--update",
        action="store_true",
        help="Submit as an update of an existing record",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "check":
            return run_check(args)
        return asyncio.run(run_validate(args))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except FormsError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
