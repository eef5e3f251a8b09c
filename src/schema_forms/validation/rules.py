"""
Per-field validation rules.

``Validator.compile`` turns a field descriptor into a pure rule: a callable
that takes a raw value and returns an error message, or ``None`` when the
value is acceptable. Checks run in a fixed order and the first failure wins,
so a rule never reports more than one message.
"""

import json
import logging
import math
import re
from typing import Any, Callable, Mapping

from schema_forms.models.field_descriptor import FieldDescriptor
from schema_forms.models.field_kind import UPLOAD_KINDS, FieldKind, Kind
from schema_forms.models.field_values import StagedFile, is_empty, staged_files
from schema_forms.validation.constants import (
    DEFAULT_LOCALE,
    EMAIL_PATTERN,
    GEOMETRY_FORMATS,
    MESSAGES,
    UPLOAD_FORMATS,
)

logger = logging.getLogger("schema-forms.validation")


class ValidationMessage(str):
    """An error message that also carries a machine-readable code."""

    code: str

    def __new__(cls, text: str, code: str) -> "ValidationMessage":
        message = super().__new__(cls, text)
        message.code = code
        return message


ValidationRule = Callable[[Any], ValidationMessage | None]


def _format_limit(limit: int | float) -> str:
    if isinstance(limit, float) and limit.is_integer():
        return str(int(limit))
    return str(limit)


def parse_number(value: Any) -> int | float | None:
    """Parse a raw value as a finite number, or return ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        if number.is_integer() and re.fullmatch(r"[+-]?\d+", text):
            return int(text)
        return number
    return None


def accepts_file(file: StagedFile, accept: list[str]) -> bool:
    """
    Check a staged file against an ``accept`` allow-list.

    Entries may be extensions (``.pdf``), wildcard media types (``image/*``)
    or exact media types (``application/pdf``).
    """
    media_type = (file.media_type or "").lower()
    name = file.name.lower()
    for entry in accept:
        entry = entry.lower()
        if entry.startswith("."):
            if name.endswith(entry):
                return True
        elif entry.endswith("/*"):
            if media_type.startswith(entry[:-1]):
                return True
        elif media_type == entry:
            return True
    return False


class Validator:
    """Compiles validation rules from field descriptors."""

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self._messages = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])

    def message(self, code: str, **params: Any) -> ValidationMessage:
        """Build the localized message for ``code``."""
        return ValidationMessage(self._messages[code].format(**params), code)

    def compile(
        self,
        descriptor: FieldDescriptor,
        kind: Kind | None = None,
        required: bool | None = None,
    ) -> ValidationRule:
        """
        Compile the rule of one field.

        Args:
            descriptor: The field's descriptor.
            kind: The field's classified kind, used for upload checks.
            required: Overrides the descriptor's field-local ``required`` flag.

        Returns:
            A pure function of the raw value.
        """
        is_required = descriptor.required if required is None else required
        json_type = descriptor.effective_type
        pattern = self._compile_pattern(descriptor.pattern)
        is_geometry = descriptor.format in GEOMETRY_FORMATS
        is_upload = kind in UPLOAD_KINDS or descriptor.format in UPLOAD_FORMATS
        is_email = descriptor.format == "email" or kind == FieldKind.EMAIL

        def rule(value: Any) -> ValidationMessage | None:
            if is_empty(value):
                return self.message("required") if is_required else None

            if is_geometry:
                return self._check_geometry(value)

            if is_upload:
                return self._check_files(value, descriptor.accept)

            if json_type == "string":
                return self._check_string(value, descriptor, pattern, is_email)
            if json_type in ("number", "integer"):
                return self._check_number(value, descriptor, json_type == "integer")
            return None

        return rule

    def _compile_pattern(self, pattern: str | None) -> re.Pattern | None:
        if not pattern:
            return None
        try:
            return re.compile(pattern)
        except re.error as exc:
            logger.warning(f"Ignoring invalid pattern {pattern!r}: {exc}")
            return None

    def _check_geometry(self, value: Any) -> ValidationMessage | None:
        if isinstance(value, str):
            try:
                data = json.loads(value)
            except json.JSONDecodeError:
                return self.message("geometry_parse")
        else:
            data = value
        if not isinstance(data, Mapping):
            return self.message("geometry_parse")
        if not data.get("type") or not (data.get("geometry") or data.get("features")):
            return self.message("geometry_structure")
        return None

    def _check_files(self, value: Any, accept: list[str] | None) -> ValidationMessage | None:
        if not accept:
            return None
        for file in staged_files(value):
            if not accepts_file(file, accept):
                return self.message("file_type")
        return None

    def _check_string(
        self,
        value: Any,
        descriptor: FieldDescriptor,
        pattern: re.Pattern | None,
        is_email: bool,
    ) -> ValidationMessage | None:
        text = value if isinstance(value, str) else str(value)

        if descriptor.min_length is not None and len(text) < descriptor.min_length:
            return self.message("min_length", limit=descriptor.min_length)
        if descriptor.max_length is not None and len(text) > descriptor.max_length:
            return self.message("max_length", limit=descriptor.max_length)

        if pattern is not None and not pattern.search(text):
            if descriptor.pattern_message:
                return ValidationMessage(descriptor.pattern_message, "pattern")
            return self.message("pattern")

        if is_email and not EMAIL_PATTERN.match(text):
            return self.message("email")

        return None

    def _check_number(
        self,
        value: Any,
        descriptor: FieldDescriptor,
        whole: bool,
    ) -> ValidationMessage | None:
        number = parse_number(value)
        if number is None:
            return self.message("number")

        if whole and not float(number).is_integer():
            return self.message("integer")

        if descriptor.minimum is not None and number < descriptor.minimum:
            return self.message("minimum", limit=_format_limit(descriptor.minimum))
        if descriptor.maximum is not None and number > descriptor.maximum:
            return self.message("maximum", limit=_format_limit(descriptor.maximum))

        return None
