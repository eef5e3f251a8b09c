"""
Constants for validation in schema-forms.

This module contains the patterns and message catalogs used by the
validation rules and schema checks.
"""

import re

# local@domain.tld, no whitespace, exactly one @
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Valid field name pattern (alphanumeric + underscore)
VALID_FIELD_NAME = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
MAX_FIELD_NAME_LENGTH = 100

GEOMETRY_FORMATS = frozenset({"map", "geojson"})
UPLOAD_FORMATS = frozenset({"file", "image", "binary"})

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "required": "This field is required",
        "geometry_structure": "Invalid GeoJSON structure",
        "geometry_parse": "Invalid geographic data format",
        "file_type": "File type not allowed",
        "min_length": "Must be at least {limit} characters",
        "max_length": "Must be at most {limit} characters",
        "pattern": "Invalid format",
        "email": "Invalid email address",
        "number": "Must be a valid number",
        "integer": "Must be a whole number",
        "minimum": "Must be greater than or equal to {limit}",
        "maximum": "Must be less than or equal to {limit}",
        "options_failed": "Could not load options: {reason}",
        "options_timeout": "Loading options timed out",
        "form_invalid": "Please correct the errors in the form",
        "submit_in_progress": "The form is already being submitted",
        "submit_timeout": "The server took too long to respond",
        "submit_failed": "Could not save the form: {reason}",
    },
    "es": {
        "required": "Este campo es obligatorio",
        "geometry_structure": "Formato GeoJSON inválido",
        "geometry_parse": "Error en formato de datos geográficos",
        "file_type": "Tipo de archivo no permitido",
        "min_length": "Debe tener al menos {limit} caracteres",
        "max_length": "Debe tener máximo {limit} caracteres",
        "pattern": "Formato inválido",
        "email": "Email inválido",
        "number": "Debe ser un número válido",
        "integer": "Debe ser un número entero",
        "minimum": "Debe ser mayor o igual a {limit}",
        "maximum": "Debe ser menor o igual a {limit}",
        "options_failed": "Error al cargar opciones: {reason}",
        "options_timeout": "Tiempo de espera agotado al cargar opciones",
        "form_invalid": "Por favor corrija los errores en el formulario",
        "submit_in_progress": "El formulario ya se está enviando",
        "submit_timeout": "El servidor tardó demasiado en responder",
        "submit_failed": "Error al guardar: {reason}",
    },
}

DEFAULT_LOCALE = "en"
