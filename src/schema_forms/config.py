"""
Configuration module for schema-forms.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default).lower()).lower() == "true"


def _env_timeout(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = float(raw)
    # 0 or negative disables the timeout
    return value if value > 0 else None


@dataclass
class SchemaFormsConfig:
    """Configuration settings for schema-forms."""

    # Messages
    locale: str = "en"

    # Classification
    large_text_threshold: int = 255
    enum_ref_names: list[str] = field(default_factory=list)

    # Async capabilities (seconds, None = wait forever)
    resolution_timeout: float | None = 30.0
    submission_timeout: float | None = 60.0

    # Extraction
    bulk_upload: bool = False
    enforce_schema_required: bool = False

    # Output settings
    log_level: str = "INFO"
    indent_json_output: int = 2
    verbose_output: bool = False

    @classmethod
    def from_env(cls) -> "SchemaFormsConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        enum_refs = os.getenv("SCHEMA_FORMS_ENUM_REFS")
        return cls(
            locale=os.getenv("SCHEMA_FORMS_LOCALE", _defaults.locale),
            large_text_threshold=int(os.getenv("SCHEMA_FORMS_LARGE_TEXT_THRESHOLD", str(_defaults.large_text_threshold))),
            enum_ref_names=(
                [name.strip() for name in enum_refs.split(",") if name.strip()]
                if enum_refs
                else _defaults.enum_ref_names
            ),
            resolution_timeout=_env_timeout("SCHEMA_FORMS_RESOLUTION_TIMEOUT", _defaults.resolution_timeout),
            submission_timeout=_env_timeout("SCHEMA_FORMS_SUBMISSION_TIMEOUT", _defaults.submission_timeout),
            bulk_upload=_env_bool("SCHEMA_FORMS_BULK_UPLOAD", _defaults.bulk_upload),
            enforce_schema_required=_env_bool("SCHEMA_FORMS_ENFORCE_SCHEMA_REQUIRED", _defaults.enforce_schema_required),
            log_level=os.getenv("SCHEMA_FORMS_LOG_LEVEL", _defaults.log_level),
            verbose_output=_env_bool("SCHEMA_FORMS_VERBOSE_OUTPUT", _defaults.verbose_output),
        )


config = SchemaFormsConfig.from_env()


def get_config() -> SchemaFormsConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> SchemaFormsConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
