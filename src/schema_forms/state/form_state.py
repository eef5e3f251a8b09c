"""
Form state.

``FormState`` is the authoritative snapshot of a rendered form: the raw
value of every field, its last validation error, the error currently shown,
whether the user has touched it, and for dependent fields the options
fetched at runtime. It also owns per-field resources such as external map
widgets and releases them when the form is torn down.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Protocol, Union

from schema_forms.models.field_values import ChoiceOption

logger = logging.getLogger("schema-forms.state")


class ResolutionState(str, Enum):
    """Option resolution state of a dependent field."""

    UNRESOLVED = "unresolved"
    LOADING = "loading"
    RESOLVED = "resolved"
    FAILED = "failed"


class Releasable(Protocol):
    def release(self) -> None: ...


FieldResource = Union[Releasable, Callable[[], None]]


@dataclass
class FieldSlot:
    """Everything the form knows about one field."""

    value: Any = None
    error: str | None = None
    visible_error: str | None = None
    touched: bool = False
    options: list[ChoiceOption] | None = None
    resolution: ResolutionState = ResolutionState.UNRESOLVED
    resources: list[FieldResource] = field(default_factory=list)


class FormState:
    """Mutable state of one rendered form."""

    def __init__(self, field_names: Iterable[str]):
        self._slots: dict[str, FieldSlot] = {name: FieldSlot() for name in field_names}
        self.form_error: str | None = None
        self.submitting: bool = False

    def _slot(self, name: str) -> FieldSlot:
        try:
            return self._slots[name]
        except KeyError:
            raise KeyError(f"Unknown field '{name}'") from None

    @property
    def field_names(self) -> list[str]:
        return list(self._slots)

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    # Values

    def get_value(self, name: str) -> Any:
        return self._slot(name).value

    def set_value(self, name: str, value: Any, touch: bool = True) -> None:
        slot = self._slot(name)
        slot.value = value
        if touch:
            slot.touched = True

    def seed(self, values: Mapping[str, Any]) -> None:
        """Load starting values; keys that are not fields are ignored."""
        for name, value in values.items():
            if name in self._slots:
                self._slots[name].value = value

    def reset(self, values: Mapping[str, Any]) -> None:
        """
        Return every field to its starting value.

        Errors, touched flags, fetched options and the form error are cleared.
        Resources stay attached to their fields.
        """
        for slot in self._slots.values():
            slot.value = None
            slot.touched = False
            slot.options = None
            slot.resolution = ResolutionState.UNRESOLVED
        self.clear_errors()
        self.seed(values)

    def values(self) -> dict[str, Any]:
        return {name: slot.value for name, slot in self._slots.items()}

    # Interaction

    def touch(self, name: str) -> None:
        self._slot(name).touched = True

    def is_touched(self, name: str) -> bool:
        return self._slot(name).touched

    # Errors

    def record_error(self, name: str, error: str | None, show: bool) -> None:
        """
        Store the result of validating a field.

        The error slot always holds the latest result. The shown error is
        set only when ``show`` is true and cleared otherwise.
        """
        slot = self._slot(name)
        slot.error = error
        slot.visible_error = error if show else None

    def error(self, name: str) -> str | None:
        return self._slot(name).error

    def displayed_error(self, name: str) -> str | None:
        return self._slot(name).visible_error

    def is_invalid(self, name: str) -> bool:
        """Whether the field is currently flagged invalid to the user."""
        return self._slot(name).visible_error is not None

    def errors(self) -> dict[str, str]:
        return {name: slot.error for name, slot in self._slots.items() if slot.error}

    def clear_errors(self) -> None:
        for slot in self._slots.values():
            slot.error = None
            slot.visible_error = None
        self.form_error = None

    # Dynamic options

    def options(self, name: str) -> list[ChoiceOption] | None:
        return self._slot(name).options

    def set_options(self, name: str, options: list[ChoiceOption] | None) -> None:
        self._slot(name).options = options

    def resolution_state(self, name: str) -> ResolutionState:
        return self._slot(name).resolution

    def set_resolution_state(self, name: str, state: ResolutionState) -> None:
        self._slot(name).resolution = state

    # Resources

    def attach_resource(self, name: str, resource: FieldResource) -> None:
        """Give a field ownership of a resource released with the field."""
        self._slot(name).resources.append(resource)

    def release_resources(self, name: str | None = None) -> None:
        """Release the resources of one field, or of every field."""
        names = [name] if name is not None else list(self._slots)
        for field_name in names:
            slot = self._slot(field_name)
            while slot.resources:
                resource = slot.resources.pop()
                release = getattr(resource, "release", resource)
                release()
                logger.debug(f"Released resource of '{field_name}'")

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Plain-data copy of the state, for debugging and tests."""
        return {
            name: {
                "value": slot.value,
                "error": slot.error,
                "visible_error": slot.visible_error,
                "touched": slot.touched,
                "options": [option.model_dump() for option in slot.options]
                if slot.options is not None
                else None,
                "resolution": slot.resolution.value,
            }
            for name, slot in self._slots.items()
        }
