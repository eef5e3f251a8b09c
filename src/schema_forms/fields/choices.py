"""
Choice set resolution.

Decides whether a descriptor describes a choice field and extracts its
static option list. Options of dynamic fields (content-type pickers and
fields that depend on another field) are fetched at runtime by the
dependency graph instead.
"""

from typing import Any, Callable, Iterable, Mapping

from schema_forms.models.field_descriptor import FieldDescriptor
from schema_forms.models.field_values import ChoiceOption

EnumRefPredicate = Callable[[str], bool]


def ref_target_name(ref: str) -> str:
    """Return the definition name a ``$ref`` points at."""
    return ref.rstrip("/").rsplit("/", 1)[-1]


def default_enum_ref_predicate(
    names: Iterable[str] = (),
    definitions: Mapping[str, Mapping[str, Any]] | None = None,
) -> EnumRefPredicate:
    """
    Build the default enumeration ``$ref`` test.

    A reference counts as an enumeration when its target name is one of
    ``names`` or when the target definition declares an ``enum``.

    Args:
        names: Definition names known to be enumerations.
        definitions: The schema's ``$defs``/``definitions`` section.
    """
    known = set(names)
    defs = definitions or {}

    def _predicate(ref: str) -> bool:
        target = ref_target_name(ref)
        if target in known:
            return True
        body = defs.get(target)
        return isinstance(body, Mapping) and isinstance(body.get("enum"), list)

    return _predicate


class ChoiceSetResolver:
    """Detects choice fields and resolves their static options."""

    def __init__(
        self,
        enum_ref_predicate: EnumRefPredicate | None = None,
        definitions: Mapping[str, Mapping[str, Any]] | None = None,
    ):
        self._definitions = definitions or {}
        self._is_enum_ref = enum_ref_predicate or default_enum_ref_predicate(
            definitions=self._definitions
        )

    def is_choice(self, descriptor: FieldDescriptor) -> bool:
        """Whether the field's valid values come from a finite set."""
        any_of = descriptor.any_of or []

        # Optional scalar, not an enumeration
        if descriptor.is_nullable_scalar:
            return False

        if any(isinstance(member.get("$ref"), str) and self._is_enum_ref(member["$ref"])
               for member in any_of):
            return True

        return (
            descriptor.enum is not None
            or descriptor.format == "select"
            or any("const" in member for member in any_of)
            or descriptor.is_content_type_field
            or (descriptor.type == "string" and descriptor.has_extension_labels)
        )

    def resolve_options(self, descriptor: FieldDescriptor) -> list[ChoiceOption]:
        """
        Extract the static options of a choice field in declared order.

        Returns an empty list for fields whose options are fetched at runtime.
        """
        if descriptor.enum is not None:
            return self._enum_options(descriptor.enum, descriptor.enum_labels)

        const_members = [member for member in descriptor.any_of or [] if "const" in member]
        if const_members:
            return [
                ChoiceOption(
                    value=member["const"],
                    label=str(member.get("title") or member["const"]),
                )
                for member in const_members
            ]

        for member in descriptor.any_of or []:
            ref = member.get("$ref")
            if not isinstance(ref, str):
                continue
            body = self._definitions.get(ref_target_name(ref))
            if isinstance(body, Mapping) and isinstance(body.get("enum"), list):
                labels = body.get("x-enum-labels") or body.get("enumLabels")
                return self._enum_options(
                    body["enum"], labels if isinstance(labels, dict) else descriptor.enum_labels
                )

        return []

    def is_dynamic(self, descriptor: FieldDescriptor) -> bool:
        """Whether the field's options are supplied at runtime."""
        if descriptor.depends_on:
            return True
        return descriptor.is_content_type_field and not self.resolve_options(descriptor)

    @staticmethod
    def _enum_options(values: list[Any], labels: Mapping[str, str] | None) -> list[ChoiceOption]:
        labels = labels or {}
        options = []
        for value in values:
            label = labels.get(str(value))
            options.append(ChoiceOption(value=value, label=str(label) if label else str(value)))
        return options
