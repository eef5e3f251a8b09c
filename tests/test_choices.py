"""Tests for choice set resolution."""

from schema_forms.fields.choices import (
    ChoiceSetResolver,
    default_enum_ref_predicate,
    ref_target_name,
)
from schema_forms.models.field_descriptor import FieldDescriptor
from schema_forms.models.field_values import ChoiceOption


def descriptor(raw):
    return FieldDescriptor.from_raw(raw)


class TestChoiceDetection:
    """Tests for ChoiceSetResolver.is_choice."""

    def test_enum_is_choice(self):
        assert ChoiceSetResolver().is_choice(descriptor({"enum": ["a", "b"]}))

    def test_select_format_is_choice(self):
        assert ChoiceSetResolver().is_choice(descriptor({"type": "integer", "format": "select"}))

    def test_const_members_are_choice(self):
        raw = {"anyOf": [{"const": 1, "title": "One"}, {"const": 2}]}
        assert ChoiceSetResolver().is_choice(descriptor(raw))

    def test_nullable_scalar_is_not_choice(self):
        raw = {"anyOf": [{"type": "string"}, {"type": "null"}]}
        assert not ChoiceSetResolver().is_choice(descriptor(raw))

    def test_nullable_pair_with_enum_is_not_choice(self):
        """Test the nullable pair check short-circuits before enum."""
        raw = {"anyOf": [{"type": "string"}, {"type": "null"}], "enum": ["a"]}
        assert not ChoiceSetResolver().is_choice(descriptor(raw))

    def test_plain_string_is_not_choice(self):
        assert not ChoiceSetResolver().is_choice(descriptor({"type": "string"}))

    def test_labels_need_string_type(self):
        raw = {"type": "integer", "enumLabels": {"1": "One"}}
        assert not ChoiceSetResolver().is_choice(descriptor(raw))

    def test_custom_predicate(self):
        """Test a caller-supplied $ref predicate decides enum references."""
        resolver = ChoiceSetResolver(enum_ref_predicate=lambda ref: ref.endswith("Kind"))
        assert resolver.is_choice(descriptor({"anyOf": [{"$ref": "#/$defs/FieldKind"}]}))
        assert not resolver.is_choice(descriptor({"anyOf": [{"$ref": "#/$defs/Person"}]}))


class TestResolveOptions:
    """Tests for ChoiceSetResolver.resolve_options."""

    def test_enum_options_in_order(self):
        raw = {"enum": ["b", "a", "c"], "enumLabels": {"a": "Alpha", "c": "Gamma"}}
        options = ChoiceSetResolver().resolve_options(descriptor(raw))
        assert options == [
            ChoiceOption(value="b", label="b"),
            ChoiceOption(value="a", label="Alpha"),
            ChoiceOption(value="c", label="Gamma"),
        ]

    def test_numeric_enum_labels(self):
        raw = {"enum": [7, 8], "enumLabels": {"7": "Chile"}}
        options = ChoiceSetResolver().resolve_options(descriptor(raw))
        assert [(option.value, option.label) for option in options] == [(7, "Chile"), (8, "8")]

    def test_const_options(self):
        raw = {"anyOf": [{"const": 1, "title": "One"}, {"const": 2}]}
        options = ChoiceSetResolver().resolve_options(descriptor(raw))
        assert [(option.value, option.label) for option in options] == [(1, "One"), (2, "2")]

    def test_enum_wins_over_const(self):
        raw = {"enum": ["x"], "anyOf": [{"const": "y"}]}
        options = ChoiceSetResolver().resolve_options(descriptor(raw))
        assert [option.value for option in options] == ["x"]

    def test_referenced_definition_options(self):
        definitions = {"Status": {"enum": ["open", "closed"], "x-enum-labels": {"open": "Open"}}}
        resolver = ChoiceSetResolver(definitions=definitions)
        raw = {"anyOf": [{"$ref": "#/$defs/Status"}, {"type": "null"}]}
        options = resolver.resolve_options(descriptor(raw))
        assert [(option.value, option.label) for option in options] == [
            ("open", "Open"),
            ("closed", "closed"),
        ]

    def test_dynamic_field_has_no_static_options(self):
        raw = {"type": "integer", "format": "select", "dependsOn": "country"}
        resolver = ChoiceSetResolver()
        assert resolver.resolve_options(descriptor(raw)) == []
        assert resolver.is_dynamic(descriptor(raw))

    def test_content_type_field_is_dynamic(self):
        resolver = ChoiceSetResolver()
        assert resolver.is_dynamic(descriptor({"isContentTypeField": True}))
        assert not resolver.is_dynamic(descriptor({"isContentTypeField": True, "enum": [1]}))


class TestEnumRefPredicate:
    """Tests for the default $ref predicate."""

    def test_target_name(self):
        assert ref_target_name("#/$defs/Status") == "Status"
        assert ref_target_name("Status") == "Status"

    def test_configured_names(self):
        predicate = default_enum_ref_predicate(names=["Country"])
        assert predicate("#/definitions/Country")
        assert not predicate("#/definitions/City")

    def test_definitions_with_enum(self):
        predicate = default_enum_ref_predicate(definitions={"Status": {"enum": ["a"]}})
        assert predicate("#/$defs/Status")
