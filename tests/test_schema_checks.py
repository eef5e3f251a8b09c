"""Tests for structural schema checks."""

from schema_forms.validation.schema_checks import check_field_name, check_schema


class TestCheckFieldName:
    """Tests for field name shape."""

    def test_valid_names(self):
        assert check_field_name("nombre") == (True, None)
        assert check_field_name("_private2") == (True, None)

    def test_invalid_names(self):
        assert check_field_name("")[0] is False
        assert check_field_name("2fast")[0] is False
        assert check_field_name("with-dash")[0] is False
        assert check_field_name("x" * 101) == (False, "Field name too long")


class TestCheckSchema:
    """Tests for whole-schema reports."""

    def test_valid_schema(self, person_schema):
        result = check_schema(person_schema)
        assert result.is_valid
        assert result.errors == []

    def test_not_an_object(self):
        result = check_schema("schema")
        assert not result.is_valid
        assert result.errors == ["Schema must be an object"]

    def test_root_type(self):
        result = check_schema({"type": "array", "properties": {}})
        assert "Root schema type must be 'object'" in result.errors

    def test_missing_properties(self):
        result = check_schema({"type": "object"})
        assert "Missing 'properties' field in schema" in result.errors

    def test_unknown_property_type_is_warning(self):
        result = check_schema({"type": "object", "properties": {"x": {"type": "tuple"}}})
        assert result.is_valid
        assert any("unknown type 'tuple'" in warning for warning in result.warnings)

    def test_required_names(self):
        result = check_schema({
            "type": "object",
            "properties": {"a": {"type": "string"}},
            "required": ["a", "b"],
        })
        assert result.errors == ["Required field 'b' not in properties"]

    def test_depends_on_targets(self):
        result = check_schema({
            "type": "object",
            "properties": {
                "a": {"type": "string", "dependsOn": "a"},
                "b": {"type": "string", "dependsOn": "zzz"},
            },
        })
        assert result.errors == [
            "Property 'a' depends on itself",
            "Property 'b' depends on unknown field 'zzz'",
        ]

    def test_non_string_depends_on(self):
        result = check_schema({
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "string", "dependsOn": ["a"]}},
        })
        assert result.is_valid
        assert "Property 'b' has a non-string 'dependsOn', ignored" in result.warnings

    def test_non_string_required_entry(self):
        result = check_schema({
            "type": "object",
            "properties": {"a": {"type": "string"}},
            "required": [["a"]],
        })
        assert result.is_valid
        assert "Required entry ['a'] is not a field name, ignored" in result.warnings

    def test_non_list_groups(self, person_schema):
        result = check_schema(dict(person_schema, fieldGroups=5))
        assert result.is_valid
        assert "'fieldGroups' must be an array, ignored" in result.warnings

        result = check_schema(dict(person_schema, fieldGroups=[{"id": "g", "fields": 5}]))
        assert "Group 'g' has a non-list 'fields', ignored" in result.warnings

    def test_non_string_type_list_entry(self):
        result = check_schema({"type": "object", "properties": {"a": {"type": ["string", ["x"]]}}})
        assert result.warnings == ["Property 'a' has unknown type in array: ['x']"]

    def test_groups(self, person_schema):
        raw = dict(person_schema, fieldGroups=[{"id": "g", "fields": ["ghost"]}, {"fields": []}])
        result = check_schema(raw)
        assert result.is_valid
        assert "Group 'g' lists unknown field 'ghost'" in result.warnings
        assert "Field group without an 'id' ignored" in result.warnings

    def test_polymorphic_markers(self):
        result = check_schema({
            "type": "object",
            "properties": {"content_type": {"type": "integer"}},
            "isPolymorphic": True,
            "contentTypeField": "content_type",
        })
        assert result.errors == ["Polymorphic schema is missing 'objectIdField'"]
