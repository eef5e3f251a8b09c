"""Tests for the command line."""

import json

import pytest

from schema_forms.cli import choice_sources_from_table, main


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


class TestCheckCommand:
    """Tests for `schema-forms check`."""

    def test_valid_schema(self, write_json, person_schema, capsys):
        assert main(["check", write_json("schema.json", person_schema)]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["is_valid"] is True

    def test_invalid_schema(self, write_json, capsys):
        assert main(["check", write_json("schema.json", {"type": "array"})]) == 1
        report = json.loads(capsys.readouterr().out)
        assert "Root schema type must be 'object'" in report["errors"]

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "nope.json")]) == 2
        assert "Error" in capsys.readouterr().err


class TestValidateCommand:
    """Tests for `schema-forms validate`."""

    def test_valid_record(self, write_json, person_schema, capsys):
        schema = write_json("schema.json", person_schema)
        data = write_json("data.json", {"nombre": "Ana", "edad": "30", "extra": 1})

        assert main(["validate", schema, data]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output == {"valid": True, "update": False, "record": {"nombre": "Ana", "edad": 30}}

    def test_update_flag(self, write_json, person_schema, capsys):
        schema = write_json("schema.json", person_schema)
        data = write_json("data.json", {"nombre": "Ana"})

        assert main(["validate", schema, data, "--update"]) == 0
        assert json.loads(capsys.readouterr().out)["update"] is True

    def test_invalid_record(self, write_json, person_schema, capsys):
        schema = write_json("schema.json", person_schema)
        data = write_json("data.json", {"email": "nope"})

        assert main(["validate", schema, data]) == 1
        output = json.loads(capsys.readouterr().out)
        assert output["valid"] is False
        assert output["errors"] == {
            "nombre": ["This field is required"],
            "email": ["Invalid email address"],
        }

    def test_choices_file(self, write_json, address_schema, capsys):
        schema = write_json("schema.json", address_schema)
        data = write_json("data.json", {"country": 7, "city": 2})
        choices = write_json("choices.json", {"city": {"7": [{"id": 2, "text": "Valparaiso"}]}})

        assert main(["validate", schema, data, "--choices", choices]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["record"] == {"country": 7, "city": 2}

    def test_city_not_offered_is_cleared(self, write_json, address_schema, capsys):
        schema = write_json("schema.json", address_schema)
        data = write_json("data.json", {"country": 8, "city": 2})
        choices = write_json("choices.json", {"city": {"7": [{"id": 2, "text": "Valparaiso"}]}})

        assert main(["validate", schema, data, "--choices", choices]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["record"] == {"country": 8}

    def test_dependent_without_choices(self, write_json, address_schema, capsys):
        schema = write_json("schema.json", address_schema)
        data = write_json("data.json", {})

        assert main(["validate", schema, data]) == 2
        assert "no option source" in capsys.readouterr().err


class TestChoiceTable:
    """Tests for static option tables."""

    def test_lookup_by_string_value(self):
        sources = choice_sources_from_table({"city": {"7": [{"id": 1, "text": "Santiago"}]}})
        assert sources["city"](7) == [{"id": 1, "text": "Santiago"}]
        assert sources["city"](9) == []
