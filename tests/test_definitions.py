"""Tests for YAML form definitions."""

import logging

import pytest

from formforge import DefinitionError, FormConfig
from formforge.definitions import (
    FieldDefinition,
    FormDefinition,
    load_definition,
    load_values,
)

SIGNUP_YAML = """
form: signup
fields:
  - name: email
    value: ada@example.com
    required: true
    validations: isEmail
    validationError: Enter your email
  - name: password
    value: s3cret
    validations: "minLength:6"
  - name: confirm
    value: s3cret
    validations:
      equalsField: password
    validationErrors:
      equalsField: Passwords do not match
"""


@pytest.fixture
def signup_file(tmp_path):
    path = tmp_path / "signup.yaml"
    path.write_text(SIGNUP_YAML)
    return path


class TestFieldDefinition:
    def test_from_dict(self):
        field_def = FieldDefinition.from_dict(
            {
                "name": "email",
                "required": True,
                "validations": "isEmail",
                "validationError": "Enter your email",
                "validationErrors": {"isEmail": "Not an email"},
            }
        )
        assert field_def.name == "email"
        assert field_def.required is True
        assert field_def.validation_error == "Enter your email"
        assert field_def.validation_errors == {"isEmail": "Not an email"}

    def test_missing_name(self):
        with pytest.raises(DefinitionError, match="missing a name"):
            FieldDefinition.from_dict({"validations": "isEmail"})

    def test_non_mapping_entry(self):
        with pytest.raises(DefinitionError):
            FieldDefinition.from_dict("email")

    def test_validation_errors_must_be_mapping(self):
        with pytest.raises(DefinitionError, match="validationErrors"):
            FieldDefinition.from_dict({"name": "email", "validationErrors": ["x"]})

    def test_unknown_keys_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            FieldDefinition.from_dict({"name": "email", "placeholder": "you@example.com"})
        assert "placeholder" in caplog.text

    def test_to_field(self):
        field = FieldDefinition(name="age", value="12", validations="isInt").to_field()
        assert field.name == "age"
        assert field.value == "12"
        assert field.validations[0].name == "isInt"


class TestFormDefinition:
    def test_requires_form_key(self):
        with pytest.raises(DefinitionError, match="'form' key"):
            FormDefinition.from_dict({"fields": []})

    def test_fields_must_be_list(self):
        with pytest.raises(DefinitionError, match="fields must be a list"):
            FormDefinition.from_dict({"form": "x", "fields": {"name": "a"}})

    def test_flags(self):
        form_def = FormDefinition.from_dict(
            {"form": "x", "disabled": True, "preventExternalInvalidation": True}
        )
        assert form_def.disabled is True
        assert form_def.prevent_external_invalidation is True
        assert form_def.fields == []

    def test_build_attaches_in_order(self, signup_file):
        form = load_definition(signup_file).build()
        assert [f.name for f in form.fields] == ["email", "password", "confirm"]
        assert form.is_valid is True

    def test_build_runs_cross_field_rules(self, signup_file):
        form = load_definition(signup_file).build()
        form.fields[1].set_value("different")
        confirm = form.fields[2]
        assert confirm.is_valid is False
        assert confirm.get_error_message() == "Passwords do not match"

    def test_build_merges_config(self):
        form_def = FormDefinition.from_dict({"form": "x", "disabled": True})
        form = form_def.build(FormConfig(path_separator="/"))
        assert form.is_form_disabled() is True
        assert form.config.path_separator == "/"

    def test_build_passes_handlers(self):
        seen = []
        form_def = FormDefinition.from_dict({"form": "x", "fields": [{"name": "a", "required": True}]})
        form_def.build(on_invalid=lambda: seen.append("invalid"))
        assert seen == ["invalid"]


class TestLoading:
    def test_load_definition(self, signup_file):
        form_def = load_definition(signup_file)
        assert form_def.name == "signup"
        assert len(form_def.fields) == 3

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(DefinitionError, match="empty"):
            load_definition(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("form: [unclosed")
        with pytest.raises(DefinitionError, match="invalid YAML"):
            load_definition(path)

    def test_load_values(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("email: bob@example.com\nage: 42\n")
        assert load_values(path) == {"email": "bob@example.com", "age": 42}

    def test_load_values_empty(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("")
        assert load_values(path) == {}

    def test_load_values_rejects_lists(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(DefinitionError, match="mapping"):
            load_values(path)
