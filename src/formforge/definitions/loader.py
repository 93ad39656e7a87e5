"""Load declarative form definitions from YAML files.

A definition describes the fields of one form:

    form: signup
    preventExternalInvalidation: false
    fields:
      - name: email
        value: ""
        required: true
        validations: isEmail
        validationError: Enter your email
        validationErrors:
          isEmail: That is not an email address
      - name: confirmEmail
        validations:
          equalsField: email
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from formforge.config import FormConfig
from formforge.errors import DefinitionError
from formforge.form.controller import FormController
from formforge.form.field import Field

logger = logging.getLogger(__name__)

_FIELD_KEYS = {
    "name",
    "value",
    "validations",
    "required",
    "validationError",
    "validationErrors",
}


@dataclass
class FieldDefinition:
    """One field entry from a form definition."""

    name: str
    value: Any = None
    validations: Any = None
    required: Any = False
    validation_error: str | None = None
    validation_errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FieldDefinition":
        """Create FieldDefinition from a YAML/JSON dict."""
        if not isinstance(data, dict):
            raise DefinitionError(f"Field entry must be a mapping, got {type(data).__name__}")
        name = data.get("name")
        if not name or not isinstance(name, str):
            raise DefinitionError(f"Field entry is missing a name: {data!r}")

        unknown = set(data) - _FIELD_KEYS
        if unknown:
            logger.warning(
                "Field '%s' has unknown keys, ignoring: %s", name, ", ".join(sorted(unknown))
            )

        messages = data.get("validationErrors") or {}
        if not isinstance(messages, dict):
            raise DefinitionError(f"Field '{name}': validationErrors must be a mapping")

        return cls(
            name=name,
            value=data.get("value"),
            validations=data.get("validations"),
            required=data.get("required", False),
            validation_error=data.get("validationError"),
            validation_errors=dict(messages),
        )

    def to_field(self) -> Field:
        return Field(
            name=self.name,
            value=self.value,
            validations=self.validations,
            required=self.required,
            validation_error=self.validation_error,
            validation_errors=self.validation_errors,
        )


@dataclass
class FormDefinition:
    """A complete form definition."""

    name: str
    fields: list[FieldDefinition] = field(default_factory=list)
    disabled: bool = False
    prevent_external_invalidation: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FormDefinition":
        """Create FormDefinition from a YAML/JSON dict."""
        if not isinstance(data, dict) or "form" not in data:
            raise DefinitionError("Form definition must be a mapping with a 'form' key")

        raw_fields = data.get("fields") or []
        if not isinstance(raw_fields, list):
            raise DefinitionError(f"Form '{data['form']}': fields must be a list")

        return cls(
            name=str(data["form"]),
            fields=[FieldDefinition.from_dict(f) for f in raw_fields],
            disabled=bool(data.get("disabled", False)),
            prevent_external_invalidation=bool(data.get("preventExternalInvalidation", False)),
        )

    def build(self, config: FormConfig | None = None, **kwargs: Any) -> FormController:
        """Create a controller and attach every declared field, in order.

        Keyword arguments are passed to FormController (handlers, mapping,
        overrides of the definition's switches).
        """
        config = config or FormConfig()
        config = FormConfig(
            disabled=self.disabled or config.disabled,
            prevent_external_invalidation=(
                self.prevent_external_invalidation or config.prevent_external_invalidation
            ),
            path_separator=config.path_separator,
        )
        form = FormController(config, **kwargs)
        for field_def in self.fields:
            form.attach(field_def.to_field())
        return form


def load_definition(path: Path) -> FormDefinition:
    """Load a form definition from a YAML file.

    Raises:
        DefinitionError: If the file is empty or not a valid definition
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DefinitionError(f"{path}: invalid YAML: {e}") from e

    if not data:
        raise DefinitionError(f"{path}: empty form definition")

    definition = FormDefinition.from_dict(data)
    logger.debug("Loaded form '%s' with %d field(s) from %s", definition.name, len(definition.fields), path)
    return definition


def load_values(path: Path) -> dict[str, Any]:
    """Load a flat field-name -> value mapping from a YAML (or JSON) file."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DefinitionError(f"{path}: invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DefinitionError(f"{path}: values file must contain a mapping")
    return data
