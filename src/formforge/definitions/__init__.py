"""Declarative (YAML) form definitions."""

from formforge.definitions.loader import (
    FieldDefinition,
    FormDefinition,
    load_definition,
    load_values,
)

__all__ = [
    "FieldDefinition",
    "FormDefinition",
    "load_definition",
    "load_values",
]
