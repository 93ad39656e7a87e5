"""Exception types for formforge.

Every error here signals a misconfiguration (a programmer error), not a
validation outcome. They propagate out of the call that triggered them and
are never folded into field or form validity.
"""

import json
from typing import Any


class FormforgeError(Exception):
    """Base class for all formforge errors."""
    pass


class RuleNotFoundError(FormforgeError):
    """A validation rule name has no registered predicate."""

    def __init__(self, rule_name: str):
        self.rule_name = rule_name
        super().__init__(
            f"Validation rule '{rule_name}' is not registered. "
            "Custom rules must be registered with RuleRegistry.register() before use."
        )


class MissingFieldError(FormforgeError):
    """An external error map referenced a field that is not attached."""

    def __init__(self, field_name: str, errors: dict[str, Any]):
        self.field_name = field_name
        self.errors = errors
        super().__init__(
            "You are trying to update a field that does not exist. "
            f"Verify the errors object against field names: {json.dumps(errors, default=str)}"
        )


class MissingNameError(FormforgeError):
    """A field was attached without a usable name."""

    def __init__(self) -> None:
        super().__init__("Form field requires a name when attached to a form")


class MultiArgStringRuleError(FormforgeError):
    """A colon-delimited string rule supplied more than one argument."""

    def __init__(self, rule: str):
        self.rule = rule
        super().__init__(
            f"String validations do not support multiple args ('{rule}'). "
            "Use the mapping format of validations instead."
        )


class RuleOverrideError(FormforgeError):
    """An inline predicate tried to shadow a registered rule."""

    def __init__(self, rule_name: str):
        self.rule_name = rule_name
        super().__init__(
            f"Inline validations may not override registered rule '{rule_name}'"
        )


class NoFormContextError(FormforgeError):
    """A field operation needed a form but the field is not attached to one."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(
            f"Field '{field_name}' is not attached to a form. "
            "Attach it with FormController.attach() first."
        )


class DefinitionError(FormforgeError):
    """A declarative form definition is malformed."""
    pass
