"""Field records.

A Field is both the engine's record of one form input (name, value, rules,
computed validity) and the small API a host widget calls when the user
edits it. The form owns every computed attribute; widgets only call the
methods below.

Identity is the Field object itself. Two fields may share a name (the
form's model then keeps the later one), but attach/detach always compare
by identity.
"""

from typing import Any, Protocol

from formforge.errors import NoFormContextError
from formforge.form.model import clone_value
from formforge.validation.parsing import parse_required, parse_validations
from formforge.validation.types import RuleDescriptor, RuleSpec


class FormContext(Protocol):
    """Capabilities a form hands to its attached fields."""

    def attach(self, field: "Field") -> None:
        ...

    def detach(self, field: "Field") -> None:
        ...

    def validate(self, field: "Field") -> None:
        ...

    def is_valid_value(self, field: "Field", value: Any) -> bool:
        ...

    def is_form_disabled(self) -> bool:
        ...


class Field:
    """One input tracked by a FormController.

    Attributes:
        name: Key used in values, models and error maps
        value: Current value
        pristine_value: Value at construction (restored by reset)
        validations: General rules, in declared order
        required_validations: Rules that report the value as missing
        validation_error: Fallback message for any failed rule
        validation_errors: Rule name -> message overrides
        is_valid: Computed validity (written by the form)
        is_required: Whether a required rule currently reports missing
        computed_errors: Messages from the last validation, [] or None
        external_error: Messages injected from outside (server errors)
        is_pristine: No user edit since attach or reset
        form_submitted: The form was submitted since the last reset
    """

    def __init__(
        self,
        name: str,
        value: Any = None,
        validations: RuleSpec = None,
        required: RuleSpec = False,
        validation_error: str | None = None,
        validation_errors: dict[str, str] | None = None,
    ):
        self.name = name
        self.value = value
        self.pristine_value = clone_value(value)
        self.validations: list[RuleDescriptor] = []
        self.required_validations: list[RuleDescriptor] = []
        self.set_validations(validations, required)
        self.validation_error = validation_error
        self.validation_errors = dict(validation_errors or {})

        self.is_valid = True
        self.is_required = bool(self.required_validations)
        self.computed_errors: list[str] | None = []
        self.external_error: list[str] | None = None
        self.is_pristine = True
        self.form_submitted = False
        self.form: FormContext | None = None

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, value={self.value!r}, is_valid={self.is_valid})"

    def _require_form(self) -> FormContext:
        if self.form is None:
            raise NoFormContextError(self.name)
        return self.form

    def set_validations(self, validations: RuleSpec, required: RuleSpec = False) -> None:
        """Replace both rule sets. Takes effect on the next validation."""
        self.validations = parse_validations(validations)
        self.required_validations = parse_required(required)

    def get_value(self) -> Any:
        return self.value

    def set_value(self, value: Any, validate: bool = True) -> None:
        """Store a new value; by default mark the field dirty and revalidate."""
        if not validate:
            self.value = value
            return
        form = self._require_form()
        self.value = value
        self.is_pristine = False
        form.validate(self)

    def reset_value(self) -> None:
        """Restore the pristine value and revalidate."""
        form = self._require_form()
        self.value = clone_value(self.pristine_value)
        self.is_pristine = True
        form.validate(self)

    def has_value(self) -> bool:
        return self.value is not None and self.value != ""

    def get_error_messages(self) -> list[str]:
        """Messages to show: external errors first, then computed ones.

        Empty unless the field is invalid or currently required.
        """
        if not self.is_valid or self.show_required():
            return self.external_error or self.computed_errors or []
        return []

    def get_error_message(self) -> str | None:
        messages = self.get_error_messages()
        return messages[0] if messages else None

    def show_required(self) -> bool:
        return self.is_required

    def show_error(self) -> bool:
        return not self.show_required() and not self.is_valid

    def is_form_submitted(self) -> bool:
        return self.form_submitted

    def is_form_disabled(self) -> bool:
        return self._require_form().is_form_disabled()

    def is_valid_value(self, value: Any) -> bool:
        """Dry-run validation of `value` without touching any state."""
        return self._require_form().is_valid_value(self, value)
