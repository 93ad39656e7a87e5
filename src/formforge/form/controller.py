"""Form controller: field registry, validity aggregation and notifications.

The controller keeps the ordered list of attached fields and is the only
writer of rule-derived field state. Its lifecycle:

1. attach(field)   - register the field, validate it, revalidate the form
2. validate(field) - called on every value change; revalidates the form
3. validate_form() - full pass over a snapshot of the fields; once every
                     field update has committed, aggregates validity and
                     fires `valid` or `invalid` exactly once
4. detach(field)   - unregister the field, revalidate the form
5. submit()/reset() - hand the model to submit handlers / restore values

Usage:
    form = FormController(on_valid_submit=save)
    form.attach(Field("email", validations="isEmail", required=True))
    form.submit()
"""

import logging
from enum import Enum
from typing import Any, Callable, Mapping

from formforge.config import FormConfig
from formforge.errors import MissingNameError
from formforge.form.field import Field
from formforge.form.model import (
    clone_value,
    is_same,
    pristine_values,
    snapshot_values,
    to_nested,
)
from formforge.form.reconciler import ExternalErrorReconciler, wrap_errors
from formforge.validation.runner import run_rules
from formforge.validation.types import FieldValidation, RuleRunResult

logger = logging.getLogger(__name__)

_MISSING = object()

Handler = Callable[..., Any]


class FormEvent(Enum):
    """Notifications a form emits.

    VALID / INVALID: () - once per completed validation pass
    CHANGE: (model, is_changed) - before a field change is validated
    SUBMIT / VALID_SUBMIT / INVALID_SUBMIT: (model, reset_model, invalidate)
    RESET: ()
    """

    VALID = "valid"
    INVALID = "invalid"
    CHANGE = "change"
    SUBMIT = "submit"
    VALID_SUBMIT = "valid_submit"
    INVALID_SUBMIT = "invalid_submit"
    RESET = "reset"


class _PassBarrier:
    """Fires `on_complete` once every field update in a pass has committed."""

    def __init__(self, pending: int, on_complete: Callable[[], None]):
        self.pending = pending
        self._on_complete = on_complete

    def commit(self) -> None:
        self.pending -= 1
        if self.pending == 0:
            self._on_complete()


class FormController:
    """Tracks fields, runs their rules and aggregates form validity.

    Attributes:
        fields: Attached fields, in attachment order
        is_valid: AND of field validity after the last completed pass
        can_change: Latch set after the first completed pass; CHANGE
            notifications are only emitted once it is set
        form_submitted: Set by submit(), cleared by reset()
        validation_errors: Controlled error map (field name -> message(s))
    """

    def __init__(
        self,
        config: FormConfig | None = None,
        *,
        disabled: bool | None = None,
        prevent_external_invalidation: bool | None = None,
        mapping: Callable[[dict[str, Any]], Any] | None = None,
        validation_errors: Mapping[str, Any] | None = None,
        on_valid: Handler | None = None,
        on_invalid: Handler | None = None,
        on_change: Handler | None = None,
        on_submit: Handler | None = None,
        on_valid_submit: Handler | None = None,
        on_invalid_submit: Handler | None = None,
        on_reset: Handler | None = None,
    ):
        self.config = config or FormConfig()
        self.disabled = self.config.disabled if disabled is None else disabled
        self.prevent_external_invalidation = (
            self.config.prevent_external_invalidation
            if prevent_external_invalidation is None
            else prevent_external_invalidation
        )
        self.mapping = mapping
        self.validation_errors: dict[str, Any] = dict(validation_errors or {})

        self.fields: list[Field] = []
        self.is_valid = True
        self.can_change = False
        self.form_submitted = False

        self.reconciler = ExternalErrorReconciler(self)
        self._handlers: dict[FormEvent, list[Handler]] = {event: [] for event in FormEvent}

        for event, handler in (
            (FormEvent.VALID, on_valid),
            (FormEvent.INVALID, on_invalid),
            (FormEvent.CHANGE, on_change),
            (FormEvent.SUBMIT, on_submit),
            (FormEvent.VALID_SUBMIT, on_valid_submit),
            (FormEvent.INVALID_SUBMIT, on_invalid_submit),
            (FormEvent.RESET, on_reset),
        ):
            if handler is not None:
                self.on(event, handler)

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def on(self, event: FormEvent | str, handler: Handler) -> None:
        """Register an additional handler for `event`."""
        self._handlers[FormEvent(event)].append(handler)

    def _emit(self, event: FormEvent, *args: Any) -> None:
        for handler in list(self._handlers[event]):
            handler(*args)

    def set_form_valid_state(self, is_valid: bool) -> None:
        self.is_valid = is_valid
        self._emit(FormEvent.VALID if is_valid else FormEvent.INVALID)

    # -------------------------------------------------------------------------
    # Field registration
    # -------------------------------------------------------------------------

    def attach(self, field: Field) -> None:
        """Register a field and validate it.

        Re-attaching an already attached field only revalidates it.

        Raises:
            MissingNameError: If the field has no name
        """
        if not field.name:
            raise MissingNameError()

        if not any(existing is field for existing in self.fields):
            if any(existing.name == field.name for existing in self.fields):
                logger.debug("Duplicate field name '%s'; later field wins", field.name)
            self.fields.append(field)
            logger.debug("Attached field '%s' (%d attached)", field.name, len(self.fields))
        field.form = self

        self.validate(field)

    def detach(self, field: Field) -> None:
        """Unregister a field by identity and revalidate the form."""
        remaining = [existing for existing in self.fields if existing is not field]
        if len(remaining) != len(self.fields):
            self.fields = remaining
            field.form = None
            logger.debug("Detached field '%s' (%d attached)", field.name, len(self.fields))

        self.validate_form()

    def is_form_disabled(self) -> bool:
        return self.disabled

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def run_validation(self, field: Field, value: Any = _MISSING) -> FieldValidation:
        """Validate `value` (default: the field's current value) without side effects."""
        if value is _MISSING:
            value = field.value

        current_values = self.get_current_values()
        validation_results = run_rules(value, current_values, field.validations)
        required_results = run_rules(value, current_values, field.required_validations)

        is_required = bool(field.required_validations) and bool(required_results.passed)
        injected_error = self.validation_errors.get(field.name)
        is_valid = not validation_results.failed and field.name not in self.validation_errors

        return FieldValidation(
            is_valid=False if is_required else is_valid,
            is_required=is_required,
            errors=self._resolve_errors(
                field, is_valid, is_required, validation_results, required_results, injected_error
            ),
        )

    def _resolve_errors(
        self,
        field: Field,
        is_valid: bool,
        is_required: bool,
        validation_results: RuleRunResult,
        required_results: RuleRunResult,
        injected_error: Any,
    ) -> list[str] | None:
        """Pick the error messages for a validated field; first match wins."""
        if is_valid and not is_required:
            return []

        if validation_results.messages:
            return list(validation_results.messages)

        if field.name in self.validation_errors:
            return wrap_errors(injected_error)

        if is_required:
            error = field.validation_errors.get(required_results.passed[0]) or field.validation_error
            return [error] if error else None

        if validation_results.failed:
            messages: list[str] = []
            for failed in validation_results.failed:
                message = field.validation_errors.get(failed) or field.validation_error
                if message and message not in messages:
                    messages.append(message)
            return messages

        return None

    def is_valid_value(self, field: Field, value: Any) -> bool:
        """Dry-run: would `value` be valid for `field`?"""
        return self.run_validation(field, value).is_valid

    def validate(self, field: Field) -> None:
        """Revalidate after a value change on `field`.

        Clears the field's external error, then runs a full pass since
        cross-field rules may depend on the changed value.
        """
        if self.can_change:
            self._emit(FormEvent.CHANGE, self.get_model(), self.is_changed())

        validation = self.run_validation(field)
        field.is_valid = validation.is_valid
        field.is_required = validation.is_required
        field.computed_errors = validation.errors
        field.external_error = None

        self.validate_form()

    def validate_form(self) -> None:
        """Revalidate every attached field, then aggregate form validity.

        The field list is snapshotted first; fields attached while the pass
        runs are picked up by the next pass.
        """
        fields = list(self.fields)

        if not fields:
            self.is_valid = True
            self.can_change = True
            return

        barrier = _PassBarrier(len(fields), lambda: self._on_validation_complete(fields))

        for field in fields:
            validation = self.run_validation(field)
            if validation.is_valid and field.external_error:
                validation.is_valid = False

            field.is_valid = validation.is_valid
            field.is_required = validation.is_required
            field.computed_errors = validation.errors
            if validation.is_valid or not field.external_error:
                field.external_error = None

            barrier.commit()

    def _on_validation_complete(self, fields: list[Field]) -> None:
        all_valid = all(field.is_valid for field in fields)
        logger.debug("Validation pass complete: %d field(s), valid=%s", len(fields), all_valid)

        self.set_form_valid_state(all_valid)
        self.can_change = True

    # -------------------------------------------------------------------------
    # External errors
    # -------------------------------------------------------------------------

    def set_validation_errors(self, errors: Mapping[str, Any] | None) -> None:
        """Replace the controlled error map.

        A non-empty map is applied to the fields immediately. Replacing a
        non-empty map with an empty one drops every external error and
        revalidates the form.
        """
        previous = self.validation_errors
        self.validation_errors = dict(errors or {})

        if self.validation_errors:
            self.reconciler.apply_injected_errors(self.validation_errors)
        elif previous:
            for field in self.fields:
                field.external_error = None
            self.validate_form()

    def update_fields_with_error(
        self,
        errors: Mapping[str, Any],
        invalidate: bool = False,
    ) -> None:
        """Mark fields invalid with server-supplied errors.

        This is the `invalidate` callback handed to submit handlers.

        Raises:
            MissingFieldError: If `errors` names a field that is not attached
        """
        self.reconciler.apply_server_errors(errors, invalidate)

    # -------------------------------------------------------------------------
    # Model
    # -------------------------------------------------------------------------

    def get_current_values(self) -> dict[str, Any]:
        return snapshot_values(self.fields)

    def get_pristine_values(self) -> dict[str, Any]:
        return pristine_values(self.fields)

    def get_model(self) -> Any:
        """Current values shaped by `mapping`, or nested by field-name path."""
        current_values = self.get_current_values()
        if self.mapping is not None:
            return self.mapping(current_values)
        return to_nested(current_values, self.config.path_separator)

    def is_changed(self) -> bool:
        """True if any field value differs from its pristine value."""
        return not is_same(self.get_pristine_values(), self.get_current_values())

    # -------------------------------------------------------------------------
    # Submit / reset
    # -------------------------------------------------------------------------

    def set_form_pristine(self, is_pristine: bool) -> None:
        """Mark the form and every field pristine (or dirty and submitted)."""
        self.form_submitted = not is_pristine
        for field in self.fields:
            field.form_submitted = not is_pristine
            field.is_pristine = is_pristine

    def submit(self) -> None:
        """Hand the model to submit handlers.

        SUBMIT always fires; then VALID_SUBMIT or INVALID_SUBMIT depending on
        form validity as it stood when submit() was called.
        """
        self.set_form_pristine(False)
        model = self.get_model()
        was_valid = self.is_valid
        logger.debug("Submitting form (valid=%s)", was_valid)

        args = (model, self.reset_model, self.update_fields_with_error)
        self._emit(FormEvent.SUBMIT, *args)
        self._emit(FormEvent.VALID_SUBMIT if was_valid else FormEvent.INVALID_SUBMIT, *args)

    def reset_model(self, data: Mapping[str, Any] | None = None) -> None:
        """Set each field to `data[name]` when present, else its pristine value."""
        for field in self.fields:
            if data is not None and field.name in data:
                field.value = data[field.name]
            else:
                field.value = clone_value(field.pristine_value)

        self.validate_form()

    def reset(self, data: Mapping[str, Any] | None = None) -> None:
        """Mark the form pristine, restore values, then notify RESET."""
        self.set_form_pristine(True)
        self.reset_model(data)
        self._emit(FormEvent.RESET)
