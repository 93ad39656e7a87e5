"""External error reconciliation.

Two sources of errors come from outside the rule pipeline:

1. A controlled error map (FormController.set_validation_errors), typically
   bound to application state. Applied to every attached field.
2. Server errors handed back through the `invalidate` callback given to
   submit handlers. Applied only to the named fields.

External errors are sticky: full revalidation passes keep a field invalid
while it holds one, and only a value change on that field (or a new
controlled map) clears it.
"""

import logging
from typing import TYPE_CHECKING, Any, Mapping

from formforge.errors import MissingFieldError

if TYPE_CHECKING:
    from formforge.form.controller import FormController
    from formforge.form.field import Field

logger = logging.getLogger(__name__)


def wrap_errors(error: Any) -> list[str] | None:
    """Normalize an error map entry: a string becomes a one-item list."""
    if error is None:
        return None
    if isinstance(error, str):
        return [error]
    return list(error)


class ExternalErrorReconciler:
    """Writes externally supplied errors onto a form's fields.

    The reconciler only touches `external_error` and the derived `is_valid`
    of fields, plus the form-level validity flag. Rule results stay owned by
    the controller.
    """

    def __init__(self, form: "FormController"):
        self.form = form

    def apply_injected_errors(self, errors: Mapping[str, Any]) -> None:
        """Apply a controlled error map to every attached field.

        Fields named in the map become invalid and carry its message; every
        other field is marked valid and loses its external error. The form
        flips invalid straight away unless external invalidation is
        prevented.
        """
        for field in self.form.fields:
            field.is_valid = field.name not in errors
            field.external_error = wrap_errors(errors.get(field.name))

        if not self.form.prevent_external_invalidation and self.form.is_valid:
            self.form.set_form_valid_state(False)

    def apply_server_errors(
        self,
        errors: Mapping[str, Any],
        invalidate: bool = False,
    ) -> None:
        """Apply errors returned by a submission target.

        Args:
            errors: Field name -> message or list of messages
            invalidate: Also flip the form invalid if it is currently valid

        Raises:
            MissingFieldError: If a key names no attached field. Raised
                before any field is modified.
        """
        targets: list[tuple["Field", Any]] = []
        for name, error in errors.items():
            field = self._find_field(name)
            if field is None:
                raise MissingFieldError(name, dict(errors))
            targets.append((field, error))

        for field, error in targets:
            if not self.form.prevent_external_invalidation:
                field.is_valid = False
            field.external_error = wrap_errors(error)

        logger.debug("Applied server errors to %d field(s)", len(targets))

        if invalidate and self.form.is_valid:
            self.form.set_form_valid_state(False)

    def _find_field(self, name: str) -> "Field | None":
        for field in self.form.fields:
            if field.name == name:
                return field
        return None
