"""Form orchestration: fields, the controller, external errors, models."""

from formforge.form.controller import FormController, FormEvent
from formforge.form.field import Field, FormContext
from formforge.form.model import is_same, split_path, to_nested
from formforge.form.reconciler import ExternalErrorReconciler

__all__ = [
    "ExternalErrorReconciler",
    "Field",
    "FormContext",
    "FormController",
    "FormEvent",
    "is_same",
    "split_path",
    "to_nested",
]
