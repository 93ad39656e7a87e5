"""formforge: declarative form validation.

A FormController tracks attached Fields, runs their validation rules
(including cross-field rules) on every change, aggregates field validity
into form validity and reconciles server-side errors with local ones.

Usage:
    from formforge import Field, FormController, RuleRegistry

    form = FormController(on_valid_submit=save, on_invalid=show_banner)
    form.attach(Field("email", validations="isEmail", required=True))
    form.attach(Field("confirm", validations={"equalsField": "email"}))

Built-in rules are registered on import. Register custom rules with
RuleRegistry.register() or the @rule decorator.
"""

from formforge.config import FormConfig
from formforge.errors import (
    DefinitionError,
    FormforgeError,
    MissingFieldError,
    MissingNameError,
    MultiArgStringRuleError,
    NoFormContextError,
    RuleNotFoundError,
    RuleOverrideError,
)
from formforge.form import (
    ExternalErrorReconciler,
    Field,
    FormController,
    FormEvent,
)
from formforge.validation import (
    RuleDescriptor,
    RuleOutcome,
    RuleRegistry,
    register_builtin_rules,
    rule,
)

register_builtin_rules()

__all__ = [
    # Config
    "FormConfig",
    # Errors
    "DefinitionError",
    "FormforgeError",
    "MissingFieldError",
    "MissingNameError",
    "MultiArgStringRuleError",
    "NoFormContextError",
    "RuleNotFoundError",
    "RuleOverrideError",
    # Form
    "ExternalErrorReconciler",
    "Field",
    "FormController",
    "FormEvent",
    # Rules
    "RuleDescriptor",
    "RuleOutcome",
    "RuleRegistry",
    "register_builtin_rules",
    "rule",
]
