"""Core types for the formforge rule pipeline.

This module defines the values that flow between the rule registry, the
descriptor parser and the validation runner:
- RuleDescriptor: one declared rule on a field (name + args)
- RuleOutcome: structured predicate result carrying its own message
- RuleRunResult: pass/fail/message partitions of one runner call
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Union

# Predicate signature: (value, current_values, args) -> result
# A result is truthy/falsy, a RuleOutcome, or a str (failure message).
RulePredicate = Callable[[Any, Mapping[str, Any], Any], Any]

# What a caller may write for `validations` / `required`.
RuleSpec = Union[None, bool, str, Mapping[str, Any], list]


@dataclass(frozen=True)
class RuleOutcome:
    """Structured predicate result.

    Attributes:
        success: Whether the rule passed
        message: Optional message; collected by the runner whenever present
    """

    success: bool
    message: str | None = None


@dataclass(frozen=True)
class RuleDescriptor:
    """A single rule declared on a field.

    Attributes:
        name: Rule name, looked up in the RuleRegistry unless `predicate` is set
        args: Argument handed to the predicate (True when the rule takes none)
        predicate: Inline, field-local predicate (optional)
    """

    name: str
    args: Any = True
    predicate: RulePredicate | None = None

    @property
    def is_inline(self) -> bool:
        return self.predicate is not None


@dataclass
class RuleRunResult:
    """Outcome of running an ordered list of descriptors against a value.

    Attributes:
        passed: Names of rules whose predicate succeeded, in evaluation order
        failed: Names of rules whose predicate failed, in evaluation order
        messages: Messages returned by predicates, in evaluation order
    """

    passed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    messages: list[str] = field(default_factory=list)


@dataclass
class FieldValidation:
    """Result of validating one field (see FormController.run_validation).

    Attributes:
        is_valid: Final validity after the required override
        is_required: True when a required rule reports the value as missing
        errors: Resolved error messages; [] when valid, None when invalid
            without a derivable message
    """

    is_valid: bool
    is_required: bool
    errors: list[str] | None
