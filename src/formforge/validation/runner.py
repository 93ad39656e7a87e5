"""Validation runner.

Executes an ordered list of RuleDescriptors against one value and the
snapshot of all current field values, partitioning rule names into passed
and failed and collecting predicate-supplied messages.
"""

from typing import Any, Mapping, Sequence

from formforge.errors import RuleOverrideError
from formforge.validation.registry import RuleRegistry
from formforge.validation.types import (
    RuleDescriptor,
    RuleOutcome,
    RulePredicate,
    RuleRunResult,
)


def resolve_predicate(descriptor: RuleDescriptor) -> RulePredicate:
    """Find the predicate for a descriptor.

    Raises:
        RuleOverrideError: If an inline predicate reuses a registered name
        RuleNotFoundError: If a named rule is not registered
    """
    if descriptor.is_inline:
        if RuleRegistry.is_registered(descriptor.name):
            raise RuleOverrideError(descriptor.name)
        return descriptor.predicate
    return RuleRegistry.get(descriptor.name)


def run_rules(
    value: Any,
    current_values: Mapping[str, Any],
    descriptors: Sequence[RuleDescriptor],
) -> RuleRunResult:
    """Run every descriptor, in order, against `value`.

    All descriptors are evaluated; there is no short-circuit, so every
    message a predicate returns ends up in the result.

    Args:
        value: The value under validation
        current_values: Field name -> value for every attached field
        descriptors: Rules to run, in declared order

    Returns:
        RuleRunResult with passed/failed names and collected messages
    """
    result = RuleRunResult()

    for descriptor in descriptors:
        predicate = resolve_predicate(descriptor)
        outcome = predicate(value, current_values, descriptor.args)

        if isinstance(outcome, RuleOutcome):
            if outcome.message:
                result.messages.append(outcome.message)
            passed = outcome.success
        elif isinstance(outcome, str):
            # A bare string is a failure message
            result.messages.append(outcome)
            passed = False
        else:
            passed = bool(outcome)

        if passed:
            result.passed.append(descriptor.name)
        else:
            result.failed.append(descriptor.name)

    return result
