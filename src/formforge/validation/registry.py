"""Rule registry for formforge.

Process-wide mapping from rule name to predicate. Built-in rules are seeded
by register_builtin_rules(); applications add their own at any time and every
later validation run sees them.
"""

from typing import Callable

from formforge.errors import RuleNotFoundError
from formforge.validation.types import RulePredicate


class RuleRegistry:
    """Registry for validation rule predicates.

    Registration overwrites an existing entry, so applications can replace
    a built-in rule with their own.

    Example:
        RuleRegistry.register("isPostcode", lambda value, values, args: ...)

        predicate = RuleRegistry.get("isPostcode")
    """

    _rules: dict[str, RulePredicate] = {}

    @classmethod
    def register(cls, name: str, predicate: RulePredicate) -> None:
        """Register a predicate by name, replacing any existing one.

        Args:
            name: Rule name as used in field validations (e.g., "isEmail")
            predicate: Callable taking (value, current_values, args)
        """
        cls._rules[name] = predicate

    @classmethod
    def get(cls, name: str) -> RulePredicate:
        """Get a registered predicate by name.

        Raises:
            RuleNotFoundError: If no predicate is registered under `name`
        """
        if name not in cls._rules:
            raise RuleNotFoundError(name)
        return cls._rules[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a rule is registered."""
        return name in cls._rules

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered rule names."""
        return sorted(cls._rules.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._rules.clear()


def rule(name: str) -> Callable[[RulePredicate], RulePredicate]:
    """Decorator to register a rule predicate.

    Usage:
        @rule("isPostcode")
        def is_postcode(value, values, args):
            ...
    """

    def decorator(fn: RulePredicate) -> RulePredicate:
        RuleRegistry.register(name, fn)
        return fn

    return decorator
