"""formforge rule pipeline.

- registry: process-wide rule name -> predicate mapping
- rules: the built-in rule library
- parsing: declared validations -> RuleDescriptors
- runner: runs descriptors against a value and its siblings
"""

from formforge.validation.parsing import (
    DEFAULT_REQUIRED_RULE,
    parse_required,
    parse_validations,
)
from formforge.validation.registry import RuleRegistry, rule
from formforge.validation.rules import BUILTIN_RULES, register_builtin_rules
from formforge.validation.runner import run_rules
from formforge.validation.types import (
    FieldValidation,
    RuleDescriptor,
    RuleOutcome,
    RulePredicate,
    RuleRunResult,
)

__all__ = [
    # Types
    "FieldValidation",
    "RuleDescriptor",
    "RuleOutcome",
    "RulePredicate",
    "RuleRunResult",
    # Registry
    "RuleRegistry",
    "rule",
    "BUILTIN_RULES",
    "register_builtin_rules",
    # Parsing
    "DEFAULT_REQUIRED_RULE",
    "parse_required",
    "parse_validations",
    # Runner
    "run_rules",
]
