"""Turn declared validations into ordered RuleDescriptors.

Fields accept validations in several shapes:
- "isEmail,maxLength:50"      comma-separated rules, at most one ':' arg each
- {"isLength": 5, "custom": fn} mapping of rule name -> args or inline predicate
- [RuleDescriptor(...), ...]   already-parsed descriptors
- None / {}                    no rules

`required` additionally accepts True (the default required rule) and False.
"""

import json
import re
from typing import Any, Mapping

from formforge.errors import MultiArgStringRuleError
from formforge.validation.types import RuleDescriptor, RuleSpec

DEFAULT_REQUIRED_RULE = "isDefaultRequiredValue"

# Split on commas that are not inside {...} or [...] literal args.
_RULE_SEPARATOR = re.compile(r",(?![^{\[]*[}\]])")


def _parse_arg(raw: str) -> Any:
    """Decode a string rule argument as JSON, falling back to the raw text."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_rule_string(validations: str) -> list[RuleDescriptor]:
    """Parse the comma-separated string form.

    Raises:
        MultiArgStringRuleError: If a rule carries more than one ':' argument
    """
    descriptors: dict[str, RuleDescriptor] = {}
    for chunk in _RULE_SEPARATOR.split(validations):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, *raw_args = chunk.split(":")
        if len(raw_args) > 1:
            raise MultiArgStringRuleError(chunk)
        args = _parse_arg(raw_args[0]) if raw_args else True
        # Later duplicates replace earlier ones but keep the first position
        descriptors[name] = RuleDescriptor(name=name, args=args)
    return list(descriptors.values())


def parse_rule_mapping(validations: Mapping[str, Any]) -> list[RuleDescriptor]:
    """Parse the mapping form; callables become inline predicates."""
    descriptors = []
    for name, args in validations.items():
        if callable(args):
            descriptors.append(RuleDescriptor(name=name, args=None, predicate=args))
        else:
            descriptors.append(RuleDescriptor(name=name, args=args))
    return descriptors


def parse_validations(validations: RuleSpec) -> list[RuleDescriptor]:
    """Parse any supported `validations` shape into ordered descriptors."""
    if validations is None or validations is False:
        return []
    if isinstance(validations, str):
        return parse_rule_string(validations)
    if isinstance(validations, Mapping):
        return parse_rule_mapping(validations)
    if isinstance(validations, (list, tuple)):
        return [_coerce_descriptor(item) for item in validations]
    raise TypeError(
        f"Unsupported validations type: {type(validations).__name__}"
    )


def parse_required(required: RuleSpec) -> list[RuleDescriptor]:
    """Parse the `required` declaration.

    True means the default required rule; any other shape is parsed like
    `validations` (e.g. "isFalse" for conditionally-required fields).
    """
    if required is True:
        return [RuleDescriptor(name=DEFAULT_REQUIRED_RULE)]
    return parse_validations(required)


def _coerce_descriptor(item: Any) -> RuleDescriptor:
    if isinstance(item, RuleDescriptor):
        return item
    if isinstance(item, str):
        parsed = parse_rule_string(item)
        if len(parsed) != 1:
            raise ValueError(f"Expected a single rule, got '{item}'")
        return parsed[0]
    raise TypeError(f"Cannot interpret {item!r} as a rule descriptor")
