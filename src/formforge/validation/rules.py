"""Built-in validation rules for formforge.

This module registers the standard rule library with the RuleRegistry.
`formforge` calls register_builtin_rules() on import; call it again after
RuleRegistry.clear() to restore the defaults.

Every predicate takes (value, current_values, args). Most rules treat a
missing value (None or "") as passing so that optional fields only fail once
something has been entered; required-ness is declared separately.

Categories:
- Presence: isDefaultRequiredValue, isExisty, isUndefined, isEmptyString
- Format: matchRegexp, isEmail, isUrl, isNumeric, isAlpha, isAlphanumeric,
  isInt, isFloat, isWords, isSpecialWords
- Boolean: isTrue, isFalse
- Length: isLength, minLength, maxLength
- Comparison: equals, equalsField
"""

import re
from typing import Any, Mapping

from formforge.validation.registry import RuleRegistry
from formforge.validation.types import RulePredicate

# Email: Basic RFC 5322 compliant pattern
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# URL: scheme, host and optional path
URL_PATTERN = re.compile(
    r"^(?:https?|ftp)://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)

NUMERIC_PATTERN = re.compile(r"^[-+]?(?:\d*[.])?\d+$")
ALPHA_PATTERN = re.compile(r"^[A-Z]+$", re.IGNORECASE)
ALPHANUMERIC_PATTERN = re.compile(r"^[0-9A-Z]+$", re.IGNORECASE)
INT_PATTERN = re.compile(r"^(?:[-+]?(?:0|[1-9]\d*))$")
FLOAT_PATTERN = re.compile(r"^(?:[-+]?(?:\d+))?(?:\.\d*)?(?:[eE][+\-]?(?:\d+))?$")
WORDS_PATTERN = re.compile(r"^[A-Z\s]+$", re.IGNORECASE)
SPECIAL_WORDS_PATTERN = re.compile(r"^[\sA-Z\u00C0-\u017F]+$", re.IGNORECASE)


def register_builtin_rules() -> None:
    """Register all built-in rules with the RuleRegistry."""
    for name, predicate in BUILTIN_RULES.items():
        RuleRegistry.register(name, predicate)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _existy(value: Any) -> bool:
    return value is not None


def _empty_string(value: Any) -> bool:
    return isinstance(value, str) and value == ""


def _length(value: Any) -> int | None:
    """Length of sized values, None for anything without one."""
    try:
        return len(value)
    except TypeError:
        return None


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# -----------------------------------------------------------------------------
# Presence
# -----------------------------------------------------------------------------


def _is_default_required_value(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    """True when the value counts as missing for `required`."""
    return value is None or _empty_string(value)


def _is_existy(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    return _existy(value)


def _is_undefined(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    return value is None


def _is_empty_string(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    return _empty_string(value)


# -----------------------------------------------------------------------------
# Format
# -----------------------------------------------------------------------------


def _match_regexp(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    """Match `value` against `args` (a pattern string or compiled pattern).

    Missing values pass.
    """
    if not _existy(value) or _empty_string(value):
        return True
    pattern = args if isinstance(args, re.Pattern) else re.compile(str(args))
    return pattern.search(_as_text(value)) is not None


def _pattern_rule(pattern: re.Pattern) -> RulePredicate:
    def predicate(value: Any, values: Mapping[str, Any], args: Any) -> bool:
        return _match_regexp(value, values, pattern)

    return predicate


def _is_numeric(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return True
    return _match_regexp(value, values, NUMERIC_PATTERN)


# -----------------------------------------------------------------------------
# Boolean
# -----------------------------------------------------------------------------


def _is_true(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    return value is True


def _is_false(value: Any, values: Mapping[str, Any], args: Any) -> bool:
    return value is False


# -----------------------------------------------------------------------------
# Length
# -----------------------------------------------------------------------------


def _is_length(value: Any, values: Mapping[str, Any], length: Any) -> bool:
    if not _existy(value) or _empty_string(value):
        return True
    return _length(value) == length


def _min_length(value: Any, values: Mapping[str, Any], length: Any) -> bool:
    if not _existy(value) or _empty_string(value):
        return True
    actual = _length(value)
    return actual is not None and actual >= length


def _max_length(value: Any, values: Mapping[str, Any], length: Any) -> bool:
    if not _existy(value):
        return True
    actual = _length(value)
    return actual is not None and actual <= length


# -----------------------------------------------------------------------------
# Comparison
# -----------------------------------------------------------------------------


def _equals(value: Any, values: Mapping[str, Any], expected: Any) -> bool:
    if not _existy(value) or _empty_string(value):
        return True
    return value == expected


def _equals_field(value: Any, values: Mapping[str, Any], field_name: Any) -> bool:
    """Cross-field rule: value must equal the sibling named by `field_name`."""
    return value == values.get(field_name)


BUILTIN_RULES: dict[str, RulePredicate] = {
    "isDefaultRequiredValue": _is_default_required_value,
    "isExisty": _is_existy,
    "isUndefined": _is_undefined,
    "isEmptyString": _is_empty_string,
    "matchRegexp": _match_regexp,
    "isEmail": _pattern_rule(EMAIL_PATTERN),
    "isUrl": _pattern_rule(URL_PATTERN),
    "isNumeric": _is_numeric,
    "isAlpha": _pattern_rule(ALPHA_PATTERN),
    "isAlphanumeric": _pattern_rule(ALPHANUMERIC_PATTERN),
    "isInt": _pattern_rule(INT_PATTERN),
    "isFloat": _pattern_rule(FLOAT_PATTERN),
    "isWords": _pattern_rule(WORDS_PATTERN),
    "isSpecialWords": _pattern_rule(SPECIAL_WORDS_PATTERN),
    "isTrue": _is_true,
    "isFalse": _is_false,
    "isLength": _is_length,
    "minLength": _min_length,
    "maxLength": _max_length,
    "equals": _equals,
    "equalsField": _equals_field,
}
