"""Model mapping and change detection.

Builds name -> value snapshots from the attached fields, compares them
against pristine values, and turns flat field names such as "address.city"
or "items[0].sku" into nested model objects.

Field names are expected to be unique. When two attached fields share a
name, the one attached later wins in every snapshot and model.
"""

import copy
import re
from typing import TYPE_CHECKING, Any, Iterable, Mapping

if TYPE_CHECKING:
    from formforge.form.field import Field

# A path part is either a bare key or a [bracketed] key/index.
_PATH_PART = re.compile(r"([^\[\]]+)|\[([^\]]*)\]")


def clone_value(value: Any) -> Any:
    """Copy containers so later in-place edits don't leak into pristine state."""
    if isinstance(value, (dict, list, set)):
        return copy.deepcopy(value)
    return value


def snapshot_values(fields: Iterable["Field"]) -> dict[str, Any]:
    """Map each field's name to its current value, in attachment order."""
    values: dict[str, Any] = {}
    for field in fields:
        values[field.name] = field.value
    return values


def pristine_values(fields: Iterable["Field"]) -> dict[str, Any]:
    """Map each field's name to its pristine value."""
    values: dict[str, Any] = {}
    for field in fields:
        values[field.name] = field.pristine_value
    return values


def split_path(key: str, separator: str = ".") -> list[str | int]:
    """Split a field name into path segments.

    "a.b" -> ["a", "b"], "items[0].sku" -> ["items", 0, "sku"],
    "a[b]" -> ["a", "b"]. Bracketed digits become list indices.
    """
    segments: list[str | int] = []
    for part in key.split(separator):
        matches = list(_PATH_PART.finditer(part))
        if not matches:
            segments.append(part)
            continue
        for match in matches:
            bare, bracketed = match.group(1), match.group(2)
            if bare is not None:
                segments.append(bare)
            elif bracketed.isdigit():
                segments.append(int(bracketed))
            else:
                segments.append(bracketed)
    return segments


def _container_for(segment: str | int) -> dict | list:
    return [] if isinstance(segment, int) else {}


def _assign(container: dict | list, segment: str | int, value: Any) -> None:
    if isinstance(container, list):
        index = int(segment)
        if index >= len(container):
            container.extend([None] * (index + 1 - len(container)))
        container[index] = value
    else:
        container[segment] = value


def _lookup(container: dict | list, segment: str | int) -> Any:
    if isinstance(container, list):
        index = int(segment)
        return container[index] if index < len(container) else None
    return container.get(segment)


def to_nested(values: Mapping[str, Any], separator: str = ".") -> dict[str, Any]:
    """Build a nested model from flat, path-like keys.

    Intermediate levels are created as needed: a dict for key segments, a
    list for numeric bracket segments. A non-container value sitting where a
    level is needed gets replaced by that level.

    Example:
        to_nested({"a.b": 1, "a.c": 2}) -> {"a": {"b": 1, "c": 2}}
    """
    model: dict[str, Any] = {}

    for key, value in values.items():
        segments = split_path(key, separator)
        base: dict | list = model
        for index, segment in enumerate(segments):
            if index == len(segments) - 1:
                _assign(base, segment, value)
                break
            child = _lookup(base, segment)
            if not isinstance(child, (dict, list)):
                child = _container_for(segments[index + 1])
                _assign(base, segment, child)
            base = child

    return model


def is_same(a: Any, b: Any) -> bool:
    """Structural equality that recurses into mappings and sequences."""
    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if a.keys() != b.keys():
            return False
        return all(is_same(a[key], b[key]) for key in a)

    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(is_same(x, y) for x, y in zip(a, b))

    return a == b
