"""Shape predicates and access helpers used by the merge."""

import math
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import MutableMapping
from collections.abc import Sequence
from types import SimpleNamespace
from typing import Any

from .models import Shape

SCALAR_TYPES = (bool, int, float, complex, str, bytes)


def is_nil(value: Any) -> bool:
    return value is None


def is_object(value: Any) -> bool:
    """Check if value is anything other than None or an immutable primitive."""
    return value is not None and not isinstance(value, SCALAR_TYPES)


def is_function(value: Any) -> bool:
    return callable(value)


def is_object_like(value: Any) -> bool:
    return is_object(value) and not is_function(value)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_array_like(value: Any) -> bool:
    """Check if value exposes a length and indexed entries.

    Sequences qualify, as do mappings carrying a non-negative integer
    ``"length"`` entry (``{"0": "x", "length": 1}``).
    """
    if value is None or is_function(value):
        return False
    if isinstance(value, Mapping):
        return _is_length(value.get("length"))
    return isinstance(value, Sequence)


def is_plain_object(value: Any) -> bool:
    """Check if value is an exact dict or SimpleNamespace (subclasses are not plain)."""
    return type(value) in (dict, SimpleNamespace)


def is_assignable(value: Any) -> bool:
    """Check if value can receive keys written by the merge."""
    if isinstance(value, Mapping):
        return isinstance(value, MutableMapping)
    if not is_object(value) or isinstance(value, Sequence):
        return False
    return hasattr(value, "__dict__")


def classify(value: Any) -> Shape:
    """Classify a value once so the merge can branch on its shape.

    Args:
        value: Any value found in a source

    Returns:
        SCALAR for None and primitives, ARRAY for lists, PLAIN for exact dicts
        and namespaces, OPAQUE for everything else (dict subclasses,
        callables, dates, sets, ...)
    """
    if not is_object(value):
        return Shape.SCALAR
    if is_array(value):
        return Shape.ARRAY
    if is_plain_object(value):
        return Shape.PLAIN
    return Shape.OPAQUE


def copy_array(value: Any) -> list[Any]:
    """Shallow copy an array-like value into a list, preserving length."""
    if isinstance(value, Mapping):
        return [_indexed(value, i) for i in range(value["length"])]
    return list(value)


def init_clone_object(value: Any) -> Any:
    """Create an empty instance of a plain value's own type."""
    return type(value)()


def is_equal(a: Any, b: Any) -> bool:
    """Deep, type-strict structural equality.

    ``1`` and ``True`` are not equal, NaN equals NaN, and cyclic containers
    compare without recursing forever.
    """
    return _equal(a, b, set())


def to_index(key: Any) -> int:
    """Convert a key to a list index.

    Raises:
        TypeError: If key is not a non-negative integer or a string of digits
    """
    if isinstance(key, str) and key.isdigit():
        return int(key)
    if isinstance(key, int) and not isinstance(key, bool) and key >= 0:
        return key
    raise TypeError(f"list index must be a non-negative integer, not {key!r}")


def own_keys(value: Any) -> list[Any]:
    """List the own keys of a value.

    Mappings yield their keys, sequences (including str) their indices, and
    objects the public names in their instance ``__dict__``.
    """
    if isinstance(value, Mapping):
        return list(value.keys())
    if isinstance(value, Sequence):
        return list(range(len(value)))
    if hasattr(value, "__dict__"):
        return [name for name in vars(value) if not str(name).startswith("_")]
    return []


def get_value(obj: Any, key: Any) -> Any:
    """Read obj[key], returning None when the key is absent."""
    if isinstance(obj, Mapping):
        return obj.get(key)
    if isinstance(obj, Sequence):
        index = to_index(key)
        return obj[index] if index < len(obj) else None
    return getattr(obj, str(key), None)


def has_key(obj: Any, key: Any) -> bool:
    if isinstance(obj, Mapping):
        return key in obj
    if isinstance(obj, Sequence):
        return to_index(key) < len(obj)
    return hasattr(obj, str(key))


def is_reserved_key(key: Any) -> bool:
    """Check if key names a dunder attribute such as __class__ or __proto__."""
    return isinstance(key, str) and len(key) > 4 and key.startswith("__") and key.endswith("__")


def _is_length(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _indexed(mapping: Mapping[Any, Any], index: int) -> Any:
    if index in mapping:
        return mapping[index]
    return mapping.get(str(index))


def _equal(a: Any, b: Any, seen: set[tuple[int, int]]) -> bool:
    if a is b:
        return True
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        return a == b or (math.isnan(a) and math.isnan(b))

    if isinstance(a, Mapping):
        if len(a) != len(b):
            return False
        return _compare_children(a, b, seen, lambda: all(k in b and _equal(a[k], b[k], seen) for k in a))
    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return _compare_children(a, b, seen, lambda: all(_equal(x, y, seen) for x, y in zip(a, b)))
    if isinstance(a, SimpleNamespace):
        return _equal(vars(a), vars(b), seen)

    return bool(a == b)


def _compare_children(a: Any, b: Any, seen: set[tuple[int, int]], compare: Callable[[], bool]) -> bool:
    # A pair already under comparison is assumed equal until proven otherwise.
    pair = (id(a), id(b))
    if pair in seen:
        return True
    seen.add(pair)
    try:
        return compare()
    finally:
        seen.discard(pair)
