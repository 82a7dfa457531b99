"""Deep structural merge of one or more sources into a target."""

import logging
from collections.abc import Callable
from collections.abc import Iterator
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Any

from .exceptions import InvalidTargetError
from .models import Boxed
from .models import Shape
from .utils import classify
from .utils import copy_array
from .utils import get_value
from .utils import has_key
from .utils import init_clone_object
from .utils import is_array
from .utils import is_array_like
from .utils import is_assignable
from .utils import is_equal
from .utils import is_function
from .utils import is_nil
from .utils import is_object_like
from .utils import is_reserved_key
from .utils import own_keys
from .utils import to_index

logger = logging.getLogger(__name__)

# Source sub-value id -> destination currently being merged for it
CycleGuard = dict[int, Any]


def merge(target: Any, *sources: Any) -> Any:
    """Deep merge the own keys of each source into target.

    Nested dicts and lists are combined rather than replaced, later sources
    override earlier ones, and reference cycles inside a source are
    reproduced in the target instead of recursing forever. Falsy sources are
    skipped. Sources are never modified.

    Args:
        target: Value to merge into (modified in place)
        *sources: Values to copy keys from, lowest precedence first

    Returns:
        The target, or a Boxed container when target cannot hold keys
        (primitives, tuples, dates, read-only mappings, ...)

    Raises:
        InvalidTargetError: If target is None, or is a list and a source
            carries a key that is not a list index

    Examples:
        >>> merge({"a": {"x": 1}}, {"a": {"y": 2}})
        {'a': {'x': 1, 'y': 2}}

        >>> merge({"a": [1, 2]}, {"a": [9]})
        {'a': [9, 2]}

        >>> merge({}, {"a": 1}, {"a": 2}, {"a": 3})
        {'a': 3}
    """
    if is_nil(target):
        raise InvalidTargetError()

    if not (is_array(target) or is_assignable(target)):
        target = Boxed(target)

    for index, source in enumerate(sources):
        if not source:
            continue
        if is_array(target):
            _check_indices(source)
        _assign(target, source, index)

    logger.debug(f"Merged {len(sources)} source(s) into {type(target).__name__}")
    return target


def _check_indices(source: Any) -> None:
    """Reject a source whose keys cannot address a list target."""
    for key in own_keys(source):
        try:
            to_index(key)
        except TypeError as e:
            raise InvalidTargetError(f"Cannot merge key {key!r} into a list target") from e


def _assign(obj: Any, source: Any, index: int, guard: CycleGuard | None = None) -> None:
    if obj is source:
        return

    for key in own_keys(source):
        src_value = get_value(source, key)
        if classify(src_value) is Shape.SCALAR:
            _set_value(obj, key, src_value)
            continue
        if guard is None:
            guard = {}
        _combine(obj, source, key, index, _assign, guard)


def _combine(
    obj: Any,
    source: Any,
    key: Any,
    index: int,
    assign: Callable[[Any, Any, int, CycleGuard], None],
    guard: CycleGuard,
) -> None:
    """Merge source[key] into obj[key] when both sides have a compatible shape.

    Lists merge index by index into the existing list (or a list copy of an
    array-like value), dicts merge into the existing container (or an empty
    instance of the source's type). Any other object is assigned as-is.
    """
    obj_value = get_value(obj, key)
    src_value = get_value(source, key)

    if id(src_value) in guard:
        _set_value(obj, key, guard[id(src_value)])
        return

    shape = classify(src_value)
    if shape is Shape.ARRAY:
        if is_array(obj_value):
            new_value = obj_value
        elif is_object_like(obj_value) and is_array_like(obj_value):
            new_value = copy_array(obj_value)
        else:
            new_value = []
    elif shape is Shape.PLAIN:
        new_value = obj_value
        if is_function(obj_value) or not is_assignable(obj_value):
            new_value = init_clone_object(src_value)
    else:
        _set_value(obj, key, src_value)
        return

    # Deep inputs are bounded by the interpreter's recursion limit.
    with _visiting(guard, src_value, new_value):
        assign(new_value, src_value, index, guard)
    _set_value(obj, key, new_value)


@contextmanager
def _visiting(guard: CycleGuard, src_value: Any, destination: Any) -> Iterator[None]:
    guard[id(src_value)] = destination
    try:
        yield
    finally:
        del guard[id(src_value)]


def _set_value(obj: Any, key: Any, value: Any) -> None:
    """Write obj[key] = value unless the write would change nothing.

    None never overwrites an existing key, but does create a missing one.
    """
    if value is not None:
        if is_equal(get_value(obj, key), value):
            return
    elif has_key(obj, key):
        return

    if isinstance(obj, Mapping):
        obj[key] = value
    elif is_array(obj):
        position = to_index(key)
        if position < len(obj):
            obj[position] = value
        else:
            obj.extend([None] * (position - len(obj)))
            obj.append(value)
    elif is_reserved_key(key):
        # Bypass descriptors so a source cannot replace __class__ or __dict__.
        vars(obj)[key] = value
    else:
        setattr(obj, str(key), value)
