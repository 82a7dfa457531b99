"""Data models for structural-merge."""

from enum import Enum
from typing import Any


class Shape(Enum):
    """Structural classification of a value.

    Decides how the merge treats a value found in a source.
    """

    SCALAR = "scalar"
    ARRAY = "array"
    PLAIN = "plain"
    OPAQUE = "opaque"


class Boxed(dict):
    """Mapping container for a primitive merge target.

    Keys merged into a primitive land on this container, while the original
    primitive stays available as ``value``.

    Attributes:
        value: The wrapped primitive
    """

    def __init__(self, value: Any):
        super().__init__()
        self.value = value

    def __repr__(self) -> str:
        return f"Boxed({self.value!r}, {dict.__repr__(self)})"
