"""Exceptions for structural-merge."""


class MergeError(Exception):
    """Base exception for merge errors."""

    pass


class InvalidTargetError(MergeError, TypeError):
    """Merge target is None and cannot be converted to an object."""

    def __init__(self, message: str = "Cannot convert undefined or null to object"):
        super().__init__(message)


class DocumentError(MergeError):
    """Error reading or writing a YAML document."""

    pass
