"""Exceptions related to route-patch."""

from pathlib import Path

__all__ = [
    "RoutePatchException",
    "ConfigException",
    "InputException",
    "StorageException",
    "DuplicateIdentifierError",
    "EmptyIdentifierError",
    "PathCollisionError",
    "IdentifierMismatchError",
    "StaleOutputException",
]


class RoutePatchException(Exception):
    """Generic base exception used for this library."""


class ConfigException(RoutePatchException):
    """Raised when the generator configuration is missing or invalid."""


class InputException(RoutePatchException):
    """Raised when the input files or values are not formatted as expected."""


class StorageException(RoutePatchException):
    """Raised when the source directory or output path can't be read or written."""


class DuplicateIdentifierError(InputException):
    """Raised when two route sources derive the same identifier."""

    def __init__(self, identifier: str, first: Path, second: Path) -> None:
        super().__init__(
            f"Route sources {first} and {second} both derive identifier '{identifier}'"
        )
        self.identifier = identifier
        self.first = first
        self.second = second


class EmptyIdentifierError(DuplicateIdentifierError):
    """Raised when a route source file name leaves an empty identifier."""

    def __init__(self, path: Path) -> None:
        InputException.__init__(
            self, f"Route source {path} derives an empty identifier"
        )
        self.identifier = ""
        self.first = path
        self.second = path


class PathCollisionError(InputException):
    """Raised when two route entries resolve to the same path prefix."""

    def __init__(self, path_prefix: str, first: str, second: str) -> None:
        super().__init__(
            f"Route path '{path_prefix}' is claimed by both {first} and {second}"
        )
        self.path_prefix = path_prefix
        self.first = first
        self.second = second


class IdentifierMismatchError(InputException):
    """Raised in strict mode when a manifest name disagrees with its file name."""

    def __init__(self, path: Path, expected: str, declared: str | None) -> None:
        super().__init__(
            f"Route source {path} declares name '{declared or ''}' "
            f"but its file name expects '{expected}'"
        )
        self.path = path
        self.expected = expected
        self.declared = declared


class StaleOutputException(RoutePatchException):
    """Raised when the output file on disk differs from a fresh render."""
