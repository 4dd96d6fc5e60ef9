"""Custom exceptions for partial records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .paths import FieldPath


class PartialError(Exception):
    """Base exception for recoverable partial record errors."""

    pass


class PathNotSetError(PartialError):
    """Field path has not been set and no backing value is available."""

    def __init__(self, path: FieldPath[Any, Any]) -> None:
        """Initialize PathNotSetError.

        Args:
            path: Field path that was read while unset
        """
        super().__init__(f"Field path not set: {path}")
        self.path: FieldPath[Any, Any] = path


class UnknownFieldError(PartialError, KeyError):
    """Name does not identify a field of the record type."""

    def __init__(self, owner: type, name: str, available: list[str]) -> None:
        """Initialize UnknownFieldError.

        Args:
            owner: Record type that was searched
            name: Requested field name
            available: Field names the record type declares
        """
        msg = f"Unknown field: {owner.__name__}.{name}. Available: {available}"
        super().__init__(msg)
        self.owner: type = owner
        self.name: str = name
        self.available: list[str] = available

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class PartialInvariantError(AssertionError):
    """Stored payload contradicts its field path.

    Raised when the erased store holds a value of the wrong type, or an
    explicit absence on a non-optional path. Only misuse of the low-level
    store can produce this state, so it is not a PartialError and callers
    should not catch it.
    """

    def __init__(self, path: FieldPath[Any, Any], message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path: FieldPath[Any, Any] = path
