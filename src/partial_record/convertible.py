"""Recursive conversion capability.

A record type opts into recursive unwrapping by providing a
``from_partial`` classmethod that builds an instance from a partial of
itself. ``Partial.value`` uses it to materialize nested partials, and
``Partial.unwrapped_value`` uses it for the top-level record.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from .partial import Partial


@runtime_checkable
class PartialConvertible(Protocol):
    """A record type that can construct itself from its own partial."""

    @classmethod
    def from_partial(cls, partial: Partial[Self]) -> Self:
        """Build a complete instance from partial.

        Implementations read each field with ``partial.value(path)`` and
        let any PathNotSetError propagate unchanged.
        """
        ...


def supports_partial(tp: Any) -> bool:
    """Whether tp is a class implementing the conversion capability."""
    return isinstance(tp, type) and callable(getattr(tp, "from_partial", None))
