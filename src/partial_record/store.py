"""Heterogeneous field store backing a partial record.

The store maps field paths to erased payloads and keeps the three states
of a path apart: missing from the mapping (unset), mapped to ``ABSENT``
(explicitly no value), or mapped to a payload (a concrete value or a
nested partial). It performs no type checking; the typed contract lives
in ``Partial``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from .paths import FieldPath
from .types import ABSENT, UNSET, Absent, Unset

type Payload = Any | Absent


class FieldStore:
    """Erased mapping from field path to payload."""

    def __init__(self, entries: dict[FieldPath[Any, Any], Payload] | None = None) -> None:
        self._entries: dict[FieldPath[Any, Any], Payload] = dict(entries or {})

    def put(self, path: FieldPath[Any, Any], payload: Payload) -> None:
        """Store payload at path, replacing any previous entry."""
        self._entries[path] = payload

    def put_absent(self, path: FieldPath[Any, Any]) -> None:
        """Record that path was explicitly set to no value."""
        self._entries[path] = ABSENT

    def get(self, path: FieldPath[Any, Any]) -> Payload | Unset:
        """Return the payload at path, or UNSET if the path was never set."""
        return self._entries.get(path, UNSET)

    def remove(self, path: FieldPath[Any, Any]) -> None:
        """Drop path from the store. Removing an unset path is a no-op."""
        self._entries.pop(path, None)

    def items(self) -> Iterator[tuple[FieldPath[Any, Any], Payload]]:
        return iter(self._entries.items())

    def copy(self) -> FieldStore:
        """Shallow copy: a new mapping holding the same payload objects."""
        return FieldStore(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[FieldPath[Any, Any]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldStore):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(f"{path}={payload!r}" for path, payload in self._entries.items())
        return f"FieldStore({inner})"
