"""Partial records: incomplete instances of a record type.

A ``Partial[W]`` mirrors every field of the record type ``W``. Each field is
either unset, explicitly set to no value (optional fields only), set to a
concrete value, or set to a nested ``Partial`` of the field's type. Values
are accumulated with ``set_value`` and read back with ``value``; a complete
``W`` is built with ``unwrapped_value`` once every required field is known.

A partial may be backed by a complete instance of ``W``. Unset fields then
read through to the backing value, while anything set on the partial
overrides it.

Example:
    person = Partial(Person)
    person.set_value(Person.path("name"), "Ada")
    person.set_value(Person.path("nickname"), None)

    address = person.partial_value(Person.path("address"))
    address.set_value(Address.path("city"), "London")
    person.set_value(Person.path("address"), address)

    ada = person.unwrapped_value()  # raises PathNotSetError if incomplete
"""

from __future__ import annotations

import functools
from collections.abc import Iterator, Mapping
from typing import Any, Generic, Self, TypeVar, overload

from loguru import logger
from pydantic import TypeAdapter

from .config import PartialConfig
from .convertible import supports_partial
from .exceptions import PartialInvariantError, PathNotSetError
from .paths import FieldPath, OptionalFieldPath, conforms, field_paths
from .store import FieldStore
from .types import ABSENT, UNSET

W = TypeVar("W")
V = TypeVar("V")


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", repr(tp))


@functools.cache
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


class Partial(Generic[W]):
    """A record of type W whose fields may not all be known yet."""

    def __init__(self, wrapped: type[W], backing_value: W | None = None) -> None:
        """Create a partial of wrapped.

        Args:
            wrapped: Record type this partial builds towards
            backing_value: Complete instance used for fields that have not
                been set. It is never modified by the partial.

        Raises:
            TypeError: If backing_value is not an instance of wrapped
        """
        if backing_value is not None and not conforms(backing_value, wrapped):
            msg = f"Backing value must be a {_type_name(wrapped)}, got {backing_value!r}"
            raise TypeError(msg)
        self._wrapped: type[W] = wrapped
        self._backing_value: W | None = backing_value
        self._values: FieldStore = FieldStore()

    @property
    def wrapped(self) -> type[W]:
        """Record type this partial builds towards."""
        return self._wrapped

    @property
    def backing_value(self) -> W | None:
        """Complete instance read for unset fields, if any."""
        return self._backing_value

    @property
    def values(self) -> FieldStore:
        """Underlying erased store.

        Writing to it directly bypasses every type check made by
        ``set_value``; reads will raise PartialInvariantError if the store
        is left inconsistent.
        """
        return self._values

    # ========================================================================
    # Reads
    # ========================================================================

    @overload
    def value(self, path: OptionalFieldPath[W, V]) -> V | None: ...

    @overload
    def value(self, path: FieldPath[W, V]) -> V: ...

    def value(self, path: FieldPath[W, Any]) -> Any:
        """Return the value of the field at path.

        A nested partial stored at path is materialized through the field
        type's ``from_partial`` on every call, so edits made to it through
        ``partial_value`` are always reflected. An optional field explicitly set to
        None returns None even when a backing value is present.

        Args:
            path: Path to a field of the wrapped type

        Returns:
            The stored value, the materialized nested value, or the backing
            value's field

        Raises:
            PathNotSetError: If the field is unset and there is no backing
                value, or if materializing a nested partial fails
            PartialInvariantError: If the store holds a payload that does not
                fit the path
        """
        self._check_path(path)
        payload = self._values.get(path)

        if payload is UNSET:
            if self._backing_value is not None:
                return path.get(self._backing_value)
            raise PathNotSetError(path)

        if payload is ABSENT:
            if path.optional:
                return None
            raise PartialInvariantError(path, "non-optional value has been set to no value")

        if isinstance(payload, Partial):
            return self._unwrap_nested(path, payload)

        if PartialConfig.CHECK_READ_TYPES and not path.accepts(payload):
            msg = (
                f"value has been set, but is not of type "
                f"{_type_name(path.value_type)}: {payload!r}"
            )
            raise PartialInvariantError(path, msg)
        return payload

    def partial_value(self, path: FieldPath[W, V]) -> Partial[V]:
        """Return a partial for the field at path.

        Never raises for a consistent store:

        - a nested partial stored at path is returned as is (edits to it
          are seen by this partial)
        - a concrete value, stored or read from the backing value, becomes
          the backing value of a new partial
        - an unset field without backing value, a field explicitly set to
          None, or a backing field that is None yields an empty partial

        Args:
            path: Path to a field of the wrapped type

        Returns:
            Partial of the field's type
        """
        self._check_path(path)
        payload = self._values.get(path)

        if payload is UNSET:
            if self._backing_value is None:
                return Partial(path.value_type)
            payload = path.get(self._backing_value)
        elif payload is ABSENT:
            if not path.optional:
                raise PartialInvariantError(path, "non-optional value has been set to no value")
            return Partial(path.value_type)
        elif isinstance(payload, Partial):
            return payload
        elif PartialConfig.CHECK_READ_TYPES and not path.accepts(payload):
            msg = (
                f"value has been set, but is not of type "
                f"{_type_name(path.value_type)}: {payload!r}"
            )
            raise PartialInvariantError(path, msg)

        if payload is None:
            return Partial(path.value_type)
        return Partial(path.value_type, backing_value=payload)

    def is_set(self, path: FieldPath[W, Any]) -> bool:
        """Whether path has been set on this partial (including to None)."""
        return path in self._values

    def missing_paths(self) -> list[FieldPath[Any, Any]]:
        """List the required paths that would stop materialization.

        Walks into nested partials, so the returned paths may belong to
        nested record types. Fields covered by a backing value, and fields
        with a default, are never reported.
        """
        missing: list[FieldPath[Any, Any]] = []
        for path in field_paths(self._wrapped).values():
            payload = self._values.get(path)
            if payload is UNSET:
                if self._backing_value is None and path.required:
                    missing.append(path)
            elif isinstance(payload, Partial) and supports_partial(path.value_type):
                missing.extend(payload.missing_paths())
        return missing

    # ========================================================================
    # Writes
    # ========================================================================

    @overload
    def set_value(self, path: OptionalFieldPath[W, V], value: V | Partial[V] | None) -> None: ...

    @overload
    def set_value(self, path: FieldPath[W, V], value: V | Partial[V]) -> None: ...

    def set_value(self, path: FieldPath[W, Any], value: Any) -> None:
        """Store value for the field at path.

        Args:
            path: Path to a field of the wrapped type
            value: A value of the field's type, a Partial of the field's
                type, or None for an optional field. None is kept as an
                explicit "no value" and overrides the backing value. A
                Partial is copied, so later edits to it are not seen here.

        Raises:
            TypeError: If value does not fit the field
        """
        self._check_path(path)

        if isinstance(value, Partial):
            if not _wraps(value, path.value_type):
                msg = (
                    f"Cannot store {value!r} at {path}: "
                    f"expected a Partial of {_type_name(path.value_type)}"
                )
                raise TypeError(msg)
            self._values.put(path, value.copy())
            return

        if value is None and path.optional:
            self._values.put_absent(path)
            return

        if value is None and not path.accepts(None):
            raise TypeError(f"Cannot set non-optional field {path} to None")

        if PartialConfig.CHECK_WRITE_TYPES and not path.accepts(value):
            msg = f"Cannot set {path} to {value!r}: expected {_type_name(path.value_type)}"
            raise TypeError(msg)
        self._values.put(path, value)

    def remove_value(self, path: FieldPath[W, Any]) -> None:
        """Revert the field at path to unset.

        The backing value, if any, governs the field again.
        """
        self._check_path(path)
        self._values.remove(path)

    def update(self, data: Mapping[str, Any]) -> Self:
        """Merge raw field values keyed by field name.

        Intended for values from untrusted sources such as decoded JSON.
        The merge is all or nothing: if any value is rejected, no field of
        this partial is changed.
        Nested mappings for fields whose type implements ``from_partial``
        are merged into that field's partial rather than replacing it;
        other values are validated against the field type with pydantic.

        Args:
            data: Field name to raw value

        Returns:
            self, for chaining

        Raises:
            UnknownFieldError: If a key is not a field of the wrapped type
            TypeError: If None is given for a non-optional field
            pydantic.ValidationError: If a value cannot be coerced to its field type
        """
        paths = field_paths(self._wrapped)
        resolved = [(paths[name], raw) for name, raw in data.items()]

        # Committed only once every value is accepted
        staged = self.copy()
        for path, raw in resolved:
            if raw is None or isinstance(raw, Partial):
                staged.set_value(path, raw)
            elif isinstance(raw, Mapping) and supports_partial(path.value_type):
                nested = staged.partial_value(path)
                nested.update(raw)
                staged.set_value(path, nested)
            else:
                staged.set_value(path, _adapter(path.value_type).validate_python(raw))
        self._values = staged._values
        logger.debug(f"Merged {len(data)} field(s) into {self!r}")
        return self

    # ========================================================================
    # Materialization
    # ========================================================================

    def unwrapped_value(self) -> W:
        """Build a complete instance of the wrapped type.

        Delegates to ``wrapped.from_partial(self)``. Materialization is a
        pure read; the partial stays editable afterwards.

        Returns:
            New instance of the wrapped type

        Raises:
            PathNotSetError: Naming the first missing required field, at
                whatever nesting depth it occurred
            TypeError: If the wrapped type does not implement from_partial
        """
        if not supports_partial(self._wrapped):
            msg = f"{_type_name(self._wrapped)} cannot be built from a partial: no from_partial"
            raise TypeError(msg)
        name = _type_name(self._wrapped)
        logger.debug(f"Materializing {name} from {len(self._values)} set field(s)")
        try:
            return self._wrapped.from_partial(self)  # type: ignore[attr-defined]
        except PathNotSetError as e:
            logger.debug(f"Materializing {name} failed: {e}")
            raise

    def _unwrap_nested(self, path: FieldPath[W, Any], nested: Partial[Any]) -> Any:
        if not supports_partial(path.value_type) or not _wraps(nested, path.value_type):
            msg = (
                f"value is {nested!r}, but {_type_name(path.value_type)} "
                "cannot be built from it"
            )
            raise PartialInvariantError(path, msg)
        logger.debug(f"Unwrapping nested partial at {path}")
        return nested.unwrapped_value()

    def _check_path(self, path: FieldPath[Any, Any]) -> None:
        if path.owner is not self._wrapped:
            raise TypeError(f"{path} is not a field of {_type_name(self._wrapped)}")

    # ========================================================================
    # Container protocol
    # ========================================================================

    def copy(self) -> Partial[W]:
        """Return an independent copy.

        Nested partials are copied recursively, so editing the copy never
        affects this partial. Concrete values and the backing value are
        shared, as neither is mutated by a partial.
        """
        clone: Partial[W] = Partial(self._wrapped, self._backing_value)
        for path, payload in self._values.items():
            if isinstance(payload, Partial):
                payload = payload.copy()
            clone._values.put(path, payload)
        return clone

    __copy__ = copy

    def __getitem__(self, path: FieldPath[W, V]) -> V:
        return self.value(path)

    def __setitem__(self, path: FieldPath[W, V], value: V | Partial[V] | None) -> None:
        self.set_value(path, value)

    def __delitem__(self, path: FieldPath[W, Any]) -> None:
        self.remove_value(path)

    def __contains__(self, path: object) -> bool:
        return path in self._values

    def __iter__(self) -> Iterator[FieldPath[W, Any]]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Partial):
            return NotImplemented
        return (
            self._wrapped is other._wrapped
            and self._backing_value == other._backing_value
            and self._values == other._values
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        parts = [f"{path.name}={payload!r}" for path, payload in self._values.items()]
        if self._backing_value is not None:
            parts.append(f"backing_value={self._backing_value!r}")
        return f"Partial[{_type_name(self._wrapped)}]({', '.join(parts)})"


def _wraps(nested: Partial[Any], tp: Any) -> bool:
    """Whether nested is a partial of tp (or of a subclass of tp)."""
    if nested.wrapped is tp:
        return True
    return (
        isinstance(nested.wrapped, type)
        and isinstance(tp, type)
        and issubclass(nested.wrapped, tp)
    )
