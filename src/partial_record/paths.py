"""Field paths: typed keys naming one field of one record type.

A path is scoped to its owner record type and field name. Its declared
value type travels with it so the partial store can check payloads, but
equality and hashing only look at the flavor, the owner and the name.

Paths are produced by reflecting over pydantic models or dataclasses:

    paths = field_paths(Person)
    paths.name        # FieldPath[Person, str]
    paths.nickname    # OptionalFieldPath[Person, str]
"""

from __future__ import annotations

import dataclasses
import functools
from collections.abc import Iterator, Mapping
from types import NoneType, UnionType
from typing import (
    Annotated,
    Any,
    ClassVar,
    Generic,
    Literal,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel

from .exceptions import UnknownFieldError

W = TypeVar("W")
V = TypeVar("V")


def conforms(value: object, tp: Any) -> bool:
    """Check whether value is an instance of the (possibly generic) type tp.

    Parameterised generics are checked against their origin only, so
    ``[1, "a"]`` conforms to ``list[int]``. Annotations that cannot be
    checked at runtime (forward references, type aliases) always conform.
    """
    if tp is Any or tp is object or isinstance(tp, TypeVar):
        return True
    if tp is None or tp is NoneType:
        return value is None

    origin = get_origin(tp)
    if origin is Annotated:
        return conforms(value, get_args(tp)[0])
    if origin is Union or origin is UnionType:
        return any(conforms(value, arg) for arg in get_args(tp))
    if origin is Literal:
        return value in get_args(tp)
    if origin is not None:
        tp = origin

    if not isinstance(tp, type):
        return True
    if tp is float:
        # int is acceptable wherever float is declared
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, tp)


@dataclasses.dataclass(frozen=True)
class FieldPath(Generic[W, V]):
    """Path to a non-optional field of type V on record type W."""

    owner: type[W]
    name: str
    value_type: Any = dataclasses.field(default=object, compare=False)
    required: bool = dataclasses.field(default=True, compare=False)

    optional: ClassVar[bool] = False

    def get(self, instance: W) -> V:
        """Read this field from a concrete record instance."""
        return getattr(instance, self.name)

    def accepts(self, value: object) -> bool:
        """Whether value conforms to the declared field type."""
        return conforms(value, self.value_type)

    def __str__(self) -> str:
        return f"{self.owner.__name__}.{self.name}"


@dataclasses.dataclass(frozen=True)
class OptionalFieldPath(FieldPath[W, V]):
    """Path to a field declared ``V | None`` on record type W.

    ``value_type`` is V, with the None member stripped.
    """

    optional: ClassVar[bool] = True

    def get(self, instance: W) -> V | None:  # type: ignore[override]
        return getattr(instance, self.name)


class FieldPaths(Mapping[str, FieldPath[Any, Any]]):
    """Field paths of one record type, by name and by attribute."""

    def __init__(self, owner: type, paths: dict[str, FieldPath[Any, Any]]) -> None:
        self._owner: type = owner
        self._paths: dict[str, FieldPath[Any, Any]] = paths

    @property
    def owner(self) -> type:
        return self._owner

    def __getitem__(self, name: str) -> FieldPath[Any, Any]:
        try:
            return self._paths[name]
        except KeyError:
            raise UnknownFieldError(self._owner, name, list(self._paths)) from None

    def __getattr__(self, name: str) -> FieldPath[Any, Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except UnknownFieldError as e:
            raise AttributeError(str(e)) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"FieldPaths({self._owner.__name__}: {list(self._paths)})"


def _split_optional(annotation: Any) -> tuple[Any, bool]:
    """Strip None from a union annotation, reporting whether it was there."""
    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        members = get_args(annotation)
        rest = tuple(arg for arg in members if arg is not NoneType)
        if len(rest) < len(members):
            if len(rest) == 1:
                return rest[0], True
            return Union[rest], True
    return annotation, False


def _reflect(record_type: type) -> Iterator[tuple[str, Any, bool]]:
    """Yield (name, annotation, required) for each field of record_type."""
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        for name, info in record_type.model_fields.items():
            yield name, info.annotation, info.is_required()
    elif isinstance(record_type, type) and dataclasses.is_dataclass(record_type):
        hints = get_type_hints(record_type)
        for f in dataclasses.fields(record_type):
            required = (
                f.default is dataclasses.MISSING
                and f.default_factory is dataclasses.MISSING
            )
            yield f.name, hints.get(f.name, Any), required
    else:
        msg = (
            f"Cannot reflect field paths of {record_type!r}: "
            "expected a pydantic model or a dataclass"
        )
        raise TypeError(msg)


@functools.cache
def field_paths(record_type: type) -> FieldPaths:
    """Build the field paths of a pydantic model or dataclass.

    Args:
        record_type: Record class to reflect over

    Returns:
        FieldPaths keyed by field name

    Raises:
        TypeError: If record_type is neither a pydantic model nor a dataclass
    """
    paths: dict[str, FieldPath[Any, Any]] = {}
    for name, annotation, required in _reflect(record_type):
        value_type, optional = _split_optional(annotation)
        path_cls = OptionalFieldPath if optional else FieldPath
        paths[name] = path_cls(record_type, name, value_type, required)
    return FieldPaths(record_type, paths)


def field_path(record_type: type, name: str) -> FieldPath[Any, Any]:
    """Look up a single field path by name.

    Raises:
        UnknownFieldError: If record_type has no field called name
    """
    return field_paths(record_type)[name]
