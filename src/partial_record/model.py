"""Pydantic mixin that opts a model into partial construction."""

from typing import Any, Self

from pydantic import BaseModel

from .exceptions import PathNotSetError
from .partial import Partial
from .paths import FieldPath, FieldPaths, field_paths


class PartialModel(BaseModel):
    """Base model that can be built from a ``Partial`` of itself.

    Fields are read from the partial one by one. A field that is unset
    (and not backed) is skipped when the model declares a default for it,
    so the default applies; otherwise the PathNotSetError is raised as is.
    Errors from nested partials always propagate unchanged, still naming
    the innermost missing path. Field paths are keyed by field name, not
    alias, and the model is validated by name, so aliased fields work.

    The helpers ``field_paths``, ``path``, ``partial`` and ``to_partial``
    live in the model namespace: a subclass must not declare fields with
    those names, or the field shadows the helper. Use the module-level
    ``field_paths()`` and ``Partial(Model)`` for such models.

    Example:
        class Address(PartialModel):
            street: str
            city: str

        partial = Address.partial()
        partial.set_value(Address.path("street"), "1 Analytical Row")
        partial.unwrapped_value()  # PathNotSetError: Address.city
    """

    @classmethod
    def field_paths(cls) -> FieldPaths:
        """Field paths of this model, by name and by attribute."""
        return field_paths(cls)

    @classmethod
    def path(cls, name: str) -> FieldPath[Self, Any]:
        """Field path for one field of this model."""
        return field_paths(cls)[name]

    @classmethod
    def partial(cls) -> Partial[Self]:
        """Create an empty partial of this model."""
        return Partial(cls)

    def to_partial(self) -> Partial[Self]:
        """Create a partial backed by this instance."""
        return Partial(type(self), backing_value=self)

    @classmethod
    def from_partial(cls, partial: Partial[Self]) -> Self:
        values: dict[str, Any] = {}
        for name, path in field_paths(cls).items():
            try:
                values[name] = partial.value(path)
            except PathNotSetError as e:
                if e.path == path and not path.required:
                    continue
                raise
        return cls.model_validate(values, by_name=True)
