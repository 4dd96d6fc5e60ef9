"""Partial records for pydantic models and dataclasses.

Public API exports for library usage.
"""

from loguru import logger

from .config import PartialConfig
from .convertible import PartialConvertible, supports_partial
from .exceptions import (
    PartialError,
    PartialInvariantError,
    PathNotSetError,
    UnknownFieldError,
)
from .model import PartialModel
from .partial import Partial
from .paths import FieldPath, FieldPaths, OptionalFieldPath, field_path, field_paths
from .store import FieldStore
from .types import ABSENT, UNSET, Absent, Unset

# Silent unless the application opts in with logger.enable("partial_record")
logger.disable("partial_record")

__all__ = [
    # Partial records
    "Partial",
    "PartialModel",
    "FieldStore",
    # Field paths
    "FieldPath",
    "OptionalFieldPath",
    "FieldPaths",
    "field_path",
    "field_paths",
    # Conversion
    "PartialConvertible",
    "supports_partial",
    # Configuration
    "PartialConfig",
    # Exceptions
    "PartialError",
    "PathNotSetError",
    "UnknownFieldError",
    "PartialInvariantError",
    # Sentinels
    "UNSET",
    "ABSENT",
    "Unset",
    "Absent",
]
