"""partial-record CLI - build records from JSON fragments."""

import importlib
import json
import sys
from pathlib import Path
from typing import Any, Optional

import click
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .convertible import supports_partial
from .exceptions import PathNotSetError, UnknownFieldError
from .partial import Partial
from .paths import FieldPath, field_paths

console = Console()


def resolve_model(ctx: click.Context, param: click.Parameter, ref: str) -> type:
    """Import a record type from a ``module:Class`` reference."""
    module_name, _, attr = ref.partition(":")
    if not module_name or not attr:
        raise click.BadParameter(f"expected module:Class, got {ref!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}") from e
    model = getattr(module, attr, None)
    if model is None:
        raise click.BadParameter(f"{module_name} has no attribute {attr}")
    if not supports_partial(model):
        raise click.BadParameter(f"{ref} cannot be built from a partial: no from_partial")
    return model


def read_json_object(path: Path) -> dict[str, Any]:
    """Load a JSON file that must contain an object."""
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path}: invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise click.BadParameter(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data


def type_label(path: FieldPath[Any, Any]) -> str:
    name = getattr(path.value_type, "__name__", repr(path.value_type))
    return f"{name} | None" if path.optional else name


def print_missing(model: type, missing: list[FieldPath[Any, Any]]) -> None:
    """Print the fields still needed to build model."""
    table = Table(title=f"Missing fields for {model.__name__}")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Type", style="yellow")

    for path in missing:
        table.add_row(str(path), type_label(path))

    console.print(table)


@click.group()
@click.version_option(package_name="partial-record")
def cli():
    """partial-record - build records incrementally from JSON fragments.

    Examples:
      partial-record fields myapp.models:Person
      partial-record build myapp.models:Person name.json address.json
      partial-record build myapp.models:Person edits.json --base person.json
    """
    pass


@cli.command()
@click.argument("model", callback=resolve_model)
def fields(model: type):
    """List the field paths of MODEL (module:Class)."""
    table = Table(title=model.__name__)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Type", style="green")
    table.add_column("Required")

    for path in field_paths(model).values():
        table.add_row(path.name, type_label(path), "yes" if path.required else "no")

    console.print(table)


@cli.command()
@click.argument("model", callback=resolve_model)
@click.argument(
    "sources", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--base",
    "-b",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding a complete record to fall back on",
)
@click.option("--verbose", "-v", is_flag=True, help="Log each merge and unwrap step")
def build(model: type, sources: tuple[Path, ...], base: Optional[Path], verbose: bool):
    """Merge JSON SOURCES in order and build a MODEL from them.

    Later sources override earlier ones. A null value clears an optional
    field even when --base provides one. Nested objects are merged field
    by field.

    Examples:
        partial-record build app.models:Person a.json b.json
        partial-record build app.models:Person edits.json --base person.json
    """
    if verbose:
        logger.enable("partial_record")

    adapter: TypeAdapter[Any] = TypeAdapter(model)

    backing = None
    if base is not None:
        try:
            backing = adapter.validate_python(read_json_object(base))
        except ValidationError as e:
            console.print(
                f"[red]✗ {escape(str(base))}: not a complete {model.__name__}[/red]",
                soft_wrap=True,
            )
            console.print(escape(str(e)), soft_wrap=True)
            sys.exit(2)

    partial = Partial(model, backing_value=backing)
    for source in sources:
        try:
            partial.update(read_json_object(source))
        except (UnknownFieldError, TypeError, ValidationError) as e:
            console.print(f"[red]✗ {escape(str(source))}: {escape(str(e))}[/red]", soft_wrap=True)
            sys.exit(2)

    try:
        record = partial.unwrapped_value()
    except PathNotSetError as e:
        console.print(f"[red]✗ Cannot build {model.__name__}: {escape(str(e))}[/red]", soft_wrap=True)
        print_missing(model, partial.missing_paths() or [e.path])
        sys.exit(1)

    console.print_json(adapter.dump_json(record).decode())


if __name__ == "__main__":
    cli()
