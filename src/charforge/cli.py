"""Command-line interface for CharForge.

Provides commands for rendering character recipes, packing frame images
into sheets, flattening saved layered sprites, and listing generated parts.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from charforge.character.registry import default_registry
from charforge.composite import flatten_layers
from charforge.config import build_character, load_recipe, render_recipe
from charforge.errors import CharForgeError
from charforge.image_io import read_png, write_png
from charforge.logging import setup_logging
from charforge.models import SheetLayout, ViewDirection
from charforge.sheet import Frame, pack_sheet
from charforge.storage import (
    export_sheet,
    image_path,
    read_layered_sprite,
    save_character_file,
)

console = Console()

_LAYOUT_CHOICES = [layout.value for layout in SheetLayout]


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    if verbose:
        setup_logging(level=logging.DEBUG, verbose=True)
    else:
        setup_logging(level=logging.WARNING)


def _fail(action: str, exc: Exception) -> None:
    console.print(f"[bold red]✗[/] {action} failed: {escape(str(exc))}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="charforge")
def main() -> None:
    """CharForge: pixel-art character sprite compositing."""


@main.command()
@click.argument(
    "recipe_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Base path for the sheet files (overrides output_path in the recipe)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable detailed logging",
)
def render(recipe_path: Path, output: Path | None, verbose: bool) -> None:
    """Render every view of a character recipe into a sprite sheet.

    RECIPE_PATH: Path to the YAML recipe (e.g., recipes/hero.yaml)

    Writes BASE.png, BASE.json, BASE.tiled.json and the character itself
    as BASE.character.json.

    Example:

        \b
        charforge render recipes/hero.yaml -o output/hero
    """
    _setup_logging(verbose)

    try:
        recipe = load_recipe(recipe_path)
        if output is not None:
            base = output
        elif recipe.output_path:
            base = Path(recipe.output_path)
        else:
            base = Path("output") / recipe.character.id

        packed = render_recipe(recipe)
        paths = export_sheet(base, packed)
        character_file = save_character_file(
            base.with_name(base.name + ".character.json"),
            build_character(recipe, ViewDirection.FRONT),
        )
    except (CharForgeError, FileNotFoundError, ValueError) as exc:
        _fail("Render", exc)
        return

    console.print(
        f"[bold green]✓[/] Rendered [bold]{recipe.character.id}[/] "
        f"({len(recipe.views)} views, {packed.width}x{packed.height})"
    )
    for path in (*paths.values(), character_file):
        console.print(f"  {path}")


@main.command()
@click.argument(
    "frames",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Base path for the sheet files",
)
@click.option(
    "--layout",
    type=click.Choice(_LAYOUT_CHOICES),
    default=SheetLayout.GRID.value,
    show_default=True,
)
@click.option("--padding", type=click.IntRange(min=0), default=0, show_default=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable detailed logging")
def pack(
    frames: tuple[Path, ...],
    output: Path,
    layout: str,
    padding: int,
    verbose: bool,
) -> None:
    """Pack PNG frames into a sprite sheet.

    Frames are named after their file names without extension.

    Example:

        \b
        charforge pack idle_0.png idle_1.png -o output/idle --layout strip-horizontal
    """
    _setup_logging(verbose)

    try:
        loaded = [Frame(read_png(path), name=path.stem) for path in frames]
        packed = pack_sheet(loaded, layout, padding)
        paths = export_sheet(output, packed)
    except (CharForgeError, FileNotFoundError, ValueError) as exc:
        _fail("Pack", exc)
        return

    console.print(
        f"[bold green]✓[/] Packed {len(loaded)} frames into "
        f"{packed.width}x{packed.height} sheet"
    )
    for path in paths.values():
        console.print(f"  {path}")


@main.command()
@click.argument("base", type=click.Path(path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output PNG (default: BASE.png)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable detailed logging")
def flatten(base: Path, output: Path | None, verbose: bool) -> None:
    """Flatten a saved layered sprite into one PNG.

    BASE: Base path of the sprite (the part before .meta.json)
    """
    _setup_logging(verbose)

    try:
        layered = read_layered_sprite(base)
        dest = write_png(output or image_path(base), flatten_layers(layered))
    except (CharForgeError, FileNotFoundError, ValueError) as exc:
        _fail("Flatten", exc)
        return

    console.print(
        f"[bold green]✓[/] Flattened {len(layered.layers)} layers into [bold]{dest}[/]"
    )


@main.command()
@click.option(
    "--slot",
    help="Only list parts for this slot",
)
@click.option(
    "--search",
    "query",
    help="Only list parts whose id contains this text",
)
def parts(slot: str | None, query: str | None) -> None:
    """List the built-in generated parts."""
    registry = default_registry()
    if query is not None:
        found = registry.search(query)
    elif slot is not None:
        found = registry.by_slot(slot)
    else:
        found = registry.list()

    table = Table(title="Built-in parts")
    table.add_column("ID", style="bold")
    table.add_column("Slot")
    table.add_column("Size", justify="right")
    table.add_column("Colorable")
    for part in found:
        table.add_row(
            part.id,
            part.slot,
            f"{part.width}x{part.height}",
            "yes" if part.colorable else "no",
        )
    console.print(table)
