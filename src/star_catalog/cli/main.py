"""
Star Catalog CLI - Main Application

This is the main entry point for the star catalog command-line interface.
"""

import logging
import math
from pathlib import Path
from typing import Any

import typer
from click import Context
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.core import TyperGroup

from star_catalog.api.catalogs.catalog import Catalog
from star_catalog.api.catalogs.loader import read_catalog, read_names, write_catalog
from star_catalog.api.catalogs.star import Star
from star_catalog.api.catalogs.star_filter import Select, WithinAngle
from star_catalog.api.catalogs.subcube import Subcube
from star_catalog.api.core.exceptions import StarCatalogError
from star_catalog.api.core.types import SearchConfig
from star_catalog.api.core.utils import angle_of_cos
from star_catalog.cli.utils.output import (
    print_error,
    print_info,
    print_json,
    print_star_table,
    print_success,
    print_warning,
    star_to_dict,
)


logger = logging.getLogger(__name__)


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


# Create main app
app = typer.Typer(
    name="star-catalog",
    help="Star catalog search CLI",
    add_completion=False,
    rich_markup_mode="rich",
    cls=SortedCommandsGroup,
)

# Console for rich output
console = Console()

# Global state for CLI
state: dict[str, Any] = {
    "catalog": None,
    "magnitude": None,
    "names": None,
    "right_ascension": 0.0,
    "declination": 0.0,
    "angle": 0.0,
    "verbose": False,
}


@app.callback()
def main(
    catalog: Path | None = typer.Option(
        None,
        "--catalog",
        "-c",
        help="Star catalog to load (JSON list of six-field star rows)",
        envvar="STAR_CATALOG_PATH",
    ),
    magnitude: float | None = typer.Option(
        None,
        "--magnitude",
        "-m",
        help="Maximum magnitude of stars to keep (default 6.0)",
    ),
    names: Path | None = typer.Option(
        None,
        "--names",
        "-n",
        help="File of [id, name] pairs naming stars",
        envvar="STAR_CATALOG_NAMES",
    ),
    right_ascension: float = typer.Option(0.0, "--right-ascension", "-r", help="Right ascension in degrees"),
    declination: float = typer.Option(0.0, "--declination", "-d", help="Declination in degrees"),
    angle: float = typer.Option(
        0.0,
        "--angle",
        "-a",
        help="If positive, keep only stars within this many degrees of the right ascension and declination",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Star Catalog Search CLI

    Load a star catalog, then list, find or search its stars.

    [bold green]Examples:[/bold green]

        star-catalog -c hipparcos.json count
        star-catalog -c hipparcos.json -n names.json find Sirius 32349
        star-catalog -c hipparcos.json -r 101.3 -d -16.7 closest
        star-catalog -c hipparcos.json triangles 10.0 12.5 15.2 --tolerance 0.05

    [bold blue]Environment Variables:[/bold blue]

        STAR_CATALOG_PATH               - Default star catalog
        STAR_CATALOG_NAMES              - Default star names file
        STAR_CATALOG_MAX_MAGNITUDE      - Default maximum magnitude
        STAR_CATALOG_NEAREST_RING       - Subcube steps scanned by closest
        STAR_CATALOG_TRIANGLE_TOLERANCE - Default triangle tolerance in degrees
    """
    state["catalog"] = catalog
    state["magnitude"] = magnitude
    state["names"] = names
    state["right_ascension"] = right_ascension
    state["declination"] = declination
    state["angle"] = angle
    state["verbose"] = verbose

    load_dotenv()

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        console.print("[dim]Verbose mode enabled[/dim]")
        if catalog:
            console.print(f"[dim]Using catalog: {catalog}[/dim]")


def _config() -> SearchConfig:
    try:
        return SearchConfig.from_env()
    except StarCatalogError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _load() -> tuple[Catalog, dict[int, str]]:
    """
    Load the catalog given by the global options, ready for searching.

    The catalog is read, pruned by magnitude (and by angle if one was
    given), sorted, named and has its subcube data derived.

    Returns:
        Tuple of (catalog, mapping of star id to name)
    """
    catalog_path: Path | None = state["catalog"]
    if catalog_path is None:
        print_error("No catalog given; use --catalog or set STAR_CATALOG_PATH")
        raise typer.Exit(code=1)

    config = _config()
    magnitude = state["magnitude"] if state["magnitude"] is not None else config.max_magnitude

    try:
        catalog = read_catalog(catalog_path, max_magnitude=magnitude)
        catalog.sort()

        angle = state["angle"]
        if angle > 0.0:
            center = Star.vec_of_ra_de(math.radians(state["right_ascension"]), math.radians(state["declination"]))
            catalog.retain(WithinAngle.of_angle(center, math.radians(min(angle, 180.0))))
            catalog.sort()

        names: dict[int, str] = {}
        if state["names"] is not None:
            id_names = read_names(state["names"])
            catalog.add_names(id_names, ignore_not_found=True)
            names = {star_id: name for star_id, name in id_names if catalog.find_sorted(star_id) is not None}

        catalog.derive_data()
    except StarCatalogError as e:
        print_error(f"Failed to load catalog: {e}")
        raise typer.Exit(code=1) from e

    logger.debug(f"Catalog ready: {catalog!r}")
    return catalog, names


@app.command(rich_help_panel="Catalog")
def count(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the number of stars in the catalog."""
    catalog, _ = _load()
    if json_output:
        print_json({"count": len(catalog)})
    else:
        print_info(f"Catalog has {len(catalog)} stars")


@app.command("list", rich_help_panel="Catalog")
def list_stars(
    skip: int = typer.Option(0, "--skip", min=0, help="Number of stars to skip"),
    limit: int = typer.Option(50, "--limit", "-l", min=0, help="Maximum number of stars to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List the stars in the catalog, in id order.

    Example:
        star-catalog -c hipparcos.json -m 2.0 list --limit 20
    """
    catalog, names = _load()
    select = Select(skip, limit)
    stars = [star for star in catalog.iter_stars() if select(star)]

    if json_output:
        print_json({"count": len(stars), "stars": [star_to_dict(star, names.get(star.id)) for star in stars]})
        return
    if not stars:
        print_warning("No stars to list")
        return
    print_star_table(f"Stars ({len(stars)} of {len(catalog)})", stars, names)


@app.command(rich_help_panel="Catalog")
def find(
    stars: list[str] = typer.Argument(..., help="Star ids or names to find"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Find stars by id or name and display them.

    Example:
        star-catalog -c hipparcos.json -n names.json find Sirius 91262
    """
    catalog, names = _load()
    try:
        found = [catalog[catalog.find_id_or_name(text)] for text in stars]
    except StarCatalogError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        print_json({"stars": [star_to_dict(star, names.get(star.id)) for star in found]})
    else:
        print_star_table("Stars Found", found, names)


@app.command(rich_help_panel="Catalog")
def write(
    output: Path = typer.Option(..., "--output", "-o", help="JSON file to write the catalog to"),
) -> None:
    """
    Write out the (filtered) catalog as JSON.

    Example:
        star-catalog -c hipparcos.json -m 5.0 write -o bright.json
    """
    catalog, _ = _load()
    try:
        written = write_catalog(catalog, output)
    except OSError as e:
        print_error(f"Failed to write {output}: {e}")
        raise typer.Exit(code=1) from e
    print_success(f"Wrote {written} stars to {output}")


@app.command(rich_help_panel="Search")
def closest(
    ring: int | None = typer.Option(
        None, "--ring", min=1, help="Subcube steps to scan around the position (default from configuration)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Find the star closest to the --right-ascension and --declination.

    Example:
        star-catalog -c hipparcos.json -r 101.3 -d -16.7 closest
    """
    catalog, names = _load()
    ring = ring if ring is not None else _config().nearest_ring
    ra = math.radians(state["right_ascension"])
    de = math.radians(state["declination"])

    result = catalog.closest_to(ra, de, ring)
    if result is None:
        if json_output:
            print_json({"star": None})
        else:
            print_warning("No star found near the given position")
        return

    cos_angle, handle = result
    star = catalog[handle]
    angle = math.degrees(angle_of_cos(cos_angle))
    if json_output:
        print_json({"star": star_to_dict(star, names.get(star.id)), "angle_degrees": round(angle, 6)})
    else:
        print_star_table("Closest Star", [star], names)
        print_info(f"Angle from position: {angle:.4f}°")


@app.command(rich_help_panel="Search")
def triangles(
    angle0: float = typer.Argument(..., min=0.0, max=180.0, help="Angle between the first and second star (degrees)"),
    angle1: float = typer.Argument(..., min=0.0, max=180.0, help="Angle between the first and third star (degrees)"),
    angle2: float = typer.Argument(..., min=0.0, max=180.0, help="Angle between the second and third star (degrees)"),
    tolerance: float | None = typer.Option(
        None, "--tolerance", "-t", min=0.0, help="Tolerance on each angle in degrees (default from configuration)"
    ),
    limit: int = typer.Option(50, "--limit", "-l", min=0, help="Maximum number of triangles to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Find triples of stars separated by three angles.

    Example:
        star-catalog -c hipparcos.json -m 4.0 triangles 10.0 12.5 15.2 -t 0.05
    """
    catalog, names = _load()
    if tolerance is None:
        tolerance = _config().triangle_tolerance_degrees

    angles = (math.radians(angle0), math.radians(angle1), math.radians(angle2))
    found = catalog.find_star_triangles(Subcube.iter_all(), angles, math.radians(tolerance))
    shown = [tuple(catalog[h].id for h in triangle) for triangle in found[:limit]]

    if json_output:
        print_json({"count": len(found), "triangles": [list(ids) for ids in shown]})
        return
    if not found:
        print_warning("No star triangles found")
        return

    table = Table(title=f"Star Triangles ({len(found)} found)", show_header=True, header_style="bold magenta")
    for column in ("Star 0", "Star 1", "Star 2"):
        table.add_column(column, style="cyan")
    for ids in shown:
        table.add_row(*(f"{star_id} {names.get(star_id, '')}".strip() for star_id in ids))
    console.print(table)
    if len(found) > limit:
        print_info(f"Showing {limit} of {len(found)} triangles")


@app.command(rich_help_panel="Utilities")
def version() -> None:
    """Show the CLI version."""
    from star_catalog.cli import __version__

    console.print(f"[bold]Star Catalog CLI[/bold] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
