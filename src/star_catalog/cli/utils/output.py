"""
CLI Output Utilities

Rich console formatting utilities for CLI output.
"""

import json
import math
from collections.abc import Iterable, Mapping
from typing import Any

from rich.console import Console
from rich.table import Table

from star_catalog.api.catalogs.star import Star
from star_catalog.api.core.utils import format_dec, format_ra


# Create console with unicode detection
console = Console()

_use_unicode = console.is_terminal and not console.legacy_windows


def print_success(message: str) -> None:
    """Print success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print error message in red."""
    console.print(f"[red]✗[/red] {message}", style="red")


def print_warning(message: str) -> None:
    """Print warning message in yellow."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_info(message: str) -> None:
    """Print info message in blue."""
    info_icon = "ℹ" if _use_unicode else "i"
    console.print(f"[blue]{info_icon}[/blue] {message}")


def print_json(data: dict[str, Any]) -> None:
    """Print data as JSON."""
    console.print_json(json.dumps(data))


def star_to_dict(star: Star, name: str | None = None) -> dict[str, Any]:
    """
    Convert a star to a JSON-friendly dictionary.

    Angles are given in degrees.
    """
    return {
        "id": star.id,
        "name": name,
        "ra_degrees": round(math.degrees(star.ra), 6),
        "dec_degrees": round(math.degrees(star.de), 6),
        "distance": star.distance,
        "magnitude": star.magnitude,
        "color_index": star.color_index,
    }


def print_star_table(title: str, stars: Iterable[Star], names: Mapping[int, str] | None = None) -> None:
    """
    Print stars in a formatted table.

    Args:
        title: Table title
        stars: Stars to list, in display order
        names: Optional mapping of star id to name
    """
    names = names or {}
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Id", style="cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Right Ascension", style="green")
    table.add_column("Declination", style="green")
    table.add_column("Magnitude", justify="right")
    table.add_column("Distance (ly)", justify="right", style="dim")

    for star in stars:
        table.add_row(
            str(star.id),
            names.get(star.id, ""),
            format_ra(star.ra),
            format_dec(star.de),
            f"{star.magnitude:.2f}",
            f"{star.distance:.1f}",
        )

    console.print(table)
