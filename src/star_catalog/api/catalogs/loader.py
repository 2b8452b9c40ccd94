"""
Catalog Loading

Builds catalogs from rows of the six stored star fields
(id, ra, de, distance, magnitude, color_index), with angles in radians,
and reads id/name pairs for naming stars.

Files are JSON: a catalog file is a list of six-element rows, and a names
file is a list of [id, name] pairs.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from returns.result import Failure, Result, Success

from star_catalog.api.catalogs.catalog import Catalog
from star_catalog.api.catalogs.star import Star
from star_catalog.api.core.exceptions import CatalogFileNotFoundError, InvalidCatalogFormatError


__all__ = [
    "load_stars",
    "read_catalog",
    "read_names",
    "star_from_record",
    "write_catalog",
]


logger = logging.getLogger(__name__)


def star_from_record(row: Sequence[Any]) -> Result[Star, str]:
    """
    Decode one six-field row into a Star.

    Args:
        row: (id, ra, de, distance, magnitude, color_index)

    Returns:
        Success with the Star or Failure with an error message
    """
    if isinstance(row, (str, bytes)) or not isinstance(row, Sequence) or len(row) != 6:
        return Failure(f"Expected a row of 6 fields, got {row!r}")
    star_id = row[0]
    if isinstance(star_id, bool) or not isinstance(star_id, int) or star_id < 0:
        return Failure(f"Star id must be a non-negative integer, got {star_id!r}")
    try:
        ra, de, distance, magnitude, color_index = (float(v) for v in row[1:])
    except (TypeError, ValueError) as e:
        return Failure(f"Failed to decode fields of star {star_id}: {e}")
    if not (math.isfinite(ra) and math.isfinite(de)):
        return Failure(f"Star {star_id} has a non-finite position")
    return Success(Star.from_record((star_id, ra, de, distance, magnitude, color_index)))


def load_stars(rows: Iterable[Sequence[Any]], catalog: Catalog) -> int:
    """
    Add the stars decoded from rows to a catalog.

    Rows that cannot be decoded are logged and skipped.

    Args:
        rows: Six-field star rows
        catalog: Catalog to add the stars to

    Returns:
        Number of rows skipped
    """
    skipped = 0
    for row in rows:
        result = star_from_record(row)
        if isinstance(result, Failure):
            logger.warning(f"Skipping catalog row: {result.failure()}")
            skipped += 1
            continue
        catalog.add_star(result.unwrap())
    return skipped


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise CatalogFileNotFoundError(f"Could not find {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidCatalogFormatError(f"{path} is not valid JSON: {e}") from e


def read_catalog(path: Path, max_magnitude: float | None = None) -> Catalog:
    """
    Read a catalog file into a new, unsorted Catalog.

    Args:
        path: JSON file holding a list of six-field star rows
        max_magnitude: If given, keep only stars brighter than this

    Returns:
        The catalog

    Raises:
        CatalogFileNotFoundError: If the file does not exist
        InvalidCatalogFormatError: If the file is not a JSON list
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise InvalidCatalogFormatError(f"{path} must hold a list of star rows")
    catalog = Catalog()
    skipped = load_stars(data, catalog)
    if max_magnitude is not None:
        catalog.retain(lambda star: star.brighter_than(max_magnitude))
    logger.info(f"Loaded {len(catalog)} stars from {path} ({skipped} rows skipped)")
    return catalog


def read_names(path: Path) -> list[tuple[int, str]]:
    """
    Read a names file of [id, name] pairs.

    Raises:
        CatalogFileNotFoundError: If the file does not exist
        InvalidCatalogFormatError: If the file does not hold [id, name] pairs
    """
    data = _read_json(path)
    if not isinstance(data, list):
        raise InvalidCatalogFormatError(f"{path} must hold a list of [id, name] pairs")
    id_names: list[tuple[int, str]] = []
    for entry in data:
        if (
            not isinstance(entry, list)
            or len(entry) != 2
            or isinstance(entry[0], bool)
            or not isinstance(entry[0], int)
            or not isinstance(entry[1], str)
        ):
            raise InvalidCatalogFormatError(f"Invalid name entry {entry!r} in {path}")
        id_names.append((entry[0], entry[1]))
    logger.debug(f"Read {len(id_names)} star names from {path}")
    return id_names


def write_catalog(catalog: Catalog, path: Path) -> int:
    """
    Write a catalog as a JSON list of six-field star rows.

    Only the stored fields are written; vectors and subcubes are derived
    again when the file is read back.

    Args:
        catalog: Catalog to write
        path: Output file

    Returns:
        Number of stars written
    """
    rows = [list(star.to_record()) for star in catalog.iter_stars()]
    with path.open("w", encoding="utf-8") as f:
        json.dump(rows, f)
    logger.info(f"Wrote {len(rows)} stars to {path}")
    return len(rows)
