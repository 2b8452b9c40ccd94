"""Catalogs subpackage: stars, the subcube grid, the catalog index and its searches."""

from star_catalog.api.catalogs.catalog import Catalog, StarHandle
from star_catalog.api.catalogs.search import closest_to, closest_to_vector, find_star_triangles
from star_catalog.api.catalogs.star import Star, StarRecord
from star_catalog.api.catalogs.star_filter import (
    AcceptAll,
    BrighterThan,
    Chain,
    Select,
    StarFilter,
    WithinAngle,
)
from star_catalog.api.catalogs.subcube import Subcube


__all__ = [
    "AcceptAll",
    "BrighterThan",
    "Catalog",
    "Chain",
    "Select",
    "Star",
    "StarFilter",
    "StarHandle",
    "StarRecord",
    "Subcube",
    "WithinAngle",
    "closest_to",
    "closest_to_vector",
    "find_star_triangles",
]
