"""
Star Catalog

An in-memory index of stars on the celestial sphere that answers two
geometric questions quickly:

- which star is closest to a given direction
- which triples of stars are separated by three given angles

Stars are bucketed into a 32x32x32 grid of subcubes enclosing the unit
sphere, and searches reject whole subcubes before checking any star.

Example:
    >>> import math
    >>> from star_catalog import Catalog, Star
    >>> catalog = Catalog()
    >>> catalog.add_star(Star(1, 0.0, 0.0))
    >>> catalog.add_star(Star(2, math.radians(30), 0.0))
    >>> catalog.sort()
    >>> catalog.derive_data()
    >>> cos_angle, handle = catalog.closest_to(math.radians(2), math.radians(1))
    >>> catalog[handle].id
    1
"""

from star_catalog.api.catalogs import (
    AcceptAll,
    BrighterThan,
    Catalog,
    Chain,
    Select,
    Star,
    StarFilter,
    StarHandle,
    Subcube,
    WithinAngle,
    closest_to,
    closest_to_vector,
    find_star_triangles,
)
from star_catalog.api.core import (
    SearchConfig,
    StaleHandleError,
    StarCatalogError,
    StarIdNotFoundError,
    StarNameNotFoundError,
    StarNotFoundError,
    Vec3,
)


__version__ = "0.1.0"

__all__ = [
    "AcceptAll",
    "BrighterThan",
    "Catalog",
    "Chain",
    "SearchConfig",
    "Select",
    "StaleHandleError",
    "Star",
    "StarCatalogError",
    "StarFilter",
    "StarHandle",
    "StarIdNotFoundError",
    "StarNameNotFoundError",
    "StarNotFoundError",
    "Subcube",
    "Vec3",
    "WithinAngle",
    "__version__",
    "closest_to",
    "closest_to_vector",
    "find_star_triangles",
]
