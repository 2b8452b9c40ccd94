"""Core subpackage for shared constants, types, utilities, and exceptions."""

from star_catalog.api.core.exceptions import (
    ConfigurationError,
    StaleHandleError,
    StarCatalogError,
    StarIdNotFoundError,
    StarNameNotFoundError,
    StarNotFoundError,
)
from star_catalog.api.core.types import SearchConfig, Vec3


__all__ = [
    "ConfigurationError",
    "SearchConfig",
    "StaleHandleError",
    "StarCatalogError",
    "StarIdNotFoundError",
    "StarNameNotFoundError",
    "StarNotFoundError",
    "Vec3",
]
