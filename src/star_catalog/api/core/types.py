"""
Type definitions for the star catalog.

This module contains the small value types and the configuration
dataclass used throughout the library.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from typing import NamedTuple

from star_catalog.api.core.exceptions import ConfigurationError


__all__ = ["SearchConfig", "Vec3"]


logger = logging.getLogger(__name__)


class Vec3(NamedTuple):
    """
    A vector in 3D space.

    Star directions are unit vectors; subcube centres are not.

    Attributes:
        x: X component (towards RA 0h, Dec 0)
        y: Y component (towards RA 6h, Dec 0)
        z: Z component (towards the north celestial pole)
    """

    x: float
    y: float
    z: float

    def dot(self, other: Vec3) -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vec3:
        """
        Return the unit vector in the same direction.

        Raises:
            ZeroDivisionError: If the vector has zero length
        """
        length = self.length()
        return Vec3(self.x / length, self.y / length, self.z / length)


def _env_value(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


@dataclass
class SearchConfig:
    """
    Configuration for catalog loading and geometric searches.

    Attributes:
        max_magnitude: Stars fainter than this visual magnitude are dropped on load
        nearest_ring: Number of subcube steps scanned around the query subcube
            when finding the closest star (1 scans the subcube and its 26 neighbors)
        triangle_tolerance_degrees: Default tolerance when matching star triangles
    """

    max_magnitude: float = 6.0
    nearest_ring: int = 1
    triangle_tolerance_degrees: float = 0.1

    def __post_init__(self) -> None:
        if self.nearest_ring < 1:
            raise ConfigurationError(f"nearest_ring must be at least 1, got {self.nearest_ring}")
        if self.triangle_tolerance_degrees < 0.0:
            raise ConfigurationError(
                f"triangle_tolerance_degrees must not be negative, got {self.triangle_tolerance_degrees}"
            )

    @classmethod
    def from_env(cls) -> SearchConfig:
        """
        Build a configuration from environment variables.

        Reads STAR_CATALOG_MAX_MAGNITUDE, STAR_CATALOG_NEAREST_RING and
        STAR_CATALOG_TRIANGLE_TOLERANCE; unset variables keep their defaults.

        Raises:
            ConfigurationError: If a variable is set to an unparseable value
        """
        defaults = cls()
        try:
            config = cls(
                max_magnitude=float(_env_value("STAR_CATALOG_MAX_MAGNITUDE", str(defaults.max_magnitude))),
                nearest_ring=int(_env_value("STAR_CATALOG_NEAREST_RING", str(defaults.nearest_ring))),
                triangle_tolerance_degrees=float(
                    _env_value("STAR_CATALOG_TRIANGLE_TOLERANCE", str(defaults.triangle_tolerance_degrees))
                ),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid star catalog environment setting: {e}") from e
        logger.debug(f"Search configuration from environment: {config}")
        return config
