"""
Star Records

A star is identified by its id and located by right ascension and
declination. Its unit vector and subcube are derived once on construction
and are never stored when the star is written out.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from star_catalog.api.catalogs.subcube import Subcube
from star_catalog.api.core.types import Vec3


__all__ = ["Star", "StarRecord"]


StarRecord = tuple[int, float, float, float, float, float]
"""The six stored fields of a star: (id, ra, de, distance, magnitude, color_index)."""


def _f32(value: float) -> float:
    return float(np.float32(value))


@dataclass(frozen=True)
class Star:
    """
    Represents a star with its position and photometric data.

    Attributes:
        id: Catalog identifier (e.g. Hipparcos number), unique within a catalog
        ra: Right ascension in radians
        de: Declination in radians
        distance: Distance in light years (single precision)
        magnitude: Visual magnitude, smaller is brighter (single precision)
        color_index: B-V color index (single precision)
        vector: Unit vector of the star direction (derived)
        subcube: Subcube containing the star (derived)
    """

    id: int
    ra: float
    de: float
    distance: float = 0.0
    magnitude: float = 0.0
    color_index: float = 0.0
    vector: Vec3 = field(init=False, repr=False, compare=False)
    subcube: Subcube = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ra", float(self.ra))
        object.__setattr__(self, "de", float(self.de))
        object.__setattr__(self, "distance", _f32(self.distance))
        object.__setattr__(self, "magnitude", _f32(self.magnitude))
        object.__setattr__(self, "color_index", _f32(self.color_index))
        vector = self.vec_of_ra_de(self.ra, self.de)
        object.__setattr__(self, "vector", vector)
        object.__setattr__(self, "subcube", Subcube.of_vector(vector))

    @staticmethod
    def vec_of_ra_de(ra: float, de: float) -> Vec3:
        """
        Calculate a unit vector from a right ascension and declination.

        Args:
            ra: Right ascension in radians
            de: Declination in radians

        Returns:
            Unit vector (cos ra.cos de, sin ra.cos de, sin de)
        """
        cos_de = math.cos(de)
        return Vec3(math.cos(ra) * cos_de, math.sin(ra) * cos_de, math.sin(de))

    @classmethod
    def from_record(cls, record: StarRecord) -> Star:
        """Create a star from its six stored fields, deriving its vector and subcube."""
        star_id, ra, de, distance, magnitude, color_index = record
        return cls(int(star_id), ra, de, distance, magnitude, color_index)

    def to_record(self) -> StarRecord:
        """The six stored fields of the star; derived values are not included."""
        return (self.id, self.ra, self.de, self.distance, self.magnitude, self.color_index)

    def brighter_than(self, magnitude: float) -> bool:
        """Return True if the star is brighter (smaller magnitude) than the given magnitude."""
        return self.magnitude < magnitude

    def cos_angle_between(self, other: Star) -> float:
        """Cosine of the angle between this star and another."""
        return self.vector.dot(other.vector)
