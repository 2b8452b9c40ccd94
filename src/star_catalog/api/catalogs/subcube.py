"""
Subcube Grid

The cube enclosing the unit sphere (-1 to 1 on every axis) is divided
into ELE_PER_SIDE^3 axis-aligned subcubes. Every star direction maps to
exactly one subcube, and geometric searches only visit the subcubes that
can possibly hold an answer.

Subcubes are enumerated in raster order (x fastest, then y, then z), so
iteration order, and hence the order of search results, is reproducible.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

import deal
from cachetools import LRUCache, cached

from star_catalog.api.core.constants import (
    ELE_PER_SIDE,
    ELE_PER_SIDE2,
    NUM_SUBCUBES,
    SUBCUBE_EPSILON,
    SUBCUBE_HALF_DIAGONAL_ANGLE,
    SUBCUBE_RADIUS,
    SUBCUBE_SPHERE_SLACK,
)
from star_catalog.api.core.types import Vec3


__all__ = ["Subcube"]


logger = logging.getLogger(__name__)


def _axis_index(c: float) -> int:
    """Subcube index along one axis; the clamp happens before scaling."""
    c = max(-1.0, min(1.0, c))
    return math.floor((c + 1.0) / 2.0 * ELE_PER_SIDE * (1.0 - SUBCUBE_EPSILON))


def _axis_center(i: int) -> float:
    return (2 * i + 1) / ELE_PER_SIDE - 1.0


@cached(LRUCache(maxsize=NUM_SUBCUBES))
def _unit_center(index: int) -> Vec3:
    return Subcube(index).center().normalize()


@cached(LRUCache(maxsize=NUM_SUBCUBES))
def _may_be_on_sphere(index: int) -> bool:
    length = Subcube(index).center().length()
    return abs(length - 1.0) <= SUBCUBE_RADIUS * SUBCUBE_SPHERE_SLACK


@dataclass(frozen=True, order=True)
class Subcube:
    """
    One cell of the subcube grid, identified by its packed index.

    The index packs the three axis indices as x + y*N + z*N^2 where N is
    ELE_PER_SIDE.

    Attributes:
        index: Packed subcube index in [0, NUM_SUBCUBES)
    """

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index < NUM_SUBCUBES:
            raise ValueError(f"Subcube index {self.index} out of range 0..{NUM_SUBCUBES - 1}")

    def __int__(self) -> int:
        return self.index

    @classmethod
    @deal.pre(
        lambda cls, x, y, z: all(0 <= i < ELE_PER_SIDE for i in (x, y, z)),
        message="Subcube axis indices must be within the grid",
    )
    def of_xyz(cls, x: int, y: int, z: int) -> Subcube:
        """Create a subcube from its three axis indices."""
        return cls(x + y * ELE_PER_SIDE + z * ELE_PER_SIDE2)

    @classmethod
    def of_vector(cls, v: Vec3) -> Subcube:
        """
        Find the subcube containing a direction.

        Each coordinate is clamped to [-1, 1] before being mapped to [0, 1]
        and scaled by ELE_PER_SIDE * (1 - SUBCUBE_EPSILON), so a coordinate
        of exactly 1.0 lands in the last subcube rather than off the grid.

        Args:
            v: Direction (normally a unit vector)

        Returns:
            The subcube containing the direction
        """
        return cls.of_xyz(_axis_index(v[0]), _axis_index(v[1]), _axis_index(v[2]))

    @property
    def xyz(self) -> tuple[int, int, int]:
        """The (x, y, z) axis indices of the subcube."""
        return (
            self.index % ELE_PER_SIDE,
            (self.index // ELE_PER_SIDE) % ELE_PER_SIDE,
            self.index // ELE_PER_SIDE2,
        )

    def center(self) -> Vec3:
        """Geometric centre of the subcube (not a unit vector)."""
        x, y, z = self.xyz
        return Vec3(_axis_center(x), _axis_center(y), _axis_center(z))

    def unit_center(self) -> Vec3:
        """Direction of the subcube centre as a unit vector."""
        return _unit_center(self.index)

    @staticmethod
    def half_diagonal_angle() -> float:
        """Largest angle (radians) between a subcube centre and a point of the subcube on the sphere."""
        return SUBCUBE_HALF_DIAGONAL_ANGLE

    def may_be_on_sphere(self) -> bool:
        """
        Return True if the subcube may contain points of the unit sphere.

        The subcube centre must lie within the subcube radius of the sphere
        surface; the band is widened slightly so border subcubes are never
        excluded by rounding.
        """
        return _may_be_on_sphere(self.index)

    def cos_angle_on_sphere(self, v: Vec3) -> float | None:
        """
        Cosine of the angle between the subcube centre and a unit vector.

        Args:
            v: Unit vector to compare against

        Returns:
            The cosine, or None if the subcube cannot touch the unit sphere
        """
        if not self.may_be_on_sphere():
            return None
        return self.unit_center().dot(v)

    @staticmethod
    def iter_all() -> Iterator[Subcube]:
        """Iterate over every subcube of the grid in raster order."""
        for index in range(NUM_SUBCUBES):
            yield Subcube(index)

    @deal.pre(lambda self, steps: steps >= 0, message="Subcube range must not be negative")
    def iter_range(self, steps: int) -> Iterator[Subcube]:
        """
        Iterate over the cuboid of subcubes within a number of steps on every axis.

        The cuboid is clipped at the grid boundary and includes this subcube.

        Args:
            steps: Maximum distance in subcubes along each axis

        Yields:
            Subcubes in raster order (x fastest, then y, then z)
        """
        x0, y0, z0 = self.xyz
        xs = range(max(0, x0 - steps), min(ELE_PER_SIDE, x0 + steps + 1))
        ys = range(max(0, y0 - steps), min(ELE_PER_SIDE, y0 + steps + 1))
        zs = range(max(0, z0 - steps), min(ELE_PER_SIDE, z0 + steps + 1))
        for z in zs:
            for y in ys:
                for x in xs:
                    yield Subcube(x + y * ELE_PER_SIDE + z * ELE_PER_SIDE2)

    def iter_neighbors(self) -> Iterator[Subcube]:
        """
        Iterate over the up to 26 subcubes sharing a face, edge or corner with this one.

        Neighbors outside the grid are skipped; the subcube itself is not included.
        """
        for s in self.iter_range(1):
            if s != self:
                yield s
