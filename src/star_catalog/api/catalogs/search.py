"""
Geometric Star Searches

Searches over a catalog whose stars have been bucketed by subcube:

- closest_to: the star nearest to a direction
- find_star_triangles: triples of stars whose pairwise angles match three
  target angles within a tolerance

Both searches only visit subcubes that can hold an answer. Two points in
subcubes whose centres are more than SUBCUBE_MAX_ANGLE apart in angle
cannot be closer than that difference permits, so whole subcubes are
rejected with one cosine comparison before any star in them is checked.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import deal

from star_catalog.api.catalogs.star import Star
from star_catalog.api.catalogs.subcube import Subcube
from star_catalog.api.core.constants import (
    ELE_PER_SIDE,
    SUBCUBE_MAX_ANGLE,
    SUBCUBE_SPHERE_SLACK,
    TRIANGLE_RANGE_SLACK,
)
from star_catalog.api.core.types import Vec3
from star_catalog.api.core.utils import cos_range_of_angles


if TYPE_CHECKING:
    from star_catalog.api.catalogs.catalog import Catalog, StarHandle


__all__ = ["closest_to", "closest_to_vector", "find_star_triangles"]


logger = logging.getLogger(__name__)


Triangle = tuple["StarHandle", "StarHandle", "StarHandle"]


@deal.pre(
    lambda catalog, vector, ring=1: catalog.has_derived_data,
    message="Attempt to find a star in a Catalog that has not had its data derived",
)
@deal.pre(lambda catalog, vector, ring=1: ring >= 1, message="Search ring must be at least 1")
def closest_to_vector(catalog: Catalog, vector: Vec3, ring: int = 1) -> tuple[float, StarHandle] | None:
    """
    Find the star closest to a direction.

    Only the subcube containing the direction and the subcubes within
    *ring* steps of it are scanned, so a star further away than that
    neighborhood guarantees is never returned. With the default ring of 1
    the neighborhood covers every star within about 3.5 degrees.

    Args:
        catalog: Catalog with derived data
        vector: Unit vector of the direction
        ring: Number of subcube steps scanned around the direction's subcube

    Returns:
        Tuple of (cosine of the angle to the star, star handle), or None if
        no star lies in the scanned subcubes. Ties keep the first star found.
    """
    closest: tuple[float, StarHandle] | None = None
    for subcube in Subcube.of_vector(vector).iter_range(ring):
        for handle in catalog.stars_in_subcube(subcube):
            c = vector.dot(catalog.star(handle).vector)
            if closest is None or c > closest[0]:
                closest = (c, handle)
    return closest


def closest_to(catalog: Catalog, ra: float, de: float, ring: int = 1) -> tuple[float, StarHandle] | None:
    """
    Find the star closest to a right ascension and declination.

    Args:
        catalog: Catalog with derived data
        ra: Right ascension in radians
        de: Declination in radians
        ring: Number of subcube steps scanned around the direction's subcube

    Returns:
        Tuple of (cosine of the angle to the star, star handle), or None
    """
    return closest_to_vector(catalog, Star.vec_of_ra_de(ra, de), ring)


def _within(c: float, cos_range: tuple[float, float]) -> bool:
    return cos_range[0] <= c <= cos_range[1]


def _subcube_cos_range(angle: float, max_angle_delta: float) -> tuple[float, float]:
    """
    Cosine range accepted between two subcube centres for a target angle between stars.

    The angle range is widened by the most two stars can differ from their
    subcube centres. When the widened range reaches zero there is no upper
    bound, as dot products of unit centres can round to just over 1.
    """
    cell_bound = SUBCUBE_MAX_ANGLE * SUBCUBE_SPHERE_SLACK
    min_angle = angle - max_angle_delta - cell_bound
    max_angle = min(angle + max_angle_delta + cell_bound, math.pi)
    if min_angle <= 0.0:
        return (math.cos(max_angle), math.inf)
    return cos_range_of_angles(min_angle, max_angle)


def _subcube_range(max_angle: float, max_angle_delta: float) -> int:
    """
    Number of subcube steps, on any axis, between two stars at most max_angle + max_angle_delta apart.

    Two such stars differ on each axis by at most their chord length; the
    step count from the subcube angle is kept as a floor.
    """
    by_angle = int(max_angle / SUBCUBE_MAX_ANGLE) + TRIANGLE_RANGE_SLACK
    chord = 2.0 * math.sin(min(max_angle + max_angle_delta, math.pi) / 2.0)
    by_chord = math.ceil(chord * ELE_PER_SIDE / 2.0) + 1
    return max(by_angle, by_chord)


@deal.pre(
    lambda catalog, subcubes, angles_to_find, max_angle_delta: catalog.has_derived_data,
    message="Attempt to find star triangles in a Catalog that has not had its data derived",
)
@deal.pre(
    lambda catalog, subcubes, angles_to_find, max_angle_delta: len(angles_to_find) == 3,
    message="Exactly three angles must be given",
)
@deal.pre(
    lambda catalog, subcubes, angles_to_find, max_angle_delta: all(0.0 <= a <= math.pi for a in angles_to_find),
    message="Triangle angles must be 0 to pi radians",
)
@deal.pre(
    lambda catalog, subcubes, angles_to_find, max_angle_delta: max_angle_delta >= 0.0,
    message="Angle tolerance must not be negative",
)
def find_star_triangles(
    catalog: Catalog,
    subcubes: Iterable[Subcube],
    angles_to_find: Sequence[float],
    max_angle_delta: float,
) -> list[Triangle]:
    """
    Find triples of stars whose pairwise angles match three target angles.

    A triple (s0, s1, s2) is returned when, within max_angle_delta,

    - angle(s0, s1) matches angles_to_find[0]
    - angle(s0, s2) matches angles_to_find[1]
    - angle(s1, s2) matches angles_to_find[2]

    s0 is taken from the given subcubes; s1 and s2 may lie anywhere.
    Triples are produced in subcube order, then catalog order within each
    subcube. Role-permuted duplicates are not removed: with two equal
    target angles both orderings of the matching stars are returned.

    Target angles may be anywhere from 0 to pi; angles above pi/2 are
    accepted, though every subcube within range is then visited.

    Args:
        catalog: Catalog with derived data
        subcubes: Subcubes to take the first star from (e.g. Subcube.iter_all())
        angles_to_find: The three target angles in radians
        max_angle_delta: Tolerance in radians on each angle

    Returns:
        List of (s0, s1, s2) star handle triples
    """
    angles = tuple(angles_to_find)

    # Cosine ranges accepted between stars; the largest angle gives the smallest cosine
    cos_angle_ranges = [
        cos_range_of_angles(max(a - max_angle_delta, 0.0), min(a + max_angle_delta, math.pi)) for a in angles
    ]

    subcube_cos_angle_ranges = [_subcube_cos_range(a, max_angle_delta) for a in angles]
    min_cos = min(subcube_cos_angle_ranges[0][0], subcube_cos_angle_ranges[1][0])
    max_cos = max(subcube_cos_angle_ranges[0][1], subcube_cos_angle_ranges[1][1])

    # Subcubes further than this many steps from the first star's subcube
    # hold only stars at larger angles than any being looked for
    subcube_range = _subcube_range(max(angles), max_angle_delta)
    logger.debug(
        f"Finding star triangles for angles {[round(math.degrees(a), 4) for a in angles]} degrees "
        f"+/- {math.degrees(max_angle_delta):.4f} with subcube range {subcube_range}"
    )

    result: list[Triangle] = []
    for sub0 in subcubes:
        stars0 = catalog.stars_in_subcube(sub0)
        if not stars0:
            continue
        sub0_center = sub0.unit_center()

        # Subcubes close enough to sub0 to hold either the second or third star
        subcubes_to_search: list[Subcube] = []
        for s12 in sub0.iter_range(subcube_range):
            if not catalog.stars_in_subcube(s12):
                continue
            c = s12.cos_angle_on_sphere(sub0_center)
            if c is None or c < min_cos or c > max_cos:
                continue
            subcubes_to_search.append(s12)

        subcubes_for_s0 = [
            s for s in subcubes_to_search if _within(s.unit_center().dot(sub0_center), subcube_cos_angle_ranges[0])
        ]
        subcubes_for_s1: dict[Subcube, list[Subcube]] = {}

        for i0 in stars0:
            s0 = catalog.star(i0)
            for sub1 in subcubes_for_s0:
                for i1 in catalog.stars_in_subcube(sub1):
                    if i1 == i0:
                        continue
                    s1 = catalog.star(i1)
                    if not _within(s0.cos_angle_between(s1), cos_angle_ranges[0]):
                        continue

                    if sub1 not in subcubes_for_s1:
                        sub1_center = sub1.unit_center()
                        subcubes_for_s1[sub1] = [
                            s
                            for s in subcubes_to_search
                            if _within(s.unit_center().dot(sub1_center), subcube_cos_angle_ranges[2])
                            and _within(s.unit_center().dot(sub0_center), subcube_cos_angle_ranges[1])
                        ]
                    for sub2 in subcubes_for_s1[sub1]:
                        for i2 in catalog.stars_in_subcube(sub2):
                            if i2 == i0 or i2 == i1:
                                continue
                            s2 = catalog.star(i2)
                            if not _within(s0.cos_angle_between(s2), cos_angle_ranges[1]):
                                continue
                            if not _within(s1.cos_angle_between(s2), cos_angle_ranges[2]):
                                continue
                            result.append((i0, i1, i2))

    logger.debug(f"Found {len(result)} star triangles")
    return result
