"""
Geometric Constants

Constants describing the subcube grid that partitions the cube enclosing
the unit sphere, and the angular bounds derived from it.
"""

import math
from typing import Final


__all__ = [
    "ELE_PER_SIDE",
    "ELE_PER_SIDE2",
    "NUM_SUBCUBES",
    "SUBCUBE_EPSILON",
    "SUBCUBE_HALF_DIAGONAL_ANGLE",
    "SUBCUBE_MAX_ANGLE",
    "SUBCUBE_RADIUS",
    "SUBCUBE_SIZE",
    "SUBCUBE_SPHERE_SLACK",
    "TRIANGLE_RANGE_SLACK",
]


# Grid resolution
#
# With 32 elements per side each subcube has side r/16. The angle subtended
# by the diagonal of a subcube at the centre of the sphere is at most
# 2.asin(sqrt(3)/32), or about 6.2 degrees.
ELE_PER_SIDE: Final[int] = 32
"""Number of subcubes along each axis of the enclosing cube."""

ELE_PER_SIDE2: Final[int] = ELE_PER_SIDE * ELE_PER_SIDE
"""Number of subcubes in one z-slice of the grid."""

NUM_SUBCUBES: Final[int] = ELE_PER_SIDE * ELE_PER_SIDE * ELE_PER_SIDE
"""Total number of subcubes in the grid."""

SUBCUBE_EPSILON: Final[float] = 1e-6
"""Scale reduction so that a coordinate of exactly 1.0 maps to the last subcube."""

SUBCUBE_SIZE: Final[float] = 2.0 / ELE_PER_SIDE
"""Side length of a subcube (the enclosing cube spans -1 to 1)."""

SUBCUBE_RADIUS: Final[float] = math.sqrt(3.0) * SUBCUBE_SIZE / 2.0
"""Distance from the centre of a subcube to any of its corners."""

SUBCUBE_HALF_DIAGONAL_ANGLE: Final[float] = math.asin(SUBCUBE_RADIUS)
"""Largest angle (radians) between a subcube centre and a point of the subcube on the sphere."""

SUBCUBE_MAX_ANGLE: Final[float] = 2.0 * SUBCUBE_HALF_DIAGONAL_ANGLE
"""Largest angle (radians) between two points lying in the same subcube."""

SUBCUBE_SPHERE_SLACK: Final[float] = 1.001
"""Widening applied to the radius band used when deciding if a subcube touches the sphere."""

TRIANGLE_RANGE_SLACK: Final[int] = 3
"""Extra subcube steps searched around a subcube when matching star triangles."""
