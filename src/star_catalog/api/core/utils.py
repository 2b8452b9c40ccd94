"""
Utility functions for angle conversions and formatting.

Angles are held in radians throughout the library; these helpers convert
at the edges (command line input and display).
"""

from __future__ import annotations

import math

import deal


__all__ = [
    "angle_of_cos",
    "cos_range_of_angles",
    "format_dec",
    "format_ra",
]


def angle_of_cos(cos_angle: float) -> float:
    """
    Angle in radians for a cosine, tolerant of rounding just outside [-1, 1].

    Args:
        cos_angle: Cosine of the angle (usually a dot product of unit vectors)

    Returns:
        Angle in radians in [0, pi]
    """
    return math.acos(max(-1.0, min(1.0, cos_angle)))


@deal.pre(lambda min_angle, max_angle: min_angle <= max_angle, message="Angle range must not be inverted")
@deal.post(lambda result: result[0] <= result[1])
def cos_range_of_angles(min_angle: float, max_angle: float) -> tuple[float, float]:
    """
    Convert an angle range in [0, pi] to the matching cosine range.

    Cosine decreases over [0, pi], so the ends swap: the smallest cosine
    comes from the largest angle.

    Args:
        min_angle: Smallest angle in radians
        max_angle: Largest angle in radians

    Returns:
        Tuple of (min_cos, max_cos)
    """
    return (math.cos(max_angle), math.cos(min_angle))


def format_ra(ra: float) -> str:
    """
    Format a right ascension given in radians.

    Returns:
        Formatted string (e.g., "12h 30m 45.6s")
    """
    # Work in tenths of a second so rounding carries into minutes and hours
    tenths = round(math.degrees(ra) / 15.0 * 36000) % (24 * 36000)
    h, rest = divmod(tenths, 36000)
    m, t = divmod(rest, 600)
    return f"{h:02d}h {m:02d}m {t / 10:04.1f}s"


def format_dec(de: float) -> str:
    """
    Format a declination given in radians.

    Returns:
        Formatted string (e.g., "+45° 30' 15.2\"")
    """
    degrees = math.degrees(de)
    sign = "+" if degrees >= 0 else "-"
    tenths = round(abs(degrees) * 36000)
    d, rest = divmod(tenths, 36000)
    m, t = divmod(rest, 600)
    return f"{sign}{d:02d}° {m:02d}' {t / 10:04.1f}\""
