"""
Star Filters

A small closed set of star predicates used to prune catalogs (for
example with Catalog.retain), and a combinator that chains them.

Every filter is a callable taking a Star and returning a bool, so a plain
function can be used wherever a filter is accepted.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field

import deal

from star_catalog.api.catalogs.star import Star
from star_catalog.api.core.types import Vec3


__all__ = [
    "AcceptAll",
    "BrighterThan",
    "Chain",
    "Select",
    "StarFilter",
    "StarPredicate",
    "WithinAngle",
]


StarPredicate = Callable[[Star], bool]


class StarFilter:
    """Base class for star filters."""

    def __call__(self, star: Star) -> bool:
        raise NotImplementedError

    def then(self, other: StarPredicate) -> Chain:
        """
        Create a filter that applies this filter and, only if it accepts, the other one.

        The second filter is not invoked for stars the first rejects, which
        matters for stateful filters such as Select.
        """
        return Chain(self, other)


@dataclass(frozen=True)
class AcceptAll(StarFilter):
    """Accepts every star."""

    def __call__(self, star: Star) -> bool:
        return True


@dataclass(frozen=True)
class BrighterThan(StarFilter):
    """Accepts stars brighter (smaller magnitude) than a given magnitude."""

    magnitude: float

    def __call__(self, star: Star) -> bool:
        return star.brighter_than(self.magnitude)


@dataclass(frozen=True)
class WithinAngle(StarFilter):
    """
    Accepts stars closer to a direction than a given angle.

    The angle is held as its cosine; a star passes if the cosine of its
    angle to the direction is strictly greater.

    Attributes:
        vector: Unit vector of the direction
        cos_angle: Cosine of the largest accepted angle
    """

    vector: Vec3
    cos_angle: float

    @classmethod
    @deal.pre(lambda cls, vector, angle: 0.0 <= angle <= math.pi, message="Angle must be 0 to pi radians")
    def of_angle(cls, vector: Vec3, angle: float) -> WithinAngle:
        """Create the filter from an angle in radians."""
        return cls(vector, math.cos(angle))

    def __call__(self, star: Star) -> bool:
        return self.vector.dot(star.vector) > self.cos_angle


@dataclass
class Select(StarFilter):
    """
    Rejects the first *skip* stars it sees, accepts the next *limit*, then rejects the rest.

    This filter is stateful; use a fresh instance for each pass.
    """

    skip: int
    limit: int
    _skip_left: int = field(init=False, repr=False)
    _limit_left: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.skip < 0 or self.limit < 0:
            raise ValueError(f"skip and limit must not be negative (skip={self.skip}, limit={self.limit})")
        self._skip_left = self.skip
        self._limit_left = self.limit

    def __call__(self, star: Star) -> bool:
        if self._skip_left > 0:
            self._skip_left -= 1
            return False
        if self._limit_left > 0:
            self._limit_left -= 1
            return True
        return False


@dataclass(frozen=True)
class Chain(StarFilter):
    """Accepts a star only if both filters accept it, evaluating the second only when needed."""

    first: StarPredicate
    second: StarPredicate

    def __call__(self, star: Star) -> bool:
        if not self.first(star):
            return False
        return self.second(star)
