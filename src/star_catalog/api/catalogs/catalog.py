"""
Star Catalog

The catalog holds an indexed (and possibly named) list of stars, which can
be searched by id, by name, or geometrically.

Lifecycle:

1. Stars are added with add_star() (or pruned with retain())
2. sort() orders the stars by id, making find_sorted() available
3. Names are attached with add_name() / add_names()
4. derive_data() buckets the stars by subcube for geometric searches

Adding, retaining or sorting stars moves them, so each of these
operations invalidates the derived data, the name table and every
StarHandle issued before it.
"""

from __future__ import annotations

import bisect
import itertools
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

import deal

from star_catalog.api.catalogs.search import closest_to, find_star_triangles
from star_catalog.api.catalogs.star import Star
from star_catalog.api.catalogs.subcube import Subcube
from star_catalog.api.core.constants import NUM_SUBCUBES
from star_catalog.api.core.exceptions import (
    StaleHandleError,
    StarIdNotFoundError,
    StarNameNotFoundError,
)


__all__ = ["Catalog", "StarHandle"]


logger = logging.getLogger(__name__)

# Tags each catalog so handles cannot be used with another catalog
_catalog_ids = itertools.count(1)


@dataclass(frozen=True, order=True)
class StarHandle:
    """
    An opaque reference to a star in a Catalog.

    A handle is only valid for the catalog that issued it, and only until
    the next add_star(), retain() or sort() on that catalog. Using it with
    another catalog, or afterwards, raises StaleHandleError.
    """

    _slot: int
    _generation: int
    _catalog: int


class Catalog:
    """
    A catalog of stars.

    When searching by id the stars must be sorted; geometric searches
    need the subcube data to have been derived.

    Example:
        >>> catalog = Catalog()
        >>> catalog.add_star(Star(32349, 1.7677, -0.2917, 8.6, -1.44, 0.0))
        >>> catalog.sort()
        >>> catalog.add_names([(32349, "Sirius")])
        >>> catalog.derive_data()
        >>> catalog[catalog.find_name("Sirius")].id
        32349
    """

    def __init__(self, stars: Iterable[Star] = ()) -> None:
        self._id = next(_catalog_ids)
        self._stars: list[Star] = []
        self._sorted = False
        self._generation = 0
        self._named_stars: dict[str, StarHandle] = {}
        self._subcubes: list[tuple[StarHandle, ...]] | None = None
        for star in stars:
            self.add_star(star)

    def __len__(self) -> int:
        return len(self._stars)

    def __repr__(self) -> str:
        return (
            f"Catalog(stars={len(self._stars)}, sorted={self._sorted}, "
            f"named={len(self._named_stars)}, derived={self.has_derived_data})"
        )

    @property
    def is_empty(self) -> bool:
        """True if the catalog contains no stars."""
        return not self._stars

    @property
    def is_sorted(self) -> bool:
        """True if the catalog is sorted by id (and so ready for names and id lookups)."""
        return self._sorted

    @property
    def has_derived_data(self) -> bool:
        """True if the stars have been bucketed by subcube."""
        return self._subcubes is not None

    def _invalidate(self) -> None:
        """Drop derived data and names, and retire every handle issued so far."""
        self._generation += 1
        self._subcubes = None
        if self._named_stars:
            logger.debug(f"Dropping {len(self._named_stars)} star names as catalog handles are invalidated")
            self._named_stars.clear()

    def _handle(self, slot: int) -> StarHandle:
        return StarHandle(slot, self._generation, self._id)

    def _slot_of(self, handle: StarHandle) -> int:
        if handle._catalog != self._id:
            raise StaleHandleError("Star handle was issued by another catalog")
        if handle._generation != self._generation or not 0 <= handle._slot < len(self._stars):
            raise StaleHandleError(
                f"Star handle from generation {handle._generation} used with catalog generation {self._generation}"
            )
        return handle._slot

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_star(self, star: Star) -> None:
        """
        Add a star to the catalog.

        This clears any derived data and marks the catalog as unsorted.
        """
        self._invalidate()
        self._sorted = False
        self._stars.append(star)

    def retain(self, predicate: Callable[[Star], bool]) -> None:
        """
        Keep only the stars that match a predicate; the rest are dropped.

        This clears the derived data and the sorted flag; geometric
        searching is not allowed again until derive_data() is invoked.

        Args:
            predicate: Callable returning True for stars to keep (e.g. a StarFilter)
        """
        before = len(self._stars)
        self._invalidate()
        self._sorted = False
        self._stars = [star for star in self._stars if predicate(star)]
        logger.debug(f"Retained {len(self._stars)} of {before} stars")

    def sort(self) -> None:
        """
        Sort the stars by id so that they can be found with find_sorted().

        The sort is stable; derived data, names and handles are invalidated.
        """
        self._invalidate()
        self._stars.sort(key=lambda star: star.id)
        self._sorted = True
        duplicates = sum(1 for a, b in zip(self._stars, self._stars[1:]) if a.id == b.id)
        if duplicates:
            logger.warning(f"Catalog contains {duplicates} duplicate star ids; id lookups are ambiguous")
        logger.debug(f"Sorted catalog of {len(self._stars)} stars")

    def derive_data(self) -> None:
        """
        Derive the per-subcube star lists used by geometric searches.

        Does nothing if the data has already been derived. This does not
        change the sorting; usually the catalog is sorted first.
        """
        if self._subcubes is not None:
            return
        buckets: list[list[StarHandle]] = [[] for _ in range(NUM_SUBCUBES)]
        for slot, star in enumerate(self._stars):
            buckets[star.subcube.index].append(self._handle(slot))
        self._subcubes = [tuple(bucket) for bucket in buckets]
        occupied = sum(1 for bucket in buckets if bucket)
        logger.debug(f"Derived subcube data: {len(self._stars)} stars in {occupied} of {NUM_SUBCUBES} subcubes")

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def add_name(self, handle: StarHandle, name: str) -> None:
        """
        Name a single star in the catalog.

        Args:
            handle: Handle of the star (e.g. from find_sorted())
            name: Name to give it

        Raises:
            StaleHandleError: If the handle is no longer valid
        """
        self._slot_of(handle)
        self._named_stars[name] = handle

    def add_names(self, id_names: Iterable[tuple[int, str]], ignore_not_found: bool = False) -> None:
        """
        Name a set of stars in the catalog, from their ids.

        The catalog must have been sorted beforehand. Names added before a
        failure are kept.

        Args:
            id_names: Pairs of (star id, name)
            ignore_not_found: Skip ids that are not in the catalog instead of failing

        Raises:
            StarIdNotFoundError: If an id is not found and ignore_not_found is False
        """
        for star_id, name in id_names:
            handle = self.find_sorted(star_id)
            if handle is None:
                if ignore_not_found:
                    continue
                raise StarIdNotFoundError(star_id)
            self._named_stars[name] = handle

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @deal.pre(lambda self, star_id: self.is_sorted, message="Attempt to find_sorted when Catalog was not sorted")
    def find_sorted(self, star_id: int) -> StarHandle | None:
        """
        Find a star from its id.

        The catalog must have been sorted beforehand.

        Args:
            star_id: Id of the star

        Returns:
            Handle of the star, or None if no star has that id
        """
        slot = bisect.bisect_left(self._stars, star_id, key=lambda star: star.id)
        if slot < len(self._stars) and self._stars[slot].id == star_id:
            return self._handle(slot)
        return None

    def find_name(self, name: str) -> StarHandle | None:
        """Find a star from its name; returns None if the name is unknown."""
        return self._named_stars.get(name)

    def find_id_or_name(self, text: str) -> StarHandle:
        """
        Find a star from a string, which might be an id or a name.

        Args:
            text: Decimal star id, or a star name

        Returns:
            Handle of the star

        Raises:
            StarIdNotFoundError: If text is an id that is not in the catalog
            StarNameNotFoundError: If text is a name that is not known
        """
        try:
            star_id = int(text)
        except ValueError:
            handle = self.find_name(text)
            if handle is None:
                raise StarNameNotFoundError(text) from None
            return handle
        handle = self.find_sorted(star_id)
        if handle is None:
            raise StarIdNotFoundError(star_id)
        return handle

    def star(self, handle: StarHandle) -> Star:
        """
        Get the star for a handle.

        Raises:
            StaleHandleError: If the handle is no longer valid
        """
        return self._stars[self._slot_of(handle)]

    @deal.pre(
        lambda self, subcube: self.has_derived_data,
        message="Attempt to use subcube data of a Catalog that has not had its data derived",
    )
    def stars_in_subcube(self, subcube: Subcube) -> tuple[StarHandle, ...]:
        """
        Get the handles of the stars within a subcube.

        The catalog must have had its data derived beforehand.
        """
        assert self._subcubes is not None
        return self._subcubes[subcube.index]

    def __getitem__(self, key: StarHandle | Subcube) -> Star | tuple[StarHandle, ...]:
        if isinstance(key, Subcube):
            return self.stars_in_subcube(key)
        return self.star(key)

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def iter_stars(self) -> Iterator[Star]:
        """Iterate over all the stars in catalog order."""
        return iter(self._stars)

    def iter_handles(self) -> Iterator[StarHandle]:
        """Iterate over handles of all the stars in catalog order."""
        generation = self._generation
        return (StarHandle(slot, generation, self._id) for slot in range(len(self._stars)))

    def iter_within_subcubes(self, subcubes: Iterable[Subcube]) -> Iterator[Star]:
        """
        Iterate over the stars within a set of subcubes.

        Stars are produced subcube by subcube, in catalog order within each.
        The catalog must have had its data derived beforehand.
        """
        for subcube in subcubes:
            for handle in self.stars_in_subcube(subcube):
                yield self._stars[handle._slot]

    # ------------------------------------------------------------------
    # Geometric searches
    # ------------------------------------------------------------------

    def closest_to(self, ra: float, de: float, ring: int = 1) -> tuple[float, StarHandle] | None:
        """
        Find the closest star to a right ascension and declination in radians.

        See search.closest_to(); the catalog must have had its data derived.
        """
        return closest_to(self, ra, de, ring)

    def find_star_triangles(
        self,
        subcubes: Iterable[Subcube],
        angles_to_find: tuple[float, float, float],
        max_angle_delta: float,
    ) -> list[tuple[StarHandle, StarHandle, StarHandle]]:
        """
        Find triples of stars separated by three angles.

        See search.find_star_triangles(); the catalog must have had its data derived.
        """
        return find_star_triangles(self, subcubes, angles_to_find, max_angle_delta)
