"""
Unit tests for search.py

Tests the closest star and star triangle searches, comparing the
subcube-pruned searches against brute force over small catalogs.
"""

import itertools
import math
import random
import unittest

from star_catalog.api.catalogs.catalog import Catalog
from star_catalog.api.catalogs.search import closest_to, closest_to_vector, find_star_triangles
from star_catalog.api.catalogs.star import Star
from star_catalog.api.catalogs.subcube import Subcube
from star_catalog.api.core.constants import SUBCUBE_MAX_ANGLE
from star_catalog.api.core.utils import angle_of_cos


def _ready(catalog: Catalog) -> Catalog:
    catalog.sort()
    catalog.derive_data()
    return catalog


def _three_star_catalog() -> Catalog:
    return _ready(
        Catalog(
            [
                Star(1, 0.0, 0.0),
                Star(2, math.radians(30), 0.0),
                Star(3, 0.0, math.radians(30)),
            ]
        )
    )


def _random_catalog(seed: int, count: int, max_angle: float = math.pi) -> Catalog:
    """Stars spread uniformly over a cap of the sphere around ra=0, de=0."""
    rng = random.Random(seed)
    catalog = Catalog()
    star_id = 1
    while len(catalog) < count:
        ra = rng.uniform(0.0, 2 * math.pi)
        de = math.asin(rng.uniform(-1.0, 1.0))
        star = Star(star_id, ra, de)
        if star.vector.x < math.cos(max_angle):
            continue
        catalog.add_star(star)
        star_id += 1
    return _ready(catalog)


def _patch_catalog(seed: int, count: int, half_width: float) -> Catalog:
    """Stars spread over a patch of half_width degrees either side of ra=0, de=0."""
    rng = random.Random(seed)
    return _ready(
        Catalog(
            Star(
                star_id,
                math.radians(rng.uniform(-half_width, half_width)),
                math.radians(rng.uniform(-half_width, half_width)),
            )
            for star_id in range(1, count + 1)
        )
    )


def _angles_between(catalog: Catalog, h0, h1, h2) -> tuple[float, float, float]:
    s0, s1, s2 = catalog[h0], catalog[h1], catalog[h2]
    return tuple(angle_of_cos(p.cos_angle_between(q)) for p, q in ((s0, s1), (s0, s2), (s1, s2)))


def _brute_force_triangles(catalog: Catalog, angles, delta: float) -> set:
    """Every (s0, s1, s2) whose pairwise angles match, checking all triples."""
    cos_ranges = [(math.cos(min(a + delta, math.pi)), math.cos(max(a - delta, 0.0))) for a in angles]

    def within(p, q, i):
        c = p.cos_angle_between(q)
        return cos_ranges[i][0] <= c <= cos_ranges[i][1]

    stars = [(h, catalog[h]) for h in catalog.iter_handles()]
    expected = set()
    for (h0, s0), (h1, s1) in itertools.permutations(stars, 2):
        if not within(s0, s1, 0):
            continue
        for h2, s2 in stars:
            if h2 in (h0, h1):
                continue
            if within(s0, s2, 1) and within(s1, s2, 2):
                expected.add((h0, h1, h2))
    return expected


class TestClosestTo(unittest.TestCase):
    """Test suite for the closest star search"""

    def test_three_star_scenario(self):
        """Test the closest star to a position near the first star"""
        catalog = _three_star_catalog()
        result = closest_to(catalog, math.radians(2), math.radians(1))
        self.assertIsNotNone(result)
        cos_angle, handle = result
        self.assertEqual(catalog[handle].id, 1)
        self.assertAlmostEqual(cos_angle, Star.vec_of_ra_de(math.radians(2), math.radians(1)).x)

    def test_catalog_method(self):
        """Test that the catalog method gives the same result"""
        catalog = _three_star_catalog()
        self.assertEqual(
            catalog.closest_to(math.radians(29), math.radians(1)),
            closest_to(catalog, math.radians(29), math.radians(1)),
        )
        _, handle = catalog.closest_to(math.radians(29), math.radians(1))
        self.assertEqual(catalog[handle].id, 2)

    def test_exact_position(self):
        """Test that a star's own position finds it with cosine 1"""
        catalog = _three_star_catalog()
        cos_angle, handle = closest_to(catalog, 0.0, math.radians(30))
        self.assertEqual(catalog[handle].id, 3)
        self.assertAlmostEqual(cos_angle, 1.0)

    def test_nothing_nearby(self):
        """Test that no star is found far from every star"""
        catalog = _three_star_catalog()
        self.assertIsNone(closest_to(catalog, math.radians(180), 0.0))

    def test_empty_catalog(self):
        """Test that an empty catalog finds nothing"""
        self.assertIsNone(closest_to(_ready(Catalog()), 0.0, 0.0))

    def test_requires_derived_data(self):
        """Test that searching before derive_data fails the contract"""
        catalog = Catalog([Star(1, 0.0, 0.0)])
        catalog.sort()
        with self.assertRaises(Exception):  # noqa: B017  # deal.PreContractError
            closest_to(catalog, 0.0, 0.0)

    def test_ring_must_be_positive(self):
        """Test that a ring of zero fails the contract"""
        with self.assertRaises(Exception):  # noqa: B017  # deal.PreContractError
            closest_to(_three_star_catalog(), 0.0, 0.0, ring=0)

    def test_wider_ring_reaches_further(self):
        """Test that widening the ring finds a star the default neighborhood misses"""
        catalog = _ready(Catalog([Star(1, math.radians(12), 0.0)]))
        self.assertIsNone(closest_to(catalog, 0.0, 0.0))
        result = closest_to(catalog, 0.0, 0.0, ring=4)
        self.assertIsNotNone(result)
        self.assertEqual(catalog[result[1]].id, 1)

    def test_matches_brute_force(self):
        """Test against brute force for positions on a dense catalog"""
        catalog = _random_catalog(seed=7, count=3000)
        rng = random.Random(8)
        for _ in range(200):
            ra = rng.uniform(0.0, 2 * math.pi)
            de = math.asin(rng.uniform(-1.0, 1.0))
            v = Star.vec_of_ra_de(ra, de)
            best = max(catalog.iter_stars(), key=lambda s: v.dot(s.vector))
            result = closest_to_vector(catalog, v)
            if v.dot(best.vector) < math.cos(math.radians(3.0)):
                # Beyond the guaranteed neighborhood a miss is allowed
                continue
            self.assertIsNotNone(result)
            self.assertAlmostEqual(result[0], v.dot(best.vector))


class TestFindStarTriangles(unittest.TestCase):
    """Test suite for the star triangle search"""

    def test_three_star_scenario(self):
        """Test finding the triangle of the three star catalog"""
        catalog = _three_star_catalog()
        a, b, c = (catalog.find_sorted(i) for i in (1, 2, 3))
        angle_ab = angle_of_cos(catalog[a].cos_angle_between(catalog[b]))
        angle_ac = angle_of_cos(catalog[a].cos_angle_between(catalog[c]))
        angle_bc = angle_of_cos(catalog[b].cos_angle_between(catalog[c]))
        self.assertAlmostEqual(math.degrees(angle_ab), 30.0)
        self.assertAlmostEqual(math.degrees(angle_ac), 30.0)
        self.assertAlmostEqual(math.degrees(angle_bc), math.degrees(math.acos(0.75)))

        found = find_star_triangles(catalog, Subcube.iter_all(), (angle_ab, angle_ac, angle_bc), math.radians(0.1))
        self.assertIn((a, b, c), found)
        self.assertIn((a, c, b), found)
        self.assertEqual(len(found), 2)

    def test_no_match(self):
        """Test that angles matching no triple find nothing"""
        catalog = _three_star_catalog()
        angles = (math.radians(10), math.radians(20), math.radians(25))
        self.assertEqual(find_star_triangles(catalog, Subcube.iter_all(), angles, math.radians(0.1)), [])

    def test_tolerance(self):
        """Test that the tolerance decides whether a near miss matches"""
        catalog = _three_star_catalog()
        angles = (math.radians(30.05), math.radians(29.95), math.acos(0.75))
        self.assertEqual(len(catalog.find_star_triangles(Subcube.iter_all(), angles, math.radians(0.1))), 2)
        self.assertEqual(catalog.find_star_triangles(Subcube.iter_all(), angles, math.radians(0.01)), [])

    def test_first_star_subcubes(self):
        """Test that the first star is only taken from the given subcubes"""
        catalog = _three_star_catalog()
        a, b, c = (catalog.find_sorted(i) for i in (1, 2, 3))
        angles = (math.radians(30), math.radians(30), math.acos(0.75))
        found = find_star_triangles(catalog, [catalog[b].subcube], angles, math.radians(0.1))
        self.assertEqual(found, [])
        found = find_star_triangles(catalog, [catalog[a].subcube], angles, math.radians(0.1))
        self.assertEqual(sorted(found), sorted([(a, b, c), (a, c, b)]))

    def test_preconditions(self):
        """Test that invalid arguments fail the contracts"""
        catalog = _three_star_catalog()
        with self.assertRaises(Exception):  # noqa: B017  # deal.PreContractError
            find_star_triangles(catalog, Subcube.iter_all(), (0.1, 0.2), 0.01)
        with self.assertRaises(Exception):  # noqa: B017  # deal.PreContractError
            find_star_triangles(catalog, Subcube.iter_all(), (0.1, 0.2, 4.0), 0.01)
        with self.assertRaises(Exception):  # noqa: B017  # deal.PreContractError
            find_star_triangles(catalog, Subcube.iter_all(), (0.1, 0.2, 0.3), -0.01)
        unindexed = Catalog([Star(1, 0.0, 0.0)])
        with self.assertRaises(Exception):  # noqa: B017  # deal.PreContractError
            find_star_triangles(unindexed, Subcube.iter_all(), (0.1, 0.2, 0.3), 0.01)

    def test_no_false_positives(self):
        """Test that every triangle found satisfies all three angles"""
        catalog = _random_catalog(seed=11, count=150, max_angle=math.radians(25))
        angles = (math.radians(8), math.radians(11), math.radians(13))
        delta = math.radians(0.5)
        found = find_star_triangles(catalog, Subcube.iter_all(), angles, delta)
        self.assertGreater(len(found), 0)
        for h0, h1, h2 in found:
            self.assertEqual(len({h0, h1, h2}), 3)
            s0, s1, s2 = catalog[h0], catalog[h1], catalog[h2]
            for (p, q), angle in zip(((s0, s1), (s0, s2), (s1, s2)), angles):
                self.assertLessEqual(abs(angle_of_cos(p.cos_angle_between(q)) - angle), delta + 1e-9)

    def test_matches_brute_force(self):
        """Test that the search finds exactly the triangles brute force finds"""
        catalog = _random_catalog(seed=12, count=120, max_angle=math.radians(25))
        angles = (math.radians(9), math.radians(12), math.radians(15))
        delta = math.radians(0.4)
        expected = _brute_force_triangles(catalog, angles, delta)
        self.assertGreater(len(expected), 0)
        found = find_star_triangles(catalog, Subcube.iter_all(), angles, delta)
        self.assertEqual(len(found), len(set(found)))
        self.assertEqual(set(found), expected)

    def test_stars_sharing_a_subcube(self):
        """Test a triangle smaller than a subcube, with all three stars in one subcube"""
        catalog = _ready(
            Catalog(
                [
                    Star(1, math.radians(0.5), math.radians(0.5)),
                    Star(2, math.radians(1.0), math.radians(0.5)),
                    Star(3, math.radians(0.5), math.radians(1.0)),
                ]
            )
        )
        a, b, c = (catalog.find_sorted(i) for i in (1, 2, 3))
        self.assertEqual(len({catalog[h].subcube for h in (a, b, c)}), 1)

        angles = _angles_between(catalog, a, b, c)
        found = find_star_triangles(catalog, Subcube.iter_all(), angles, math.radians(0.1))
        self.assertEqual(sorted(found), sorted([(a, b, c), (a, c, b)]))

    def test_dense_small_cap_matches_brute_force(self):
        """Test target angles well under a subcube across a densely filled patch"""
        catalog = _patch_catalog(seed=21, count=60, half_width=1.0)
        angles = (math.radians(0.5), math.radians(1.0), math.radians(1.2))
        delta = math.radians(0.1)
        expected = _brute_force_triangles(catalog, angles, delta)
        self.assertGreater(len(expected), 0)
        found = find_star_triangles(catalog, Subcube.iter_all(), angles, delta)
        self.assertEqual(len(found), len(set(found)))
        self.assertEqual(set(found), expected)

    def test_subcube_angle_boundary_matches_brute_force(self):
        """Test target angles at and just beyond the largest angle within one subcube"""
        catalog = _patch_catalog(seed=22, count=100, half_width=5.0)
        delta = math.radians(0.3)
        for angles in (
            (SUBCUBE_MAX_ANGLE, SUBCUBE_MAX_ANGLE, SUBCUBE_MAX_ANGLE),
            (math.radians(1.0), SUBCUBE_MAX_ANGLE, SUBCUBE_MAX_ANGLE + math.radians(0.3)),
        ):
            with self.subTest(angles=[round(math.degrees(a), 3) for a in angles]):
                expected = _brute_force_triangles(catalog, angles, delta)
                self.assertGreater(len(expected), 0)
                found = find_star_triangles(catalog, Subcube.iter_all(), angles, delta)
                self.assertEqual(set(found), expected)

    def test_stars_many_subcubes_apart(self):
        """Test a pair of stars further apart in subcubes than their angle alone suggests"""
        catalog = _ready(
            Catalog(
                [
                    Star(1, math.radians(-15), 0.0),
                    Star(2, math.radians(15), 0.0),
                    Star(3, 0.0, math.radians(25)),
                ]
            )
        )
        a, b, c = (catalog.find_sorted(i) for i in (1, 2, 3))
        angles = _angles_between(catalog, a, b, c)
        self.assertAlmostEqual(math.degrees(angles[0]), 30.0)

        found = find_star_triangles(catalog, Subcube.iter_all(), angles, math.radians(0.1))
        self.assertEqual(sorted(found), sorted([(a, b, c), (b, a, c)]))

    def test_angles_beyond_right_angle(self):
        """Test that target angles above pi/2 are searched for"""
        catalog = _ready(
            Catalog(
                [
                    Star(1, 0.0, 0.0),
                    Star(2, math.radians(100), 0.0),
                    Star(3, 0.0, math.radians(60)),
                ]
            )
        )
        a, b, c = (catalog.find_sorted(i) for i in (1, 2, 3))
        angles = _angles_between(catalog, a, b, c)
        self.assertGreater(angles[0], math.pi / 2)
        self.assertGreater(angles[2], math.pi / 2)

        found = find_star_triangles(catalog, Subcube.iter_all(), angles, math.radians(0.1))
        self.assertEqual(found, [(a, b, c)])


if __name__ == "__main__":
    unittest.main()
