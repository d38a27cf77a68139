"""Tests for convex hull and angular ordering."""

import math
import random

import pytest
from shapely.geometry import Point, Polygon


def random_points(seed, count=40, spread=100.0):
    rng = random.Random(seed)
    return [[rng.uniform(0, spread), rng.uniform(0, spread)] for _ in range(count)]


class TestConvexHull:
    """Tests for monotone chain hull."""

    def test_square_with_interior_points(self):
        """Test that interior points are removed."""
        from stampmatch.geometry.hull import convex_hull

        points = [[0, 0], [10, 0], [10, 10], [0, 10], [5, 5], [3, 7], [8, 2]]
        hull = convex_hull(points)

        assert sorted(map(tuple, hull)) == [(0, 0), (0, 10), (10, 0), (10, 10)]

    def test_counter_clockwise_order(self):
        """Test that every consecutive triple turns counter-clockwise."""
        from stampmatch.geometry.hull import convex_hull, cross

        hull = convex_hull(random_points(1))
        n = len(hull)
        for i in range(n):
            assert cross(hull[i], hull[(i + 1) % n], hull[(i + 2) % n]) > 0

    def test_collinear_points_reduce_to_endpoints(self):
        """Test that collinear input keeps only the extremes."""
        from stampmatch.geometry.hull import convex_hull

        hull = convex_hull([[0, 0], [1, 1], [2, 2], [3, 3]])

        assert sorted(map(tuple, hull)) == [(0, 0), (3, 3)]

    def test_small_input_returned_unchanged(self):
        """Test that fewer than three points bypass the hull."""
        from stampmatch.geometry.hull import convex_hull

        assert convex_hull([]) == []
        assert convex_hull([[1, 2]]) == [[1, 2]]
        assert convex_hull([[1, 2], [3, 4]]) == [[1, 2], [3, 4]]

    @pytest.mark.parametrize("seed", [0, 7, 42, 1234])
    def test_hull_points_come_from_input(self, seed):
        """Test that the hull never invents points."""
        from stampmatch.geometry.hull import convex_hull

        points = random_points(seed)
        inputs = {tuple(p) for p in points}

        for p in convex_hull(points):
            assert tuple(p) in inputs

    @pytest.mark.parametrize("seed", [0, 7, 42, 1234])
    def test_no_point_outside_hull(self, seed):
        """Test that all inputs lie inside or on the hull polygon."""
        from stampmatch.geometry.hull import convex_hull

        points = random_points(seed)
        hull = convex_hull(points)
        polygon = Polygon(hull)

        for p in points:
            assert polygon.distance(Point(p)) < 1e-9

    @pytest.mark.parametrize("seed", [3, 11, 99])
    def test_hull_is_simple_polygon(self, seed):
        """Test that the hull polygon does not self-intersect."""
        from stampmatch.geometry.hull import convex_hull

        polygon = Polygon(convex_hull(random_points(seed)))

        assert polygon.is_valid
        assert polygon.exterior.is_simple


class TestAngularOrdering:
    """Tests for centroid and polar sorting."""

    def test_centroid_is_mean(self):
        """Test centroid of a rectangle."""
        from stampmatch.geometry.hull import centroid

        assert centroid([[0, 0], [4, 0], [4, 2], [0, 2]]) == [2.0, 1.0]

    def test_centroid_empty(self):
        from stampmatch.geometry.hull import centroid

        assert centroid([]) == [0.0, 0.0]

    def test_sorted_by_increasing_angle(self):
        """Test that angles around the centroid increase monotonically."""
        from stampmatch.geometry.hull import centroid, sort_by_angle

        points = random_points(5, count=12)
        center = centroid(points)
        ordered = sort_by_angle(points, center)

        angles = [math.atan2(p[1] - center[1], p[0] - center[0]) for p in ordered]
        assert angles == sorted(angles)

    @pytest.mark.parametrize("seed", [2, 8, 21])
    def test_sort_is_idempotent(self, seed):
        """Test that re-sorting an ordered outline is a no-op."""
        from stampmatch.geometry.hull import centroid, convex_hull, sort_by_angle

        hull = convex_hull(random_points(seed))
        center = centroid(hull)
        once = sort_by_angle(hull, center)

        assert sort_by_angle(once, center) == once
