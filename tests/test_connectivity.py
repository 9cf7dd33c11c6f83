"""Tests for walls/connectivity.py: connections, overlaps and proximity."""
import math
import pytest
from geom2d.types import BBox
from walls.types import Wall, Connection
from walls.connectivity import (
    find_connected_at_point, touches_any_endpoint,
    is_walls_collinear, is_fully_overlapping, is_corner_overlap,
    find_overlap, find_all_overlaps, wall_bounding_box,
    are_walls_parallel, check_perpendicular_connections, calculate_wall_proximity,
    find_nearest, find_closest_wall, find_nearest_with_filter, find_connected_groups,
)
from conftest import approx_in

A = Wall("a", ((0.0, 0.0), (100.0, 0.0)), 10.0)
V = Wall("v", ((50.0, -50.0), (50.0, 50.0)), 10.0)
P = Wall("p", ((0.0, 12.0), (100.0, 12.0)), 10.0)
FAR = Wall("far", ((500.0, 500.0), (600.0, 500.0)), 10.0)


# --- find_connected_at_point ---

def test_connected_at_point(l_corner):
    a, b = l_corner
    assert find_connected_at_point((100, 0), l_corner) == [Connection(a, 1), Connection(b, 0)]


def test_connected_at_point_excludes_wall(l_corner):
    a, b = l_corner
    assert find_connected_at_point((100, 0), l_corner, exclude=a) == [Connection(b, 0)]


def test_connected_at_point_tolerance(l_corner):
    assert len(find_connected_at_point((100.005, 0), l_corner)) == 2
    assert find_connected_at_point((100.02, 0), l_corner) == []


def test_connected_at_point_skips_malformed():
    bad = Wall("bad", ((100.0, 0.0),), 10.0)
    assert find_connected_at_point((100, 0), [bad, A]) == [Connection(A, 1)]


def test_touches_any_endpoint():
    assert touches_any_endpoint(A, [(100.0, 0.0)])
    assert not touches_any_endpoint(A, [(50.0, 0.0)])


# --- overlaps ---

class TestOverlap:

    def test_identical_walls_full(self):
        twin = Wall("twin", A.points, A.thickness)
        o = find_overlap(A, twin)
        assert o.overlap_type == "full"
        assert o.overlap_area == pytest.approx(1000.0)
        assert is_fully_overlapping(A, twin)

    def test_crossing_walls_partial(self):
        o = find_overlap(A, V)
        assert o.overlap_type == "partial"
        assert o.overlap_area == pytest.approx(100.0)
        assert len(o.intersection_points) == 4

    def test_l_corner_is_corner_overlap(self, l_corner):
        a, b = l_corner
        o = find_overlap(a, b)
        assert o.overlap_type == "corner"
        assert o.overlap_area == pytest.approx(100.0)
        assert approx_in((100.0, 10.0), o.overlap_polygon)
        assert is_corner_overlap(a, b)

    def test_overlap_found_both_ways(self, l_corner):
        a, b = l_corner
        assert find_overlap(a, b) is not None
        assert find_overlap(b, a) is not None

    def test_disjoint_walls(self):
        assert find_overlap(A, FAR) is None

    def test_touching_faces_not_an_overlap(self):
        a = Wall("a", ((0.0, 0.0), (100.0, 0.0)), 20.0)
        c = Wall("c", ((0.0, 20.0), (100.0, 20.0)), 20.0)
        assert find_overlap(a, c) is None

    def test_wall_never_overlaps_itself(self):
        assert find_overlap(A, A) is None

    def test_find_all_overlaps(self):
        found = find_all_overlaps([A, V, FAR])
        assert len(found) == 1
        assert {found[0].wall_a.id, found[0].wall_b.id} == {"a", "v"}

    def test_find_all_overlaps_skips_malformed(self):
        bad = Wall("bad", ((0.0, 0.0),), 10.0)
        assert len(find_all_overlaps([A, bad, V])) == 1


def test_is_walls_collinear():
    assert is_walls_collinear(A, Wall("c", ((-50.0, 0.0), (200.0, 0.0)), 10.0))
    assert not is_walls_collinear(A, P)


def test_wall_bounding_box():
    w = Wall("w", ((0.0, 0.0), (100.0, 0.0)), 20.0)
    assert wall_bounding_box(w) == BBox(0, -10, 100, 10)


# --- proximity ---

class TestProximity:

    def test_crossing_is_intersection(self):
        r = calculate_wall_proximity(A, V, tolerance=5)
        assert r.type == "intersection"
        assert r.distance == 0
        assert r.connection_point == pytest.approx((50.0, 0.0))

    def test_near_endpoint(self):
        d = Wall("d", ((101.0, 0.0), (101.0, 100.0)), 10.0)
        r = calculate_wall_proximity(A, d, tolerance=2)
        assert r.type == "endpoint"
        assert r.distance == pytest.approx(1.0)
        assert r.connection_point == (100.0, 0.0)

    def test_parallel_face_gap(self):
        r = calculate_wall_proximity(A, P, tolerance=5)
        assert r.type == "parallel"
        assert r.distance == pytest.approx(2.0)

    def test_perpendicular_rule(self):
        t = Wall("t", ((50.0, 3.0), (50.0, 100.0)), 10.0)
        r = check_perpendicular_connections(A, t, tolerance=5)
        assert r.type == "perpendicular"
        assert r.distance == pytest.approx(3.0)
        assert r.connection_point == pytest.approx((50.0, 0.0))
        # endpoint contact takes priority over the perpendicular rule
        assert calculate_wall_proximity(A, t, tolerance=5).type == "endpoint"

    def test_perpendicular_rule_needs_right_angle(self):
        diag = Wall("d", ((50.0, 3.0), (100.0, 53.0)), 10.0)
        assert check_perpendicular_connections(A, diag, tolerance=5) is None

    def test_edge_fallback(self):
        e = Wall("e", ((120.0, 5.0), (200.0, 60.0)), 10.0)
        r = calculate_wall_proximity(A, e, tolerance=15)
        assert r.type == "parallel"
        assert r.distance == pytest.approx(math.sqrt(425) - 10)
        assert r.closest_points[0] == pytest.approx((100.0, 0.0))

    def test_unrelated_walls(self):
        assert calculate_wall_proximity(A, FAR, tolerance=5) is None

    def test_antiparallel_walls_are_parallel(self):
        back = Wall("back", ((100.0, 20.0), (0.0, 20.0)), 10.0)
        assert are_walls_parallel(A, back)
        assert not are_walls_parallel(A, V)


def test_find_nearest_sorted_and_excludes_self():
    found = find_nearest(A, [A, FAR, P, V], tolerance=5)
    assert [r.wall.id for r in found] == ["v", "p"]


def test_find_closest_wall():
    assert find_closest_wall(A, [P, V], tolerance=5).wall is V
    assert find_closest_wall(A, [FAR], tolerance=5) is None


def test_find_nearest_with_filter():
    walls = [A, V, P, FAR]
    assert [r.wall.id for r in find_nearest_with_filter(A, walls, 5, types=["parallel"])] == ["p"]
    assert [r.wall.id for r in find_nearest_with_filter(A, walls, 5, max_distance=1)] == ["v"]


def test_find_connected_groups(l_corner):
    a, b = l_corner
    groups = find_connected_groups([a, FAR, b])
    assert len(groups) == 2
    assert groups[0] == [a, b]
    assert groups[1] == [FAR]


def test_find_connected_groups_empty():
    assert find_connected_groups([]) == []
