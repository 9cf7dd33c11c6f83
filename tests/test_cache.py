"""Tests for walls/cache.py: incremental polygon updates."""
import logging
import pytest
from walls.types import Wall
from walls.miter import create_polygon
from walls.cache import WallGeometryCache, UpdateResult, Subscriptions, has_wall_changed
from walls.gestures import pick_vertex, drag_vertex, apply_patches
from conftest import approx_in, count_near


def _full(walls):
    return {w.id: create_polygon(w, walls) for w in walls}


# --- has_wall_changed ---

def test_has_wall_changed():
    a = Wall("a", ((0.0, 0.0), (100.0, 0.0)), 10.0)
    assert not has_wall_changed(a, a._replace(points=((0.001, 0.0), (100.0, 0.0))))
    assert has_wall_changed(a, a._replace(points=((0.5, 0.0), (100.0, 0.0))))
    assert has_wall_changed(a, a._replace(thickness=12.0))


# --- update ---

class TestUpdate:

    def test_first_update_builds_everything(self, l_corner):
        cache = WallGeometryCache()
        r = cache.update(l_corner)
        assert r.dirty == {"a", "b"}
        assert r.deleted == frozenset()
        assert r.changed
        assert set(cache.polygons) == {"a", "b"}
        assert "a" in cache and len(cache) == 2

    def test_repeat_update_is_noop(self, l_corner):
        cache = WallGeometryCache()
        cache.update(l_corner)
        before = cache.polygons
        r = cache.update(l_corner)
        assert r == UpdateResult(frozenset(), frozenset())
        assert not r.changed
        assert cache.polygons is before

    def test_equal_copies_are_noop(self, l_corner):
        cache = WallGeometryCache()
        cache.update(l_corner)
        copies = [Wall(w.id, tuple(tuple(p) for p in w.points), w.thickness) for w in l_corner]
        assert not cache.update(copies).changed

    def test_sub_tolerance_move_ignored(self, l_corner):
        cache = WallGeometryCache()
        cache.update(l_corner)
        a, b = l_corner
        nudged = [a._replace(points=((0.001, 0.0), (100.0, 0.0))), b]
        assert not cache.update(nudged).changed

    def test_thickness_change_marks_neighbors(self, l_corner):
        cache = WallGeometryCache()
        cache.update(l_corner)
        a, b = l_corner
        r = cache.update([a, b._replace(thickness=30.0)])
        assert r.dirty == {"a", "b"}

    def test_delete_heals_neighbor(self, l_corner):
        cache = WallGeometryCache()
        cache.update(l_corner)
        a, _ = l_corner
        r = cache.update([a])
        assert r.deleted == {"b"}
        assert "a" in r.dirty
        assert "b" not in cache
        assert approx_in((100.0, 10.0), cache.get("a"))
        assert approx_in((100.0, -10.0), cache.get("a"))

    def test_moving_away_heals_old_junction(self, three_way):
        cache = WallGeometryCache()
        cache.update(three_way)
        a, b, c = three_way
        moved = c._replace(points=((-20.0, -80.0), c.points[1]))
        r = cache.update([a, b, moved])
        assert r.dirty == {"a", "b", "c"}
        assert count_near((0.0, 0.0), cache.get("a")) == 0
        assert count_near((0.0, 0.0), cache.get("b")) == 0

    def test_old_map_unchanged_after_update(self, l_corner):
        cache = WallGeometryCache()
        cache.update(l_corner)
        before = cache.polygons
        poly_b = before["b"]
        cache.update(l_corner[:1])
        assert before["b"] == poly_b
        assert cache.polygons is not before

    def test_malformed_walls_absent(self, l_corner):
        cache = WallGeometryCache()
        r = cache.update(l_corner + [Wall("bad", ((0.0, 0.0),), 10.0)])
        assert "bad" not in r.dirty
        assert "bad" not in cache

    def test_malformed_walls_logged(self, l_corner, caplog):
        cache = WallGeometryCache()
        with caplog.at_level(logging.WARNING, logger="walls"):
            cache.update(l_corner + [Wall("bad", ((0.0, 0.0),), 10.0)])
        assert "Skipping wall bad" in caplog.text
        assert set(cache.polygons) == {"a", "b"}

    def test_incremental_matches_full_rebuild(self, l_corner):
        a, b = l_corner
        c = Wall("c", ((100.0, 100.0), (0.0, 100.0)), 20.0)
        walls = [a, b, c]
        cache = WallGeometryCache()
        cache.update(walls)
        assert cache.polygons == _full(walls)

        walls = apply_patches(walls, drag_vertex(pick_vertex((100, 100), walls), walls, (120.0, 110.0)))
        cache.update(walls)
        assert cache.polygons == _full(walls)

        walls = walls[1:]
        r = cache.update(walls)
        assert r.deleted == {"a"}
        assert cache.polygons == _full(walls)


def test_rebuild(l_corner):
    cache = WallGeometryCache()
    cache.update(l_corner)
    snapshot = dict(cache.polygons)
    r = cache.rebuild(l_corner)
    assert r.dirty == {"a", "b"}
    assert cache.polygons == snapshot


def test_rebuild_drops_stale_ids(l_corner):
    cache = WallGeometryCache()
    cache.update(l_corner)
    cache.rebuild(l_corner[:1])
    assert set(cache.polygons) == {"a"}


# --- subscriptions ---

def test_subscribers_notified_on_change(l_corner):
    cache = WallGeometryCache()
    seen = []
    token = cache.subscribe(seen.append)
    cache.update(l_corner)
    cache.update(l_corner)
    assert len(seen) == 1
    assert seen[0].dirty == {"a", "b"}
    assert cache.unsubscribe(token)
    cache.update(l_corner[:1])
    assert len(seen) == 1


def test_unsubscribe_unknown_token():
    cache = WallGeometryCache()
    assert not cache.unsubscribe(42)


def test_callback_may_unsubscribe_itself():
    subs = Subscriptions()
    calls = []
    def once(x):
        calls.append(x)
        subs.unsubscribe(token)
    token = subs.subscribe(once)
    subs.subscribe(calls.append)
    subs.notify(1)
    subs.notify(2)
    assert calls == [1, 1, 2]
    assert len(subs) == 1
