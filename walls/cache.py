"""Incremental wall polygon cache.

Each update diffs the new wall list against a snapshot of the previous one
and rebuilds only the polygons that can have changed: walls that moved,
appeared or changed thickness, the walls joined to their new endpoints,
and the walls that were joined to their old endpoints or to a deleted wall
(so a broken junction heals into a square end).
"""
import logging
from typing import Callable, Iterable, Mapping, NamedTuple, Sequence

from geom2d.types import Point, Polygon
from geom2d.constants import POINT_TOLERANCE
from geom2d.vec import pt_equal
from .types import Wall, WallLike, has_segment
from .connectivity import find_connected_at_point, touches_any_endpoint
from .miter import create_polygon

logger = logging.getLogger(__name__)


class UpdateResult(NamedTuple):
    dirty: frozenset[str]
    deleted: frozenset[str]

    @property
    def changed(self) -> bool:
        return bool(self.dirty or self.deleted)


class _Snapshot(NamedTuple):
    """Copy of the geometry a wall had when last seen."""
    points: tuple[Point, Point]
    thickness: float


def _snapshot(w: WallLike) -> _Snapshot:
    return _Snapshot((tuple(w.points[0]), tuple(w.points[1])), w.thickness)

def has_wall_changed(prev: WallLike, curr: WallLike, tolerance: float = POINT_TOLERANCE) -> bool:
    """Thickness differs, or either endpoint moved beyond tolerance."""
    if prev.thickness != curr.thickness:
        return True
    return not (pt_equal(prev.points[0], curr.points[0], tolerance)
                and pt_equal(prev.points[1], curr.points[1], tolerance))


class Subscriptions:
    """Callback registry owned by one cache.

    subscribe() returns a token; pass it to unsubscribe() to stop
    receiving notifications.
    """
    def __init__(self):
        self._callbacks: dict[int, Callable[..., None]] = {}
        self._next_token = 0

    def subscribe(self, callback: Callable[..., None]) -> int:
        self._next_token += 1
        self._callbacks[self._next_token] = callback
        return self._next_token

    def unsubscribe(self, token: int) -> bool:
        """Remove a callback; False if the token was unknown or already used."""
        return self._callbacks.pop(token, None) is not None

    def notify(self, *args) -> None:
        # copy so callbacks may unsubscribe themselves
        for cb in list(self._callbacks.values()):
            cb(*args)

    def __len__(self) -> int:
        return len(self._callbacks)


class WallGeometryCache:
    """id -> Polygon for every wall with a renderable (>= 3 point) outline.

    The cache is the only writer of its polygon map. Each mutating update
    installs a new dict, so a map obtained from ``polygons`` earlier stays
    an unchanged snapshot.
    """

    def __init__(self, tolerance: float = POINT_TOLERANCE):
        self.tolerance = tolerance
        self._polygons: dict[str, Polygon] = {}
        self._prev: dict[str, _Snapshot] = {}
        self.subscriptions = Subscriptions()

    @property
    def polygons(self) -> Mapping[str, Polygon]:
        return self._polygons

    def get(self, wall_id: str) -> Polygon | None:
        return self._polygons.get(wall_id)

    def __contains__(self, wall_id: str) -> bool:
        return wall_id in self._polygons

    def __len__(self) -> int:
        return len(self._polygons)

    def subscribe(self, callback: Callable[[UpdateResult], None]) -> int:
        return self.subscriptions.subscribe(callback)

    def unsubscribe(self, token: int) -> bool:
        return self.subscriptions.unsubscribe(token)

    def _former_neighbors(self, walls: Sequence[Wall], wall_id: str,
                          prev: _Snapshot) -> Iterable[str]:
        return (w.id for w in walls
                if w.id != wall_id and touches_any_endpoint(w, prev.points, self.tolerance))

    def update(self, walls: Sequence[Wall]) -> UpdateResult:
        """Bring the polygon map in line with *walls*.

        Walls without two endpoints are logged and treated as absent. When nothing
        changed the map is left untouched and an empty result is returned.
        """
        valid = []
        for w in walls:
            if has_segment(w):
                valid.append(w)
            else:
                logger.warning("Skipping wall %s: points %r", w.id, w.points)
        walls = valid
        curr = {w.id: w for w in walls}
        dirty: set[str] = set()
        deleted: set[str] = set()

        for w in walls:
            prev = self._prev.get(w.id)
            if prev is not None and not has_wall_changed(prev, w, self.tolerance):
                continue
            dirty.add(w.id)
            for p in w.points[:2]:
                dirty.update(c.wall.id for c in find_connected_at_point(p, walls, w, self.tolerance))
            if prev is not None:
                dirty.update(self._former_neighbors(walls, w.id, prev))

        for wall_id, prev in self._prev.items():
            if wall_id not in curr:
                deleted.add(wall_id)
                dirty.update(self._former_neighbors(walls, wall_id, prev))

        if not dirty and not deleted:
            return UpdateResult(frozenset(), frozenset())

        polygons = dict(self._polygons)
        for wall_id in deleted:
            polygons.pop(wall_id, None)
        for wall_id in dirty:
            w = curr.get(wall_id)
            if w is None:
                continue
            poly = create_polygon(w, walls, self.tolerance)
            if len(poly) >= 3:
                polygons[wall_id] = poly
            else:
                logger.debug("Wall %s produced %d points, not rendered", wall_id, len(poly))
                polygons.pop(wall_id, None)
        self._polygons = polygons
        self._prev = {wall_id: _snapshot(w) for wall_id, w in curr.items()}

        result = UpdateResult(frozenset(dirty), frozenset(deleted))
        logger.debug("Geometry update: %d dirty, %d deleted, %d cached",
                     len(result.dirty), len(result.deleted), len(polygons))
        self.subscriptions.notify(result)
        return result

    def rebuild(self, walls: Sequence[Wall]) -> UpdateResult:
        """Drop all state and derive every polygon from *walls* (load path)."""
        self._polygons = {}
        self._prev = {}
        return self.update(walls)
