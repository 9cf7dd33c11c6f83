"""Wall records, wall-like interface and derived relationship types."""
import logging
import math
from typing import Any, Iterable, Literal, NamedTuple, Protocol, Sequence

from geom2d.types import Point, Segment, Polygon

logger = logging.getLogger(__name__)


class GeometryError(ValueError):
    """Raised for structurally malformed wall data."""


class WallLike(Protocol):
    """Anything with a two-point centerline and a thickness.

    Miter, overlap and proximity code depends only on this shape, so
    lightweight preview records work as well as session walls.
    """
    @property
    def points(self) -> Sequence[Point]: ...
    @property
    def thickness(self) -> float: ...


def has_segment(w: WallLike) -> bool:
    """True when *w* has the two endpoints every geometry query needs."""
    return w.points is not None and len(w.points) >= 2


class Wall(NamedTuple):
    """A wall owned by the editing session; the engine only reads it."""
    id: str
    points: Segment
    thickness: float
    layer: str | None = None


class Connection(NamedTuple):
    """*wall* touches the query point with endpoint *index* (0 or 1)."""
    wall: WallLike
    index: int


OverlapType = Literal["partial", "full", "corner"]
ProximityType = Literal["endpoint", "parallel", "perpendicular", "intersection", "overlap"]


class WallOverlap(NamedTuple):
    wall_a: WallLike
    wall_b: WallLike
    overlap_type: OverlapType
    overlap_area: float
    overlap_polygon: Polygon
    intersection_points: list[Point]


class NearestWall(NamedTuple):
    """How *wall* relates to the wall it was measured from."""
    wall: WallLike
    distance: float
    type: ProximityType
    closest_points: tuple[Point, Point]  # (on the query wall, on *wall*)
    connection_point: Point | None = None

# ============================================================
# Construction and plain-data records
# ============================================================
def _as_point(raw: Any) -> Point:
    if isinstance(raw, dict):
        raw = (raw.get("x"), raw.get("y"))
    try:
        x, y = raw
        p = (float(x), float(y))
    except (TypeError, ValueError) as e:
        raise GeometryError(f"Not a point: {raw!r}") from e
    if not (math.isfinite(p[0]) and math.isfinite(p[1])):
        raise GeometryError(f"Non-finite point: {raw!r}")
    return p

def make_wall(id: str, points: Sequence[Any], thickness: float,
              layer: str | None = None) -> Wall:
    """Validated Wall. Raises GeometryError for malformed input."""
    if points is None or len(points) < 2:
        raise GeometryError(f"Wall {id!r} needs two endpoints, got {points!r}")
    p0 = _as_point(points[0]); p1 = _as_point(points[1])
    try:
        t = float(thickness)
    except (TypeError, ValueError) as e:
        raise GeometryError(f"Wall {id!r} thickness is not a number: {thickness!r}") from e
    if not t > 0:
        raise GeometryError(f"Wall {id!r} thickness must be > 0, got {t}")
    return Wall(str(id), (p0, p1), t, layer)

def wall_from_record(rec: dict) -> Wall:
    """Wall from session data: {'id', 'points': [[x, y], [x, y]], 'thickness', 'layer'}.

    Points may also be {'x': .., 'y': ..} mappings.
    """
    if not isinstance(rec, dict):
        raise GeometryError(f"Wall record is not a mapping: {rec!r}")
    try:
        return make_wall(rec["id"], rec["points"], rec["thickness"], rec.get("layer"))
    except KeyError as e:
        raise GeometryError(f"Wall record missing {e.args[0]!r}: {rec!r}") from e

def wall_to_record(wall: Wall) -> dict:
    return {
        "id": wall.id,
        "points": [list(wall.points[0]), list(wall.points[1])],
        "thickness": wall.thickness,
        "layer": wall.layer,
    }

def walls_from_records(records: Iterable[dict]) -> list[Wall]:
    """Load a wall list, logging and skipping malformed records."""
    walls = []
    for rec in records:
        try:
            walls.append(wall_from_record(rec))
        except GeometryError as e:
            logger.warning("Skipping wall record: %s", e)
    return walls
