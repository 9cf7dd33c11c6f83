"""Wall connectivity, overlap and proximity queries.

Neighbors are never stored: every relationship is found again by a linear
scan over the current wall list. Plans hold a few hundred walls at most.
"""
import logging
import math
from collections import deque
from typing import Iterable, Sequence

from geom2d.types import Point, Segment, BBox
from geom2d.constants import (
    EPSILON, POINT_TOLERANCE, OVERLAP_AREA_EPSILON,
    PARALLEL_ANGLE_TOLERANCE, PERPENDICULAR_ANGLE_TOLERANCE,
)
from geom2d.vec import sub, dot, cross, normalize, dist, pt_equal
from geom2d.segment import (
    angle_between, distance_to_segment, nearest_point_on_segment,
    get_line_intersection, line_parameter,
)
from geom2d.polygon import (
    poly_area, point_in_polygon, polygon_from_segment, polygon_intersection,
    find_intersection_points, bounding_box,
)
from .types import (
    WallLike, Connection, WallOverlap, NearestWall, ProximityType, has_segment,
)

logger = logging.getLogger(__name__)


def _same_wall(a: WallLike, b: WallLike) -> bool:
    if a is b:
        return True
    a_id = getattr(a, "id", None)
    return a_id is not None and a_id == getattr(b, "id", None)

def _seg(w: WallLike) -> Segment:
    return (w.points[0], w.points[1])

# ============================================================
# Connectivity
# ============================================================
def find_connected_at_point(
    point: Point, walls: Iterable[WallLike], exclude: WallLike | None = None,
    tolerance: float = POINT_TOLERANCE,
) -> list[Connection]:
    """Every wall (except *exclude*) with an endpoint at *point*.

    Each connection carries the index of the first matching endpoint. This
    is the one query behind both miter joins and linked-endpoint dragging.
    """
    found = []
    for w in walls:
        if w is exclude or not has_segment(w):
            continue
        if pt_equal(w.points[0], point, tolerance):
            found.append(Connection(w, 0))
        elif pt_equal(w.points[1], point, tolerance):
            found.append(Connection(w, 1))
    return found

def touches_any_endpoint(w: WallLike, ends: Sequence[Point],
                         tolerance: float = POINT_TOLERANCE) -> bool:
    """True when either endpoint of *w* coincides with one of *ends*."""
    if not has_segment(w):
        return False
    return any(pt_equal(p, e, tolerance) for p in w.points[:2] for e in ends)

# ============================================================
# Overlap analysis
# ============================================================
def is_walls_collinear(wall_a: WallLike, wall_b: WallLike, tolerance: float = EPSILON) -> bool:
    """Parallel centerlines lying on the same line."""
    a1, a2 = _seg(wall_a); b1, b2 = _seg(wall_b)
    dir_a = normalize(sub(a2, a1)); dir_b = normalize(sub(b2, b1))
    if abs(cross(dir_a, dir_b)) > tolerance:
        return False
    return distance_to_segment(a1, (b1, b2)) <= tolerance

def is_fully_overlapping(wall_a: WallLike, wall_b: WallLike,
                         area_eps: float = OVERLAP_AREA_EPSILON) -> bool:
    """Collinear walls whose rectangles coincide.

    Area agreement is relative: |overlap - area| <= area_eps * max(area, 1).
    """
    if not is_walls_collinear(wall_a, wall_b):
        return False
    poly_a = polygon_from_segment(_seg(wall_a), wall_a.thickness)
    poly_b = polygon_from_segment(_seg(wall_b), wall_b.thickness)
    inter = polygon_intersection(poly_a, poly_b)
    if len(inter) < 3:
        return False
    area_i = poly_area(inter)
    area_a = poly_area(poly_a); area_b = poly_area(poly_b)
    return (abs(area_i - area_a) <= area_eps*max(area_a, 1.0) and
            abs(area_i - area_b) <= area_eps*max(area_b, 1.0))

def is_corner_overlap(wall_a: WallLike, wall_b: WallLike) -> bool:
    """Some but not all four corners of either rectangle lie inside the other."""
    poly_a = polygon_from_segment(_seg(wall_a), wall_a.thickness)
    poly_b = polygon_from_segment(_seg(wall_b), wall_b.thickness)
    in_b = sum(1 for c in poly_a if point_in_polygon(c, poly_b))
    in_a = sum(1 for c in poly_b if point_in_polygon(c, poly_a))
    return 0 < in_b < 4 or 0 < in_a < 4

def find_overlap(wall_a: WallLike, wall_b: WallLike) -> WallOverlap | None:
    """Overlap of two walls' square-ended rectangles, or None."""
    if _same_wall(wall_a, wall_b):
        return None
    poly_a = polygon_from_segment(_seg(wall_a), wall_a.thickness)
    poly_b = polygon_from_segment(_seg(wall_b), wall_b.thickness)
    overlap = polygon_intersection(poly_a, poly_b)
    if len(overlap) < 3:
        return None
    if is_fully_overlapping(wall_a, wall_b):
        kind = "full"
    elif is_corner_overlap(wall_a, wall_b):
        kind = "corner"
    else:
        kind = "partial"
    return WallOverlap(wall_a, wall_b, kind, poly_area(overlap), overlap,
                       find_intersection_points(poly_a, poly_b))

def find_all_overlaps(walls: Sequence[WallLike],
                      min_area: float = OVERLAP_AREA_EPSILON) -> list[WallOverlap]:
    """Every unordered pair of walls whose rectangles share more than *min_area*.

    O(n^2); meant for slice and cleanup actions, not per-frame work.
    """
    valid = [w for w in walls if has_segment(w)]
    overlaps = []
    for i in range(len(valid)):
        for j in range(i+1, len(valid)):
            o = find_overlap(valid[i], valid[j])
            if o is not None and o.overlap_area > min_area:
                overlaps.append(o)
    logger.debug("Overlap scan: %d walls, %d overlaps", len(valid), len(overlaps))
    return overlaps

def wall_bounding_box(wall: WallLike) -> BBox:
    return bounding_box(polygon_from_segment(_seg(wall), wall.thickness))

# ============================================================
# Proximity
# ============================================================
def are_walls_parallel(wall_a: WallLike, wall_b: WallLike,
                       angle_tolerance: float = PARALLEL_ANGLE_TOLERANCE) -> bool:
    dir_a = normalize(sub(wall_a.points[1], wall_a.points[0]))
    dir_b = normalize(sub(wall_b.points[1], wall_b.points[0]))
    d = abs(dot(dir_a, dir_b))
    return abs(d - 1) < angle_tolerance

def distance_between_parallel_walls(wall_a: WallLike, wall_b: WallLike) -> float:
    """Distance from wall_a's start to wall_b's centerline."""
    return distance_to_segment(wall_a.points[0], _seg(wall_b))

def find_closest_points_between_segments(seg_a: Segment, seg_b: Segment) -> tuple[Point, Point]:
    """Approximate closest pair, tested from seg_b's start and seg_a's start.

    Returns (point on or of seg_a, point on or of seg_b).
    """
    a1, a2 = seg_a[0], seg_a[1]
    b1, b2 = seg_b[0], seg_b[1]
    on_a = nearest_point_on_segment(b1, (a1, a2))
    on_b = nearest_point_on_segment(a1, (b1, b2))
    if dist(b1, on_a) <= dist(a1, on_b):
        return (on_a, b1)
    return (a1, on_b)

def check_endpoint_connections(wall_a: WallLike, wall_b: WallLike,
                               tolerance: float) -> NearestWall | None:
    """Endpoint-to-endpoint, then endpoint-to-edge contact within tolerance."""
    ends_a = _seg(wall_a); ends_b = _seg(wall_b)
    for pa in ends_a:
        for pb in ends_b:
            d = dist(pa, pb)
            if d <= tolerance:
                return NearestWall(wall_b, d, "endpoint", (pa, pb), pa)
    for pa in ends_a:
        closest = nearest_point_on_segment(pa, ends_b)
        d = dist(pa, closest)
        if d <= tolerance:
            return NearestWall(wall_b, d, "endpoint", (pa, closest), pa)
    for pb in ends_b:
        closest = nearest_point_on_segment(pb, ends_a)
        d = dist(pb, closest)
        if d <= tolerance:
            return NearestWall(wall_b, d, "endpoint", (closest, pb), closest)
    return None

def check_parallel_proximity(wall_a: WallLike, wall_b: WallLike,
                             tolerance: float) -> NearestWall | None:
    """Parallel walls whose faces are within tolerance of touching."""
    if not are_walls_parallel(wall_a, wall_b):
        return None
    d = distance_between_parallel_walls(wall_a, wall_b)
    reach = (wall_a.thickness + wall_b.thickness)/2
    if d > tolerance + reach:
        return None
    closest = find_closest_points_between_segments(_seg(wall_a), _seg(wall_b))
    return NearestWall(wall_b, max(0.0, d - reach), "parallel", closest)

def check_perpendicular_connections(wall_a: WallLike, wall_b: WallLike,
                                    tolerance: float) -> NearestWall | None:
    """T-junctions: near-perpendicular walls where an endpoint lands on the other span."""
    angle = abs(angle_between(_seg(wall_a), _seg(wall_b)))
    if abs(angle - math.pi/2) >= PERPENDICULAR_ANGLE_TOLERANCE:
        return None
    for pa in _seg(wall_a):
        closest = nearest_point_on_segment(pa, _seg(wall_b))
        d = dist(pa, closest)
        if d <= tolerance:
            return NearestWall(wall_b, d, "perpendicular", (pa, closest), pa)
    for pb in _seg(wall_b):
        closest = nearest_point_on_segment(pb, _seg(wall_a))
        d = dist(pb, closest)
        if d <= tolerance:
            return NearestWall(wall_b, d, "perpendicular", (closest, pb), closest)
    return None

def check_edge_proximity(wall_a: WallLike, wall_b: WallLike,
                         tolerance: float) -> NearestWall | None:
    """Fallback: closest centerline pair less the combined half-thicknesses."""
    ca, cb = find_closest_points_between_segments(_seg(wall_a), _seg(wall_b))
    effective = max(0.0, dist(ca, cb) - (wall_a.thickness + wall_b.thickness)/2)
    if effective <= tolerance:
        return NearestWall(wall_b, effective, "parallel", (ca, cb))
    return None

def calculate_wall_proximity(wall_a: WallLike, wall_b: WallLike,
                             tolerance: float = EPSILON) -> NearestWall | None:
    """Classify how wall_b relates to wall_a, first matching rule wins.

    intersection -> endpoint -> parallel -> perpendicular -> edge fallback.
    """
    x = get_line_intersection(_seg(wall_a), _seg(wall_b))
    if x is not None:
        t = line_parameter(_seg(wall_a), x); u = line_parameter(_seg(wall_b), x)
        if 0 <= t <= 1 and 0 <= u <= 1:
            return NearestWall(wall_b, 0.0, "intersection", (x, x), x)
    return (check_endpoint_connections(wall_a, wall_b, tolerance)
            or check_parallel_proximity(wall_a, wall_b, tolerance)
            or check_perpendicular_connections(wall_a, wall_b, tolerance)
            or check_edge_proximity(wall_a, wall_b, tolerance))

def find_nearest(wall: WallLike, neighbors: Iterable[WallLike],
                 tolerance: float = EPSILON) -> list[NearestWall]:
    """Related neighbors within tolerance, nearest first."""
    results = []
    for n in neighbors:
        if _same_wall(n, wall) or not has_segment(n):
            continue
        r = calculate_wall_proximity(wall, n, tolerance)
        if r is not None and r.distance <= tolerance:
            results.append(r)
    results.sort(key=lambda r: r.distance)
    return results

def find_closest_wall(wall: WallLike, neighbors: Iterable[WallLike],
                      tolerance: float = EPSILON) -> NearestWall | None:
    nearest = find_nearest(wall, neighbors, tolerance)
    return nearest[0] if nearest else None

def find_nearest_with_filter(
    wall: WallLike, neighbors: Iterable[WallLike], tolerance: float = EPSILON,
    types: Sequence[ProximityType] | None = None, max_distance: float = math.inf,
    exclude_self: bool = True,
) -> list[NearestWall]:
    """find_nearest restricted to *types* and *max_distance*."""
    if exclude_self:
        neighbors = [n for n in neighbors if not _same_wall(n, wall)]
    results = [r for r in find_nearest(wall, neighbors, tolerance) if r.distance <= max_distance]
    if types:
        results = [r for r in results if r.type in types]
    return results

def find_connected_groups(walls: Sequence[WallLike],
                          tolerance: float = EPSILON) -> list[list[WallLike]]:
    """Connected components under find_nearest, breadth first in input order."""
    groups = []
    visited: set[int] = set()
    for wall in walls:
        if id(wall) in visited:
            continue
        group = []
        queue = deque([wall])
        while queue:
            cur = queue.popleft()
            if id(cur) in visited:
                continue
            visited.add(id(cur))
            group.append(cur)
            queue.extend(w for w in walls
                         if w is not cur and id(w) not in visited
                         and find_nearest(cur, [w], tolerance))
        groups.append(group)
    return groups
