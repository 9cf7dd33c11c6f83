"""Mitered wall outlines.

Each wall becomes a polygon whose ends are cut where its offset edges meet
the offset edges of the walls sharing that endpoint. Walls are sorted by
outward angle around each junction (pivot); a wall's left edge meets the
angularly next wall's right edge, and its right edge meets the previous
wall's left edge. At junctions of three or more walls the pivot itself is
added so the shared centre has no gap.
"""
import logging
import math
from typing import NamedTuple, Sequence

from geom2d.types import Point, Polygon
from geom2d.constants import POINT_TOLERANCE, MITER_DET_EPSILON, MITER_LIMIT
from geom2d.vec import add, sub, mul, cross, normalize, perp, pt_equal
from geom2d.polygon import reorder
from .types import WallLike, has_segment
from .connectivity import find_connected_at_point

logger = logging.getLogger(__name__)


class Corners(NamedTuple):
    left: Point; right: Point


class _Spoke(NamedTuple):
    dir: Point; angle: float; half_thick: float; is_self: bool


def offset_edge_intersection(
    pivot: Point, dir_a: Point, offset_a: float, dir_b: Point, offset_b: float,
    det_eps: float = MITER_DET_EPSILON, miter_limit: float = MITER_LIMIT,
) -> Point | None:
    """Meeting point of two edge lines through *pivot*.

    Edge A is pivot + offset_a*perp(dir_a) + t*dir_a (edge B likewise).
    Returns None when the lines are near parallel (|det| < det_eps) or the
    meeting point lies further than miter_limit * |offset_a| along A.
    """
    start_a = add(pivot, mul(perp(dir_a), offset_a))
    start_b = add(pivot, mul(perp(dir_b), offset_b))
    det = cross(dir_a, dir_b)
    if abs(det) < det_eps:
        return None
    t = cross(sub(start_b, start_a), dir_b)/det
    if abs(t) > abs(offset_a)*miter_limit:
        return None
    return add(start_a, mul(dir_a, t))

def compute_miter_corners(
    pivot: Point, my_dir: Point, half_thick: float, neighbors: Sequence[WallLike],
    tolerance: float = POINT_TOLERANCE,
    det_eps: float = MITER_DET_EPSILON, miter_limit: float = MITER_LIMIT,
) -> Corners:
    """Left and right corners of one wall end at *pivot*.

    my_dir points from the pivot along the wall (outward). Without
    neighbors, or when a meeting point cannot be found, the corner is the
    square end pivot +/- half_thick * perp(my_dir).
    """
    my_normal = perp(my_dir)
    default_left = add(pivot, mul(my_normal, half_thick))
    default_right = add(pivot, mul(my_normal, -half_thick))
    if not neighbors:
        return Corners(default_left, default_right)

    spokes = []
    for n in neighbors:
        other = n.points[1] if pt_equal(n.points[0], pivot, tolerance) else n.points[0]
        d = normalize(sub(other, pivot))
        spokes.append(_Spoke(d, math.atan2(d[1], d[0]), n.thickness/2, False))
    me = _Spoke(my_dir, math.atan2(my_dir[1], my_dir[0]), half_thick, True)
    spokes.append(me)
    spokes.sort(key=lambda s: s.angle)

    i = next(k for k, s in enumerate(spokes) if s.is_self)
    count = len(spokes)
    nxt = spokes[(i+1) % count]
    prv = spokes[(i-1) % count]

    # Our left edge meets next's right edge; our right edge meets prev's left edge
    left = offset_edge_intersection(pivot, my_dir, half_thick, nxt.dir, -nxt.half_thick,
                                    det_eps, miter_limit)
    right = offset_edge_intersection(pivot, my_dir, -half_thick, prv.dir, prv.half_thick,
                                     det_eps, miter_limit)
    return Corners(left if left is not None else default_left,
                   right if right is not None else default_right)

def create_polygon(wall: WallLike, all_walls: Sequence[WallLike],
                   tolerance: float = POINT_TOLERANCE) -> Polygon:
    """Rendered outline of *wall* given every wall in the plan.

    Returns [] for a wall without two endpoints.
    """
    if not has_segment(wall):
        logger.warning("Cannot build polygon for wall with points %r", wall.points)
        return []
    half = wall.thickness/2
    p_start, p_end = wall.points[0], wall.points[1]

    start_nb = [c.wall for c in find_connected_at_point(p_start, all_walls, wall, tolerance)]
    end_nb = [c.wall for c in find_connected_at_point(p_end, all_walls, wall, tolerance)]

    sl, sr = compute_miter_corners(p_start, normalize(sub(p_end, p_start)), half, start_nb, tolerance)
    el, er = compute_miter_corners(p_end, normalize(sub(p_start, p_end)), half, end_nb, tolerance)

    polygon = [sl, el]
    if len(end_nb) >= 2:
        polygon.append(p_end)
    polygon += [er, sr]
    if len(start_nb) >= 2:
        polygon.append(p_start)
    return reorder(polygon)
