"""Editing gestures built on the geometry engine.

These helpers turn pointer positions (already in world coordinates) into
queries and endpoint patches. They never modify walls: the session applies
the returned patches, then the cache picks up the change on its next update.
"""
import math
from typing import Mapping, NamedTuple, Sequence

from geom2d.types import Point, Segment, Polygon
from geom2d.constants import (
    POINT_TOLERANCE, SNAP_THRESHOLD, LINE_HOVER_RADIUS, LINE_HIT_MIN_INSET,
    VERTEX_CLICK_RADIUS, SLICE_SEARCH_RADIUS, ERASER_RADIUS, SLICE_END_CLEARANCE,
)
from geom2d.vec import add, sub, mul, dot, dist, nearest_point
from geom2d.segment import (
    normal, extend_segment, split_segment, distance_to_segment,
    nearest_point_on_segment, signed_distance_to_segment,
)
from geom2d.polygon import remove_duplicates
from .types import Wall, WallLike, Connection, has_segment
from .connectivity import find_connected_at_point

Patch = tuple[str, Segment]  # (wall id, new endpoints)


class EndpointLinks(NamedTuple):
    """Walls joined to endpoint *index* of a wall being dragged."""
    point: Point
    index: int
    connections: list[Connection]


class SliceTarget(NamedTuple):
    wall: WallLike
    point: Point
    distance: float


def snap_to_grid(point: Point, grid_size: float, threshold: float = SNAP_THRESHOLD) -> Point:
    """Round to the nearest grid node unless both axes are beyond *threshold*."""
    gx = round(point[0]/grid_size)*grid_size
    gy = round(point[1]/grid_size)*grid_size
    if abs(point[0]-gx) > threshold and abs(point[1]-gy) > threshold:
        return point
    return (gx, gy)

def _with_endpoint(seg: Sequence[Point], index: int, p: Point) -> Segment:
    return (p, seg[1]) if index == 0 else (seg[0], p)

# ============================================================
# Hover and pick
# ============================================================
def hit_test_segments(walls: Sequence[Wall]) -> list[tuple[str, Segment]]:
    """Centerlines pulled back from both ends so junctions hover as vertices."""
    out = []
    for w in walls:
        if not has_segment(w):
            continue
        inset = max(abs(w.thickness/2 + w.thickness/4), LINE_HIT_MIN_INSET)
        out.append((w.id, extend_segment(w.points, -inset)))
    return out

def find_hovered_wall(point: Point, walls: Sequence[Wall],
                      radius: float = LINE_HOVER_RADIUS) -> str | None:
    """Id of the wall whose shrunk centerline is nearest, if within *radius*."""
    best = math.inf; best_id = None
    for wall_id, seg in hit_test_segments(walls):
        d = distance_to_segment(point, seg)
        if d < best:
            best = d; best_id = wall_id
    return best_id if best <= radius else None

def vertex_points(walls: Sequence[WallLike]) -> list[Point]:
    """Distinct wall endpoints, in wall order."""
    return remove_duplicates([p for w in walls if has_segment(w) for p in w.points[:2]])

def pick_vertex(point: Point, walls: Sequence[WallLike],
                radius: float = VERTEX_CLICK_RADIUS) -> list[Connection]:
    """Every wall endpoint at the vertex nearest *point*, or [] if none in reach."""
    nearest = nearest_point(point, vertex_points(walls))
    if nearest.distance >= radius:
        return []
    return find_connected_at_point(nearest.point, walls)

# ============================================================
# Drag
# ============================================================
def drag_vertex(connections: Sequence[Connection], walls: Sequence[Wall],
                target: Point) -> list[Patch]:
    """Move every picked endpoint to *target*, using the walls' current points."""
    by_id = {w.id: w for w in walls}
    patches = []
    for c in connections:
        w = by_id.get(c.wall.id)
        if w is None or not has_segment(w):
            continue
        patches.append((w.id, _with_endpoint(w.points, c.index, target)))
    return patches

def wall_connections(wall: WallLike, walls: Sequence[WallLike],
                     tolerance: float = POINT_TOLERANCE) -> list[EndpointLinks]:
    """Linked walls at each endpoint of *wall* that has any."""
    if not has_segment(wall):
        return []
    links = []
    for i, p in enumerate(wall.points[:2]):
        cons = find_connected_at_point(p, walls, wall, tolerance)
        if cons:
            links.append(EndpointLinks(p, i, cons))
    return links

def move_wall(wall: Wall, links: Sequence[EndpointLinks], pointer: Point) -> list[Patch]:
    """Slide *wall* sideways so its line passes through *pointer*.

    Linked endpoints follow. Returns [] when the wall is shorter than its
    thickness.
    """
    if not has_segment(wall):
        return []
    seg = wall.points
    offset = mul(normal(seg), signed_distance_to_segment(pointer, seg))
    p0 = add(seg[0], offset); p1 = add(seg[1], offset)
    if dist(p0, p1) < wall.thickness:
        return []
    moved = {0: p0, 1: p1}
    patches = [(wall.id, (p0, p1))]
    for link in links:
        for c in link.connections:
            patches.append((c.wall.id, _with_endpoint(c.wall.points, c.index, moved[link.index])))
    return patches

# ============================================================
# Slice and cleanup
# ============================================================
def find_slice_target(point: Point, walls: Sequence[WallLike],
                      radius: float = SLICE_SEARCH_RADIUS,
                      clearance: float = SLICE_END_CLEARANCE) -> SliceTarget | None:
    """Nearest wall under the pointer and the point to cut it at.

    The cut point must keep clearance * thickness from both wall ends.
    """
    best = None
    for w in walls:
        if not has_segment(w):
            continue
        if distance_to_segment(point, w.points) >= radius:
            continue
        safe = w.thickness*clearance
        p = nearest_point_on_segment(point, w.points)
        if dist(w.points[0], p) <= safe or dist(w.points[1], p) <= safe:
            continue
        d = dist(p, point)
        if best is None or d < best.distance:
            best = SliceTarget(w, p, d)
    return best

def slice_wall(wall: WallLike, point: Point) -> tuple[Segment, Segment] | None:
    """Split the centerline at *point*'s projection; None at or beyond an end."""
    if not has_segment(wall):
        return None
    a, b = wall.points[0], wall.points[1]
    ab = sub(b, a); ln_sq = dot(ab, ab)
    if ln_sq == 0:
        return None
    t = dot(sub(point, a), ab)/ln_sq
    if t <= 0 or t >= 1:
        return None
    return split_segment((a, b), t)

def find_short_walls(walls: Sequence[WallLike]) -> list[WallLike]:
    """Walls shorter than their own thickness."""
    return [w for w in walls if has_segment(w) and dist(w.points[0], w.points[1]) < w.thickness]

def clear_short_walls(walls: Sequence[WallLike]) -> list[WallLike]:
    short = {id(w) for w in find_short_walls(walls)}
    return [w for w in walls if id(w) not in short]

def erase_targets(point: Point, walls: Sequence[Wall], polygons: Mapping[str, Polygon],
                  radius: float = ERASER_RADIUS) -> list[str]:
    """Ids of walls near *point* that currently render."""
    return [w.id for w in walls
            if has_segment(w) and distance_to_segment(point, w.points) < radius
            and polygons.get(w.id) is not None]

def apply_patches(walls: Sequence[Wall], patches: Sequence[Patch]) -> list[Wall]:
    """New wall list with patched endpoints; later patches win."""
    new_points = dict(patches)
    return [w._replace(points=new_points[w.id]) if w.id in new_points else w for w in walls]
