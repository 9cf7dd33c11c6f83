"""Polygon utilities: area, containment, ordering and a restricted clip.

Polygons are plain lists of (x, y) points, implicitly closed. Producers do
not guarantee a winding; use reorder() when a stable order is needed.
"""
import numpy as np

from .types import Point, Segment, Polygon, BBox
from .constants import EPSILON
from .vec import add, sub, mul, dist, normalize, perp
from .segment import get_line_intersection


def poly_area(verts: list[Point]) -> float:
    """Polygon area via the shoelace formula. Works for either winding order."""
    n = len(verts); a = 0.0
    for i in range(n):
        j = (i+1)%n; a += verts[i][0]*verts[j][1]-verts[j][0]*verts[i][1]
    return abs(a)/2

def centroid(points: list[Point]) -> Point:
    """Mean of the vertex set (not the area centroid); (0, 0) when empty."""
    if not points:
        return (0.0, 0.0)
    arr = np.asarray(points, dtype=float)
    c = arr.mean(axis=0)
    return (float(c[0]), float(c[1]))

def reorder(points: list[Point]) -> Polygon:
    """Sort points by angle around their centroid.

    Ascending atan2 angle, which reads clockwise on a y-down canvas. Ties
    keep input order.
    """
    if not points:
        return []
    arr = np.asarray(points, dtype=float)
    c = arr.mean(axis=0)
    ang = np.arctan2(arr[:, 1]-c[1], arr[:, 0]-c[0])
    return [points[i] for i in np.argsort(ang, kind="stable")]

def remove_duplicates(points: list[Point], tolerance: float = EPSILON) -> list[Point]:
    """Drop points closer than *tolerance* to an earlier kept point."""
    unique: list[Point] = []
    for p in points:
        if not any(dist(q, p) < tolerance for q in unique):
            unique.append(p)
    return unique

def point_in_polygon(p: Point, poly: list[Point]) -> bool:
    """Ray casting toward +x.

    Each edge counts on the half-open interval of its y-range, so a ray
    through a shared vertex is counted once.
    """
    inside = False
    n = len(poly); j = n-1
    for i in range(n):
        xi, yi = poly[i]; xj, yj = poly[j]
        if (yi > p[1]) != (yj > p[1]) and p[0] < (xj-xi)*(p[1]-yi)/(yj-yi)+xi:
            inside = not inside
        j = i
    return inside

def polygon_from_segment(seg: Segment, thickness: float) -> Polygon:
    """Square-ended rectangle around a centerline, ignoring any joins.

    Order: start-right, end-right, end-left, start-left.
    """
    start, end = seg[0], seg[1]
    off = mul(perp(normalize(sub(end, start))), thickness/2)
    return [sub(start, off), sub(end, off), add(end, off), add(start, off)]

def bounding_box(poly: list[Point]) -> BBox | None:
    """Axis-aligned bounds of the vertices, or None for an empty polygon."""
    if not poly:
        return None
    xs = [p[0] for p in poly]; ys = [p[1] for p in poly]
    return BBox(min(xs), min(ys), max(xs), max(ys))

def bboxes_intersect(a: BBox, b: BBox) -> bool:
    """Closed-interval overlap test; touching boxes intersect."""
    return not (a.max_x < b.min_x or a.min_x > b.max_x or
                a.max_y < b.min_y or a.min_y > b.max_y)

# ============================================================
# Restricted intersection
# ============================================================
def _edges(poly: list[Point]):
    n = len(poly)
    for i in range(n):
        yield (poly[i], poly[(i+1)%n])

def _edge_crossings(poly_a, poly_b) -> list[Point]:
    pts = []
    for ea in _edges(poly_a):
        for eb in _edges(poly_b):
            x = get_line_intersection(ea, eb)
            if x is not None:
                pts.append(x)
    return pts

def find_intersection_points(poly_a: list[Point], poly_b: list[Point]) -> list[Point]:
    """Deduplicated crossing points between the edges of two polygons."""
    return remove_duplicates(_edge_crossings(poly_a, poly_b))

def polygon_intersection(poly_a: list[Point], poly_b: list[Point]) -> Polygon:
    """Approximate overlap region of two simple convex-ish polygons.

    Collects edge crossings plus each polygon's vertices that lie inside
    the other, dedupes them and orders them by angle. Good enough for
    estimating the overlap area of two wall rectangles; not a general
    Boolean clip (concave, self-intersecting or unbounded input may give
    a wrong outline).
    """
    pts = _edge_crossings(poly_a, poly_b)
    pts.extend(p for p in poly_a if point_in_polygon(p, poly_b))
    pts.extend(p for p in poly_b if point_in_polygon(p, poly_a))
    return reorder(remove_duplicates(pts))

def to_path(points: list[Point], closed: bool = True) -> str:
    """SVG path data for a polyline, e.g. 'M 0 0 L 10 0 Z'."""
    if not points:
        return ""
    d = f"M {points[0][0]:g} {points[0][1]:g}"
    for x, y in points[1:]:
        d += f" L {x:g} {y:g}"
    if closed:
        d += " Z"
    return d
