"""Segment algebra: measures, projections, intersections, offsets and splits.

A segment is any sequence whose first two items are (x, y) points. Inputs
with fewer than two points are treated as "no result" rather than errors:
the zero vector for directions, 0 for lengths and parameters, infinity for
distances and None for constructed points or segments.
"""
import logging
import math
from typing import Optional

from .types import Point, Segment, LineIntersection
from .constants import EPSILON
from .vec import add, sub, mul, dot, cross, mag_sq, normalize, perp, lerp, dist

logger = logging.getLogger(__name__)


def _malformed(seg) -> bool:
    return seg is None or len(seg) < 2

# ============================================================
# Measures
# ============================================================
def direction(seg: Segment) -> Point:
    """Unit vector from start to end (zero vector for a degenerate segment)."""
    if _malformed(seg):
        return (0.0, 0.0)
    return normalize(sub(seg[1], seg[0]))

def normal(seg: Segment) -> Point:
    """Direction rotated 90 degrees (left of travel in a y-up frame)."""
    return perp(direction(seg))

def midpoint(seg: Segment) -> Optional[Point]:
    if _malformed(seg):
        return None
    return ((seg[0][0]+seg[1][0])/2, (seg[0][1]+seg[1][1])/2)

def length(seg: Segment) -> float:
    if _malformed(seg):
        return 0.0
    return dist(seg[0], seg[1])

def angle_between_vectors(va: Point, vb: Point) -> float:
    """Signed angle from va to vb in radians, in (-pi, pi]."""
    return math.atan2(cross(va, vb), dot(va, vb))

def angle_between(seg_a: Segment, seg_b: Segment) -> float:
    """Signed angle between two segment directions; 0 for malformed input."""
    if _malformed(seg_a) or _malformed(seg_b):
        return 0.0
    return angle_between_vectors(sub(seg_a[1], seg_a[0]), sub(seg_b[1], seg_b[0]))

# ============================================================
# Point to segment
# ============================================================
def line_parameter(seg: Segment, p: Point) -> float:
    """Unclamped parameter of p's projection (0 at start, 1 at end)."""
    if _malformed(seg):
        return 0.0
    ab = sub(seg[1], seg[0]); ln_sq = mag_sq(ab)
    if ln_sq == 0:
        return 0.0
    return dot(sub(p, seg[0]), ab)/ln_sq

def nearest_point_on_segment(p: Point, seg: Segment) -> Optional[Point]:
    """Closest point of the segment to p (projection clamped to [0, 1])."""
    if _malformed(seg):
        return None
    a, b = seg[0], seg[1]
    ab = sub(b, a); ln_sq = dot(ab, ab)
    if ln_sq == 0:
        return a
    t = max(0.0, min(1.0, dot(sub(p, a), ab)/ln_sq))
    return add(a, mul(ab, t))

def distance_to_segment(p: Point, seg: Segment) -> float:
    if _malformed(seg):
        return math.inf
    return dist(p, nearest_point_on_segment(p, seg))

def signed_distance_to_segment(p: Point, seg: Segment) -> float:
    """Perpendicular distance from p to the segment's line.

    Positive on the left of start -> end, negative on the right. Matches
    distance_to_segment whenever p projects inside the segment; 0 for a
    degenerate segment.
    """
    if _malformed(seg):
        return 0.0
    ab = sub(seg[1], seg[0]); ln = math.hypot(ab[0], ab[1])
    if ln <= EPSILON:
        return 0.0
    return cross(ab, sub(p, seg[0]))/ln

def is_point_on_segment(p: Point, seg: Segment, tolerance: float = EPSILON) -> bool:
    return distance_to_segment(p, seg) <= tolerance

# ============================================================
# Intersections
# ============================================================
def line_intersect(p1: Point, d1: Point, p2: Point, d2: Point,
                   eps: float = EPSILON) -> Optional[Point]:
    """Intersection of infinite lines p1 + t*d1 and p2 + s*d2; None if parallel."""
    denom = cross(d1, d2)
    if abs(denom) < eps:
        return None
    t = cross(sub(p2, p1), d2)/denom
    return add(p1, mul(d1, t))

def segment_intersect(seg1: Segment, seg2: Segment,
                      eps: float = EPSILON) -> Optional[LineIntersection]:
    """Solve the two parametric lines of seg1 and seg2.

    Returns None for parallel disjoint lines (or malformed input). Collinear
    lines give a result flagged ``coincident`` anchored at seg1's start.
    Otherwise t and u are the unbounded parameters along seg1 and seg2.
    """
    if _malformed(seg1) or _malformed(seg2):
        return None
    a1, a2 = seg1[0], seg1[1]
    b1, b2 = seg2[0], seg2[1]
    dA = sub(a2, a1); dB = sub(b2, b1); diff = sub(a1, b1)
    denom = cross(dA, dB)
    cross_a = cross(diff, dA); cross_b = cross(diff, dB)
    if abs(denom) < eps:
        if abs(cross_a) < eps and abs(cross_b) < eps:
            return LineIntersection(a1, 0.0, 0.0, True, True)
        return None
    t = -cross_b/denom; u = -cross_a/denom
    return LineIntersection(add(a1, mul(dA, t)), t, u, False, False)

def is_intersect(seg1: Segment, seg2: Segment) -> bool:
    """True when the segments cross within both of their bounds."""
    r = segment_intersect(seg1, seg2)
    if r is None or r.parallel:
        return False
    return 0 <= r.t <= 1 and 0 <= r.u <= 1

def get_line_intersection(seg1: Segment, seg2: Segment) -> Optional[Point]:
    """Bounded crossing point of two segments, or None."""
    if _malformed(seg1) or _malformed(seg2):
        logger.warning("Invalid segments passed to get_line_intersection: %r, %r", seg1, seg2)
        return None
    r = segment_intersect(seg1, seg2)
    if r is None or r.parallel or r.t < 0 or r.t > 1 or r.u < 0 or r.u > 1:
        return None
    return r.point

# ============================================================
# Construction
# ============================================================
def extend_segment(seg: Segment, distance: float) -> Optional[Segment]:
    """Grow (distance > 0) or shrink (distance < 0) both ends along the direction."""
    if _malformed(seg):
        return None
    d = direction(seg)
    return (sub(seg[0], mul(d, distance)), add(seg[1], mul(d, distance)))

def parallel_segment(seg: Segment, offset: float) -> Optional[Segment]:
    """Copy of the segment shifted by *offset* along its normal."""
    if _malformed(seg):
        return None
    o = mul(normal(seg), offset)
    return (add(seg[0], o), add(seg[1], o))

def split_segment(seg: Segment, t: float) -> Optional[tuple[Segment, Segment]]:
    """Two sub-segments sharing the point at parameter t."""
    if _malformed(seg):
        return None
    p = lerp(seg[0], seg[1], t)
    return ((seg[0], p), (p, seg[1]))

def get_overlap(seg_a: Segment, seg_b: Segment, eps: float = EPSILON) -> Optional[Segment]:
    """Sub-segment of seg_a shared with a collinear seg_b, or None.

    seg_b's endpoints are projected into seg_a's own [0, 1] parameter space.
    Every test compares squared world-unit quantities (no square root), so
    the result exists for (A, B) exactly when it exists for (B, A).
    Touching at a single end is not an overlap.
    """
    if _malformed(seg_a) or _malformed(seg_b):
        return None
    a1, a2 = seg_a[0], seg_a[1]
    b1, b2 = seg_b[0], seg_b[1]
    vec_a = sub(a2, a1); vec_b = sub(b2, b1)
    ln_sq = mag_sq(vec_a); eps_sq = eps*eps
    if ln_sq <= eps_sq:
        return None
    # directions within eps of parallel (squared sine)
    if cross(vec_a, vec_b)**2 > eps_sq*ln_sq*mag_sq(vec_b):
        return None
    # squared distance of b1 from A's line
    if cross(sub(b1, a1), vec_a)**2 > eps_sq*ln_sq:
        return None
    t1 = dot(sub(b1, a1), vec_a)/ln_sq
    t2 = dot(sub(b2, a1), vec_a)/ln_sq
    t_start = max(0.0, min(t1, t2))
    t_end = min(1.0, max(t1, t2))
    if t_end <= t_start or (t_end - t_start)**2*ln_sq <= eps_sq:
        return None
    return (add(a1, mul(vec_a, t_start)), add(a1, mul(vec_a, t_end)))
