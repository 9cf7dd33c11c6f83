"""2D vector algebra on plain (x, y) tuples."""
import math

import numpy as np

from .types import Point, NearestPoint
from .constants import EPSILON, POINT_TOLERANCE


def add(a: Point, b: Point) -> Point:
    return (a[0]+b[0], a[1]+b[1])

def sub(a: Point, b: Point) -> Point:
    return (a[0]-b[0], a[1]-b[1])

def mul(a: Point, s: float) -> Point:
    return (a[0]*s, a[1]*s)

def dot(a: Point, b: Point) -> float:
    return a[0]*b[0] + a[1]*b[1]

def cross(a: Point, b: Point) -> float:
    """z-component of the 3D cross product; > 0 when b turns CCW from a."""
    return a[0]*b[1] - a[1]*b[0]

def mag(a: Point) -> float:
    return math.hypot(a[0], a[1])

def mag_sq(a: Point) -> float:
    """Squared magnitude, for comparisons without a square root."""
    return a[0]*a[0] + a[1]*a[1]

def normalize(a: Point, eps: float = EPSILON) -> Point:
    """Unit vector along *a*; the zero vector when |a| <= eps."""
    ln = math.hypot(a[0], a[1])
    if ln <= eps:
        return (0.0, 0.0)
    return (a[0]/ln, a[1]/ln)

def perp(a: Point) -> Point:
    """Rotate 90 degrees: (x, y) -> (-y, x)."""
    return (-a[1], a[0])

def lerp(a: Point, b: Point, t: float) -> Point:
    """Linear interpolation between two points."""
    return (a[0] + t*(b[0]-a[0]), a[1] + t*(b[1]-a[1]))

def dist(a: Point, b: Point) -> float:
    return math.hypot(a[0]-b[0], a[1]-b[1])

def dist_sq(a: Point, b: Point) -> float:
    dx = a[0]-b[0]; dy = a[1]-b[1]
    return dx*dx + dy*dy

def pt_equal(a: Point, b: Point, tolerance: float = POINT_TOLERANCE) -> bool:
    """Per-axis tolerance equality; never exact float comparison."""
    return abs(a[0]-b[0]) < tolerance and abs(a[1]-b[1]) < tolerance

# ============================================================
# Point-set queries
# ============================================================
def nearest_point(p: Point, points: list[Point]) -> NearestPoint:
    """Closest member of *points* to *p*.

    Returns index -1 and infinite distance for an empty set.
    """
    if not points:
        return NearestPoint(-1, p, math.inf)
    arr = np.asarray(points, dtype=float)
    d = np.hypot(arr[:, 0]-p[0], arr[:, 1]-p[1])
    i = int(np.argmin(d))
    return NearestPoint(i, points[i], float(d[i]))

def points_within(p: Point, points: list[Point], radius: float) -> list[Point]:
    """All points within *radius* of *p* (inclusive), in input order."""
    if not points:
        return []
    arr = np.asarray(points, dtype=float)
    mask = np.hypot(arr[:, 0]-p[0], arr[:, 1]-p[1]) <= radius
    return [points[i] for i in np.flatnonzero(mask)]
