"""Shared type definitions for 2D wall geometry."""
from typing import NamedTuple

Point = tuple[float, float]
Segment = tuple[Point, Point]
Polygon = list[Point]


class LineIntersection(NamedTuple):
    """Result of solving two parametric lines a1 + t*dA and b1 + u*dB."""
    point: Point
    t: float
    u: float
    parallel: bool
    coincident: bool


class NearestPoint(NamedTuple):
    index: int; point: Point; distance: float


class BBox(NamedTuple):
    min_x: float; min_y: float
    max_x: float; max_y: float
