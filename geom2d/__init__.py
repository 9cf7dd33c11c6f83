"""Planar vector, segment and polygon algebra shared by the wall engine."""

from .types import Point, Segment, Polygon, LineIntersection, NearestPoint, BBox
from .vec import (
    add, sub, mul, dot, cross, mag, mag_sq, normalize, perp, lerp,
    dist, dist_sq, pt_equal, nearest_point, points_within,
)
from .segment import (
    direction, normal, midpoint, length,
    angle_between, angle_between_vectors, line_parameter,
    nearest_point_on_segment, distance_to_segment, signed_distance_to_segment,
    is_point_on_segment, line_intersect, segment_intersect, is_intersect,
    get_line_intersection, extend_segment, parallel_segment, split_segment,
    get_overlap,
)
from .polygon import (
    poly_area, centroid, reorder, remove_duplicates, point_in_polygon,
    polygon_from_segment, bounding_box, bboxes_intersect,
    find_intersection_points, polygon_intersection, to_path,
)
