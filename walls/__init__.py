"""Wall geometry engine: mitered outlines, connectivity and incremental updates."""

from .types import (
    GeometryError, WallLike, Wall, Connection, WallOverlap, NearestWall,
    has_segment, make_wall, wall_from_record, wall_to_record, walls_from_records,
)
from .connectivity import (
    find_connected_at_point, touches_any_endpoint,
    is_walls_collinear, is_fully_overlapping, is_corner_overlap,
    find_overlap, find_all_overlaps, wall_bounding_box,
    are_walls_parallel, distance_between_parallel_walls,
    find_closest_points_between_segments, calculate_wall_proximity,
    find_nearest, find_closest_wall, find_nearest_with_filter, find_connected_groups,
)
from .miter import Corners, offset_edge_intersection, compute_miter_corners, create_polygon
from .cache import UpdateResult, Subscriptions, WallGeometryCache, has_wall_changed
from .gestures import (
    EndpointLinks, SliceTarget,
    snap_to_grid, hit_test_segments, find_hovered_wall, vertex_points, pick_vertex,
    drag_vertex, wall_connections, move_wall,
    find_slice_target, slice_wall, find_short_walls, clear_short_walls,
    erase_targets, apply_patches,
)
from .logging_config import setup_logging
