"""Numeric tolerances and interaction radii.

All lengths in world units (the editor draws in millimetres). Every value
is a default that callers may override per call.
"""

# Algebraic tolerances
EPSILON = 1e-9                      # "zero" for cross products, determinants, parameters
POINT_TOLERANCE = 0.01              # two points are the same junction
MITER_DET_EPSILON = 1e-5            # offset edge lines closer to parallel fall back unmitered
MITER_LIMIT = 5.0                   # max miter reach, in multiples of the half-thickness
OVERLAP_AREA_EPSILON = 1e-9         # smallest overlap area worth reporting

# Angular tolerances (radians unless noted)
PARALLEL_ANGLE_TOLERANCE = 1e-3     # | |dot| - 1 | for parallel directions
PERPENDICULAR_ANGLE_TOLERANCE = 0.1  # ~5.7 deg either side of 90 deg

# Interactive hit-test radii
LINE_HOVER_RADIUS = 4.0             # pointer to shrunk centerline
LINE_HIT_MIN_INSET = 17.0           # centerline pulled back at least this much per end
VERTEX_CLICK_RADIUS = 15.0          # pointer to wall endpoint
SLICE_SEARCH_RADIUS = 10.0          # pointer to wall for the slicer
ERASER_RADIUS = 10.0                # pointer to wall for the eraser
SNAP_THRESHOLD = 25.0               # grid snap reach
SLICE_END_CLEARANCE = 1.5           # slice point keeps this many thicknesses from each end
