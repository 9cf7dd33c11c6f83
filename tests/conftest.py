"""Shared wall layouts for geometry engine tests."""
import math
import pytest
from walls.types import Wall


def approx_in(p, points, tol=1e-6):
    """True when some point in *points* is within tol of p."""
    return any(math.hypot(p[0]-q[0], p[1]-q[1]) < tol for q in points)


def count_near(p, points, tol=1e-9):
    return sum(1 for q in points if math.hypot(p[0]-q[0], p[1]-q[1]) < tol)


@pytest.fixture
def l_corner():
    """Two 20-thick walls meeting at (100, 0)."""
    return [
        Wall("a", ((0.0, 0.0), (100.0, 0.0)), 20.0),
        Wall("b", ((100.0, 0.0), (100.0, 100.0)), 20.0),
    ]


@pytest.fixture
def collinear_pair():
    return [
        Wall("a", ((0.0, 0.0), (100.0, 0.0)), 10.0),
        Wall("b", ((100.0, 0.0), (200.0, 0.0)), 10.0),
    ]


@pytest.fixture
def three_way():
    """Three 10-thick walls leaving (0, 0) at 0, 120 and 240 degrees."""
    walls = []
    for name, deg in (("a", 0), ("b", 120), ("c", 240)):
        r = math.radians(deg)
        walls.append(Wall(name, ((0.0, 0.0), (100*math.cos(r), 100*math.sin(r))), 10.0))
    return walls


@pytest.fixture
def u_shape():
    """Bottom wall with uprights linked at both ends."""
    return [
        Wall("bottom", ((0.0, 0.0), (100.0, 0.0)), 10.0),
        Wall("left", ((0.0, 0.0), (0.0, 100.0)), 10.0),
        Wall("right", ((100.0, 100.0), (100.0, 0.0)), 10.0),
    ]
