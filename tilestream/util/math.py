from __future__ import annotations

import math

import numpy as np

SQRT3 = math.sqrt(3.0)

# Axial (q, r) -> planar (x, z) for pointy-top hexes of unit radius, and back.
HEX2SPACE = np.array([[SQRT3, SQRT3 / 2.0], [0.0, 1.5]], dtype=np.float64)
SPACE2HEX = np.array([[SQRT3 / 3.0, -1.0 / 3.0], [0.0, 2.0 / 3.0]], dtype=np.float64)

# Quarter turns applied to one edge of a square ring.
ROTATE_4X = (
    np.array([[0, -1], [1, 0]], dtype=np.int64),
    np.array([[-1, 0], [0, -1]], dtype=np.int64),
    np.array([[0, 1], [-1, 0]], dtype=np.int64),
    np.array([[1, 0], [0, 1]], dtype=np.int64),
)

for _m in (HEX2SPACE, SPACE2HEX, *ROTATE_4X):
    _m.flags.writeable = False

SNAP_EPS = 1e-9

def normalize(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v)
    if n == 0:
        return v
    return v / n

def floor_div(value: float, step: float) -> int:
    """Floor of value / step, snapping quotients that sit a rounding error below an integer."""
    q = value / step
    nearest = round(q)
    if abs(q - nearest) <= SNAP_EPS * max(1.0, abs(q)):
        return int(nearest)
    return int(math.floor(q))

def round_half_away(v: float) -> float:
    return math.copysign(math.floor(abs(v) + 0.5), v)

def cube_round(fx: float, fy: float, fz: float) -> tuple[int, int, int]:
    """Round fractional cube coordinates to the containing hex.

    The component with the strictly largest rounding error is rebuilt from the
    other two. x wins only when strictly largest, then y against z, so ties
    resolve in the fixed order x, y, z.
    """
    rx = round_half_away(fx)
    ry = round_half_away(fy)
    rz = round_half_away(fz)

    dx = abs(rx - fx)
    dy = abs(ry - fy)
    dz = abs(rz - fz)

    if dx > dy and dx > dz:
        rx = -ry - rz
    elif dy > dz:
        ry = -rx - rz
    else:
        rz = -rx - ry
    return int(rx), int(ry), int(rz)
