from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

from tilestream.util.math import HEX2SPACE, SPACE2HEX, cube_round, floor_div
from tilestream.world.coords import CubeHexCoord, HexVoxelCoord
from tilestream.world.layout import Layout, LayoutError, LayoutInvariantError, check_geometry

HEX_DIRECTIONS = tuple(
    # unit steps, each a 60 degree turn from the previous one
    CubeHexCoord(*step)
    for step in ((1, -1), (1, 0), (0, 1), (-1, 1), (-1, 0), (0, -1))
)

def hex_ring(center: CubeHexCoord, distance: int, directions: Sequence[CubeHexCoord]) -> list[CubeHexCoord]:
    """Walk the six edges of the ring ``distance`` steps away from ``center``.

    ``directions`` must be six vectors, each the previous one turned by 60 degrees.
    """
    if distance == 0:
        return [center]
    ring: list[CubeHexCoord] = []
    cur = center + directions[4].scale(distance)
    for side in range(6):
        for _ in range(distance):
            ring.append(cur)
            cur = cur + directions[side]
    return ring

def chunk_period(radius: int) -> int:
    """Tiles in one chunk: the centred hexagonal number 3R^2 + 3R + 1."""
    return 3 * radius * radius + 3 * radius + 1

def chunk_key(tile: CubeHexCoord, radius: int) -> int:
    """Position of ``tile`` in the periodic lookup; 0 exactly at chunk centres."""
    period = chunk_period(radius)
    x_offset_based_on_z = (tile.z * (3 * radius + 1)) % period
    return (x_offset_based_on_z - tile.x) % period

def build_chunk_lookup(radius: int) -> np.ndarray:
    """Build the (period, 2) table of deltas from a tile to its chunk centre.

    The half period [0, (period - 1) / 2] is covered by an apex segment (row
    z = 0, walking x from 0 to -R) followed by one row segment for every pair
    of mirrored rows z and -z; along a row the key grows by one per step
    towards -x. The hexagon is traced once per phase, the -1 phase being the
    +1 trace mirrored through the centre.
    """
    period = chunk_period(radius)
    offset_base = 3 * radius + 1
    half_period = (period - 1) // 2

    # (first key, length, z, x at first key)
    segments = [(0, radius + 1, 0, 0)]
    for z in range(-radius, radius + 1):
        if z == 0:
            continue
        x_max = min(radius, radius - z)
        x_min = max(-radius, -radius - z)
        first = (offset_base * z - x_max) % period
        if first <= half_period:
            segments.append((first, x_max - x_min + 1, z, x_max))
    segments.sort()

    lookup = np.zeros((period, 2), dtype=np.int64)
    filled = np.zeros(period, dtype=bool)
    for phase in (1, -1):
        seg = 0
        for offset in range(half_period + 1):
            while seg < len(segments) and offset >= segments[seg][0] + segments[seg][1]:
                seg += 1
            if seg == len(segments) or offset < segments[seg][0]:
                raise LayoutInvariantError(f"no row covers offset {offset} (radius={radius})")
            first, _, z, x_first = segments[seg]
            tile = CubeHexCoord.from_xz(x_first - (offset - first), z).scale(phase)
            key = offset if phase == 1 else (period - offset) % period
            delta = (-tile.x, -tile.y)
            if filled[key] and tuple(lookup[key]) != delta:
                raise LayoutInvariantError(f"key {key} assigned twice (radius={radius})")
            lookup[key] = delta
            filled[key] = True

    if not filled.all():
        missing = np.flatnonzero(~filled).tolist()
        raise LayoutInvariantError(f"lookup keys {missing} never assigned (radius={radius})")
    origin = CubeHexCoord(0, 0)
    for key, (dx, dy) in enumerate(lookup):
        tile = CubeHexCoord(-int(dx), -int(dy))
        if origin.distance_step(tile) > radius or chunk_key(tile, radius) != key:
            raise LayoutInvariantError(f"key {key} maps outside its chunk (radius={radius})")

    lookup.flags.writeable = False
    return lookup

TileLike = Union[HexVoxelCoord, CubeHexCoord]

class HexLayout(Layout[CubeHexCoord, HexVoxelCoord]):
    """Pointy-top hex tiles grouped into hexagonal chunks of radius R.

    Chunk ids are the cube coordinates of each chunk's centre tile. Chunk
    centres form the lattice of tiles whose lookup key is 0.
    """

    def __init__(
        self,
        origin: CubeHexCoord = CubeHexCoord(0, 0),
        tile_radius: float = 1.0,
        chunk_radius_step: int = 10,
        chunk_height: int = 1,
        tile_height: float | None = None,
    ) -> None:
        check_geometry(chunk_radius_step, tile_radius, chunk_height)
        if tile_height is not None and not tile_height > 0:
            raise LayoutError(f"tile height must be positive, got {tile_height!r}")
        self.origin = origin
        self.tile_radius = float(tile_radius)
        self.tile_height = float(tile_height) if tile_height is not None else self.tile_radius
        self.chunk_radius_step = int(chunk_radius_step)
        self.chunk_height = int(chunk_height)

        r = self.chunk_radius_step
        self.period = chunk_period(r)
        self.chunk_lookup = build_chunk_lookup(r)

        base = CubeHexCoord.from_cube(2 * r + 1, -(r + 1), -r)
        directions = [base]
        for _ in range(5):
            directions.append(directions[-1].rotate_60())
        self.chunk_directions = tuple(directions)

    @property
    def tile_size(self) -> float:
        return self.tile_radius

    @property
    def chunk_radius(self) -> float:
        return (2 * self.chunk_radius_step + 1) * self.tile_radius

    def get_chunk_ring(self, chunk: CubeHexCoord, distance: int) -> list[CubeHexCoord]:
        return hex_ring(chunk, int(distance), self.chunk_directions)

    def get_chunk_tiles(self, chunk: CubeHexCoord) -> list[CubeHexCoord]:
        tiles = [chunk]
        for ring in range(1, self.chunk_radius_step + 1):
            tiles.extend(hex_ring(chunk, ring, HEX_DIRECTIONS))
        return tiles

    def get_chunk_voxels(self, chunk: CubeHexCoord) -> list[HexVoxelCoord]:
        return [
            HexVoxelCoord(tile, h)
            for tile in self.get_chunk_tiles(chunk)
            for h in range(self.chunk_height)
        ]

    def get_chunk_distance(self, a: CubeHexCoord, b: CubeHexCoord) -> int:
        # express b - a in the basis of two adjacent chunk directions
        d = b - a
        u, v = self.chunk_directions[0], self.chunk_directions[1]
        det = u.x * v.z - u.z * v.x
        i, ri = divmod(d.x * v.z - d.z * v.x, det)
        j, rj = divmod(u.x * d.z - u.z * d.x, det)
        if ri or rj:
            raise ValueError(f"{a!r} and {b!r} are not both chunk centres")
        return (abs(i) + abs(j) + abs(i + j)) // 2

    def chunk_to_space(self, chunk: CubeHexCoord) -> np.ndarray:
        return self.tile_to_space(HexVoxelCoord(chunk, 0))

    def tile_to_chunk(self, tile: TileLike) -> CubeHexCoord:
        planar = tile.planar if isinstance(tile, HexVoxelCoord) else tile
        dx, dy = self.chunk_lookup[chunk_key(planar, self.chunk_radius_step)]
        return planar + CubeHexCoord(int(dx), int(dy))

    def tile_to_space(self, tile: HexVoxelCoord) -> np.ndarray:
        d = tile.planar - self.origin
        sx, sz = (HEX2SPACE @ np.array([d.x, d.z], dtype=np.float64)) * self.tile_radius
        return np.array([sx, tile.height * self.tile_height, sz], dtype=np.float64)

    def space_to_tile(self, space: Sequence[float]) -> HexVoxelCoord:
        x, y, z = (float(v) for v in space)
        q, r = (SPACE2HEX @ np.array([x, z], dtype=np.float64)) / self.tile_radius
        cx, cy, _ = cube_round(float(q), float(-q - r), float(r))
        return HexVoxelCoord(CubeHexCoord(cx, cy) + self.origin, floor_div(y, self.tile_height))

    def _hexagon(self, cx: float, y: float, cz: float, radius: float) -> np.ndarray:
        # pointy-top corners, clockwise in (x, z) so the face normal is +y
        angles = [math.radians(30.0 - 60.0 * k) for k in range(6)]
        return np.array(
            [[cx + radius * math.cos(a), y, cz + radius * math.sin(a)] for a in angles],
            dtype=np.float32,
        )

    def tile_corners(self, tile: HexVoxelCoord) -> np.ndarray:
        cx, y, cz = self.tile_to_space(tile)
        return self._hexagon(cx, y + self.tile_height, cz, self.tile_radius)

    def chunk_outline(self) -> np.ndarray:
        return self._hexagon(0.0, 0.0, 0.0, self.chunk_radius)
