from __future__ import annotations

from typing import Sequence

import numpy as np

from tilestream.util.math import ROTATE_4X, floor_div
from tilestream.world.coords import ChunkCoord, VoxelCoord
from tilestream.world.layout import Layout, check_geometry

class SquareLayout(Layout[ChunkCoord, VoxelCoord]):
    """Axis-aligned grid of square chunks, each (2R+1) x (2R+1) voxel columns.

    The centre voxel of ``origin`` sits at world (0, 0, 0); a voxel's world
    position is its minimum corner.
    """

    def __init__(
        self,
        origin: ChunkCoord = ChunkCoord(0, 0),
        tile_size: float = 1.0,
        chunk_radius_step: int = 11,
        chunk_height: int = 10,
    ) -> None:
        check_geometry(chunk_radius_step, tile_size, chunk_height)
        self.origin = origin
        self._tile_size = float(tile_size)
        self.chunk_radius_step = int(chunk_radius_step)
        self.chunk_height = int(chunk_height)
        self._origin_voxel = self.get_center_voxel(origin)

    @property
    def tile_size(self) -> float:
        return self._tile_size

    @property
    def chunk_voxel_full_length(self) -> int:
        return 2 * self.chunk_radius_step + 1

    def get_center_voxel(self, chunk: ChunkCoord) -> VoxelCoord:
        full = self.chunk_voxel_full_length
        return VoxelCoord(chunk.x * full, 0, chunk.y * full)

    def get_voxel(self, chunk: ChunkCoord, x: int, y: int, z: int) -> VoxelCoord:
        full = self.chunk_voxel_full_length
        return VoxelCoord(x + chunk.x * full, y, z + chunk.y * full)

    def get_chunk_ring(self, chunk: ChunkCoord, distance: int) -> list[ChunkCoord]:
        distance = int(distance)
        if distance == 0:
            return [chunk]
        ring: list[ChunkCoord] = []
        # one edge of the ring, turned four times
        for offset in range(2 * distance):
            edge = np.array([-distance + offset, -distance], dtype=np.int64)
            for rot in ROTATE_4X:
                dx, dy = rot @ edge
                ring.append(chunk + ChunkCoord(int(dx), int(dy)))
        return ring

    def get_chunk_voxels(self, chunk: ChunkCoord) -> list[VoxelCoord]:
        r = self.chunk_radius_step
        full = self.chunk_voxel_full_length
        return [
            self.get_voxel(chunk, x - r, y, z - r)
            for x in range(full)
            for z in range(full)
            for y in range(self.chunk_height)
        ]

    def get_chunk_distance(self, a: ChunkCoord, b: ChunkCoord) -> float:
        return float(np.linalg.norm(self.chunk_to_space(a) - self.chunk_to_space(b)))

    def chunk_to_space(self, chunk: ChunkCoord) -> np.ndarray:
        return self.tile_to_space(self.get_center_voxel(chunk))

    def tile_to_chunk(self, tile: VoxelCoord) -> ChunkCoord:
        r = self.chunk_radius_step
        full = self.chunk_voxel_full_length
        # floor division: negative voxels belong to the chunk that contains them
        return ChunkCoord((tile.x + r) // full, (tile.z + r) // full)

    def tile_to_space(self, tile: VoxelCoord) -> np.ndarray:
        t = tile - self._origin_voxel
        s = self._tile_size
        return np.array([t.x * s, t.y * s, t.z * s], dtype=np.float64)

    def space_to_tile(self, space: Sequence[float]) -> VoxelCoord:
        x, y, z = (float(v) for v in space)
        s = self._tile_size
        return VoxelCoord(floor_div(x, s), floor_div(y, s), floor_div(z, s)) + self._origin_voxel

    def tile_corners(self, tile: VoxelCoord) -> np.ndarray:
        x, y, z = self.tile_to_space(tile)
        s = self._tile_size
        top = y + s
        return np.array(
            [
                [x, top, z],
                [x, top, z + s],
                [x + s, top, z + s],
                [x + s, top, z],
            ],
            dtype=np.float32,
        )

    def chunk_outline(self) -> np.ndarray:
        s = self._tile_size
        lo = -self.chunk_radius_step * s
        hi = (self.chunk_radius_step + 1) * s
        return np.array(
            [
                [lo, 0.0, lo],
                [lo, 0.0, hi],
                [hi, 0.0, hi],
                [hi, 0.0, lo],
            ],
            dtype=np.float32,
        )
