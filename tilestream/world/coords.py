from __future__ import annotations

from dataclasses import dataclass

@dataclass(frozen=True, order=True)
class ChunkCoord:
    """Square-grid chunk id. ``y`` is the second planar axis (world z)."""

    x: int
    y: int

    def __add__(self, other: ChunkCoord) -> ChunkCoord:
        return ChunkCoord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: ChunkCoord) -> ChunkCoord:
        return ChunkCoord(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"ChunkCoord({self.x}, {self.y})"

@dataclass(frozen=True, order=True)
class VoxelCoord:
    """Square-grid voxel id; ``y`` is the vertical axis."""

    x: int
    y: int
    z: int

    @property
    def height(self) -> int:
        return self.y

    @property
    def planar(self) -> tuple[int, int]:
        return self.x, self.z

    def __add__(self, other: VoxelCoord) -> VoxelCoord:
        return VoxelCoord(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: VoxelCoord) -> VoxelCoord:
        return VoxelCoord(self.x - other.x, self.y - other.y, self.z - other.z)

    def __repr__(self) -> str:
        return f"VoxelCoord({self.x}, {self.y}, {self.z})"

@dataclass(frozen=True, order=True)
class CubeHexCoord:
    """Cube hex coordinate. Only x and y are stored; z is always -(x + y)."""

    x: int
    y: int

    @property
    def z(self) -> int:
        return -(self.x + self.y)

    @classmethod
    def from_xz(cls, x: int, z: int) -> CubeHexCoord:
        return cls(x, -(x + z))

    @classmethod
    def from_cube(cls, x: int, y: int, z: int) -> CubeHexCoord:
        if x + y + z != 0:
            raise ValueError(f"cube coordinates must sum to zero, got ({x}, {y}, {z})")
        return cls(x, y)

    @property
    def cube(self) -> tuple[int, int, int]:
        return self.x, self.y, self.z

    def distance_step(self, other: CubeHexCoord) -> int:
        return (abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)) // 2

    def rotate_60(self) -> CubeHexCoord:
        # (x, y, z) -> (-z, -x, -y)
        return CubeHexCoord(-self.z, -self.x)

    def scale(self, k: int) -> CubeHexCoord:
        return CubeHexCoord(self.x * k, self.y * k)

    def __add__(self, other: CubeHexCoord) -> CubeHexCoord:
        return CubeHexCoord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: CubeHexCoord) -> CubeHexCoord:
        return CubeHexCoord(self.x - other.x, self.y - other.y)

    def __neg__(self) -> CubeHexCoord:
        return CubeHexCoord(-self.x, -self.y)

    def __repr__(self) -> str:
        return f"CubeHexCoord({self.x}, {self.y}, {self.z})"

@dataclass(frozen=True, order=True)
class HexVoxelCoord:
    tile: CubeHexCoord
    h: int = 0

    @property
    def height(self) -> int:
        return self.h

    @property
    def planar(self) -> CubeHexCoord:
        return self.tile

    def __add__(self, other: HexVoxelCoord) -> HexVoxelCoord:
        return HexVoxelCoord(self.tile + other.tile, self.h + other.h)

    def __sub__(self, other: HexVoxelCoord) -> HexVoxelCoord:
        return HexVoxelCoord(self.tile - other.tile, self.h - other.h)

    def __repr__(self) -> str:
        return f"HexVoxelCoord({self.tile.x}, {self.tile.y}, {self.tile.z}, h={self.h})"
