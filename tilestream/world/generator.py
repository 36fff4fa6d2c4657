from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, Protocol

from tilestream.world.layout import Layout

class VoxelKind(Enum):
    AIR = 0
    SOLID = 1

VoxelBuffer = Dict[Any, VoxelKind]

class TerrainGenerator(Protocol):
    """Fills a default-initialised voxel buffer in place.

    Called from worker threads, possibly for several chunks at once.
    """

    def generate(self, buffer: VoxelBuffer) -> None: ...

def new_voxel_buffer(layout: Layout, chunk: Hashable) -> VoxelBuffer:
    return {voxel: VoxelKind.AIR for voxel in layout.get_chunk_voxels(chunk)}

@dataclass(frozen=True)
class FlatGenerator:
    """Solid below ``ground_level`` (in voxel layers), air above."""

    ground_level: int = 1

    def generate(self, buffer: VoxelBuffer) -> None:
        for voxel in buffer:
            if voxel.height < self.ground_level:
                buffer[voxel] = VoxelKind.SOLID
