from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, Optional, Sequence

import numpy as np

class ChunkStage(Enum):
    SPAWNED = "spawned"
    VOXELS_LOADING = "voxels_loading"
    VOXELS_LOADED = "voxels_loaded"
    MESH_BUILDING = "mesh_building"
    MESH_ATTACHED = "mesh_attached"
    DESPAWNED = "despawned"

@dataclass
class MeshDescriptor:
    positions: np.ndarray  # (N,3) float32
    normals: np.ndarray  # (N,3) float32
    indices: np.ndarray  # (M,) uint32, triangles

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.shape[0] // 3)

@dataclass
class ChunkRecord:
    id: Hashable
    position: np.ndarray
    spawned_tick: int
    distance_to_nearest_site: float = 0
    stage: ChunkStage = ChunkStage.SPAWNED
    voxels: Optional[Dict[Any, Any]] = None
    mesh: Optional[MeshDescriptor] = None
    placeholder: Optional[MeshDescriptor] = None
    error: Optional[BaseException] = None
    voxel_task: Optional[Future] = field(default=None, repr=False)
    mesh_task: Optional[Future] = field(default=None, repr=False)

    @property
    def loaded(self) -> bool:
        return self.stage is ChunkStage.MESH_ATTACHED

@dataclass(frozen=True)
class ChunkTransition:
    chunk_id: Hashable
    stage: ChunkStage
    record: ChunkRecord = field(compare=False, repr=False)

@dataclass
class ChunkSite:
    """A moving observer (camera, player) that keeps chunks around it loaded.

    ``fresh`` is raised when the site enters a new chunk and cleared once the
    distance pass has used it.
    """

    position: Sequence[float] = (0.0, 0.0, 0.0)
    last_loaded_chunk: Optional[Hashable] = None
    fresh: bool = False
    chunk_changes: int = 0

    def move_to(self, position: Sequence[float]) -> None:
        self.position = tuple(float(v) for v in position)
