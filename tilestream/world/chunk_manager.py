from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Optional

from tilestream.config import (
    DEFAULT_DESPAWN_INTERVAL,
    DEFAULT_DESPAWN_MARGIN,
    DEFAULT_MAX_INGEST_PER_TICK,
    DEFAULT_MESH_WORKERS,
    DEFAULT_STREAM_RADIUS,
    DEFAULT_VOXEL_WORKERS,
)
from tilestream.world.chunk import ChunkRecord, ChunkSite, ChunkStage, ChunkTransition
from tilestream.world.generator import TerrainGenerator, VoxelBuffer, new_voxel_buffer
from tilestream.world.layout import Layout
from tilestream.world.mesh_builder import Mesher, PlaceholderProvider
from tilestream.world.tracker import ChunkTracker

logger = logging.getLogger(__name__)

def default_despawn_distance(layout: Layout, rings: int) -> float:
    """Largest layout distance from a chunk to any chunk on its ring ``rings`` away."""
    center = layout.space_to_chunk((0.0, 0.0, 0.0))
    return max(layout.get_chunk_distance(center, chunk) for chunk in layout.get_chunk_ring(center, rings))

@dataclass(frozen=True)
class StreamingParams:
    streaming_radius: int = DEFAULT_STREAM_RADIUS
    min_despawn_distance: Optional[float] = None  # layout metric; None = stream radius + margin
    despawn_margin: int = DEFAULT_DESPAWN_MARGIN
    despawn_interval: float = DEFAULT_DESPAWN_INTERVAL
    max_ingest_per_tick: int = DEFAULT_MAX_INGEST_PER_TICK
    voxel_workers: int = DEFAULT_VOXEL_WORKERS
    mesh_workers: int = DEFAULT_MESH_WORKERS

    def __post_init__(self) -> None:
        if self.streaming_radius < 0:
            raise ValueError(f"streaming_radius must be >= 0, got {self.streaming_radius}")
        if self.min_despawn_distance is not None and self.min_despawn_distance < 0:
            raise ValueError(f"min_despawn_distance must be >= 0, got {self.min_despawn_distance}")
        if self.despawn_margin < 0:
            raise ValueError(f"despawn_margin must be >= 0, got {self.despawn_margin}")
        if not self.despawn_interval > 0:
            raise ValueError(f"despawn_interval must be positive, got {self.despawn_interval}")
        if self.max_ingest_per_tick < 0:
            raise ValueError(f"max_ingest_per_tick must be >= 0, got {self.max_ingest_per_tick}")
        if self.voxel_workers < 1 or self.mesh_workers < 1:
            raise ValueError("worker pools need at least one worker")

class ChunkStreamer:
    """Loads chunks around moving sites and unloads the ones left behind.

    ``advance`` is the only entry point the host needs to call, once per tick.
    Voxel generation and meshing run on two worker pools; their futures live
    on the chunk records and are polled, never waited on. Dropping a record
    drops its futures, so results for despawned chunks are never seen.
    """

    def __init__(
        self,
        layout: Layout,
        *,
        generator: TerrainGenerator,
        mesher: Mesher,
        placeholders: Optional[PlaceholderProvider] = None,
        params: StreamingParams = StreamingParams(),
        voxel_executor: Optional[Executor] = None,
        mesh_executor: Optional[Executor] = None,
    ) -> None:
        self.layout = layout
        self.generator = generator
        self.mesher = mesher
        self.placeholders = placeholders
        self.params = params

        self.tracker = ChunkTracker()
        self.records: Dict[Hashable, ChunkRecord] = {}

        self._owned: List[Executor] = []
        if voxel_executor is None:
            voxel_executor = ThreadPoolExecutor(max_workers=params.voxel_workers, thread_name_prefix="voxelgen")
            self._owned.append(voxel_executor)
        if mesh_executor is None:
            mesh_executor = ThreadPoolExecutor(max_workers=params.mesh_workers, thread_name_prefix="meshbuild")
            self._owned.append(mesh_executor)
        self._voxel_executor = voxel_executor
        self._mesh_executor = mesh_executor

        if params.min_despawn_distance is None:
            self.min_despawn_distance = default_despawn_distance(
                layout, params.streaming_radius + params.despawn_margin
            )
        else:
            self.min_despawn_distance = params.min_despawn_distance

        self.tick = 0
        self._despawn_elapsed = 0.0
        self._budget: Optional[int] = None

    def shutdown(self) -> None:
        for executor in self._owned:
            executor.shutdown(wait=True, cancel_futures=True)
        self._owned.clear()

    def __enter__(self) -> ChunkStreamer:
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()

    # -- per tick -----------------------------------------------------------

    def advance(self, sites: Iterable[ChunkSite], dt: float) -> List[ChunkTransition]:
        """Spawn, solve distances, poll generation and despawn, in that order."""
        sites = list(sites)
        self.tick += 1
        self._budget = self.params.max_ingest_per_tick or None
        out: List[ChunkTransition] = []

        self.spawn_chunks(sites, out)
        self.solve_chunks(sites)
        self.poll_voxels(out)
        self.request_meshes(out)
        self.poll_meshes(out)
        self.despawn_chunks(dt, out)
        return out

    def spawn_chunks(self, sites: Iterable[ChunkSite], out: List[ChunkTransition]) -> None:
        for site in sites:
            if site.fresh:
                continue
            current = self.layout.space_to_chunk(site.position)
            # stationary sites cost one lookup
            if site.last_loaded_chunk == current:
                continue

            spawned = 0
            neighbors = self.layout.get_chunk_neighbors(current, self.params.streaming_radius)
            for chunk in [current, *neighbors]:
                if not self.tracker.try_spawn(chunk):
                    continue
                record = ChunkRecord(
                    id=chunk,
                    position=self.layout.chunk_to_space(chunk),
                    spawned_tick=self.tick,
                    placeholder=self.placeholders.placeholder_geometry() if self.placeholders else None,
                )
                self.records[chunk] = record
                out.append(ChunkTransition(chunk, ChunkStage.SPAWNED, record))
                self._request_voxels(record, out)
                spawned += 1

            logger.debug("site entered chunk %r (from %r), %d new chunks", current, site.last_loaded_chunk, spawned)
            site.last_loaded_chunk = current
            site.fresh = True
            site.chunk_changes += 1

    def solve_chunks(self, sites: Iterable[ChunkSite]) -> None:
        fresh = [site for site in sites if site.fresh]
        if not fresh:
            return
        # only sites that changed chunk this tick are measured against
        anchors = [site.last_loaded_chunk for site in fresh]
        for record in self.records.values():
            record.distance_to_nearest_site = min(self.layout.get_chunk_distance(record.id, a) for a in anchors)
        for site in fresh:
            site.fresh = False

    def poll_voxels(self, out: List[ChunkTransition]) -> None:
        for record in list(self.records.values()):
            task = record.voxel_task
            if task is None or not task.done():
                continue
            if not self._take_budget():
                return
            record.voxel_task = None
            if self._failed(record, task, "voxel generation"):
                continue
            record.voxels = task.result()
            record.stage = ChunkStage.VOXELS_LOADED
            out.append(ChunkTransition(record.id, record.stage, record))

    def request_meshes(self, out: List[ChunkTransition]) -> None:
        for record in self.records.values():
            if record.stage is ChunkStage.VOXELS_LOADED and record.mesh is None and record.mesh_task is None:
                self._request_mesh(record, out)

    def poll_meshes(self, out: List[ChunkTransition]) -> None:
        for record in list(self.records.values()):
            task = record.mesh_task
            if task is None or not task.done():
                continue
            if not self._take_budget():
                return
            record.mesh_task = None
            if self._failed(record, task, "mesh build"):
                continue
            record.mesh = task.result()
            record.stage = ChunkStage.MESH_ATTACHED
            out.append(ChunkTransition(record.id, record.stage, record))

    def despawn_chunks(self, dt: float, out: List[ChunkTransition]) -> None:
        self._despawn_elapsed += float(dt)
        if self._despawn_elapsed < self.params.despawn_interval:
            return
        self._despawn_elapsed = 0.0

        threshold = self.min_despawn_distance
        removed = 0
        for record in list(self.records.values()):
            # chunks spawned this tick wait for the next sweep
            if record.spawned_tick == self.tick:
                continue
            if record.distance_to_nearest_site <= threshold:
                continue
            if self.tracker.try_despawn(record.id):
                del self.records[record.id]
                record.voxel_task = None
                record.mesh_task = None
                record.stage = ChunkStage.DESPAWNED
                out.append(ChunkTransition(record.id, record.stage, record))
                removed += 1
        if removed:
            logger.debug("despawned %d chunks, %d still loaded", removed, len(self.records))

    # -- host helpers -------------------------------------------------------

    def retry(self, chunk_id: Hashable) -> bool:
        """Resubmit the stage a chunk failed in. False if there is nothing to retry."""
        record = self.records.get(chunk_id)
        if record is None or record.error is None:
            return False
        if record.stage is ChunkStage.VOXELS_LOADING and record.voxel_task is None:
            record.error = None
            self._request_voxels(record, None)
            return True
        if record.stage is ChunkStage.MESH_BUILDING and record.mesh_task is None:
            record.error = None
            self._request_mesh(record, None)
            return True
        return False

    @property
    def pending(self) -> int:
        return sum((r.voxel_task is not None) + (r.mesh_task is not None) for r in self.records.values())

    def stats(self) -> Dict[str, int]:
        counts = Counter(record.stage.value for record in self.records.values())
        out = {stage.value: counts.get(stage.value, 0) for stage in ChunkStage if stage is not ChunkStage.DESPAWNED}
        out["loaded"] = len(self.tracker)
        out["pending"] = self.pending
        out["failed"] = sum(record.error is not None for record in self.records.values())
        return out

    # -- internals ----------------------------------------------------------

    def _request_voxels(self, record: ChunkRecord, out: Optional[List[ChunkTransition]]) -> None:
        record.voxel_task = self._voxel_executor.submit(self._load_voxels, record.id)
        if record.stage is not ChunkStage.VOXELS_LOADING:
            record.stage = ChunkStage.VOXELS_LOADING
            if out is not None:
                out.append(ChunkTransition(record.id, record.stage, record))

    def _request_mesh(self, record: ChunkRecord, out: Optional[List[ChunkTransition]]) -> None:
        record.mesh_task = self._mesh_executor.submit(self.mesher.build, record.voxels)
        if record.stage is not ChunkStage.MESH_BUILDING:
            record.stage = ChunkStage.MESH_BUILDING
            if out is not None:
                out.append(ChunkTransition(record.id, record.stage, record))

    def _load_voxels(self, chunk_id: Hashable) -> VoxelBuffer:
        # worker thread: the layout is read-only, the buffer is private to this task
        buffer = new_voxel_buffer(self.layout, chunk_id)
        self.generator.generate(buffer)
        return buffer

    def _take_budget(self) -> bool:
        if self._budget is None:
            return True
        if self._budget <= 0:
            return False
        self._budget -= 1
        return True

    def _failed(self, record: ChunkRecord, task: Future, what: str) -> bool:
        exc = task.exception()
        if exc is None:
            return False
        record.error = exc
        logger.warning("%s failed for chunk %r, leaving it in %s: %r", what, record.id, record.stage.value, exc)
        return True
