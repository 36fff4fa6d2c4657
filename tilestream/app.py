from __future__ import annotations

import logging
import time
from typing import Dict, Optional

from tilestream.config import (
    DEFAULT_HEX_CHUNK_HEIGHT,
    DEFAULT_HEX_CHUNK_RADIUS,
    DEFAULT_SQUARE_CHUNK_HEIGHT,
    DEFAULT_SQUARE_CHUNK_RADIUS,
    LOG_EVERY_SECONDS,
)
from tilestream.world.chunk import ChunkSite, ChunkStage
from tilestream.world.chunk_manager import ChunkStreamer, StreamingParams
from tilestream.world.generator import FlatGenerator
from tilestream.world.hex_layout import HexLayout
from tilestream.world.layout import Layout
from tilestream.world.mesh_builder import LayoutPlaceholder, SurfaceMesher
from tilestream.world.square_layout import SquareLayout

logger = logging.getLogger(__name__)

def make_layout(kind: str, *, tile_size: float, radius: Optional[int] = None, height: Optional[int] = None) -> Layout:
    if kind == "square":
        return SquareLayout(
            tile_size=tile_size,
            chunk_radius_step=DEFAULT_SQUARE_CHUNK_RADIUS if radius is None else radius,
            chunk_height=DEFAULT_SQUARE_CHUNK_HEIGHT if height is None else height,
        )
    if kind == "hex":
        return HexLayout(
            tile_radius=tile_size,
            chunk_radius_step=DEFAULT_HEX_CHUNK_RADIUS if radius is None else radius,
            chunk_height=DEFAULT_HEX_CHUNK_HEIGHT if height is None else height,
        )
    raise ValueError(f"unknown layout {kind!r} (expected 'square' or 'hex')")

def run_app(
    *,
    layout: Layout,
    params: StreamingParams,
    ticks: int,
    dt: float,
    speed: float,
    ground_level: int,
) -> Dict[str, int]:
    """Fly one site along +x for ``ticks`` simulated ticks and report streaming stats."""
    site = ChunkSite(position=(0.0, 0.0, 0.0))
    spawned = despawned = meshed = 0
    vertices = triangles = 0
    last_log = 0.0
    start = time.perf_counter()

    with ChunkStreamer(
        layout,
        generator=FlatGenerator(ground_level=ground_level),
        mesher=SurfaceMesher(layout),
        placeholders=LayoutPlaceholder(layout),
        params=params,
    ) as streamer:
        logger.info(
            "streaming %s chunks: radius=%d stream_radius=%d despawn>%.2f",
            type(layout).__name__, layout.chunk_radius_step, params.streaming_radius, streamer.min_despawn_distance,
        )
        for tick in range(int(ticks)):
            sim_t = tick * dt
            site.move_to((speed * sim_t, 0.0, 0.0))

            for change in streamer.advance([site], dt):
                if change.stage is ChunkStage.SPAWNED:
                    spawned += 1
                elif change.stage is ChunkStage.MESH_ATTACHED:
                    meshed += 1
                    vertices += change.record.mesh.vertex_count
                    triangles += change.record.mesh.triangle_count
                elif change.stage is ChunkStage.DESPAWNED:
                    despawned += 1

            if sim_t - last_log >= LOG_EVERY_SECONDS:
                last_log = sim_t
                stats = streamer.stats()
                logger.info(
                    "t=%.1fs chunk=%r loaded=%d pending=%d meshed=%d failed=%d",
                    sim_t, site.last_loaded_chunk, stats["loaded"], stats["pending"],
                    stats[ChunkStage.MESH_ATTACHED.value], stats["failed"],
                )
        stats = streamer.stats()

    stats.update(spawned=spawned, despawned=despawned, meshed=meshed, vertices=vertices, triangles=triangles)
    logger.info(
        "done in %.2fs wall: spawned=%d meshed=%d despawned=%d (%d vertices, %d triangles)",
        time.perf_counter() - start, spawned, meshed, despawned, vertices, triangles,
    )
    return stats
