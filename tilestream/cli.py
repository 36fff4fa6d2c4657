from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from tilestream.app import make_layout, run_app
from tilestream.config import (
    APP_VERSION,
    DEFAULT_DESPAWN_INTERVAL,
    DEFAULT_DESPAWN_MARGIN,
    DEFAULT_GROUND_LEVEL,
    DEFAULT_LAYOUT,
    DEFAULT_MAX_INGEST_PER_TICK,
    DEFAULT_MESH_WORKERS,
    DEFAULT_SPEED,
    DEFAULT_STREAM_RADIUS,
    DEFAULT_TICK_SECONDS,
    DEFAULT_TICKS,
    DEFAULT_TILE_SIZE,
    DEFAULT_VOXEL_WORKERS,
)
from tilestream.world.chunk_manager import StreamingParams

def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tilestream", description=f"Headless chunk streaming run v{APP_VERSION}")
    p.add_argument("--layout", choices=["square", "hex"], default=DEFAULT_LAYOUT, help="chunk layout family")
    p.add_argument("--radius", type=int, default=None, help="tiles from chunk centre to edge (default depends on layout)")
    p.add_argument("--height", type=int, default=None, help="voxel layers per chunk (default depends on layout)")
    p.add_argument("--tile-size", type=float, default=DEFAULT_TILE_SIZE, help="world units per tile (square side / hex radius)")
    p.add_argument("--stream-radius", type=int, default=DEFAULT_STREAM_RADIUS, help="chunk rings loaded around the site")
    p.add_argument(
        "--despawn-distance",
        type=float,
        default=None,
        help="unload chunks farther than this (layout metric); default: stream radius + margin rings",
    )
    p.add_argument("--despawn-margin", type=int, default=DEFAULT_DESPAWN_MARGIN, help="rings past the stream radius kept loaded")
    p.add_argument("--despawn-interval", type=float, default=DEFAULT_DESPAWN_INTERVAL, help="seconds between despawn sweeps")
    p.add_argument("--ingest", type=int, default=DEFAULT_MAX_INGEST_PER_TICK, help="finished tasks applied per tick (0 = uncapped)")
    p.add_argument("--voxel-workers", type=int, default=DEFAULT_VOXEL_WORKERS, help="voxel generation threads")
    p.add_argument("--mesh-workers", type=int, default=DEFAULT_MESH_WORKERS, help="mesh build threads")
    p.add_argument("--ticks", type=int, default=DEFAULT_TICKS, help="simulated ticks to run")
    p.add_argument("--dt", type=float, default=DEFAULT_TICK_SECONDS, help="seconds per tick")
    p.add_argument("--speed", type=float, default=DEFAULT_SPEED, help="site speed along +x (world units / sec)")
    p.add_argument("--ground-level", type=int, default=DEFAULT_GROUND_LEVEL, help="solid voxel layers of the flat generator")
    p.add_argument("--debug", action="store_true", help="log every spawn and despawn")
    return p.parse_args(argv)

def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[tilestream] %(levelname)s %(name)s: %(message)s",
    )

    layout = make_layout(args.layout, tile_size=float(args.tile_size), radius=args.radius, height=args.height)
    params = StreamingParams(
        streaming_radius=int(args.stream_radius),
        min_despawn_distance=args.despawn_distance,
        despawn_margin=int(args.despawn_margin),
        despawn_interval=float(args.despawn_interval),
        max_ingest_per_tick=int(args.ingest),
        voxel_workers=int(args.voxel_workers),
        mesh_workers=int(args.mesh_workers),
    )
    run_app(
        layout=layout,
        params=params,
        ticks=int(args.ticks),
        dt=float(args.dt),
        speed=float(args.speed),
        ground_level=int(args.ground_level),
    )

if __name__ == "__main__":
    main()
