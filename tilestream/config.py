from __future__ import annotations

# App
APP_VERSION = "0.3.0"

# Layout
DEFAULT_LAYOUT = "square"  # "square" | "hex"
DEFAULT_TILE_SIZE = 1.0  # world units per tile (square side / hex radius)
DEFAULT_SQUARE_CHUNK_RADIUS = 11  # tiles from chunk centre to edge
DEFAULT_SQUARE_CHUNK_HEIGHT = 10  # voxel layers per chunk column
DEFAULT_HEX_CHUNK_RADIUS = 10
DEFAULT_HEX_CHUNK_HEIGHT = 1

# Streaming
DEFAULT_STREAM_RADIUS = 2  # chunk rings kept around every site
DEFAULT_DESPAWN_INTERVAL = 1.0  # seconds between despawn sweeps
DEFAULT_DESPAWN_MARGIN = 2  # extra rings past the stream radius before a chunk may unload
DEFAULT_MAX_INGEST_PER_TICK = 0  # 0 = uncapped
DEFAULT_VOXEL_WORKERS = 2
DEFAULT_MESH_WORKERS = 2

# Headless run
DEFAULT_TICKS = 600
DEFAULT_TICK_SECONDS = 1.0 / 60.0
DEFAULT_SPEED = 20.0  # world units / sec along +x
DEFAULT_GROUND_LEVEL = 1
LOG_EVERY_SECONDS = 1.0
