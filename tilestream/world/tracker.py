from __future__ import annotations

import logging
from typing import Hashable, Set

logger = logging.getLogger(__name__)

class ChunkTracker:
    """Membership of loaded chunk ids. Keeps each chunk from being spawned twice."""

    def __init__(self) -> None:
        self.loaded_chunks: Set[Hashable] = set()

    def try_spawn(self, chunk: Hashable) -> bool:
        if chunk in self.loaded_chunks:
            return False
        self.loaded_chunks.add(chunk)
        logger.debug("spawned chunk %r", chunk)
        return True

    def try_despawn(self, chunk: Hashable) -> bool:
        if chunk not in self.loaded_chunks:
            return False
        self.loaded_chunks.remove(chunk)
        logger.debug("despawned chunk %r", chunk)
        return True

    def __contains__(self, chunk: object) -> bool:
        return chunk in self.loaded_chunks

    def __len__(self) -> int:
        return len(self.loaded_chunks)
