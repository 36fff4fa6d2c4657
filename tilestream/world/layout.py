from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Sequence, TypeVar

import numpy as np

C = TypeVar("C")  # chunk id
T = TypeVar("T")  # tile / voxel id

class LayoutError(ValueError):
    """Invalid layout geometry (non-positive radius, tile size or height)."""

class LayoutInvariantError(RuntimeError):
    """The precomputed chunk lookup does not cover the tiling. Always a bug."""

def check_geometry(chunk_radius_step: int, tile_size: float, chunk_height: int) -> None:
    if int(chunk_radius_step) != chunk_radius_step or chunk_radius_step <= 0:
        raise LayoutError(f"chunk radius must be a positive integer, got {chunk_radius_step!r}")
    if not tile_size > 0:
        raise LayoutError(f"tile size must be positive, got {tile_size!r}")
    if int(chunk_height) != chunk_height or chunk_height <= 0:
        raise LayoutError(f"chunk height must be a positive integer, got {chunk_height!r}")

class Layout(ABC, Generic[C, T]):
    """Maps continuous space to chunk and tile ids for one coordinate family.

    Layouts are immutable once built and may be read from any thread.
    """

    origin: C
    chunk_radius_step: int
    chunk_height: int

    @property
    @abstractmethod
    def tile_size(self) -> float: ...

    @abstractmethod
    def get_chunk_ring(self, chunk: C, distance: int) -> list[C]:
        """Chunks at exactly ``distance`` rings from ``chunk``."""

    def get_chunk_neighbors(self, chunk: C, distance: int) -> list[C]:
        """Every chunk within ``distance`` rings of ``chunk``, excluding ``chunk`` itself."""
        out: list[C] = []
        for ring in range(1, int(distance) + 1):
            out.extend(self.get_chunk_ring(chunk, ring))
        return out

    @abstractmethod
    def get_chunk_voxels(self, chunk: C) -> list[T]: ...

    @abstractmethod
    def get_chunk_distance(self, a: C, b: C) -> float: ...

    @abstractmethod
    def chunk_to_space(self, chunk: C) -> np.ndarray: ...

    @abstractmethod
    def tile_to_chunk(self, tile: T) -> C: ...

    @abstractmethod
    def tile_to_space(self, tile: T) -> np.ndarray: ...

    @abstractmethod
    def space_to_tile(self, space: Sequence[float]) -> T: ...

    def space_to_chunk(self, space: Sequence[float]) -> C:
        return self.tile_to_chunk(self.space_to_tile(space))

    @abstractmethod
    def tile_corners(self, tile: T) -> np.ndarray:
        """Corners (k, 3) of the tile's top face in world space, wound so the face normal is +y."""

    @abstractmethod
    def chunk_outline(self) -> np.ndarray:
        """Outline (k, 3) of one chunk footprint, relative to its centre, at y = 0."""
