from __future__ import annotations

from typing import Any, Dict, Mapping, Protocol

import numpy as np

from tilestream.util.math import normalize
from tilestream.world.chunk import MeshDescriptor
from tilestream.world.generator import VoxelKind
from tilestream.world.layout import Layout

class Mesher(Protocol):
    """Pure function from voxel content to a renderable descriptor."""

    def build(self, tiles: Mapping[Any, VoxelKind]) -> MeshDescriptor: ...

class PlaceholderProvider(Protocol):
    def placeholder_geometry(self) -> MeshDescriptor: ...

def build_fan_indices(corners: int, base: int = 0) -> np.ndarray:
    """Triangle fan over a convex polygon whose vertices start at ``base``."""
    idx: list[int] = []
    for i in range(1, corners - 1):
        idx.extend([base, base + i, base + i + 1])
    return np.array(idx, dtype=np.uint32)

def polygon_mesh(polygons: list[np.ndarray]) -> MeshDescriptor:
    """Flat mesh from convex polygons, each a (k, 3) array of corners."""
    if not polygons:
        return MeshDescriptor(
            positions=np.zeros((0, 3), dtype=np.float32),
            normals=np.zeros((0, 3), dtype=np.float32),
            indices=np.zeros((0,), dtype=np.uint32),
        )
    pos: list[np.ndarray] = []
    nrm: list[np.ndarray] = []
    idx: list[np.ndarray] = []
    base = 0
    for poly in polygons:
        poly = np.asarray(poly, dtype=np.float32)
        n = normalize(np.cross(poly[1] - poly[0], poly[2] - poly[0]))
        pos.append(poly)
        nrm.append(np.repeat(n[None, :], poly.shape[0], axis=0))
        idx.append(build_fan_indices(poly.shape[0], base))
        base += poly.shape[0]
    return MeshDescriptor(
        positions=np.concatenate(pos, axis=0).astype(np.float32),
        normals=np.concatenate(nrm, axis=0).astype(np.float32),
        indices=np.concatenate(idx, axis=0).astype(np.uint32),
    )

class SurfaceMesher:
    """One top face per voxel column, on its highest solid voxel."""

    def __init__(self, layout: Layout) -> None:
        self.layout = layout

    def build(self, tiles: Mapping[Any, VoxelKind]) -> MeshDescriptor:
        tops: Dict[Any, Any] = {}
        for voxel, kind in tiles.items():
            if kind is not VoxelKind.SOLID:
                continue
            top = tops.get(voxel.planar)
            if top is None or voxel.height > top.height:
                tops[voxel.planar] = voxel
        faces = [self.layout.tile_corners(v) for v in sorted(tops.values())]
        return polygon_mesh(faces)

class LayoutPlaceholder:
    """Flat chunk footprint shown while a chunk's content is still loading."""

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self._mesh = polygon_mesh([layout.chunk_outline()])

    def placeholder_geometry(self) -> MeshDescriptor:
        return self._mesh
