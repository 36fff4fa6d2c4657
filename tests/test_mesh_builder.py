import numpy as np

from tilestream.world.coords import ChunkCoord, CubeHexCoord
from tilestream.world.generator import FlatGenerator, VoxelKind, new_voxel_buffer
from tilestream.world.hex_layout import HexLayout
from tilestream.world.mesh_builder import LayoutPlaceholder, SurfaceMesher, build_fan_indices, polygon_mesh
from tilestream.world.square_layout import SquareLayout


def test_fan_indices():
    assert build_fan_indices(4).tolist() == [0, 1, 2, 0, 2, 3]
    assert build_fan_indices(3, base=6).tolist() == [6, 7, 8]


def test_empty_mesh():
    mesh = polygon_mesh([])
    assert mesh.vertex_count == 0
    assert mesh.triangle_count == 0


def test_flat_generator_fills_lower_layers():
    layout = SquareLayout(chunk_radius_step=1, chunk_height=3)
    buffer = new_voxel_buffer(layout, ChunkCoord(0, 0))
    assert set(buffer.values()) == {VoxelKind.AIR}
    FlatGenerator(ground_level=2).generate(buffer)
    solid = [v for v, kind in buffer.items() if kind is VoxelKind.SOLID]
    assert len(solid) == 9 * 2
    assert all(v.height < 2 for v in solid)


def test_square_surface_mesh():
    layout = SquareLayout(tile_size=1.0, chunk_radius_step=1, chunk_height=3)
    buffer = new_voxel_buffer(layout, ChunkCoord(0, 0))
    FlatGenerator(ground_level=2).generate(buffer)
    mesh = SurfaceMesher(layout).build(buffer)
    assert mesh.vertex_count == 9 * 4
    assert mesh.triangle_count == 9 * 2
    assert np.allclose(mesh.positions[:, 1], 2.0)
    assert np.allclose(mesh.normals, [0.0, 1.0, 0.0])
    assert mesh.indices.max() == mesh.vertex_count - 1


def test_hex_surface_mesh():
    layout = HexLayout(tile_radius=1.0, chunk_radius_step=1, chunk_height=1)
    buffer = new_voxel_buffer(layout, CubeHexCoord(0, 0))
    FlatGenerator(ground_level=1).generate(buffer)
    mesh = SurfaceMesher(layout).build(buffer)
    assert mesh.vertex_count == 7 * 6
    assert mesh.triangle_count == 7 * 4
    assert np.allclose(mesh.normals, [0.0, 1.0, 0.0], atol=1e-6)


def test_all_air_builds_empty_mesh():
    layout = SquareLayout(chunk_radius_step=1, chunk_height=2)
    buffer = new_voxel_buffer(layout, ChunkCoord(2, 2))
    mesh = SurfaceMesher(layout).build(buffer)
    assert mesh.vertex_count == 0


def test_placeholders_are_shared_footprints():
    square = LayoutPlaceholder(SquareLayout(chunk_radius_step=2))
    assert square.placeholder_geometry() is square.placeholder_geometry()
    assert square.placeholder_geometry().vertex_count == 4
    assert square.placeholder_geometry().triangle_count == 2

    hexes = LayoutPlaceholder(HexLayout(chunk_radius_step=2))
    assert hexes.placeholder_geometry().vertex_count == 6
    assert hexes.placeholder_geometry().triangle_count == 4
    assert np.allclose(hexes.placeholder_geometry().normals, [0.0, 1.0, 0.0], atol=1e-6)
