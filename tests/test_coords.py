import pytest

from tilestream.world.coords import ChunkCoord, CubeHexCoord, HexVoxelCoord, VoxelCoord


def test_cube_coordinates_always_sum_to_zero():
    a = CubeHexCoord.from_xz(3, -7)
    b = CubeHexCoord(-2, 5)
    for c in (a, b, a + b, a - b, -a, a.scale(4), a.rotate_60()):
        assert c.x + c.y + c.z == 0


def test_from_cube_rejects_nonzero_sum():
    assert CubeHexCoord.from_cube(1, -3, 2) == CubeHexCoord(1, -3)
    with pytest.raises(ValueError):
        CubeHexCoord.from_cube(1, 1, 1)


def test_from_xz_keeps_x_and_z():
    c = CubeHexCoord.from_xz(4, -1)
    assert (c.x, c.y, c.z) == (4, -3, -1)
    assert c.cube == (4, -3, -1)


def test_distance_step():
    origin = CubeHexCoord(0, 0)
    assert origin.distance_step(origin) == 0
    assert origin.distance_step(CubeHexCoord.from_cube(1, -1, 0)) == 1
    assert origin.distance_step(CubeHexCoord.from_cube(3, -1, -2)) == 3
    assert CubeHexCoord(2, -5).distance_step(CubeHexCoord(-1, 1)) == CubeHexCoord(-1, 1).distance_step(CubeHexCoord(2, -5))


def test_six_rotations_return_to_start():
    c = CubeHexCoord.from_cube(5, -2, -3)
    seen = [c]
    for _ in range(6):
        seen.append(seen[-1].rotate_60())
    assert seen[-1] == c
    assert len(set(seen[:6])) == 6
    origin = CubeHexCoord(0, 0)
    assert all(origin.distance_step(s) == origin.distance_step(c) for s in seen)


def test_square_ids_arithmetic_and_hash():
    assert ChunkCoord(1, 2) + ChunkCoord(-3, 4) == ChunkCoord(-2, 6)
    assert ChunkCoord(1, 2) - ChunkCoord(1, 2) == ChunkCoord(0, 0)
    v = VoxelCoord(1, 2, 3) + VoxelCoord(1, 1, 1)
    assert v == VoxelCoord(2, 3, 4)
    assert v.height == 3
    assert v.planar == (2, 4)
    assert len({ChunkCoord(0, 0), ChunkCoord(0, 0), ChunkCoord(0, 1)}) == 2


def test_hex_voxel_parts():
    v = HexVoxelCoord(CubeHexCoord(1, -1), 3)
    assert v.planar == CubeHexCoord(1, -1)
    assert v.height == 3
    assert v - HexVoxelCoord(CubeHexCoord(1, -1), 1) == HexVoxelCoord(CubeHexCoord(0, 0), 2)
    assert sorted([HexVoxelCoord(CubeHexCoord(1, 0), 0), HexVoxelCoord(CubeHexCoord(0, 0), 5)])[0].h == 5
