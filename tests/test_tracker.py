from tilestream.world.coords import ChunkCoord, CubeHexCoord
from tilestream.world.tracker import ChunkTracker


def test_spawn_is_idempotent():
    tracker = ChunkTracker()
    assert tracker.try_spawn(ChunkCoord(0, 0))
    assert not tracker.try_spawn(ChunkCoord(0, 0))
    assert ChunkCoord(0, 0) in tracker
    assert len(tracker) == 1


def test_despawn_only_loaded_chunks():
    tracker = ChunkTracker()
    assert not tracker.try_despawn(ChunkCoord(1, 1))
    tracker.try_spawn(ChunkCoord(1, 1))
    assert tracker.try_despawn(ChunkCoord(1, 1))
    assert not tracker.try_despawn(ChunkCoord(1, 1))
    assert ChunkCoord(1, 1) not in tracker
    assert len(tracker) == 0


def test_chunk_can_be_spawned_again_after_despawn():
    tracker = ChunkTracker()
    chunk = CubeHexCoord(3, -2)
    assert tracker.try_spawn(chunk)
    assert tracker.try_despawn(chunk)
    assert tracker.try_spawn(chunk)
    assert tracker.loaded_chunks == {chunk}
