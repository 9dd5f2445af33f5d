import pytest

from cubeworld.actions import act_block
from cubeworld.blocks import (
    DATA_DIRECTION,
    DATA_POWER,
    DATA_STATE,
    DATA_TEXTURE,
    DATA_TEXTURE1,
    Block,
    BlockType,
    Direction,
)
from cubeworld.chunk import Chunk, ChunkFlag


@pytest.fixture
def chunk():
    return Chunk(flags=ChunkFlag(0))


def test_closed_door_opens(chunk):
    door = Block(BlockType.DOOR, Direction.FRONT | DATA_STATE)
    sounds = []
    assert act_block(chunk, door, sounds.append)
    assert door.data & DATA_DIRECTION == Direction.RIGHT
    assert not door.data & DATA_STATE
    assert chunk.flags & ChunkFlag.MODIFIED
    assert sounds == ["door"]


def test_open_door_closes(chunk):
    door = Block(BlockType.DOOR, Direction.LEFT)
    assert act_block(chunk, door)
    assert door.data & DATA_DIRECTION == Direction.BACK
    assert door.data & DATA_STATE


@pytest.mark.parametrize("direction", list(Direction))
@pytest.mark.parametrize("state", [0, DATA_STATE])
def test_door_round_trip(chunk, direction, state):
    original = direction | state | 1
    door = Block(BlockType.DOOR, original)
    act_block(chunk, door)
    assert door.data != original
    act_block(chunk, door)
    assert door.data == original


def test_lever_toggles(chunk):
    lever = Block(BlockType.LEVER, Direction.BACK)
    sounds = []
    assert act_block(chunk, lever, sounds.append)
    assert lever.data & DATA_POWER
    assert lever.data & DATA_DIRECTION == Direction.BACK
    act_block(chunk, lever, sounds.append)
    assert lever.data == Direction.BACK
    assert sounds == ["lever", "lever"]


def test_computer_accepts_use_without_change(chunk):
    computer = Block(BlockType.COMPUTER, 3)
    assert act_block(chunk, computer)
    assert computer.data == 3
    assert chunk.flags == ChunkFlag(0)


def test_furnace_lights(chunk):
    furnace = Block(BlockType.FURNACE)
    assert act_block(chunk, furnace)
    assert furnace.data & DATA_TEXTURE == DATA_TEXTURE1
    assert chunk.flags & ChunkFlag.MODIFIED


def test_lit_furnace_unchanged(chunk):
    furnace = Block(BlockType.FURNACE, DATA_TEXTURE1)
    assert act_block(chunk, furnace)
    assert furnace.data == DATA_TEXTURE1
    assert chunk.flags == ChunkFlag(0)


@pytest.mark.parametrize("kind", [BlockType.STONE, BlockType.AIR, BlockType.TNT])
def test_other_blocks_do_nothing(chunk, kind):
    block = Block(kind)
    sounds = []
    assert act_block(chunk, block, sounds.append) is False
    assert sounds == []
    assert chunk.flags == ChunkFlag(0)