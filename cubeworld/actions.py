"""What happens when the player uses a block."""

from __future__ import annotations

from typing import Callable

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

# Facing after opening a closed door, and after closing an open one.
_OPEN_TURN = {
    Direction.FRONT: Direction.RIGHT,
    Direction.RIGHT: Direction.BACK,
    Direction.BACK: Direction.LEFT,
    Direction.LEFT: Direction.FRONT,
}
_CLOSE_TURN = {
    Direction.FRONT: Direction.LEFT,
    Direction.LEFT: Direction.BACK,
    Direction.BACK: Direction.RIGHT,
    Direction.RIGHT: Direction.FRONT,
}


def act_block(chunk: Chunk, block: Block, on_sound: Callable[[str], None] | None = None) -> bool:
    """Use a block; True if the block reacts to being used.

    ``on_sound`` receives the name of any sound made ("door" or "lever").
    """
    kind = block.type
    if kind == BlockType.DOOR:
        direction = Direction(block.data & DATA_DIRECTION)
        turns = _OPEN_TURN if block.data & DATA_STATE else _CLOSE_TURN
        block.data = ((block.data & ~DATA_DIRECTION) | turns[direction]) ^ DATA_STATE
        chunk.flags |= ChunkFlag.MODIFIED
        if on_sound is not None:
            on_sound("door")
        return True
    if kind == BlockType.LEVER:
        block.data ^= DATA_POWER
        chunk.flags |= ChunkFlag.MODIFIED
        if on_sound is not None:
            on_sound("lever")
        return True
    if kind == BlockType.COMPUTER:
        return True
    if kind == BlockType.FURNACE:
        if not block.data & DATA_TEXTURE:
            block.data |= DATA_TEXTURE1
            chunk.flags |= ChunkFlag.MODIFIED
        return True
    return False