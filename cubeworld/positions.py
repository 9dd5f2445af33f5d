"""Chunk and block positions and movement between neighbouring blocks."""

from __future__ import annotations

from dataclasses import dataclass

from cubeworld.blocks import Direction

CHUNK_SIZE = 8

# Steps from the centre to the neighbours, each applied to the previous one:
#  1
# 0X2
#  3
_ADJACENT_STEPS = ((-1, 0), (1, 1), (1, -1), (-1, -1))


@dataclass(frozen=True)
class ChunkPos:
    """Position of a chunk in chunk units."""

    x: int = 0
    y: int = 0
    z: int = 0


@dataclass(frozen=True)
class BlockPos:
    """A block inside a chunk; coordinates may leave the chunk until normalised."""

    chunk: ChunkPos
    x: int
    y: int
    z: int

    def offset(self, dx: int, dy: int, dz: int) -> BlockPos:
        """The position moved by the given amounts, in the same chunk."""
        return BlockPos(self.chunk, self.x + dx, self.y + dy, self.z + dz)

    def step(self, direction: int) -> BlockPos:
        """The neighbour a block facing ``direction`` points at."""
        match direction:
            case Direction.FRONT:
                return self.offset(-1, 0, 0)
            case Direction.BACK:
                return self.offset(1, 0, 0)
            case Direction.LEFT:
                return self.offset(0, 0, -1)
            case Direction.RIGHT:
                return self.offset(0, 0, 1)
        return self

    def step_back(self, direction: int) -> BlockPos:
        """The neighbour behind a block facing ``direction``."""
        match direction:
            case Direction.FRONT:
                return self.offset(1, 0, 0)
            case Direction.BACK:
                return self.offset(-1, 0, 0)
            case Direction.LEFT:
                return self.offset(0, 0, 1)
            case Direction.RIGHT:
                return self.offset(0, 0, -1)
        return self

    def normalized(self) -> BlockPos:
        """The same block with coordinates inside 0..CHUNK_SIZE-1."""
        cx, x = divmod(self.x, CHUNK_SIZE)
        cy, y = divmod(self.y, CHUNK_SIZE)
        cz, z = divmod(self.z, CHUNK_SIZE)
        chunk = ChunkPos(self.chunk.x + cx, self.chunk.y + cy, self.chunk.z + cz)
        return BlockPos(chunk, x, y, z)


def adjacent_positions(pos: BlockPos) -> tuple[BlockPos, BlockPos, BlockPos, BlockPos]:
    """The four horizontal neighbours, in the order -x, +z, +x, -z."""
    result = []
    current = pos
    for dx, dz in _ADJACENT_STEPS:
        current = current.offset(dx, 0, dz)
        result.append(current)
    return tuple(result)