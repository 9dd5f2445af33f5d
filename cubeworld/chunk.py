"""Chunks of blocks, the world that holds them, and chunk persistence."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntFlag
from itertools import product
from typing import BinaryIO, Iterator

from cubeworld.aabb import AABB, AABBSide, Vec3
from cubeworld.blocks import Block, BlockSide, BlockType, block_aabb, is_collidable, is_opaque
from cubeworld.computer import Computer
from cubeworld.meshing import Quad, block_quads
from cubeworld.positions import CHUNK_SIZE, BlockPos, ChunkPos

NUM_COMPUTERS = 8
_BLOCK_COUNT = CHUNK_SIZE ** 3
_POSITION = struct.Struct("<3h")
# Start value for the nearest hit; farther than any ray of interest.
_FAR = 512.0

_NEIGHBOURS = (
    (0, 0, 1, BlockSide.FRONT),
    (0, 0, -1, BlockSide.BACK),
    (1, 0, 0, BlockSide.RIGHT),
    (-1, 0, 0, BlockSide.LEFT),
    (0, 1, 0, BlockSide.TOP),
    (0, -1, 0, BlockSide.BOTTOM),
)


class ChunkFlag(IntFlag):
    """State bits of a chunk."""

    IS_EMPTY = 0b00000001
    IS_INITIAL = 0b00000010
    NO_DRAW_DATA = 0b00000100
    MODIFIED = 0b01000000


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


def _in_chunk(*coords: int) -> bool:
    return all(0 <= c < CHUNK_SIZE for c in coords)


@dataclass
class World:
    """The loaded chunks, addressed by their chunk position."""

    chunks: dict[ChunkPos, Chunk] = field(default_factory=dict)

    def chunk_at(self, pos: BlockPos) -> Chunk | None:
        """The loaded chunk holding a block position, if any."""
        return self.chunks.get(pos.normalized().chunk)

    def block_at(self, pos: BlockPos) -> Block | None:
        """The block at a position, or None when its chunk is not loaded."""
        chunk = self.chunk_at(pos)
        if chunk is None:
            return None
        local = pos.normalized()
        return chunk.block(local.x, local.y, local.z)

    def set_block(self, pos: BlockPos, block: Block) -> None:
        """Replace the block at a position and mark its chunk as modified."""
        chunk = self.chunk_at(pos)
        if chunk is None:
            raise LookupError(f"no chunk loaded for {pos}")
        local = pos.normalized()
        chunk.set_block(local.x, local.y, local.z, block)
        chunk.flags |= ChunkFlag.MODIFIED


@dataclass
class Chunk:
    """A cube of CHUNK_SIZE³ blocks with its computers and drawing geometry."""

    position: ChunkPos = field(default_factory=ChunkPos)
    blocks: list[Block] = field(default_factory=lambda: [Block() for _ in range(_BLOCK_COUNT)])
    computers: list[Computer | None] = field(default_factory=lambda: [None] * NUM_COMPUTERS)
    flags: ChunkFlag = ChunkFlag.IS_INITIAL | ChunkFlag.MODIFIED | ChunkFlag.NO_DRAW_DATA
    mesh: list[Quad] = field(default_factory=list, compare=False)

    def __post_init__(self) -> None:
        if len(self.blocks) != _BLOCK_COUNT:
            raise ValueError(f"a chunk holds {_BLOCK_COUNT} blocks, got {len(self.blocks)}")
        if len(self.computers) != NUM_COMPUTERS:
            raise ValueError(f"a chunk holds {NUM_COMPUTERS} computer slots")
        self.flags = ChunkFlag(self.flags)

    @property
    def aabb(self) -> AABB:
        """The box covering the whole chunk in world space."""
        low = Vec3(*(c * CHUNK_SIZE for c in (self.position.x, self.position.y, self.position.z)))
        return AABB(low, low + Vec3(CHUNK_SIZE, CHUNK_SIZE, CHUNK_SIZE))

    @staticmethod
    def _index(i: int, j: int, k: int) -> int:
        if not _in_chunk(i, j, k):
            raise IndexError(f"block ({i}, {j}, {k}) lies outside the chunk")
        return i + j * CHUNK_SIZE + k * CHUNK_SIZE * CHUNK_SIZE

    def block(self, i: int, j: int, k: int) -> Block:
        """The block at chunk-local coordinates."""
        return self.blocks[self._index(i, j, k)]

    def set_block(self, i: int, j: int, k: int, block: Block) -> None:
        """Put a block at chunk-local coordinates."""
        self.blocks[self._index(i, j, k)] = block

    def _solid_blocks(self) -> Iterator[tuple[int, int, int, Block]]:
        for i, j, k in product(range(CHUNK_SIZE), repeat=3):
            block = self.block(i, j, k)
            if block.type != BlockType.AIR:
                yield i, j, k, block

    def occlusion(self, world: World, i: int, j: int, k: int) -> BlockSide:
        """Sides of a block hidden by opaque neighbours; unloaded space hides too."""
        hidden = BlockSide(0)
        for dx, dy, dz, side in _NEIGHBOURS:
            ni, nj, nk = i + dx, j + dy, k + dz
            if _in_chunk(ni, nj, nk):
                opaque = is_opaque(self.block(ni, nj, nk).type)
            else:
                neighbour = world.block_at(BlockPos(self.position, ni, nj, nk))
                opaque = neighbour is None or is_opaque(neighbour.type)
            if opaque:
                hidden |= side
        return hidden

    def build_mesh(self, world: World) -> list[Quad]:
        """Rebuild the chunk's geometry in chunk-local coordinates."""
        self.flags |= ChunkFlag.IS_EMPTY
        mesh: list[Quad] = []
        for i, j, k, block in self._solid_blocks():
            self.flags &= ~ChunkFlag.IS_EMPTY
            hidden = self.occlusion(world, i, j, k)
            if hidden != BlockSide.ALL:
                mesh.extend(block_quads(block, i, j, k, hidden))
        self.mesh = mesh
        return mesh

    def update_mesh(self, world: World) -> bool:
        """Rebuild the geometry if the chunk was modified; True if it was rebuilt."""
        if not self.flags & ChunkFlag.MODIFIED:
            return False
        self.build_mesh(world)
        self.flags &= ~(ChunkFlag.MODIFIED | ChunkFlag.NO_DRAW_DATA)
        return True

    def intersect_ray(
        self, origin: Vec3, direction: Vec3, max_distance: float
    ) -> tuple[AABBSide, BlockPos | None, float | None]:
        """The nearest block hit by a ray: side, block position and distance.

        Chunks farther away than twice ``max_distance`` are skipped.
        """
        miss = (AABBSide.NONE, None, None)
        if self.flags & ChunkFlag.IS_EMPTY:
            return miss
        side, distance = self.aabb.intersect_ray(origin, direction)
        if side == AABBSide.NONE or distance > max_distance * 2:
            return miss

        low = self.aabb.min
        best_side = AABBSide.NONE
        best_pos: BlockPos | None = None
        best_distance = _FAR
        for i, j, k, block in self._solid_blocks():
            box = block_aabb(block, low + Vec3(i, j, k))
            side, distance = box.intersect_ray(origin, direction)
            if side != AABBSide.NONE and distance < best_distance:
                best_side = side
                best_pos = BlockPos(self.position, i, j, k)
                best_distance = distance
        if best_pos is None:
            return miss
        return best_side, best_pos, best_distance

    def intersects_aabb(self, box: AABB) -> bool:
        """Whether a box overlaps any collidable block of the chunk."""
        if self.flags & ChunkFlag.IS_EMPTY:
            return False
        if not self.aabb.intersects(box):
            return False
        low = self.aabb.min
        return any(
            is_collidable(block.type) and block_aabb(block, low + Vec3(i, j, k)).intersects(box)
            for i, j, k, block in self._solid_blocks()
        )

    def save(self, stream: BinaryIO) -> None:
        """Write position, blocks and computers to a binary stream."""
        stream.write(_POSITION.pack(self.position.x, self.position.y, self.position.z))
        stream.write(bytes(value for block in self.blocks for value in (block.type, block.data)))
        present = [(index, c) for index, c in enumerate(self.computers) if c is not None]
        stream.write(bytes((len(present),)))
        for index, computer in present:
            stream.write(bytes((index,)))
            computer.save(stream)

    @classmethod
    def load(cls, stream: BinaryIO) -> Chunk:
        """Read a chunk written by :meth:`save`; it is marked for a geometry rebuild."""
        position = ChunkPos(*_POSITION.unpack(_read_exact(stream, _POSITION.size)))
        raw = _read_exact(stream, 2 * _BLOCK_COUNT)
        blocks = [Block(BlockType(raw[n]), raw[n + 1]) for n in range(0, len(raw), 2)]
        computers: list[Computer | None] = [None] * NUM_COMPUTERS
        (count,) = _read_exact(stream, 1)
        for _ in range(count):
            (index,) = _read_exact(stream, 1)
            if index >= NUM_COMPUTERS:
                raise ValueError(f"computer index out of range: {index}")
            computers[index] = Computer.load(stream)
        return cls(
            position=position,
            blocks=blocks,
            computers=computers,
            flags=ChunkFlag.MODIFIED | ChunkFlag.NO_DRAW_DATA,
        )