"""Redstone power: wires, torches, repeaters and their power sources."""

from __future__ import annotations

from cubeworld.blocks import (
    DATA_COMPUTER,
    DATA_DIRECTION,
    DATA_POWER,
    DATA_TEXTURE,
    DATA_TEXTURE1,
    DATA_VISITED,
    Block,
    BlockType,
)
from cubeworld.chunk import Chunk, ChunkFlag, World
from cubeworld.positions import BlockPos, ChunkPos, adjacent_positions

# Maps a computer's facing to the output bit of its first neighbour.
_OUTPUT_MAPPING = (2, 0, 3, 1)


def _computer_output(world: World, pos: BlockPos, block: Block, neighbour_index: int) -> bool:
    chunk = world.chunk_at(pos)
    slot = block.data & DATA_COMPUTER
    if chunk is None or slot >= len(chunk.computers):
        return False
    computer = chunk.computers[slot]
    if computer is None:
        return False
    bit = (neighbour_index + _OUTPUT_MAPPING[(block.data & DATA_DIRECTION) >> 6]) % 4
    return bool(computer.io & 0x0F & (1 << bit))


def has_adjacent_power(world: World, chunk_pos: ChunkPos, x: int, y: int, z: int, only_source: bool) -> bool:
    """Whether a horizontal neighbour feeds power into the block.

    With ``only_source`` powered wires do not count, only direct sources.
    """
    origin = BlockPos(chunk_pos, x, y, z)
    for index, pos in enumerate(adjacent_positions(origin)):
        block = world.block_at(pos)
        if block is None:
            continue
        if block.type == BlockType.REDSTONE_REPEATER and block.data & DATA_POWER:
            # A repeater only powers the block behind it.
            back = pos.step_back(block.data & DATA_DIRECTION).normalized()
            if (back.chunk.x, back.chunk.z, back.x, back.z) == (chunk_pos.x, chunk_pos.z, x, z):
                return True
        elif block.data & DATA_POWER:
            if not only_source or block.type != BlockType.REDSTONE_WIRE:
                return True
        elif block.type == BlockType.COMPUTER:
            if _computer_output(world, pos, block, index):
                return True
    return False


def _connected_wires(world: World, chunk_pos: ChunkPos, x: int, y: int, z: int):
    """Wire blocks next to a position, one level down, level and one level up."""
    for dy in (-1, 0, 1):
        for pos in adjacent_positions(BlockPos(chunk_pos, x, y + dy, z)):
            block = world.block_at(pos)
            if block is not None and block.type == BlockType.REDSTONE_WIRE:
                yield pos.normalized(), block


def has_circuit_power_source(world: World, chunk_pos: ChunkPos, x: int, y: int, z: int) -> bool:
    """Whether the wire circuit through a position reaches a power source."""
    if has_adjacent_power(world, chunk_pos, x, y, z, True):
        return True
    own = world.block_at(BlockPos(chunk_pos, x, y, z))
    if own is None or own.data & DATA_VISITED:
        return False
    own.data |= DATA_VISITED
    try:
        return any(
            has_circuit_power_source(world, pos.chunk, pos.x, pos.y, pos.z)
            for pos, _ in _connected_wires(world, chunk_pos, x, y, z)
        )
    finally:
        own.data &= ~DATA_VISITED


def update_circuit(world: World, chunk_pos: ChunkPos, x: int, y: int, z: int, powered: bool) -> None:
    """Switch a wire and every wire connected to it on or off."""
    pos = BlockPos(chunk_pos, x, y, z)
    current = world.block_at(pos)
    if current is None:
        raise LookupError(f"no chunk loaded for {pos}")
    if powered:
        data = current.data | DATA_TEXTURE1 | DATA_POWER
    else:
        data = current.data & ~(DATA_TEXTURE | DATA_POWER)
    world.set_block(pos, Block(current.type, data))

    for neighbour_pos, neighbour in _connected_wires(world, chunk_pos, x, y, z):
        if bool(neighbour.data & DATA_POWER) != powered:
            update_circuit(world, neighbour_pos.chunk, neighbour_pos.x, neighbour_pos.y, neighbour_pos.z, powered)


def tick_redstone_wire(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int) -> None:
    """Power or unpower a wire's circuit when its source appears or disappears."""
    has_source = has_circuit_power_source(world, chunk.position, x, y, z)
    if block.data & DATA_POWER:
        if not has_source:
            update_circuit(world, chunk.position, x, y, z, False)
    elif has_source:
        update_circuit(world, chunk.position, x, y, z, True)


def tick_redstone_torch(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int) -> None:
    """A torch is lit unless the block below it is powered."""
    power_below = has_adjacent_power(world, chunk.position, x, y - 1, z, False)
    if block.data & DATA_POWER and power_below:
        block.data &= ~(DATA_POWER | DATA_TEXTURE)
        chunk.flags |= ChunkFlag.MODIFIED
    elif not block.data & DATA_POWER and not power_below:
        block.data |= DATA_POWER | DATA_TEXTURE1
        chunk.flags |= ChunkFlag.MODIFIED


def tick_redstone_repeater(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int) -> None:
    """A repeater copies the power of the block it faces."""
    source = world.block_at(BlockPos(chunk.position, x, y, z).step(block.data & DATA_DIRECTION))
    power = source is not None and bool(source.data & DATA_POWER)
    if not block.data & DATA_POWER and power:
        block.data |= DATA_POWER | DATA_TEXTURE1
        chunk.flags |= ChunkFlag.MODIFIED
    elif block.data & DATA_POWER and not power:
        block.data &= ~(DATA_POWER | DATA_TEXTURE)
        chunk.flags |= ChunkFlag.MODIFIED