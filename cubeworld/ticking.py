"""Per-tick behaviour of blocks: growth, redstone, TNT, pistons, computers."""

from __future__ import annotations

import random
from itertools import product
from typing import Callable, Protocol

from cubeworld.blocks import (
    DATA_COMPUTER,
    DATA_COUNTER,
    DATA_COUNTER1,
    DATA_DIRECTION,
    DATA_POWER,
    DATA_TEXTURE,
    DATA_TEXTURE1,
    DATA_TEXTURE3,
    Block,
    BlockType,
)
from cubeworld.chunk import NUM_COMPUTERS, Chunk, ChunkFlag, World
from cubeworld.computer import FLAG_RUNNING
from cubeworld.positions import CHUNK_SIZE, BlockPos, ChunkPos, adjacent_positions
from cubeworld.redstone import (
    has_adjacent_power,
    tick_redstone_repeater,
    tick_redstone_torch,
    tick_redstone_wire,
)

TNT_RADIUS = 3
# Chance in percent that watered wheat advances its growth counter per tick.
_WHEAT_GROWTH_CHANCE = 20
# Maps a computer's facing to the input bit of its first neighbour.
_INPUT_MAPPING = (0, 2, 1, 3)

SoundCallback = Callable[[str], None]


class _RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


def _mark_modified(chunk: Chunk) -> None:
    chunk.flags |= ChunkFlag.MODIFIED


def _play(on_sound: SoundCallback | None, name: str) -> None:
    if on_sound is not None:
        on_sound(name)


def has_adjacent_water(world: World, chunk: Chunk, x: int, y: int, z: int) -> bool:
    """Whether one of the four horizontal neighbours is water."""
    for pos in adjacent_positions(BlockPos(chunk.position, x, y, z)):
        block = world.block_at(pos)
        if block is not None and block.type == BlockType.WATER:
            return True
    return False


def explode_tnt(world: World, chunk_pos: ChunkPos, x: int, y: int, z: int) -> None:
    """Blow up the TNT at a position, clearing a sphere and setting off other TNT."""
    world.set_block(BlockPos(chunk_pos, x, y, z), Block())
    radius_squared = TNT_RADIUS * TNT_RADIUS
    span = range(-TNT_RADIUS, TNT_RADIUS + 1)
    for di, dj, dk in product(span, repeat=3):
        if di * di + dj * dj + dk * dk > radius_squared:
            continue
        pos = BlockPos(chunk_pos, x + di, y + dj, z + dk)
        block = world.block_at(pos)
        if block is None:
            continue
        if block.type == BlockType.TNT:
            local = pos.normalized()
            explode_tnt(world, local.chunk, local.x, local.y, local.z)
        elif block.type != BlockType.BEDROCK:
            world.set_block(pos, Block())


def _advance_counter(block: Block) -> bool:
    """Count up the block's counter; True when it was already full."""
    if block.data & DATA_COUNTER != DATA_COUNTER:
        block.data += DATA_COUNTER1
        return False
    return True


def _tick_wheat(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int, rng: _RandomSource) -> None:
    if block.data & DATA_TEXTURE == DATA_TEXTURE3:
        return
    # Wheat only grows with water beside the soil, and then only by chance.
    if not has_adjacent_water(world, chunk, x, y - 1, z):
        return
    if rng.randrange(100) >= _WHEAT_GROWTH_CHANCE:
        return
    if _advance_counter(block):
        block.data = (block.data + 1) & ~DATA_COUNTER
        _mark_modified(chunk)


def _tick_lamp(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int) -> None:
    powered = has_adjacent_power(world, chunk.position, x, y, z, False)
    texture = block.data & DATA_TEXTURE
    if texture == 0 and powered:
        block.data |= DATA_TEXTURE1
        _mark_modified(chunk)
    elif texture == DATA_TEXTURE1 and not powered:
        block.data &= ~DATA_TEXTURE
        _mark_modified(chunk)


def _piston_targets(chunk: Chunk, block: Block, x: int, y: int, z: int) -> tuple[int, BlockPos, BlockPos]:
    direction = block.data & DATA_DIRECTION
    first = BlockPos(chunk.position, x, y, z).step(direction)
    return direction, first, first.step(direction)


def _tick_piston(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int) -> None:
    # A retracted piston can only extend.
    if not has_adjacent_power(world, chunk.position, x, y, z, False):
        return
    direction, first, second = _piston_targets(chunk, block, x, y, z)
    front = world.block_at(first)
    if front is None:
        return
    if front.type == BlockType.AIR:
        block.type = BlockType.PISTON_BASE
        world.set_block(first, Block(BlockType.PISTON_HEAD, direction))
        _mark_modified(chunk)
        return
    behind = world.block_at(second)
    if behind is not None and behind.type == BlockType.AIR:
        pushed = Block(front.type, front.data)
        block.type = BlockType.PISTON_BASE
        world.set_block(first, Block(BlockType.PISTON_HEAD, direction))
        world.set_block(second, pushed)
        _mark_modified(chunk)


def _tick_piston_base(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int) -> None:
    # An extended piston can only retract.
    if has_adjacent_power(world, chunk.position, x, y, z, False):
        return
    _, first, second = _piston_targets(chunk, block, x, y, z)
    front = world.block_at(first)
    behind = world.block_at(second)
    if front is None or behind is None:
        return
    block.type = BlockType.PISTON
    if behind.type == BlockType.AIR:
        world.set_block(first, Block())
    else:
        world.set_block(first, Block(behind.type, behind.data))
        world.set_block(second, Block())
    _mark_modified(chunk)


def _tick_computer(world: World, chunk: Chunk, block: Block, x: int, y: int, z: int) -> None:
    offset = _INPUT_MAPPING[(block.data & DATA_DIRECTION) >> 6]
    inputs = 0
    for i, pos in enumerate(adjacent_positions(BlockPos(chunk.position, x, y, z))):
        neighbour = world.block_at(pos)
        if neighbour is not None and neighbour.data & DATA_POWER:
            inputs |= 1 << (4 + (i + offset) % 4)

    slot = block.data & DATA_COMPUTER
    computer = chunk.computers[slot] if slot < NUM_COMPUTERS else None
    if computer is not None:
        computer.io = (computer.io & 0x0F) | inputs


def _tick_furnace(chunk: Chunk, block: Block) -> None:
    # A lit furnace burns for a while, then goes out.
    if not block.data & DATA_TEXTURE:
        return
    if _advance_counter(block):
        block.data &= ~(DATA_TEXTURE | DATA_COUNTER)
        _mark_modified(chunk)


def tick_block(
    world: World,
    chunk: Chunk,
    block: Block,
    x: int,
    y: int,
    z: int,
    rng: _RandomSource | None = None,
    on_sound: SoundCallback | None = None,
) -> None:
    """Advance one block by a tick.

    ``rng`` supplies ``randrange``; ``on_sound`` receives the name of any
    sound the block makes ("tnt").
    """
    kind = block.type
    if kind == BlockType.WHEAT:
        _tick_wheat(world, chunk, block, x, y, z, rng or random)
    elif kind == BlockType.REDSTONE_LAMP:
        _tick_lamp(world, chunk, block, x, y, z)
    elif kind == BlockType.REDSTONE_WIRE:
        tick_redstone_wire(world, chunk, block, x, y, z)
    elif kind == BlockType.REDSTONE_TORCH:
        tick_redstone_torch(world, chunk, block, x, y, z)
    elif kind == BlockType.REDSTONE_REPEATER:
        tick_redstone_repeater(world, chunk, block, x, y, z)
    elif kind == BlockType.TNT:
        if has_adjacent_power(world, chunk.position, x, y, z, False):
            explode_tnt(world, chunk.position, x, y, z)
            _play(on_sound, "tnt")
    elif kind == BlockType.PISTON:
        _tick_piston(world, chunk, block, x, y, z)
    elif kind == BlockType.PISTON_BASE:
        _tick_piston_base(world, chunk, block, x, y, z)
    elif kind == BlockType.COMPUTER:
        _tick_computer(world, chunk, block, x, y, z)
    elif kind == BlockType.FURNACE:
        _tick_furnace(chunk, block)


def tick_chunk(
    world: World,
    chunk: Chunk,
    rng: _RandomSource | None = None,
    on_sound: SoundCallback | None = None,
) -> None:
    """Tick every block of a chunk, then run its computers for one cycle.

    A chunk whose geometry is waiting to be rebuilt is left alone.
    """
    if chunk.flags & ChunkFlag.MODIFIED:
        return
    for i, j, k in product(range(CHUNK_SIZE), repeat=3):
        tick_block(world, chunk, chunk.block(i, j, k), i, j, k, rng, on_sound)
    for computer in chunk.computers:
        if computer is not None and computer.af & FLAG_RUNNING:
            computer.step()