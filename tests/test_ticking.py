from itertools import product

from cubeworld.blocks import (
    DATA_COUNTER,
    DATA_COUNTER1,
    DATA_POWER,
    DATA_TEXTURE,
    DATA_TEXTURE1,
    Block,
    BlockType,
    Direction,
)
from cubeworld.chunk import Chunk, ChunkFlag, World
from cubeworld.computer import FLAG_RUNNING, Computer
from cubeworld.positions import CHUNK_SIZE
from cubeworld.ticking import (
    TNT_RADIUS,
    explode_tnt,
    has_adjacent_water,
    tick_block,
    tick_chunk,
)


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def randrange(self, stop):
        return self.value


def make_world():
    chunk = Chunk(flags=ChunkFlag(0))
    world = World({chunk.position: chunk})
    return world, chunk


def put(chunk, i, j, k, kind, data=0):
    block = Block(kind, data)
    chunk.set_block(i, j, k, block)
    return block


def test_has_adjacent_water():
    world, chunk = make_world()
    assert not has_adjacent_water(world, chunk, 3, 1, 3)
    put(chunk, 2, 1, 3, BlockType.WATER)
    assert has_adjacent_water(world, chunk, 3, 1, 3)


def test_water_above_is_not_adjacent():
    world, chunk = make_world()
    put(chunk, 3, 2, 3, BlockType.WATER)
    assert not has_adjacent_water(world, chunk, 3, 1, 3)


def fill_stone(chunk):
    for i, j, k in product(range(CHUNK_SIZE), repeat=3):
        put(chunk, i, j, k, BlockType.STONE)


def test_explode_clears_sphere():
    world, chunk = make_world()
    fill_stone(chunk)
    put(chunk, 4, 4, 4, BlockType.TNT)
    explode_tnt(world, chunk.position, 4, 4, 4)
    assert chunk.block(4, 4, 4).type == BlockType.AIR
    assert chunk.block(4, 4, 4 + TNT_RADIUS).type == BlockType.AIR
    assert chunk.block(4 - TNT_RADIUS, 4, 4).type == BlockType.AIR
    assert chunk.block(7, 7, 4).type == BlockType.STONE
    assert chunk.block(0, 0, 0).type == BlockType.STONE
    assert chunk.flags & ChunkFlag.MODIFIED


def test_explode_spares_bedrock():
    world, chunk = make_world()
    fill_stone(chunk)
    put(chunk, 4, 4, 4, BlockType.TNT)
    put(chunk, 4, 5, 4, BlockType.BEDROCK)
    explode_tnt(world, chunk.position, 4, 4, 4)
    assert chunk.block(4, 5, 4).type == BlockType.BEDROCK


def test_explode_chain_reaction():
    world, chunk = make_world()
    fill_stone(chunk)
    put(chunk, 4, 4, 4, BlockType.TNT)
    put(chunk, 6, 4, 4, BlockType.TNT)
    explode_tnt(world, chunk.position, 4, 4, 4)
    assert chunk.block(6, 4, 4).type == BlockType.AIR
    # Out of reach of the first blast, within reach of the second.
    assert chunk.block(6, 4, 7).type == BlockType.AIR


def wheat_setup():
    world, chunk = make_world()
    wheat = put(chunk, 3, 2, 3, BlockType.WHEAT)
    put(chunk, 3, 1, 3, BlockType.DIRT)
    put(chunk, 2, 1, 3, BlockType.WATER)
    return world, chunk, wheat


def test_wheat_grows_with_water():
    world, chunk, wheat = wheat_setup()
    tick_block(world, chunk, wheat, 3, 2, 3, FixedRandom(0))
    assert wheat.data == DATA_COUNTER1
    assert not chunk.flags & ChunkFlag.MODIFIED
    for _ in range(3):
        tick_block(world, chunk, wheat, 3, 2, 3, FixedRandom(0))
    assert wheat.data & DATA_TEXTURE == DATA_TEXTURE1
    assert wheat.data & DATA_COUNTER == 0
    assert chunk.flags & ChunkFlag.MODIFIED


def test_wheat_needs_luck():
    world, chunk, wheat = wheat_setup()
    tick_block(world, chunk, wheat, 3, 2, 3, FixedRandom(50))
    assert wheat.data == 0


def test_wheat_needs_water():
    world, chunk = make_world()
    wheat = put(chunk, 3, 2, 3, BlockType.WHEAT)
    put(chunk, 3, 1, 3, BlockType.DIRT)
    tick_block(world, chunk, wheat, 3, 2, 3, FixedRandom(0))
    assert wheat.data == 0


def test_lamp_follows_power():
    world, chunk = make_world()
    lamp = put(chunk, 3, 1, 3, BlockType.REDSTONE_LAMP)
    lever = put(chunk, 2, 1, 3, BlockType.LEVER, DATA_POWER)
    tick_block(world, chunk, lamp, 3, 1, 3)
    assert lamp.data & DATA_TEXTURE == DATA_TEXTURE1
    assert chunk.flags & ChunkFlag.MODIFIED
    lever.data = 0
    chunk.flags = ChunkFlag(0)
    tick_block(world, chunk, lamp, 3, 1, 3)
    assert lamp.data & DATA_TEXTURE == 0
    assert chunk.flags & ChunkFlag.MODIFIED


def test_powered_tnt_explodes_with_sound():
    world, chunk = make_world()
    tnt = put(chunk, 4, 4, 4, BlockType.TNT)
    put(chunk, 3, 4, 4, BlockType.LEVER, DATA_POWER)
    put(chunk, 4, 4, 6, BlockType.STONE)
    sounds = []
    tick_block(world, chunk, tnt, 4, 4, 4, on_sound=sounds.append)
    assert sounds == ["tnt"]
    assert chunk.block(4, 4, 4).type == BlockType.AIR
    assert chunk.block(4, 4, 6).type == BlockType.AIR


def test_unpowered_tnt_stays():
    world, chunk = make_world()
    tnt = put(chunk, 4, 4, 4, BlockType.TNT)
    sounds = []
    tick_block(world, chunk, tnt, 4, 4, 4, on_sound=sounds.append)
    assert sounds == []
    assert chunk.block(4, 4, 4).type == BlockType.TNT


def piston_setup():
    world, chunk = make_world()
    piston = put(chunk, 4, 1, 4, BlockType.PISTON, Direction.FRONT)
    lever = put(chunk, 5, 1, 4, BlockType.LEVER, DATA_POWER)
    return world, chunk, piston, lever


def test_piston_extends_into_air():
    world, chunk, piston, lever = piston_setup()
    tick_block(world, chunk, piston, 4, 1, 4)
    assert piston.type == BlockType.PISTON_BASE
    assert chunk.block(3, 1, 4) == Block(BlockType.PISTON_HEAD, Direction.FRONT)
    lever.data = 0
    tick_block(world, chunk, piston, 4, 1, 4)
    assert piston.type == BlockType.PISTON
    assert chunk.block(3, 1, 4).type == BlockType.AIR


def test_piston_pushes_and_pulls():
    world, chunk, piston, lever = piston_setup()
    put(chunk, 3, 1, 4, BlockType.STONE)
    tick_block(world, chunk, piston, 4, 1, 4)
    assert chunk.block(3, 1, 4).type == BlockType.PISTON_HEAD
    assert chunk.block(2, 1, 4).type == BlockType.STONE
    lever.data = 0
    tick_block(world, chunk, piston, 4, 1, 4)
    assert piston.type == BlockType.PISTON
    assert chunk.block(3, 1, 4).type == BlockType.STONE
    assert chunk.block(2, 1, 4).type == BlockType.AIR


def test_piston_blocked_by_two_blocks():
    world, chunk, piston, _ = piston_setup()
    put(chunk, 3, 1, 4, BlockType.STONE)
    put(chunk, 2, 1, 4, BlockType.DIRT)
    tick_block(world, chunk, piston, 4, 1, 4)
    assert piston.type == BlockType.PISTON
    assert chunk.block(3, 1, 4).type == BlockType.STONE
    assert chunk.block(2, 1, 4).type == BlockType.DIRT


def test_computer_reads_inputs_and_keeps_outputs():
    world, chunk = make_world()
    computer = Computer(io=0x05)
    chunk.computers[0] = computer
    block = put(chunk, 4, 1, 4, BlockType.COMPUTER, Direction.FRONT)
    put(chunk, 3, 1, 4, BlockType.LEVER, DATA_POWER)
    tick_block(world, chunk, block, 4, 1, 4)
    assert computer.io >> 4 == 1
    assert computer.io & 0x0F == 0x05


def test_computer_without_inputs_clears_high_nibble():
    world, chunk = make_world()
    computer = Computer(io=0xF3)
    chunk.computers[0] = computer
    block = put(chunk, 4, 1, 4, BlockType.COMPUTER)
    tick_block(world, chunk, block, 4, 1, 4)
    assert computer.io == 0x03


def test_furnace_goes_out():
    world, chunk = make_world()
    furnace = put(chunk, 1, 1, 1, BlockType.FURNACE, DATA_TEXTURE1)
    for _ in range(3):
        tick_block(world, chunk, furnace, 1, 1, 1)
    assert furnace.data & DATA_TEXTURE == DATA_TEXTURE1
    assert not chunk.flags & ChunkFlag.MODIFIED
    tick_block(world, chunk, furnace, 1, 1, 1)
    assert furnace.data == 0
    assert chunk.flags & ChunkFlag.MODIFIED


def test_unlit_furnace_unchanged():
    world, chunk = make_world()
    furnace = put(chunk, 1, 1, 1, BlockType.FURNACE)
    tick_block(world, chunk, furnace, 1, 1, 1)
    assert furnace.data == 0


def test_tick_chunk_skips_modified_chunk():
    world, chunk = make_world()
    furnace = put(chunk, 1, 1, 1, BlockType.FURNACE, DATA_TEXTURE1)
    chunk.flags = ChunkFlag.MODIFIED
    tick_chunk(world, chunk)
    assert furnace.data == DATA_TEXTURE1


def test_tick_chunk_ticks_blocks():
    world, chunk = make_world()
    furnace = put(chunk, 1, 1, 1, BlockType.FURNACE, DATA_TEXTURE1)
    tick_chunk(world, chunk)
    assert furnace.data == DATA_TEXTURE1 | DATA_COUNTER1


def test_tick_chunk_runs_only_running_computers():
    world, chunk = make_world()
    running = Computer(af=FLAG_RUNNING)
    idle = Computer()
    chunk.computers[0] = running
    chunk.computers[1] = idle
    tick_chunk(world, chunk)
    assert running.pc == 1
    assert idle.pc == 0