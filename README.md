# cubeworld

The simulation core of a small block-building game. It is plain Python and has no
third-party dependencies.

## Modules

- **`cubeworld.aabb`** handles geometry.
  - `Vec3` is a point or direction.
  - `AABB` is an axis-aligned box.
  - `AABB.contains_point` and `AABB.intersects` test a point or another box against the box.
  - `AABB.intersect_ray` returns the `AABBSide` that a ray enters through and the distance along the ray. On a miss it returns `(AABBSide.NONE, None)`.
- **`cubeworld.blocks`** describes the blocks.
  - `BlockType`, `Block` and `BlockSide`. `BlockSide` is an occlusion mask.
  - The `DATA_*` bit masks for the block data byte.
  - `Direction` gives a block's facing.
  - Queries:
    - `block_name`
    - `is_opaque`
    - `is_collidable`
    - `is_oriented`
    - `can_place`
    - `block_aabb`, which returns a block's collision box.
    - `texture_coordinate`, which turns an atlas pixel into a texture coordinate.
- **`cubeworld.positions`** holds positions.
  - `ChunkPos` and `BlockPos`.
  - `BlockPos.offset`, `BlockPos.step` and `BlockPos.step_back` move a position along a facing.
  - `BlockPos.normalized` wraps a position across chunk borders.
  - `adjacent_positions` gives the four horizontal neighbours.
- **`cubeworld.computer`** is a 4-bit CPU (`Computer`).
  - It has 128 bytes of program memory and 16 bytes of RAM, addressed as nibbles.
  - An accumulator `a` and the `pc` and `io` registers.
  - The `Instruction` opcodes, and `encode_instruction` to assemble them.
  - `Computer.step` runs one instruction.
  - `Computer.save` and `Computer.load` write and read its state on a binary stream.
- **`cubeworld.meshing`** builds geometry.
  - `block_quads` turns a block into textured `Quad`s, taking face occlusion into account.
  - `block_texture` looks up a block's texture cell in the atlas.
- **`cubeworld.icons`**: `inventory_texture` gives the atlas position of a block's inventory picture.
- **`cubeworld.chunk`** holds chunks and the world.
  - `Chunk` is an 8×8×8 grid of blocks with eight computer slots and `ChunkFlag` state bits. It can:
    - `Chunk.occlusion`: compute face occlusion.
    - `Chunk.build_mesh` and `Chunk.update_mesh`: build its mesh.
    - `Chunk.intersect_ray` and `Chunk.intersects_aabb`: test ray and box hits.
    - `Chunk.save` and `Chunk.load`: save to and load from a binary stream.
  - `World` maps chunk positions to chunks. It looks up, replaces and finds blocks across chunks with `block_at`, `set_block` and `chunk_at`.
- **`cubeworld.redstone`** handles redstone power.
  - It checks for power with `has_adjacent_power` and `has_circuit_power_source`.
  - It switches whole wire circuits with `update_circuit`.
  - It ticks wires, torches and repeaters.
- **`cubeworld.ticking`** runs per-tick behaviour.
  - `tick_block` and `tick_chunk` cover wheat growth, lamps, TNT (`explode_tnt`), pistons, furnaces and computers.
  - A random source (anything with `randrange`) can be passed in.
  - A sound callback can be passed in. It receives `"tnt"`.
- **`cubeworld.actions`**: `act_block` uses a block.
  - It opens and closes doors, flips levers and lights furnaces.
  - The sound callback receives `"door"` or `"lever"`.
- **`cubeworld.input`** reads the buttons.
  - The `Key` buttons.
  - `map_key` maps a key name to a button, for the desktop or the handheld layout.
  - `KeyState` tracks held, just-pressed and just-released buttons frame by frame.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

This example runs a short program on the computer. The program loads 3 into the accumulator, adds 4, stores the result in RAM location 0 and jumps back to the start:

```python
import io

from cubeworld.computer import Computer, Instruction, encode_instruction

cpu = Computer()
cpu.program[0] = encode_instruction(Instruction.IMA, 3)
cpu.program[1] = encode_instruction(Instruction.ADI, 4)
cpu.program[2] = encode_instruction(Instruction.STA, 0)
cpu.program[3] = encode_instruction(Instruction.JP, 0)
cpu.program[4] = 0

for _ in range(3):
    cpu.step()

assert cpu.read_ram(0) == 7

buffer = io.BytesIO()
cpu.save(buffer)
buffer.seek(0)
assert Computer.load(buffer).read_ram(0) == 7
```

This example casts a ray against a unit box:

```python
from cubeworld.aabb import AABB, AABBSide, Vec3

box = AABB(Vec3(0, 0, 0), Vec3(1, 1, 1))
side, distance = box.intersect_ray(Vec3(-2, 0.5, 0.5), Vec3(1, 0, 0))
assert side is AABBSide.LEFT and distance == 2
```

## What it does not do

This package is the simulation only. It has none of the following:

- A window, renderer or game loop.
- Audio playback. Sounds are only reported by name to a callback.
- World generation or a player.
- A command to run.

Meshes are lists of `Quad`s for a renderer of your own to draw. `KeyState` is fed button events by your own event loop.