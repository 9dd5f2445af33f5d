"""Geometry for blocks: textured quads in world space, ready to be drawn."""

from __future__ import annotations

import math
from dataclasses import dataclass

from cubeworld.aabb import Vec3
from cubeworld.blocks import (
    BLOCK_SIZE,
    DATA_DIRECTION,
    DATA_PART,
    DATA_POWER,
    DATA_TEXTURE,
    DOOR_WIDTH,
    PIXEL_SIZE,
    Block,
    BlockSide,
    BlockType,
    Direction,
    texture_coordinate,
)

TexCoord = tuple[float, float]

# Texture atlas cells, in face order: front, rear, left, right, up, down.
_TEXTURES: dict[BlockType, tuple[tuple[int, int], ...]] = {
    BlockType.BEDROCK: ((0, 0),),
    BlockType.STONE: ((1, 0),),
    BlockType.SAND: ((2, 0),),
    BlockType.DIRT: ((3, 0),),
    BlockType.GRASS: ((4, 0), (4, 0), (4, 0), (4, 0), (5, 0), (3, 0)),
    BlockType.WOOD: ((6, 0), (6, 0), (6, 0), (6, 0), (7, 0), (7, 0)),
    BlockType.PLANKS: ((0, 1),),
    BlockType.COAL_ORE: ((1, 1),),
    BlockType.IRON_ORE: ((2, 1),),
    BlockType.GOLD_ORE: ((3, 1),),
    BlockType.REDSTONE_ORE: ((4, 1),),
    BlockType.DIAMOND_ORE: ((5, 1),),
    BlockType.FLOWER: ((6, 1), (7, 1), (3, 7), (4, 7)),
    BlockType.TALL_GRASS: ((0, 2),),
    BlockType.GLASS: ((1, 2),),
    BlockType.LEAVES: ((2, 2),),
    BlockType.BOOKSHELF: ((3, 2), (3, 2), (3, 2), (3, 2), (0, 1), (0, 1)),
    BlockType.WHEAT: ((4, 2), (5, 2), (6, 2), (7, 2)),
    BlockType.WATER: ((0, 3),),
    BlockType.DOOR: ((0, 1), (1, 3), (1, 4)),
    BlockType.REDSTONE_LAMP: ((2, 3), (2, 4)),
    BlockType.REDSTONE_WIRE: ((4, 3), (4, 4)),
    BlockType.REDSTONE_TORCH: ((5, 3), (5, 4)),
    BlockType.REDSTONE_REPEATER: ((6, 3), (6, 4)),
    BlockType.TNT: ((7, 3), (7, 3), (7, 3), (7, 3), (7, 4), (7, 4)),
    BlockType.SUGAR_CANE: ((0, 4),),
    BlockType.CRAFTING_TABLE: ((1, 5), (1, 5), (2, 5), (2, 5), (0, 5), (0, 1)),
    BlockType.COBBLESTONE: ((3, 5),),
    BlockType.PISTON: ((6, 5), (7, 5), (5, 5), (5, 5), (5, 5), (5, 5)),
    BlockType.PISTON_BASE: ((4, 5), (5, 5), (7, 5)),
    BlockType.PISTON_HEAD: ((6, 5), (0, 1)),
    BlockType.FURNACE: ((0, 6), (7, 5), (7, 5), (7, 5), (7, 5), (7, 5), (1, 6)),
    BlockType.CACTUS: ((2, 6), (2, 6), (2, 6), (2, 6), (3, 6), (3, 6)),
    BlockType.DEAD_SHRUB: ((4, 6),),
    BlockType.COMPUTER: ((5, 6), (6, 6), (7, 6), (7, 6), (7, 6), (7, 6)),
    BlockType.BRICKS: ((0, 7),),
    BlockType.MUSHROOM: ((1, 7), (2, 7)),
    BlockType.WOOD_SLAB: ((0, 1),),
    BlockType.COBBLESTONE_SLAB: ((3, 5),),
}

# Vertex indices of each face of a box, in the order of _SIDES.
_FACES = (
    (0, 1, 2, 3),
    (4, 5, 6, 7),
    (5, 0, 3, 6),
    (1, 4, 7, 2),
    (3, 2, 7, 6),
    (5, 4, 1, 0),
)
_SIDES = (
    BlockSide.FRONT,
    BlockSide.BACK,
    BlockSide.LEFT,
    BlockSide.RIGHT,
    BlockSide.TOP,
    BlockSide.BOTTOM,
)

# (cos, sin) of the rotation about the y axis for each facing.
_Y_ROTATION = {
    Direction.FRONT: (1, 0),
    Direction.RIGHT: (0, 1),
    Direction.BACK: (-1, 0),
    Direction.LEFT: (0, -1),
}

_ROTATED_SIDES = {
    Direction.BACK: (BlockSide.BACK, BlockSide.FRONT, BlockSide.RIGHT, BlockSide.LEFT),
    Direction.RIGHT: (BlockSide.RIGHT, BlockSide.LEFT, BlockSide.FRONT, BlockSide.BACK),
    Direction.LEFT: (BlockSide.LEFT, BlockSide.RIGHT, BlockSide.BACK, BlockSide.FRONT),
}

_FLAT_HEIGHT = BLOCK_SIZE / 20


@dataclass(frozen=True)
class Quad:
    """Four textured vertices; double-sided quads are drawn without culling."""

    vertices: tuple[Vec3, Vec3, Vec3, Vec3]
    tex_coords: tuple[TexCoord, TexCoord, TexCoord, TexCoord]
    double_sided: bool = False


def block_texture(block_type: BlockType, index: int) -> tuple[float, float]:
    """Pixel position of a block's texture in the atlas."""
    block_type = BlockType(block_type)
    try:
        cells = _TEXTURES[block_type]
    except KeyError:
        raise ValueError(f"{block_type.name} has no texture") from None
    if not 0 <= index < len(cells):
        raise IndexError(f"{block_type.name} has no texture {index}")
    cx, cy = cells[index]
    return cx * 8.0, cy * 8.0


def _low(pixel: float) -> float:
    # Small inset against bleeding between atlas cells.
    return texture_coordinate(pixel) + 0.001


def _high(pixel: float) -> float:
    return texture_coordinate(pixel) - 0.001


def _coords(x1: float, y1: float, x2: float, y2: float) -> tuple[TexCoord, ...]:
    return ((x2, y2), (x1, y2), (x1, y1), (x2, y1))


def _cell_coords(tex: tuple[float, float], width: float = 8, height: float = 8):
    tx, ty = tex
    return _coords(_low(tx), _low(ty), _high(tx + width), _high(ty + height))


def _box(x: float, y: float, z: float, xs: float, ys: float, zs: float) -> list[Vec3]:
    return [
        Vec3(x, y, z + zs),
        Vec3(x + xs, y, z + zs),
        Vec3(x + xs, y + ys, z + zs),
        Vec3(x, y + ys, z + zs),
        Vec3(x + xs, y, z),
        Vec3(x, y, z),
        Vec3(x, y + ys, z),
        Vec3(x + xs, y + ys, z),
    ]


def _quad(vertices, face, coords, double_sided: bool = False) -> Quad:
    return Quad(tuple(vertices[i] for i in face), tuple(coords), double_sided)


def _place_rotated(vertex: Vec3, direction: int, x: int, y: int, z: int) -> Vec3:
    """Rotate a vertex centred on the origin to a facing, then move it into place."""
    c, s = _Y_ROTATION.get(direction, (1, 0))
    return Vec3(
        vertex.x * c + vertex.z * s + x + 0.5,
        vertex.y + y,
        -vertex.x * s + vertex.z * c + z + 0.5,
    )


def _rotate_about(v: Vec3, axis: Vec3, angle: float) -> Vec3:
    c = math.cos(angle)
    s = math.sin(angle)
    kx, ky, kz = axis
    dot = kx * v.x + ky * v.y + kz * v.z
    cross = Vec3(ky * v.z - kz * v.y, kz * v.x - kx * v.z, kx * v.y - ky * v.x)
    return Vec3(
        v.x * c + cross.x * s + kx * dot * (1 - c),
        v.y * c + cross.y * s + ky * dot * (1 - c),
        v.z * c + cross.z * s + kz * dot * (1 - c),
    )


def _normal_block(block: Block, x, y, z, occlusion: int, height: int) -> list[Quad]:
    vertices = _box(x, y, z, BLOCK_SIZE, PIXEL_SIZE * height, BLOCK_SIZE)
    coords = _cell_coords(block_texture(block.type, block.data & DATA_TEXTURE), 8, height)
    return [
        _quad(vertices, face, coords)
        for face, side in zip(_FACES, _SIDES)
        if not occlusion & side
    ]


def _multitex_block(block: Block, x, y, z, occlusion: int) -> list[Quad]:
    vertices = _box(x, y, z, BLOCK_SIZE, BLOCK_SIZE, BLOCK_SIZE)
    return [
        _quad(vertices, face, _cell_coords(block_texture(block.type, i)))
        for i, (face, side) in enumerate(zip(_FACES, _SIDES))
        if not occlusion & side
    ]


def _multitex_block_rotated(block: Block, x, y, z, occlusion: int) -> list[Quad]:
    direction = block.data & DATA_DIRECTION
    sides = list(_SIDES)
    sides[:4] = _ROTATED_SIDES.get(direction, _SIDES[:4])

    local = _box(-0.5, 0, -0.5, BLOCK_SIZE, BLOCK_SIZE, BLOCK_SIZE)
    vertices = [_place_rotated(v, direction, x, y, z) for v in local]
    faces = list(_FACES)
    faces[1] = (6, 7, 4, 5)

    textures = [block_texture(block.type, i) for i in range(6)]
    variant = block.data & DATA_TEXTURE
    if variant and 5 + variant < len(_TEXTURES[block.type]):
        textures[0] = block_texture(block.type, 5 + variant)
    textures[0], textures[2] = textures[2], textures[0]
    textures[1], textures[3] = textures[3], textures[1]

    return [
        _quad(vertices, face, _cell_coords(tex))
        for face, side, tex in zip(faces, sides, textures)
        if not occlusion & side
    ]


def _x_block(block: Block, x, y, z) -> list[Quad]:
    vertices = _box(x, y, z, BLOCK_SIZE, BLOCK_SIZE, BLOCK_SIZE)
    coords = _cell_coords(block_texture(block.type, block.data & DATA_TEXTURE))
    return [
        _quad(vertices, face, coords, double_sided=True)
        for face in ((0, 4, 7, 3), (5, 1, 2, 6))
    ]


def _part_block(direction: int, x, y, z, size: float, start_front: bool, textures) -> list[Quad]:
    front = direction == Direction.FRONT
    back = direction == Direction.BACK
    left = direction == Direction.LEFT
    right = direction == Direction.RIGHT
    if start_front:
        x1 = x if (front or not back) else x + 1 - size
        z1 = z if (left or not right) else z + 1 - size
    else:
        x1 = x if (not front or back) else x + 1 - size
        z1 = z if (not left or right) else z + 1 - size
    xs = size if (front or back) else BLOCK_SIZE
    zs = size if (left or right) else BLOCK_SIZE

    vertices = _box(x1, y, z1, xs, BLOCK_SIZE, zs)

    textures = list(textures)
    if back:
        swaps = ((0, 1), (2, 3))
    elif left:
        swaps = ((0, 3), (1, 2))
    elif right:
        swaps = ((0, 2), (1, 3))
    else:
        swaps = ()
    for a, b in swaps:
        textures[a], textures[b] = textures[b], textures[a]

    quads = []
    for i, (face, (tex0, tex1)) in enumerate(zip(_FACES, textures)):
        if i > 3 and (left or right):
            # Top and bottom are turned by 90 degrees for sideways facings.
            coords = (
                (_high(tex1[0]), _low(tex0[1])),
                (_high(tex1[0]), _high(tex1[1])),
                (_low(tex0[0]), _high(tex1[1])),
                (_low(tex0[0]), _low(tex0[1])),
            )
        else:
            coords = _coords(_low(tex0[0]), _low(tex0[1]), _high(tex1[0]), _high(tex1[1]))
        quads.append(_quad(vertices, face, coords))
    return quads


def _door(block: Block, x, y, z) -> list[Quad]:
    fb0 = block_texture(block.type, 1 if block.data & DATA_PART else 2)
    fb1 = (fb0[0] + 8, fb0[1] + 8)
    lr0 = block_texture(block.type, 0)
    lr1 = (lr0[0] + 1, lr0[1] + 8)
    textures = [(lr0, lr1), (lr0, lr1), (fb0, fb1), (fb0, fb1), (lr0, lr1), (lr0, lr1)]
    return _part_block(block.data & DATA_DIRECTION, x, y, z, DOOR_WIDTH, True, textures)


def _flat_vertices(x: float, y: float, z: float) -> tuple[Vec3, ...]:
    h = y + _FLAT_HEIGHT
    return (
        Vec3(x, h, z + BLOCK_SIZE),
        Vec3(x + BLOCK_SIZE, h, z + BLOCK_SIZE),
        Vec3(x + BLOCK_SIZE, h, z),
        Vec3(x, h, z),
    )


def _flat_block(block: Block, x, y, z) -> list[Quad]:
    coords = _cell_coords(block_texture(block.type, block.data & DATA_TEXTURE))
    return [Quad(_flat_vertices(x, y, z), coords)]


def _flat_block_rotated(block: Block, x, y, z) -> list[Quad]:
    direction = block.data & DATA_DIRECTION
    coords = _cell_coords(block_texture(block.type, block.data & DATA_TEXTURE))
    local = _flat_vertices(-0.5, 0, -0.5)
    vertices = tuple(_place_rotated(v, direction, x, y, z) for v in local)
    return [Quad(vertices, coords)]


def _switch_faces(vertices, tex, width: float, side_height: float, top_height: float):
    tx, ty = tex
    x1, y1 = _low(tx), _low(ty)
    heights = (side_height,) * 4 + (top_height,)
    return [
        _quad(vertices, face, _coords(x1, y1, _high(tx + width), _high(ty + h)))
        for face, h in zip(_FACES[:5], heights)
    ]


def _switch(block: Block, x, y, z) -> list[Quad]:
    direction = block.data & DATA_DIRECTION
    along_x = direction in (Direction.FRONT, Direction.BACK)
    powered = bool(block.data & DATA_POWER)
    p = PIXEL_SIZE

    if along_x:
        base = _box(x + p, y, z + 2 * p, 6 * p, 2 * p, 4 * p)
    else:
        base = _box(x + 2 * p, y, z + p, 4 * p, 2 * p, 6 * p)
    quads = _switch_faces(base, block_texture(BlockType.COBBLESTONE, 0), 6, 2, 4)

    angle = math.radians(45 if powered else -45)
    x_pos = x + 4 * p + (-2 * p if powered else 2 * p)
    z_pos = z + 4 * p + (2 * p if powered else -2 * p)
    lever = []
    for v in _box(-p, -2.5 * p, -p, 2 * p, 5 * p, 2 * p):
        if along_x:
            r = _rotate_about(v, Vec3(0, 0, 1), angle)
            lever.append(Vec3(r.x + x_pos, r.y + y + 3.1 * p, r.z + z + 4 * p))
        else:
            r = _rotate_about(v, Vec3(1, 0, 0), angle)
            lever.append(Vec3(r.x + x + 4 * p, r.y + y + 3.1 * p, r.z + z_pos))
    quads += _switch_faces(lever, block_texture(BlockType.PLANKS, 0), 2, 5, 2)
    return quads


def _piston_base(block: Block, x, y, z) -> list[Quad]:
    f0 = block_texture(block.type, 0)
    f1 = (f0[0] + 8, f0[1] + 8)
    b0 = block_texture(block.type, 2)
    b1 = (b0[0] + 8, b0[1] + 8)
    s0 = block_texture(block.type, 1)
    s1 = (s0[0] + 6, s0[1] + 8)
    textures = [(s0, s1), (s0, s1), (f0, f1), (b0, b1), (s0, s1), (s0, s1)]
    # The rod is drawn by the head, which always accompanies the base.
    return _part_block(block.data & DATA_DIRECTION, x, y, z, 6 * PIXEL_SIZE, False, textures)


def _piston_head(block: Block, x, y, z) -> list[Quad]:
    f0 = block_texture(block.type, 0)
    f1 = (f0[0] + 8, f0[1] + 8)
    s0 = block_texture(block.type, 1)
    s1 = (s0[0] + 8, s0[1] + 8)
    s2 = (s0[0] + 2, s0[1] + 8)
    textures = [(s0, s2), (s0, s2), (f0, f1), (s0, s1), (s0, s2), (s0, s2)]
    direction = block.data & DATA_DIRECTION
    p = PIXEL_SIZE
    quads = _part_block(direction, x, y, z, 2 * p, True, textures)

    # Rod reaching back one block length into the base.
    x1, xs, z1, zs = x - 2 * p, BLOCK_SIZE, z + 3 * p, 2 * p
    if direction == Direction.FRONT:
        x1 = x + 2 * p
    elif direction == Direction.RIGHT:
        x1, xs, z1, zs = x + 3 * p, 2 * p, z - 2 * p, BLOCK_SIZE
    elif direction == Direction.LEFT:
        x1, xs, z1, zs = x + 3 * p, 2 * p, z + 2 * p, BLOCK_SIZE

    vertices = _box(x1, y + 3 * p, z1, xs, 2 * p, zs)
    r0 = s0
    r1 = (s0[0] + 8, s0[1] + 2)
    coords = _coords(_low(r0[0]), _low(r0[1]), _high(r1[0]), _high(r1[1]))
    quads += [_quad(vertices, face, coords) for face in _FACES]
    return quads


_MULTITEX = frozenset({
    BlockType.GRASS, BlockType.WOOD, BlockType.BOOKSHELF,
    BlockType.CRAFTING_TABLE, BlockType.TNT, BlockType.CACTUS,
})
_CROSSED = frozenset({
    BlockType.FLOWER, BlockType.TALL_GRASS, BlockType.WHEAT, BlockType.REDSTONE_TORCH,
    BlockType.SUGAR_CANE, BlockType.DEAD_SHRUB, BlockType.MUSHROOM,
})
_MULTITEX_ROTATED = frozenset({BlockType.PISTON, BlockType.COMPUTER, BlockType.FURNACE})
_SLABS = frozenset({BlockType.WOOD_SLAB, BlockType.COBBLESTONE_SLAB})


def block_quads(block: Block, x: int, y: int, z: int, occlusion: int = 0) -> list[Quad]:
    """Quads that draw a block at chunk-local position (x, y, z).

    ``occlusion`` is a BlockSide mask of faces hidden by neighbours; shapes
    other than full cubes ignore it.
    """
    kind = block.type
    if kind is BlockType.AIR:
        return []
    if kind in _MULTITEX:
        return _multitex_block(block, x, y, z, occlusion)
    if kind in _CROSSED:
        return _x_block(block, x, y, z)
    if kind is BlockType.DOOR:
        return _door(block, x, y, z)
    if kind is BlockType.REDSTONE_WIRE:
        return _flat_block(block, x, y, z)
    if kind is BlockType.REDSTONE_REPEATER:
        return _flat_block_rotated(block, x, y, z)
    if kind is BlockType.LEVER:
        return _switch(block, x, y, z)
    if kind in _MULTITEX_ROTATED:
        return _multitex_block_rotated(block, x, y, z, occlusion)
    if kind is BlockType.PISTON_BASE:
        return _piston_base(block, x, y, z)
    if kind is BlockType.PISTON_HEAD:
        return _piston_head(block, x, y, z)
    if kind in _SLABS:
        return _normal_block(block, x, y, z, occlusion, 4)
    return _normal_block(block, x, y, z, occlusion, 8)