"""Block types, block data layout and per-type properties."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag, auto

from cubeworld.aabb import AABB, Vec3


class BlockType(IntEnum):
    """Every kind of block in the world."""

    AIR = 0
    BEDROCK = auto()
    STONE = auto()
    SAND = auto()
    DIRT = auto()
    GRASS = auto()
    WOOD = auto()
    PLANKS = auto()
    COAL_ORE = auto()
    IRON_ORE = auto()
    GOLD_ORE = auto()
    REDSTONE_ORE = auto()
    DIAMOND_ORE = auto()
    FLOWER = auto()
    TALL_GRASS = auto()
    GLASS = auto()
    LEAVES = auto()
    BOOKSHELF = auto()
    WHEAT = auto()
    WATER = auto()
    DOOR = auto()
    REDSTONE_LAMP = auto()
    REDSTONE_WIRE = auto()
    REDSTONE_TORCH = auto()
    REDSTONE_REPEATER = auto()
    TNT = auto()
    SUGAR_CANE = auto()
    CRAFTING_TABLE = auto()
    COBBLESTONE = auto()
    PISTON = auto()
    PISTON_BASE = auto()
    PISTON_HEAD = auto()
    FURNACE = auto()
    CACTUS = auto()
    DEAD_SHRUB = auto()
    COMPUTER = auto()
    BRICKS = auto()
    MUSHROOM = auto()
    LEVER = auto()
    WOOD_SLAB = auto()
    COBBLESTONE_SLAB = auto()


NUM_BLOCK_TYPES = len(BlockType)


class Direction(IntEnum):
    """Facing stored in the top two bits of the block data."""

    FRONT = 0b00000000
    BACK = 0b01000000
    LEFT = 0b10000000
    RIGHT = 0b11000000


# Block data layout (one byte):
#        TT  texture offset        CC   counter
# DD         direction             P    part of a multiblock
#        S   state                 R    redstone power
#      V     visited (traversal)   low nibble: computer index
DATA_TEXTURE = 0b00000011
DATA_TEXTURE1 = 0b00000001
DATA_TEXTURE2 = 0b00000010
DATA_TEXTURE3 = 0b00000011
DATA_COUNTER = 0b00001100
DATA_COUNTER1 = 0b00000100
DATA_DIRECTION = 0b11000000
DATA_PART = 0b00000001
DATA_STATE = 0b00000010
DATA_POWER = 0b00001000
DATA_VISITED = 0b00000100
DATA_COMPUTER = 0b00001111

BLOCK_SIZE = 1.0
PIXEL_SIZE = BLOCK_SIZE / 8
DOOR_WIDTH = BLOCK_SIZE / 8


class BlockSide(IntFlag):
    """Faces of a block, used as an occlusion mask."""

    FRONT = 0b00000001
    BACK = 0b00000010
    LEFT = 0b00000100
    RIGHT = 0b00001000
    TOP = 0b00010000
    BOTTOM = 0b00100000
    ALL = 0b00111111


@dataclass
class Block:
    """A single block: its type and one byte of data."""

    type: BlockType = BlockType.AIR
    data: int = 0

    def __post_init__(self) -> None:
        self.type = BlockType(self.type)
        if not 0 <= self.data <= 0xFF:
            raise ValueError(f"block data out of range: {self.data}")


_NAMES = {
    BlockType.STONE: "Stone",
    BlockType.SAND: "Sand",
    BlockType.DIRT: "Dirt",
    BlockType.GRASS: "Grass",
    BlockType.WOOD: "Wood",
    BlockType.PLANKS: "Wood planks",
    BlockType.COAL_ORE: "Coal ore",
    BlockType.IRON_ORE: "Iron ore",
    BlockType.GOLD_ORE: "Gold ore",
    BlockType.REDSTONE_ORE: "Redstone ore",
    BlockType.DIAMOND_ORE: "Diamond ore",
    BlockType.FLOWER: "Flower",
    BlockType.TALL_GRASS: "Tall grass",
    BlockType.GLASS: "Glass",
    BlockType.LEAVES: "Leaves",
    BlockType.BOOKSHELF: "Bookshelf",
    BlockType.WHEAT: "Wheat",
    BlockType.WATER: "Water",
    BlockType.DOOR: "Door",
    BlockType.REDSTONE_LAMP: "Redstone lamp",
    BlockType.REDSTONE_WIRE: "Redstone wire",
    BlockType.REDSTONE_TORCH: "Redstone torch",
    BlockType.REDSTONE_REPEATER: "Redstone repeater",
    BlockType.TNT: "TNT",
    BlockType.SUGAR_CANE: "Sugar cane",
    BlockType.CRAFTING_TABLE: "Crafting table",
    BlockType.COBBLESTONE: "Cobblestone",
    BlockType.PISTON: "Piston",
    BlockType.FURNACE: "Furnace",
    BlockType.CACTUS: "Cactus",
    BlockType.DEAD_SHRUB: "Dead shrub",
    BlockType.COMPUTER: "Computer",
    BlockType.BRICKS: "Bricks",
    BlockType.MUSHROOM: "Mushroom",
    BlockType.LEVER: "Lever",
    BlockType.WOOD_SLAB: "Wood slab",
    BlockType.COBBLESTONE_SLAB: "Cobblestone slab",
}

_TRANSPARENT = frozenset({
    BlockType.AIR, BlockType.FLOWER, BlockType.TALL_GRASS, BlockType.GLASS,
    BlockType.WHEAT, BlockType.DOOR, BlockType.REDSTONE_TORCH, BlockType.REDSTONE_WIRE,
    BlockType.SUGAR_CANE, BlockType.LEVER, BlockType.PISTON_BASE, BlockType.PISTON_HEAD,
    BlockType.REDSTONE_REPEATER, BlockType.DEAD_SHRUB, BlockType.MUSHROOM,
    BlockType.WOOD_SLAB, BlockType.COBBLESTONE_SLAB,
})

_NON_COLLIDABLE = frozenset({
    BlockType.AIR, BlockType.WHEAT, BlockType.FLOWER, BlockType.TALL_GRASS,
    BlockType.WATER, BlockType.REDSTONE_TORCH, BlockType.REDSTONE_WIRE,
    BlockType.SUGAR_CANE, BlockType.LEVER, BlockType.REDSTONE_REPEATER,
    BlockType.DEAD_SHRUB, BlockType.MUSHROOM,
})

_ORIENTED = frozenset({
    BlockType.DOOR, BlockType.LEVER, BlockType.PISTON, BlockType.REDSTONE_REPEATER,
    BlockType.COMPUTER, BlockType.FURNACE,
})

_PLANT_SOIL = {
    BlockType.WHEAT: {BlockType.DIRT, BlockType.GRASS},
    BlockType.FLOWER: {BlockType.DIRT, BlockType.GRASS},
    BlockType.TALL_GRASS: {BlockType.DIRT, BlockType.GRASS},
    BlockType.MUSHROOM: {BlockType.DIRT, BlockType.GRASS},
    BlockType.SUGAR_CANE: {BlockType.SAND, BlockType.SUGAR_CANE},
    BlockType.CACTUS: {BlockType.SAND, BlockType.CACTUS},
    BlockType.DEAD_SHRUB: {BlockType.DIRT, BlockType.GRASS, BlockType.SAND},
}

_NEEDS_SOLID_GROUND = frozenset({
    BlockType.DOOR, BlockType.REDSTONE_TORCH, BlockType.REDSTONE_WIRE,
    BlockType.LEVER, BlockType.REDSTONE_REPEATER,
})


def block_name(block_type: BlockType) -> str | None:
    """Display name of a block type, or None for types that have none."""
    return _NAMES.get(BlockType(block_type))


def is_opaque(block_type: BlockType) -> bool:
    """Whether the block hides the faces of its neighbours."""
    return BlockType(block_type) not in _TRANSPARENT


def is_collidable(block_type: BlockType) -> bool:
    """Whether the player collides with the block."""
    return BlockType(block_type) not in _NON_COLLIDABLE


def is_oriented(block_type: BlockType) -> bool:
    """Whether the block takes a facing when placed."""
    return BlockType(block_type) in _ORIENTED


def can_place(to_place: BlockType, below: BlockType) -> bool:
    """Whether a block may be placed on top of the given block."""
    to_place = BlockType(to_place)
    below = BlockType(below)
    if to_place in _PLANT_SOIL:
        return below in _PLANT_SOIL[to_place]
    if to_place in _NEEDS_SOLID_GROUND:
        return is_collidable(below)
    return True


def block_aabb(block: Block, position: Vec3) -> AABB:
    """Bounding box of a block whose minimum corner sits at ``position``."""
    if block.type is BlockType.DOOR:
        direction = block.data & DATA_DIRECTION
        front = direction == Direction.FRONT
        back = direction == Direction.BACK
        left = direction == Direction.LEFT
        right = direction == Direction.RIGHT
        x_min = 0.0 if (front or left or right) else 1 - DOOR_WIDTH
        x_max = DOOR_WIDTH if front else BLOCK_SIZE
        z_min = 0.0 if (left or front or back) else 1 - DOOR_WIDTH
        z_max = DOOR_WIDTH if left else BLOCK_SIZE
        return AABB(
            Vec3(position.x + x_min, position.y, position.z + z_min),
            Vec3(position.x + x_max, position.y + BLOCK_SIZE, position.z + z_max),
        )
    if block.type in (BlockType.WOOD_SLAB, BlockType.COBBLESTONE_SLAB):
        height = BLOCK_SIZE / 2
    elif block.type in (BlockType.REDSTONE_WIRE, BlockType.REDSTONE_REPEATER):
        height = BLOCK_SIZE / 20
    else:
        height = BLOCK_SIZE
    return AABB(position, position + Vec3(BLOCK_SIZE, height, BLOCK_SIZE))


def texture_coordinate(pixel: float) -> float:
    """Convert a pixel position in the 256-pixel atlas to a texture coordinate.

    Half a pixel is subtracted because textures are sampled at texel centres.
    """
    return (pixel - 0.5) / 255.0