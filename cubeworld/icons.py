"""Textures shown for blocks in the inventory."""

from __future__ import annotations

from cubeworld.blocks import DATA_TEXTURE, Block, BlockType
from cubeworld.meshing import block_texture

# Items whose inventory picture has its own place in the atlas.
_ICON_CELLS = {
    BlockType.LEVER: (64.0, 0.0),
    BlockType.PISTON: (72.0, 0.0),
    BlockType.WOOD_SLAB: (80.0, 0.0),
    BlockType.COBBLESTONE_SLAB: (88.0, 0.0),
}

# Items drawn with a fixed texture variant rather than the one in their data.
_ICON_VARIANTS = {
    BlockType.DOOR: 1,
    BlockType.WHEAT: 3,
}


def inventory_texture(block: Block) -> tuple[float, float]:
    """Pixel position in the atlas of the picture used for a block in the inventory."""
    kind = BlockType(block.type)
    if kind in _ICON_CELLS:
        return _ICON_CELLS[kind]
    if kind in _ICON_VARIANTS:
        return block_texture(kind, _ICON_VARIANTS[kind])
    return block_texture(kind, block.data & DATA_TEXTURE)