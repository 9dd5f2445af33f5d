import pytest

from cubeworld.aabb import Vec3
from cubeworld.blocks import (
    DATA_PART,
    DATA_TEXTURE1,
    Block,
    BlockSide,
    BlockType,
    Direction,
    block_aabb,
    texture_coordinate,
)
from cubeworld.meshing import Quad, block_quads, block_texture


def _all_vertices(quads):
    return [v for q in quads for v in q.vertices]


def _bounds(quads):
    vs = _all_vertices(quads)
    return (
        (min(v.x for v in vs), min(v.y for v in vs), min(v.z for v in vs)),
        (max(v.x for v in vs), max(v.y for v in vs), max(v.z for v in vs)),
    )


def _rounded(v):
    return (round(v.x, 6), round(v.y, 6), round(v.z, 6))


def test_block_texture_is_on_the_eight_pixel_grid():
    for block_type in (BlockType.STONE, BlockType.GRASS, BlockType.FURNACE, BlockType.DOOR):
        tx, ty = block_texture(block_type, 0)
        assert tx % 8 == 0 and ty % 8 == 0
        assert 0 <= tx <= 56 and 0 <= ty <= 56


def test_block_texture_bedrock_is_origin():
    assert block_texture(BlockType.BEDROCK, 0) == (0.0, 0.0)


def test_block_texture_faces_differ_for_grass():
    assert block_texture(BlockType.GRASS, 0) == block_texture(BlockType.GRASS, 1)
    assert block_texture(BlockType.GRASS, 4) != block_texture(BlockType.GRASS, 0)
    assert block_texture(BlockType.GRASS, 5) == block_texture(BlockType.DIRT, 0)


def test_block_texture_errors():
    with pytest.raises(ValueError):
        block_texture(BlockType.AIR, 0)
    with pytest.raises(ValueError):
        block_texture(BlockType.LEVER, 0)
    with pytest.raises(IndexError):
        block_texture(BlockType.STONE, 1)


def test_air_has_no_geometry():
    assert block_quads(Block(BlockType.AIR), 0, 0, 0, 0) == []


def test_normal_block_has_six_faces_in_unit_cube():
    quads = block_quads(Block(BlockType.STONE), 2, 3, 4, 0)
    assert len(quads) == 6
    assert all(isinstance(q, Quad) and len(q.vertices) == 4 for q in quads)
    assert _bounds(quads) == ((2, 3, 4), (3, 4, 5))


def test_fully_occluded_block_has_no_faces():
    assert block_quads(Block(BlockType.STONE), 0, 0, 0, BlockSide.ALL) == []


@pytest.mark.parametrize("side", list(BlockSide)[:6])
def test_each_occlusion_bit_hides_one_face(side):
    quads = block_quads(Block(BlockType.STONE), 0, 0, 0, side)
    assert len(quads) == 5


def test_normal_block_tex_coords_within_cell():
    tx, ty = block_texture(BlockType.STONE, 0)
    lo_x, hi_x = texture_coordinate(tx), texture_coordinate(tx + 8)
    lo_y, hi_y = texture_coordinate(ty), texture_coordinate(ty + 8)
    for quad in block_quads(Block(BlockType.STONE), 0, 0, 0, 0):
        for u, v in quad.tex_coords:
            assert lo_x < u < hi_x
            assert lo_y < v < hi_y


def test_slab_is_half_height_matching_aabb():
    block = Block(BlockType.WOOD_SLAB)
    quads = block_quads(block, 1, 1, 1, 0)
    box = block_aabb(block, Vec3(1, 1, 1))
    (_, lo_y, _), (_, hi_y, _) = _bounds(quads)
    assert lo_y == box.min.y
    assert hi_y == pytest.approx(box.max.y)


def test_grass_top_uses_different_texture_than_side():
    quads = block_quads(Block(BlockType.GRASS), 0, 0, 0, 0)
    assert len(quads) == 6
    assert quads[0].tex_coords == quads[1].tex_coords
    assert quads[4].tex_coords != quads[0].tex_coords


@pytest.mark.parametrize("direction", list(Direction))
def test_rotated_block_keeps_cube_corners(direction):
    quads = block_quads(Block(BlockType.FURNACE, direction), 3, 0, 5, 0)
    assert len(quads) == 6
    corners = {_rounded(v) for v in _all_vertices(quads)}
    expected = {(x, y, z) for x in (3, 4) for y in (0, 1) for z in (5, 6)}
    assert corners == expected


@pytest.mark.parametrize("direction", list(Direction))
def test_rotated_block_occlusion_hides_one_face(direction):
    quads = block_quads(Block(BlockType.COMPUTER, direction), 0, 0, 0, BlockSide.FRONT)
    assert len(quads) == 5


def test_lit_furnace_front_texture_changes():
    off = block_quads(Block(BlockType.FURNACE), 0, 0, 0, 0)
    on = block_quads(Block(BlockType.FURNACE, DATA_TEXTURE1), 0, 0, 0, 0)
    assert [q.vertices for q in off] == [q.vertices for q in on]
    assert [q.tex_coords for q in off] != [q.tex_coords for q in on]


def test_crossed_plant_is_two_double_sided_quads():
    quads = block_quads(Block(BlockType.FLOWER), 0, 0, 0, BlockSide.ALL)
    assert len(quads) == 2
    assert all(q.double_sided for q in quads)
    assert _bounds(quads) == ((0, 0, 0), (1, 1, 1))


@pytest.mark.parametrize("direction", list(Direction))
def test_door_geometry_matches_its_bounding_box(direction):
    block = Block(BlockType.DOOR, direction)
    quads = block_quads(block, 2, 0, 2, 0)
    assert len(quads) == 6
    box = block_aabb(block, Vec3(2, 0, 2))
    lo, hi = _bounds(quads)
    assert lo == pytest.approx(tuple(box.min))
    assert hi == pytest.approx(tuple(box.max))


def test_door_part_selects_texture():
    lower = block_quads(Block(BlockType.DOOR), 0, 0, 0, 0)
    upper = block_quads(Block(BlockType.DOOR, DATA_PART), 0, 0, 0, 0)
    assert [q.tex_coords for q in lower] != [q.tex_coords for q in upper]


def test_wire_is_single_flat_quad_at_aabb_height():
    block = Block(BlockType.REDSTONE_WIRE)
    quads = block_quads(block, 0, 2, 0, 0)
    assert len(quads) == 1
    top = block_aabb(block, Vec3(0, 2, 0)).max.y
    assert all(v.y == pytest.approx(top) for v in quads[0].vertices)


@pytest.mark.parametrize("direction", list(Direction))
def test_repeater_rotation_covers_the_block(direction):
    quads = block_quads(Block(BlockType.REDSTONE_REPEATER, direction), 4, 0, 4, 0)
    assert len(quads) == 1
    xz = {(round(v.x, 6), round(v.z, 6)) for v in quads[0].vertices}
    assert xz == {(4, 4), (4, 5), (5, 4), (5, 5)}


def test_lever_power_moves_handle():
    off = block_quads(Block(BlockType.LEVER), 0, 0, 0, 0)
    on = block_quads(Block(BlockType.LEVER, 0b00001000), 0, 0, 0, 0)
    assert [q.vertices for q in off[:5]] == [q.vertices for q in on[:5]]
    assert [q.vertices for q in off[5:]] != [q.vertices for q in on[5:]]


@pytest.mark.parametrize("direction", list(Direction))
def test_piston_parts(direction):
    base = block_quads(Block(BlockType.PISTON_BASE, direction), 0, 0, 0, 0)
    head = block_quads(Block(BlockType.PISTON_HEAD, direction), 0, 0, 0, 0)
    assert len(base) == 6
    assert len(head) == 12
    lo, hi = _bounds(base)
    assert all(0 <= c <= 1 for c in lo + hi)