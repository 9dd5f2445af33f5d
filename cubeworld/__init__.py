"""Simulation core for a voxel block world: blocks, chunks, meshing, redstone and a tiny computer."""

__version__ = "0.1.0"

__all__ = [
    "aabb",
    "actions",
    "blocks",
    "chunk",
    "computer",
    "icons",
    "input",
    "meshing",
    "positions",
    "redstone",
    "ticking",
]