[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubeworld"
version = "0.1.0"
description = "Voxel world simulation core: blocks, chunks, redstone circuits, a tiny 4-bit computer and collision geometry"
requires-python = ">=3.10"
dependencies = []
keywords = ["voxel", "blocks", "chunks", "redstone", "simulation", "game"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cubeworld"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
