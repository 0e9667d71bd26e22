[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxelfield"
version = "0.1.0"
description = "Sparse voxel layers for signed distance fields: blocks, layers, ESDF from occupancy, sphere editing, colour maps and PLY output"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["tsdf", "esdf", "voxel", "mapping", "signed distance field", "occupancy", "quaternion", "ply"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxelfield"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
