"""Voxel types, grid index arithmetic and fixed-size cubic voxel blocks."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

import numpy as np

from voxelfield.color import Color

# Small offset added before flooring so points on a cell boundary land in
# the upper cell despite rounding error.
COORDINATE_EPSILON = 1e-6


class UpdateStatus(enum.Enum):
    """Derived products of a block that still need to be recomputed."""

    MAP = 0
    MESH = 1
    ESDF = 2


@dataclass
class TsdfVoxel:
    distance: float = 0.0
    weight: float = 0.0
    color: Color = field(default_factory=Color)


@dataclass
class EsdfVoxel:
    distance: float = 0.0
    observed: bool = False
    hallucinated: bool = False
    in_queue: bool = False
    fixed: bool = False
    parent: tuple = (0, 0, 0)


@dataclass
class OccupancyVoxel:
    probability_log: float = 0.0
    observed: bool = False


@dataclass
class IntensityVoxel:
    intensity: float = 0.0
    weight: float = 0.0


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _as_point(point) -> np.ndarray:
    return np.asarray(point, dtype=float).reshape(3)


def grid_index_from_point(point, grid_size_inv=1.0) -> tuple:
    """Index of the grid cell, of size ``1 / grid_size_inv``, holding ``point``."""
    scaled = _as_point(point) * float(grid_size_inv)
    return tuple(int(math.floor(c + COORDINATE_EPSILON)) for c in scaled)


def center_point_from_grid_index(index, grid_size) -> np.ndarray:
    """The centre of grid cell ``index``."""
    return (np.asarray(index, dtype=float).reshape(3) + 0.5) * float(grid_size)


def origin_point_from_grid_index(index, grid_size) -> np.ndarray:
    """The lower corner of grid cell ``index``."""
    return np.asarray(index, dtype=float).reshape(3) * float(grid_size)


def block_index_from_global_voxel_index(global_index, voxels_per_side) -> tuple:
    """Index of the block that holds the voxel at ``global_index``."""
    vps = int(voxels_per_side)
    return tuple(int(c) // vps for c in global_index)


def local_from_global_voxel_index(global_index, voxels_per_side) -> tuple:
    """Index of the voxel at ``global_index`` inside its own block."""
    vps = int(voxels_per_side)
    return tuple(int(c) % vps for c in global_index)


class Block:
    """An n x n x n cube of voxels placed at ``origin`` in space."""

    def __init__(self, voxel_type, voxels_per_side, voxel_size, origin) -> None:
        voxels_per_side = int(voxels_per_side)
        voxel_size = float(voxel_size)
        if voxels_per_side <= 0:
            raise ValueError("voxels_per_side must be positive")
        if voxel_size <= 0.0:
            raise ValueError("voxel_size must be positive")
        self.voxel_type = voxel_type
        self.voxels_per_side = voxels_per_side
        self.voxel_size = voxel_size
        self.origin = _as_point(origin).copy()
        self.num_voxels = voxels_per_side**3
        self.voxel_size_inv = 1.0 / voxel_size
        self.block_size = voxels_per_side * voxel_size
        self.block_size_inv = 1.0 / self.block_size
        self.voxels = [voxel_type() for _ in range(self.num_voxels)]
        self.has_data = False
        self.updated: set[UpdateStatus] = set()

    def linear_index_from_voxel_index(self, index) -> int:
        x, y, z = (int(c) for c in index)
        vps = self.voxels_per_side
        return x + vps * (y + z * vps)

    def voxel_index_from_linear_index(self, linear_index) -> tuple:
        vps = self.voxels_per_side
        rest, x = divmod(int(linear_index), vps)
        z, y = divmod(rest, vps)
        return (x, y, z)

    def truncated_voxel_index_from_coordinates(self, coords) -> tuple:
        """Voxel index of ``coords``, clamped into this block."""
        top = self.voxels_per_side - 1
        return tuple(
            min(max(c, 0), top) for c in self.voxel_index_from_coordinates(coords)
        )

    def voxel_index_from_coordinates(self, coords) -> tuple:
        """Voxel index of ``coords`` relative to this block, not clamped."""
        return grid_index_from_point(_as_point(coords) - self.origin, self.voxel_size_inv)

    def linear_index_from_coordinates(self, coords) -> int:
        return self.linear_index_from_voxel_index(
            self.truncated_voxel_index_from_coordinates(coords)
        )

    def coordinates_from_linear_index(self, linear_index) -> np.ndarray:
        """The centre of the voxel at ``linear_index``."""
        return self.coordinates_from_voxel_index(
            self.voxel_index_from_linear_index(linear_index)
        )

    def coordinates_from_voxel_index(self, index) -> np.ndarray:
        """The centre of the voxel at ``index``."""
        return self.origin + center_point_from_grid_index(index, self.voxel_size)

    def voxel_by_linear_index(self, index):
        if not self.is_valid_linear_index(index):
            raise IndexError(f"linear voxel index {index} outside block")
        return self.voxels[int(index)]

    def voxel_by_voxel_index(self, index):
        if not self.is_valid_voxel_index(index):
            raise IndexError(f"voxel index {tuple(index)} outside block")
        return self.voxels[self.linear_index_from_voxel_index(index)]

    def voxel_by_coordinates(self, coords):
        """The voxel at ``coords``; coordinates outside are clamped to the block."""
        return self.voxels[self.linear_index_from_coordinates(coords)]

    def is_valid_voxel_index(self, index) -> bool:
        return all(0 <= int(c) < self.voxels_per_side for c in index)

    def is_valid_linear_index(self, index) -> bool:
        return 0 <= int(index) < self.num_voxels

    def block_index(self) -> tuple:
        return tuple(
            _round_half_away(c * self.block_size_inv) for c in self.origin
        )

    def set_all_updated(self) -> None:
        """Flag every derived product as needing an update."""
        self.updated = set(UpdateStatus)

    def __repr__(self) -> str:
        return (
            f"Block({self.voxel_type.__name__}, voxels_per_side={self.voxels_per_side}, "
            f"voxel_size={self.voxel_size}, origin={self.origin.tolist()})"
        )