"""A sparse voxel map: blocks of voxels keyed by their block index."""

from __future__ import annotations

import copy

import numpy as np

from voxelfield.block import (
    Block,
    block_index_from_global_voxel_index,
    grid_index_from_point,
    local_from_global_voxel_index,
    origin_point_from_grid_index,
)


def _key(index) -> tuple:
    return tuple(int(c) for c in index)


class Layer:
    """A 3D layer of ``voxel_type`` voxels stored in lazily allocated blocks."""

    def __init__(self, voxel_type, voxel_size, voxels_per_side) -> None:
        voxel_size = float(voxel_size)
        voxels_per_side = int(voxels_per_side)
        if not voxel_size > 0.0:
            raise ValueError("voxel_size must be positive")
        if voxels_per_side <= 0:
            raise ValueError("voxels_per_side must be positive")
        self.voxel_type = voxel_type
        self.voxel_size = voxel_size
        self.voxels_per_side = voxels_per_side
        self.voxel_size_inv = 1.0 / voxel_size
        self.block_size = voxel_size * voxels_per_side
        self.block_size_inv = 1.0 / self.block_size
        self.voxels_per_side_inv = 1.0 / voxels_per_side
        self.blocks: dict[tuple, Block] = {}

    def copy(self) -> Layer:
        """A deep copy: blocks and voxels are duplicated."""
        other = Layer(self.voxel_type, self.voxel_size, self.voxels_per_side)
        other.blocks = {index: copy.deepcopy(b) for index, b in self.blocks.items()}
        return other

    def block_by_index(self, index) -> Block:
        """The block at ``index``; raises KeyError if it is not allocated."""
        key = _key(index)
        try:
            return self.blocks[key]
        except KeyError:
            raise KeyError(f"accessed unallocated block at {key}") from None

    def get_block(self, index):
        """The block at ``index``, or None."""
        return self.blocks.get(_key(index))

    def allocate_block_by_index(self, index) -> Block:
        """The block at ``index``, allocated first if missing."""
        block = self.blocks.get(_key(index))
        return block if block is not None else self.allocate_new_block(index)

    def get_block_by_coordinates(self, coords):
        return self.get_block(self.block_index_from_coordinates(coords))

    def allocate_block_by_coordinates(self, coords) -> Block:
        return self.allocate_block_by_index(self.block_index_from_coordinates(coords))

    def block_index_from_coordinates(self, coords) -> tuple:
        return grid_index_from_point(coords, self.block_size_inv)

    def allocate_new_block(self, index) -> Block:
        key = _key(index)
        if key in self.blocks:
            raise KeyError(f"block already exists at {key}")
        block = Block(
            self.voxel_type,
            self.voxels_per_side,
            self.voxel_size,
            origin_point_from_grid_index(key, self.block_size),
        )
        self.blocks[key] = block
        return block

    def allocate_new_block_by_coordinates(self, coords) -> Block:
        return self.allocate_new_block(self.block_index_from_coordinates(coords))

    def insert_block(self, index, block) -> None:
        key = _key(index)
        if key in self.blocks:
            raise KeyError(f"block already exists at {key}")
        self.blocks[key] = block

    def remove_block(self, index) -> None:
        self.blocks.pop(_key(index), None)

    def remove_all_blocks(self) -> None:
        self.blocks.clear()

    def remove_block_by_coordinates(self, coords) -> None:
        self.remove_block(self.block_index_from_coordinates(coords))

    def remove_distant_blocks(self, center, max_distance) -> None:
        """Drop blocks whose origin lies further than ``max_distance`` from ``center``."""
        centre = np.asarray(center, dtype=float).reshape(3)
        limit = float(max_distance) ** 2
        distant = [
            index
            for index, block in self.blocks.items()
            if float(np.sum((block.origin - centre) ** 2)) > limit
        ]
        for index in distant:
            del self.blocks[index]

    def allocated_blocks(self) -> list:
        return list(self.blocks)

    def updated_blocks(self, status) -> list:
        return [index for index, block in self.blocks.items() if status in block.updated]

    def has_block(self, index) -> bool:
        return _key(index) in self.blocks

    def voxel_by_global_index(self, global_index):
        """The voxel at ``global_index``, or None if its block is not allocated."""
        block = self.blocks.get(
            block_index_from_global_voxel_index(global_index, self.voxels_per_side)
        )
        if block is None:
            return None
        return block.voxel_by_voxel_index(
            local_from_global_voxel_index(global_index, self.voxels_per_side)
        )

    def voxel_by_coordinates(self, coords):
        """The voxel at ``coords``, or None if its block is not allocated."""
        block = self.get_block_by_coordinates(coords)
        if block is None:
            return None
        return block.voxel_by_coordinates(coords)

    def __len__(self) -> int:
        return len(self.blocks)

    def __repr__(self) -> str:
        return (
            f"Layer({self.voxel_type.__name__}, voxel_size={self.voxel_size}, "
            f"voxels_per_side={self.voxels_per_side}, blocks={len(self.blocks)})"
        )