"""Comparing voxels, blocks and layers, and re-centring a layer's blocks."""

from __future__ import annotations

import dataclasses
import logging

import numpy as np

from voxelfield.block import EsdfVoxel, OccupancyVoxel, TsdfVoxel

logger = logging.getLogger(__name__)

_TOLERANCE = 1e-10
_COMPARABLE_VOXELS = (TsdfVoxel, EsdfVoxel, OccupancyVoxel)


def is_same_voxel(voxel_a, voxel_b) -> bool:
    """True if two voxels agree in every field, floats within a tight tolerance."""
    if not isinstance(voxel_a, _COMPARABLE_VOXELS):
        raise TypeError(f"cannot compare voxels of type {type(voxel_a).__name__}")
    if type(voxel_a) is not type(voxel_b):
        return False
    for f in dataclasses.fields(voxel_a):
        a = getattr(voxel_a, f.name)
        b = getattr(voxel_b, f.name)
        if isinstance(a, float) or isinstance(b, float):
            if not abs(a - b) < _TOLERANCE:
                return False
        elif a != b:
            return False
    return True


def is_same_block(block_a, block_b) -> bool:
    """True if two blocks share geometry and hold the same voxels."""
    if not (
        abs(block_a.voxel_size - block_b.voxel_size) < _TOLERANCE
        and abs(block_a.block_size - block_b.block_size) < _TOLERANCE
        and block_a.voxels_per_side == block_b.voxels_per_side
        and bool(np.all(np.abs(block_a.origin - block_b.origin) < _TOLERANCE))
        and block_a.num_voxels == block_b.num_voxels
    ):
        return False
    return all(
        is_same_voxel(a, b) for a, b in zip(block_a.voxels, block_b.voxels)
    )


def is_same_layer(layer_a, layer_b) -> bool:
    """True if two layers share geometry and hold the same blocks."""
    is_the_same = (
        abs(layer_a.voxel_size - layer_b.voxel_size) < _TOLERANCE
        and abs(layer_a.block_size - layer_b.block_size) < _TOLERANCE
        and layer_a.voxels_per_side == layer_b.voxels_per_side
        and layer_a.voxel_type is layer_b.voxel_type
        and len(layer_a) == len(layer_b)
    )

    blocks_a = set(layer_a.allocated_blocks())
    blocks_b = set(layer_b.allocated_blocks())
    for index in blocks_a:
        if index not in blocks_b:
            logger.error("Block at index %s in layer_A does not exist in layer_B", index)
            return False
        if not is_same_block(layer_a.block_by_index(index), layer_b.block_by_index(index)):
            logger.error("Block at index %s differs between the layers", index)
            is_the_same = False
    for index in blocks_b - blocks_a:
        logger.error("Block at index %s in layer_B does not exist in layer_A", index)
        return False
    return is_the_same


def center_blocks_of_layer(layer) -> np.ndarray:
    """Move the grid origin to the block nearest the centroid of all blocks.

    Blocks are re-indexed and their origins shifted in place. Returns the new
    origin expressed in the old frame.
    """
    block_indices = layer.allocated_blocks()
    if not block_indices:
        raise ValueError("cannot centre a layer without blocks")

    centroid = sum(layer.block_by_index(i).origin for i in block_indices) / len(
        block_indices
    )
    centroid = centroid / layer.block_size
    # Truncating conversion, as an integer cast would do.
    index_centroid = tuple(int(c + 0.5) for c in centroid)
    new_layer_origin = np.asarray(index_centroid, dtype=float) * layer.block_size
    logger.debug("New origin of the layer in the old frame: %s", new_layer_origin)

    shifted = {}
    for index in block_indices:
        block = layer.block_by_index(index)
        block.origin = block.origin - new_layer_origin
        shifted[tuple(a - b for a, b in zip(index, index_centroid))] = block

    layer.remove_all_blocks()
    for index, block in shifted.items():
        layer.insert_block(index, block)
    return new_layer_origin