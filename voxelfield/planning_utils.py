"""Selecting and editing spheres of voxels, and layer bounds."""

from __future__ import annotations

import math

import numpy as np

from voxelfield.block import (
    block_index_from_global_voxel_index,
    grid_index_from_point,
    local_from_global_voxel_index,
    origin_point_from_grid_index,
)


def sphere_around_point(layer, center, radius) -> dict:
    """Voxels within ``radius`` of ``center``, as ``{block_index: [voxel_index, ...]}``."""
    voxel_size = layer.voxel_size
    voxels_per_side = layer.voxels_per_side
    center_index = grid_index_from_point(center, 1.0 / voxel_size)
    radius_in_voxels = float(radius) / voxel_size

    steps = []
    s = -radius_in_voxels
    while s <= radius_in_voxels:
        steps.append(s)
        s += 1.0

    block_voxel_list: dict[tuple, list] = {}
    for x in steps:
        for y in steps:
            for z in steps:
                if math.sqrt(x * x + y * y + z * z) > radius_in_voxels:
                    continue
                global_index = (
                    math.floor(x) + center_index[0],
                    math.floor(y) + center_index[1],
                    math.floor(z) + center_index[2],
                )
                block_index = block_index_from_global_voxel_index(
                    global_index, voxels_per_side
                )
                block_voxel_list.setdefault(block_index, []).append(
                    local_from_global_voxel_index(global_index, voxels_per_side)
                )
    return block_voxel_list


def allocate_sphere_around_point(center, radius, layer) -> dict:
    """Like sphere_around_point, also allocating every block it touches."""
    block_voxel_list = sphere_around_point(layer, center, radius)
    for block_index in block_voxel_list:
        layer.allocate_block_by_index(block_index)
    return block_voxel_list


def _edit_sphere(center, radius, layer, new_distance_for, should_replace) -> None:
    centre = np.asarray(center, dtype=float).reshape(3)
    for block_index, voxel_indices in allocate_sphere_around_point(
        centre, radius, layer
    ).items():
        block = layer.block_by_index(block_index)
        for voxel_index in voxel_indices:
            point = block.coordinates_from_voxel_index(voxel_index)
            norm = float(np.linalg.norm(point - centre))
            voxel = block.voxel_by_voxel_index(voxel_index)
            new_distance = new_distance_for(norm)
            if not voxel.observed or should_replace(new_distance, voxel.distance):
                voxel.distance = new_distance
                voxel.observed = True
                voxel.hallucinated = True
                voxel.fixed = True
                block.set_all_updated()
                block.has_data = True


def fill_sphere_around_point(center, radius, max_distance_m, layer) -> None:
    """Mark a solid sphere as occupied, hallucinated and fixed.

    Distances are negative inside, deepest at the centre, bounded by
    ``-max_distance_m``; existing voxels are only made more occupied.
    """
    radius = float(radius)
    max_distance_m = float(max_distance_m)
    _edit_sphere(
        center,
        radius,
        layer,
        lambda norm: max(norm - radius, -max_distance_m),
        lambda new, old: new < old,
    )


def clear_sphere_around_point(center, radius, max_distance_m, layer) -> None:
    """Mark a sphere as free space, hallucinated and fixed.

    Distances are positive inside, largest at the centre, bounded by
    ``max_distance_m``; existing voxels are only made more free.
    """
    radius = float(radius)
    max_distance_m = float(max_distance_m)
    _edit_sphere(
        center,
        radius,
        layer,
        lambda norm: min(radius - norm, max_distance_m),
        lambda new, old: new > old,
    )


def map_bounds_from_layer(layer) -> tuple:
    """``(lower, upper)`` corners of the allocated blocks, to block accuracy."""
    block_indices = layer.allocated_blocks()
    if not block_indices:
        raise ValueError("cannot compute bounds of a layer without blocks")
    indices = np.asarray(block_indices, dtype=int)
    lower_index = indices.min(axis=0)
    upper_index = indices.max(axis=0)
    block_size = layer.block_size
    lower = origin_point_from_grid_index(lower_index, block_size)
    upper = origin_point_from_grid_index(upper_index, block_size) + block_size
    return lower, upper