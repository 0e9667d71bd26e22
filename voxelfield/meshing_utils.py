"""Reading distance and colour from voxels that carry valid data."""

from __future__ import annotations

from voxelfield.block import EsdfVoxel, TsdfVoxel
from voxelfield.color import Color


def get_sdf_if_valid(voxel, min_weight=0.0):
    """The voxel's signed distance, or None if it holds no valid data."""
    if isinstance(voxel, TsdfVoxel):
        if voxel.weight <= min_weight:
            return None
        return voxel.distance
    if isinstance(voxel, EsdfVoxel):
        if not voxel.observed:
            return None
        return voxel.distance
    raise TypeError(f"voxel type {type(voxel).__name__} has no distance")


def get_color_if_valid(voxel, min_weight=0.0):
    """The voxel's colour, or None if it holds no valid data.

    Distance-field voxels carry no colour and are shown white.
    """
    if isinstance(voxel, TsdfVoxel):
        if voxel.weight <= min_weight:
            return None
        return voxel.color
    if isinstance(voxel, EsdfVoxel):
        if not voxel.observed:
            return None
        return Color(255, 255, 255)
    raise TypeError(f"voxel type {type(voxel).__name__} has no colour")