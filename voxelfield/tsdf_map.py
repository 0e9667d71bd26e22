"""A map holding a truncated signed distance field layer."""

from __future__ import annotations

from dataclasses import dataclass

from voxelfield.block import TsdfVoxel
from voxelfield.layer import Layer


@dataclass
class TsdfMapConfig:
    tsdf_voxel_size: float = 0.2
    tsdf_voxels_per_side: int = 16


class TsdfMap:
    """Owns a TSDF layer and exposes its geometry."""

    def __init__(self, layer) -> None:
        if layer is None:
            raise ValueError("TsdfMap needs a layer, got None")
        self.layer = layer

    @classmethod
    def from_config(cls, config=None) -> TsdfMap:
        """A map with a fresh, empty layer sized by ``config``."""
        config = TsdfMapConfig() if config is None else config
        return cls(
            Layer(TsdfVoxel, config.tsdf_voxel_size, config.tsdf_voxels_per_side)
        )

    @classmethod
    def from_layer_copy(cls, layer) -> TsdfMap:
        """A map holding a deep copy of ``layer``."""
        if layer is None:
            raise ValueError("TsdfMap needs a layer, got None")
        return cls(layer.copy())

    def block_size(self) -> float:
        return self.layer.block_size

    def voxel_size(self) -> float:
        return self.layer.voxel_size