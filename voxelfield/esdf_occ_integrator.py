"""Builds a Euclidean signed distance layer from an occupancy layer."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from voxelfield.bucket_queue import BucketQueue

logger = logging.getLogger(__name__)


def _build_neighbor_offsets() -> list:
    offsets = []
    for i in range(3):
        for j in (-1, 1):
            direction = [0, 0, 0]
            direction[i] = j
            offsets.append((tuple(direction), 1.0))
    sqrt2 = math.sqrt(2.0)
    for i in range(3):
        next_i = (i + 1) % 3
        for j in (-1, 1):
            for k in (-1, 1):
                direction = [0, 0, 0]
                direction[i] = j
                direction[next_i] = k
                offsets.append((tuple(direction), sqrt2))
    sqrt3 = math.sqrt(3.0)
    for i in (-1, 1):
        for j in (-1, 1):
            for k in (-1, 1):
                offsets.append(((i, j, k), sqrt3))
    return offsets


# 26-connectivity with quasi-Euclidean step lengths, in voxel units.
_NEIGHBOR_OFFSETS = _build_neighbor_offsets()


@dataclass
class EsdfOccIntegratorConfig:
    # Distances are propagated only up to this value.
    max_distance_m: float = 2.0
    # Distance given to free voxels that no propagation reaches.
    default_distance_m: float = 2.0
    num_buckets: int = 20


class EsdfOccIntegrator:
    """Propagates distances outward from occupied voxels into an ESDF layer.

    Occupied voxels become fixed at distance zero; only batch updates are
    supported.
    """

    def __init__(self, config, occ_layer, esdf_layer) -> None:
        if occ_layer is None or esdf_layer is None:
            raise ValueError("both an occupancy and an ESDF layer are required")
        self.config = EsdfOccIntegratorConfig() if config is None else config
        self.occ_layer = occ_layer
        self.esdf_layer = esdf_layer
        self.esdf_voxels_per_side = esdf_layer.voxels_per_side
        self.esdf_voxel_size = esdf_layer.voxel_size
        self._open = BucketQueue(self.config.num_buckets, self.config.max_distance_m)

    def update_from_occ_layer_batch(self) -> None:
        """Rebuild the whole ESDF layer from every allocated occupancy block."""
        self.esdf_layer.remove_all_blocks()
        self.update_from_occ_blocks(self.occ_layer.allocated_blocks())

    def update_from_occ_blocks(self, occ_blocks) -> None:
        if self.occ_layer.voxels_per_side != self.esdf_layer.voxels_per_side:
            raise ValueError("occupancy and ESDF layers differ in voxels per side")

        num_lower = 0
        num_new = 0
        occ_blocks = list(occ_blocks)
        logger.debug("Propagating %d updated occupancy blocks", len(occ_blocks))
        for block_index in occ_blocks:
            occ_block = self.occ_layer.block_by_index(block_index)
            esdf_block = self.esdf_layer.allocate_block_by_index(block_index)
            block_key = tuple(int(c) for c in block_index)

            for lin_index, occ_voxel in enumerate(occ_block.voxels):
                if not occ_voxel.observed:
                    continue
                esdf_voxel = esdf_block.voxels[lin_index]
                esdf_voxel.observed = True
                esdf_voxel.parent = (0, 0, 0)
                if occ_voxel.probability_log > 0.0:
                    esdf_voxel.distance = 0.0
                    esdf_voxel.fixed = True
                    esdf_voxel.in_queue = True
                    voxel_index = esdf_block.voxel_index_from_linear_index(lin_index)
                    self._open.push((block_key, voxel_index), esdf_voxel.distance)
                    num_lower += 1
                else:
                    esdf_voxel.distance = self.config.default_distance_m
                    esdf_voxel.fixed = False
                    num_new += 1

        logger.debug("Lower: %d New: %d", num_lower, num_new)
        self.process_open_set()

    def process_open_set(self) -> int:
        """Drain the open queue, relaxing neighbours; returns the voxels expanded."""
        num_updates = 0
        max_distance = self.config.max_distance_m
        while self._open:
            block_index, voxel_index = self._open.pop()
            esdf_block = self.esdf_layer.block_by_index(block_index)
            esdf_voxel = esdf_block.voxel_by_voxel_index(voxel_index)

            if not esdf_voxel.observed or esdf_voxel.distance >= max_distance:
                esdf_voxel.in_queue = False
                continue

            for neighbor_key, step, direction in self.neighbors_and_distances(
                block_index, voxel_index
            ):
                neighbor_block_index, neighbor_voxel_index = neighbor_key
                if neighbor_block_index == block_index:
                    neighbor_block = esdf_block
                else:
                    neighbor_block = self.esdf_layer.get_block(neighbor_block_index)
                if neighbor_block is None:
                    continue
                if not neighbor_block.is_valid_voxel_index(neighbor_voxel_index):
                    raise RuntimeError(
                        f"neighbour voxel index {neighbor_voxel_index} outside block"
                    )
                neighbor_voxel = neighbor_block.voxel_by_voxel_index(neighbor_voxel_index)
                if not neighbor_voxel.observed:
                    continue

                distance_to_neighbor = step * self.esdf_voxel_size
                parent = tuple(-d for d in direction)

                if (
                    not neighbor_voxel.fixed
                    and esdf_voxel.distance + distance_to_neighbor < neighbor_voxel.distance
                ):
                    neighbor_voxel.distance = esdf_voxel.distance + distance_to_neighbor
                    neighbor_voxel.parent = parent
                    if neighbor_voxel.distance < max_distance and not neighbor_voxel.in_queue:
                        self._open.push(neighbor_key, neighbor_voxel.distance)
                        neighbor_voxel.in_queue = True

                if (
                    neighbor_voxel.fixed
                    and esdf_voxel.distance - distance_to_neighbor > neighbor_voxel.distance
                ):
                    neighbor_voxel.distance = esdf_voxel.distance - distance_to_neighbor
                    neighbor_voxel.parent = parent
                    if not neighbor_voxel.in_queue:
                        self._open.push(neighbor_key, neighbor_voxel.distance)
                        neighbor_voxel.in_queue = True

            num_updates += 1
            esdf_voxel.in_queue = False

        logger.debug("Made %d voxel updates", num_updates)
        return num_updates

    def neighbors_and_distances(self, block_index, voxel_index) -> list:
        """The 26 neighbours as ``((block_index, voxel_index), step, direction)``.

        ``step`` is in voxel units; ``direction`` points from this voxel to the
        neighbour.
        """
        return [
            (self.neighbor(block_index, voxel_index, direction), step, direction)
            for direction, step in _NEIGHBOR_OFFSETS
        ]

    def neighbor(self, block_index, voxel_index, direction) -> tuple:
        """``(block_index, voxel_index)`` of the voxel one step along ``direction``."""
        vps = self.esdf_voxels_per_side
        block = [int(c) for c in block_index]
        voxel = [int(v) + int(d) for v, d in zip(voxel_index, direction)]
        for i in range(3):
            if voxel[i] < 0:
                block[i] -= 1
                voxel[i] += vps
            elif voxel[i] >= vps:
                block[i] += 1
                voxel[i] -= vps
        return tuple(block), tuple(voxel)