import math

import pytest

from voxelfield.block import EsdfVoxel, OccupancyVoxel
from voxelfield.esdf_occ_integrator import EsdfOccIntegrator, EsdfOccIntegratorConfig
from voxelfield.layer import Layer


def _make_layers(vps=4, block_indices=((0, 0, 0),)):
    occ = Layer(OccupancyVoxel, 1.0, vps)
    for idx in block_indices:
        block = occ.allocate_block_by_index(idx)
        for voxel in block.voxels:
            voxel.observed = True
            voxel.probability_log = -1.0
    esdf = Layer(EsdfVoxel, 1.0, vps)
    return occ, esdf


def _occupy(occ, block_index, voxel_index):
    occ.block_by_index(block_index).voxel_by_voxel_index(voxel_index).probability_log = 1.0


def _esdf_voxel(esdf, block_index, voxel_index):
    return esdf.block_by_index(block_index).voxel_by_voxel_index(voxel_index)


@pytest.fixture
def single_obstacle():
    occ, esdf = _make_layers()
    _occupy(occ, (0, 0, 0), (1, 1, 1))
    config = EsdfOccIntegratorConfig()
    integrator = EsdfOccIntegrator(config, occ, esdf)
    integrator.update_from_occ_layer_batch()
    return esdf, config


def test_occupied_voxel_is_fixed_at_zero(single_obstacle):
    esdf, _ = single_obstacle
    voxel = _esdf_voxel(esdf, (0, 0, 0), (1, 1, 1))
    assert voxel.fixed
    assert voxel.distance == 0.0
    assert voxel.parent == (0, 0, 0)


def test_face_and_edge_neighbours(single_obstacle):
    esdf, _ = single_obstacle
    face = _esdf_voxel(esdf, (0, 0, 0), (2, 1, 1))
    assert face.distance == pytest.approx(esdf.voxel_size)
    assert face.parent == (1 - 2, 1 - 1, 1 - 1)
    edge = _esdf_voxel(esdf, (0, 0, 0), (2, 2, 1))
    assert edge.distance == pytest.approx(math.sqrt(2.0) * esdf.voxel_size)
    assert not edge.fixed


def test_far_voxel_keeps_default(single_obstacle):
    esdf, config = single_obstacle
    far = _esdf_voxel(esdf, (0, 0, 0), (3, 3, 3))
    assert far.distance == config.default_distance_m
    assert far.parent == (0, 0, 0)


def test_invariants_after_processing(single_obstacle):
    esdf, config = single_obstacle
    block = esdf.block_by_index((0, 0, 0))
    for voxel in block.voxels:
        assert voxel.observed
        assert not voxel.in_queue
        assert 0.0 <= voxel.distance <= config.default_distance_m


def test_unobserved_voxels_stay_unobserved():
    occ, esdf = _make_layers()
    occ.block_by_index((0, 0, 0)).voxel_by_voxel_index((3, 0, 0)).observed = False
    _occupy(occ, (0, 0, 0), (2, 0, 0))
    EsdfOccIntegrator(None, occ, esdf).update_from_occ_layer_batch()
    assert not _esdf_voxel(esdf, (0, 0, 0), (3, 0, 0)).observed
    assert _esdf_voxel(esdf, (0, 0, 0), (1, 0, 0)).distance == pytest.approx(1.0)


def test_propagation_crosses_block_boundary():
    occ, esdf = _make_layers(block_indices=((0, 0, 0), (1, 0, 0)))
    _occupy(occ, (0, 0, 0), (3, 1, 1))
    EsdfOccIntegrator(EsdfOccIntegratorConfig(), occ, esdf).update_from_occ_layer_batch()
    voxel = _esdf_voxel(esdf, (1, 0, 0), (0, 1, 1))
    assert voxel.distance == pytest.approx(esdf.voxel_size)
    assert voxel.parent == (-1, 0, 0)


def test_batch_update_discards_stale_esdf_blocks():
    occ, esdf = _make_layers()
    esdf.allocate_block_by_index((5, 5, 5))
    EsdfOccIntegrator(EsdfOccIntegratorConfig(), occ, esdf).update_from_occ_layer_batch()
    assert esdf.allocated_blocks() == occ.allocated_blocks()


def test_neighbors_and_distances_structure():
    occ, esdf = _make_layers()
    integrator = EsdfOccIntegrator(EsdfOccIntegratorConfig(), occ, esdf)
    neighbours = integrator.neighbors_and_distances((0, 0, 0), (0, 2, 3))
    assert len(neighbours) == 26
    directions = [direction for _, _, direction in neighbours]
    assert len(set(directions)) == 26
    assert (0, 0, 0) not in directions
    for _, step, direction in neighbours:
        assert step == pytest.approx(math.sqrt(sum(d * d for d in direction)))
    steps = [step for _, step, _ in neighbours]
    assert steps == sorted(steps)


@pytest.mark.parametrize("voxel_index", [(0, 0, 0), (3, 3, 3), (0, 2, 3), (1, 1, 1)])
def test_neighbor_preserves_global_index(voxel_index):
    occ, esdf = _make_layers()
    integrator = EsdfOccIntegrator(EsdfOccIntegratorConfig(), occ, esdf)
    vps = esdf.voxels_per_side
    block_index = (2, -1, 0)
    for (nb_block, nb_voxel), _, direction in integrator.neighbors_and_distances(
        block_index, voxel_index
    ):
        assert all(0 <= c < vps for c in nb_voxel)
        for axis in range(3):
            original = block_index[axis] * vps + voxel_index[axis] + direction[axis]
            assert nb_block[axis] * vps + nb_voxel[axis] == original


def test_mismatched_layers_raise():
    occ, _ = _make_layers(vps=4)
    esdf = Layer(EsdfVoxel, 1.0, 8)
    integrator = EsdfOccIntegrator(EsdfOccIntegratorConfig(), occ, esdf)
    with pytest.raises(ValueError):
        integrator.update_from_occ_layer_batch()


def test_missing_layer_raises():
    occ, _ = _make_layers()
    with pytest.raises(ValueError):
        EsdfOccIntegrator(EsdfOccIntegratorConfig(), occ, None)