import numpy as np
import pytest

from voxelfield.block import Block, EsdfVoxel, IntensityVoxel, OccupancyVoxel, TsdfVoxel
from voxelfield.color import Color
from voxelfield.layer import Layer
from voxelfield.layer_utils import (
    center_blocks_of_layer,
    is_same_block,
    is_same_layer,
    is_same_voxel,
)


def test_same_voxels():
    assert is_same_voxel(TsdfVoxel(0.5, 2.0, Color(1, 2, 3)), TsdfVoxel(0.5, 2.0, Color(1, 2, 3)))
    assert is_same_voxel(OccupancyVoxel(0.3, True), OccupancyVoxel(0.3, True))


def test_different_voxels():
    assert not is_same_voxel(TsdfVoxel(distance=0.5), TsdfVoxel(distance=0.6))
    assert not is_same_voxel(TsdfVoxel(color=Color(1, 0, 0)), TsdfVoxel())
    assert not is_same_voxel(EsdfVoxel(fixed=True), EsdfVoxel())
    assert not is_same_voxel(TsdfVoxel(), EsdfVoxel())


def test_unsupported_voxel_type():
    with pytest.raises(TypeError):
        is_same_voxel(IntensityVoxel(), IntensityVoxel())


def test_same_block():
    a = Block(TsdfVoxel, 4, 0.1, (0, 0, 0))
    b = Block(TsdfVoxel, 4, 0.1, (0, 0, 0))
    assert is_same_block(a, b)
    b.voxels[7].weight = 1.0
    assert not is_same_block(a, b)


def test_block_origin_matters():
    a = Block(TsdfVoxel, 4, 0.1, (0, 0, 0))
    b = Block(TsdfVoxel, 4, 0.1, (0.4, 0, 0))
    assert not is_same_block(a, b)


def make_layer():
    layer = Layer(TsdfVoxel, 0.25, 4)
    layer.allocate_block_by_index((0, 0, 0))
    layer.allocate_block_by_index((2, 0, 0)).voxels[3].distance = 0.1
    return layer


def test_layer_equals_its_copy():
    layer = make_layer()
    assert is_same_layer(layer, layer.copy())


def test_layer_with_missing_block():
    layer = make_layer()
    other = layer.copy()
    other.remove_block((2, 0, 0))
    assert not is_same_layer(layer, other)
    assert not is_same_layer(other, layer)


def test_layer_with_changed_voxel():
    layer = make_layer()
    other = layer.copy()
    other.block_by_index((0, 0, 0)).voxels[0].weight = 5.0
    assert not is_same_layer(layer, other)


def test_center_blocks_of_layer():
    layer = make_layer()
    new_origin = center_blocks_of_layer(layer)
    np.testing.assert_allclose(new_origin, [1.0, 0.0, 0.0])
    assert sorted(layer.allocated_blocks()) == [(-1, 0, 0), (1, 0, 0)]
    for index in layer.allocated_blocks():
        assert layer.block_by_index(index).block_index() == index
    assert layer.block_by_index((1, 0, 0)).voxels[3].distance == pytest.approx(0.1)


def test_center_empty_layer_rejected():
    with pytest.raises(ValueError):
        center_blocks_of_layer(Layer(TsdfVoxel, 0.25, 4))