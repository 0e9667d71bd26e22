import pytest

from voxelfield.color import Color, gray_color_map, rainbow_color_map
from voxelfield.color_maps import (
    ExponentialOffsetIdColorMap,
    GrayscaleColorMap,
    InverseGrayscaleColorMap,
    InverseRainbowColorMap,
    IronbowColorMap,
    IrrationalIdColorMap,
    RainbowColorMap,
)


def test_grayscale_spans_range_and_clamps():
    cmap = GrayscaleColorMap(-2.0, 2.0)
    assert cmap.color_lookup(-2.0) == gray_color_map(0.0)
    assert cmap.color_lookup(2.0) == gray_color_map(1.0)
    assert cmap.color_lookup(-10.0) == cmap.color_lookup(-2.0)
    assert cmap.color_lookup(10.0) == cmap.color_lookup(2.0)


def test_grayscale_midpoint_matches_gray_map():
    cmap = GrayscaleColorMap(0.0, 4.0)
    assert cmap.color_lookup(1.0) == gray_color_map(0.25)


def test_inverse_grayscale_reverses():
    normal = GrayscaleColorMap(0.0, 1.0)
    inverse = InverseGrayscaleColorMap(0.0, 1.0)
    assert inverse.color_lookup(0.0) == normal.color_lookup(1.0)
    assert inverse.color_lookup(1.0) == normal.color_lookup(0.0)


def test_rainbow_maps_follow_rainbow_function():
    assert RainbowColorMap().color_lookup(0.25) == rainbow_color_map(0.25)
    assert InverseRainbowColorMap().color_lookup(0.25) == rainbow_color_map(0.75)


def test_min_max_attributes_can_be_changed():
    cmap = RainbowColorMap()
    cmap.min_value = 10.0
    cmap.max_value = 20.0
    assert cmap.color_lookup(15.0) == rainbow_color_map(0.5)


def test_ironbow_endpoints_are_palette_ends():
    cmap = IronbowColorMap()
    assert cmap.color_lookup(0.0) == cmap.palette_colors[0]
    assert cmap.color_lookup(1.0) == cmap.palette_colors[-1]


def test_ironbow_hits_palette_entries_at_steps():
    cmap = IronbowColorMap()
    assert cmap.color_lookup(0.25) == Color(145, 20, 145)
    assert cmap.color_lookup(0.5) == Color(255, 138, 0)


def test_ironbow_clamps_out_of_range():
    cmap = IronbowColorMap(0.0, 2.0)
    assert cmap.color_lookup(-5.0) == cmap.color_lookup(0.0)
    assert cmap.color_lookup(5.0) == cmap.color_lookup(2.0)


def test_irrational_id_map_zero_is_rainbow_start():
    assert IrrationalIdColorMap().color_lookup(0) == rainbow_color_map(0.0)


def test_irrational_id_map_uses_base():
    cmap = IrrationalIdColorMap(4.0)
    assert cmap.color_lookup(1) == rainbow_color_map(0.25)
    assert cmap.color_lookup(5) == rainbow_color_map(0.25)


def test_irrational_ids_distinct():
    cmap = IrrationalIdColorMap()
    colors = {cmap.color_lookup(i) for i in range(6)}
    assert len(colors) == 6


@pytest.mark.parametrize("value", range(10))
def test_exponential_offset_first_revolution_is_even_spacing(value):
    cmap = ExponentialOffsetIdColorMap(10)
    assert cmap.color_lookup(value) == rainbow_color_map(value / 10.0)


def test_exponential_offset_later_revolutions_fill_gaps():
    cmap = ExponentialOffsetIdColorMap(10)
    colors = [cmap.color_lookup(i) for i in range(20)]
    assert len(set(colors)) == 20