"""Colour maps from scalar values and from integer identifiers."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from voxelfield.color import Color, gray_color_map, rainbow_color_map


class ColorMap(ABC):
    """Maps values in [min_value, max_value] onto colours, clamping outside."""

    def __init__(self, min_value=0.0, max_value=1.0) -> None:
        self.min_value = float(min_value)
        self.max_value = float(max_value)

    def _normalize(self, value) -> float:
        clamped = min(self.max_value, max(self.min_value, float(value)))
        return (clamped - self.min_value) / (self.max_value - self.min_value)

    @abstractmethod
    def color_lookup(self, value) -> Color:
        """The colour for ``value``."""


class GrayscaleColorMap(ColorMap):
    def color_lookup(self, value) -> Color:
        return gray_color_map(self._normalize(value))


class InverseGrayscaleColorMap(ColorMap):
    def color_lookup(self, value) -> Color:
        return gray_color_map(1.0 - self._normalize(value))


class RainbowColorMap(ColorMap):
    def color_lookup(self, value) -> Color:
        return rainbow_color_map(self._normalize(value))


class InverseRainbowColorMap(ColorMap):
    def color_lookup(self, value) -> Color:
        return rainbow_color_map(1.0 - self._normalize(value))


class IronbowColorMap(ColorMap):
    """Black through purple, orange and yellow to white."""

    def __init__(self, min_value=0.0, max_value=1.0) -> None:
        super().__init__(min_value, max_value)
        self.palette_colors = [
            Color(0, 0, 0),
            Color(145, 20, 145),
            Color(255, 138, 0),
            Color(255, 230, 40),
            Color(255, 255, 255),
            # Repeated so the top of the range has a neighbour to blend with.
            Color(255, 255, 255),
        ]
        self.increment = 1.0 / (len(self.palette_colors) - 2)

    def color_lookup(self, value) -> Color:
        new_value = self._normalize(value)
        index = int(math.floor(new_value / self.increment))
        return Color.blend(
            self.palette_colors[index],
            self.increment * (index + 1) - new_value,
            self.palette_colors[index + 1],
            new_value - self.increment * index,
        )


class IrrationalIdColorMap:
    """Spread identifiers round the hue circle with an irrational step."""

    def __init__(self, irrational_base=3.0 * math.pi) -> None:
        self.irrational_base = float(irrational_base)

    def color_lookup(self, value) -> Color:
        return rainbow_color_map(math.fmod(int(value) / self.irrational_base, 1.0))


class ExponentialOffsetIdColorMap:
    """Identifiers take evenly spaced hues, each revolution offset into the gaps."""

    def __init__(self, items_per_revolution=10) -> None:
        self.items_per_revolution = float(items_per_revolution)

    def color_lookup(self, value) -> Color:
        value = int(value)
        ratio = value / self.items_per_revolution
        revolution = int(ratio)
        progress_along_revolution = math.fmod(ratio, 1.0)

        offset = 0.0
        if self.items_per_revolution < value + 1 and revolution >= 1:
            current_episode = int(math.floor(math.log2(revolution)))
            episode_start = 2**current_episode
            current_subdivision = revolution - episode_start
            subdivision_step_size = 1.0 / (
                self.items_per_revolution * 2 * episode_start
            )
            offset = (2 * current_subdivision + 1) * subdivision_step_size

        return rainbow_color_map(progress_along_revolution + offset)