"""RGBA colours and scalar-to-colour maps."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Color:
    """An 8-bit RGBA colour."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = int(getattr(self, name))
            if not 0 <= value <= 255:
                raise ValueError(f"colour component {name}={value} outside 0..255")
            object.__setattr__(self, name, value)

    @classmethod
    def blend(cls, color_a, weight_a, color_b, weight_b) -> Color:
        """Weighted average of two colours, alpha included."""
        total = float(weight_a) + float(weight_b)
        wa = float(weight_a) / total
        wb = float(weight_b) / total
        return cls(
            _round_half_away(color_a.r * wa + color_b.r * wb),
            _round_half_away(color_a.g * wa + color_b.g * wb),
            _round_half_away(color_a.b * wa + color_b.b * wb),
            _round_half_away(color_a.a * wa + color_b.a * wb),
        )


def rainbow_color_map(h) -> Color:
    """Map ``h`` (wrapped into [0, 1)) onto a fully saturated hue."""
    h = float(h)
    if not math.isfinite(h):
        return Color(255, 127, 127, 255)
    s = 1.0
    v = 1.0
    h -= math.floor(h)
    h *= 6
    i = math.floor(h)
    f = h - i
    if not i & 1:
        f = 1 - f
    m = v * (1 - s)
    n = v * (1 - s * f)
    hi, nn, mm = int(255 * v), int(255 * n), int(255 * m)
    channels = {
        0: (hi, nn, mm),
        6: (hi, nn, mm),
        1: (nn, hi, mm),
        2: (mm, hi, nn),
        3: (mm, nn, hi),
        4: (nn, mm, hi),
        5: (hi, mm, nn),
    }.get(i, (255, 127, 127))
    return Color(*channels, 255)


def gray_color_map(h) -> Color:
    """Map ``h`` in [0, 1] onto a grey level."""
    level = _round_half_away(float(h) * 255)
    return Color(level, level, level, 255)


def random_color(rng=None) -> Color:
    """An opaque colour with uniformly random channels."""
    rng = random.Random() if rng is None else rng
    r = rng.randrange(256)
    b = rng.randrange(256)
    g = rng.randrange(256)
    return Color(r, g, b, 255)