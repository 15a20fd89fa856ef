"""8-bit RGB color with saturating arithmetic.

Channels are integers in [0, 255]. Combining colors never wraps around:
sums saturate at 255 and scaling by a brightness factor clamps the factor to
[0, 1] before rounding half up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def _saturate(value: float) -> int:
    """Round half up and clamp to the [0, 255] channel range."""
    return int(min(max(math.floor(value + 0.5), 0), 255))


@dataclass(frozen=True)
class Color:
    """An RGB color with three 8-bit channels.

    Attributes:
        r: Red channel in [0, 255].
        g: Green channel in [0, 255].
        b: Blue channel in [0, 255].

    Raises:
        ValueError: If a channel is outside [0, 255].
    """

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name, channel in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel {name} = {channel} is outside [0, 255].")

    @classmethod
    def from_floats(cls, r: float, g: float, b: float) -> Color:
        """Build a color from float channels in 0..255 scale, saturating."""
        return cls(_saturate(r), _saturate(g), _saturate(b))

    def scaled(self, brightness: float) -> Color:
        """Scale every channel by brightness clamped to [0, 1].

        Negative brightness (a surface facing away from the light) gives black.
        """
        factor = min(max(brightness, 0.0), 1.0)
        return Color.from_floats(self.r * factor, self.g * factor, self.b * factor)

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def __add__(self, other: Color) -> Color:
        return Color(
            min(self.r + other.r, 255),
            min(self.g + other.g, 255),
            min(self.b + other.b, 255),
        )


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)

# Pixel color when the shadow ray is blocked
SHADOW_COLOR = Color(16, 16, 16)

# Pixel color when the camera ray hits nothing
BACKGROUND_COLOR = Color(135, 206, 235)
