"""Immutable CIE L*a*b* color value.

Wraps an (L, a, b) triple with constructors from RGB and conversion back to
RGB. Instances are frozen; "editing" a color means building a new one.

Usage::

    from cielab.utils.lab import LabColor
    p = LabColor.from_rgb(200, 30, 30)
    v = LabColor(53.2, 80.1, 67.2)
    p.distance(v)      # squared ΔE, for ranking
    p.delta_e(v)       # ΔE*ab (CIE76)
    v.to_rgb()         # (r, g, b), clamped
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from . import color
from .validators import validate_lab, validate_rgb


@dataclass(frozen=True, slots=True)
class LabColor:
    """A color in CIE L*a*b* (D65).

    Parameters
    ----------
    L : float
        Lightness, nominally [0, 100]
    a, b : float
        Chroma axes, roughly [-128, 127] inside the sRGB gamut;
        out-of-gamut values are allowed and clamp on conversion to RGB
    """

    L: float
    a: float
    b: float

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> LabColor:
        """Build from an sRGB byte triple.

        Raises ``ValueError`` if a channel is not an int in [0, 255].
        """
        r, g, b = validate_rgb(r, g, b)
        return cls(*color.rgb_to_lab(r, g, b))

    @classmethod
    def from_color(cls, rgb_color: Any) -> LabColor:
        """Build from any object exposing ``.R``, ``.G``, ``.B`` bytes."""
        return cls.from_rgb(rgb_color.R, rgb_color.G, rgb_color.B)

    @classmethod
    def from_lab(cls, L: float, a: float, b: float) -> LabColor:
        """Build from raw coordinates, rejecting NaN and infinities."""
        return cls(*validate_lab(L, a, b))

    def to_xyz(self) -> color.Triple:
        return color.lab_to_xyz(self.L, self.a, self.b)

    def to_rgb(self) -> color.RGB:
        """Convert back to a clamped sRGB byte triple."""
        return color.lab_to_rgb(self.L, self.a, self.b)

    def as_tuple(self) -> color.Triple:
        return self.L, self.a, self.b

    def distance(self, other: LabColor) -> float:
        """Squared Euclidean distance to ``other`` (NOT ΔE*ab).

        See :func:`cielab.utils.color.delta_e_squared`.
        """
        return color.delta_e_squared(self.as_tuple(), other.as_tuple())

    def delta_e(self, other: LabColor) -> float:
        """ΔE*ab (CIE76) to ``other``."""
        return color.delta_e(self.as_tuple(), other.as_tuple())


def distance(p: LabColor, v: LabColor) -> float:
    """Squared Euclidean distance between two Lab colors (NOT ΔE*ab)."""
    return p.distance(v)
