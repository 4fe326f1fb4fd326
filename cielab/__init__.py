"""cielab: sRGB / CIE XYZ / CIE L*a*b* color conversion (D65).

Layout (one-way dependency):
    cielab/utils/lab.py → cielab/utils/{color,validators}.py

Key invariants:
    - Working space is sRGB under D65; constants are fixed, not configurable
    - All conversions are pure scalar functions returning tuples
    - RGB outputs are always clamped into [0, 255]
    - LabColor.distance() is the SQUARED Lab distance, not ΔE*ab
"""

from .utils.color import (
    delta_e,
    delta_e_squared,
    lab_to_rgb,
    lab_to_xyz,
    rgb_to_lab,
    rgb_to_xyz,
    xyz_to_lab,
    xyz_to_rgb,
)
from .utils.lab import LabColor, distance

__version__ = "1.0.0"

__all__ = [
    'LabColor',
    'distance',
    'delta_e',
    'delta_e_squared',
    'lab_to_rgb',
    'lab_to_xyz',
    'rgb_to_lab',
    'rgb_to_xyz',
    'xyz_to_lab',
    'xyz_to_rgb',
]
