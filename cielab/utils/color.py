"""Color space conversions: sRGB ↔ CIE XYZ ↔ CIE L*a*b* (D65).

Provides:
    - sRGB byte triple ↔ XYZ (piecewise sRGB transfer function)
    - XYZ ↔ Lab (CIE nonlinearity with linear segment near black)
    - RGB ↔ Lab composites
    - XYZ ↔ xyY chromaticity helpers
    - Squared and Euclidean ΔE in Lab space

Used by:
    - LabColor value type (cielab.utils.lab)
    - Callers holding plain RGB triples from an imaging layer

All functions operate on scalars and return plain tuples; nothing is
vectorized. Every function is pure and total over its domain (any byte
triple, any finite float triple) and may be called from any thread.

Invariants:
    - XYZ is relative to the D65 white (95.047, 100.0, 108.883), Y in [0, 100]
    - Matrices use the row-vector convention: [X Y Z] = [r g b][M]
    - RGB outputs are clamped into [0, 255]
    - Lab: L nominally [0, 100], a,b roughly [-128, 127] for sRGB
"""

import logging
import math
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
Triple = Tuple[float, float, float]


def _frozen(values) -> np.ndarray:
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


# ============================================================================
# CONSTANTS (sRGB working space, D65 illuminant)
# ============================================================================

# Reference white in XYZ coordinates
D65 = _frozen([95.047, 100.0, 108.883])

# sRGB → XYZ
SRGB_TO_XYZ = _frozen([
    [0.412424, 0.212656, 0.0193324],
    [0.357579, 0.715158, 0.119193],
    [0.180464, 0.0721856, 0.950444],
])

# XYZ → sRGB
XYZ_TO_SRGB = _frozen([
    [3.24071, -0.969258, 0.0556352],
    [-1.53726, 1.87599, -0.203996],
    [-0.498571, 0.0415557, 1.05707],
])

# sRGB transfer function breakpoints
SRGB_DECODE_THRESHOLD = 0.04045
SRGB_ENCODE_THRESHOLD = 0.0031308

# CIE Lab linear segment: f(t) = 7.787*t + 16/116 for t <= 0.008856
LAB_EPSILON = 0.008856
LAB_KAPPA = 7.787
LAB_OFFSET = 16.0 / 116.0

# Plain-float copies for scalar arithmetic (numpy scalars warn on overflow)
_D65 = tuple(float(v) for v in D65)
_SRGB_TO_XYZ = tuple(tuple(float(v) for v in row) for row in SRGB_TO_XYZ)
_XYZ_TO_SRGB = tuple(tuple(float(v) for v in row) for row in XYZ_TO_SRGB)


def _row_times_matrix(v0: float, v1: float, v2: float, mat) -> Triple:
    # result[i] = v0*M[0][i] + v1*M[1][i] + v2*M[2][i]
    return (
        v0 * mat[0][0] + v1 * mat[1][0] + v2 * mat[2][0],
        v0 * mat[0][1] + v1 * mat[1][1] + v2 * mat[2][1],
        v0 * mat[0][2] + v1 * mat[1][2] + v2 * mat[2][2],
    )


# ============================================================================
# TRANSFER FUNCTIONS
# ============================================================================

def srgb_to_linear(c: float) -> float:
    """Linearize one sRGB channel in [0, 1].

    Notes
    -----
    Exact sRGB transfer function:
        - Linear region for c <= 0.04045: c / 12.92
        - Power region: ((c + 0.055) / 1.055)^2.4
    """
    if c <= SRGB_DECODE_THRESHOLD:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def linear_to_srgb(c: float) -> float:
    """Gamma-encode one linear channel (inverse of srgb_to_linear).

    Not clamped: out-of-gamut input gives values outside [0, 1]. Negative
    input always takes the linear branch, so no fractional power of a
    negative base is taken.
    """
    if c <= SRGB_ENCODE_THRESHOLD:
        return c * 12.92
    return 1.055 * c ** (1.0 / 2.4) - 0.055


def lab_f(t: float) -> float:
    """CIE Lab nonlinearity applied to a white-normalized ratio."""
    if t > LAB_EPSILON:
        return t ** (1.0 / 3.0)
    return LAB_KAPPA * t + LAB_OFFSET


def lab_f_inv(f: float) -> float:
    """Inverse of lab_f.

    The branch is chosen by comparing the *cube* of f against 0.008856,
    while the linear branch inverts the un-cubed f. Keep it this way:
    comparing f against a threshold before cubing changes results near
    the seam.
    """
    f3 = f * f * f
    if f3 > LAB_EPSILON:
        return f3
    return (f - LAB_OFFSET) / LAB_KAPPA


# ============================================================================
# DIRECTIONAL TRANSFORMS
# ============================================================================

def rgb_to_xyz(r: int, g: int, b: int) -> Triple:
    """Convert an sRGB byte triple to CIE XYZ (D65).

    Parameters
    ----------
    r, g, b : int
        sRGB channels, range [0, 255]

    Returns
    -------
    tuple of float
        (X, Y, Z); (255, 255, 255) maps to approximately the D65 white
    """
    rl = srgb_to_linear(r / 255.0) * 100.0
    gl = srgb_to_linear(g / 255.0) * 100.0
    bl = srgb_to_linear(b / 255.0) * 100.0
    return _row_times_matrix(float(rl), float(gl), float(bl), _SRGB_TO_XYZ)


def xyz_to_rgb(x: float, y: float, z: float) -> RGB:
    """Convert CIE XYZ (D65) to an sRGB byte triple.

    Parameters
    ----------
    x, y, z : float
        XYZ coordinates, Y nominally in [0, 100]

    Returns
    -------
    tuple of int
        (r, g, b), each clamped into [0, 255]

    Notes
    -----
    Out-of-gamut XYZ (e.g. from an edited Lab value) is clamped channel-wise
    after gamma encoding. Rounding is half-to-even.
    """
    linear = _row_times_matrix(float(x) / 100.0, float(y) / 100.0, float(z) / 100.0, _XYZ_TO_SRGB)

    rgb = []
    for c in linear:
        encoded = linear_to_srgb(c)
        if math.isnan(encoded):
            # inf - inf in the matrix product (e.g. from a huge L)
            logger.debug("Zeroing undefined channel (XYZ=%r)", (x, y, z))
            encoded = 0.0
        elif encoded < 0.0 or encoded > 1.0:
            logger.debug("Clamping out-of-gamut channel %.6f (XYZ=%r)", encoded, (x, y, z))
            encoded = min(max(encoded, 0.0), 1.0)
        rgb.append(int(round(encoded * 255.0)))
    return rgb[0], rgb[1], rgb[2]


def xyz_to_lab(x: float, y: float, z: float) -> Triple:
    """Convert CIE XYZ (D65) to CIE L*a*b*.

    Parameters
    ----------
    x, y, z : float
        XYZ coordinates relative to D65

    Returns
    -------
    tuple of float
        (L, a, b); L in [0, 100] for in-gamut input

    Notes
    -----
    Uses the published CIE constants 0.008856 and 7.787 rather than the
    exact rationals 216/24389 and 841/108, so the two branches of f meet
    with a gap of ~4e-7 in f (~4e-5 in L).
    """
    fx = lab_f(float(x) / _D65[0])
    fy = lab_f(float(y) / _D65[1])
    fz = lab_f(float(z) / _D65[2])

    L = 116.0 * fy - 16.0
    a = 500.0 * (fx - fy)
    b = 200.0 * (fy - fz)
    return float(L), float(a), float(b)


def lab_to_xyz(L: float, a: float, b: float) -> Triple:
    """Convert CIE L*a*b* to CIE XYZ (D65).

    Parameters
    ----------
    L, a, b : float
        Lab coordinates

    Returns
    -------
    tuple of float
        (X, Y, Z) relative to D65
    """
    fy = (L + 16.0) / 116.0
    fx = a / 500.0 + fy
    fz = fy - b / 200.0

    return (
        lab_f_inv(float(fx)) * _D65[0],
        lab_f_inv(float(fy)) * _D65[1],
        lab_f_inv(float(fz)) * _D65[2],
    )


# ============================================================================
# COMPOSITES
# ============================================================================

def rgb_to_lab(r: int, g: int, b: int) -> Triple:
    """Convert an sRGB byte triple to Lab (rgb_to_xyz then xyz_to_lab)."""
    return xyz_to_lab(*rgb_to_xyz(r, g, b))


def lab_to_rgb(L: float, a: float, b: float) -> RGB:
    """Convert Lab to a clamped sRGB byte triple (lab_to_xyz then xyz_to_rgb)."""
    return xyz_to_rgb(*lab_to_xyz(L, a, b))


# ============================================================================
# CHROMATICITY
# ============================================================================

def xyz_to_xyy(x: float, y: float, z: float) -> Triple:
    """Convert XYZ to xyY chromaticity + luminance.

    Black (X + Y + Z == 0) has no chromaticity; it is reported at the
    chromaticity of the D65 white with Y = 0.
    """
    total = x + y + z
    if total == 0:
        white_total = sum(_D65)
        return _D65[0] / white_total, _D65[1] / white_total, 0.0
    return x / total, y / total, y


def xyy_to_xyz(x: float, y: float, Y: float) -> Triple:
    """Convert xyY to XYZ; y == 0 maps to (0, 0, 0)."""
    if y == 0:
        return 0.0, 0.0, 0.0
    return x * Y / y, Y, (1.0 - x - y) * Y / y


# ============================================================================
# DIFFERENCE METRICS
# ============================================================================

def delta_e_squared(lab1: Triple, lab2: Triple) -> float:
    """Squared Euclidean distance between two Lab triples.

    Returns ``(L1-L2)² + (a1-a2)² + (b1-b2)²`` with NO square root.

    .. warning::
        This is NOT ΔE*ab. Use it to rank or compare differences (ordering
        is the same as ΔE*ab). Literature thresholds such as "ΔE < 2.3 is
        just noticeable" must be compared against :func:`delta_e`, or
        squared first (2.3² = 5.29).
    """
    dL = lab1[0] - lab2[0]
    da = lab1[1] - lab2[1]
    db = lab1[2] - lab2[2]
    return float(dL * dL + da * da + db * db)


def delta_e(lab1: Triple, lab2: Triple) -> float:
    """CIE76 color difference ΔE*ab (Euclidean distance in Lab)."""
    return math.sqrt(delta_e_squared(lab1, lab2))
