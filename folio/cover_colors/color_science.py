# -*- Mode: Python; coding: utf-8; indent-tabs-mode: nil; tab-width: 4 -*-
"""Color science utilities using the CIELAB color space.

CIELAB separates lightness from the two opponent color axes, so Euclidean
distances in it track perceived differences far better than distances in
RGB. All conversions assume sRGB with the D65 reference white.

The LAB color space uses three components:
    - L: Lightness (0 = black, 100 = white)
    - a: Green-red axis (negative = green, positive = red)
    - b: Blue-yellow axis (negative = blue, positive = yellow)

Color differences use CIE76 (plain Euclidean distance). Every clustering
threshold in the extraction strategies is tuned against this metric, so it
must not be swapped for CIE94 or CIEDE2000 without re-tuning them.
"""

import math
from typing import Tuple

RGB = Tuple[int, int, int]
LAB = Tuple[float, float, float]

# D65 reference white, XYZ scaled to 0-100
REF_X = 95.047
REF_Y = 100.000
REF_Z = 108.883

_EPSILON = 0.008856
_KAPPA = 903.3


def srgb_to_linear(c: float) -> float:
    """Convert sRGB component (0-1) to linear RGB.

    Args:
        c: sRGB component value (0.0 to 1.0).

    Returns:
        Linear RGB component value (0.0 to 1.0).
    """
    if c <= 0.04045:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def linear_to_srgb(c: float) -> float:
    """Convert linear RGB component to sRGB.

    Args:
        c: Linear RGB component value (0.0 to 1.0).

    Returns:
        sRGB component value (0.0 to 1.0).
    """
    if c <= 0.0031308:
        return c * 12.92
    return 1.055 * (c ** (1 / 2.4)) - 0.055


def rgb_to_xyz(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """Convert RGB (0-255) to CIE XYZ scaled to 0-100."""
    r_lin = srgb_to_linear(r / 255.0) * 100
    g_lin = srgb_to_linear(g / 255.0) * 100
    b_lin = srgb_to_linear(b / 255.0) * 100

    x = r_lin * 0.4124564 + g_lin * 0.3575761 + b_lin * 0.1804375
    y = r_lin * 0.2126729 + g_lin * 0.7151522 + b_lin * 0.0721750
    z = r_lin * 0.0193339 + g_lin * 0.1191920 + b_lin * 0.9503041
    return (x, y, z)


def _lab_f(t: float) -> float:
    if t > _EPSILON:
        return t ** (1 / 3)
    return (_KAPPA * t + 16) / 116


def xyz_to_lab(x: float, y: float, z: float) -> LAB:
    """Convert CIE XYZ (0-100) to LAB."""
    fx = _lab_f(x / REF_X)
    fy = _lab_f(y / REF_Y)
    fz = _lab_f(z / REF_Z)

    L = 116 * fy - 16
    a = 500 * (fx - fy)
    b = 200 * (fy - fz)
    return (L, a, b)


def rgb_to_lab(r: int, g: int, b: int) -> LAB:
    """Convert RGB (0-255) to LAB.

    Args:
        r: Red component (0-255).
        g: Green component (0-255).
        b: Blue component (0-255).

    Returns:
        Tuple of (L, a, b).
    """
    return xyz_to_lab(*rgb_to_xyz(r, g, b))


def lab_to_xyz(L: float, a: float, b: float) -> Tuple[float, float, float]:
    """Convert LAB to CIE XYZ (0-100)."""
    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200

    fx3 = fx ** 3
    fy3 = fy ** 3
    fz3 = fz ** 3

    xn = fx3 if fx3 > _EPSILON else (116 * fx - 16) / _KAPPA
    yn = fy3 if fy3 > _EPSILON else (116 * fy - 16) / _KAPPA
    zn = fz3 if fz3 > _EPSILON else (116 * fz - 16) / _KAPPA
    return (xn * REF_X, yn * REF_Y, zn * REF_Z)


def _to_channel(c: float) -> int:
    if c > 0.0031308:
        c = 1.055 * (c ** (1 / 2.4)) - 0.055
    else:
        c = 12.92 * c
    return max(0, min(255, int(math.floor(c * 255 + 0.5))))


def xyz_to_rgb(x: float, y: float, z: float) -> RGB:
    """Convert CIE XYZ (0-100) to RGB, clamped and rounded to 0-255."""
    x /= 100
    y /= 100
    z /= 100

    r = x * 3.2404542 + y * -1.5371385 + z * -0.4985314
    g = x * -0.9692660 + y * 1.8760108 + z * 0.0415560
    b = x * 0.0556434 + y * -0.2040259 + z * 1.0572252
    return (_to_channel(r), _to_channel(g), _to_channel(b))


def lab_to_rgb(L: float, a: float, b: float) -> RGB:
    """Convert LAB to RGB (0-255). Out-of-gamut colors are clamped."""
    return xyz_to_rgb(*lab_to_xyz(L, a, b))


def delta_e(lab1: LAB, lab2: LAB) -> float:
    """Calculate the CIE76 color difference between two LAB colors.

    Rough scale: below 1 is imperceptible, 2-10 is noticeable at a glance,
    above 10 reads as a different color.
    """
    dL = lab1[0] - lab2[0]
    da = lab1[1] - lab2[1]
    db = lab1[2] - lab2[2]
    return math.sqrt(dL * dL + da * da + db * db)


def lab_hue(lab: LAB) -> float:
    """Hue angle of a LAB color in degrees (0-360)."""
    hue = math.degrees(math.atan2(lab[2], lab[1]))
    if hue < 0:
        hue += 360.0
    return hue


def lab_chroma(lab: LAB) -> float:
    """Chroma (colorfulness) of a LAB color, its distance from the gray axis."""
    return math.sqrt(lab[1] * lab[1] + lab[2] * lab[2])


def rgb_distance(c1: RGB, c2: RGB) -> float:
    """Euclidean distance between two RGB colors (0 to ~441)."""
    dr = c1[0] - c2[0]
    dg = c1[1] - c2[1]
    db = c1[2] - c2[2]
    return math.sqrt(dr * dr + dg * dg + db * db)


def saturation(r: int, g: int, b: int) -> float:
    """HSV-style saturation (0-1)."""
    max_c = max(r, g, b)
    if max_c == 0:
        return 0.0
    return (max_c - min(r, g, b)) / max_c


def brightness(r: int, g: int, b: int) -> float:
    """Perceived brightness (0-255) using Rec. 601 luma weights."""
    return (r * 299 + g * 587 + b * 114) / 1000


def is_near_white(r: int, g: int, b: int) -> bool:
    return r > 240 and g > 240 and b > 240


def is_near_black(r: int, g: int, b: int) -> bool:
    return r < 15 and g < 15 and b < 15


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB (0-255) to a lowercase '#rrggbb' string."""
    r = max(0, min(255, int(r)))
    g = max(0, min(255, int(g)))
    b = max(0, min(255, int(b)))
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert '#rrggbb' or 'rrggbb' to an RGB tuple.

    Raises:
        ValueError: If the string is not six hex digits.
    """
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    return (
        int(hex_color[0:2], 16),
        int(hex_color[2:4], 16),
        int(hex_color[4:6], 16),
    )


def hex_to_lab(hex_color: str) -> LAB:
    """Convert a hex color string to LAB."""
    return rgb_to_lab(*hex_to_rgb(hex_color))
