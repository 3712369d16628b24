"""Logo Optimizer – Perceptual Lightener.

Raises CIE L*a*b* lightness of dark pixels that lack contrast against a
typical dark UI background. Hue and chroma (a*, b*) are left as they are.

Conversion constants follow the sRGB / D65 definitions used by common
web color libraries so results match the browser-side tooling.
"""

from __future__ import annotations

import numpy as np
import structlog

from app.imaging.analyzer import luminance
from app.imaging.pixels import VISIBLE_ALPHA, PixelBuffer

logger = structlog.get_logger()

# Reference dark background luminance and the lightness ceiling.
DARK_BG_LUMINANCE = 0.1
MAX_LIGHTNESS = 85.0
# Pixels at or above this luminance are never adjusted.
LIGHT_PIXEL_LUMINANCE = 0.5

# (max_lighten, min_contrast)
BALANCED = (20.0, 3.0)
HIGH_CONTRAST = (35.0, 4.5)

# D65 white point
XN, YN, ZN = 0.950470, 1.0, 1.088830
T0 = 4 / 29
T1 = 6 / 29
T2 = 3 * T1 ** 2
T3 = T1 ** 3

RGB_TO_XYZ = np.array([
    [0.4124564, 0.3575761, 0.1804375],
    [0.2126729, 0.7151522, 0.0721750],
    [0.0193339, 0.1191920, 0.9503041],
])
XYZ_TO_RGB = np.array([
    [3.2404542, -1.5371385, -0.4985314],
    [-0.9692660, 1.8760108, 0.0415560],
    [0.0556434, -0.2040259, 1.0572252],
])


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) array of sRGB 0-255 values to L*a*b*."""
    c = rgb.astype(np.float64) / 255
    linear = np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)
    xyz = linear @ RGB_TO_XYZ.T
    xyz = xyz / np.array([XN, YN, ZN])
    f = np.where(xyz > T3, np.cbrt(xyz), xyz / T2 + T0)
    fx, fy, fz = f[:, 0], f[:, 1], f[:, 2]
    lightness = np.maximum(116 * fy - 16, 0.0)
    return np.column_stack([lightness, 500 * (fx - fy), 200 * (fy - fz)])


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) L*a*b* array to unclamped sRGB 0-255 floats."""
    fy = (lab[:, 0] + 16) / 116
    fx = fy + lab[:, 1] / 500
    fz = fy - lab[:, 2] / 200
    f = np.column_stack([fx, fy, fz])
    xyz = np.where(f > T1, f ** 3, T2 * (f - T0)) * np.array([XN, YN, ZN])
    linear = xyz @ XYZ_TO_RGB.T
    gamma = 1.055 * np.power(np.clip(linear, 0, None), 1 / 2.4) - 0.055
    return 255 * np.where(linear <= 0.00304, 12.92 * linear, gamma)


def contrast_with_dark(lum: np.ndarray) -> np.ndarray:
    """WCAG contrast ratio of each luminance against the dark reference."""
    hi = np.maximum(lum, DARK_BG_LUMINANCE)
    lo = np.minimum(lum, DARK_BG_LUMINANCE)
    return (hi + 0.05) / (lo + 0.05)


def lighten_colors(buffer: PixelBuffer, max_lighten: float, min_contrast: float) -> PixelBuffer:
    """Lighten low-contrast dark pixels by up to ``max_lighten`` L* units.

    Pixels with alpha < 128 are copied through untouched, as are pixels
    with luminance >= 0.5 or enough contrast. Lightness is capped at 85
    and never drops below the original value. Alpha is unchanged.
    """
    src = buffer.as_array()
    out = src.copy()
    flat = out.reshape(-1, 4)

    rgb = flat[:, :3]
    lum = luminance(rgb)
    mask = (
        (flat[:, 3] >= VISIBLE_ALPHA)
        & (contrast_with_dark(lum) < min_contrast)
        & (lum < LIGHT_PIXEL_LUMINANCE)
    )

    adjusted = int(np.count_nonzero(mask))
    if adjusted:
        lab = rgb_to_lab(rgb[mask])
        target = np.minimum(lab[:, 0] + max_lighten, MAX_LIGHTNESS)
        lab[:, 0] = np.maximum(lab[:, 0], target)
        new_rgb = np.clip(lab_to_rgb(lab), 0, 255)
        # round half up
        flat[mask, :3] = np.floor(new_rgb + 0.5).astype(np.uint8)

    logger.debug(
        "imaging.lighten.done",
        max_lighten=max_lighten,
        min_contrast=min_contrast,
        adjusted_pixels=adjusted,
    )
    return PixelBuffer.from_array(out)
