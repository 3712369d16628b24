"""Logo Optimizer – Color Analyzer.

Aggregate luminance statistics over the visible pixels of a logo and a
dark/light classification used to pick adaptive outline colors.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

from app.imaging.pixels import VISIBLE_ALPHA, PixelBuffer

# ITU-R BT.601 luma weights; thresholds below are tuned to these.
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

DARK_LUMINANCE = 0.3
LIGHT_LUMINANCE = 0.7
PREDOMINANT_RATIO = 0.4
DARK_AVERAGE = 0.35
LIGHT_AVERAGE = 0.65
NEUTRAL_LUMINANCE = 0.5


@dataclass(frozen=True)
class ColorAnalysis:
    """Luminance summary of the visible (alpha >= 128) pixels."""
    avg_luminance: float
    dark_ratio: float
    light_ratio: float
    is_predominantly_dark: bool
    is_predominantly_light: bool

    def summary(self) -> dict[str, object]:
        """Wire format for API responses."""
        return {
            "avgLuminance": str(Decimal(self.avg_luminance).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)),
            "isPredominantlyDark": self.is_predominantly_dark,
            "isPredominantlyLight": self.is_predominantly_light,
        }


def luminance(rgb: np.ndarray) -> np.ndarray:
    """BT.601 luma in [0, 1] for an (..., 3) array of 0-255 channel values."""
    rgb = rgb.astype(np.float64)
    r_w, g_w, b_w = LUMA_WEIGHTS
    return (r_w * rgb[..., 0] + g_w * rgb[..., 1] + b_w * rgb[..., 2]) / 255


def analyze_colors(buffer: PixelBuffer) -> ColorAnalysis:
    """Classify a logo as predominantly dark and/or light.

    Both flags may be False (neutral image). Both can be True for strongly
    bimodal images; callers decide the precedence.
    """
    pixels = buffer.as_array().reshape(-1, 4)
    visible = pixels[pixels[:, 3] >= VISIBLE_ALPHA]
    visible_count = len(visible)

    if visible_count == 0:
        avg = NEUTRAL_LUMINANCE
        dark_ratio = 0.0
        light_ratio = 0.0
    else:
        lum = luminance(visible[:, :3])
        avg = float(lum.sum()) / visible_count
        dark_ratio = int(np.count_nonzero(lum < DARK_LUMINANCE)) / visible_count
        light_ratio = int(np.count_nonzero(lum > LIGHT_LUMINANCE)) / visible_count

    return ColorAnalysis(
        avg_luminance=avg,
        dark_ratio=dark_ratio,
        light_ratio=light_ratio,
        is_predominantly_dark=dark_ratio > PREDOMINANT_RATIO or avg < DARK_AVERAGE,
        is_predominantly_light=light_ratio > PREDOMINANT_RATIO or avg > LIGHT_AVERAGE,
    )
