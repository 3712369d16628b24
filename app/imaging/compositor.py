"""Logo Optimizer – Variant Compositor.

Layers an outline underneath a (possibly lightened) logo and produces the
three PNG variants returned to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog
from PIL import Image

from app.core.errors import ProcessingError
from app.imaging.analyzer import ColorAnalysis
from app.imaging.lighten import BALANCED, HIGH_CONTRAST, lighten_colors
from app.imaging.outline import DARK_GRAY, NEUTRAL_GRAY, WHITE, OutlineSpec, create_outline
from app.imaging.pixels import PixelBuffer, encode_png

logger = structlog.get_logger()

OUTLINE_WIDTH = 2


@dataclass(frozen=True)
class Variant:
    """One optimized rendition of the logo."""
    id: str
    label: str
    description: str
    png: bytes


def composite_over(base: PixelBuffer, outline: PixelBuffer) -> PixelBuffer:
    """Draw ``base`` over ``outline`` ("over" blend, outline underneath).

    Pixels where both layers are fully transparent keep the base pixel.
    """
    if (base.width, base.height) != (outline.width, outline.height):
        raise ProcessingError(
            f"Layer size mismatch: base {base.width}x{base.height}, outline {outline.width}x{outline.height}"
        )
    if base.pixel_count == 0:
        return base

    blended = np.array(Image.alpha_composite(outline.to_image(), base.to_image()), dtype=np.uint8)
    empty = blended[:, :, 3] == 0
    if empty.any():
        blended[empty] = base.as_array()[empty]
    return PixelBuffer.from_array(blended)


def composite_with_outline(base: PixelBuffer, outline: PixelBuffer) -> bytes:
    return encode_png(composite_over(base, outline))


def adaptive_outline_color(analysis: ColorAnalysis) -> tuple[int, int, int]:
    """Outline color for the adjusted variants.

    Light logos get a dark outline, dark logos a white one, anything else
    neutral gray. Light is checked first, so a logo flagged both ways gets
    the dark outline.
    """
    if analysis.is_predominantly_light:
        return DARK_GRAY
    elif analysis.is_predominantly_dark:
        return WHITE
    return NEUTRAL_GRAY


def _render(base: PixelBuffer, spec: OutlineSpec) -> bytes:
    outline = create_outline(base, spec.color, spec.width)
    return composite_with_outline(base, outline)


def generate_variations(source: PixelBuffer, analysis: ColorAnalysis) -> list[Variant]:
    """Produce the three variants, in order.

    1. original-outline: untouched colors, always a white outline.
    2. balanced: subtle lightening, adaptive outline.
    3. high-contrast: strong lightening, adaptive outline.

    ``source`` is only read; every variant derives its own buffers.
    """
    adaptive = OutlineSpec(color=adaptive_outline_color(analysis), width=OUTLINE_WIDTH)

    variants = [
        Variant(
            id="original-outline",
            label="Original + Outline",
            description="Preserves exact brand colors with white outline",
            png=_render(source, OutlineSpec(color=WHITE, width=OUTLINE_WIDTH)),
        ),
        Variant(
            id="balanced",
            label="Balanced",
            description="Subtle color adjustment with adaptive outline",
            png=_render(lighten_colors(source, *BALANCED), adaptive),
        ),
        Variant(
            id="high-contrast",
            label="High Contrast",
            description="Maximum visibility on dark backgrounds",
            png=_render(lighten_colors(source, *HIGH_CONTRAST), adaptive),
        ),
    ]

    logger.info(
        "imaging.variants.generated",
        count=len(variants),
        width=source.width,
        height=source.height,
        outline_color=adaptive.color,
    )
    return variants
