"""Logo Optimizer – Outline Generator.

Grows the alpha channel with a circular-kernel grayscale dilation and keeps
only the newly covered region, giving a halo around the opaque shape.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from app.core.errors import ProcessingError
from app.imaging.pixels import PixelBuffer

WHITE = (255, 255, 255)
DARK_GRAY = (30, 30, 30)
NEUTRAL_GRAY = (200, 200, 200)


@dataclass(frozen=True)
class OutlineSpec:
    color: tuple[int, int, int]
    width: int = 2


def disk_offsets(radius: int) -> list[tuple[int, int]]:
    """All (dy, dx) with dx² + dy² <= radius²."""
    r2 = radius * radius
    return [
        (dy, dx)
        for dy in range(-radius, radius + 1)
        for dx in range(-radius, radius + 1)
        if dx * dx + dy * dy <= r2
    ]


def dilate_alpha(alpha: np.ndarray, radius: int) -> np.ndarray:
    """Max of ``alpha`` over a disk of ``radius`` around each pixel.

    Neighbours outside the image are excluded from the max. Each disk
    offset is applied as one shifted slice, so the result is identical to
    the per-pixel neighbourhood scan.
    """
    height, width = alpha.shape
    dilated = alpha.copy()
    for dy, dx in disk_offsets(radius):
        if abs(dy) >= height or abs(dx) >= width or (dy == 0 and dx == 0):
            continue
        # dilated[y, x] = max(..., alpha[y + dy, x + dx]) for in-bounds targets
        dst_y = slice(max(0, -dy), height - max(0, dy))
        dst_x = slice(max(0, -dx), width - max(0, dx))
        src_y = slice(max(0, dy), height - max(0, -dy))
        src_x = slice(max(0, dx), width - max(0, -dx))
        np.maximum(dilated[dst_y, dst_x], alpha[src_y, src_x], out=dilated[dst_y, dst_x])
    return dilated


def create_outline(buffer: PixelBuffer, color: tuple[int, int, int], width: int) -> PixelBuffer:
    """Build an outline layer the same size as ``buffer``.

    RGB is ``color`` everywhere; alpha is ``dilated - original`` so the
    outline only covers pixels the dilation newly reached.
    """
    if width < 0:
        raise ProcessingError(f"Outline width must be >= 0, got {width}")
    r, g, b = color

    alpha = buffer.as_array()[:, :, 3]
    dilated = dilate_alpha(alpha, width)

    out = np.empty((buffer.height, buffer.width, 4), dtype=np.uint8)
    out[:, :, 0] = r
    out[:, :, 1] = g
    out[:, :, 2] = b
    # dilated >= alpha everywhere, so the difference never underflows
    out[:, :, 3] = dilated - alpha
    return PixelBuffer.from_array(out)
