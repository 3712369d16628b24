"""Logo Optimizer – RGBA Pixel Buffer.

Shared raster representation for every imaging step: width, height and
an interleaved RGBA8 byte buffer (row-major, no padding).
Image decoding and encoding go through Pillow.
"""

from __future__ import annotations

import io
from dataclasses import dataclass

import numpy as np
import structlog
from PIL import Image, UnidentifiedImageError

from app.core.errors import InvalidImageError, ProcessingError

logger = structlog.get_logger()

CHANNELS = 4
# Below this alpha a pixel counts as transparent for analysis and lightening.
VISIBLE_ALPHA = 128


@dataclass(frozen=True)
class PixelBuffer:
    """Immutable RGBA8 raster.

    Fields:
        width: Width, px.
        height: Height, px.
        data: ``width * height * 4`` bytes, RGBA interleaved.
    """
    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ProcessingError(f"Invalid buffer size: {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise ProcessingError(
                f"Pixel data length {len(self.data)} does not match {self.width}x{self.height} RGBA ({expected})"
            )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def as_array(self) -> np.ndarray:
        """Read-only uint8 view of shape (height, width, 4)."""
        arr = np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, CHANNELS)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an (h, w, 4) array; values must already be in [0, 255]."""
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise ProcessingError(f"Expected (h, w, 4) array, got shape {arr.shape}")
        height, width = arr.shape[:2]
        return cls(width=width, height=height, data=np.ascontiguousarray(arr, dtype=np.uint8).tobytes())

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        rgba = image.convert("RGBA")
        width, height = rgba.size
        return cls(width=width, height=height, data=rgba.tobytes())

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), self.data)


def open_image(image_bytes: bytes) -> Image.Image:
    """Decode encoded image bytes with Pillow.

    Raises:
        InvalidImageError: if the bytes are not a decodable image.
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise InvalidImageError(f"Invalid image data: {exc}") from exc
    return image


def trim_transparent(image_bytes: bytes) -> Image.Image:
    """Crop an encoded image to the bounding box of its non-transparent content.

    A fully transparent image is returned uncropped.
    """
    image = open_image(image_bytes).convert("RGBA")
    bbox = image.getchannel("A").getbbox()
    if bbox is None:
        logger.info("imaging.trim.fully_transparent", width=image.width, height=image.height)
        return image
    if bbox != (0, 0, image.width, image.height):
        logger.debug("imaging.trim.cropped", bbox=bbox, original=image.size)
    return image.crop(bbox)


def encode_png(buffer: PixelBuffer) -> bytes:
    out = io.BytesIO()
    buffer.to_image().save(out, format="PNG")
    return out.getvalue()
