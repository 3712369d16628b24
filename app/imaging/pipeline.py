"""Logo Optimizer – Request Pipeline.

background removal -> trim -> decode -> analyze -> three variants.
Either all three variants are produced or an error is raised.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass

import structlog

from app.core.errors import InvalidImageError, LogoOptimizerError, ProcessingError
from app.core.instrumentation import VARIANTS_GENERATED, observe_stage
from app.imaging.analyzer import ColorAnalysis, analyze_colors
from app.imaging.compositor import Variant, generate_variations
from app.imaging.pixels import PixelBuffer, trim_transparent
from app.integrations.stability import BackgroundRemovalService

logger = structlog.get_logger()


@dataclass(frozen=True)
class OptimizationResult:
    variants: list[Variant]
    analysis: ColorAnalysis


class LogoOptimizer:
    """Runs the logo pipeline against a background-removal service."""

    def __init__(self, remover: BackgroundRemovalService, max_pixels: int = 4_000_000) -> None:
        self._remover = remover
        self._max_pixels = max_pixels

    async def optimize(self, image_bytes: bytes) -> OptimizationResult:
        start = time.perf_counter()
        logger.info("logo.pipeline.started", input_bytes=len(image_bytes))

        with observe_stage("remove_background"):
            without_bg = await self._remover.remove_background(image_bytes)

        # CPU-bound; keep it off the event loop
        result = await asyncio.to_thread(self.process, without_bg)

        for variant in result.variants:
            VARIANTS_GENERATED.labels(variant=variant.id).inc()
        logger.info(
            "logo.pipeline.finished",
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
            avg_luminance=round(result.analysis.avg_luminance, 3),
            dark=result.analysis.is_predominantly_dark,
            light=result.analysis.is_predominantly_light,
        )
        return result

    def process(self, image_bytes: bytes) -> OptimizationResult:
        """Trim, decode, analyze and render variants from background-free bytes."""
        try:
            with observe_stage("trim"):
                trimmed = trim_transparent(image_bytes)
            if trimmed.width * trimmed.height > self._max_pixels:
                raise InvalidImageError(
                    f"Image too large: {trimmed.width}x{trimmed.height} exceeds {self._max_pixels} pixels"
                )

            source = PixelBuffer.from_image(trimmed)
            with observe_stage("analyze"):
                analysis = analyze_colors(source)
            with observe_stage("variants"):
                variants = generate_variations(source, analysis)
        except LogoOptimizerError:
            raise
        except Exception as e:
            logger.error("logo.pipeline.processing_failed", error=str(e))
            raise ProcessingError(f"Failed to process logo: {e}") from e

        return OptimizationResult(variants=variants, analysis=analysis)
