"""Variant Compositor Tests.

Tests: outline-under-base blending, adaptive outline colors, the three
variants for dark, light and empty logos.
"""

import numpy as np
import pytest

from app.core.errors import ProcessingError
from app.imaging.analyzer import ColorAnalysis, analyze_colors
from app.imaging.compositor import (
    adaptive_outline_color,
    composite_over,
    composite_with_outline,
    generate_variations,
)
from app.imaging.outline import DARK_GRAY, NEUTRAL_GRAY, WHITE
from app.imaging.pixels import PixelBuffer, encode_png

from conftest import decode_png, make_square_buffer


def analysis(dark: bool, light: bool) -> ColorAnalysis:
    return ColorAnalysis(
        avg_luminance=0.5,
        dark_ratio=0.0,
        light_ratio=0.0,
        is_predominantly_dark=dark,
        is_predominantly_light=light,
    )


def layer(rgba: tuple[int, int, int, int], size: tuple[int, int] = (4, 3)) -> PixelBuffer:
    width, height = size
    arr = np.empty((height, width, 4), dtype=np.uint8)
    arr[:, :] = rgba
    return PixelBuffer.from_array(arr)


# ──────────────────────────────────────────
# Compositing
# ──────────────────────────────────────────


class TestComposite:

    def test_empty_outline_returns_base(self) -> None:
        rng = np.random.default_rng(11)
        arr = rng.integers(0, 256, size=(7, 9, 4), dtype=np.uint8)
        arr[0, :, 3] = 0  # transparent row with arbitrary colors
        base = PixelBuffer.from_array(arr)
        outline = layer((255, 255, 255, 0), size=(9, 7))

        result = decode_png(composite_with_outline(base, outline))
        assert result.data == base.data
        assert result.data == decode_png(encode_png(base)).data

    def test_opaque_base_occludes_outline(self) -> None:
        base = layer((10, 20, 30, 255))
        outline = layer((255, 255, 255, 255))
        assert composite_over(base, outline).data == base.data

    def test_outline_shows_through_transparent_base(self) -> None:
        base = layer((10, 20, 30, 0))
        outline = layer((200, 200, 200, 255))
        assert composite_over(base, outline).data == outline.data

    def test_partial_alpha_blends_over(self) -> None:
        base = layer((0, 0, 0, 128), size=(1, 1))
        outline = layer((255, 255, 255, 255), size=(1, 1))
        r, g, b, a = composite_over(base, outline).as_array()[0, 0]
        assert a == 255
        assert 120 <= r <= 135
        assert r == g == b

    def test_size_mismatch_rejected(self) -> None:
        with pytest.raises(ProcessingError):
            composite_over(layer((0, 0, 0, 255), (2, 2)), layer((0, 0, 0, 255), (3, 2)))


# ──────────────────────────────────────────
# Adaptive outline color
# ──────────────────────────────────────────


class TestAdaptiveOutlineColor:

    def test_neutral_uses_gray(self) -> None:
        assert adaptive_outline_color(analysis(dark=False, light=False)) == NEUTRAL_GRAY

    def test_light_uses_dark_gray(self) -> None:
        assert adaptive_outline_color(analysis(dark=False, light=True)) == DARK_GRAY

    def test_dark_uses_white(self) -> None:
        assert adaptive_outline_color(analysis(dark=True, light=False)) == WHITE

    def test_both_flags_prefer_light(self) -> None:
        """Known edge case: bimodal logos take the light-logo branch."""
        assert adaptive_outline_color(analysis(dark=True, light=True)) == DARK_GRAY


# ──────────────────────────────────────────
# Variations
# ──────────────────────────────────────────


class TestGenerateVariations:

    def test_order_and_metadata(self, square_logo: PixelBuffer) -> None:
        variants = generate_variations(square_logo, analyze_colors(square_logo))
        assert [v.id for v in variants] == ["original-outline", "balanced", "high-contrast"]
        assert [v.label for v in variants] == ["Original + Outline", "Balanced", "High Contrast"]
        assert all(v.description for v in variants)

    def test_dark_square_gets_white_outlines(self, square_logo: PixelBuffer) -> None:
        variants = generate_variations(square_logo, analyze_colors(square_logo))
        for variant in variants:
            arr = decode_png(variant.png).as_array()
            assert tuple(arr[50, 23]) == (255, 255, 255, 255)
            assert arr[50, 22, 3] == 0

    def test_dark_square_colors_per_variant(self, square_logo: PixelBuffer) -> None:
        original, balanced, high_contrast = (
            decode_png(v.png).as_array() for v in generate_variations(square_logo, analyze_colors(square_logo))
        )
        assert tuple(original[50, 50]) == (0, 0, 0, 255)
        # pure black sits exactly at the balanced contrast threshold
        assert tuple(balanced[50, 50]) == (0, 0, 0, 255)
        assert high_contrast[50, 50, 3] == 255
        assert high_contrast[50, 50, 0] > 0

    def test_light_logo_uses_dark_outline_after_first(self) -> None:
        logo = make_square_buffer(size=40, square=20, rgb=(255, 255, 255))
        original, balanced, high_contrast = (
            decode_png(v.png).as_array() for v in generate_variations(logo, analyze_colors(logo))
        )
        assert tuple(original[20, 9]) == (255, 255, 255, 255)
        assert tuple(balanced[20, 9]) == (30, 30, 30, 255)
        assert tuple(high_contrast[20, 9]) == (30, 30, 30, 255)

    def test_neutral_logo_uses_gray_outline(self) -> None:
        logo = make_square_buffer(size=40, square=20, rgb=(128, 128, 128))
        variants = generate_variations(logo, analyze_colors(logo))
        balanced = decode_png(variants[1].png).as_array()
        assert tuple(balanced[20, 9]) == (200, 200, 200, 255)

    def test_transparent_logo_yields_transparent_variants(self, transparent_logo: PixelBuffer) -> None:
        variants = generate_variations(transparent_logo, analyze_colors(transparent_logo))
        assert len(variants) == 3
        for variant in variants:
            arr = decode_png(variant.png).as_array()
            assert arr.shape == (40, 30, 4)
            assert (arr[:, :, 3] == 0).all()

    def test_source_buffer_is_not_mutated(self, square_logo: PixelBuffer) -> None:
        before = square_logo.data
        generate_variations(square_logo, analyze_colors(square_logo))
        assert square_logo.data == before
