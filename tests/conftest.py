"""Logo Optimizer – Pytest Configuration.

Shared fixtures for all tests.
"""

import io
import os

# Never call the real background-removal service from tests
os.environ["STABILITY_API_KEY"] = ""
os.environ["ENVIRONMENT"] = "testing"

import numpy as np
import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

from app.gateway.dependencies import get_remover
from app.gateway.main import app
from app.imaging.pixels import PixelBuffer


class FakeRemover:
    """Background remover that returns its input (or a canned result) unchanged."""

    def __init__(self, result: bytes | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[bytes] = []

    async def remove_background(self, image_bytes: bytes) -> bytes:
        self.calls.append(image_bytes)
        if self.error is not None:
            raise self.error
        return self.result if self.result is not None else image_bytes


def make_square_buffer(size: int = 100, square: int = 50, rgb: tuple[int, int, int] = (0, 0, 0)) -> PixelBuffer:
    """Transparent ``size``×``size`` canvas with an opaque centered square."""
    arr = np.zeros((size, size, 4), dtype=np.uint8)
    start = (size - square) // 2
    arr[start:start + square, start:start + square, :3] = rgb
    arr[start:start + square, start:start + square, 3] = 255
    return PixelBuffer.from_array(arr)


def to_png(buffer: PixelBuffer) -> bytes:
    out = io.BytesIO()
    buffer.to_image().save(out, format="PNG")
    return out.getvalue()


def decode_png(png: bytes) -> PixelBuffer:
    return PixelBuffer.from_image(Image.open(io.BytesIO(png)))


@pytest.fixture
def square_logo() -> PixelBuffer:
    return make_square_buffer()


@pytest.fixture
def transparent_logo() -> PixelBuffer:
    return PixelBuffer.from_array(np.zeros((40, 30, 4), dtype=np.uint8))


@pytest.fixture
def fake_remover() -> FakeRemover:
    return FakeRemover()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client(fake_remover: FakeRemover):
    """Async test client for the FastAPI gateway, wired to the fake remover."""
    app.dependency_overrides[get_remover] = lambda: fake_remover
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
