"""Logo Optimizer – Stability AI Background Removal.

Sends the source logo to the Stability AI remove-background endpoint and
returns the resulting PNG (with alpha) unmodified.
Single attempt, bounded timeout, no retry.
"""

from __future__ import annotations

import threading
from typing import Optional, Protocol

import httpx
import structlog

from app.core.errors import ConfigurationError, UpstreamServiceError
from config.settings import Settings, get_settings

logger = structlog.get_logger()


class BackgroundRemovalService(Protocol):
    """Anything that can strip the background from an encoded image."""

    async def remove_background(self, image_bytes: bytes) -> bytes:
        ...


class StabilityBackgroundRemover:
    """Stability AI client for background removal."""

    def __init__(self, api_key: str, api_url: str, timeout: float = 60.0) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def remove_background(self, image_bytes: bytes) -> bytes:
        """Return ``image_bytes`` with the background removed (PNG).

        Raises:
            ConfigurationError: if no API key is configured (no call is made).
            UpstreamServiceError: on non-2xx responses, transport errors and timeouts.
        """
        if not self._api_key:
            raise ConfigurationError("STABILITY_API_KEY environment variable is not set")

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "image/*",
        }
        files = {"image": ("image.png", image_bytes, "image/png")}
        data = {"output_format": "png"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._api_url, headers=headers, files=files, data=data)
        except httpx.TimeoutException as e:
            logger.error("stability.remove_background.timeout", timeout=self._timeout)
            raise UpstreamServiceError(f"Stability AI request timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            logger.error("stability.remove_background.failed", error=str(e))
            raise UpstreamServiceError(f"Stability AI request failed: {e}") from e

        if not response.is_success:
            body = response.text
            logger.error(
                "stability.remove_background.http_error",
                status=response.status_code,
                body=body[:500],
            )
            raise UpstreamServiceError(
                f"Stability AI error: {response.status_code} - {body}",
                upstream_status=response.status_code,
                body=body,
            )

        logger.info(
            "stability.remove_background.success",
            input_bytes=len(image_bytes),
            output_bytes=len(response.content),
        )
        return response.content


# Singleton management
_remover: Optional[StabilityBackgroundRemover] = None
_lock = threading.Lock()


def get_background_remover(settings: Settings | None = None) -> StabilityBackgroundRemover:
    """Process-wide remover, created once on first use."""
    global _remover
    if _remover is None:
        with _lock:
            if _remover is None:
                settings = settings or get_settings()
                _remover = StabilityBackgroundRemover(
                    api_key=settings.stability_api_key,
                    api_url=settings.stability_api_url,
                    timeout=settings.stability_timeout_seconds,
                )
                logger.info("stability.client_initialized", configured=_remover.is_configured)
    return _remover


def reset_background_remover() -> None:
    """Drop the cached remover so the next call re-reads settings."""
    global _remover
    with _lock:
        _remover = None
