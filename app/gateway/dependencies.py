"""Shared dependencies for the Gateway routers.

Centralizes settings and client singletons so routers stay thin.
"""

from fastapi import Depends

from app.imaging.pipeline import LogoOptimizer
from app.integrations.stability import BackgroundRemovalService, get_background_remover
from config.settings import get_settings

settings = get_settings()


def get_remover() -> BackgroundRemovalService:
    return get_background_remover(settings)


def get_logo_optimizer(remover: BackgroundRemovalService = Depends(get_remover)) -> LogoOptimizer:
    return LogoOptimizer(remover, max_pixels=settings.max_image_pixels)
