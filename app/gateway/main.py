"""Logo Optimizer – HTTP Gateway.

FastAPI app: logo optimizer API, health and metrics endpoints.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.instrumentation import router as metrics_router
from app.core.instrumentation import setup_instrumentation
from app.gateway.routers.logo_optimizer import router as logo_optimizer_router
from app.integrations.stability import get_background_remover
from config.settings import Settings, get_settings

logger = structlog.get_logger()

SERVICE_NAME = "logo-optimizer"
VERSION = "1.0.0"

settings: Settings = get_settings()


def _parse_cors_origins(raw: str) -> list[str]:
    origins = [item.strip() for item in (raw or "").split(",") if item.strip()]
    return origins or ["http://localhost:3000"]


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[type-arg]
    """Application lifespan: initialise shared clients on startup."""
    remover = get_background_remover(settings)
    if not remover.is_configured:
        logger.warning("gateway.stability_key_missing", msg="Background removal will fail until STABILITY_API_KEY is set")
    logger.info("gateway.startup", version=VERSION, env=settings.environment)
    yield
    logger.info("gateway.shutdown")


app = FastAPI(
    title="Logo Optimizer",
    description="Design-asset utilities – logo background removal and dark-mode variants",
    version=VERSION,
    lifespan=lifespan,
)

setup_instrumentation(app, settings.log_level)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_parse_cors_origins(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(metrics_router)
app.include_router(logo_optimizer_router)


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """Health endpoint – returns service status."""
    remover = get_background_remover(settings)
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
        "background_removal": "configured" if remover.is_configured else "missing_key",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.gateway_host, port=settings.gateway_port)
