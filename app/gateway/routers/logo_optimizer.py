import base64
import binascii
import os

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.errors import InvalidImageError, LogoOptimizerError
from app.core.instrumentation import PIPELINE_FAILURES
from app.gateway.dependencies import get_logo_optimizer
from app.gateway.schemas import AnalysisOut, OptimizeLogoRequest, OptimizeLogoResponse, VariationOut
from app.imaging.pipeline import LogoOptimizer

router = APIRouter(prefix="/api", tags=["logo-optimizer"])
logger = structlog.get_logger()

DEFAULT_DOWNLOAD_BASE = "logo"


def decode_image_payload(payload: str) -> bytes:
    """Decode base64 image data, accepting a ``data:...;base64,`` prefix."""
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        return base64.b64decode(payload.strip(), validate=False)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError(f"Invalid base64 image data: {e}") from e


def download_name(file_name: str | None, variant_id: str) -> str:
    base = os.path.splitext(os.path.basename(file_name or ""))[0] or DEFAULT_DOWNLOAD_BASE
    return f"{base}-optimized-{variant_id}.png"


@router.post("/optimize-logo", response_model=OptimizeLogoResponse)
async def optimize_logo(
    payload: OptimizeLogoRequest,
    optimizer: LogoOptimizer = Depends(get_logo_optimizer),
):
    """Remove the background of a logo and return three optimized variants."""
    if not payload.image_base64:
        return JSONResponse(status_code=400, content={"error": "No image provided"})

    try:
        image_bytes = decode_image_payload(payload.image_base64)
        if not image_bytes:
            return JSONResponse(status_code=400, content={"error": "No image provided"})
        result = await optimizer.optimize(image_bytes)
    except LogoOptimizerError as e:
        PIPELINE_FAILURES.labels(error=type(e).__name__).inc()
        logger.error("logo.optimize.failed", error=str(e), error_type=type(e).__name__)
        return JSONResponse(status_code=e.status_code, content={"error": str(e)})
    except Exception as e:
        PIPELINE_FAILURES.labels(error=type(e).__name__).inc()
        logger.error("logo.optimize.unexpected_error", error=str(e), error_type=type(e).__name__)
        return JSONResponse(status_code=500, content={"error": str(e)})

    return OptimizeLogoResponse(
        variations=[
            VariationOut(
                id=v.id,
                label=v.label,
                description=v.description,
                base64=base64.b64encode(v.png).decode("ascii"),
                download_name=download_name(payload.file_name, v.id),
            )
            for v in result.variants
        ],
        analysis=AnalysisOut(**result.analysis.summary()),
    )
