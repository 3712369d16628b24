"""Logo Optimizer – API Schemas.

Request/response models for the optimize-logo endpoint. Field aliases
keep the camelCase wire format the upload page expects.
"""

from pydantic import BaseModel, ConfigDict, Field


class OptimizeLogoRequest(BaseModel):
    """Inbound logo upload."""

    model_config = ConfigDict(populate_by_name=True)

    image_base64: str | None = Field(
        default=None,
        alias="imageBase64",
        description="Base64 image, optionally as a data: URL",
    )
    file_name: str | None = Field(
        default=None,
        alias="fileName",
        description="Original file name, used for download names",
    )


class VariationOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    description: str
    base64: str
    download_name: str = Field(..., alias="downloadName")


class AnalysisOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    avg_luminance: str = Field(..., alias="avgLuminance", description="Formatted to 2 decimals")
    is_predominantly_dark: bool = Field(..., alias="isPredominantlyDark")
    is_predominantly_light: bool = Field(..., alias="isPredominantlyLight")


class OptimizeLogoResponse(BaseModel):
    success: bool = True
    variations: list[VariationOut]
    analysis: AnalysisOut
