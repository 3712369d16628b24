"""Error taxonomy for the logo optimizer pipeline.

Every failure that can leave the pipeline is one of these. The request
boundary renders them as ``{"error": str(exc)}`` with ``status_code``.
"""

from __future__ import annotations


class LogoOptimizerError(Exception):
    """Base class for all pipeline failures."""

    status_code: int = 500


class ConfigurationError(LogoOptimizerError):
    """A required external-service credential is missing."""


class UpstreamServiceError(LogoOptimizerError):
    """The background-removal service failed or could not be reached."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class InvalidImageError(LogoOptimizerError):
    """Input is not a decodable image, or trimming/decoding failed."""


class ProcessingError(LogoOptimizerError):
    """Unexpected failure during analysis, outline, lightening or compositing."""
