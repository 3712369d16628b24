"""Logo Optimizer – Application Configuration.

Pydantic Settings, loaded from .env file or environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Gateway ---
    environment: str = "development"
    log_level: str = "info"
    gateway_host: str = "0.0.0.0"
    gateway_port: int = 8000
    cors_allowed_origins: str = "http://localhost:3000"

    # --- Stability AI (background removal) ---
    stability_api_key: str = ""
    stability_api_url: str = "https://api.stability.ai/v2beta/stable-image/edit/remove-background"
    stability_timeout_seconds: float = 60.0

    # --- Imaging ---
    # Dilation cost grows with pixel count; larger inputs are rejected.
    max_image_pixels: int = 4_000_000


def get_settings() -> Settings:
    """Factory function for settings singleton."""
    return Settings()
