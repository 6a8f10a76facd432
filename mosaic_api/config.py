"""
Application configuration using Pydantic settings.
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Overlap Grouping
    overlap_threshold_degrees: float = Field(
        default=0.0002,
        description="Maximum planar distance in degrees for two images to overlap (~22 m at the equator)"
    )
    max_overlap_threshold_degrees: float = Field(
        default=1.0,
        description="Upper bound accepted for per-request overlap thresholds"
    )

    # Density Classification (images per km²)
    density_threshold_low: float = Field(
        default=10.0,
        description="Densities below this are classified as low"
    )
    density_threshold_medium: float = Field(
        default=30.0,
        description="Densities below this (and above low) are classified as medium"
    )
    density_threshold_high: float = Field(
        default=100.0,
        description="Densities at or above this are classified as very high"
    )

    # Input Limits
    max_points: int = Field(
        default=5000,
        description="Maximum number of points accepted by a single analysis request"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    # CORS Configuration
    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins (use specific origins in production)"
    )

    # Rate Limiting
    rate_limit_requests: int = Field(
        default=100,
        description="Maximum requests per minute per client"
    )

    # Application Settings
    app_name: str = Field(
        default="Mosaic Suitability Analysis API",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Debug mode"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
