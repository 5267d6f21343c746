"""
Application configuration using Pydantic settings.
"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Sheet Store Configuration
    store_url: str = Field(
        default="https://script.google.com/macros/s/example/exec",
        description="Web app URL of the spreadsheet-backed record store"
    )
    store_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for store requests"
    )
    store_timezone: str = Field(
        default="Asia/Bangkok",
        description="Timezone of the store spreadsheet, used to read date cells"
    )
    growth_collection: str = Field(
        default="growth_logs",
        description="Sheet name holding growth observations"
    )
    spatial_collection: str = Field(
        default="trees_profile",
        description="Sheet name holding tree coordinate placements"
    )

    # Retry Configuration (reads only)
    max_retry_attempts: int = Field(
        default=3,
        description="Maximum number of attempts for store reads"
    )
    retry_backoff_multiplier: int = Field(
        default=1,
        description="Multiplier for exponential backoff"
    )
    retry_min_wait: int = Field(
        default=4,
        description="Minimum wait time in seconds between retries"
    )
    retry_max_wait: int = Field(
        default=10,
        description="Maximum wait time in seconds between retries"
    )

    # Projection
    utm_zone: int = Field(
        default=47,
        description="UTM zone of the recorded easting/northing values"
    )
    utm_hemisphere: str = Field(
        default="N",
        description="UTM hemisphere, N or S"
    )
    map_default_lat: float = Field(
        default=18.49,
        description="Map center latitude used when no coordinates are loaded"
    )
    map_default_lng: float = Field(
        default=98.38,
        description="Map center longitude used when no coordinates are loaded"
    )

    # Reporting
    join_policy: str = Field(
        default="latest",
        description="Which observation represents a tree: 'latest' or 'first_loaded'"
    )
    top_species_limit: int = Field(
        default=10,
        description="Number of entries kept in the species breakdown"
    )
    catalog_path: Optional[str] = Field(
        default=None,
        description="Optional JSON file replacing the built-in species/plot catalogs"
    )
    sync_on_startup: bool = Field(
        default=True,
        description="Load both collections from the store when the app starts"
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
        default="Tree Survey Records Service",
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
