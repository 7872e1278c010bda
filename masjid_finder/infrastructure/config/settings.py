"""Application settings (Pydantic Settings)"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )

    # GCP
    gcp_project_id: Optional[str] = Field(
        default=None,
        description="GCP project ID (Secret Manager and Cloud Logging)",
    )

    # MasjidiAPI (directory source, proxied)
    masjidi_api_url: str = Field(
        default="http://api.masjidiapp.com",
        description="MasjidiAPI base URL; plain HTTP because its TLS setup is unreliable",
    )
    masjidi_api_key: Optional[str] = Field(
        default=None,
        description="MasjidiAPI key sent as x-api-key (development falls back to the test key)",
    )
    masjidi_api_key_secret_name: str = Field(
        default="masjidi-api-key",
        description="Secret Manager name of the MasjidiAPI key",
    )
    masjidi_upstream_timeout: float = Field(
        default=30.0,
        description="Proxy timeout for MasjidiAPI requests (seconds)",
    )

    # Proxy relay
    proxy_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the proxy relay used by the client",
    )
    port: int = Field(
        default=3001,
        description="Proxy relay HTTP port",
    )

    # OpenStreetMap
    overpass_url: str = Field(
        default="https://overpass-api.de/api/interpreter",
        description="Overpass API interpreter endpoint",
    )
    nominatim_url: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Nominatim search endpoint",
    )
    geocode_country: str = Field(
        default="us",
        description="Country restriction for place-name search",
    )
    geocoding_cache_enabled: bool = Field(
        default=True,
        description="Cache place-name search results in memory",
    )
    user_agent: str = Field(
        default="MasjidFinder/1.0 (+https://github.com/masjid-finder)",
        description="User-Agent sent to public OSM services",
    )

    # Aggregation
    directory_timeout: float = Field(
        default=10.0,
        description="Directory leg timeout (seconds)",
    )
    overpass_timeout: float = Field(
        default=15.0,
        description="Overpass leg timeout (seconds)",
    )
    search_radius_km: int = Field(
        default=50,
        description="Directory search radius (km)",
    )
    search_limit: int = Field(
        default=100,
        description="Directory result cap",
    )
    dedup_threshold: float = Field(
        default=0.0001,
        description="Grid size for proximity deduplication (degrees, ~11 m)",
    )
    dedup_policy: str = Field(
        default="prefer_directory",
        description="Deduplication policy (prefer_directory, first_seen)",
    )

    # Map
    default_center_lat: float = Field(default=40.7128, description="Initial latitude (NYC)")
    default_center_lng: float = Field(default=-74.0060, description="Initial longitude (NYC)")
    default_zoom: int = Field(default=12, description="Initial zoom level")
    min_zoom_for_search: int = Field(
        default=9,
        description="Minimum zoom level that triggers a fetch",
    )
    debounce_seconds: float = Field(
        default=1.0,
        description="Quiet period after the last map movement before fetching",
    )
    viewport_width: int = Field(default=1280, description="Viewport width (px)")
    viewport_height: int = Field(default=800, description="Viewport height (px)")

    # Details panel
    prayer_timezone: str = Field(
        default="America/New_York",
        description="Timezone used for the 'today' label of the prayer schedule",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    gcp_logging_enabled: bool = Field(
        default=False,
        description="Enable Google Cloud Logging",
    )

    @property
    def is_production(self) -> bool:
        """Whether this is the production environment"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Whether this is the development environment"""
        return self.environment.lower() == "development"
