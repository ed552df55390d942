"""
Configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Authentication
    api_key: str = "dev-api-key-change-me"

    # Providers offered to clients (comma-separated ids)
    enabled_providers: str = "google,osm,mock"

    # Google Places (New) search along route
    google_places_api_key: str = ""
    google_places_url: str = "https://places.googleapis.com/v1/places:searchText"
    google_places_field_mask: str = (
        "places.id,places.displayName,places.googleMapsUri,places.location,"
        "places.primaryType,places.editorialSummary"
    )
    google_timeout_seconds: float = 25.0

    # OpenStreetMap via Overpass
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout_seconds: float = 30.0
    overpass_radius_m: int = 500

    # Remote route store (RideWithGPS API)
    route_store_base_url: str = "https://ridewithgps.com/api/v1"
    route_store_api_key: str = ""
    route_store_auth_token: str = ""
    route_store_timeout_seconds: float = 20.0

    # Route sampling policy for spatial queries
    sampler_min_points: int = 100
    sampler_ratio: float = 0.25
    sampler_min_samples: int = 5

    # Mock provider fallback centre (continental US)
    mock_default_lat: float = 39.5
    mock_default_lng: float = -98.35

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def enabled_provider_ids(self) -> List[str]:
        return [p.strip().lower() for p in self.enabled_providers.split(",") if p.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
