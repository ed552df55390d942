"""
Demo provider: one pin at the centre of the visible map.

Makes no network calls; useful for demos and for exercising the marker
lifecycle without API keys.
"""
import logging
from typing import List, Optional

from poi_engine.config import get_settings
from poi_engine.errors import InvalidInputError
from poi_engine.places.providers.base import POIProvider
from poi_engine.places.types import CanonicalPOI, CanonicalType, ProviderContext, SearchParams

logger = logging.getLogger(__name__)
settings = get_settings()


class MockNormalizer(POIProvider):
    id = "mock"
    name = "Mock Provider"
    description = "Demo provider that returns a pin at the center of the viewport"

    def __init__(self, default_lat: Optional[float] = None, default_lng: Optional[float] = None):
        self.default_lat = settings.mock_default_lat if default_lat is None else default_lat
        self.default_lng = settings.mock_default_lng if default_lng is None else default_lng

    def is_enabled(self, context: Optional[ProviderContext] = None) -> bool:
        return True

    def search(self, params: SearchParams) -> List[CanonicalPOI]:
        query = (params.text_query or "").strip()
        if not query:
            raise InvalidInputError("Enter a search term")

        if params.map_bounds is not None:
            lat, lng = params.map_bounds.center()
        else:
            lat, lng = self.default_lat, self.default_lng

        return [CanonicalPOI(
            name=f"{query} (mock)",
            lat=lat,
            lng=lng,
            provider=self.id,
            type=CanonicalType.generic,
            description=f"Mock result for '{query}'",
        )]
