"""
Google Places (New) "search along route" provider.

Sends the route's encoded polyline as searchAlongRouteParameters and
normalizes each returned place into a CanonicalPOI.
"""
import logging
from typing import Any, Dict, List, Optional

from poi_engine.config import get_settings
from poi_engine.errors import InvalidInputError, ProviderError
from poi_engine.places.providers.base import (
    POIProvider,
    dig,
    first_coordinate,
    post_json,
    text_or_none,
)
from poi_engine.places.type_mapping import map_google_type
from poi_engine.places.types import CanonicalPOI, ProviderContext, SearchParams

logger = logging.getLogger(__name__)
settings = get_settings()

# (lat path, lng path) pairs, tried in order until one yields two finite numbers
COORDINATE_PATHS = (
    (("location", "latitude"), ("location", "longitude")),
    (("location", "lat"), ("location", "lng")),
    (("location", "latLng", "latitude"), ("location", "latLng", "longitude")),
    (("geometry", "location", "lat"), ("geometry", "location", "lng")),
    (("geometry", "location", "latitude"), ("geometry", "location", "longitude")),
    (("center", "latitude"), ("center", "longitude")),
    (("center", "lat"), ("center", "lng")),
)


class GoogleNormalizer(POIProvider):
    id = "google"
    name = "Google Maps"
    description = "Search for Points of Interest using Google Places API"

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or settings.google_places_api_key
        if not self.api_key:
            logger.warning("GOOGLE_PLACES_API_KEY not set; Google searches will be rejected upstream")
        self.url = settings.google_places_url
        self.field_mask = settings.google_places_field_mask
        self.timeout = settings.google_timeout_seconds

    def is_enabled(self, context: Optional[ProviderContext] = None) -> bool:
        return bool(context and context.has_route)

    def build_request_body(self, params: SearchParams) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "textQuery": params.text_query,
            "searchAlongRouteParameters": {
                "polyline": {"encodedPolyline": params.encoded_polyline},
            },
        }
        if params.routing_origin:
            body["routingParameters"] = {
                "origin": {
                    "latitude": params.routing_origin.latitude,
                    "longitude": params.routing_origin.longitude,
                }
            }
        return body

    def search(self, params: SearchParams) -> List[CanonicalPOI]:
        if not params.text_query or not params.text_query.strip():
            raise InvalidInputError("Google Maps search requires a text query")
        if not params.encoded_polyline:
            raise InvalidInputError("Google Maps provider requires a route (encoded polyline)")

        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": self.field_mask,
        }
        logger.debug(
            "Google search request",
            extra={
                "text_query": params.text_query,
                "polyline_prefix": params.encoded_polyline[:50],
                "has_routing_origin": params.routing_origin is not None,
            },
        )
        data = post_json(
            self.id,
            self.url,
            self.timeout,
            json=self.build_request_body(params),
            headers=headers,
        )
        if not isinstance(data, dict):
            raise ProviderError(self.id, "unexpected response payload")
        places = data.get("places", [])
        if not isinstance(places, list):
            raise ProviderError(self.id, "'places' is not a list")

        results = []
        for place in places:
            poi = self.normalize(place)
            if poi is not None:
                results.append(poi)

        logger.info(
            "places.google.search",
            extra={"raw_count": len(places), "result_count": len(results)},
        )
        return results

    def normalize(self, place: Any) -> Optional[CanonicalPOI]:
        """Convert one raw place; None if it has no usable coordinates."""
        coords = first_coordinate(place, COORDINATE_PATHS)
        if coords is None:
            logger.debug(f"Dropping Google place without coordinates: {str(place)[:200]}")
            return None

        name = (
            text_or_none(dig(place, ("displayName", "text")))
            or text_or_none(place.get("name"))
            or ""
        )

        return CanonicalPOI(
            name=name,
            lat=coords[0],
            lng=coords[1],
            provider=self.id,
            type=map_google_type(place.get("primaryType")),
            description=text_or_none(dig(place, ("editorialSummary", "text"))),
            url=text_or_none(place.get("googleMapsUri")),
            raw_source_id=text_or_none(place.get("id")),
        )
