"""
OpenStreetMap amenity search through the Overpass API.

The query covers a fixed radius around sampled route points, or the caller's
map bounds when no route is available. textQuery is a comma-separated list
of amenity values ("toilets,drinking_water" or "amenity=fuel").
"""
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from poi_engine.config import get_settings
from poi_engine.errors import InvalidInputError, NoPOIsFound, ProviderError
from poi_engine.geometry import polyline
from poi_engine.geometry.sampler import SamplingPolicy, sample
from poi_engine.places.providers.base import (
    POIProvider,
    first_coordinate,
    post_json,
    text_or_none,
)
from poi_engine.places.type_mapping import map_osm_amenity
from poi_engine.places.types import CanonicalPOI, MapBounds, ProviderContext, SearchParams

logger = logging.getLogger(__name__)
settings = get_settings()

ELEMENT_TYPES = ("node", "way", "relation")
QUERY_TIMEOUT_S = 25
OSM_OBJECT_URL = "https://www.openstreetmap.org/{type}/{id}"

AMENITY_VALUE = re.compile(r"^[a-z0-9_]+$")

# nodes carry lat/lon; ways and relations carry a computed center
COORDINATE_PATHS = (
    (("lat",), ("lon",)),
    (("center", "lat"), ("center", "lon")),
)

NO_RESULTS_MESSAGE = (
    "No matching OpenStreetMap amenities near this route. "
    "Try selecting more amenity types or a longer route."
)


def parse_amenities(text_query: str) -> List[str]:
    """Split a comma-separated amenity list, dropping blanks, dupes and invalid values."""
    amenities: List[str] = []
    for raw in (text_query or "").split(","):
        value = raw.strip().lower()
        if value.startswith("amenity="):
            value = value[len("amenity="):].strip()
        if not value:
            continue
        if not AMENITY_VALUE.match(value):
            logger.warning(f"Ignoring invalid amenity value: {raw!r}")
            continue
        if value not in amenities:
            amenities.append(value)
    return amenities


def humanize_amenity(amenity: str) -> str:
    """'drinking_water' -> 'Drinking water'."""
    text = amenity.replace("_", " ")
    return text[:1].upper() + text[1:]


def _fmt(value: float) -> str:
    return f"{value:.6f}"


def build_overpass_query(
    amenities: Sequence[str],
    points: Optional[Sequence[Sequence[float]]] = None,
    bounds: Optional[MapBounds] = None,
    radius_m: int = 500,
) -> str:
    """
    Build the Overpass QL text.

    One clause per element type and per sampled point (around filter), or one
    per element type over the bounding box when no points are given.
    """
    tag_filter = '["amenity"~"^(' + "|".join(amenities) + ')$"]'
    if points:
        areas = [f"(around:{radius_m},{_fmt(p[0])},{_fmt(p[1])})" for p in points]
    elif bounds is not None:
        areas = [
            f"({_fmt(bounds.south)},{_fmt(bounds.west)},{_fmt(bounds.north)},{_fmt(bounds.east)})"
        ]
    else:
        raise InvalidInputError("Overpass query needs route points or map bounds")

    clauses = [
        f"  {element}{tag_filter}{area};"
        for area in areas
        for element in ELEMENT_TYPES
    ]
    return "\n".join(
        [f"[out:json][timeout:{QUERY_TIMEOUT_S}];", "("]
        + clauses
        + [");", "out center;"]
    )


class OSMNormalizer(POIProvider):
    id = "osm"
    name = "OpenStreetMap"
    description = "Search for cycling-relevant amenities from OpenStreetMap"

    def __init__(self, policy: Optional[SamplingPolicy] = None):
        self.url = settings.overpass_url
        self.timeout = settings.overpass_timeout_seconds
        self.radius_m = settings.overpass_radius_m
        self.policy = policy

    def is_enabled(self, context: Optional[ProviderContext] = None) -> bool:
        return bool(context and context.has_route)

    def build_query(self, params: SearchParams) -> str:
        amenities = parse_amenities(params.text_query)
        if not amenities:
            raise InvalidInputError("OSM provider requires amenity types (textQuery)")
        if not params.encoded_polyline and params.map_bounds is None:
            raise InvalidInputError(
                "OSM provider requires either a route (encodedPolyline) or map bounds"
            )

        points = None
        if params.encoded_polyline:
            points = sample(polyline.decode(params.encoded_polyline), self.policy)
        return build_overpass_query(
            amenities,
            points=points,
            bounds=params.map_bounds,
            radius_m=self.radius_m,
        )

    def search(self, params: SearchParams) -> List[CanonicalPOI]:
        query = self.build_query(params)
        data = post_json(self.id, self.url, self.timeout, data={"data": query})

        if not isinstance(data, dict):
            raise ProviderError(self.id, "unexpected response payload")
        elements = data.get("elements", [])
        if not isinstance(elements, list):
            raise ProviderError(self.id, "'elements' is not a list")
        remark = str(data.get("remark") or "")
        if not elements and "error" in remark.lower():
            # Overpass reports query timeouts as a 200 with a remark
            raise ProviderError(self.id, f"Overpass: {remark}")

        results = []
        for element in elements:
            poi = self.normalize(element)
            if poi is not None:
                results.append(poi)

        logger.info(
            "places.osm.search",
            extra={
                "amenities": parse_amenities(params.text_query),
                "used_route": bool(params.encoded_polyline),
                "raw_count": len(elements),
                "result_count": len(results),
            },
        )
        if not results:
            raise NoPOIsFound(self.id, NO_RESULTS_MESSAGE)
        return results

    def normalize(self, element: Any) -> Optional[CanonicalPOI]:
        coords = first_coordinate(element, COORDINATE_PATHS)
        if coords is None:
            logger.debug(f"Dropping OSM element without coordinates: {str(element)[:200]}")
            return None

        tags: Dict[str, Any] = element.get("tags") or {}
        if not isinstance(tags, dict):
            tags = {}
        amenity = text_or_none(tags.get("amenity")) or "unknown"
        element_type = element.get("type")
        element_id = element.get("id")

        url = text_or_none(tags.get("website"))
        source_id = None
        if element_type and element_id is not None:
            source_id = f"{element_type}/{element_id}"
            url = url or OSM_OBJECT_URL.format(type=element_type, id=element_id)

        return CanonicalPOI(
            name=text_or_none(tags.get("name")) or humanize_amenity(amenity),
            lat=coords[0],
            lng=coords[1],
            provider=self.id,
            type=map_osm_amenity(amenity),
            description=text_or_none(tags.get("description")),
            url=url,
            raw_source_id=source_id,
        )
