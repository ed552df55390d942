"""
Canonical POI model shared by every provider, the marker store and write-back.
"""
import enum
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


class CanonicalType(str, enum.Enum):
    """POI types understood by the remote route store."""
    camping = "camping"
    lodging = "lodging"
    parking = "parking"
    food = "food"
    viewpoint = "viewpoint"
    restroom = "restroom"
    generic = "generic"
    aid_station = "aid_station"
    bar = "bar"
    bike_shop = "bike_shop"
    bike_parking = "bike_parking"
    convenience_store = "convenience_store"
    first_aid = "first_aid"
    hospital = "hospital"
    rest_stop = "rest_stop"
    trailhead = "trailhead"
    geocache = "geocache"
    water = "water"
    control = "control"
    winery = "winery"
    start = "start"
    stop = "stop"
    finish = "finish"
    atm = "atm"
    caution = "caution"
    coffee = "coffee"
    ferry = "ferry"
    gas = "gas"
    library = "library"
    monument = "monument"
    park = "park"
    segment_start = "segment_start"
    segment_end = "segment_end"
    shopping = "shopping"
    shower = "shower"
    summit = "summit"
    swimming = "swimming"
    transit = "transit"
    bikeshare = "bikeshare"


def coerce_type(value: Any) -> CanonicalType:
    """Parse a type name, falling back to generic for anything unknown."""
    if isinstance(value, CanonicalType):
        return value
    if isinstance(value, str):
        try:
            return CanonicalType(value.strip().lower())
        except ValueError:
            pass
    return CanonicalType.generic


@dataclass(frozen=True)
class CanonicalPOI:
    name: str
    lat: float
    lng: float
    provider: str
    type: CanonicalType = CanonicalType.generic
    description: Optional[str] = None
    url: Optional[str] = None
    raw_source_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


def identity_key(poi: CanonicalPOI) -> str:
    """
    Session identity of a POI: name and exact coordinates.

    Two POIs sharing name and coordinates collapse to the same key.
    Coordinates use Python float formatting (40.0, not 40), so keys are not
    interchangeable with keys built by JavaScript clients.
    """
    return f"{poi.name}_{poi.lat}_{poi.lng}"


@dataclass(frozen=True)
class MapBounds:
    north: float
    south: float
    east: float
    west: float

    def center(self) -> Tuple[float, float]:
        return (self.north + self.south) / 2.0, (self.east + self.west) / 2.0


@dataclass(frozen=True)
class RoutingOrigin:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SearchParams:
    text_query: str
    encoded_polyline: Optional[str] = None
    map_bounds: Optional[MapBounds] = None
    routing_origin: Optional[RoutingOrigin] = None


@dataclass
class ProviderContext:
    """What the caller currently has loaded, used to decide provider availability."""
    route_path: Sequence[Sequence[float]] = field(default_factory=list)

    @property
    def has_route(self) -> bool:
        return len(self.route_path) > 0


def pois_to_dicts(pois: List[CanonicalPOI]) -> List[Dict[str, Any]]:
    return [p.to_dict() for p in pois]
