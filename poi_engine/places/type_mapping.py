"""
Static category tables: provider categories -> canonical type -> store type id.

Google Places types: https://developers.google.com/maps/documentation/places/web-service/place-types
OSM amenity values: https://wiki.openstreetmap.org/wiki/Key:amenity

All lookups are case-insensitive and total: anything unmapped is generic.
"""
from types import MappingProxyType
from typing import Any, Mapping, Optional

from poi_engine.places.types import CanonicalType as T

GOOGLE_TYPE_TO_CANONICAL: Mapping[str, T] = MappingProxyType({
    # Food & drink
    "restaurant": T.food,
    "meal_takeaway": T.food,
    "meal_delivery": T.food,
    "food": T.food,
    "bakery": T.food,
    "bar": T.bar,
    "night_club": T.bar,
    "brewery": T.bar,
    "cafe": T.coffee,
    "coffee_shop": T.coffee,
    "winery": T.winery,
    # Lodging & camping
    "lodging": T.lodging,
    "hotel": T.lodging,
    "motel": T.lodging,
    "guest_house": T.lodging,
    "hostel": T.lodging,
    "bed_and_breakfast": T.lodging,
    "campground": T.camping,
    "rv_park": T.camping,
    # Transport & parking
    "parking": T.parking,
    "gas_station": T.gas,
    "petrol_station": T.gas,
    "ferry_terminal": T.ferry,
    "airport": T.transit,
    "train_station": T.transit,
    "subway_station": T.transit,
    "bus_station": T.transit,
    "transit_station": T.transit,
    "taxi_stand": T.transit,
    # Health & safety
    "hospital": T.hospital,
    "pharmacy": T.first_aid,
    "doctor": T.first_aid,
    "dentist": T.first_aid,
    "veterinary_care": T.first_aid,
    "fire_station": T.first_aid,
    "police": T.first_aid,
    # Shopping & services
    "convenience_store": T.convenience_store,
    "supermarket": T.convenience_store,
    "grocery_store": T.convenience_store,
    "shopping_mall": T.shopping,
    "department_store": T.shopping,
    "clothing_store": T.shopping,
    "store": T.shopping,
    "furniture_store": T.shopping,
    "hardware_store": T.shopping,
    "home_goods_store": T.shopping,
    "florist": T.shopping,
    "electronics_store": T.shopping,
    "computer_store": T.shopping,
    "cell_phone_store": T.shopping,
    "atm": T.atm,
    "bank": T.atm,
    "library": T.library,
    # Recreation & tourism
    "tourist_attraction": T.viewpoint,
    "amusement_park": T.viewpoint,
    "zoo": T.viewpoint,
    "aquarium": T.viewpoint,
    "museum": T.viewpoint,
    "art_gallery": T.viewpoint,
    "natural_feature": T.viewpoint,
    "scenic_lookout": T.viewpoint,
    "park": T.park,
    "national_park": T.park,
    "hiking_area": T.trailhead,
    "mountain_peak": T.summit,
    "bicycle_store": T.bike_shop,
    "gym": T.rest_stop,
    "spa": T.shower,
    "swimming_pool": T.swimming,
    "water_park": T.swimming,
    "restroom": T.restroom,
    "public_restroom": T.restroom,
    # Religious & cultural
    "church": T.monument,
    "mosque": T.monument,
    "synagogue": T.monument,
    "temple": T.monument,
    "cemetery": T.monument,
    "landmark": T.monument,
    "memorial": T.monument,
})

OSM_TAG_TO_CANONICAL: Mapping[str, T] = MappingProxyType({
    # Cycling essentials
    "amenity=toilets": T.restroom,
    "amenity=drinking_water": T.water,
    "amenity=water_point": T.water,
    "amenity=fountain": T.water,
    "amenity=watering_place": T.water,
    "amenity=shelter": T.rest_stop,
    "amenity=bench": T.rest_stop,
    "amenity=bbq": T.rest_stop,
    "amenity=picnic_table": T.rest_stop,
    "amenity=community_centre": T.rest_stop,
    "amenity=social_facility": T.rest_stop,
    "amenity=shower": T.shower,
    "amenity=bicycle_parking": T.bike_parking,
    "amenity=bicycle_repair_station": T.bike_shop,
    "amenity=compressed_air": T.bike_shop,
    "amenity=bicycle_rental": T.bikeshare,
    # Food & drink
    "amenity=restaurant": T.food,
    "amenity=fast_food": T.food,
    "amenity=food_court": T.food,
    "amenity=ice_cream": T.food,
    "amenity=cafe": T.coffee,
    "amenity=bar": T.bar,
    "amenity=pub": T.bar,
    "amenity=biergarten": T.bar,
    # Fuel, parking, transport
    "amenity=fuel": T.gas,
    "amenity=parking": T.parking,
    "amenity=parking_space": T.parking,
    "amenity=bus_station": T.transit,
    "amenity=taxi": T.transit,
    "amenity=ferry_terminal": T.ferry,
    # Health & safety
    "amenity=pharmacy": T.first_aid,
    "amenity=doctors": T.first_aid,
    "amenity=dentist": T.first_aid,
    "amenity=veterinary": T.first_aid,
    "amenity=police": T.first_aid,
    "amenity=fire_station": T.first_aid,
    "amenity=ranger_station": T.first_aid,
    "amenity=emergency_phone": T.first_aid,
    "amenity=hospital": T.hospital,
    "amenity=clinic": T.hospital,
    # Shopping & money
    "amenity=vending_machine": T.convenience_store,
    "amenity=marketplace": T.convenience_store,
    "amenity=atm": T.atm,
    "amenity=bank": T.atm,
    "amenity=bureau_de_change": T.atm,
    "amenity=library": T.library,
    "amenity=public_bookcase": T.library,
    "amenity=place_of_worship": T.monument,
})

CANONICAL_TYPE_TO_EXTERNAL_ID: Mapping[T, int] = MappingProxyType({
    T.camping: 3,
    T.lodging: 10,
    T.parking: 12,
    T.food: 13,
    T.viewpoint: 14,
    T.restroom: 15,
    T.generic: 17,
    T.aid_station: 20,
    T.bar: 21,
    T.bike_shop: 22,
    T.bike_parking: 23,
    T.convenience_store: 24,
    T.first_aid: 25,
    T.hospital: 26,
    T.rest_stop: 27,
    T.trailhead: 28,
    T.geocache: 29,
    T.water: 30,
    T.control: 31,
    T.winery: 32,
    T.start: 33,
    T.stop: 34,
    T.finish: 35,
    T.atm: 36,
    T.caution: 37,
    T.coffee: 38,
    T.ferry: 39,
    T.gas: 40,
    T.library: 41,
    T.monument: 42,
    T.park: 43,
    T.segment_start: 44,
    T.segment_end: 45,
    T.shopping: 46,
    T.shower: 47,
    T.summit: 48,
    T.swimming: 49,
    T.transit: 50,
    T.bikeshare: 51,
})

CANONICAL_TYPE_LABELS: Mapping[T, str] = MappingProxyType({
    T.camping: "Camping",
    T.lodging: "Lodging",
    T.parking: "Parking",
    T.food: "Food",
    T.viewpoint: "Viewpoint",
    T.restroom: "Restroom",
    T.generic: "Generic",
    T.aid_station: "Aid Station",
    T.bar: "Bar",
    T.bike_shop: "Bike Shop",
    T.bike_parking: "Bike Parking",
    T.convenience_store: "Convenience Store",
    T.first_aid: "First Aid",
    T.hospital: "Hospital",
    T.rest_stop: "Rest Stop",
    T.trailhead: "Trailhead",
    T.geocache: "Geocache",
    T.water: "Water",
    T.control: "Control",
    T.winery: "Winery",
    T.start: "Start",
    T.stop: "Stop",
    T.finish: "Finish",
    T.atm: "ATM",
    T.caution: "Caution",
    T.coffee: "Coffee",
    T.ferry: "Ferry",
    T.gas: "Gas Station",
    T.library: "Library",
    T.monument: "Monument",
    T.park: "Park",
    T.segment_start: "Segment Start",
    T.segment_end: "Segment End",
    T.shopping: "Shopping",
    T.shower: "Shower",
    T.summit: "Summit",
    T.swimming: "Swimming",
    T.transit: "Transit Center",
    T.bikeshare: "Bike Share",
})


def _normalize(key: Any) -> str:
    if not isinstance(key, str):
        return ""
    return key.strip().lower()


def map_google_type(primary_type: Optional[str]) -> T:
    """Google Places primaryType -> canonical type."""
    return GOOGLE_TYPE_TO_CANONICAL.get(_normalize(primary_type), T.generic)


def map_osm_tag(tag: Optional[str]) -> T:
    """OSM "key=value" tag -> canonical type."""
    normalized = _normalize(tag)
    if "=" in normalized:
        key, _, value = normalized.partition("=")
        normalized = f"{key.strip()}={value.strip()}"
    return OSM_TAG_TO_CANONICAL.get(normalized, T.generic)


def map_osm_amenity(amenity: Optional[str]) -> T:
    return map_osm_tag(f"amenity={_normalize(amenity)}")


def external_type_id(canonical: Optional[T]) -> int:
    """Canonical type -> numeric type id used by the remote route store."""
    return CANONICAL_TYPE_TO_EXTERNAL_ID.get(canonical, CANONICAL_TYPE_TO_EXTERNAL_ID[T.generic])


def type_label(canonical: Optional[T]) -> str:
    return CANONICAL_TYPE_LABELS.get(canonical, CANONICAL_TYPE_LABELS[T.generic])
