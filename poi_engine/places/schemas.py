"""
Pydantic schemas for the POI search API.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from poi_engine.places.type_mapping import type_label
from poi_engine.places.types import CanonicalPOI, MapBounds, RoutingOrigin, SearchParams, identity_key


class MapBoundsIn(BaseModel):
    north: float = Field(..., ge=-90, le=90)
    south: float = Field(..., ge=-90, le=90)
    east: float = Field(..., ge=-180, le=180)
    west: float = Field(..., ge=-180, le=180)


class RoutingOriginIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class SearchRequest(BaseModel):
    text_query: str = Field("", alias="textQuery", max_length=2000)
    encoded_polyline: Optional[str] = Field(None, alias="encodedPolyline")
    map_bounds: Optional[MapBoundsIn] = Field(None, alias="mapBounds")
    routing_origin: Optional[RoutingOriginIn] = Field(None, alias="routingOrigin")

    class Config:
        populate_by_name = True

    def to_params(self) -> SearchParams:
        return SearchParams(
            text_query=self.text_query,
            encoded_polyline=self.encoded_polyline or None,
            map_bounds=MapBounds(**self.map_bounds.model_dump()) if self.map_bounds else None,
            routing_origin=(
                RoutingOrigin(**self.routing_origin.model_dump()) if self.routing_origin else None
            ),
        )


class POIOut(BaseModel):
    key: str
    name: str
    lat: float
    lng: float
    type: str
    type_label: str
    description: Optional[str] = None
    url: Optional[str] = None
    provider: str
    raw_source_id: Optional[str] = None

    @classmethod
    def from_poi(cls, poi: CanonicalPOI) -> "POIOut":
        return cls(key=identity_key(poi), type_label=type_label(poi.type), **poi.to_dict())


class SearchResponse(BaseModel):
    status: str
    provider: str
    pois: List[POIOut]
    message: Optional[str] = None


class ProviderInfo(BaseModel):
    id: str
    name: str
    description: str
    enabled: bool
