"""
Pydantic schemas for route details and POI write-back.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from poi_engine.places.schemas import POIOut
from poi_engine.places.types import CanonicalPOI, coerce_type


class POIIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    type: str = "generic"
    description: Optional[str] = None
    url: Optional[str] = None
    provider: str = "user"

    def to_poi(self) -> CanonicalPOI:
        return CanonicalPOI(
            name=self.name,
            lat=self.lat,
            lng=self.lng,
            provider=self.provider,
            type=coerce_type(self.type),
            description=self.description,
            url=self.url,
        )


class CommitRequest(BaseModel):
    pois: List[POIIn]


class CommitResponse(BaseModel):
    success: bool
    added_count: int
    total_count: int


class ElevationPointOut(BaseModel):
    distance: float
    elevation: float
    lat: float
    lng: float
    index: int


class RouteDetailsResponse(BaseModel):
    route_id: str
    name: Optional[str] = None
    encoded_polyline: Optional[str] = None
    elevation_data: List[ElevationPointOut]
    existing_pois: List[POIOut]
