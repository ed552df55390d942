"""
Route geometry as delivered by the remote route store.

A route carries an encoded polyline, raw track points, or both. Track points
use the store's axis naming: x = longitude, y = latitude, d = distance from
start (m), e = elevation (m).
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from poi_engine.geometry import polyline

logger = logging.getLogger(__name__)


@dataclass
class TrackPoint:
    x: float  # longitude
    y: float  # latitude
    d: float = 0.0
    e: Optional[float] = None


@dataclass
class ElevationPoint:
    distance_m: float
    elevation_m: float
    lat: float
    lng: float
    index: int


def _finite(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_track_points(raw: Any) -> List[TrackPoint]:
    points: List[TrackPoint] = []
    if not isinstance(raw, list):
        return points
    for item in raw:
        if not isinstance(item, dict):
            continue
        lng = _finite(item.get("x"))
        lat = _finite(item.get("y"))
        if lat is None or lng is None:
            continue
        points.append(TrackPoint(
            x=lng,
            y=lat,
            d=_finite(item.get("d")) or 0.0,
            e=_finite(item.get("e")),
        ))
    return points


@dataclass
class RouteGeometry:
    encoded_polyline: Optional[str] = None
    track_points: List[TrackPoint] = field(default_factory=list)

    @classmethod
    def from_route_payload(cls, route: Dict[str, Any]) -> "RouteGeometry":
        """Build from a route record (the object under the store's "route" key)."""
        return cls(
            encoded_polyline=route.get("encoded_polyline") or None,
            track_points=_parse_track_points(route.get("track_points")),
        )

    def track_coordinates(self) -> List[List[float]]:
        return [[p.y, p.x] for p in self.track_points]

    def coordinates(self) -> List[List[float]]:
        """[lat, lng] pairs, preferring the encoded polyline when present."""
        if self.encoded_polyline:
            return polyline.decode(self.encoded_polyline)
        return self.track_coordinates()

    def ensure_encoded_polyline(self) -> Optional[str]:
        """
        Return the encoded polyline, deriving it from track points if needed.

        The derived value is stored on the instance, so every later consumer
        sees the same string.
        """
        if not self.encoded_polyline and self.track_points:
            self.encoded_polyline = polyline.encode(self.track_coordinates())
            logger.info(
                "geometry.derived_polyline",
                extra={
                    "track_points": len(self.track_points),
                    "polyline_prefix": self.encoded_polyline[:20],
                },
            )
        return self.encoded_polyline

    @property
    def has_route(self) -> bool:
        return bool(self.encoded_polyline or self.track_points)

    def elevation_profile(self) -> List[ElevationPoint]:
        return [
            ElevationPoint(
                distance_m=p.d,
                elevation_m=p.e if p.e is not None else 0.0,
                lat=p.y,
                lng=p.x,
                index=i,
            )
            for i, p in enumerate(self.track_points)
        ]
