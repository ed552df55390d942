"""
Remote route store client abstraction.

The remote store (RideWithGPS API v1) owns the route and its
points_of_interest array. It offers whole-record reads and a write that
replaces the POI array; there is no conditional/versioned update.
"""
import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from poi_engine.config import get_settings
from poi_engine.errors import RouteStoreError
from poi_engine.places.types import CanonicalPOI, coerce_type

logger = logging.getLogger(__name__)
settings = get_settings()

EXISTING_PROVIDER = "existing"


class RouteStoreClient:
    """Abstract interface for reading and writing routes."""

    def fetch_route(self, route_id: str) -> Dict[str, Any]:
        """Return the route record (the object under the response's "route" key)."""
        raise NotImplementedError

    def replace_points_of_interest(self, route_id: str, pois: List[Dict[str, Any]]) -> None:
        """Replace the route's whole POI array with pois."""
        raise NotImplementedError


class RideWithGPSClient(RouteStoreClient):
    """RideWithGPS API v1 client using HTTP requests."""

    def __init__(
        self,
        auth_token: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.auth_token = auth_token or settings.route_store_auth_token
        self.api_key = api_key or settings.route_store_api_key
        self.base_url = (base_url or settings.route_store_base_url).rstrip("/")
        if not self.auth_token:
            logger.warning("ROUTE_STORE_AUTH_TOKEN not set; route store calls will fail")
        self.timeout = settings.route_store_timeout_seconds

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.auth_token}",
        }
        if self.api_key:
            headers["x-rwgps-api-key"] = self.api_key
        return headers

    def _route_url(self, route_id: str) -> str:
        return f"{self.base_url}/routes/{route_id}.json"

    def fetch_route(self, route_id: str) -> Dict[str, Any]:
        try:
            resp = httpx.get(self._route_url(route_id), headers=self._headers(), timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Route store fetch HTTP error: {status} for route {route_id}")
            raise RouteStoreError(route_id, f"fetch returned {status}", status_code=status)
        except httpx.HTTPError as e:
            logger.error(f"Route store fetch error for route {route_id}: {e}")
            raise RouteStoreError(route_id, f"fetch failed: {e}")
        except ValueError:
            raise RouteStoreError(route_id, "fetch returned a non-JSON body")

        if not isinstance(data, dict):
            raise RouteStoreError(route_id, "unexpected route payload")
        route = data.get("route", data)
        if not isinstance(route, dict):
            raise RouteStoreError(route_id, "unexpected route payload")
        return route

    def replace_points_of_interest(self, route_id: str, pois: List[Dict[str, Any]]) -> None:
        body = {"route": {"points_of_interest": pois}}
        try:
            resp = httpx.put(
                self._route_url(route_id),
                json=body,
                headers={**self._headers(), "Content-Type": "application/json"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(
                f"Route store write HTTP error: {status} for route {route_id} "
                f"snippet={e.response.text[:500]}"
            )
            raise RouteStoreError(route_id, f"write returned {status}", status_code=status)
        except httpx.HTTPError as e:
            logger.error(f"Route store write error for route {route_id}: {e}")
            raise RouteStoreError(route_id, f"write failed: {e}")


def route_points_of_interest(route: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    The route's POI records, exactly as the store returned them.

    A missing or null list is empty; any other non-list value raises
    RouteStoreError.
    """
    pois = route.get("points_of_interest")
    if pois is None:
        return []
    if not isinstance(pois, list):
        raise RouteStoreError(
            str(route.get("id", "?")),
            f"points_of_interest is {type(pois).__name__}, expected a list",
        )
    return list(pois)


def parse_route_pois(route: Dict[str, Any]) -> List[CanonicalPOI]:
    """Canonical view of the POIs already on a route; records without coordinates are skipped."""
    results = []
    for record in route_points_of_interest(route):
        if not isinstance(record, dict):
            continue
        try:
            lat = float(record.get("lat"))
            lng = float(record.get("lng"))
        except (TypeError, ValueError):
            continue
        if not (math.isfinite(lat) and math.isfinite(lng)):
            continue
        record_id = record.get("id")
        results.append(CanonicalPOI(
            name=record.get("name") or "Unnamed POI",
            lat=lat,
            lng=lng,
            provider=EXISTING_PROVIDER,
            type=coerce_type(record.get("poi_type_name")),
            description=record.get("description") or None,
            url=record.get("url") or None,
            raw_source_id=str(record_id) if record_id is not None else None,
        ))
    return results


# Singleton
_client: Optional[RouteStoreClient] = None


def get_route_store_client() -> RouteStoreClient:
    """Get or create the route store client singleton."""
    global _client
    if _client is None:
        _client = RideWithGPSClient()
    return _client
