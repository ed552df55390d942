"""
Write accepted POIs back to the remote route.

Fetch-modify-write: the remote POI list is re-read at commit time, the
accepted POIs are appended after it, and the whole list is written back in
one request. Anything another actor added since the session loaded the route
is therefore kept.

There is still a window between the re-read and the write in which another
writer can be lost; the store has no versioned update to close it.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from poi_engine.errors import InvalidInputError, RouteStoreError, WriteBackError
from poi_engine.places.type_mapping import external_type_id
from poi_engine.places.types import CanonicalPOI
from poi_engine.reconcile.client import RouteStoreClient, route_points_of_interest

logger = logging.getLogger(__name__)


@dataclass
class CommitResult:
    added_count: int
    total_count: int
    success: bool = True


def to_remote_record(poi: CanonicalPOI, owner_id: Optional[Any]) -> Dict[str, Any]:
    """CanonicalPOI -> the store's POI wire shape."""
    return {
        "lat": poi.lat,
        "lng": poi.lng,
        "name": poi.name,
        "description": poi.description or "",
        "url": poi.url or "",
        "poi_type": external_type_id(poi.type),
        "poi_type_name": poi.type.value,
        "user_id": owner_id,
    }


class ReconciliationWriter:
    def __init__(self, route_store: RouteStoreClient):
        self.route_store = route_store

    def commit(self, route_id: str, accepted_pois: Sequence[CanonicalPOI]) -> CommitResult:
        """
        Append accepted_pois to the route's current POI list.

        Raises:
            InvalidInputError: If there is nothing to add.
            WriteBackError: If the re-fetch or the write fails. A failed
                re-fetch means nothing was written.
        """
        if not accepted_pois:
            raise InvalidInputError("No new POIs selected")

        try:
            route = self.route_store.fetch_route(route_id)
            remote: List[Dict[str, Any]] = route_points_of_interest(route)
        except RouteStoreError as e:
            raise WriteBackError(route_id, "fetch", e) from e

        owner_id = route.get("user_id")
        additions = [to_remote_record(poi, owner_id) for poi in accepted_pois]
        merged = remote + additions

        try:
            self.route_store.replace_points_of_interest(route_id, merged)
        except RouteStoreError as e:
            raise WriteBackError(route_id, "write", e) from e

        logger.info(
            "reconcile.commit",
            extra={
                "route_id": route_id,
                "remote_count": len(remote),
                "added_count": len(additions),
                "total_count": len(merged),
            },
        )
        return CommitResult(added_count=len(additions), total_count=len(merged))
