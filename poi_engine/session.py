"""
Route editing session: one route, its markers, and the searches run on it.

A session is created by the caller for one editing pass over one route and
discarded afterwards; nothing in it is shared between sessions.
"""
import dataclasses
import logging
from typing import Any, Dict, List, Optional

from poi_engine.errors import InvalidInputError, InvalidTransitionError, RouteStoreError
from poi_engine.geometry.route import RouteGeometry
from poi_engine.markers.store import MarkerState, MarkerStateStore
from poi_engine.places.providers.base import POIProvider
from poi_engine.places.providers.registry import ProviderRegistry
from poi_engine.places.service import SearchOutcome, SearchStatus, search_with_registry
from poi_engine.places.types import (
    CanonicalPOI,
    CanonicalType,
    ProviderContext,
    SearchParams,
    coerce_type,
    identity_key,
)
from poi_engine.reconcile.client import RouteStoreClient, parse_route_pois
from poi_engine.reconcile.writer import CommitResult, ReconciliationWriter

logger = logging.getLogger(__name__)

USER_PROVIDER = "user"


class RouteEditingSession:
    def __init__(
        self,
        route_id: str,
        route_store: RouteStoreClient,
        registry: ProviderRegistry,
    ):
        self.route_id = route_id
        self.route_store = route_store
        self.registry = registry
        self.markers = MarkerStateStore()
        self.route: Dict[str, Any] = {}
        self.geometry = RouteGeometry()

    def load(self) -> None:
        """(Re)load the route and mark its current POIs as existing."""
        self.route = self.route_store.fetch_route(self.route_id)
        self.geometry = RouteGeometry.from_route_payload(self.route)
        self.geometry.ensure_encoded_polyline()
        existing = parse_route_pois(self.route)
        added = self.markers.replace_existing(existing)
        logger.info(
            "session.load",
            extra={
                "route_id": self.route_id,
                "has_polyline": bool(self.geometry.encoded_polyline),
                "existing_pois": len(existing),
                "existing_added": len(added),
            },
        )

    @property
    def context(self) -> ProviderContext:
        return ProviderContext(route_path=self.geometry.coordinates())

    def available_providers(self) -> List[POIProvider]:
        return self.registry.enabled(self.context)

    def search(self, provider_id: str, params: SearchParams) -> SearchOutcome:
        """
        Search with one provider and show its results as suggestions.

        Previous suggestions are cleared only once the new search has
        succeeded; a failed search leaves the markers untouched.
        """
        if not params.encoded_polyline and self.geometry.encoded_polyline:
            params = dataclasses.replace(params, encoded_polyline=self.geometry.encoded_polyline)

        outcome = search_with_registry(self.registry, provider_id, params)
        self.markers.clear_suggested()
        if outcome.status == SearchStatus.ok:
            self.markers.ingest(outcome.pois)
        return outcome

    def keep(self, key: str) -> MarkerState:
        return self.markers.transition(key, MarkerState.selected)

    def remove(self, key: str) -> MarkerState:
        return self.markers.transition(key, MarkerState.suggested)

    def discard(self, key: str) -> MarkerState:
        return self.markers.transition(key, MarkerState.discarded)

    def add_custom_poi(
        self,
        name: str,
        lat: float,
        lng: float,
        type: Optional[CanonicalType] = None,
        description: Optional[str] = None,
        url: Optional[str] = None,
    ) -> str:
        """Add a user-typed POI as a suggestion; returns its identity key."""
        if not name or not name.strip():
            raise InvalidInputError("A POI needs a name")
        poi = CanonicalPOI(
            name=name.strip(),
            lat=lat,
            lng=lng,
            provider=USER_PROVIDER,
            type=coerce_type(type),
            description=description,
            url=url,
        )
        self.markers.ingest([poi])
        return identity_key(poi)

    def edit_poi(self, key: str, **changes: Any) -> str:
        """
        Replace a POI with an edited copy, keeping its marker state.

        Only name, type, description and url may change. Returns the new
        identity key, which differs from key when the name changes.
        """
        allowed = {"name", "type", "description", "url"}
        unexpected = set(changes) - allowed
        if unexpected:
            raise InvalidInputError(f"Cannot edit POI fields: {sorted(unexpected)}")

        state = self.markers.get(key)
        if state is None:
            raise KeyError(key)
        if state != MarkerState.suggested and state != MarkerState.selected:
            raise InvalidTransitionError(f"Cannot edit a POI in state {state.value}")

        if "type" in changes:
            changes["type"] = coerce_type(changes["type"])
        edited = dataclasses.replace(self.markers.get_poi(key), **changes)
        new_key = identity_key(edited)
        if new_key != key and new_key in self.markers:
            raise InvalidInputError("Another POI already has this name and position")

        self.markers.remove(key)
        self.markers.ingest([edited])
        if state == MarkerState.selected:
            self.markers.transition(new_key, MarkerState.selected)
        return new_key

    def selected_pois(self) -> List[CanonicalPOI]:
        return self.markers.pois_in(MarkerState.selected)

    def commit(self, writer: Optional[ReconciliationWriter] = None) -> CommitResult:
        """Write the selected POIs to the route, then reload it."""
        writer = writer or ReconciliationWriter(self.route_store)
        result = writer.commit(self.route_id, self.selected_pois())
        # committed POIs come back as existing on reload
        self.markers.clear()
        try:
            self.load()
        except RouteStoreError as e:
            logger.warning(f"Commit to route {self.route_id} succeeded but reload failed: {e}")
        return result

    def clear(self) -> None:
        self.markers.clear()
