"""
Tests for RouteEditingSession: load, search, marker edits and commit.
"""
import copy
from typing import List, Optional

import pytest

from poi_engine.errors import (
    InvalidInputError,
    InvalidTransitionError,
    NoPOIsFound,
    ProviderError,
    UnknownProviderError,
)
from poi_engine.geometry.polyline import decode
from poi_engine.markers.store import MarkerState
from poi_engine.places.providers.base import POIProvider
from poi_engine.places.providers.registry import ProviderRegistry
from poi_engine.places.service import SearchStatus
from poi_engine.places.types import CanonicalPOI, CanonicalType, ProviderContext, SearchParams
from poi_engine.reconcile.client import RouteStoreClient
from poi_engine.session import RouteEditingSession


# ---- Lightweight stubs ----

class FakeRouteStore(RouteStoreClient):
    def __init__(self, route):
        self.route = copy.deepcopy(route)
        self.writes = []

    def fetch_route(self, route_id):
        return copy.deepcopy(self.route)

    def replace_points_of_interest(self, route_id, pois):
        self.writes.append(copy.deepcopy(pois))
        self.route["points_of_interest"] = copy.deepcopy(pois)


class StubProvider(POIProvider):
    """Returns canned results and records the params it was called with."""

    id = "stub"
    name = "Stub"

    def __init__(self):
        self.results: List[CanonicalPOI] = []
        self.error: Optional[Exception] = None
        self.calls: List[SearchParams] = []

    def is_enabled(self, context: Optional[ProviderContext] = None) -> bool:
        return bool(context and context.has_route)

    def search(self, params: SearchParams) -> List[CanonicalPOI]:
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return list(self.results)


TRACK = [
    {"x": -105.2705, "y": 40.0150, "d": 0.0, "e": 1650.0},
    {"x": -105.2690, "y": 40.0170, "d": 250.0, "e": 1655.0},
    {"x": -105.2670, "y": 40.0195, "d": 560.0},
]

REMOTE_A = {"id": 1, "name": "A", "lat": 40.0, "lng": -105.0, "poi_type_name": "water"}
REMOTE_B = {"id": 2, "name": "B", "lat": 40.1, "lng": -105.1, "poi_type_name": "camping"}


def _poi(name, lat=40.02, lng=-105.27, type=CanonicalType.generic):
    return CanonicalPOI(name=name, lat=lat, lng=lng, provider="stub", type=type)


def _session(route=None, enabled_ids=None):
    route = route or {
        "id": 42,
        "user_id": 7,
        "track_points": TRACK,
        "points_of_interest": [REMOTE_A, REMOTE_B],
    }
    store = FakeRouteStore(route)
    provider = StubProvider()
    registry = ProviderRegistry([provider], enabled_ids=enabled_ids)
    session = RouteEditingSession("42", store, registry)
    session.load()
    return session, store, provider


class TestLoad:
    def test_existing_pois_are_existing(self):
        session, _, _ = _session()
        assert session.markers.count(MarkerState.existing) == 2
        assert session.markers.get("A_40.0_-105.0") == MarkerState.existing

    def test_polyline_derived_from_track_points(self):
        session, _, _ = _session()
        encoded = session.geometry.encoded_polyline
        assert encoded
        decoded = decode(encoded)
        assert len(decoded) == 3
        assert decoded[0] == pytest.approx([40.015, -105.2705])

    def test_reload_drops_pois_deleted_remotely(self):
        session, store, provider = _session()
        provider.results = [_poi("D", lat=40.3, lng=-105.3)]
        session.search("stub", SearchParams(text_query="d"))

        # another actor deletes B and adds D
        store.route["points_of_interest"] = [
            REMOTE_A,
            {"id": 4, "name": "D", "lat": 40.3, "lng": -105.3, "poi_type_name": "park"},
        ]
        session.load()

        assert "B_40.1_-105.1" not in session.markers
        assert session.markers.get("A_40.0_-105.0") == MarkerState.existing
        assert session.markers.get("D_40.3_-105.3") == MarkerState.existing
        assert session.markers.count(MarkerState.existing) == 2

    def test_available_providers_need_route(self):
        session, _, _ = _session()
        assert [p.id for p in session.available_providers()] == ["stub"]

        empty, _, _ = _session(route={"id": 42})
        assert empty.available_providers() == []


class TestSearch:
    def test_route_polyline_is_filled_in(self):
        session, _, provider = _session()
        provider.results = [_poi("Cafe")]

        outcome = session.search("stub", SearchParams(text_query="coffee"))

        assert outcome.status == SearchStatus.ok
        assert provider.calls[0].encoded_polyline == session.geometry.encoded_polyline
        assert session.markers.get("Cafe_40.02_-105.27") == MarkerState.suggested

    def test_new_search_replaces_suggestions_but_keeps_selection(self):
        session, _, provider = _session()
        provider.results = [_poi("Cafe"), _poi("Diner", lat=40.03)]
        session.search("stub", SearchParams(text_query="food"))
        session.keep("Cafe_40.02_-105.27")

        provider.results = [_poi("Shop", lat=40.05)]
        session.search("stub", SearchParams(text_query="shop"))

        assert session.markers.get("Cafe_40.02_-105.27") == MarkerState.selected
        assert "Diner_40.03_-105.27" not in session.markers
        assert session.markers.get("Shop_40.05_-105.27") == MarkerState.suggested
        assert session.markers.count(MarkerState.existing) == 2

    def test_results_matching_existing_pois_stay_existing(self):
        session, _, provider = _session()
        provider.results = [_poi("A", lat=40.0, lng=-105.0)]
        session.search("stub", SearchParams(text_query="a"))
        assert session.markers.get("A_40.0_-105.0") == MarkerState.existing

    def test_failed_search_leaves_markers_untouched(self):
        session, _, provider = _session()
        provider.results = [_poi("Cafe")]
        session.search("stub", SearchParams(text_query="coffee"))

        provider.error = ProviderError("stub", "upstream returned 500", status_code=500)
        with pytest.raises(ProviderError):
            session.search("stub", SearchParams(text_query="coffee"))

        assert session.markers.get("Cafe_40.02_-105.27") == MarkerState.suggested

    def test_no_results_clears_previous_suggestions(self):
        session, _, provider = _session()
        provider.results = [_poi("Cafe")]
        session.search("stub", SearchParams(text_query="coffee"))

        provider.error = NoPOIsFound("stub", "Nothing nearby")
        outcome = session.search("stub", SearchParams(text_query="tea"))

        assert outcome.status == SearchStatus.no_results
        assert outcome.message == "Nothing nearby"
        assert session.markers.count(MarkerState.suggested) == 0

    def test_unconfigured_provider(self):
        session, _, _ = _session(enabled_ids=[])
        with pytest.raises(UnknownProviderError):
            session.search("stub", SearchParams(text_query="coffee"))


class TestMarkerEdits:
    def setup_method(self):
        self.session, _, provider = _session()
        provider.results = [_poi("Cafe"), _poi("Diner", lat=40.03)]
        self.session.search("stub", SearchParams(text_query="food"))

    def test_keep_remove_discard(self):
        key = "Cafe_40.02_-105.27"
        assert self.session.keep(key) == MarkerState.selected
        assert self.session.remove(key) == MarkerState.suggested
        assert self.session.discard(key) == MarkerState.discarded
        assert self.session.keep(key) == MarkerState.discarded

    def test_existing_pois_cannot_be_kept(self):
        assert self.session.keep("A_40.0_-105.0") == MarkerState.existing

    def test_add_custom_poi(self):
        key = self.session.add_custom_poi("My Spot", 40.5, -105.5, type="summit")
        assert key == "My Spot_40.5_-105.5"
        poi = self.session.markers.get_poi(key)
        assert poi.provider == "user"
        assert poi.type == CanonicalType.summit
        assert self.session.markers.get(key) == MarkerState.suggested

    def test_add_custom_poi_requires_name(self):
        with pytest.raises(InvalidInputError):
            self.session.add_custom_poi("  ", 40.5, -105.5)

    def test_edit_renames_and_keeps_state(self):
        self.session.keep("Cafe_40.02_-105.27")
        new_key = self.session.edit_poi("Cafe_40.02_-105.27", name="Cafe Nero", type="coffee")

        assert new_key == "Cafe Nero_40.02_-105.27"
        assert "Cafe_40.02_-105.27" not in self.session.markers
        assert self.session.markers.get(new_key) == MarkerState.selected
        assert self.session.markers.get_poi(new_key).type == CanonicalType.coffee

    def test_edit_description_keeps_key(self):
        key = "Diner_40.03_-105.27"
        assert self.session.edit_poi(key, description="Open late") == key
        assert self.session.markers.get_poi(key).description == "Open late"

    def test_edit_rejects_existing(self):
        with pytest.raises(InvalidTransitionError):
            self.session.edit_poi("A_40.0_-105.0", name="Renamed")

    def test_edit_rejects_collision(self):
        self.session.add_custom_poi("Diner", 40.02, -105.27)
        with pytest.raises(InvalidInputError):
            self.session.edit_poi("Cafe_40.02_-105.27", name="Diner")
        assert "Cafe_40.02_-105.27" in self.session.markers

    def test_edit_rejects_coordinates(self):
        with pytest.raises(InvalidInputError):
            self.session.edit_poi("Cafe_40.02_-105.27", lat=41.0)

    def test_edit_unknown_key(self):
        with pytest.raises(KeyError):
            self.session.edit_poi("missing", name="x")


class TestCommit:
    def test_commit_merges_with_concurrent_additions(self):
        session, store, provider = _session()
        provider.results = [_poi("C", lat=40.2, lng=-105.2, type=CanonicalType.coffee)]
        session.search("stub", SearchParams(text_query="coffee"))
        session.keep("C_40.2_-105.2")

        # someone else adds D after the session loaded
        store.route["points_of_interest"].append(
            {"id": 4, "name": "D", "lat": 40.3, "lng": -105.3, "poi_type_name": "park"}
        )

        result = session.commit()

        assert result.added_count == 1
        assert result.total_count == 4
        assert [p["name"] for p in store.writes[-1]] == ["A", "B", "D", "C"]
        assert store.writes[-1][-1]["poi_type"] == 38
        assert store.writes[-1][-1]["user_id"] == 7

        # after reload everything on the route is existing
        assert session.markers.count(MarkerState.existing) == 4
        assert session.markers.get("C_40.2_-105.2") == MarkerState.existing
        assert session.selected_pois() == []

    def test_commit_without_selection(self):
        session, store, _ = _session()
        with pytest.raises(InvalidInputError):
            session.commit()
        assert store.writes == []
