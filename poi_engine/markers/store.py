"""
Per-session marker lifecycle for POIs.

Each POI is tracked under its identity key with one of four states:

    suggested  - fresh search result or user-typed POI
    selected   - the user chose to keep it
    existing   - already on the remote route (terminal)
    discarded  - removed from consideration (terminal)

The store only manages state labels; POI records are never modified.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from poi_engine.errors import InvalidTransitionError
from poi_engine.places.types import CanonicalPOI, identity_key

logger = logging.getLogger(__name__)


class MarkerState(str, enum.Enum):
    suggested = "suggested"
    selected = "selected"
    existing = "existing"
    discarded = "discarded"


TERMINAL_STATES = frozenset({MarkerState.existing, MarkerState.discarded})

ALLOWED_TRANSITIONS: Dict[MarkerState, frozenset] = {
    MarkerState.suggested: frozenset({MarkerState.selected, MarkerState.discarded}),
    MarkerState.selected: frozenset({MarkerState.suggested, MarkerState.discarded}),
}


@dataclass(frozen=True)
class Marker:
    poi: CanonicalPOI
    state: MarkerState


class MarkerStateStore:
    """
    Keyed state machine over the POIs of one route-editing session.

    Create one per session and drop it when the session ends.
    """

    def __init__(self) -> None:
        self._markers: Dict[str, Marker] = {}

    def __len__(self) -> int:
        return len(self._markers)

    def __contains__(self, key: object) -> bool:
        return key in self._markers

    def ingest(
        self,
        pois: Iterable[CanonicalPOI],
        state: MarkerState = MarkerState.suggested,
    ) -> List[str]:
        """
        Add POIs under the given initial state.

        A POI whose key is already tracked (in any state) is skipped. Returns
        the keys that were actually added.
        """
        if state not in (MarkerState.suggested, MarkerState.existing):
            raise InvalidTransitionError(f"POIs cannot be ingested as {state.value}")
        added: List[str] = []
        skipped = 0
        for poi in pois:
            key = identity_key(poi)
            if key in self._markers:
                skipped += 1
                continue
            self._markers[key] = Marker(poi=poi, state=state)
            added.append(key)
        if skipped:
            logger.debug(f"Skipped {skipped} already-tracked POIs during ingest")
        return added

    def ingest_existing(self, pois: Iterable[CanonicalPOI]) -> List[str]:
        """Add POIs that are already on the remote route."""
        return self.ingest(pois, state=MarkerState.existing)

    def transition(self, key: str, new_state: MarkerState) -> MarkerState:
        """
        Move a POI to new_state and return the state it ends up in.

        Transitions out of a terminal state are ignored. Unknown keys raise
        KeyError; transitions outside the table raise InvalidTransitionError.
        """
        marker = self._markers[key]
        current = marker.state
        if current in TERMINAL_STATES:
            logger.debug(f"Ignoring {current.value} -> {new_state.value} for terminal marker {key}")
            return current
        if new_state == current:
            return current
        if new_state not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransitionError(
                f"Cannot move marker from {current.value} to {new_state.value}"
            )
        self._markers[key] = Marker(poi=marker.poi, state=new_state)
        return new_state

    def remove(self, key: str) -> CanonicalPOI:
        """Stop tracking a non-existing POI and return its record."""
        marker = self._markers[key]
        if marker.state == MarkerState.existing:
            raise InvalidTransitionError("POIs already on the route cannot be removed")
        del self._markers[key]
        return marker.poi

    def _drop_state(self, state: MarkerState) -> int:
        kept = {key: marker for key, marker in self._markers.items() if marker.state != state}
        removed = len(self._markers) - len(kept)
        self._markers = kept
        return removed

    def clear_suggested(self) -> int:
        """Drop every suggested marker at once; returns how many were dropped."""
        return self._drop_state(MarkerState.suggested)

    def replace_existing(self, pois: Iterable[CanonicalPOI]) -> List[str]:
        """
        Make pois the complete set of existing markers.

        Existing markers missing from pois are dropped. A suggested, selected
        or discarded marker with the same key as one of pois becomes existing.
        """
        stale = self._drop_state(MarkerState.existing)
        pois = list(pois)
        for poi in pois:
            self._markers.pop(identity_key(poi), None)
        added = self.ingest_existing(pois)
        if stale:
            logger.debug(f"Replaced {stale} existing markers with {len(added)} from the route")
        return added

    def clear(self) -> None:
        self._markers = {}

    def get(self, key: str) -> Optional[MarkerState]:
        marker = self._markers.get(key)
        return marker.state if marker else None

    def get_poi(self, key: str) -> Optional[CanonicalPOI]:
        marker = self._markers.get(key)
        return marker.poi if marker else None

    def all(self) -> List[Tuple[str, MarkerState]]:
        return [(key, marker.state) for key, marker in self._markers.items()]

    def pois_in(self, state: MarkerState) -> List[CanonicalPOI]:
        return [m.poi for m in self._markers.values() if m.state == state]

    def count(self, state: MarkerState) -> int:
        return sum(1 for m in self._markers.values() if m.state == state)
