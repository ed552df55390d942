"""
Provider search orchestration.

Turns a provider call into a SearchOutcome so callers can tell a search that
found POIs apart from one that legitimately found nothing. Validation and
provider failures propagate as exceptions.
"""
import enum
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from poi_engine.errors import NoPOIsFound, ProviderError, UnknownProviderError
from poi_engine.places.providers.base import POIProvider
from poi_engine.places.providers.registry import ProviderRegistry
from poi_engine.places.types import CanonicalPOI, SearchParams

logger = logging.getLogger(__name__)


class SearchStatus(str, enum.Enum):
    ok = "ok"
    no_results = "no_results"


@dataclass
class SearchOutcome:
    provider: str
    status: SearchStatus
    pois: List[CanonicalPOI] = field(default_factory=list)
    message: Optional[str] = None


def search_pois(provider: POIProvider, params: SearchParams) -> SearchOutcome:
    """
    Run one provider search.

    Raises:
        InvalidInputError: Rejected before any upstream call.
        ProviderError: The upstream request failed.
    """
    started = time.monotonic()
    try:
        pois = provider.search(params)
    except NoPOIsFound as e:
        outcome = SearchOutcome(
            provider=provider.id,
            status=SearchStatus.no_results,
            message=e.message,
        )
    except ProviderError as e:
        logger.error(
            "places.search_failed",
            extra={"provider": provider.id, "status_code": e.status_code, "error": str(e)},
        )
        raise
    else:
        outcome = SearchOutcome(provider=provider.id, status=SearchStatus.ok, pois=pois)

    logger.info(
        "places.search",
        extra={
            "provider": provider.id,
            "status": outcome.status.value,
            "result_count": len(outcome.pois),
            "elapsed_ms": round((time.monotonic() - started) * 1000),
        },
    )
    return outcome


def search_with_registry(
    registry: ProviderRegistry,
    provider_id: str,
    params: SearchParams,
) -> SearchOutcome:
    """Look up a configured provider by id and run it."""
    provider = registry.get(provider_id)
    if not registry.is_configured(provider_id):
        raise UnknownProviderError(provider_id)
    return search_pois(provider, params)
