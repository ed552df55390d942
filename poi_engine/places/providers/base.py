"""
Capability interface shared by every POI provider.
"""
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple

import httpx

from poi_engine.errors import ProviderError
from poi_engine.places.types import CanonicalPOI, ProviderContext, SearchParams

logger = logging.getLogger(__name__)


class POIProvider(ABC):
    """
    A source of POIs that normalizes its own response schema into CanonicalPOI.

    Implementations drop individual malformed results and raise
    ProviderError only when the request as a whole fails.
    """

    id: str = ""
    name: str = ""
    description: str = ""

    @abstractmethod
    def is_enabled(self, context: Optional[ProviderContext] = None) -> bool:
        """Whether the provider can run given what the caller has loaded."""
        ...

    @abstractmethod
    def search(self, params: SearchParams) -> List[CanonicalPOI]:
        """
        Run a search and return canonical POIs.

        Raises:
            InvalidInputError: If params lack what this provider needs.
            ProviderError: If the upstream request fails.
        """
        ...


def finite_number(value: Any) -> Optional[float]:
    """Parse value as a finite float, or None. Booleans are rejected."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def text_or_none(value: Any) -> Optional[str]:
    """Non-blank string value, or None for anything else."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def dig(data: Any, path: Sequence[str]) -> Any:
    """Follow a key path through nested dicts; None when any step is missing."""
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def first_coordinate(
    data: Any,
    paths: Sequence[Tuple[Sequence[str], Sequence[str]]],
) -> Optional[Tuple[float, float]]:
    """Try (lat_path, lng_path) pairs in order; return the first finite pair."""
    for lat_path, lng_path in paths:
        lat = finite_number(dig(data, lat_path))
        lng = finite_number(dig(data, lng_path))
        if lat is not None and lng is not None:
            return lat, lng
    return None


def post_json(provider_id: str, url: str, timeout: float, **kwargs: Any) -> Any:
    """POST and decode a JSON body, mapping every failure to ProviderError."""
    try:
        resp = httpx.post(url, timeout=timeout, **kwargs)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        logger.error(f"{provider_id} search HTTP error: {status} snippet={e.response.text[:500]}")
        raise ProviderError(provider_id, f"upstream returned {status}", status_code=status)
    except httpx.HTTPError as e:
        logger.error(f"{provider_id} search transport error: {e}")
        raise ProviderError(provider_id, f"request failed: {e}")
    except ValueError as e:
        logger.error(f"{provider_id} search returned non-JSON body: {e}")
        raise ProviderError(provider_id, "upstream returned a non-JSON body")
