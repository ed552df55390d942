"""
Registry of the available POI providers.
"""
import logging
from functools import lru_cache
from typing import Dict, List, Optional, Sequence

from poi_engine.config import get_settings
from poi_engine.errors import UnknownProviderError
from poi_engine.places.providers.base import POIProvider
from poi_engine.places.providers.google import GoogleNormalizer
from poi_engine.places.providers.mock import MockNormalizer
from poi_engine.places.providers.osm import OSMNormalizer
from poi_engine.places.types import ProviderContext

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Ordered, id-addressable set of providers."""

    def __init__(
        self,
        providers: Sequence[POIProvider],
        enabled_ids: Optional[Sequence[str]] = None,
    ):
        self._providers: Dict[str, POIProvider] = {}
        for provider in providers:
            if provider.id in self._providers:
                raise ValueError(f"Duplicate provider id: {provider.id}")
            self._providers[provider.id] = provider
        self.enabled_ids = list(enabled_ids) if enabled_ids is not None else list(self._providers)

    def all(self) -> List[POIProvider]:
        return list(self._providers.values())

    def get(self, provider_id: str) -> POIProvider:
        try:
            return self._providers[provider_id]
        except KeyError:
            raise UnknownProviderError(provider_id) from None

    def is_configured(self, provider_id: str) -> bool:
        return provider_id in self.enabled_ids

    def enabled(self, context: Optional[ProviderContext] = None) -> List[POIProvider]:
        """Providers switched on in configuration that can run in this context."""
        return [
            p for p in self._providers.values()
            if self.is_configured(p.id) and p.is_enabled(context)
        ]


def build_default_registry() -> ProviderRegistry:
    settings = get_settings()
    enabled_ids = settings.enabled_provider_ids()
    registry = ProviderRegistry(
        [GoogleNormalizer(), OSMNormalizer(), MockNormalizer()],
        enabled_ids=enabled_ids,
    )
    unknown = [pid for pid in enabled_ids if pid not in {p.id for p in registry.all()}]
    if unknown:
        logger.warning(f"Ignoring unknown provider ids in ENABLED_PROVIDERS: {unknown}")
    return registry


@lru_cache
def get_provider_registry() -> ProviderRegistry:
    return build_default_registry()
