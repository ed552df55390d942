"""
API routes for POI provider search.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from poi_engine.errors import InvalidInputError, ProviderError, UnknownProviderError
from poi_engine.places.providers.registry import ProviderRegistry, get_provider_registry
from poi_engine.places.schemas import POIOut, ProviderInfo, SearchRequest, SearchResponse
from poi_engine.places.service import search_with_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/poi", tags=["poi"])


@router.get("/providers", response_model=List[ProviderInfo])
def list_providers(registry: ProviderRegistry = Depends(get_provider_registry)):
    """List every provider and whether it is switched on in configuration."""
    return [
        ProviderInfo(
            id=p.id,
            name=p.name,
            description=p.description,
            enabled=registry.is_configured(p.id),
        )
        for p in registry.all()
    ]


@router.post("/search/{provider_id}", response_model=SearchResponse)
def search(
    provider_id: str,
    body: SearchRequest,
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    """
    Search one provider and return canonical POIs.

    A search that matched nothing answers 200 with status "no_results" and a
    hint in "message"; provider failures answer 502.
    """
    try:
        outcome = search_with_registry(registry, provider_id, body.to_params())
    except UnknownProviderError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        raise HTTPException(status_code=502, detail=f"POI search failed: {e}")

    return SearchResponse(
        status=outcome.status.value,
        provider=outcome.provider,
        pois=[POIOut.from_poi(p) for p in outcome.pois],
        message=outcome.message,
    )
