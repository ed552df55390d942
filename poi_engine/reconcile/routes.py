"""
API routes for loading a route and writing accepted POIs back to it.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from poi_engine.errors import InvalidInputError, RouteStoreError, WriteBackError
from poi_engine.geometry.route import RouteGeometry
from poi_engine.places.schemas import POIOut
from poi_engine.reconcile.client import RouteStoreClient, get_route_store_client, parse_route_pois
from poi_engine.reconcile.schemas import (
    CommitRequest,
    CommitResponse,
    ElevationPointOut,
    RouteDetailsResponse,
)
from poi_engine.reconcile.writer import ReconciliationWriter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/routes", tags=["routes"])


@router.get("/{route_id}", response_model=RouteDetailsResponse)
def get_route(
    route_id: str,
    route_store: RouteStoreClient = Depends(get_route_store_client),
):
    """
    Load a route with its geometry, elevation profile and current POIs.

    When the route has only track points, the encoded polyline is derived
    from them so every consumer sees one geometry.
    """
    try:
        route = route_store.fetch_route(route_id)
        existing = parse_route_pois(route)
    except RouteStoreError as e:
        status = 404 if e.status_code == 404 else 502
        raise HTTPException(status_code=status, detail="Failed to fetch route")

    geometry = RouteGeometry.from_route_payload(route)
    encoded = geometry.ensure_encoded_polyline()

    return RouteDetailsResponse(
        route_id=route_id,
        name=route.get("name"),
        encoded_polyline=encoded,
        elevation_data=[
            ElevationPointOut(
                distance=p.distance_m,
                elevation=p.elevation_m,
                lat=p.lat,
                lng=p.lng,
                index=p.index,
            )
            for p in geometry.elevation_profile()
        ],
        existing_pois=[POIOut.from_poi(p) for p in existing],
    )


@router.post("/{route_id}/pois", response_model=CommitResponse)
def commit_pois(
    route_id: str,
    body: CommitRequest,
    route_store: RouteStoreClient = Depends(get_route_store_client),
):
    """
    Append accepted POIs to the route.

    The route's POI list is re-read right before the write so POIs added
    elsewhere since the route was loaded are preserved.
    """
    writer = ReconciliationWriter(route_store)
    try:
        result = writer.commit(route_id, [p.to_poi() for p in body.pois])
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WriteBackError as e:
        logger.error(f"Write-back failed for route {route_id}: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to send POIs ({e.stage} failed)")

    return CommitResponse(
        success=result.success,
        added_count=result.added_count,
        total_count=result.total_count,
    )
