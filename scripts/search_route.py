#!/usr/bin/env python3
"""
Search a POI provider along a saved route.

Reads a route JSON file as returned by the route store (either the full
response or the bare "route" object), builds search params from its
geometry and prints canonical POIs as JSON.

Usage:
    python scripts/search_route.py --route-file route.json --provider google --query coffee
    python scripts/search_route.py --route-file route.json --provider osm --query toilets,drinking_water
    python scripts/search_route.py --route-file route.json --sample-only
"""
import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

# Ensure the package is importable when running from repo root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from poi_engine.errors import InvalidInputError, ProviderError, UnknownProviderError
from poi_engine.geometry.route import RouteGeometry
from poi_engine.geometry.sampler import sample
from poi_engine.places.providers.registry import build_default_registry
from poi_engine.places.service import search_pois
from poi_engine.places.types import SearchParams, pois_to_dicts

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("search_route")


def load_route_file(path: str) -> Dict[str, Any]:
    """Load a route record from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    route = data.get("route", data)
    if not isinstance(route, dict):
        raise ValueError(f"{path}: 'route' is not an object")
    return route


def build_params(route: Dict[str, Any], query: str) -> SearchParams:
    geometry = RouteGeometry.from_route_payload(route)
    return SearchParams(text_query=query, encoded_polyline=geometry.ensure_encoded_polyline())


def run(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Search POIs along a saved route")
    parser.add_argument("--route-file", required=True, help="Route JSON file")
    parser.add_argument("--provider", default="google", help="Provider id (google, osm, mock)")
    parser.add_argument("--query", default="", help="Search text or comma-separated amenities")
    parser.add_argument("--sample-only", action="store_true",
                        help="Print the sampled route points instead of searching")
    args = parser.parse_args(argv)

    try:
        route = load_route_file(args.route_file)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read route file: {e}")
        return 2

    if args.sample_only:
        coords = RouteGeometry.from_route_payload(route).coordinates()
        points = sample(coords)
        logger.info(f"Sampled {len(points)} of {len(coords)} route points")
        print(json.dumps(points))
        return 0

    registry = build_default_registry()
    try:
        provider = registry.get(args.provider)
        outcome = search_pois(provider, build_params(route, args.query))
    except (UnknownProviderError, InvalidInputError) as e:
        logger.error(str(e))
        return 2
    except ProviderError as e:
        logger.error(f"Search failed: {e}")
        return 1

    if outcome.message:
        logger.info(outcome.message)
    print(json.dumps({
        "status": outcome.status.value,
        "provider": outcome.provider,
        "pois": pois_to_dicts(outcome.pois),
    }, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(run())
