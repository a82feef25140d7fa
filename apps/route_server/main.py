"""FastAPI server exposing the route resolution engine."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.routing import Route, TravelMode
from src.spatial import Coordinate

from .schemas.models import (
    BridgeRequest,
    PrecomputeRequest,
    PrecomputeResponse,
    ResolveRouteRequest,
    ResolveRouteResponse,
    RouteModel,
)
from .tools.routes import get_resolver

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Route Resolution Server", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _route_model(route: Route) -> RouteModel:
    return RouteModel.model_validate(route.to_dict())


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    resolver = get_resolver()
    return {"status": "ok", "providers": resolver.provider_names}


@app.post("/routes/resolve")
async def resolve_route_action(request: ResolveRouteRequest) -> Dict[str, Any]:
    resolver = get_resolver()
    origin = request.origin.to_coordinate()
    destination = request.destination.to_coordinate()

    route, trace = await resolver.resolve_with_trace(origin, destination, request.mode)

    gap = None
    if request.true_origin is not None or request.true_destination is not None:
        true_origin = request.true_origin.to_coordinate() if request.true_origin else origin
        true_destination = request.true_destination.to_coordinate() if request.true_destination else destination
        bridge = resolver.bridge_gap(route, true_origin, true_destination)
        gap = bridge.to_dict() if bridge else None

    response = ResolveRouteResponse(
        route=_route_model(route),
        gap=gap,
        stages=[stage.value for stage in trace.stages],
        cache_hit=trace.cache_hit,
    )
    return response.model_dump(by_alias=True)


@app.post("/routes/precompute")
async def precompute_routes_action(request: PrecomputeRequest) -> Dict[str, Any]:
    resolver = get_resolver()
    modes = request.modes if request.modes is not None else [m.value for m in TravelMode]
    routes = await resolver.precompute_routes(
        request.origin.to_coordinate(),
        request.destination.to_coordinate(),
        modes,
    )

    response = PrecomputeResponse(
        routes={mode.value: _route_model(route) for mode, route in routes.items()},
        requested=len(modes),
        resolved=len(routes),
    )
    return response.model_dump(by_alias=True)


@app.post("/routes/bridge")
async def bridge_gap_action(request: BridgeRequest) -> Dict[str, Any]:
    resolver = get_resolver()
    coordinates = [Coordinate(latitude=p.lat, longitude=p.lng) for p in request.coordinates]
    bridge = resolver.bridge_path(
        coordinates,
        request.true_origin.to_coordinate(),
        request.true_destination.to_coordinate(),
    )
    return {"gap": bridge.to_dict() if bridge else None}


@app.get("/routes/cache/stats")
async def cache_stats() -> Dict[str, Any]:
    return get_resolver().cache.stats()
