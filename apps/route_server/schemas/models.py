"""Pydantic models for the route server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from src.routing import TravelMode
from src.spatial import Coordinate


class LatLng(BaseModel):
    """Simple latitude/longitude container."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.lat, longitude=self.lng)


def _check_mode(value: str) -> str:
    return TravelMode.parse(value).value


class ResolveRouteRequest(BaseModel):
    origin: LatLng
    destination: LatLng
    mode: str = Field("driving", description="driving, walking, bicycling or transit")
    true_origin: Optional[LatLng] = Field(
        default=None,
        alias="trueOrigin",
        description="Current origin marker; a gap connector is added when it drifts from the route",
    )
    true_destination: Optional[LatLng] = Field(default=None, alias="trueDestination")

    model_config = {"populate_by_name": True}

    @field_validator("mode")
    @classmethod
    def _validate_mode(cls, value: str) -> str:
        return _check_mode(value)


class PrecomputeRequest(BaseModel):
    origin: LatLng
    destination: LatLng
    modes: Optional[List[str]] = Field(
        default=None, description="Modes to resolve; all modes when omitted"
    )

    @field_validator("modes")
    @classmethod
    def _validate_modes(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return [_check_mode(v) for v in value]


class BridgeRequest(BaseModel):
    coordinates: List[LatLng] = Field(..., min_length=2, description="Resolved route polyline")
    true_origin: LatLng = Field(..., alias="trueOrigin")
    true_destination: LatLng = Field(..., alias="trueDestination")

    model_config = {"populate_by_name": True}


class TrafficInfoModel(BaseModel):
    condition: str
    estimated_delay: str = Field(..., alias="estimatedDelay")
    alternative_routes: int = Field(..., ge=1, alias="alternativeRoutes")

    model_config = {"populate_by_name": True}


class RouteModel(BaseModel):
    coordinates: List[Dict[str, float]]
    distance: str
    duration: str
    traffic_info: TrafficInfoModel = Field(..., alias="trafficInfo")
    distance_km: float = Field(..., alias="distanceKm")
    duration_min: float = Field(..., alias="durationMin")
    source: str

    model_config = {"populate_by_name": True}


class ResolveRouteResponse(BaseModel):
    route: RouteModel
    gap: Optional[Dict[str, Any]] = None
    stages: List[str] = Field(default_factory=list)
    cache_hit: bool = Field(False, alias="cacheHit")

    model_config = {"populate_by_name": True}


class PrecomputeResponse(BaseModel):
    routes: Dict[str, RouteModel]
    requested: int
    resolved: int
