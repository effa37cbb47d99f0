import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from driver_matching.api.dependencies import MatchingEngineDep, SettingsDep
from driver_matching.api.models.rides import (
    AvailabilityResponse,
    RadiusSearchResponse,
    RankedDriverResponse,
    RankedDriversResponse,
    RideRequest,
    RideRequestResponse,
)
from driver_matching.service_logging import log_context

logger = logging.getLogger(__name__)

router = APIRouter()

LatitudeQuery = Annotated[float, Query(ge=-90.0, le=90.0)]
LongitudeQuery = Annotated[float, Query(ge=-180.0, le=180.0)]


@router.post("/request", response_model=RideRequestResponse)
def request_ride(body: RideRequest, engine: MatchingEngineDep) -> RideRequestResponse:
    """Rank the closest available drivers for a pickup point."""
    with log_context(rider_id=body.rider_id, operation="request_ride"):
        closest = engine.find_closest(
            body.pickup_latitude, body.pickup_longitude, body.max_drivers
        )

        if closest:
            message = f"Found {len(closest)} nearby driver(s)"
        else:
            message = "No drivers available in your area"
        logger.info(message)

    return RideRequestResponse(
        message=message,
        rider_id=body.rider_id,
        pickup_latitude=body.pickup_latitude,
        pickup_longitude=body.pickup_longitude,
        drivers_found=len(closest),
        nearest_drivers=[RankedDriverResponse.from_candidate(c) for c in closest],
    )


@router.get("/nearby-drivers", response_model=RankedDriversResponse)
def find_nearby_drivers(
    latitude: LatitudeQuery,
    longitude: LongitudeQuery,
    engine: MatchingEngineDep,
    settings: SettingsDep,
    max_drivers: Annotated[int | None, Query(ge=1)] = None,
) -> RankedDriversResponse:
    max_drivers = max_drivers or settings.matching.default_max_drivers
    if max_drivers > settings.matching.max_drivers_limit:
        raise HTTPException(
            status_code=400,
            detail=f"max_drivers must be at most {settings.matching.max_drivers_limit}",
        )

    closest = engine.find_closest(latitude, longitude, max_drivers)
    return RankedDriversResponse(
        count=len(closest),
        latitude=latitude,
        longitude=longitude,
        drivers=[RankedDriverResponse.from_candidate(c) for c in closest],
    )


@router.get("/nearby-drivers/radius", response_model=RadiusSearchResponse)
def find_drivers_within_radius(
    latitude: LatitudeQuery,
    longitude: LongitudeQuery,
    max_distance_km: Annotated[float, Query(gt=0.0)],
    engine: MatchingEngineDep,
    settings: SettingsDep,
    max_drivers: Annotated[int, Query(ge=1)] = 10,
) -> RadiusSearchResponse:
    if max_drivers > settings.matching.max_drivers_limit:
        raise HTTPException(
            status_code=400,
            detail=f"max_drivers must be at most {settings.matching.max_drivers_limit}",
        )

    in_radius = engine.find_within_radius(latitude, longitude, max_distance_km, max_drivers)
    return RadiusSearchResponse(
        count=len(in_radius),
        max_distance_km=max_distance_km,
        drivers=[RankedDriverResponse.from_candidate(c) for c in in_radius],
    )


@router.get("/availability", response_model=AvailabilityResponse)
def check_availability(
    latitude: LatitudeQuery,
    longitude: LongitudeQuery,
    engine: MatchingEngineDep,
) -> AvailabilityResponse:
    stats = engine.availability_stats(latitude, longitude)
    return AvailabilityResponse(
        latitude=latitude,
        longitude=longitude,
        available_drivers=stats.available_count,
        unavailable_drivers=stats.unavailable_count,
        total_drivers=stats.total_count,
        average_distance_km=round(stats.avg_distance_km, 2),
    )
