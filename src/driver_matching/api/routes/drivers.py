from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from driver_matching.api.dependencies import DriverRegistryDep, MatchingEngineDep
from driver_matching.api.models.drivers import (
    AvailabilityUpdateRequest,
    DriverListResponse,
    DriverRegisterRequest,
    DriverRemovedResponse,
    DriverResponse,
    IndexStatsResponse,
    LocationUpdateRequest,
    NearbyDriversResponse,
)
from driver_matching.core.exceptions import (
    DriverNotFoundError,
    DuplicateDriverError,
    InvalidArgumentError,
    InvalidPrecisionError,
)

router = APIRouter()

LatitudeQuery = Annotated[float, Query(ge=-90.0, le=90.0)]
LongitudeQuery = Annotated[float, Query(ge=-180.0, le=180.0)]


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
def register_driver(body: DriverRegisterRequest, registry: DriverRegistryDep) -> DriverResponse:
    """Register a new driver at the given position, available by default."""
    try:
        driver = registry.register_driver(
            body.driver_id, body.name, body.latitude, body.longitude
        )
    except DuplicateDriverError as e:
        raise HTTPException(status_code=409, detail=e.message) from e
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    return DriverResponse.from_driver(driver)


@router.get("", response_model=DriverListResponse)
def list_drivers(registry: DriverRegistryDep) -> DriverListResponse:
    drivers = registry.list_drivers()
    return DriverListResponse(
        count=len(drivers),
        drivers=[DriverResponse.from_driver(d) for d in drivers],
    )


@router.get("/stats", response_model=IndexStatsResponse)
def get_index_stats(registry: DriverRegistryDep) -> IndexStatsResponse:
    """Geohash trie diagnostics alongside the registry size."""
    stats = registry.index_stats()
    return IndexStatsResponse(
        total_drivers=stats.total_drivers,
        total_nodes=stats.total_nodes,
        max_depth=stats.max_depth,
        registered_drivers=registry.driver_count,
    )


@router.get("/nearby", response_model=NearbyDriversResponse)
def find_nearby_drivers(
    latitude: LatitudeQuery,
    longitude: LongitudeQuery,
    engine: MatchingEngineDep,
    precision: int = 5,
) -> NearbyDriversResponse:
    """Available drivers sharing the pickup point's geohash cell at precision."""
    try:
        drivers = engine.find_nearby(latitude, longitude, precision)
    except InvalidPrecisionError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    return NearbyDriversResponse(
        count=len(drivers),
        latitude=latitude,
        longitude=longitude,
        precision=precision,
        drivers=[DriverResponse.from_driver(d) for d in drivers],
    )


@router.get("/{driver_id}", response_model=DriverResponse)
def get_driver(driver_id: str, registry: DriverRegistryDep) -> DriverResponse:
    driver = registry.get_driver(driver_id)
    if driver is None:
        raise HTTPException(status_code=404, detail=f"Driver not found: {driver_id}")
    return DriverResponse.from_driver(driver)


@router.put("/{driver_id}/location", response_model=DriverResponse)
def update_location(
    driver_id: str, body: LocationUpdateRequest, registry: DriverRegistryDep
) -> DriverResponse:
    try:
        driver = registry.update_location(driver_id, body.latitude, body.longitude)
    except DriverNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return DriverResponse.from_driver(driver)


@router.put("/{driver_id}/availability", response_model=DriverResponse)
def set_availability(
    driver_id: str, body: AvailabilityUpdateRequest, registry: DriverRegistryDep
) -> DriverResponse:
    try:
        driver = registry.set_availability(driver_id, body.available)
    except DriverNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    return DriverResponse.from_driver(driver)


@router.delete("/{driver_id}", response_model=DriverRemovedResponse)
def remove_driver(driver_id: str, registry: DriverRegistryDep) -> DriverRemovedResponse:
    if not registry.remove_driver(driver_id):
        raise HTTPException(status_code=404, detail=f"Driver not found: {driver_id}")
    return DriverRemovedResponse(driver_id=driver_id, removed=True)
