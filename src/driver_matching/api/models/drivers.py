from datetime import datetime

from pydantic import BaseModel, Field

from driver_matching.matching.driver_registry import Driver


class DriverRegisterRequest(BaseModel):
    driver_id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=200)
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class LocationUpdateRequest(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class AvailabilityUpdateRequest(BaseModel):
    available: bool


class DriverResponse(BaseModel):
    driver_id: str
    name: str
    latitude: float
    longitude: float
    geohash: str
    available: bool
    last_updated: datetime

    @classmethod
    def from_driver(cls, driver: Driver) -> "DriverResponse":
        return cls(
            driver_id=driver.driver_id,
            name=driver.name,
            latitude=driver.latitude,
            longitude=driver.longitude,
            geohash=driver.geohash,
            available=driver.available,
            last_updated=driver.last_updated,
        )


class DriverListResponse(BaseModel):
    count: int
    drivers: list[DriverResponse]


class DriverRemovedResponse(BaseModel):
    driver_id: str
    removed: bool


class IndexStatsResponse(BaseModel):
    total_drivers: int
    total_nodes: int
    max_depth: int
    registered_drivers: int


class NearbyDriversResponse(BaseModel):
    count: int
    latitude: float
    longitude: float
    precision: int
    drivers: list[DriverResponse]
