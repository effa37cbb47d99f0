from pydantic import BaseModel, Field

from driver_matching.matching.matching_engine import RankedCandidate


class RideRequest(BaseModel):
    rider_id: str | None = None
    pickup_latitude: float = Field(ge=-90.0, le=90.0)
    pickup_longitude: float = Field(ge=-180.0, le=180.0)
    max_drivers: int = Field(default=5, ge=1, le=20)


class RankedDriverResponse(BaseModel):
    driver_id: str
    driver_name: str
    latitude: float
    longitude: float
    distance_km: float
    distance_formatted: str
    eta_minutes: int
    eta_formatted: str

    @classmethod
    def from_candidate(cls, candidate: RankedCandidate) -> "RankedDriverResponse":
        driver = candidate.driver
        return cls(
            driver_id=driver.driver_id,
            driver_name=driver.name,
            latitude=driver.latitude,
            longitude=driver.longitude,
            distance_km=round(candidate.distance_km, 2),
            distance_formatted=candidate.formatted_distance,
            eta_minutes=round(candidate.eta_minutes),
            eta_formatted=candidate.formatted_eta,
        )


class RideRequestResponse(BaseModel):
    message: str
    rider_id: str | None
    pickup_latitude: float
    pickup_longitude: float
    drivers_found: int
    nearest_drivers: list[RankedDriverResponse]


class RankedDriversResponse(BaseModel):
    count: int
    latitude: float
    longitude: float
    drivers: list[RankedDriverResponse]


class RadiusSearchResponse(BaseModel):
    count: int
    max_distance_km: float
    drivers: list[RankedDriverResponse]


class AvailabilityResponse(BaseModel):
    latitude: float
    longitude: float
    available_drivers: int
    unavailable_drivers: int
    total_drivers: int
    average_distance_km: float
