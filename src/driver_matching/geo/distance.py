"""Great-circle distance and arrival time estimates.

Distances are straight-line over the Earth's surface, not road distance.
ETAs assume a constant average speed.
"""

from math import atan2, cos, radians, sin, sqrt

from driver_matching.core.exceptions import ValidationError

EARTH_RADIUS_KM = 6371.0

DEFAULT_AVERAGE_SPEED_KMH = 40.0


def haversine_distance_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate the great-circle distance between two points in kilometers.

    Uses the Haversine formula to calculate the shortest distance over
    the Earth's surface between two points specified by latitude/longitude.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees

    Returns:
        Distance between the two points in kilometers
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def haversine_distance_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Great-circle distance in meters.

    Convenience wrapper around haversine_distance_km.
    """
    return haversine_distance_km(lat1, lon1, lat2, lon2) * 1000.0


def estimate_eta_minutes(
    distance_km: float,
    speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
) -> float:
    """Estimate travel time in minutes at a constant average speed."""
    if speed_kmh <= 0:
        raise ValidationError(
            "Average speed must be positive", details={"speed_kmh": speed_kmh}
        )
    return distance_km / speed_kmh * 60


def format_distance(distance_km: float) -> str:
    """Render a distance as meters below 1 km, kilometers otherwise."""
    if distance_km < 1.0:
        return f"{distance_km * 1000:.0f} m"
    return f"{distance_km:.2f} km"


def format_eta(eta_minutes: float) -> str:
    """Render an ETA as '< 1 min', 'N mins' or 'H hr M mins'."""
    if eta_minutes < 1.0:
        return "< 1 min"
    if eta_minutes < 60:
        return f"{eta_minutes:.0f} mins"
    hours = int(eta_minutes // 60)
    mins = int(eta_minutes % 60)
    return f"{hours} hr {mins} mins"
