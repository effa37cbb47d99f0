"""Tests for the distance and ETA utilities."""

import pytest

from driver_matching.core.exceptions import ValidationError
from driver_matching.geo.distance import (
    EARTH_RADIUS_KM,
    estimate_eta_minutes,
    format_distance,
    format_eta,
    haversine_distance_km,
    haversine_distance_m,
)


@pytest.mark.unit
class TestHaversineDistanceKm:
    def test_same_point_returns_zero(self) -> None:
        lat, lon = 37.7749, -122.4194
        assert haversine_distance_km(lat, lon, lat, lon) == 0.0

    def test_known_distance_sf_to_la(self) -> None:
        """San Francisco to Los Angeles is roughly 559 km in a straight line."""
        distance = haversine_distance_km(37.7749, -122.4194, 34.0522, -118.2437)
        assert 550 <= distance <= 570

    def test_short_distance_accuracy(self) -> None:
        # ~0.0009 degrees of latitude is ~100 m
        distance = haversine_distance_km(37.7749, -122.4194, 37.7758, -122.4194)
        assert distance == pytest.approx(0.1, abs=0.01)

    def test_symmetry(self) -> None:
        a = (37.7749, -122.4194)
        b = (37.7750, -122.4183)
        assert haversine_distance_km(*a, *b) == haversine_distance_km(*b, *a)

    def test_quarter_meridian(self) -> None:
        """Equator to pole is a quarter of the circumference."""
        distance = haversine_distance_km(0.0, 0.0, 90.0, 0.0)
        assert distance == pytest.approx(EARTH_RADIUS_KM * 3.141592653589793 / 2, rel=1e-9)

    def test_across_antimeridian(self) -> None:
        distance = haversine_distance_km(0.0, 179.9, 0.0, -179.9)
        assert distance == pytest.approx(22.24, abs=0.05)

    def test_non_negative(self) -> None:
        assert haversine_distance_km(-33.86, 151.21, 51.5, -0.12) > 0

    def test_meters_wrapper(self) -> None:
        km = haversine_distance_km(37.7749, -122.4194, 37.7750, -122.4183)
        assert haversine_distance_m(37.7749, -122.4194, 37.7750, -122.4183) == pytest.approx(
            km * 1000
        )


@pytest.mark.unit
class TestEstimateEta:
    def test_default_speed_is_40_kmh(self) -> None:
        assert estimate_eta_minutes(40.0) == pytest.approx(60.0)

    def test_custom_speed(self) -> None:
        assert estimate_eta_minutes(10.0, speed_kmh=60.0) == pytest.approx(10.0)

    def test_zero_distance(self) -> None:
        assert estimate_eta_minutes(0.0) == 0.0

    @pytest.mark.parametrize("speed", [0.0, -5.0])
    def test_non_positive_speed_rejected(self, speed) -> None:
        with pytest.raises(ValidationError):
            estimate_eta_minutes(1.0, speed_kmh=speed)


@pytest.mark.unit
class TestFormatting:
    @pytest.mark.parametrize(
        ("distance_km", "expected"),
        [
            (0.0, "0 m"),
            (0.097, "97 m"),
            (0.9994, "999 m"),
            (1.0, "1.00 km"),
            (12.3456, "12.35 km"),
        ],
    )
    def test_format_distance(self, distance_km, expected) -> None:
        assert format_distance(distance_km) == expected

    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (0.2, "< 1 min"),
            (1.0, "1 mins"),
            (14.6, "15 mins"),
            (60.0, "1 hr 0 mins"),
            (135.5, "2 hr 15 mins"),
        ],
    )
    def test_format_eta(self, minutes, expected) -> None:
        assert format_eta(minutes) == expected
