import pytest
from fastapi.testclient import TestClient

from driver_matching.api.app import create_app
from driver_matching.matching.driver_registry import DriverRegistry
from driver_matching.matching.matching_engine import MatchingEngine
from driver_matching.settings import MatchingSettings, Settings
from tests.locations import LA_DOWNTOWN, SF_CITY_HALL, SF_NEARBY


@pytest.fixture
def matching_settings() -> MatchingSettings:
    return MatchingSettings()


@pytest.fixture
def registry() -> DriverRegistry:
    return DriverRegistry(index_precision=6)


@pytest.fixture
def engine(registry: DriverRegistry, matching_settings: MatchingSettings) -> MatchingEngine:
    return MatchingEngine(registry, matching_settings)


@pytest.fixture
def city_drivers(registry: DriverRegistry) -> DriverRegistry:
    """D1 and D2 a block apart in SF, D3 unavailable in LA."""
    registry.register_driver("D1", "Alice", *SF_CITY_HALL)
    registry.register_driver("D2", "Bob", *SF_NEARBY)
    registry.register_driver("D3", "Carol", *LA_DOWNTOWN)
    registry.set_availability("D3", False)
    return registry


@pytest.fixture
def app_settings():
    return Settings()


@pytest.fixture
def test_client(registry, engine, app_settings):
    app = create_app(registry, engine, app_settings)
    return TestClient(app)


@pytest.fixture
def register(test_client):
    def _register(driver_id: str, latitude: float, longitude: float, name: str = "Driver"):
        response = test_client.post(
            "/api/drivers",
            json={
                "driver_id": driver_id,
                "name": name,
                "latitude": latitude,
                "longitude": longitude,
            },
        )
        assert response.status_code == 201
        return response.json()

    return _register
