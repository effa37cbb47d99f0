import pytest

from driver_matching.geo.geohash import encode
from tests.locations import LA_DOWNTOWN, SF_CITY_HALL


@pytest.mark.unit
def test_health(test_client):
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.unit
def test_metrics_endpoint(test_client):
    response = test_client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "driver_matching_drivers_registered" in response.text


@pytest.mark.unit
def test_register_driver(test_client):
    """Registers at the index precision and defaults to available."""
    response = test_client.post(
        "/api/drivers",
        json={"driver_id": "D1", "name": "Alice", "latitude": 37.7749, "longitude": -122.4194},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["driver_id"] == "D1"
    assert body["geohash"] == encode(37.7749, -122.4194, 6)
    assert body["available"] is True


@pytest.mark.unit
def test_register_duplicate_conflicts(test_client, register):
    register("D1", *SF_CITY_HALL)

    response = test_client.post(
        "/api/drivers",
        json={"driver_id": "D1", "name": "Again", "latitude": 0.0, "longitude": 0.0},
    )

    assert response.status_code == 409
    assert "D1" in response.json()["detail"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        {"driver_id": "", "name": "A", "latitude": 0.0, "longitude": 0.0},
        {"driver_id": "D1", "name": "A", "latitude": 91.0, "longitude": 0.0},
        {"driver_id": "D1", "name": "A", "latitude": 0.0, "longitude": -181.0},
        {"driver_id": "D1", "name": "A", "latitude": 0.0},
    ],
)
def test_register_rejects_invalid_payload(test_client, payload):
    response = test_client.post("/api/drivers", json=payload)

    assert response.status_code == 422


@pytest.mark.unit
def test_get_driver(test_client, register):
    register("D1", *SF_CITY_HALL, name="Alice")

    response = test_client.get("/api/drivers/D1")

    assert response.status_code == 200
    assert response.json()["name"] == "Alice"


@pytest.mark.unit
def test_get_unknown_driver(test_client):
    response = test_client.get("/api/drivers/ghost")

    assert response.status_code == 404


@pytest.mark.unit
def test_list_drivers(test_client, register):
    register("D1", *SF_CITY_HALL)
    register("D2", *LA_DOWNTOWN)

    response = test_client.get("/api/drivers")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert {d["driver_id"] for d in body["drivers"]} == {"D1", "D2"}


@pytest.mark.unit
def test_update_location_moves_geohash(test_client, register):
    register("D1", *SF_CITY_HALL)

    response = test_client.put(
        "/api/drivers/D1/location",
        json={"latitude": LA_DOWNTOWN[0], "longitude": LA_DOWNTOWN[1]},
    )

    assert response.status_code == 200
    assert response.json()["geohash"] == encode(*LA_DOWNTOWN, 6)


@pytest.mark.unit
def test_update_location_unknown_driver(test_client):
    response = test_client.put("/api/drivers/ghost/location", json={"latitude": 0, "longitude": 0})

    assert response.status_code == 404


@pytest.mark.unit
def test_set_availability(test_client, register):
    register("D1", *SF_CITY_HALL)

    response = test_client.put("/api/drivers/D1/availability", json={"available": False})

    assert response.status_code == 200
    assert response.json()["available"] is False


@pytest.mark.unit
def test_set_availability_unknown_driver(test_client):
    response = test_client.put("/api/drivers/ghost/availability", json={"available": True})

    assert response.status_code == 404


@pytest.mark.unit
def test_remove_driver(test_client, register):
    register("D1", *SF_CITY_HALL)

    response = test_client.delete("/api/drivers/D1")

    assert response.status_code == 200
    assert response.json() == {"driver_id": "D1", "removed": True}
    assert test_client.get("/api/drivers/D1").status_code == 404
    assert test_client.delete("/api/drivers/D1").status_code == 404


@pytest.mark.unit
def test_index_stats(test_client, register):
    register("D1", *SF_CITY_HALL)
    register("D2", *LA_DOWNTOWN)

    body = test_client.get("/api/drivers/stats").json()

    assert body["total_drivers"] == 2
    assert body["registered_drivers"] == 2
    assert body["max_depth"] == 6


@pytest.mark.unit
def test_nearby_in_cell(test_client, register):
    register("D1", *SF_CITY_HALL)
    register("D2", *LA_DOWNTOWN)

    response = test_client.get(
        "/api/drivers/nearby",
        params={"latitude": SF_CITY_HALL[0], "longitude": SF_CITY_HALL[1], "precision": 5},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["drivers"][0]["driver_id"] == "D1"


@pytest.mark.unit
def test_nearby_rejects_bad_precision(test_client):
    response = test_client.get(
        "/api/drivers/nearby", params={"latitude": 0, "longitude": 0, "precision": 9}
    )

    assert response.status_code == 400
