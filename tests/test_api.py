"""API tests for the restaurant and reservation endpoints."""
import pytest
from uuid import uuid4

from core.config import settings


RESTAURANT_PAYLOAD = {
    "name": "The Gilded Fork",
    "address": "12 Harbour Street",
    "cuisineType": "French",
    "capacity": 120,
    "spaces": [
        {"name": "Wine Cellar", "minCapacity": 2, "maxCapacity": 10},
        {
            "name": "Garden Room",
            "minCapacity": 1,
            "maxCapacity": 20,
            "operatingStartTime": "10:00",
            "operatingEndTime": "20:00",
            "timeSlotDurationMinutes": 30,
        },
    ],
}


@pytest.fixture
def created_restaurant(client):
    response = client.post("/v1/restaurants", json=RESTAURANT_PAYLOAD)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def reservation_payload(created_restaurant):
    def _payload(**overrides):
        payload = {
            "restaurantId": created_restaurant["id"],
            "spaceId": created_restaurant["spaces"][0]["id"],
            "customerEmail": "guest@example.com",
            "startTime": "2026-01-20T12:17:00",
            "endTime": "2026-01-20T14:17:00",
            "partySize": 4,
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.mark.api
class TestHealth:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


@pytest.mark.api
class TestRestaurantEndpoints:
    """Test restaurant and space routes."""

    def test_create_restaurant(self, created_restaurant):
        """Test that responses are camelCase and show effective space values."""
        assert created_restaurant["cuisineType"] == "French"
        cellar, garden = created_restaurant["spaces"]
        assert cellar["operatingStartTime"] == "09:00:00"
        assert cellar["operatingEndTime"] == "22:00:00"
        assert cellar["timeSlotDurationMinutes"] == 60
        assert garden["timeSlotDurationMinutes"] == 30

    def test_list_and_get(self, client, created_restaurant):
        assert len(client.get("/v1/restaurants").json()) == 1

        response = client.get(f"/v1/restaurants/{created_restaurant['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "The Gilded Fork"

    def test_get_missing_restaurant(self, client):
        response = client.get(f"/v1/restaurants/{uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == 404
        assert body["error"] == "Not Found"
        assert "Restaurant not found" in body["message"]
        assert body["path"].startswith("/v1/restaurants/")

    def test_malformed_id(self, client):
        response = client.get("/v1/restaurants/not-a-uuid")

        assert response.status_code == 400
        assert "restaurant_id" in response.json()["fieldErrors"]

    def test_invalid_space_payload(self, client):
        payload = dict(RESTAURANT_PAYLOAD, spaces=[{"name": "", "minCapacity": 0, "maxCapacity": 5}])

        response = client.post("/v1/restaurants", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert "spaces.0.name" in body["fieldErrors"]
        assert "spaces.0.minCapacity" in body["fieldErrors"]

    def test_update_restaurant(self, client, created_restaurant):
        cellar = created_restaurant["spaces"][0]
        payload = {"name": "Renamed", "spaces": [dict(cellar, maxCapacity=14)]}

        response = client.put(f"/v1/restaurants/{created_restaurant['id']}", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Renamed"
        assert [s["id"] for s in body["spaces"]] == [cellar["id"]]
        assert body["spaces"][0]["maxCapacity"] == 14

    def test_update_missing_restaurant(self, client):
        response = client.put(f"/v1/restaurants/{uuid4()}", json={"name": "Ghost"})
        assert response.status_code == 404

    def test_delete_restaurant(self, client, created_restaurant):
        url = f"/v1/restaurants/{created_restaurant['id']}"

        assert client.delete(url).status_code == 204
        assert client.delete(url).status_code == 404

    def test_add_and_remove_space(self, client, created_restaurant):
        url = f"/v1/restaurants/{created_restaurant['id']}/spaces"

        response = client.post(url, json={"name": "Terrace", "minCapacity": 2, "maxCapacity": 30})
        assert response.status_code == 200
        spaces = response.json()["spaces"]
        assert [s["name"] for s in spaces] == ["Wine Cellar", "Garden Room", "Terrace"]

        response = client.delete(f"{url}/{spaces[2]['id']}")
        assert response.status_code == 200
        assert len(response.json()["spaces"]) == 2

        assert client.delete(f"{url}/{uuid4()}").status_code == 404

    def test_get_space(self, client, created_restaurant):
        url = f"/v1/restaurants/{created_restaurant['id']}/spaces"
        garden = created_restaurant["spaces"][1]

        response = client.get(f"{url}/{garden['id']}")
        assert response.status_code == 200
        assert response.json()["operatingEndTime"] == "20:00:00"
        assert response.json()["timeSlotDurationMinutes"] == 30

        response = client.get(f"{url}/{uuid4()}")
        assert response.status_code == 404
        assert "Space not found" in response.json()["message"]

        assert client.get(f"/v1/restaurants/{uuid4()}/spaces/{garden['id']}").status_code == 404

    def test_remove_space_in_use(self, client, created_restaurant, reservation_payload):
        client.post("/v1/reservations", json=reservation_payload())
        space_id = created_restaurant["spaces"][0]["id"]

        response = client.delete(f"/v1/restaurants/{created_restaurant['id']}/spaces/{space_id}")

        assert response.status_code == 409


@pytest.mark.api
class TestReservationEndpoints:
    """Test reservation routes."""

    def test_create_reservation(self, client, reservation_payload):
        """Test that the response carries aligned times."""
        response = client.post("/v1/reservations", json=reservation_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["startTime"] == "2026-01-20T12:00:00"
        assert body["endTime"] == "2026-01-20T15:00:00"
        assert body["status"] == "CONFIRMED"

    def test_legacy_datetime_format(self, client, reservation_payload):
        response = client.post(
            "/v1/reservations",
            json=reservation_payload(startTime="20-01-2026 18:00", endTime="20-01-2026 20:00"),
        )

        assert response.status_code == 201
        assert response.json()["startTime"] == "2026-01-20T18:00:00"

    def test_invalid_email(self, client, reservation_payload):
        response = client.post("/v1/reservations", json=reservation_payload(customerEmail="not-an-email"))

        assert response.status_code == 400
        assert "customerEmail" in response.json()["fieldErrors"]

    def test_capacity_conflict(self, client, reservation_payload):
        client.post("/v1/reservations", json=reservation_payload(partySize=6))

        response = client.post("/v1/reservations", json=reservation_payload(partySize=5))

        assert response.status_code == 409
        assert "Current occupancy: 6" in response.json()["message"]

    @pytest.mark.parametrize("overrides", [
        {"endTime": "2026-01-21T14:00:00"},
        {"startTime": "2026-01-20T07:00:00", "endTime": "2026-01-20T10:00:00"},
        {"partySize": 11},
        {"startTime": "2026-01-20T12:40:00", "endTime": "2026-01-20T12:50:00"},
    ])
    def test_business_rule_violations(self, client, reservation_payload, overrides):
        response = client.post("/v1/reservations", json=reservation_payload(**overrides))

        assert response.status_code == 400
        assert response.json()["error"] == "Bad Request"

    def test_unknown_space(self, client, reservation_payload):
        response = client.post("/v1/reservations", json=reservation_payload(spaceId=str(uuid4())))
        assert response.status_code == 404

    def test_get_list_and_delete(self, client, created_restaurant, reservation_payload):
        created = client.post("/v1/reservations", json=reservation_payload()).json()
        restaurant_id = created_restaurant["id"]
        space_id = created_restaurant["spaces"][0]["id"]

        assert client.get(f"/v1/reservations/{created['id']}").json()["id"] == created["id"]
        assert len(client.get("/v1/reservations").json()) == 1
        assert len(client.get(f"/v1/reservations/restaurant/{restaurant_id}").json()) == 1
        assert len(client.get(f"/v1/reservations/restaurant/{restaurant_id}/space/{space_id}").json()) == 1

        assert client.delete(f"/v1/reservations/{created['id']}").status_code == 204
        assert client.delete(f"/v1/reservations/{created['id']}").status_code == 404
        assert client.get(f"/v1/reservations/{created['id']}").status_code == 404


@pytest.mark.api
class TestOccupancyEndpoint:
    """Test the occupancy analytics route."""

    def url(self, restaurant):
        return f"/v1/restaurants/{restaurant['id']}/analytics/occupancy"

    def test_report(self, client, created_restaurant, reservation_payload):
        client.post("/v1/reservations", json=reservation_payload(partySize=5))

        response = client.get(
            self.url(created_restaurant),
            params={"startTime": "2026-01-20T12:00:00", "endTime": "2026-01-20T16:00:00"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["totalElements"] == 2
        assert body["page"] == 0
        assert body["size"] == settings.report_default_page_size
        assert body["summary"]["totalReservations"] == 1
        assert body["summary"]["peakOccupancy"] == 5
        cellar = body["spaceReports"][0]
        assert cellar["spaceName"] == "Wine Cellar"
        assert [s["occupancy"] for s in cellar["hourlyBreakdown"]] == [5, 5, 5, 0]
        assert cellar["hourlyBreakdown"][0]["utilizationPercentage"] == 50.0

    def test_report_pagination_and_space_filter(self, client, created_restaurant):
        garden_id = created_restaurant["spaces"][1]["id"]
        params = {"startTime": "2026-01-20T12:00:00", "endTime": "2026-01-20T16:00:00"}

        page_1 = client.get(self.url(created_restaurant), params=dict(params, page=1, size=1)).json()
        assert [s["spaceName"] for s in page_1["spaceReports"]] == ["Garden Room"]
        assert page_1["totalPages"] == 2

        filtered = client.get(self.url(created_restaurant), params=dict(params, spaceId=garden_id)).json()
        assert filtered["totalElements"] == 1

    def test_range_too_long(self, client, created_restaurant):
        response = client.get(
            self.url(created_restaurant),
            params={"startTime": "2026-01-01T00:00:00", "endTime": "2026-02-02T00:00:00"},
        )

        assert response.status_code == 400
        assert "31 days" in response.json()["message"]

    def test_missing_parameters(self, client, created_restaurant):
        response = client.get(self.url(created_restaurant), params={"startTime": "2026-01-01T00:00:00"})

        assert response.status_code == 400
        assert "endTime" in response.json()["fieldErrors"]

    def test_unknown_restaurant(self, client):
        response = client.get(
            f"/v1/restaurants/{uuid4()}/analytics/occupancy",
            params={"startTime": "2026-01-20T12:00:00", "endTime": "2026-01-20T16:00:00"},
        )

        assert response.status_code == 404

    def test_unknown_space(self, client, created_restaurant):
        response = client.get(
            self.url(created_restaurant),
            params={
                "startTime": "2026-01-20T12:00:00",
                "endTime": "2026-01-20T16:00:00",
                "spaceId": str(uuid4()),
            },
        )

        assert response.status_code == 404
