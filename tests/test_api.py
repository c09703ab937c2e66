"""HTTP surface tests: envelope, camelCase payloads and error mapping."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from outswap.core.config import Settings
from outswap.main import create_app
from outswap.services.outfit import OutfitService

from tests.factories import outfit_payload


def iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


async def create_outfit(client, **overrides) -> dict:
    response = await client.post("/api/outfits", json=outfit_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_rental(client, outfit_id: str, starts_in=timedelta(days=3), hours=5) -> dict:
    start = datetime.now(timezone.utc) + starts_in
    response = await client.post(
        "/api/rentals",
        json={
            "outfitId": outfit_id,
            "renterId": "renter-1",
            "startDate": iso(start),
            "endDate": iso(start + timedelta(hours=hours)),
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_health_endpoints(client):
    live = await client.get("/api/health")
    assert live.status_code == 200
    assert live.json()["status"] == "healthy"

    ready = await client.get("/api/health/ready")
    assert ready.status_code == 200
    assert ready.json()["status"] == "ready"


async def test_create_and_fetch_outfit(client):
    outfit = await create_outfit(client)
    assert outfit["id"]
    assert outfit["pricePerDay"] == 60.0
    assert outfit["styleTags"] == ["elegant", "silk"]
    assert outfit["location"]["zipCode"] == "94105"
    assert outfit["rating"] == 0
    assert outfit["totalRatings"] == 0
    assert outfit["available"] is True

    response = await client.get(f"/api/outfits/{outfit['id']}")
    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["title"] == "Emerald Evening Gown"


async def test_invalid_outfit_reports_field_errors(client):
    response = await client.post(
        "/api/outfits", json=outfit_payload(pricePerHour=10.0, pricePerDay=300.0, title="ab")
    )
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Validation failed"
    errors = {error["field"]: error["message"] for error in body["errors"]}
    assert errors["pricePerDay"] == "Daily price should be less than 24x hourly price"
    assert "title" in errors


async def test_malformed_body_uses_the_error_envelope(client):
    response = await client.post("/api/outfits", json={"title": "No owner"})
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert any(error["field"] == "ownerId" for error in body["errors"])


async def test_missing_outfit_is_404(client):
    response = await client.get("/api/outfits/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Outfit not found"}


async def test_update_ignores_protected_fields(client):
    outfit = await create_outfit(client)
    response = await client.put(
        f"/api/outfits/{outfit['id']}",
        json={"title": "Emerald Gala Gown", "ownerId": "someone-else", "rating": 5},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Emerald Gala Gown"
    assert data["ownerId"] == "owner-1"
    assert data["rating"] == 0


async def test_update_is_validated_against_the_merged_listing(client):
    outfit = await create_outfit(client)
    response = await client.put(f"/api/outfits/{outfit['id']}", json={"pricePerDay": 500.0})
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "pricePerDay"


async def test_delete_outfit(client):
    outfit = await create_outfit(client)
    assert (await client.delete(f"/api/outfits/{outfit['id']}")).status_code == 200
    assert (await client.delete(f"/api/outfits/{outfit['id']}")).status_code == 404


async def test_search_returns_camel_case_page(client):
    for index in range(3):
        await create_outfit(client, title=f"Party Dress {index}", category="party")
    await create_outfit(client, title="Wool Suit", category="business")

    response = await client.post(
        "/api/outfits/search", json={"category": "party", "page": 1, "limit": 2}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 3
    assert data["totalPages"] == 2
    assert len(data["items"]) == 2
    assert all(item["category"] == "party" for item in data["items"])


async def test_search_with_location_reports_distance(client):
    await create_outfit(client)
    response = await client.post(
        "/api/outfits/search",
        json={"location": {"latitude": 37.7749, "longitude": -122.4194}, "sortBy": "proximity"},
    )
    items = response.json()["data"]["items"]
    assert len(items) == 1
    assert 0 < items[0]["distanceMeters"] < 8046.72


async def test_malformed_search_parameters_are_400(client):
    response = await client.post("/api/outfits/search", json={"minPrice": 90, "maxPrice": 10})
    assert response.status_code == 400
    assert response.json()["error"] == "minPrice must not exceed maxPrice"


async def test_outfits_by_owner_and_nearby(client):
    outfit = await create_outfit(client)
    by_owner = await client.get("/api/outfits/owner/owner-1")
    assert [item["id"] for item in by_owner.json()["data"]] == [outfit["id"]]

    nearby = await client.get("/api/outfits/nearby/37.7749/-122.4194", params={"radius": 5000})
    assert [item["id"] for item in nearby.json()["data"]] == [outfit["id"]]

    far = await client.get("/api/outfits/nearby/40.7128/-74.0060")
    assert far.json()["data"] == []


async def test_rental_flow_over_http(client):
    outfit = await create_outfit(client)
    rental = await create_rental(client, outfit["id"], hours=5)
    assert rental["status"] == "pending"
    assert rental["ownerId"] == "owner-1"
    assert rental["totalPrice"] == 50.0

    confirm = await client.post(f"/api/rentals/{rental['id']}/confirm")
    assert confirm.json()["data"]["status"] == "confirmed"

    again = await client.post(f"/api/rentals/{rental['id']}/confirm")
    assert again.status_code == 409
    assert again.json()["success"] is False

    early = await client.post(f"/api/rentals/{rental['id']}/activate")
    assert early.status_code == 409

    cancel = await client.post(f"/api/rentals/{rental['id']}/cancel", json={"reason": "Sick"})
    assert cancel.status_code == 200
    assert cancel.json()["data"]["cancelReason"] == "Sick"

    fetched = await client.get(f"/api/rentals/{rental['id']}")
    assert fetched.json()["data"]["status"] == "cancelled"

    by_renter = await client.get("/api/rentals/renter/renter-1")
    assert [item["id"] for item in by_renter.json()["data"]] == [rental["id"]]


async def test_cancel_without_body(client):
    outfit = await create_outfit(client)
    rental = await create_rental(client, outfit["id"])
    response = await client.post(f"/api/rentals/{rental['id']}/cancel")
    assert response.status_code == 200
    assert response.json()["data"]["cancelReason"] is None


async def test_transition_on_unknown_rental_is_404(client):
    response = await client.post("/api/rentals/unknown/return")
    assert response.status_code == 404
    assert response.json()["error"] == "Rental not found"


async def test_rental_for_unknown_outfit_is_404(client):
    start = datetime.now(timezone.utc) + timedelta(days=1)
    response = await client.post(
        "/api/rentals",
        json={
            "outfitId": "ghost",
            "renterId": "renter-1",
            "startDate": iso(start),
            "endDate": iso(start + timedelta(days=1)),
        },
    )
    assert response.status_code == 404


async def test_ratings_over_http(client):
    outfit = await create_outfit(client)
    ids = []
    for value in (5, 3, 4):
        response = await client.post(
            "/api/ratings",
            json={"targetType": "outfit", "targetId": outfit["id"], "rating": value, "fromUserId": "rater-1"},
        )
        assert response.status_code == 201, response.text
        ids.append(response.json()["data"]["id"])

    fetched = (await client.get(f"/api/outfits/{outfit['id']}")).json()["data"]
    assert (fetched["rating"], fetched["totalRatings"]) == (4.0, 3)

    assert (await client.delete(f"/api/ratings/{ids[1]}")).status_code == 200
    fetched = (await client.get(f"/api/outfits/{outfit['id']}")).json()["data"]
    assert (fetched["rating"], fetched["totalRatings"]) == (4.5, 2)

    listed = await client.get(f"/api/ratings/outfit/{outfit['id']}")
    assert len(listed.json()["data"]) == 2

    update = await client.put(f"/api/ratings/{ids[0]}", json={"rating": 7})
    assert update.status_code == 422


async def test_users_over_http(client):
    response = await client.post(
        "/api/users", json={"name": "Ana", "email": "Ana@Example.com", "phone": "+1 415 555 0100"}
    )
    assert response.status_code == 201
    user = response.json()["data"]
    assert user["email"] == "ana@example.com"
    assert user["totalRatings"] == 0

    duplicate = await client.post("/api/users", json={"name": "Ana B", "email": "ana@example.com"})
    assert duplicate.status_code == 409

    invalid = await client.post("/api/users", json={"name": "Bo", "email": "bo-at-example"})
    assert invalid.status_code == 422
    assert invalid.json()["errors"][0]["field"] == "email"

    rated = await client.post(
        "/api/ratings",
        json={"targetType": "user", "targetId": user["id"], "rating": 4, "fromUserId": "rater-1"},
    )
    assert rated.status_code == 201
    fetched = await client.get(f"/api/users/{user['id']}")
    assert fetched.json()["data"]["rating"] == 4.0
    assert len((await client.get(f"/api/ratings/user/{user['id']}")).json()["data"]) == 1

    assert (await client.get("/api/users/nobody")).status_code == 404


async def test_user_profile_update(client):
    created = await client.post("/api/users", json={"name": "Ana", "email": "ana@example.com"})
    user = created.json()["data"]
    await client.post("/api/users", json={"name": "Bo", "email": "bo@example.com"})

    response = await client.put(
        f"/api/users/{user['id']}",
        json={"name": "Ana Lima", "phone": "+1 415 555 0100", "rating": 5, "totalRatings": 9},
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["name"] == "Ana Lima"
    assert updated["phone"] == "+1 415 555 0100"
    assert updated["email"] == "ana@example.com"
    assert (updated["rating"], updated["totalRatings"]) == (0, 0)

    moved = await client.put(f"/api/users/{user['id']}", json={"email": "Ana.Lima@Example.com"})
    assert moved.json()["data"]["email"] == "ana.lima@example.com"

    taken = await client.put(f"/api/users/{user['id']}", json={"email": "bo@example.com"})
    assert taken.status_code == 409
    assert taken.json() == {"success": False, "error": "A user with email bo@example.com already exists"}

    invalid = await client.put(f"/api/users/{user['id']}", json={"name": "", "phone": "12"})
    assert invalid.status_code == 422
    assert {error["field"] for error in invalid.json()["errors"]} == {"name", "phone"}
    fetched = await client.get(f"/api/users/{user['id']}")
    assert fetched.json()["data"]["name"] == "Ana Lima"

    missing = await client.put("/api/users/nobody", json={"name": "Ghost"})
    assert missing.status_code == 404


@pytest.fixture
def failing_outfit_lookup(monkeypatch):
    async def explode(self, db, outfit_id):
        raise RuntimeError("secret detail")

    monkeypatch.setattr(OutfitService, "get_outfit", explode)


async def fetch_with_environment(database, environment: str) -> httpx.Response:
    app = create_app(config=Settings(ENVIRONMENT=environment), database=database)
    # Return the 500 response instead of re-raising into the test
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get("/api/outfits/any-id")


async def test_unexpected_error_hides_details_in_production(database, failing_outfit_lookup):
    response = await fetch_with_environment(database, "production")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Internal server error"}


async def test_unexpected_error_shows_details_in_development(database, failing_outfit_lookup):
    response = await fetch_with_environment(database, "development")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "secret detail"}
