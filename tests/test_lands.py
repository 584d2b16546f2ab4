# tests/test_lands.py

"""
Tests for land record endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch


NEW_LAND = {
    "title": "Plot A",
    "location": "Kailua, Oahu",
    "size": 2.5,
    "zoning": "Residential",
    "price": 450000,
}


def test_landowner_created_land_is_always_pending(client: TestClient, fake_db, login_as, landowner_user):
    login_as(landowner_user)

    with patch("routers.lands.send_webhook_message") as webhook:
        response = client.post(
            "/lands",
            json={**NEW_LAND, "owner_id": "someone-else"},
        )

    assert response.status_code == 201
    data = response.json()
    assert data["ownership_status"] == "pending"
    assert data["owner_id"] == landowner_user.id
    assert data["verified_by"] is None
    assert data["size_unit"] == "acres"
    webhook.assert_called_once()

    stored = fake_db.rows("land_records")[0]
    assert stored["ownership_status"] == "pending"


def test_admin_created_land_is_verified(client: TestClient, fake_db, login_as, admin_user):
    login_as(admin_user)

    with patch("routers.lands.send_webhook_message") as webhook:
        response = client.post("/lands", json=NEW_LAND)

    assert response.status_code == 201
    assert response.json()["ownership_status"] == "verified"
    assert response.json()["verified_by"] == admin_user.id
    webhook.assert_not_called()


def test_public_user_cannot_create_land(client: TestClient, fake_db, login_as, public_user):
    login_as(public_user)
    response = client.post("/lands", json=NEW_LAND)
    assert response.status_code == 403
    assert fake_db.rows("land_records") == []


def test_create_land_requires_positive_size(client: TestClient, fake_db, login_as, landowner_user):
    login_as(landowner_user)
    response = client.post("/lands", json={**NEW_LAND, "size": 0})
    assert response.status_code == 422


def test_search_returns_only_verified(client: TestClient, seeded_profiles, login_as, public_user, landowner_user, seed_land):
    seed_land("Plot A", owner_id=landowner_user.id, status="verified")
    seed_land("Plot B", owner_id=landowner_user.id, status="pending")
    seed_land("Plot C", owner_id=None, status="disputed")

    login_as(public_user)
    response = client.get("/lands/search")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert [l["title"] for l in data["data"]] == ["Plot A"]
    assert data["data"][0]["owner"]["full_name"] == "Lani Owner"


def test_search_filters_and_sorts(client: TestClient, fake_db, login_as, public_user, seed_land):
    seed_land("Cheap Farm", zoning="Agricultural", price=1000, size=10)
    seed_land("Beach Lot", zoning="Residential", price=900000, size=1)
    seed_land("Mystery Lot", zoning="Residential", price=None, size=3)

    login_as(public_user)

    response = client.get("/lands/search", params={"min_price": 500})
    assert {l["title"] for l in response.json()["data"]} == {"Cheap Farm", "Beach Lot"}

    response = client.get("/lands/search", params={"sort": "price_high"})
    assert [l["title"] for l in response.json()["data"]] == ["Beach Lot", "Cheap Farm", "Mystery Lot"]

    response = client.get("/lands/search", params={"q": "lot", "zoning": "resid", "sort": "size_large"})
    assert [l["title"] for l in response.json()["data"]] == ["Mystery Lot", "Beach Lot"]


def test_my_lands_with_counts(client: TestClient, fake_db, login_as, landowner_user, other_landowner_user, seed_land):
    seed_land("Mine 1", owner_id=landowner_user.id, status="verified")
    seed_land("Mine 2", owner_id=landowner_user.id, status="pending")
    seed_land("Theirs", owner_id=other_landowner_user.id, status="pending")

    login_as(landowner_user)
    response = client.get("/lands/mine")

    assert response.status_code == 200
    data = response.json()
    assert [l["title"] for l in data["data"]] == ["Mine 2", "Mine 1"]
    assert data["counts"] == {"total": 2, "verified": 1, "pending": 1, "disputed": 0}


def test_owner_cannot_change_ownership_status(client: TestClient, fake_db, login_as, landowner_user, seed_land):
    land = seed_land("Mine", owner_id=landowner_user.id, status="pending")

    login_as(landowner_user)
    response = client.put(f"/lands/{land['id']}", json={"ownership_status": "verified"})

    assert response.status_code == 403
    assert fake_db.find("land_records", land["id"])["ownership_status"] == "pending"


def test_owner_edits_descriptive_fields(client: TestClient, fake_db, login_as, landowner_user, seed_land):
    land = seed_land("Mine", owner_id=landowner_user.id)

    login_as(landowner_user)
    response = client.put(f"/lands/{land['id']}", json={"description": "  Ocean view  ", "price": 5})

    assert response.status_code == 200
    assert response.json()["description"] == "Ocean view"
    assert fake_db.find("land_records", land["id"])["updated_at"]


def test_non_owner_cannot_edit_or_delete(client: TestClient, fake_db, login_as, other_landowner_user, landowner_user, seed_land):
    land = seed_land("Mine", owner_id=landowner_user.id)

    login_as(other_landowner_user)
    assert client.put(f"/lands/{land['id']}", json={"title": "Stolen"}).status_code == 403
    assert client.delete(f"/lands/{land['id']}").status_code == 403
    assert fake_db.find("land_records", land["id"])["title"] == "Mine"


def test_owner_deletes_own_land(client: TestClient, fake_db, login_as, landowner_user, seed_land):
    land = seed_land("Mine", owner_id=landowner_user.id)

    login_as(landowner_user)
    response = client.delete(f"/lands/{land['id']}")

    assert response.status_code == 200
    assert fake_db.rows("land_records") == []


def test_get_missing_land_is_404(client: TestClient, fake_db, login_as, public_user):
    login_as(public_user)
    assert client.get("/lands/does-not-exist").status_code == 404


def test_admin_list_requires_admin(client: TestClient, fake_db, login_as, landowner_user):
    login_as(landowner_user)
    assert client.get("/lands").status_code == 403


def test_admin_verifies_land_and_owner_is_notified(client: TestClient, fake_db, login_as, admin_user, landowner_user, seed_land):
    land = seed_land("Plot A", owner_id=landowner_user.id, status="pending")

    login_as(admin_user)
    response = client.patch(f"/lands/{land['id']}/status", json={"status": "verified"})

    assert response.status_code == 200
    assert response.json()["verified_by"] == admin_user.id

    notes = fake_db.rows("notifications", user_id=landowner_user.id)
    assert len(notes) == 1
    assert notes[0]["type"] == "success"
    assert "Plot A" in notes[0]["message"]


def test_status_unchanged_sends_no_notification(client: TestClient, fake_db, login_as, admin_user, landowner_user, seed_land):
    land = seed_land("Plot A", owner_id=landowner_user.id, status="verified")

    login_as(admin_user)
    client.patch(f"/lands/{land['id']}/status", json={"status": "verified"})

    assert fake_db.rows("notifications") == []


def test_verification_request_notifies_owner(client: TestClient, fake_db, login_as, public_user, landowner_user, seed_land):
    land = seed_land("Plot A", owner_id=landowner_user.id)

    login_as(public_user)
    response = client.post(f"/lands/{land['id']}/verification-request")

    assert response.status_code == 200
    notes = fake_db.rows("notifications", user_id=landowner_user.id)
    assert len(notes) == 1
    assert notes[0]["title"] == "Ownership Verification Request"
    assert notes[0]["type"] == "info"
    assert "Pat Public" in notes[0]["message"]


def test_verification_request_without_owner_is_400(client: TestClient, fake_db, login_as, public_user, seed_land):
    land = seed_land("Orphan", owner_id=None)

    login_as(public_user)
    response = client.post(f"/lands/{land['id']}/verification-request")

    assert response.status_code == 400
    assert fake_db.rows("notifications") == []


def test_verification_requests_are_rate_limited(client: TestClient, fake_db, login_as, public_user, landowner_user, seed_land):
    land = seed_land("Plot A", owner_id=landowner_user.id)
    login_as(public_user)

    with patch("routers.lands.settings") as settings:
        settings.VERIFICATION_REQUEST_LIMIT = 2
        settings.VERIFICATION_REQUEST_WINDOW_SECONDS = 60
        codes = [client.post(f"/lands/{land['id']}/verification-request").status_code for _ in range(3)]

    assert codes == [200, 200, 429]
    assert len(fake_db.rows("notifications")) == 2


def test_storage_errors_map_to_http(client: TestClient, fake_db, login_as, landowner_user):
    fake_db.fail_on[("land_records", "insert")] = Exception("new row violates row-level security policy")

    login_as(landowner_user)
    with patch("routers.lands.send_webhook_message"):
        response = client.post("/lands", json=NEW_LAND)

    assert response.status_code == 403
