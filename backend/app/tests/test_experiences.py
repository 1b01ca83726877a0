"""
Tests for experience endpoints and the lifecycle rules behind them.
"""
from datetime import datetime, timedelta
import pytest
from sqlalchemy.exc import SQLAlchemyError
from app.core.exceptions import Forbidden, NotFound
from app.db.session import SessionLocal
from app.models.experience import Experience
from app.schemas.experience import ExperienceUpdate
from app.services import experience_service, experience_store
from app.services.image_service import ImageAssetManager
from app.services.user_service import find_user_by_id
from conftest import RecordingLocator, auth_headers

KANDY = {
    "title": "Kandy Lake Walk",
    "description": "Lovely evening",
    "provinceId": "2",
    "provinceName": "Central Province",
    "districtId": "21",
    "districtName": "Kandy District",
    "cityName": "Kandy",
    "images": [],
}

GALLE = {
    "title": "Galle Fort Sunset",
    "description": "Ramparts at dusk",
    "provinceId": "3",
    "provinceName": "Southern Province",
    "districtId": "31",
    "districtName": "Galle District",
    "cityName": "Galle",
    "images": [],
}


def create(client, token, **overrides):
    response = client.post("/api/experiences", json={**KANDY, **overrides}, headers=auth_headers(token))
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def test_create_experience(client, register):
    user, token = register(name="Alice")

    response = client.post("/api/experiences", json=KANDY, headers=auth_headers(token))

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    experience = body["data"]
    assert experience["id"]
    assert experience["title"] == "Kandy Lake Walk"
    assert experience["cityName"] == "Kandy"
    assert experience["createdBy"] == user["id"]
    assert experience["createdByName"] == "Alice"
    assert experience["updatedAt"] >= experience["createdAt"]


def test_create_ignores_client_supplied_author(client, register):
    alice, alice_token = register(name="Alice", username="alice1")
    bob, _ = register(name="Bob", username="bob1")

    experience = create(client, alice_token, createdBy=bob["id"], createdByName="Bob")

    assert experience["createdBy"] == alice["id"]
    assert experience["createdByName"] == "Alice"


def test_create_requires_authentication(client):
    response = client.post("/api/experiences", json=KANDY)
    assert response.status_code == 401
    assert response.json()["message"] == "Access token required"


@pytest.mark.parametrize("field", ["title", "description", "provinceId", "districtName", "cityName"])
def test_create_rejects_missing_field(client, register, field):
    _, token = register()
    payload = {k: v for k, v in KANDY.items() if k != field}

    response = client.post("/api/experiences", json=payload, headers=auth_headers(token))

    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert field in response.json()["message"]


def test_create_rejects_blank_title(client, register):
    _, token = register()
    response = client.post("/api/experiences", json={**KANDY, "title": "   "}, headers=auth_headers(token))
    assert response.status_code == 400


def test_create_accepts_numeric_location_ids(client, register):
    _, token = register()
    experience = create(client, token, provinceId=2, districtId=21)
    assert experience["provinceId"] == "2"
    assert experience["districtId"] == "21"


def test_get_after_create_returns_created_record(client, register):
    _, token = register()
    created = create(client, token, images=["https://cdn.example.com/a.jpg"])

    response = client.get(f"/api/experiences/{created['id']}")

    assert response.status_code == 200
    assert response.json()["data"] == created


def test_get_unknown_experience(client):
    response = client.get("/api/experiences/doesnotexist")
    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Experience not found"}


def test_list_is_public_and_filters(client, register):
    _, token = register()
    kandy = create(client, token)
    galle = create(client, token, **GALLE)

    everything = client.get("/api/experiences").json()
    assert everything["count"] == 2
    assert {e["id"] for e in everything["data"]} == {kandy["id"], galle["id"]}

    central = client.get("/api/experiences", params={"provinceId": "2"}).json()
    assert central["count"] == 1
    assert central["data"][0]["id"] == kandy["id"]

    by_city = client.get("/api/experiences", params={"districtId": "31", "cityName": "Galle"}).json()
    assert [e["id"] for e in by_city["data"]] == [galle["id"]]


def test_list_filters_are_and_combined(client, register):
    _, token = register()
    create(client, token)

    response = client.get("/api/experiences", params={"provinceId": "2", "cityName": "Galle"})

    assert response.status_code == 200
    assert response.json()["count"] == 0
    assert response.json()["data"] == []


def test_list_with_no_matches_is_empty(client):
    response = client.get("/api/experiences", params={"provinceId": "9"})
    assert response.status_code == 200
    assert response.json() == {"status": "success", "count": 0, "data": []}


def test_list_is_newest_first(client, register, db):
    _, token = register()
    first = create(client, token, title="First")
    second = create(client, token, title="Second")
    third = create(client, token, title="Third")

    base = datetime(2024, 1, 1)
    for offset, experience_id in enumerate([first["id"], second["id"], third["id"]]):
        row = db.query(Experience).filter(Experience.id == experience_id).first()
        row.created_at = base + timedelta(days=offset)
    db.commit()

    titles = [e["title"] for e in client.get("/api/experiences").json()["data"]]
    assert titles == ["Third", "Second", "First"]


def test_update_by_owner(client, register):
    alice, token = register()
    created = create(client, token)

    response = client.put(
        f"/api/experiences/{created['id']}",
        json={"title": "Kandy Lake at Night", "images": ["https://cdn.example.com/night.jpg"]},
        headers=auth_headers(token)
    )

    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["title"] == "Kandy Lake at Night"
    assert updated["description"] == "Lovely evening"
    assert updated["images"] == ["https://cdn.example.com/night.jpg"]
    assert updated["createdBy"] == alice["id"]
    assert updated["updatedAt"] >= updated["createdAt"]
    assert updated["createdAt"] == created["createdAt"]


def test_update_cannot_change_author(client, register):
    alice, alice_token = register(name="Alice", username="alice1")
    bob, _ = register(name="Bob", username="bob1")
    created = create(client, alice_token)

    response = client.put(
        f"/api/experiences/{created['id']}",
        json={"createdBy": bob["id"], "createdByName": "Bob", "title": "Still Alice's"},
        headers=auth_headers(alice_token)
    )

    assert response.status_code == 200
    assert response.json()["data"]["createdBy"] == alice["id"]
    assert response.json()["data"]["createdByName"] == "Alice"


def test_update_rejects_null_required_field(client, register):
    _, token = register()
    created = create(client, token)

    response = client.put(f"/api/experiences/{created['id']}", json={"title": None}, headers=auth_headers(token))

    assert response.status_code == 400
    assert client.get(f"/api/experiences/{created['id']}").json()["data"]["title"] == "Kandy Lake Walk"


def test_update_by_non_owner_is_forbidden(client, register):
    _, alice_token = register(name="Alice", username="alice1")
    _, bob_token = register(name="Bob", username="bob1")
    created = create(client, alice_token)

    response = client.put(
        f"/api/experiences/{created['id']}",
        json={"title": "Hijacked"},
        headers=auth_headers(bob_token)
    )

    assert response.status_code == 403
    assert response.json()["message"] == "You can only edit your own experiences"
    assert client.get(f"/api/experiences/{created['id']}").json()["data"] == created


def test_update_unknown_experience(client, register):
    _, token = register()
    response = client.put("/api/experiences/missing", json={"title": "x"}, headers=auth_headers(token))
    assert response.status_code == 404


def test_delete_by_non_owner_is_forbidden(client, register, locator):
    _, alice_token = register(name="Alice", username="alice1")
    _, bob_token = register(name="Bob", username="bob1")
    created = create(client, alice_token, images=["https://cdn.example.com/a.jpg"])

    response = client.delete(f"/api/experiences/{created['id']}", headers=auth_headers(bob_token))

    assert response.status_code == 403
    assert response.json()["message"] == "You can only delete your own experiences"
    assert locator.attempted == []
    assert client.get(f"/api/experiences/{created['id']}").json()["data"] == created


def test_delete_unknown_experience(client, register):
    _, token = register()
    response = client.delete("/api/experiences/missing", headers=auth_headers(token))
    assert response.status_code == 404


def test_delete_requires_authentication(client, register):
    _, token = register()
    created = create(client, token)
    response = client.delete(f"/api/experiences/{created['id']}")
    assert response.status_code == 401


def test_delete_cascades_to_every_image_even_when_one_fails(client, register, locator):
    locator.fail_on = {"https://cdn.example.com/a.jpg"}
    _, token = register()
    images = ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg", "https://cdn.example.com/c.jpg"]
    created = create(client, token, images=images)

    response = client.delete(f"/api/experiences/{created['id']}", headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Experience deleted successfully"}
    assert locator.attempted == images
    assert client.get(f"/api/experiences/{created['id']}").status_code == 404


def test_delete_keeps_images_shared_with_other_experiences(client, register, locator):
    _, token = register()
    shared = "https://cdn.example.com/shared.jpg"
    own = "https://cdn.example.com/own.jpg"
    first = create(client, token, images=[shared, own])
    create(client, token, title="Second visit", images=[shared])

    response = client.delete(f"/api/experiences/{first['id']}", headers=auth_headers(token))

    assert response.status_code == 200
    assert locator.attempted == [own]


def test_delete_keeps_shared_non_ascii_image(client, register, locator, db):
    _, token = register()
    shared = "https://cdn.example.com/experiences/café-kandy.jpg"
    first = create(client, token, images=[shared])
    second = create(client, token, title="Second visit", images=[shared])

    assert experience_store.image_referenced_elsewhere(shared, first["id"], db)

    response = client.delete(f"/api/experiences/{first['id']}", headers=auth_headers(token))

    assert response.status_code == 200
    assert locator.attempted == []
    assert client.get(f"/api/experiences/{second['id']}").json()["data"]["images"] == [shared]


def test_delete_survives_failing_shared_image_check(client, register, locator, monkeypatch):
    _, token = register()
    created = create(client, token, images=["https://cdn.example.com/a.jpg"])

    def broken_check(url, experience_id, db):
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(experience_store, "image_referenced_elsewhere", broken_check)

    response = client.delete(f"/api/experiences/{created['id']}", headers=auth_headers(token))

    assert response.status_code == 200
    # Sharing unknown, so the image is kept
    assert locator.attempted == []
    assert client.get(f"/api/experiences/{created['id']}").status_code == 404


def test_concurrent_delete_is_treated_as_success(client, register, db):
    """The record disappearing between the ownership check and the delete is not an error."""
    user, token = register()
    created = create(client, token, images=["https://cdn.example.com/a.jpg"])

    class RacingLocator(RecordingLocator):
        def delete(self, url):
            # Another request removes the record while this one cleans up images
            experience_store.delete_experience(created["id"], db)
            return super().delete(url)

    racing = RacingLocator()
    owner = find_user_by_id(user["id"], db)

    experience_service.delete_experience(owner, created["id"], db, ImageAssetManager([racing]))

    assert racing.attempted == ["https://cdn.example.com/a.jpg"]
    assert experience_store.get_experience(created["id"], db) is None


def test_service_enforces_ownership_with_string_ids(client, register, db):
    _, alice_token = register(name="Alice", username="alice1")
    bob, _ = register(name="Bob", username="bob1")
    created = create(client, alice_token)
    bob_user = find_user_by_id(bob["id"], db)

    with pytest.raises(Forbidden):
        experience_service.delete_experience(bob_user, created["id"], db, ImageAssetManager([]))
    with pytest.raises(NotFound):
        experience_service.get_experience("missing", db)


def test_alice_and_bob_scenario(client):
    register_response = client.post(
        "/api/auth/register",
        json={"name": "Alice", "username": "alice1", "password": "secret1", "confirmPassword": "secret1"}
    )
    assert register_response.status_code == 201
    alice = register_response.json()["data"]
    assert "password" not in alice["user"]
    assert alice["token"]

    bad_login = client.post("/api/auth/login", json={"username": "alice1", "password": "wrong"})
    assert bad_login.status_code == 401
    assert bad_login.json()["message"] == "Invalid credentials"

    created = client.post("/api/experiences", json=KANDY, headers=auth_headers(alice["token"]))
    assert created.status_code == 201
    experience = created.json()["data"]
    assert experience["createdByName"] == "Alice"

    bob = client.post(
        "/api/auth/register",
        json={"name": "Bob", "username": "bob1", "password": "secret2", "confirmPassword": "secret2"}
    ).json()["data"]
    forbidden = client.put(
        f"/api/experiences/{experience['id']}",
        json={"title": "Bob was here"},
        headers=auth_headers(bob["token"])
    )
    assert forbidden.status_code == 403

    deleted = client.delete(f"/api/experiences/{experience['id']}", headers=auth_headers(alice["token"]))
    assert deleted.status_code == 200

    assert client.get(f"/api/experiences/{experience['id']}").status_code == 404


def test_update_racing_delete_is_not_found(client, register, db, monkeypatch):
    """The record disappearing before the update commits reads as a missing experience."""
    user, token = register()
    created = create(client, token)
    owner = find_user_by_id(user["id"], db)
    real_get = experience_store.get_experience

    def get_then_delete_elsewhere(experience_id, session):
        experience = real_get(experience_id, session)
        other = SessionLocal()
        try:
            experience_store.delete_experience(experience_id, other)
        finally:
            other.close()
        return experience

    monkeypatch.setattr(experience_store, "get_experience", get_then_delete_elsewhere)

    with pytest.raises(NotFound):
        experience_service.update_experience(owner, created["id"], ExperienceUpdate(title="Too late"), db)

    monkeypatch.undo()
    assert experience_store.get_experience(created["id"], db) is None
