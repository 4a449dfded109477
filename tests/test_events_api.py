"""
Tests for the event HTTP endpoints
"""

import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.db import Base, get_db
from app.services.event_service import EventService
from app.utils import security
from app.utils.security import CurrentUser, FirebaseTokenVerifier, InvalidTokenError, get_token_verifier
from main import app

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_events_api.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

OWNER = {"Authorization": "Bearer owner-token"}
OTHER = {"Authorization": "Bearer other-token"}

class FakeVerifier:
    """Stands in for Firebase token verification"""
    users = {
        "owner-token": CurrentUser(uid="owner-uid", email="owner@example.com"),
        "other-token": CurrentUser(uid="other-uid", email="other@example.com"),
    }

    def verify(self, token):
        if token not in self.users:
            raise InvalidTokenError("Token has expired")
        return self.users[token]

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client():
    """Create a test client backed by a fresh database"""
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_verifier] = lambda: FakeVerifier()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(bind=engine)

def event_payload(**overrides):
    payload = {
        "title": "Riverside Cleanup",
        "description": "Collect litter along the river bank and restore the walking path for the neighbourhood.",
        "eventDate": (datetime.now(timezone.utc) + timedelta(days=7)).isoformat(),
        "location": "Riverside Park",
        "type": "Cleanup",
        "thumbnailUrl": "https://example.com/cleanup.jpg",
        "createdBy": "owner@example.com",
    }
    payload.update(overrides)
    return payload

@pytest.fixture
def event_id(client):
    """Create an event owned by owner@example.com"""
    response = client.post("/events", json=event_payload())
    assert response.status_code == 201
    return response.json()["data"]["eventId"]

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

def test_create_event_returns_generated_id(client):
    """Test creating an event with every required field"""
    response = client.post("/events", json=event_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["success"] == True
    assert body["message"] == "Event created successfully"
    assert body["data"]["eventId"]

def test_create_event_applies_defaults(client):
    """Test optional fields default to empty values"""
    payload = event_payload()
    for key in ("type", "thumbnailUrl", "createdBy"):
        payload.pop(key)
    client.post("/events", json=payload)

    events = client.get("/events").json()["data"]
    assert len(events) == 1
    event = events[0]
    assert event["members"] == []
    assert event["type"] == ""
    assert event["thumbnailUrl"] == ""
    assert event["createdBy"] == ""
    assert event["createdAt"] is not None

@pytest.mark.parametrize("missing", ["title", "description", "eventDate", "location"])
def test_create_event_missing_required_field(client, missing):
    """Test a missing required field is rejected and nothing is stored"""
    payload = event_payload()
    payload.pop(missing)

    response = client.post("/events", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] == False
    assert body["error_code"] == "validation_error"
    assert client.get("/events").json()["data"] == []

def test_create_event_empty_title_rejected(client):
    response = client.post("/events", json=event_payload(title=""))
    assert response.status_code == 400

def test_create_event_malformed_date_rejected(client):
    response = client.post("/events", json=event_payload(eventDate="next tuesday"))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request body"

def test_list_events_uses_camel_case(client, event_id):
    events = client.get("/events").json()["data"]

    assert [e["id"] for e in events] == [event_id]
    assert "eventDate" in events[0]
    assert "event_date" not in events[0]

def test_get_event_requires_token(client, event_id):
    """Test single-event reads without a token are unauthorized"""
    response = client.get(f"/events/{event_id}")

    assert response.status_code == 401
    assert response.json()["error_code"] == "unauthorized"

def test_get_event_rejects_non_bearer_scheme(client, event_id):
    response = client.get(f"/events/{event_id}", headers={"Authorization": "Basic b3duZXI6cHc="})
    assert response.status_code == 401

def test_get_event_rejects_invalid_token(client, event_id):
    response = client.get(f"/events/{event_id}", headers={"Authorization": "Bearer expired"})
    assert response.status_code == 401

def test_get_event_with_valid_token(client, event_id):
    response = client.get(f"/events/{event_id}", headers=OTHER)

    assert response.status_code == 200
    event = response.json()["data"]
    assert event["id"] == event_id
    assert event["title"] == "Riverside Cleanup"

def test_get_unknown_event(client):
    response = client.get("/events/does-not-exist", headers=OWNER)
    assert response.status_code == 404
    assert response.json()["message"] == "Event not found"

def test_join_twice_adds_member_once(client, event_id):
    """Test joining is idempotent"""
    first = client.patch(f"/events/{event_id}", json={"userEmail": "alice@example.com"})
    second = client.patch(f"/events/{event_id}", json={"userEmail": "alice@example.com"})

    assert first.status_code == 200
    assert first.json()["data"]["modifiedCount"] == 1
    assert second.status_code == 200
    assert second.json()["data"]["modifiedCount"] == 0

    event = client.get(f"/events/{event_id}", headers=OWNER).json()["data"]
    assert event["members"].count("alice@example.com") == 1

def test_join_unknown_event(client):
    """Test joining a missing event does not create one"""
    response = client.patch("/events/does-not-exist", json={"userEmail": "alice@example.com"})

    assert response.status_code == 404
    assert client.get("/events").json()["data"] == []

def test_join_requires_valid_email(client, event_id):
    assert client.patch(f"/events/{event_id}", json={}).status_code == 400
    assert client.patch(f"/events/{event_id}", json={"userEmail": "not-an-email"}).status_code == 400

def test_replace_event_by_owner(client, event_id):
    """Test the creator can replace fields but not reassign ownership"""
    payload = event_payload(
        title="Riverside Cleanup (rescheduled)",
        location="Riverside Park, South Gate",
        createdBy="someone-else@example.com",
    )
    payload["members"] = ["alice@example.com", "alice@example.com", "bob@example.com"]

    response = client.put(f"/events/{event_id}", json=payload, headers=OWNER)

    assert response.status_code == 200
    assert response.json()["data"]["modifiedCount"] == 1
    event = client.get(f"/events/{event_id}", headers=OWNER).json()["data"]
    assert event["title"] == "Riverside Cleanup (rescheduled)"
    assert event["location"] == "Riverside Park, South Gate"
    assert event["createdBy"] == "owner@example.com"
    assert sorted(event["members"]) == ["alice@example.com", "bob@example.com"]

def test_replace_event_requires_token(client, event_id):
    response = client.put(f"/events/{event_id}", json=event_payload(title="Hijacked"))
    assert response.status_code == 401

def test_replace_event_by_non_owner(client, event_id):
    """Test a different user cannot replace the event"""
    response = client.put(f"/events/{event_id}", json=event_payload(title="Hijacked"), headers=OTHER)

    assert response.status_code == 403
    assert response.json()["error_code"] == "forbidden"
    event = client.get(f"/events/{event_id}", headers=OWNER).json()["data"]
    assert event["title"] == "Riverside Cleanup"

def test_replace_unknown_event(client):
    response = client.put("/events/does-not-exist", json=event_payload(), headers=OWNER)
    assert response.status_code == 404

def test_delete_event_then_get_is_not_found(client, event_id):
    """Test deleting removes the event"""
    response = client.delete(f"/events/{event_id}", headers=OWNER)

    assert response.status_code == 200
    assert response.json()["message"] == "Event deleted successfully"
    assert client.get(f"/events/{event_id}", headers=OWNER).status_code == 404

def test_delete_event_requires_token(client, event_id):
    assert client.delete(f"/events/{event_id}").status_code == 401

def test_delete_event_by_non_owner(client, event_id):
    response = client.delete(f"/events/{event_id}", headers=OTHER)

    assert response.status_code == 403
    assert client.get(f"/events/{event_id}", headers=OWNER).status_code == 200

def test_delete_unknown_event(client):
    assert client.delete("/events/does-not-exist", headers=OWNER).status_code == 404

def test_unexpected_error_is_generic_500(client, monkeypatch):
    """Test internal failures do not leak details"""
    def explode(db):
        raise RuntimeError("connection string password=hunter2")

    monkeypatch.setattr(EventService, "list_events", staticmethod(explode))
    response = TestClient(app, raise_server_exceptions=False).get("/events")

    assert response.status_code == 500
    assert response.json()["message"] == "Internal server error"
    assert "hunter2" not in response.text

def test_missing_firebase_credentials_is_unauthorized(client, event_id, monkeypatch):
    """Test an unconfigured identity provider rejects tokens with 401"""
    def no_credentials():
        raise RuntimeError("Firebase credentials not provided")

    monkeypatch.setattr(security, "get_firebase_app", no_credentials)
    app.dependency_overrides[get_token_verifier] = lambda: FirebaseTokenVerifier()
    response = TestClient(app, raise_server_exceptions=False).get(f"/events/{event_id}", headers=OWNER)

    assert response.status_code == 401
    assert response.json()["error_code"] == "unauthorized"
