"""Shared fixtures: an app on in-memory SQLite plus helpers for users and events."""

from datetime import timedelta
import itertools
import pytest

from app import create_app
from app.extensions import db
from app.models import User
from app.models.enums import UserRole
from app.schemas import CreateEventRequest, SignupRequest
from app.services import EventService, UserService
from app.utils.auth import Principal
from app.utils.clock import utcnow

_phone_numbers = itertools.count(5550000001)

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
    "RATELIMIT_ENABLED": False,
    "RATELIMIT_STORAGE_URI": "memory://",
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def signup_payload(username, role=UserRole.PLAYER, **overrides):
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "phone_number": str(next(_phone_numbers)),
        "password": "secret123",
        "role": role.value,
    }
    if role == UserRole.PLAYER:
        payload["game_id"] = f"{username}-gid"
        payload["in_game_name"] = f"{username}_ign"
    payload.update(overrides)
    return payload


def sign_up(client, username, role=UserRole.PLAYER):
    """Sign up through the API and return (user dict, auth headers)."""
    response = client.post("/api/auth/signup", json=signup_payload(username, role))
    assert response.status_code == 201, response.get_json()
    body = response.get_json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


def principal_for(username) -> Principal:
    return Principal.from_user(User.query.filter_by(username=username).first())


def event_payload(**overrides):
    """A valid create-event body whose registration window is open right now."""
    now = utcnow()
    payload = {
        "event_name": "Friday Night Cup",
        "game_name": "Valorant",
        "description": "Weekly community tournament",
        "event_date": (now + timedelta(days=3)).date().isoformat(),
        "event_start_time": "18:00:00",
        "event_end_time": "22:00:00",
        "registration_open_date": (now - timedelta(hours=1)).isoformat(),
        "registration_close_date": (now + timedelta(days=1)).isoformat(),
        "participation_type": "SOLO",
        "team_size": 1,
        "max_participants": 10,
        "min_participants": 1,
        "is_paid": False,
    }
    payload.update(overrides)
    return payload


def create_principal(username, role=UserRole.PLAYER) -> Principal:
    """Sign up through the service layer and return the new user's Principal."""
    UserService.sign_up(SignupRequest(**signup_payload(username, role)))
    return principal_for(username)


def create_open_event(organizer: Principal, **overrides):
    """Create and publish an event whose registration is open now."""
    event = EventService.create_event(organizer, CreateEventRequest(**event_payload(**overrides)))
    return EventService.publish_event(event.id, organizer)
