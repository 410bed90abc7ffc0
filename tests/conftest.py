"""
Pytest configuration and shared fixtures.
"""

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

from barbershop.config import Settings
from barbershop.deps import get_now
from barbershop.main import create_app

# Tuesday, the day most tests book on; the clock starts the evening before
BOOKING_DAY = date(2030, 1, 15)
START_OF_TEST = datetime(2030, 1, 14, 18, 0)

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-password"

# Seeded catalogue ids
BEARD = 1  # 20 min
CUT_SHAMPOO = 2  # 30 min
CUT_SHAMPOO_BEARD = 5  # 40 min


def at(hour: int, minute: int, day: date = BOOKING_DAY) -> str:
    return datetime(day.year, day.month, day.day, hour, minute).isoformat()


class Clock:
    def __init__(self, now: datetime):
        self.now = now


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'barber.db'}",
        LOG_LEVEL="WARNING",
        JWT_SECRET_KEY="test-secret",
        SEED_DEFAULT_SERVICES=True,
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
    )


@pytest.fixture
def clock():
    return Clock(START_OF_TEST)


@pytest.fixture
def app(settings, clock):
    app = create_app(settings)
    app.dependency_overrides[get_now] = lambda: clock.now
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def register(client, username="mario", password="secret-pass", **extra) -> dict:
    payload = {
        "username": username,
        "password": password,
        "firstName": extra.get("first_name", "Mario"),
        "lastName": extra.get("last_name", "Rossi"),
        "phone": extra.get("phone", "555-0100"),
    }
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(client, username: str, password: str) -> dict:
    response = client.post("/api/auth/login", data={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def user(client):
    return register(client)


@pytest.fixture
def user_headers(client, user):
    return auth_headers(client, "mario", "secret-pass")


@pytest.fixture
def admin_headers(client):
    return auth_headers(client, ADMIN_USERNAME, ADMIN_PASSWORD)


@pytest.fixture
def book(client, user):
    def _book(hour, minute, service_id=CUT_SHAMPOO, user_id=None, day=BOOKING_DAY):
        return client.post(
            "/api/appointments",
            json={
                "userId": user_id or user["id"],
                "serviceId": service_id,
                "appointmentDate": at(hour, minute, day),
            },
        )

    return _book
