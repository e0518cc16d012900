from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from core.store import DeviceInfoStore
from main import create_app
from tests.fakes import FakeFirestore


@pytest.fixture
def firestore_client():
    return FakeFirestore()


@pytest.fixture
def store(firestore_client):
    return DeviceInfoStore(firestore_client)


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


@pytest.fixture
def add_user(firestore_client):
    """Seed a document into the users collection."""
    def _add_user(email, ip_address, timestamp=None):
        firestore_client.collection("users").add({
            "email": email,
            "ipAddress": ip_address,
            "timestamp": timestamp or datetime.now(timezone.utc),
        })
    return _add_user


@pytest.fixture
def device_payload() -> dict:
    return {
        "email": "Unknown",
        "browser": "Chrome",
        "os": "Windows",
        "deviceType": "desktop",
        "ipAddress": "1.2.3.4",
    }
