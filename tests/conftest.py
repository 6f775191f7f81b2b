import pytest
from fastapi.testclient import TestClient

import app as app_module
from backend import ParticipantRegistry
from room_policy import RoomPolicyTable
from schemas.rooms import RoomPolicy


class FakeConnection:
    """Stands in for PeerConnection; records every queued frame."""

    def __init__(self):
        self.sent = []

    def send(self, message_type, data):
        self.sent.append({"type": message_type, "data": data})
        return True


@pytest.fixture
def fake_connection():
    return FakeConnection


@pytest.fixture
def registry(monkeypatch):
    fresh = ParticipantRegistry()
    monkeypatch.setattr(app_module, "registry", fresh)
    return fresh


@pytest.fixture
def room_policies(monkeypatch):
    table = RoomPolicyTable([RoomPolicy(room_id="abc", password="secret", turns=2)])
    monkeypatch.setattr(app_module, "room_policies", table)
    return table


@pytest.fixture
def client(registry, room_policies):
    # One TestClient context so every websocket session shares the same event loop
    with TestClient(app_module.app) as test_client:
        yield test_client
