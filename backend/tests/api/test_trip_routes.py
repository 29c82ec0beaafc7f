from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.main import app
from app.schemas.trip import TripSnapshot
from app.services.mutations import default_trip_data
from app.services.trip_service import StaleVersionError

ANA = {"X-Member-Name": "Ana"}
BO = {"X-Member-Name": "Bo"}


class FakeStore:
    """In-memory stand-in for the trip_service read/write boundary."""

    def __init__(self):
        self.snapshot = TripSnapshot(trip_id="trip", version=1, data=default_trip_data())

    async def get_trip(self, db, trip_id):
        return self.snapshot

    async def apply_mutation(self, db, trip_id, mutate, expected_version=None):
        if expected_version is not None and expected_version != self.snapshot.version:
            raise StaleVersionError(trip_id, expected_version)
        data = mutate(self.snapshot.data)
        if data is not self.snapshot.data:
            self.snapshot = TripSnapshot(trip_id=trip_id, version=self.snapshot.version + 1, data=data)
        return self.snapshot

    async def replace_trip(self, db, trip_id, data, expected_version=None):
        return await self.apply_mutation(db, trip_id, lambda _: data, expected_version)


@pytest.fixture
def store(monkeypatch):
    store = FakeStore()
    monkeypatch.setattr("app.api.common.apply_mutation", store.apply_mutation)
    monkeypatch.setattr("app.api.trips.get_trip", store.get_trip)
    monkeypatch.setattr("app.api.trips.replace_trip", store.replace_trip)
    monkeypatch.setattr("app.api.expenses.get_trip", store.get_trip)
    return store


@pytest.fixture
def client(store):
    async def fake_db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = fake_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def join(client, *headers):
    for h in headers:
        assert client.post("/api/trips/trip/members", headers=h).status_code == 200


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_trip_info(client):
    body = client.get("/api/trip").json()
    assert set(body) == {"trip_id", "trip_name", "destination", "dates", "group_name"}


def test_get_trip_snapshot(client):
    body = client.get("/api/trips/trip").json()
    assert body["version"] == 1
    assert body["data"]["days"][0]["title"] == "Arrival"


def test_member_header_required(client):
    assert client.post("/api/trips/trip/members").status_code == 401
    assert client.post("/api/trips/trip/members", headers={"X-Member-Name": "  "}).status_code == 401


def test_join_is_idempotent(client, store):
    join(client, ANA, BO, ANA)
    assert store.snapshot.data.members == ["Ana", "Bo"]
    assert store.snapshot.version == 3


def test_expense_flow_and_settlement(client):
    join(client, ANA, BO)
    resp = client.post("/api/trips/trip/expenses", json={"description": "Dinner", "amount": "100"}, headers=ANA)
    assert resp.status_code == 201
    expense = resp.json()["data"]["expenses"][0]
    assert expense["paid_by"] == "Ana"
    assert expense["split_with"] == ["Ana", "Bo"]

    settlement = client.get("/api/trips/trip/settlement").json()
    assert settlement["balances"] == [
        {"member": "Ana", "balance": "50.00"},
        {"member": "Bo", "balance": "-50.00"},
    ]
    assert settlement["transfers"] == [{"from_member": "Bo", "to_member": "Ana", "amount": "50.00"}]


def test_settlement_amounts_rounded_to_cents(client):
    join(client, ANA, BO, {"X-Member-Name": "Cleo"})
    client.post("/api/trips/trip/expenses", json={"amount": "100"}, headers=ANA)
    settlement = client.get("/api/trips/trip/settlement").json()
    assert [t["amount"] for t in settlement["transfers"]] == ["33.33", "33.33"]
    assert settlement["balances"][0] == {"member": "Ana", "balance": "66.67"}


def test_edit_expense_and_toggle_beneficiary(client, store):
    join(client, ANA, BO)
    client.post("/api/trips/trip/expenses", json={}, headers=BO)
    resp = client.patch("/api/trips/trip/expenses/1", json={"amount": "nope", "category": "food"}, headers=ANA)
    assert resp.status_code == 200
    assert resp.json()["data"]["expenses"][0]["amount"] == "0"

    client.post("/api/trips/trip/expenses/1/beneficiaries/Bo", headers=ANA)
    assert store.snapshot.data.expenses[0].split_with == ["Ana"]
    assert store.snapshot.data.expenses[0].paid_by == "Bo"


def test_unknown_item_is_404(client):
    assert client.delete("/api/trips/trip/expenses/9", headers=ANA).status_code == 404
    assert client.patch("/api/trips/trip/days/9", json={"title": "x"}, headers=ANA).status_code == 404


def test_stale_version_is_409(client):
    resp = client.post("/api/trips/trip/days?version=7", json={"title": "Beach"}, headers=ANA)
    assert resp.status_code == 409
    resp = client.post("/api/trips/trip/days?version=1", json={"title": "Beach"}, headers=ANA)
    assert resp.status_code == 201
    assert resp.json()["version"] == 2


def test_ideas_vote_once_per_member(client, store):
    client.post("/api/trips/trip/ideas", json={"kind": "restaurant", "text": "Satay"}, headers=ANA)
    client.post("/api/trips/trip/ideas/1/vote", headers=BO)
    resp = client.post("/api/trips/trip/ideas/1/vote", headers=BO)
    idea = resp.json()["data"]["ideas"][0]
    assert idea["author"] == "Ana"
    assert idea["votes"] == 1


def test_checklist_toggle(client, store):
    resp = client.post("/api/trips/trip/checklists/packing/items/1/toggle", headers=ANA)
    assert resp.status_code == 200
    assert store.snapshot.data.packing[0].done is True
    assert client.post("/api/trips/trip/checklists/shopping/items/1/toggle", headers=ANA).status_code == 422


def test_stats(client):
    join(client, ANA, BO)
    client.post("/api/trips/trip/expenses", json={"amount": "30", "category": "transport"}, headers=ANA)
    stats = client.get("/api/trips/trip/stats").json()
    assert stats["total"] == "30.00"
    assert stats["per_person"] == "15.00"
    assert stats["by_category"] == {"transport": "30.00"}


def test_replace_whole_document(client, store):
    resp = client.put(
        "/api/trips/trip",
        json={"version": 1, "data": {"members": ["Ana"], "expenses": None}},
        headers=ANA,
    )
    assert resp.status_code == 200
    assert store.snapshot.data.members == ["Ana"]
    assert store.snapshot.data.days == []
    assert client.put("/api/trips/trip", json={"version": 1, "data": {}}, headers=ANA).status_code == 409


def test_websocket_sends_current_snapshot(client):
    with client.websocket_connect("/api/trips/trip/ws") as ws:
        message = ws.receive_json()
    assert message["trip_id"] == "trip"
    assert message["version"] == 1


def test_edit_expense_with_null_fields_keeps_them(client, store):
    join(client, ANA)
    client.post("/api/trips/trip/expenses", json={"description": "Fuel", "category": "transport"}, headers=ANA)
    resp = client.patch("/api/trips/trip/expenses/1", json={"description": None, "category": None}, headers=ANA)
    assert resp.status_code == 200
    expense = resp.json()["data"]["expenses"][0]
    assert (expense["description"], expense["category"]) == ("Fuel", "transport")
    TripSnapshot.model_validate(store.snapshot.model_dump(mode="json"))
    assert client.get("/api/trips/trip").status_code == 200


def test_oversized_amount_counts_as_zero(client):
    join(client, ANA, BO)
    resp = client.post("/api/trips/trip/expenses", json={"amount": "1e30"}, headers=ANA)
    assert resp.status_code == 201
    client.patch("/api/trips/trip/expenses/1", json={"amount": "-9e20"}, headers=ANA)

    stats = client.get("/api/trips/trip/stats")
    assert stats.status_code == 200
    assert stats.json()["total"] == "0.00"
    settlement = client.get("/api/trips/trip/settlement")
    assert settlement.status_code == 200
    assert settlement.json()["transfers"] == []


def test_vote_with_stale_version_is_409(client, store):
    client.post("/api/trips/trip/ideas", json={"kind": "restaurant", "text": "Satay"}, headers=ANA)
    assert client.post("/api/trips/trip/ideas/1/vote?version=1", headers=BO).status_code == 409
    resp = client.post("/api/trips/trip/ideas/1/vote?version=2", headers=BO)
    assert resp.status_code == 200
    assert resp.json()["data"]["ideas"][0]["votes"] == 1


def test_member_name_too_long_is_400(client):
    assert client.post("/api/trips/trip/members", headers={"X-Member-Name": "x" * 41}).status_code == 400
    assert client.post("/api/trips/trip/members", headers={"X-Member-Name": "x" * 40}).status_code == 200
