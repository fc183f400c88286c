# tests/test_api.py
"""HTTP-level tests: board workflow, admin gating, blob store endpoints."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from motowash.main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="module")
def admin(client):
    resp = client.post("/api/v1/auth/login", json={"password": "test-pass"})
    assert resp.status_code == 200
    return {"X-Admin-Token": resp.json()["token"]}


@pytest.fixture(scope="module")
def catalog(client, admin):
    service = client.post("/api/v1/services", headers=admin, json={
        "name": "Completo", "price": 20000, "workshopPrice": 15000,
        "workerCommission": 5000, "workshopWorkerCommission": 3000,
    }).json()
    worker = client.post("/api/v1/workers", headers=admin, json={"name": "Ana"}).json()
    workshop = client.post("/api/v1/workshops", headers=admin, json={"name": "Taller Norte"}).json()
    return {"service": service["id"], "worker": worker["id"], "workshop": workshop["id"]}


def intake(client, catalog, **extra):
    resp = client.post("/api/v1/vehicles", json={"plate": "abc12d", "serviceId": catalog["service"], **extra})
    assert resp.status_code == 201
    return resp.json()


class TestHealth:
    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["database"] == "ok"
        assert body["store"] == "ready"


class TestAuth:
    def test_wrong_password(self, client):
        assert client.post("/api/v1/auth/login", json={"password": "nope"}).status_code == 401

    def test_catalog_write_needs_admin(self, client):
        resp = client.post("/api/v1/workers", json={"name": "Luis"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "NotAuthorized"

    def test_finance_needs_admin(self, client):
        assert client.get("/api/v1/finance/summary").status_code == 401
        assert client.get("/api/v1/expenses").status_code == 401


class TestBoardWorkflow:
    def test_full_lifecycle(self, client, catalog, admin):
        v = intake(client, catalog, phone="3001234567")
        assert v["plate"] == "ABC12D"
        assert v["status"] == "waiting"
        assert v["entryTime"].endswith("Z")

        resp = client.post("/api/v1/assignments/propose", json={"vehicleId": v["id"], "workerId": catalog["worker"]})
        assert resp.json() == {"pending": True, "vehicleId": v["id"], "workerId": catalog["worker"]}

        washing = client.post("/api/v1/assignments/confirm").json()
        assert washing["status"] == "washing"
        assert washing["workerId"] == catalog["worker"]
        assert client.get("/api/v1/assignments/pending").json()["pending"] is False

        board = client.get("/api/v1/board").json()
        lane = next(l for l in board["lanes"] if l["workerId"] == catalog["worker"])
        assert v["id"] in [x["id"] for x in lane["washing"]]

        ready = client.post(f"/api/v1/vehicles/{v['id']}/transition", json={"status": "ready"}).json()
        assert ready["completionTime"] is not None

        link = client.get(f"/api/v1/vehicles/{v['id']}/customer-link").json()
        assert link["url"].startswith("https://wa.me/573001234567")

        done = client.post(f"/api/v1/vehicles/{v['id']}/transition", json={"status": "delivered"}).json()
        assert done["status"] == "delivered"
        assert done["completionTime"] == ready["completionTime"]

        history = client.get("/api/v1/finance/history", headers=admin).json()
        assert history[0]["vehicle"]["id"] == v["id"]
        assert history[0]["revenue"] == 20000

        salary = client.get(f"/api/v1/finance/salaries/{catalog['worker']}", headers=admin).json()
        assert salary["salary"] >= 5000

    def test_missing_worker(self, client, catalog):
        v = intake(client, catalog)
        resp = client.post(f"/api/v1/vehicles/{v['id']}/transition", json={"status": "washing"})
        assert resp.status_code == 422
        assert resp.json()["error"] == "MissingWorker"

    def test_invalid_transition(self, client, catalog):
        v = intake(client, catalog)
        resp = client.post(f"/api/v1/vehicles/{v['id']}/transition", json={"status": "delivered"})
        assert resp.status_code == 409
        assert client.get(f"/api/v1/vehicles/{v['id']}").json()["status"] == "waiting"

    def test_unknown_vehicle(self, client):
        resp = client.post("/api/v1/vehicles/ghost/transition", json={"status": "ready"})
        assert resp.status_code == 404

    def test_unknown_service_at_intake(self, client):
        resp = client.post("/api/v1/vehicles", json={"plate": "x", "serviceId": "ghost"})
        assert resp.status_code == 404

    def test_quote(self, client, catalog):
        walk_in = client.get("/api/v1/vehicles/quote", params={"service_id": catalog["service"]}).json()
        workshop = client.get("/api/v1/vehicles/quote",
                              params={"service_id": catalog["service"], "workshop_id": catalog["workshop"]}).json()
        assert walk_in["price"] == 20000
        assert workshop["price"] == 15000

    def test_delete_needs_admin(self, client, catalog, admin):
        v = intake(client, catalog)
        assert client.delete(f"/api/v1/vehicles/{v['id']}").status_code == 401
        assert client.delete(f"/api/v1/vehicles/{v['id']}", headers=admin).status_code == 200
        assert client.get(f"/api/v1/vehicles/{v['id']}").status_code == 404


class TestFinance:
    def test_workshop_bill(self, client, catalog, admin):
        v = intake(client, catalog, workshopId=catalog["workshop"])
        client.post(f"/api/v1/vehicles/{v['id']}/transition", json={"status": "washing", "workerId": catalog["worker"]})
        client.post(f"/api/v1/vehicles/{v['id']}/transition", json={"status": "ready"})

        bill = client.get(f"/api/v1/finance/workshops/{catalog['workshop']}/bill", headers=admin).json()
        assert bill["name"] == "Taller Norte"
        assert v["id"] in [x["id"] for x in bill["vehicles"]]
        assert bill["total"] == 15000 * len(bill["vehicles"])

    def test_history_rejects_negative_limit(self, client, admin):
        assert client.get("/api/v1/finance/history", params={"limit": -1}, headers=admin).status_code == 422

    def test_summary(self, client, admin):
        summary = client.get("/api/v1/finance/summary", headers=admin).json()
        daily = summary["daily"]
        assert daily["net"] == daily["revenue"] - daily["commissions"] - daily["expenses"]


class TestBlobStore:
    def test_invalid_type(self, client):
        resp = client.post("/api/sync", json={"type": "cars", "data": []})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid type"}

    def test_sync_then_read(self, client):
        data = [{"id": "e1", "description": "Jabón", "amount": 2000, "date": "2026-02-20T10:30:00.000Z"}]
        assert client.post("/api/sync", json={"type": "expenses", "data": data}).json() == {"success": True}
        stored = client.get("/api/data").json()
        assert stored["expenses"] == data
        assert set(stored) == {"motos", "workers", "services", "workshops", "expenses"}
