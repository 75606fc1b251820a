"""Mini README: Tests for the FastAPI dashboard endpoints.

Structure:
    * client fixture - application wired to a small explicit ledger.
    * banking endpoints - success payloads and error mapping.
    * pooling endpoints - preview leaves the ledger alone, allocate commits.
    * route endpoints - filters, baseline selection and comparisons.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fuelcompliance import ComplianceService
from fuelcompliance.configuration import ComplianceSettings
from fuelcompliance.interface import create_application
from fuelcompliance.ledger import ComplianceBalance, LedgerStore


@pytest.fixture()
def service() -> ComplianceService:
    store = LedgerStore(
        balances=[
            ComplianceBalance("A", 2025, 300.0),
            ComplianceBalance("B", 2025, -100.0),
            ComplianceBalance("C", 2025, -50.0),
        ]
    )
    return ComplianceService(store, settings=ComplianceSettings(seed_demo_data=True))


@pytest.fixture()
def client(service: ComplianceService) -> TestClient:
    return TestClient(create_application(service))


def test_dashboard_renders(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert "FuelEU Compliance Dashboard" in response.text
    assert "R002" in response.text
    assert 'action="/banking/bank"' in response.text
    assert 'action="/banking/apply"' in response.text
    assert 'formaction="/pools/preview"' in response.text
    assert 'action="/pools/allocate"' in response.text
    assert 'name="ship_ids" value="B"' in response.text
    assert 'action="/routes"' in response.text
    assert 'action="/routes/R002/baseline"' in response.text


def test_balances_endpoint_lists_ships(client: TestClient) -> None:
    payload = client.get("/balances").json()
    assert [ship["status"] for ship in payload["ships"]] == ["surplus", "deficit", "deficit"]
    assert payload["metrics"]["net_balance_gco2eq"] == pytest.approx(150.0)


def test_bank_endpoint_commits_and_reports_reserve(client: TestClient) -> None:
    response = client.post("/banking/bank", data={"ship_id": "A", "amount": "120"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["transaction"]["balance_after"] == pytest.approx(180.0)
    assert payload["banked_gco2eq"] == pytest.approx(120.0)

    history = client.get("/ships/A/history").json()
    assert [t["kind"] for t in history["transactions"]] == ["bank"]


def test_bank_endpoint_maps_errors(client: TestClient) -> None:
    response = client.post("/banking/bank", data={"ship_id": "A", "amount": "301"})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "insufficient_balance"
    assert detail["context"]["available"] == pytest.approx(300.0)

    response = client.post("/banking/bank", data={"ship_id": "A", "amount": "-5"})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "invalid_amount"

    response = client.post("/banking/bank", data={"ship_id": "Z", "amount": "1"})
    assert response.status_code == 404
    assert client.get("/ships/Z/history").status_code == 404


def test_apply_endpoint_reports_adjustment(service: ComplianceService, client: TestClient) -> None:
    service.bank("A", 300.0)
    service.open_period(ComplianceBalance("A", 2026, -40.0))

    response = client.post("/banking/apply", data={"ship_id": "A", "amount": "100"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["actual_amount_applied"] == pytest.approx(40.0)
    assert payload["warning"]
    assert payload["banked_gco2eq"] == pytest.approx(260.0)

    response = client.post("/banking/apply", data={"ship_id": "A", "amount": "1"})
    assert response.json()["detail"]["error"] == "not_in_deficit"


def test_pool_preview_does_not_commit(service: ComplianceService, client: TestClient) -> None:
    response = client.post("/pools/preview", data={"ship_ids": ["A", "B"]})
    assert response.status_code == 200
    assert response.json()["is_valid"] is True
    assert service.store.get_transaction_history() == []


def test_pool_allocate_commits(service: ComplianceService, client: TestClient) -> None:
    response = client.post("/pools/allocate", data={"ship_ids": ["A", "B", "C"]})
    assert response.status_code == 200
    payload = response.json()
    assert [a["balance_after"] for a in payload["allocations"]] == [150.0, 0.0, 0.0]
    assert payload["improved_ships"] == 2
    assert service.get_balance("A").value_gco2eq == pytest.approx(150.0)


def test_pool_allocate_rejects_single_member(client: TestClient) -> None:
    response = client.post("/pools/allocate", data={"ship_ids": ["A"]})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "insufficient_members"


def test_route_endpoints(client: TestClient) -> None:
    routes = client.get("/routes", params={"fuel_type": "LNG"}).json()
    assert [route["route_id"] for route in routes["routes"]] == ["R002", "R005"]
    assert client.get("/routes", params={"fuel_type": "Coal"}).status_code == 400
    blank = client.get("/routes", params={"vessel_type": "", "fuel_type": "", "year": ""}).json()
    assert len(blank["routes"]) == 5
    assert client.get("/routes", params={"year": "next"}).status_code == 400

    assert client.post("/routes/R002/baseline").status_code == 200
    assert client.post("/routes/R999/baseline").status_code == 404

    comparison = client.get("/routes/comparison").json()
    assert comparison["total_routes"] == 4
    assert all(item["baseline_route_id"] == "R002" for item in comparison["comparisons"])


@pytest.mark.parametrize("endpoint", ["/banking/bank", "/banking/apply"])
@pytest.mark.parametrize("amount", ["abc", "12,5"])
def test_banking_endpoints_reject_unparseable_amounts(
    service: ComplianceService, client: TestClient, endpoint: str, amount: str
) -> None:
    ship_id = "A" if endpoint == "/banking/bank" else "B"
    response = client.post(endpoint, data={"ship_id": ship_id, "amount": amount})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "invalid_amount"
    assert service.store.get_transaction_history() == []


def test_history_endpoint_filters_by_kind(service: ComplianceService, client: TestClient) -> None:
    service.bank("A", 50.0)
    service.allocate_pool(service.propose_pool(["A", "B"]))

    pooled = client.get("/ships/A/history", params={"kind": "pool"}).json()
    assert [t["kind"] for t in pooled["transactions"]] == ["pool"]
    banked = client.get("/ships/A/history", params={"kind": "Bank"}).json()
    assert [t["amount"] for t in banked["transactions"]] == [50.0]
    assert client.get("/ships/A/history", params={"kind": "transfer"}).status_code == 400
