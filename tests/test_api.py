from __future__ import annotations

from fastapi.testclient import TestClient

from solar_sizing.api import dependencies
from solar_sizing.api.app import create_app
from solar_sizing.application import SizingApplication
from solar_sizing.persistence import PersistenceService


def create_test_client(persistence: PersistenceService, advisor) -> TestClient:
    """Build a FastAPI test client with dependency overrides for persistence."""
    app = create_app()

    def get_app_service() -> SizingApplication:
        return SizingApplication(
            save_outputs=False,
            persistence=persistence,
            advisor=advisor,
            result_builder=None,
        )

    app.dependency_overrides[dependencies.get_application_service] = get_app_service
    app.dependency_overrides[dependencies.get_persistence_service] = lambda: persistence
    return TestClient(app)


def test_catalog_endpoints(persistence: PersistenceService, stub_advisor):
    client = create_test_client(persistence, stub_advisor)

    appliances = client.get("/api/catalog/appliances", params={"search": "air"})
    assert appliances.status_code == 200
    assert {item["appliance_id"] for item in appliances.json()} == {"ac_1hp", "ac_2hp"}

    regions = client.get("/api/catalog/regions").json()
    assert [region["index"] for region in regions] == [0, 1, 2]
    assert regions[1]["peak_sun_hours"] == 4.8

    panels = client.get("/api/catalog/panels").json()
    assert panels[0] == {"watts": 450, "label": "Longi 450W Mono Half-cell"}


def test_inverter_catalog_falls_back_then_uses_stored(persistence: PersistenceService, stub_advisor):
    client = create_test_client(persistence, stub_advisor)

    builtin = client.get("/api/inverters").json()
    assert builtin[0]["id"] is None
    assert builtin[0]["max_dc_voltage_v"] == 550.0

    created = client.post(
        "/api/inverters",
        json={"label": "Test 4kW", "brand": "Test", "capacity_kw": 4.0, "phase_type": "1-Phase"},
    )
    assert created.status_code == 200
    assert created.json()["phase_type"] == "single-phase"
    assert created.json()["id"] is not None

    stored = client.get("/api/inverters").json()
    assert [item["label"] for item in stored] == ["Test 4kW"]


def test_inverter_validation(persistence: PersistenceService, stub_advisor):
    client = create_test_client(persistence, stub_advisor)
    resp = client.post("/api/inverters", json={"label": "Bad", "capacity_kw": 0})
    assert resp.status_code == 422
    resp = client.post("/api/inverters", json={"label": "Bad", "capacity_kw": 5, "phase_type": "two"})
    assert resp.status_code == 422


def test_sizing_and_runs(persistence: PersistenceService, stub_advisor, device_session_data):
    """Exercise /api/sizing and /api/runs endpoints."""
    client = create_test_client(persistence, stub_advisor)
    resp = client.post("/api/sizing", json=device_session_data)
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"]["required_system_size_kwp"] == 1.4
    assert data["result"]["number_of_panels"] == 3
    assert data["result"]["string_design"]["connection_description"] == "1 string x 3 panels in series"
    assert data["advice"] is None

    runs = client.get("/api/runs").json()
    assert len(runs) == 1
    assert runs[0]["id"] == data["calculation_id"]


def test_sizing_validation_errors(persistence: PersistenceService, stub_advisor):
    client = create_test_client(persistence, stub_advisor)

    bad_hours = {"appliances": [{"appliance_id": "fan", "hours_per_day": 25}]}
    assert client.post("/api/sizing", json=bad_hours).status_code == 422

    bad_efficiency = {"config": {"system_efficiency": 1.5}}
    assert client.post("/api/sizing", json=bad_efficiency).status_code == 422

    bad_region = {"region_index": 9}
    resp = client.post("/api/sizing", json=bad_region)
    assert resp.status_code == 422
    assert "region" in resp.json()["detail"].lower()


def test_consultation(persistence: PersistenceService, stub_advisor, bill_session_data):
    client = create_test_client(persistence, stub_advisor)
    resp = client.post("/api/consultation", json={**bill_session_data, "label": "Bill family"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["label"] == "Bill family"
    assert data["advice"] == stub_advisor.text
    assert data["advice_available"] is True
    assert data["result"]["recommended_battery_size_kwh"] == 5.6


def test_sessions_lifecycle(persistence: PersistenceService, stub_advisor, catalog_session_data):
    client = create_test_client(persistence, stub_advisor)

    created = client.post("/api/sessions", json={"name": "Tran", "data": catalog_session_data})
    assert created.status_code == 200
    session_id = created.json()["id"]
    assert created.json()["data"]["region_index"] == 2

    listed = client.get("/api/sessions").json()
    assert [item["name"] for item in listed] == ["Tran"]
    assert client.get(f"/api/sessions/{session_id}").status_code == 200

    run = client.post(f"/api/sessions/{session_id}/run", params={"advice": True})
    assert run.status_code == 200
    assert run.json()["session_id"] == session_id
    assert run.json()["advice"] == stub_advisor.text

    assert client.delete(f"/api/sessions/{session_id}").status_code == 204
    assert client.get(f"/api/sessions/{session_id}").status_code == 404
    assert client.delete(f"/api/sessions/{session_id}").status_code == 404
    assert client.post(f"/api/sessions/{session_id}/run").status_code == 404
    # the calculation survives the session
    assert len(client.get("/api/runs").json()) == 1


def test_session_upsert_by_name(persistence: PersistenceService, stub_advisor, catalog_session_data):
    client = create_test_client(persistence, stub_advisor)

    first = client.post("/api/sessions", json={"name": "Tran", "data": catalog_session_data})
    assert first.status_code == 200

    updated = client.post(
        "/api/sessions",
        json={"name": "Tran", "data": {**catalog_session_data, "region_index": 0}},
    )
    assert updated.status_code == 200
    assert updated.json()["id"] == first.json()["id"]
    assert updated.json()["data"]["region_index"] == 0
    assert updated.json()["updated_at"] is not None


def test_inverter_upsert_by_label(persistence: PersistenceService, stub_advisor):
    client = create_test_client(persistence, stub_advisor)
    payload = {"label": "Test 4kW", "brand": "Test", "capacity_kw": 4.0}

    first = client.post("/api/inverters", json=payload)
    updated = client.post("/api/inverters", json={**payload, "capacity_kw": 4.6})

    assert updated.status_code == 200
    assert updated.json()["id"] == first.json()["id"]
    assert updated.json()["capacity_kw"] == 4.6
