from __future__ import annotations

from solar_sizing.persistence import PersistenceService
from solar_sizing.session_setup import build_sizing_session
from solar_sizing.sizing.inverter import InverterOption, PhaseType


def test_inverter_upsert_and_catalog(persistence: PersistenceService):
    """Inverters are upserted by label and returned by ascending capacity."""
    persistence.upsert_inverter({"label": "Big", "brand": "X", "capacity_kw": 12.0, "phase_type": "3P"})
    persistence.upsert_inverter(InverterOption(5.0, "Small", "Y"))
    updated = persistence.upsert_inverter({"label": "Small", "brand": "Y2", "capacity_kw": 6.0})

    assert updated.brand == "Y2"
    records = persistence.list_inverters()
    assert [record.label for record in records] == ["Small", "Big"]
    assert records[1].phase_type == "three-phase"

    catalog = persistence.load_inverter_catalog()
    assert catalog == [
        InverterOption(6.0, "Small", "Y2", PhaseType.SINGLE_PHASE),
        InverterOption(12.0, "Big", "X", PhaseType.THREE_PHASE),
    ]


def test_upsert_inverter_none(persistence: PersistenceService):
    assert persistence.upsert_inverter(None) is None
    assert persistence.load_inverter_catalog() == []


def test_sessions_crud(persistence: PersistenceService, device_session_data):
    saved = persistence.save_session("Nguyen", device_session_data)
    assert saved.id is not None

    session = build_sizing_session({"mode": "bill", "monthly_bill_amount": 600000})
    again = persistence.save_session("Nguyen", session)
    assert again.id == saved.id
    assert persistence.get_session_by_name("Nguyen").data["mode"] == "bill"

    persistence.save_session("Anh", device_session_data)
    assert [record.name for record in persistence.list_sessions()] == ["Anh", "Nguyen"]

    assert persistence.delete_session(saved.id) is True
    assert persistence.get_session_by_id(saved.id) is None
    assert persistence.delete_session(saved.id) is False


def test_calculations_are_recorded_and_unlinked_on_delete(persistence: PersistenceService):
    saved = persistence.save_session("Home", {"mode": "device"})
    first = persistence.record_calculation("Home", {"result": {"number_of_panels": 3}}, session=saved)
    second = persistence.record_calculation("adhoc", {"result": {}}, advice="Tip", output_dir="results/x")

    runs = persistence.list_calculations(limit=5)
    assert {run.id for run in runs} == {first.id, second.id}
    assert runs[0].id == second.id
    assert persistence.list_calculations(limit=1)[0].id == second.id

    persistence.delete_session(saved.id)
    remaining = {run.id: run for run in persistence.list_calculations()}
    assert remaining[first.id].session_id is None
    assert remaining[first.id].summary["result"]["number_of_panels"] == 3
    assert remaining[second.id].advice == "Tip"


def test_updated_records_are_readable_after_commit(persistence: PersistenceService, device_session_data):
    persistence.save_session("Nguyen", device_session_data)
    updated = persistence.save_session("Nguyen", {**device_session_data, "region_index": 2})
    assert updated.updated_at is not None
    assert updated.data["region_index"] == 2

    persistence.upsert_inverter({"label": "Small", "capacity_kw": 5.0})
    inverter = persistence.upsert_inverter({"label": "Small", "capacity_kw": 6.0})
    assert inverter.updated_at is not None
