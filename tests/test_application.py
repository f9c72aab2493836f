from __future__ import annotations

from pathlib import Path

import pytest

from solar_sizing.application import SizingApplication
from solar_sizing.persistence import PersistenceService
from solar_sizing.result_builder import ResultBuilder
from solar_sizing.session_setup import SessionDataError


def test_calculate_records_run(persistence: PersistenceService, device_session_data: dict):
    """Run a calculation and assert a DB record is inserted."""
    app = SizingApplication(save_outputs=False, persistence=persistence)
    summary = app.calculate(device_session_data)

    assert summary["label"] == "adhoc"
    assert summary["result"]["required_system_size_kwp"] == pytest.approx(1.4)
    assert summary["result"]["number_of_panels"] == 3
    assert summary["output_dir"] is None
    assert "advice" not in summary

    runs = persistence.list_calculations(limit=5)
    assert [run.id for run in runs] == [summary["calculation_id"]]
    assert runs[0].summary["inputs"]["mode"] == "device"


def test_calculate_without_persistence(device_session_data: dict):
    summary = SizingApplication().calculate(device_session_data)
    assert "calculation_id" not in summary
    assert summary["result"]["recommended_inverter"]["capacity_kw"] == pytest.approx(3.0)


def test_calculate_rejects_invalid_payload():
    with pytest.raises(SessionDataError):
        SizingApplication().calculate({"mode": "unknown"})


def test_stored_inverter_catalog_replaces_builtin(persistence: PersistenceService, device_session_data: dict):
    persistence.upsert_inverter({"label": "Only 2kW", "brand": "Test", "capacity_kw": 2.0})
    app = SizingApplication(persistence=persistence)

    assert [option.label for option in app.inverter_catalog()] == ["Only 2kW"]
    summary = app.calculate(device_session_data)
    assert summary["result"]["recommended_inverter"]["label"] == "Only 2kW"


def test_consult_attaches_advice(persistence: PersistenceService, bill_session_data: dict, stub_advisor):
    app = SizingApplication(persistence=persistence, advisor=stub_advisor)
    summary = app.consult(bill_session_data, label="Le family")

    assert summary["advice"] == stub_advisor.text
    assert summary["advice_available"] is True
    assert len(stub_advisor.calls) == 1
    assert persistence.list_calculations()[0].advice == stub_advisor.text
    assert persistence.list_calculations()[0].label == "Le family"


def test_consult_with_outputs(tmp_path, catalog_session_data: dict, stub_advisor):
    app = SizingApplication(
        save_outputs=True,
        advisor=stub_advisor,
        result_builder=ResultBuilder(output_root=tmp_path),
    )
    summary = app.consult(catalog_session_data)

    assert summary["output_dir"] is not None
    report = (Path(summary["output_dir"]) / "report.md").read_text(encoding="utf-8")
    assert stub_advisor.text in report


def test_run_saved_session(persistence: PersistenceService, catalog_session_data: dict, stub_advisor):
    saved = persistence.save_session("Tran", catalog_session_data)
    app = SizingApplication(persistence=persistence, advisor=stub_advisor)

    by_id = app.run_saved_session(config_id=saved.id)
    by_name = app.run_saved_session(name="Tran", with_advice=True)

    assert by_id["session_id"] == saved.id
    assert by_id["label"] == "Tran"
    assert by_id["result"] == by_name["result"]
    assert by_name["advice"] == stub_advisor.text
    assert all(run.session_id == saved.id for run in persistence.list_calculations())


def test_run_saved_session_errors(persistence: PersistenceService):
    app = SizingApplication(persistence=persistence)
    with pytest.raises(LookupError):
        app.run_saved_session(config_id=999)
    with pytest.raises(ValueError):
        app.run_saved_session()
    with pytest.raises(RuntimeError):
        SizingApplication().run_saved_session(name="x")
