from __future__ import annotations

import json

import pytest

from solar_sizing.session_setup import (
    SessionDataError,
    SizingSession,
    build_sizing_session,
    load_session_data,
)
from solar_sizing.sizing.consumption import ConsumptionMode
from solar_sizing.sizing.engine import SizingConfig


def test_empty_payload_uses_defaults():
    session = build_sizing_session(None)
    assert session == SizingSession()
    assert session.config == SizingConfig(peak_sun_hours=4.8)


def test_catalog_entries_are_filled_from_catalog(catalog_session_data):
    session = build_sizing_session(catalog_session_data)

    ac = session.appliances[0]
    assert ac.name == "Air conditioner 1 HP"
    assert ac.category == "Cooling"
    assert ac.effective_watts == pytest.approx(750.0)
    assert ac.quantity == 2
    assert session.config.peak_sun_hours == pytest.approx(5.2)


def test_explicit_sun_hours_override_region():
    session = build_sizing_session({"region_index": 0, "config": {"peak_sun_hours": 4.0}})
    assert session.region_index == 0
    assert session.config.peak_sun_hours == pytest.approx(4.0)


def test_bill_is_clamped(bill_session_data):
    bill_session_data["monthly_bill_amount"] = -5
    session = build_sizing_session(bill_session_data)
    assert session.mode is ConsumptionMode.BILL
    assert session.monthly_bill_amount == 0.0
    assert session.config.include_battery is True


@pytest.mark.parametrize(
    "payload",
    [
        {"mode": "sunlight"},
        {"region_index": 7},
        {"region_index": "north"},
        {"appliances": [{"name": "no id"}]},
        {"config": {"panel_wattage": "big"}},
        {"config": {"peak_sun_hours": 0}},
        {"config": {"system_efficiency": 0}},
        {"config": {"system_efficiency": 1.2}},
        {"config": {"panel_wattage": -450}},
    ],
)
def test_invalid_payloads_raise(payload):
    with pytest.raises(SessionDataError):
        build_sizing_session(payload)


def test_load_from_json_file(tmp_path, device_session_data):
    path = tmp_path / "session.json"
    path.write_text(json.dumps(device_session_data), encoding="utf-8")
    assert load_session_data(path) == device_session_data
    assert build_sizing_session(str(path)).appliances[0].name == "Heater"


def test_missing_or_invalid_file(tmp_path):
    with pytest.raises(SessionDataError):
        load_session_data(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(SessionDataError):
        load_session_data(broken)


def test_to_dict_round_trip(catalog_session_data):
    session = build_sizing_session(catalog_session_data)
    rebuilt = build_sizing_session(session.to_dict())
    assert rebuilt.to_dict() == session.to_dict()
    assert rebuilt.config == session.config
