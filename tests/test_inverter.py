from __future__ import annotations

import pytest

from solar_sizing.sizing.catalogs import INVERTER_CATALOG
from solar_sizing.sizing.inverter import InverterOption, PhaseType, max_dc_voltage_for, select_inverter


def test_selects_smallest_qualifying_inverter():
    # 0.85 x 4.1 = 3.485 kW: the 3.0 kW unit is too small, 3.6 kW qualifies
    selected = select_inverter(4.1, INVERTER_CATALOG)
    assert selected.capacity_kw == pytest.approx(3.6)


def test_threshold_is_inclusive():
    catalog = [InverterOption(4.25, "Exact", "Test")]
    assert select_inverter(5.0, catalog).label == "Exact"


def test_oversized_array_falls_back_to_largest():
    selected = select_inverter(200.0, INVERTER_CATALOG)
    assert selected == INVERTER_CATALOG[-1]


def test_empty_catalog_returns_none():
    assert select_inverter(3.0, []) is None


def test_tie_keeps_catalog_order():
    selected = select_inverter(5.5, INVERTER_CATALOG)
    assert selected.label == "Huawei SUN2000-5KTL-L1"


def test_unsorted_catalog_is_handled_without_mutation():
    catalog = [
        InverterOption(10.0, "Ten", "Test", PhaseType.THREE_PHASE),
        InverterOption(5.0, "Five", "Test"),
        InverterOption(8.0, "Eight", "Test"),
    ]
    original = list(catalog)
    assert select_inverter(6.0, catalog).label == "Five"
    assert select_inverter(9.0, catalog).label == "Eight"
    assert catalog == original


def test_selection_is_monotone_in_array_size():
    previous = 0.0
    for tenth in range(0, 700):
        selected = select_inverter(tenth / 10.0, INVERTER_CATALOG)
        assert selected.capacity_kw >= previous
        previous = selected.capacity_kw


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("single-phase", PhaseType.SINGLE_PHASE),
        ("1-Phase", PhaseType.SINGLE_PHASE),
        ("3P", PhaseType.THREE_PHASE),
        ("three phase", PhaseType.THREE_PHASE),
        (PhaseType.THREE_PHASE, PhaseType.THREE_PHASE),
    ],
)
def test_phase_parse(raw, expected):
    assert PhaseType.parse(raw) is expected


def test_phase_parse_rejects_unknown():
    with pytest.raises(ValueError):
        PhaseType.parse("two-phase")


def test_voltage_limits_by_phase():
    assert max_dc_voltage_for(PhaseType.SINGLE_PHASE) == pytest.approx(550.0)
    assert max_dc_voltage_for(PhaseType.THREE_PHASE) == pytest.approx(1000.0)
    option = InverterOption(12.0, "Huawei", "Huawei", PhaseType.THREE_PHASE)
    assert option.max_dc_voltage_v == pytest.approx(1000.0)
    assert InverterOption.from_dict(option.to_dict()) == option
