from __future__ import annotations

import json

import pandas as pd
import pytest

from solar_sizing.reporting import (
    build_bill_comparison,
    build_consultation_report,
    render_markdown,
)
from solar_sizing.result_builder import ResultBuilder
from solar_sizing.session_setup import build_sizing_session
from solar_sizing.sizing.engine import compute_sizing


def _session_and_result(data):
    session = build_sizing_session(data)
    result = compute_sizing(
        session.mode, session.appliances, session.monthly_bill_amount, session.config
    )
    return session, result


def test_bill_comparison_at_three_prices(device_session_data):
    _, result = _session_and_result(device_session_data)
    comparison = build_bill_comparison(result)

    assert list(comparison["unit_price"]) == [2000.0, 2500.0, 3000.0]
    # 150 kWh/month consumption, 156 kWh/month production: the bill drops to zero
    assert list(comparison["bill_without_solar"]) == [300000.0, 375000.0, 450000.0]
    assert (comparison["bill_with_solar"] == 0).all()
    assert (comparison["monthly_savings"] == comparison["bill_without_solar"]).all()


def test_consultation_report_contents(catalog_session_data):
    session, result = _session_and_result(catalog_session_data)
    report = build_consultation_report("Tran family", session.appliances, session.config, result)

    assert report.monthly_production_kwh == pytest.approx(result.estimated_daily_production_kwh * 30)
    assert report.monthly_savings == pytest.approx(round(report.monthly_production_kwh * 2500))
    assert list(report.category_breakdown["category"]) == ["Cooling", "Household", "Lighting"]
    assert report.category_breakdown["share_pct"].sum() == pytest.approx(100.0, abs=0.2)
    items = [row["item"] for row in report.bill_of_materials]
    assert items[:2] == ["Solar panels", "Inverter"]
    assert "Storage battery" not in items


def test_bill_mode_report_has_battery_row_and_no_breakdown(bill_session_data):
    session, result = _session_and_result(bill_session_data)
    report = build_consultation_report("Bill only", session.appliances, session.config, result)

    assert report.category_breakdown.empty
    battery_rows = [row for row in report.bill_of_materials if row["item"] == "Storage battery"]
    assert battery_rows[0]["specification"] == f"Lithium {result.recommended_battery_size_kwh} kWh"


def test_render_markdown_sections(catalog_session_data):
    session, result = _session_and_result(catalog_session_data)
    report = build_consultation_report(
        "Tran family", session.appliances, session.config, result, advice="Clean panels monthly."
    )
    text = render_markdown(report)

    assert text.startswith("# Solar consultation: Tran family")
    for heading in ("## Key figures", "## Monthly bill comparison", "## Consumption by category",
                    "## Bill of materials", "## Technician sheet", "## Expert advice"):
        assert heading in text
    assert result.string_design.connection_description in text
    assert "Clean panels monthly." in text


def test_result_builder_writes_report_files(tmp_path, catalog_session_data):
    session, result = _session_and_result(catalog_session_data)
    builder = ResultBuilder(output_root=tmp_path)

    output_dir = builder.build_consultation(
        "Tran family",
        loads=session.appliances,
        config=session.config,
        result=result,
        advice="Some advice",
    )

    assert output_dir.parent == tmp_path
    assert output_dir.name.endswith("Tran_family")
    for name in (
        "report.md",
        "summary.json",
        "category_breakdown.csv",
        "category_breakdown.png",
        "consumption_vs_production.png",
        "bill_comparison.png",
    ):
        assert (output_dir / name).exists(), name

    summary = json.loads((output_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["result"]["number_of_panels"] == result.number_of_panels
    assert summary["advice"] == "Some advice"
    breakdown = pd.read_csv(output_dir / "category_breakdown.csv")
    assert list(breakdown.columns) == ["category", "daily_wh", "share_pct"]


def test_result_builder_skips_pie_without_appliances(tmp_path, bill_session_data):
    session, result = _session_and_result(bill_session_data)
    output_dir = ResultBuilder(output_root=tmp_path).build_consultation(
        "bill", loads=session.appliances, config=session.config, result=result
    )
    assert not (output_dir / "category_breakdown.png").exists()
    assert (output_dir / "bill_comparison.png").exists()
