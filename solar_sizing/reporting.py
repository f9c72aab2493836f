from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from .sizing.appliances import ApplianceLoad  # noqa: E402
from .sizing.cabling import TechnicalSheet, build_technical_sheet  # noqa: E402
from .sizing.catalogs import panel_label  # noqa: E402
from .sizing.consumption import (  # noqa: E402
    AVERAGE_UNIT_PRICE,
    DAYS_PER_MONTH,
    consumption_by_category,
)
from .sizing.engine import CalculationResult, SizingConfig  # noqa: E402

logger = logging.getLogger(__name__)

BILL_COMPARISON_PRICES = (2000.0, 2500.0, 3000.0)
CATEGORY_COLUMNS = ["category", "daily_wh", "share_pct"]


def _slugify(value: str) -> str:
    return "".join(c if c.isalnum() or c in ("-", "_") else "_" for c in value.strip()).strip("_")


def _create_results_directory(label: str, base_dir: Path) -> Path:
    timestamp = datetime.now().strftime("%y%m%d_%H%M%S")
    slug = _slugify(label) or "consultation"
    output_dir = base_dir / f"{timestamp}_{slug}"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


@dataclass
class ConsultationReport:
    """
    Everything shown on the consultation report.

    Attributes:
        label: Household or session name.
        result: Engine output.
        config: Sizing configuration used.
        monthly_production_kwh: Daily production over a 30-day month.
        monthly_savings: Production valued at the average unit price.
        bill_comparison: Monthly bill before/after for several unit prices.
        category_breakdown: Daily Wh per appliance category.
        bill_of_materials: Rows of (item, specification, quantity).
        technical_sheet: Installer cabling/protection sheet.
        advice: Advisory Markdown, if requested.
    """
    label: str
    result: CalculationResult
    config: SizingConfig
    monthly_production_kwh: float
    monthly_savings: float
    bill_comparison: pd.DataFrame
    category_breakdown: pd.DataFrame
    bill_of_materials: List[Dict[str, Any]]
    technical_sheet: TechnicalSheet
    advice: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def summary(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "created_at": self.created_at.isoformat(timespec="seconds"),
            "config": self.config.to_dict(),
            "result": self.result.to_dict(),
            "monthly_production_kwh": self.monthly_production_kwh,
            "monthly_savings": self.monthly_savings,
            "bill_comparison": self.bill_comparison.to_dict(orient="records"),
            "category_breakdown": self.category_breakdown.to_dict(orient="records"),
            "bill_of_materials": self.bill_of_materials,
            "technical_sheet": self.technical_sheet.to_dict(),
            "advice": self.advice,
        }


def build_category_breakdown(loads: Sequence[ApplianceLoad]) -> pd.DataFrame:
    rows = consumption_by_category(loads)
    df = pd.DataFrame(rows, columns=["category", "daily_wh"])
    if df.empty:
        return pd.DataFrame(columns=CATEGORY_COLUMNS)
    total = df["daily_wh"].sum()
    df["share_pct"] = (df["daily_wh"] / total * 100.0).round(1) if total > 0 else 0.0
    return df[CATEGORY_COLUMNS]


def build_bill_comparison(
    result: CalculationResult,
    prices: Sequence[float] = BILL_COMPARISON_PRICES,
) -> pd.DataFrame:
    """
    Monthly bill without and with the system for a range of unit prices.

    Grid import never goes below zero; surplus production is not credited.
    """
    consumption = result.monthly_consumption_kwh
    production = result.estimated_daily_production_kwh * DAYS_PER_MONTH
    grid_kwh = max(0.0, consumption - production)
    df = pd.DataFrame({"unit_price": np.asarray(prices, dtype=float)})
    df["bill_without_solar"] = (df["unit_price"] * consumption).round(0)
    df["bill_with_solar"] = (df["unit_price"] * grid_kwh).round(0)
    df["monthly_savings"] = df["bill_without_solar"] - df["bill_with_solar"]
    return df


def build_bill_of_materials(result: CalculationResult, config: SizingConfig) -> List[Dict[str, Any]]:
    inverter = result.recommended_inverter
    rows: List[Dict[str, Any]] = [
        {
            "item": "Solar panels",
            "specification": panel_label(config.panel_wattage),
            "quantity": result.number_of_panels,
        },
        {
            "item": "Inverter",
            "specification": inverter.label if inverter else "To be selected",
            "quantity": 1,
        },
        {
            "item": "Mounting structure",
            "specification": "Aluminium rails and clamps",
            "quantity": result.number_of_panels,
        },
        {
            "item": "Protection cabinet",
            "specification": "AC/DC breakers and surge protection",
            "quantity": 1,
        },
        {
            "item": "Installation material",
            "specification": "Solar cable, MC4 connectors, earthing",
            "quantity": 1,
        },
    ]
    if result.recommended_battery_size_kwh is not None:
        rows.append(
            {
                "item": "Storage battery",
                "specification": f"Lithium {result.recommended_battery_size_kwh} kWh",
                "quantity": 1,
            }
        )
    return rows


def build_consultation_report(
    label: str,
    loads: Sequence[ApplianceLoad],
    config: SizingConfig,
    result: CalculationResult,
    advice: str | None = None,
) -> ConsultationReport:
    monthly_production = round(result.estimated_daily_production_kwh * DAYS_PER_MONTH, 1)
    return ConsultationReport(
        label=label,
        result=result,
        config=config,
        monthly_production_kwh=monthly_production,
        monthly_savings=round(monthly_production * AVERAGE_UNIT_PRICE, 0),
        bill_comparison=build_bill_comparison(result),
        category_breakdown=build_category_breakdown(loads),
        bill_of_materials=build_bill_of_materials(result, config),
        technical_sheet=build_technical_sheet(result.recommended_inverter, result.string_design),
        advice=advice,
    )


def render_markdown(report: ConsultationReport) -> str:
    result = report.result
    sheet = report.technical_sheet
    design = result.string_design
    inverter = result.recommended_inverter

    lines = [f"# Solar consultation: {report.label}", ""]
    lines.append(f"_Generated {report.created_at:%Y-%m-%d %H:%M}_")
    lines.append("")
    lines.append("## Key figures")
    lines.append(f"- Daily consumption: {result.total_daily_consumption_wh / 1000.0:.2f} kWh")
    lines.append(f"- Monthly consumption: {result.monthly_consumption_kwh:.1f} kWh")
    lines.append(f"- System size: {result.required_system_size_kwp} kWp")
    lines.append(f"- Panels: {result.number_of_panels} x {report.config.panel_wattage} W")
    lines.append(f"- Daily production: {result.estimated_daily_production_kwh} kWh")
    lines.append(f"- Monthly production: {report.monthly_production_kwh} kWh")
    lines.append(f"- Estimated monthly savings: {report.monthly_savings:,.0f} VND")
    if inverter is not None:
        lines.append(f"- Inverter: {inverter.label} ({inverter.phase_type.value})")
    else:
        lines.append("- Inverter: not available")
    if result.recommended_battery_size_kwh is not None:
        lines.append(f"- Battery: {result.recommended_battery_size_kwh} kWh")
    lines.append("")

    lines.append("## Monthly bill comparison")
    lines.append("| Unit price (VND/kWh) | Without solar | With solar | Savings |")
    lines.append("|---:|---:|---:|---:|")
    for row in report.bill_comparison.itertuples(index=False):
        lines.append(
            f"| {row.unit_price:,.0f} | {row.bill_without_solar:,.0f} | "
            f"{row.bill_with_solar:,.0f} | {row.monthly_savings:,.0f} |"
        )
    lines.append("")

    if not report.category_breakdown.empty:
        lines.append("## Consumption by category")
        lines.append("| Category | Wh/day | Share |")
        lines.append("|---|---:|---:|")
        for row in report.category_breakdown.itertuples(index=False):
            lines.append(f"| {row.category} | {row.daily_wh:,.0f} | {row.share_pct:.1f}% |")
        lines.append("")

    lines.append("## Bill of materials")
    lines.append("| Item | Specification | Qty |")
    lines.append("|---|---|---:|")
    for item in report.bill_of_materials:
        lines.append(f"| {item['item']} | {item['specification']} | {item['quantity']} |")
    lines.append("")

    lines.append("## Technician sheet")
    lines.append(f"- Strings: {design.connection_description}")
    lines.append(f"- MPPT: {design.input_mode_description}")
    lines.append(f"- String Voc (cold): {sheet.string_voc_v} V")
    lines.append(f"- String Vmp: {sheet.string_vmp_v} V")
    lines.append(f"- Isc: {sheet.isc_a} A")
    if not design.within_voltage_limit:
        lines.append(
            f"- WARNING: strings exceed {design.max_panels_per_string} panels; "
            "check the inverter DC voltage limit."
        )
    lines.append(f"- DC cable: {sheet.dc_cable}")
    lines.append(f"- AC cable: {sheet.ac_cable}")
    lines.append(f"- Breaker: {sheet.breaker}")
    lines.append(f"- Grid connection: {sheet.phase_label}")

    if report.advice:
        lines.append("")
        lines.append("## Expert advice")
        lines.append(report.advice)

    return "\n".join(lines) + "\n"


def _plot_category_pie(breakdown: pd.DataFrame, save_path: Path) -> bool:
    data = breakdown[breakdown["daily_wh"] > 0] if not breakdown.empty else breakdown
    if data.empty:
        return False
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.pie(data["daily_wh"], labels=data["category"], autopct="%1.0f%%", startangle=90)
    ax.set_title("Daily consumption by category")
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)
    return True


def _plot_consumption_vs_production(report: ConsultationReport, save_path: Path) -> None:
    labels = ["Consumption", "Production"]
    values = [report.result.monthly_consumption_kwh, report.monthly_production_kwh]
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar(labels, values, color=["#d62728", "#2ca02c"])
    ax.set_ylabel("kWh / month")
    ax.set_title("Monthly consumption vs production")
    ax.grid(True, axis="y", alpha=0.2)
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def _plot_bill_comparison(comparison: pd.DataFrame, save_path: Path) -> None:
    x = np.arange(len(comparison))
    width = 0.38
    fig, ax = plt.subplots(figsize=(8, 4.5))
    ax.bar(x - width / 2, comparison["bill_without_solar"], width, label="Without solar")
    ax.bar(x + width / 2, comparison["bill_with_solar"], width, label="With solar")
    ax.set_xticks(x)
    ax.set_xticklabels([f"{price:,.0f}" for price in comparison["unit_price"]])
    ax.set_xlabel("Unit price [VND/kWh]")
    ax.set_ylabel("Monthly bill [VND]")
    ax.set_title("Monthly bill comparison")
    ax.grid(True, axis="y", alpha=0.2)
    ax.legend()
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def generate_report(
    label: str,
    loads: Sequence[ApplianceLoad],
    config: SizingConfig,
    result: CalculationResult,
    advice: str | None = None,
    output_root: Path | str = "results",
) -> Path:
    """
    Generate the consultation report: Markdown, JSON summary, CSV and charts.

    Returns:
        Directory containing the written files.
    """
    report = build_consultation_report(label, loads, config, result, advice=advice)
    output_dir = _create_results_directory(label, Path(output_root))

    (output_dir / "report.md").write_text(render_markdown(report), encoding="utf-8")
    (output_dir / "summary.json").write_text(
        json.dumps(report.summary(), indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    report.category_breakdown.to_csv(output_dir / "category_breakdown.csv", index=False)

    _plot_category_pie(report.category_breakdown, output_dir / "category_breakdown.png")
    _plot_consumption_vs_production(report, output_dir / "consumption_vs_production.png")
    _plot_bill_comparison(report.bill_comparison, output_dir / "bill_comparison.png")

    logger.info("Consultation report for '%s' written to %s", label, output_dir)
    return output_dir
