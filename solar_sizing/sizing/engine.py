"""
Sizing engine: from household consumption to a complete PV system proposal.

``compute_sizing`` is a pure, single-pass function. It reads the appliance list
(or the monthly bill), the sizing configuration and an inverter catalog and
returns an immutable ``CalculationResult``; it performs no I/O and keeps no
state, so identical inputs always give identical results and the function can
be called from any number of threads.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from .appliances import ApplianceLoad
from .battery import ceil_to_tenth, recommend_battery_size
from .catalogs import INVERTER_CATALOG
from .consumption import DAYS_PER_MONTH, ConsumptionMode, aggregate_consumption
from .inverter import InverterOption, PhaseType, select_inverter
from .strings import StringDesign, plan_strings

DEFAULT_PEAK_SUN_HOURS = 4.8
DEFAULT_PANEL_WATTAGE = 450
DEFAULT_SYSTEM_EFFICIENCY = 0.8


@dataclass(frozen=True)
class SizingConfig:
    """
    Site and equipment parameters owned by the caller.

    Attributes:
        peak_sun_hours: Daily peak-equivalent sun hours of the region (> 0).
        panel_wattage: Nameplate rating of a single panel in W (> 0).
        system_efficiency: Overall derating for inverter, wiring and soiling
            losses, in (0, 1].
        include_battery: Whether a storage bank should be sized.
    """
    peak_sun_hours: float = DEFAULT_PEAK_SUN_HOURS
    panel_wattage: int = DEFAULT_PANEL_WATTAGE
    system_efficiency: float = DEFAULT_SYSTEM_EFFICIENCY
    include_battery: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "peak_sun_hours": self.peak_sun_hours,
            "panel_wattage": self.panel_wattage,
            "system_efficiency": self.system_efficiency,
            "include_battery": self.include_battery,
        }


@dataclass(frozen=True)
class SystemSize:
    """Intermediate array sizing figures."""
    required_system_size_watts: float
    required_system_size_kwp: float
    number_of_panels: int
    estimated_daily_production_kwh: float


@dataclass(frozen=True)
class CalculationResult:
    """
    Snapshot of a sizing run.

    Attributes:
        total_daily_consumption_wh: Daily household consumption (Wh).
        monthly_consumption_kwh: 30-day consumption (kWh).
        required_system_size_watts: Unrounded DC nameplate requirement (W).
        required_system_size_kwp: DC size rounded up to 0.1 kWp.
        number_of_panels: Whole panels needed (rounded up).
        estimated_daily_production_kwh: Production of the actual panel count,
            rounded to 0.1 kWh.
        recommended_inverter: Selected inverter; None only for an empty catalog.
        recommended_battery_size_kwh: Storage size, None when not requested.
        string_design: DC string / MPPT layout.
    """
    total_daily_consumption_wh: float
    monthly_consumption_kwh: float
    required_system_size_watts: float
    required_system_size_kwp: float
    number_of_panels: int
    estimated_daily_production_kwh: float
    recommended_inverter: Optional[InverterOption]
    recommended_battery_size_kwh: Optional[float]
    string_design: StringDesign

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_daily_consumption_wh": self.total_daily_consumption_wh,
            "monthly_consumption_kwh": self.monthly_consumption_kwh,
            "required_system_size_watts": self.required_system_size_watts,
            "required_system_size_kwp": self.required_system_size_kwp,
            "number_of_panels": self.number_of_panels,
            "estimated_daily_production_kwh": self.estimated_daily_production_kwh,
            "recommended_inverter": (
                self.recommended_inverter.to_dict() if self.recommended_inverter else None
            ),
            "recommended_battery_size_kwh": self.recommended_battery_size_kwh,
            "string_design": self.string_design.to_dict(),
        }


def round_half_up(value: float, digits: int = 1) -> float:
    """Round halves away from zero for non-negative values (0.25 -> 0.3)."""
    scale = 10.0 ** digits
    return math.floor(round(value * scale, 9) + 0.5) / scale


def _ceil_whole(value: float) -> int:
    return int(math.ceil(round(value, 9)))


def size_system(total_daily_consumption_wh: float, config: SizingConfig) -> SystemSize:
    """
    Derive array size, panel count and expected production.

    The DC nameplate is the daily energy spread over the peak sun hours and
    divided by the efficiency derating. kWp and panel count are rounded up so
    the array is never under-provisioned; production is then recomputed from
    the rounded panel count.

    Args:
        total_daily_consumption_wh: Daily consumption in Wh (>= 0).
        config: Sizing configuration.

    Returns:
        SystemSize with all-zero figures for zero consumption.
    """
    if total_daily_consumption_wh <= 0:
        return SystemSize(0.0, 0.0, 0, 0.0)

    required_watts = (total_daily_consumption_wh / config.peak_sun_hours) / config.system_efficiency
    required_kwp = ceil_to_tenth(required_watts / 1000.0)
    number_of_panels = _ceil_whole(required_watts / config.panel_wattage)
    production_kwh = (
        number_of_panels * config.panel_wattage * config.peak_sun_hours * config.system_efficiency
    ) / 1000.0
    return SystemSize(
        required_system_size_watts=required_watts,
        required_system_size_kwp=required_kwp,
        number_of_panels=number_of_panels,
        estimated_daily_production_kwh=round_half_up(production_kwh, 1),
    )


def compute_sizing(
    mode: ConsumptionMode | str,
    appliance_loads: Iterable[ApplianceLoad],
    monthly_bill_amount: float,
    config: SizingConfig,
    inverter_catalog: Sequence[InverterOption] = INVERTER_CATALOG,
) -> CalculationResult:
    """
    Run the full sizing pipeline.

    Args:
        mode: ``device`` (appliance list) or ``bill`` (monthly bill amount).
        appliance_loads: Household loads, used in device mode.
        monthly_bill_amount: Monthly bill, used in bill mode.
        config: Sizing configuration.
        inverter_catalog: Inverter options ordered by ascending capacity.

    Returns:
        CalculationResult covering consumption, array, inverter, strings and
        the optional battery.

    Example:
        ```python
        load = ApplianceLoad("heater", "Heater", "Home", 1000.0, hours_per_day=5)
        result = compute_sizing("device", [load], 0.0, SizingConfig())
        result.required_system_size_kwp  # 1.4
        result.number_of_panels          # 3
        ```
    """
    daily_wh = aggregate_consumption(mode, appliance_loads, monthly_bill_amount)
    size = size_system(daily_wh, config)
    inverter = select_inverter(size.required_system_size_kwp, inverter_catalog)
    phase_type = inverter.phase_type if inverter is not None else PhaseType.SINGLE_PHASE
    string_design = plan_strings(size.number_of_panels, phase_type)
    battery_kwh = recommend_battery_size(size.estimated_daily_production_kwh, config.include_battery)

    return CalculationResult(
        total_daily_consumption_wh=daily_wh,
        monthly_consumption_kwh=daily_wh * DAYS_PER_MONTH / 1000.0,
        required_system_size_watts=size.required_system_size_watts,
        required_system_size_kwp=size.required_system_size_kwp,
        number_of_panels=size.number_of_panels,
        estimated_daily_production_kwh=size.estimated_daily_production_kwh,
        recommended_inverter=inverter,
        recommended_battery_size_kwh=battery_kwh,
        string_design=string_design,
    )


def config_from_mapping(data: Mapping[str, Any] | None) -> SizingConfig:
    """Build a SizingConfig from a plain mapping, keeping defaults for missing keys."""
    data = data or {}
    return SizingConfig(
        peak_sun_hours=float(data.get("peak_sun_hours", DEFAULT_PEAK_SUN_HOURS)),
        panel_wattage=int(data.get("panel_wattage", DEFAULT_PANEL_WATTAGE)),
        system_efficiency=float(data.get("system_efficiency", DEFAULT_SYSTEM_EFFICIENCY)),
        include_battery=bool(data.get("include_battery", False)),
    )
