"""
Household PV sizing domain.

This package holds everything needed to turn a household's consumption into a
system proposal:

* Appliance loads and the static reference catalogs (appliances, regions,
  panels, inverters).
* Consumption aggregation from an appliance list or a monthly bill.
* The sizing engine (`engine.compute_sizing`) that derives array size, panel
  count, production, inverter choice, string layout and optional storage.
* Installer-oriented cabling and protection heuristics.

Everything here is pure computation; persistence, advisory text and reports
live in the higher layers (`application`, FastAPI routes, CLI).
"""

from __future__ import annotations

from .appliances import (
    ApplianceLoad,
    CatalogAppliance,
    add_appliance,
    create_custom_appliance,
    load_from_catalog,
    remove_appliance,
)
from .battery import recommend_battery_size
from .cabling import TechnicalSheet, build_technical_sheet
from .catalogs import (
    APPLIANCE_CATALOG,
    DEFAULT_REGION_INDEX,
    INVERTER_CATALOG,
    PANEL_OPTIONS,
    REGIONS,
    PanelOption,
    Region,
    get_region,
    panel_label,
    search_appliances,
)
from .consumption import (
    AVERAGE_UNIT_PRICE,
    ConsumptionMode,
    aggregate_consumption,
    consumption_by_category,
)
from .engine import CalculationResult, SizingConfig, compute_sizing, size_system
from .inverter import InverterOption, PhaseType, select_inverter
from .strings import StringDesign, plan_strings

__all__ = [
    # Loads + catalogs
    "ApplianceLoad",
    "CatalogAppliance",
    "add_appliance",
    "create_custom_appliance",
    "load_from_catalog",
    "remove_appliance",
    "APPLIANCE_CATALOG",
    "DEFAULT_REGION_INDEX",
    "INVERTER_CATALOG",
    "PANEL_OPTIONS",
    "REGIONS",
    "PanelOption",
    "Region",
    "get_region",
    "panel_label",
    "search_appliances",
    # Consumption
    "AVERAGE_UNIT_PRICE",
    "ConsumptionMode",
    "aggregate_consumption",
    "consumption_by_category",
    # Engine
    "CalculationResult",
    "SizingConfig",
    "compute_sizing",
    "size_system",
    "InverterOption",
    "PhaseType",
    "select_inverter",
    "StringDesign",
    "plan_strings",
    "recommend_battery_size",
    # Installer sheet
    "TechnicalSheet",
    "build_technical_sheet",
]
