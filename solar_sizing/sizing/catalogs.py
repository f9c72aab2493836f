"""
Static reference catalogs: household appliances, regions, panels, inverters.

Figures are typical nameplate values for the Vietnamese residential market.
The engine only receives the inverter catalog; the appliance catalog is used
to seed new loads and the region table to pick the peak sun hours.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .appliances import CatalogAppliance
from .inverter import InverterOption, PhaseType


@dataclass(frozen=True)
class Region:
    name: str
    peak_sun_hours: float


@dataclass(frozen=True)
class PanelOption:
    watts: int
    label: str


APPLIANCE_CATALOG: Tuple[CatalogAppliance, ...] = (
    CatalogAppliance("ac_1hp", "Air conditioner 1 HP", "Cooling", 750),
    CatalogAppliance("ac_2hp", "Air conditioner 2 HP", "Cooling", 1500),
    CatalogAppliance("fan", "Electric fan", "Cooling", 60),
    CatalogAppliance("fridge_small", "Refrigerator (small)", "Household", 150),
    CatalogAppliance("fridge_side", "Side-by-side refrigerator", "Household", 400),
    CatalogAppliance("washing_machine", "Washing machine", "Household", 500),
    CatalogAppliance("tv_led", "LED / Smart TV", "Entertainment", 120),
    CatalogAppliance("pc", "Desktop computer", "Work", 300),
    CatalogAppliance("laptop", "Laptop", "Work", 65),
    CatalogAppliance("rice_cooker", "Rice cooker", "Kitchen", 700),
    CatalogAppliance("lights_led", "LED lighting", "Lighting", 20),
    CatalogAppliance("water_heater", "Water heater", "Household", 2500),
    CatalogAppliance("kettle", "Electric kettle", "Kitchen", 1500),
    CatalogAppliance("pump", "Water pump", "Household", 750),
    CatalogAppliance("microwave", "Microwave oven", "Kitchen", 1200),
    CatalogAppliance("induction_cooker", "Induction cooktop", "Kitchen", 2000),
)

REGIONS: Tuple[Region, ...] = (
    Region("Northern Vietnam (average)", 3.8),
    Region("Central Vietnam (average)", 4.8),
    Region("Southern Vietnam (average)", 5.2),
)
DEFAULT_REGION_INDEX = 1

PANEL_OPTIONS: Tuple[PanelOption, ...] = (
    PanelOption(450, "Longi 450W Mono Half-cell"),
    PanelOption(475, "Jinko Tiger Neo 475W"),
    PanelOption(540, "Canadian Solar 540W HiKu6"),
    PanelOption(550, "AE Solar 550W Aurora"),
    PanelOption(580, "Jinko 580W N-Type"),
    PanelOption(600, "Canadian Solar 600W BiHiKu7"),
)

INVERTER_CATALOG: Tuple[InverterOption, ...] = (
    InverterOption(3.0, "Growatt MIN 3000TL-X", "Growatt", PhaseType.SINGLE_PHASE),
    InverterOption(3.6, "Solis 3.6kW 1P", "Solis", PhaseType.SINGLE_PHASE),
    InverterOption(5.0, "Huawei SUN2000-5KTL-L1", "Huawei", PhaseType.SINGLE_PHASE),
    InverterOption(5.0, "Deye 5kW Hybrid", "Deye", PhaseType.SINGLE_PHASE),
    InverterOption(6.0, "Solis 6kW 1P", "Solis", PhaseType.SINGLE_PHASE),
    InverterOption(8.0, "Sungrow 8kW 1P", "Sungrow", PhaseType.SINGLE_PHASE),
    InverterOption(10.0, "Growatt MOD 10KTL3-X", "Growatt", PhaseType.THREE_PHASE),
    InverterOption(12.0, "Huawei SUN2000-12KTL-M2", "Huawei", PhaseType.THREE_PHASE),
    InverterOption(15.0, "Solis 15kW 3P", "Solis", PhaseType.THREE_PHASE),
    InverterOption(20.0, "SMA Sunny Tripower 20kW", "SMA", PhaseType.THREE_PHASE),
    InverterOption(50.0, "Huawei SUN2000-50KTL-M0", "Huawei", PhaseType.THREE_PHASE),
)


def search_appliances(term: str | None = None) -> List[CatalogAppliance]:
    """
    Filter the appliance catalog by name or category (case-insensitive).

    An empty or missing term returns the whole catalog.
    """
    if not term:
        return list(APPLIANCE_CATALOG)
    needle = term.strip().lower()
    return [
        item
        for item in APPLIANCE_CATALOG
        if needle in item.name.lower() or needle in item.category.lower()
    ]


def get_catalog_appliance(appliance_id: str) -> CatalogAppliance | None:
    for item in APPLIANCE_CATALOG:
        if item.appliance_id == appliance_id:
            return item
    return None


def get_region(index: int) -> Region:
    """
    Return the region at ``index``.

    Raises:
        IndexError: If the index is outside the region table.
    """
    if not 0 <= index < len(REGIONS):
        raise IndexError(f"Region index {index} out of range (0-{len(REGIONS) - 1})")
    return REGIONS[index]


def panel_label(watts: int) -> str:
    """Commercial label of a panel rating, or a generic name for unknown ratings."""
    for option in PANEL_OPTIONS:
        if option.watts == watts:
            return option.label
    return f"{watts}W Mono Panel"
