from .sizing.appliances import ApplianceLoad, CatalogAppliance, create_custom_appliance
from .sizing.catalogs import APPLIANCE_CATALOG, INVERTER_CATALOG, PANEL_OPTIONS, REGIONS
from .sizing.consumption import ConsumptionMode, aggregate_consumption
from .sizing.engine import CalculationResult, SizingConfig, compute_sizing
from .sizing.inverter import InverterOption, PhaseType, select_inverter
from .sizing.strings import StringDesign, plan_strings
from .sizing.battery import recommend_battery_size
from .sizing.cabling import TechnicalSheet, build_technical_sheet
from .advisory import AdvisoryResult, GeminiAdvisor, build_consultation_prompt
from .session_setup import SessionDataError, SizingSession, build_sizing_session
from .reporting import generate_report
from .result_builder import ResultBuilder
from .application import SizingApplication

__all__ = [
    "ApplianceLoad",
    "CatalogAppliance",
    "create_custom_appliance",
    "APPLIANCE_CATALOG",
    "INVERTER_CATALOG",
    "PANEL_OPTIONS",
    "REGIONS",
    "ConsumptionMode",
    "aggregate_consumption",
    "CalculationResult",
    "SizingConfig",
    "compute_sizing",
    "InverterOption",
    "PhaseType",
    "select_inverter",
    "StringDesign",
    "plan_strings",
    "recommend_battery_size",
    "TechnicalSheet",
    "build_technical_sheet",
    "AdvisoryResult",
    "GeminiAdvisor",
    "build_consultation_prompt",
    "SessionDataError",
    "SizingSession",
    "build_sizing_session",
    "generate_report",
    "ResultBuilder",
    "SizingApplication",
]
