"""
Sizing request/response schemas.

Requests mirror the household session payload (see ``session_setup``) and
enforce the input ranges the engine relies on: quantity >= 1, watts >= 0,
hours within [0.1, 24], positive sun hours and panel rating, efficiency in
(0, 1] and a non-negative bill. Responses mirror ``CalculationResult.to_dict``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...sizing.appliances import DEFAULT_HOURS_PER_DAY, MAX_HOURS_PER_DAY, MIN_HOURS_PER_DAY
from ...sizing.catalogs import DEFAULT_REGION_INDEX
from ...sizing.consumption import ConsumptionMode
from ...sizing.inverter import PhaseType


class ApplianceEntry(BaseModel):
    """
    One appliance in the household list.

    Catalog appliances only need ``appliance_id``; name, category and rating
    are filled from the catalog. Custom appliances must carry ``name`` and
    ``watts``.

    Example:
        ```python
        {"appliance_id": "ac_1hp", "quantity": 2, "hours_per_day": 8}
        {"appliance_id": "custom_1", "name": "Hair dryer", "watts": 1200, "hours_per_day": 0.5}
        ```
    """

    appliance_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    category: Optional[str] = None
    default_watts: Optional[float] = Field(None, ge=0)
    quantity: int = Field(1, ge=1)
    hours_per_day: float = Field(DEFAULT_HOURS_PER_DAY, ge=MIN_HOURS_PER_DAY, le=MAX_HOURS_PER_DAY)
    watts: Optional[float] = Field(None, ge=0)


class SizingConfigPayload(BaseModel):
    """Sizing configuration; ``peak_sun_hours`` defaults to the selected region."""

    peak_sun_hours: Optional[float] = Field(None, gt=0)
    panel_wattage: int = Field(450, gt=0)
    system_efficiency: float = Field(0.8, gt=0, le=1)
    include_battery: bool = False


class SizingRequest(BaseModel):
    """
    Household inputs for a sizing or consultation request.

    Example:
        ```python
        # POST /api/sizing
        {
            "mode": "bill",
            "monthly_bill_amount": 1000000,
            "region_index": 2,
            "config": {"panel_wattage": 550, "include_battery": true}
        }
        ```
    """

    mode: ConsumptionMode = ConsumptionMode.DEVICE
    appliances: List[ApplianceEntry] = Field(default_factory=list)
    monthly_bill_amount: float = Field(0.0, ge=0)
    region_index: int = Field(DEFAULT_REGION_INDEX, ge=0)
    config: SizingConfigPayload = Field(default_factory=SizingConfigPayload)
    label: Optional[str] = Field(None, max_length=255)

    def to_session_data(self) -> Dict[str, Any]:
        """Session payload accepted by ``build_sizing_session``."""
        return self.model_dump(mode="json", exclude={"label"}, exclude_none=True)


class InverterSummary(BaseModel):
    label: str
    brand: Optional[str] = None
    capacity_kw: float
    phase_type: PhaseType


class StringDesignResponse(BaseModel):
    total_strings: int
    panels_per_string: int
    panels_in_smaller_string: int
    connection_description: str
    input_mode_description: str
    string_voltage_v: float
    max_panels_per_string: int
    balanced: bool
    within_voltage_limit: bool


class CalculationResultResponse(BaseModel):
    """
    Engine output.

    Example:
        ```python
        {
            "total_daily_consumption_wh": 5000.0,
            "monthly_consumption_kwh": 150.0,
            "required_system_size_watts": 1302.08,
            "required_system_size_kwp": 1.4,
            "number_of_panels": 3,
            "estimated_daily_production_kwh": 5.2,
            "recommended_inverter": {"label": "Solis 3kW 1P", "capacity_kw": 3.0, ...},
            "recommended_battery_size_kwh": null,
            "string_design": {"total_strings": 1, "panels_per_string": 3, ...}
        }
        ```
    """

    total_daily_consumption_wh: float
    monthly_consumption_kwh: float
    required_system_size_watts: float
    required_system_size_kwp: float
    number_of_panels: int
    estimated_daily_production_kwh: float
    recommended_inverter: Optional[InverterSummary] = None
    recommended_battery_size_kwh: Optional[float] = None
    string_design: StringDesignResponse


class SizingResponse(BaseModel):
    """
    Sizing or consultation outcome.

    Attributes:
        label: Session name or "adhoc".
        inputs: Normalized household inputs actually used.
        result: Engine output.
        advice: Advisory text (consultations only).
        advice_available: False when ``advice`` is a fallback message.
        calculation_id: Stored CalculationRecord id.
        session_id: Saved session id when a saved session was run.
        output_dir: Report directory when files were written.
    """

    label: str
    inputs: Dict[str, Any]
    result: CalculationResultResponse
    advice: Optional[str] = None
    advice_available: Optional[bool] = None
    calculation_id: Optional[int] = None
    session_id: Optional[int] = None
    output_dir: Optional[str] = None


class CalculationRecordResponse(BaseModel):
    """Stored calculation (GET /api/runs)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    label: str
    session_id: Optional[int] = None
    summary: Dict[str, Any]
    advice: Optional[str] = None
    output_dir: Optional[str] = None
    created_at: Optional[datetime] = None
