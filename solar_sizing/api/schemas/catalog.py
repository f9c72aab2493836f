"""
Catalog schemas for API validation.

Covers the read-only reference data (appliances, regions, panels) and the
inverter catalog, which can be extended through the API. Inverters stored in
the database replace the built-in list when the sizing engine runs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...sizing.inverter import PhaseType, max_dc_voltage_for
from .common import _coerce_to_dict


class CatalogApplianceResponse(BaseModel):
    """
    Reference appliance with its typical power draw.

    Example:
        ```python
        {"appliance_id": "ac_1hp", "name": "Air conditioner 1HP", "category": "Cooling", "default_watts": 750}
        ```
    """

    model_config = ConfigDict(from_attributes=True)

    appliance_id: str
    name: str
    category: str
    default_watts: float


class RegionResponse(BaseModel):
    """Climate region and its daily peak sun hours."""

    index: int
    name: str
    peak_sun_hours: float


class PanelOptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    watts: int
    label: str


class InverterResponse(BaseModel):
    """
    Inverter catalog entry.

    Attributes:
        id: Database identifier (None for built-in entries).
        label: Commercial model name, unique in the catalog.
        brand: Manufacturer.
        capacity_kw: Rated AC capacity in kW.
        phase_type: "single-phase" or "three-phase".
        max_dc_voltage_v: DC input limit derived from the phase type.

    Example:
        ```python
        # Response from GET /api/inverters
        {
            "id": 3,
            "label": "Solis 6kW 1P",
            "brand": "Solis",
            "capacity_kw": 6.0,
            "phase_type": "single-phase",
            "max_dc_voltage_v": 550.0
        }
        ```
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    label: str
    brand: Optional[str] = None
    capacity_kw: float
    phase_type: PhaseType = PhaseType.SINGLE_PHASE
    max_dc_voltage_v: Optional[float] = None
    created_at: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_phase(cls, values: Any) -> Dict[str, Any]:
        values = _coerce_to_dict(values)
        if isinstance(values, dict):
            values["phase_type"] = PhaseType.parse(values.get("phase_type") or PhaseType.SINGLE_PHASE)
        return values

    @model_validator(mode="after")
    def derive_voltage_limit(self) -> "InverterResponse":
        if self.max_dc_voltage_v is None:
            self.max_dc_voltage_v = max_dc_voltage_for(self.phase_type)
        return self


class InverterCreate(BaseModel):
    """
    Payload for creating or updating an inverter (upsert by label).

    Example:
        ```python
        # POST /api/inverters
        {"label": "Growatt 8kW 1P", "brand": "Growatt", "capacity_kw": 8.0, "phase_type": "single-phase"}
        ```
    """

    label: str = Field(..., min_length=1, max_length=255)
    brand: Optional[str] = None
    capacity_kw: float = Field(..., gt=0)
    phase_type: PhaseType = PhaseType.SINGLE_PHASE

    @field_validator("phase_type", mode="before")
    @classmethod
    def parse_phase(cls, value: Any) -> PhaseType:
        return PhaseType.parse(value)
