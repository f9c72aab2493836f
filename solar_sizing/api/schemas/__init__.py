"""
Pydantic schemas for API request/response validation.

Organized by domain:
- catalog: Appliance, region, panel and inverter catalog schemas
- sizing: Sizing/consultation requests, results and calculation records
- sessions: Saved household session schemas
- common: Shared coercion helpers

Example:
    ```python
    from solar_sizing.api.schemas import SizingRequest
    from solar_sizing.api.schemas.sizing import SizingRequest
    ```
"""

from __future__ import annotations

from .catalog import (
    CatalogApplianceResponse,
    InverterCreate,
    InverterResponse,
    PanelOptionResponse,
    RegionResponse,
)
from .common import _coerce_to_dict
from .sessions import SavedSessionCreate, SavedSessionResponse
from .sizing import (
    ApplianceEntry,
    CalculationRecordResponse,
    CalculationResultResponse,
    SizingConfigPayload,
    SizingRequest,
    SizingResponse,
)

__all__ = [
    "_coerce_to_dict",
    # Catalog schemas
    "CatalogApplianceResponse",
    "RegionResponse",
    "PanelOptionResponse",
    "InverterResponse",
    "InverterCreate",
    # Sizing schemas
    "ApplianceEntry",
    "SizingConfigPayload",
    "SizingRequest",
    "SizingResponse",
    "CalculationResultResponse",
    "CalculationRecordResponse",
    # Session schemas
    "SavedSessionCreate",
    "SavedSessionResponse",
]
