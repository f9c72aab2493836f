"""
Sizing API endpoints.

Endpoints:
- POST /sizing: Size a system from inline household inputs
- POST /consultation: Same, plus the advisory text
- GET /runs: Latest stored calculations

Inputs are validated by ``SizingRequest`` before reaching the engine; a
payload that passes validation but cannot be interpreted (for example an
unknown region index) is rejected with 422.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ...application import SizingApplication
from ...persistence import PersistenceService
from ...session_setup import SessionDataError
from .. import dependencies
from ..schemas import sizing as sizing_schemas

router = APIRouter(prefix="/api", tags=["sizing"])


@router.post("/sizing", response_model=sizing_schemas.SizingResponse)
def run_sizing(
    payload: sizing_schemas.SizingRequest,
    app_service: SizingApplication = Depends(dependencies.get_application_service),
) -> sizing_schemas.SizingResponse:
    """
    Size a PV system for the given household.

    Args:
        payload: Household inputs (mode, appliances or bill, region, config).
        app_service: Application service (dependency injected).

    Returns:
        SizingResponse with the normalized inputs and the engine result.

    Raises:
        HTTPException 422: If the inputs cannot be interpreted.

    Example:
        ```python
        # POST /api/sizing
        {"mode": "device", "appliances": [{"appliance_id": "water_heater", "hours_per_day": 2}]}

        # Response
        {
            "label": "adhoc",
            "inputs": {...},
            "result": {"required_system_size_kwp": 1.4, "number_of_panels": 3, ...},
            "calculation_id": 12
        }
        ```
    """
    try:
        summary = app_service.calculate(payload.to_session_data(), label=payload.label or "adhoc")
    except SessionDataError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return sizing_schemas.SizingResponse(**summary)


@router.post("/consultation", response_model=sizing_schemas.SizingResponse)
def run_consultation(
    payload: sizing_schemas.SizingRequest,
    app_service: SizingApplication = Depends(dependencies.get_application_service),
) -> sizing_schemas.SizingResponse:
    """
    Size a PV system and attach the advisory text.

    The advisory service never makes this endpoint fail: when it is not
    configured or unreachable the response carries a fallback message and
    ``advice_available`` is false.
    """
    try:
        summary = app_service.consult(payload.to_session_data(), label=payload.label or "adhoc")
    except SessionDataError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return sizing_schemas.SizingResponse(**summary)


@router.get("/runs", response_model=list[sizing_schemas.CalculationRecordResponse])
def list_runs(
    limit: int = Query(50, ge=1, le=500),
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[sizing_schemas.CalculationRecordResponse]:
    """
    List stored calculations, newest first.

    Args:
        limit: Maximum number of records (1-500).
    """
    return persistence.list_calculations(limit=limit)
