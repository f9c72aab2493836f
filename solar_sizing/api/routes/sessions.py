"""
Saved session API endpoints.

Saved sessions hold the household inputs under a unique name. Running a
saved session re-evaluates it against the current inverter catalog, so the
result can differ from the one computed when the session was saved.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from ...application import SizingApplication
from ...persistence import PersistenceService
from ...session_setup import SessionDataError
from .. import dependencies
from ..schemas import sessions as session_schemas
from ..schemas import sizing as sizing_schemas

router = APIRouter(prefix="/api", tags=["sessions"])


@router.get("/sessions", response_model=list[session_schemas.SavedSessionResponse])
def list_sessions(
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[session_schemas.SavedSessionResponse]:
    """List saved sessions ordered by name."""
    return persistence.list_sessions()


@router.post("/sessions", response_model=session_schemas.SavedSessionResponse)
def save_session(
    payload: session_schemas.SavedSessionCreate,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> session_schemas.SavedSessionResponse:
    """
    Create or update a saved session.

    Upsert is keyed on ``name``: saving under an existing name replaces the
    stored inputs.

    Example:
        ```python
        # POST /api/sessions
        {"name": "Nguyen family", "data": {"mode": "bill", "monthly_bill_amount": 1500000}}

        # Response
        {"id": 4, "name": "Nguyen family", "data": {"mode": "bill", ...}, "created_at": "..."}
        ```
    """
    return persistence.save_session(payload.name, payload.data.to_session_data())


@router.get("/sessions/{session_id}", response_model=session_schemas.SavedSessionResponse)
def get_session(
    session_id: int,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> session_schemas.SavedSessionResponse:
    """
    Fetch one saved session.

    Raises:
        HTTPException 404: If the session does not exist.
    """
    record = persistence.get_session_by_id(session_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return record


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(
    session_id: int,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> Response:
    """
    Delete a saved session.

    Calculations produced from the session are kept and unlinked.

    Raises:
        HTTPException 404: If the session does not exist.
    """
    if not persistence.delete_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return Response(status_code=204)


@router.post("/sessions/{session_id}/run", response_model=sizing_schemas.SizingResponse)
def run_session(
    session_id: int,
    advice: bool = False,
    app_service: SizingApplication = Depends(dependencies.get_application_service),
) -> sizing_schemas.SizingResponse:
    """
    Execute a saved session.

    Args:
        session_id: Saved session id.
        advice: Also request the advisory text.

    Raises:
        HTTPException 404: If the session does not exist.
        HTTPException 422: If the stored inputs are no longer valid.

    Example:
        ```python
        # POST /api/sessions/4/run?advice=true
        {"label": "Nguyen family", "session_id": 4, "result": {...}, "advice": "..."}
        ```
    """
    try:
        summary = app_service.run_saved_session(config_id=session_id, with_advice=advice)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SessionDataError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return sizing_schemas.SizingResponse(**summary)
