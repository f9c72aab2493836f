"""
Saved session schemas.

A saved session stores the household inputs under a unique name so the same
sizing can be re-run later (for example after the inverter catalog changed).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .sizing import SizingRequest


class SavedSessionCreate(BaseModel):
    """
    Payload for creating or updating a saved session (upsert by name).

    Example:
        ```python
        # POST /api/sessions
        {
            "name": "Nguyen family",
            "data": {
                "mode": "device",
                "appliances": [{"appliance_id": "fridge", "hours_per_day": 24}],
                "region_index": 2
            }
        }
        ```
    """

    name: str = Field(..., min_length=1, max_length=255)
    data: SizingRequest


class SavedSessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    data: Dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
