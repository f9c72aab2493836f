"""
API route modules for the sizing application.

Route handlers are organized by domain:
- catalog: Reference catalogs and the inverter catalog
- sizing: Ad-hoc sizing, consultations and calculation history
- sessions: Saved household sessions and their execution

All routers are prefixed with /api.
"""

from __future__ import annotations

from .catalog import router as catalog_router
from .sessions import router as sessions_router
from .sizing import router as sizing_router

__all__ = [
    "catalog_router",
    "sizing_router",
    "sessions_router",
]
