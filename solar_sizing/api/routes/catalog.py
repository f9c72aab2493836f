"""
Catalog API endpoints.

Read-only reference data (appliances, regions, panels) plus the inverter
catalog, which supports upsert by label. When the inverter table holds at
least one row the sizing engine uses it instead of the built-in list, so
``GET /api/inverters`` always returns the catalog that sizing will use.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ...application import SizingApplication
from ...persistence import PersistenceService
from ...sizing.catalogs import PANEL_OPTIONS, REGIONS, search_appliances
from .. import dependencies
from ..schemas import catalog as catalog_schemas

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/catalog/appliances", response_model=list[catalog_schemas.CatalogApplianceResponse])
def list_catalog_appliances(
    search: str | None = Query(None, description="Case-insensitive filter on name or category"),
) -> list[catalog_schemas.CatalogApplianceResponse]:
    """
    List reference appliances, optionally filtered by name or category.

    Args:
        search: Substring matched case-insensitively against the appliance name and category.

    Example:
        ```python
        # GET /api/catalog/appliances?search=air
        [
            {"appliance_id": "ac_1hp", "name": "Air conditioner 1 HP", "category": "Cooling", "default_watts": 750},
            {"appliance_id": "ac_2hp", "name": "Air conditioner 2 HP", "category": "Cooling", "default_watts": 1500}
        ]
        ```
    """
    return [
        catalog_schemas.CatalogApplianceResponse.model_validate(item)
        for item in search_appliances(search)
    ]


@router.get("/catalog/regions", response_model=list[catalog_schemas.RegionResponse])
def list_regions() -> list[catalog_schemas.RegionResponse]:
    """
    List climate regions with their peak sun hours.

    The ``index`` is what sizing requests send as ``region_index``.
    """
    return [
        catalog_schemas.RegionResponse(index=index, name=region.name, peak_sun_hours=region.peak_sun_hours)
        for index, region in enumerate(REGIONS)
    ]


@router.get("/catalog/panels", response_model=list[catalog_schemas.PanelOptionResponse])
def list_panels() -> list[catalog_schemas.PanelOptionResponse]:
    return [catalog_schemas.PanelOptionResponse.model_validate(panel) for panel in PANEL_OPTIONS]


@router.get("/inverters", response_model=list[catalog_schemas.InverterResponse])
def list_inverters(
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
    app_service: SizingApplication = Depends(dependencies.get_application_service),
) -> list[catalog_schemas.InverterResponse]:
    """
    List the inverter catalog used for sizing.

    Returns database entries (with ids) when the table is populated,
    otherwise the built-in catalog (``id`` null). Entries are ordered by
    ascending capacity.

    Example:
        ```python
        # GET /api/inverters
        [
            {"id": null, "label": "Growatt MIN 3000TL-X", "brand": "Growatt",
             "capacity_kw": 3.0, "phase_type": "single-phase", "max_dc_voltage_v": 550.0},
            ...
        ]
        ```
    """
    stored = persistence.list_inverters()
    if stored:
        return [catalog_schemas.InverterResponse.model_validate(record) for record in stored]
    return [
        catalog_schemas.InverterResponse.model_validate(option.to_dict())
        for option in app_service.inverter_catalog()
    ]


@router.post("/inverters", response_model=catalog_schemas.InverterResponse)
def upsert_inverter(
    payload: catalog_schemas.InverterCreate,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> catalog_schemas.InverterResponse:
    """
    Create or update an inverter in the catalog.

    Upsert is keyed on ``label``. Once any inverter is stored, sizing uses
    the stored catalog only.

    Example:
        ```python
        # POST /api/inverters
        {"label": "Growatt 8kW 1P", "brand": "Growatt", "capacity_kw": 8.0, "phase_type": "1-phase"}

        # Response
        {"id": 1, "label": "Growatt 8kW 1P", "capacity_kw": 8.0, "phase_type": "single-phase", ...}
        ```
    """
    record = persistence.upsert_inverter(payload.model_dump(mode="json"))
    return catalog_schemas.InverterResponse.model_validate(record)
