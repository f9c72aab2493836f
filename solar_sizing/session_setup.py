"""
Parsing of household session payloads.

A session is the set of values the user entered: consumption mode, appliance
list, monthly bill, sizing configuration and region. It arrives as JSON (CLI
file, API body, saved database row) and is turned into typed objects here, so
the engine itself only ever sees validated values.

Payload layout::

    {
        "mode": "device",
        "appliances": [
            {"appliance_id": "ac_1hp", "quantity": 2, "hours_per_day": 8},
            {"appliance_id": "custom_1", "name": "Hair dryer", "watts": 1200}
        ],
        "monthly_bill_amount": 0,
        "region_index": 1,
        "config": {"panel_wattage": 450, "system_efficiency": 0.8, "include_battery": false}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .sizing.appliances import ApplianceLoad
from .sizing.catalogs import DEFAULT_REGION_INDEX, get_catalog_appliance, get_region
from .sizing.consumption import ConsumptionMode
from .sizing.engine import SizingConfig, config_from_mapping

SessionData = Mapping[str, Any] | str | Path | None


class SessionDataError(ValueError):
    """Raised when a session payload cannot be interpreted."""


@dataclass
class SizingSession:
    """
    Typed view of a household session.

    Attributes:
        mode: Consumption input mode.
        appliances: Household loads (device mode).
        monthly_bill_amount: Monthly bill (bill mode).
        config: Sizing configuration with the region's sun hours applied.
        region_index: Selected region in the region table.
    """
    mode: ConsumptionMode = ConsumptionMode.DEVICE
    appliances: List[ApplianceLoad] = field(default_factory=list)
    monthly_bill_amount: float = 0.0
    config: SizingConfig = field(default_factory=SizingConfig)
    region_index: int = DEFAULT_REGION_INDEX

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "appliances": [load.to_dict() for load in self.appliances],
            "monthly_bill_amount": self.monthly_bill_amount,
            "config": self.config.to_dict(),
            "region_index": self.region_index,
        }


def load_session_data(source: SessionData = None) -> dict[str, Any]:
    """
    Load session data from JSON or return the provided mapping.

    Args:
        source: Path to a JSON file, mapping, or None for an empty session.

    Returns:
        Dictionary containing the session payload.

    Raises:
        SessionDataError: If the file is missing or not valid JSON.
    """
    if source is None:
        return {}
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise SessionDataError(f"Session file not found: {path}")
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SessionDataError(f"Invalid session JSON ({path}): {exc}") from exc
    return dict(source)


def _build_load(item: Mapping[str, Any]) -> ApplianceLoad:
    data = dict(item)
    appliance_id = data.get("appliance_id", data.get("id"))
    catalog_item = get_catalog_appliance(str(appliance_id)) if appliance_id else None
    if catalog_item is not None:
        data.setdefault("name", catalog_item.name)
        data.setdefault("category", catalog_item.category)
        data.setdefault("default_watts", catalog_item.default_watts)
    try:
        return ApplianceLoad.from_dict(data)
    except (TypeError, ValueError) as exc:
        raise SessionDataError(f"Invalid appliance entry {item!r}: {exc}") from exc


def _check_config(config: SizingConfig) -> None:
    if config.peak_sun_hours <= 0:
        raise SessionDataError(f"peak_sun_hours must be positive, got {config.peak_sun_hours}")
    if config.panel_wattage <= 0:
        raise SessionDataError(f"panel_wattage must be positive, got {config.panel_wattage}")
    if not 0 < config.system_efficiency <= 1:
        raise SessionDataError(
            f"system_efficiency must be in (0, 1], got {config.system_efficiency}"
        )


def build_sizing_session(source: SessionData = None) -> SizingSession:
    """
    Turn a raw payload into a SizingSession.

    The region supplies ``peak_sun_hours`` unless the config sets it
    explicitly. Missing config keys keep their defaults (450 W panels, 0.8
    efficiency, no battery).

    Args:
        source: Mapping, JSON path or None.

    Returns:
        SizingSession ready for ``compute_sizing``.

    Raises:
        SessionDataError: On unknown mode, bad region index or malformed entries,
            or config values outside the ranges the engine accepts.
    """
    data = load_session_data(source)

    try:
        mode = ConsumptionMode.parse(data.get("mode", ConsumptionMode.DEVICE))
    except ValueError as exc:
        raise SessionDataError(str(exc)) from exc

    region_index = data.get("region_index", DEFAULT_REGION_INDEX)
    try:
        region_index = int(region_index)
        region = get_region(region_index)
    except (TypeError, ValueError, IndexError) as exc:
        raise SessionDataError(f"Invalid region index {data.get('region_index')!r}") from exc

    config_data = dict(data.get("config") or {})
    config_data.setdefault("peak_sun_hours", region.peak_sun_hours)
    try:
        config = config_from_mapping(config_data)
        monthly_bill_amount = max(0.0, float(data.get("monthly_bill_amount") or 0.0))
    except (TypeError, ValueError) as exc:
        raise SessionDataError(f"Invalid session values: {exc}") from exc
    _check_config(config)

    appliances = [_build_load(item) for item in data.get("appliances") or []]
    return SizingSession(
        mode=mode,
        appliances=appliances,
        monthly_bill_amount=monthly_bill_amount,
        config=config,
        region_index=region_index,
    )
