from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

DEFAULT_HOURS_PER_DAY = 4.0
MIN_HOURS_PER_DAY = 0.1
MAX_HOURS_PER_DAY = 24.0
CUSTOM_CATEGORY = "Other"


@dataclass(frozen=True)
class CatalogAppliance:
    """
    Reference appliance used to seed new loads.

    Attributes:
        appliance_id: Stable catalog key (e.g. "ac_1hp").
        name: Display name.
        category: Free-form grouping label.
        default_watts: Nameplate power used when the user does not override it.
    """
    appliance_id: str
    name: str
    category: str
    default_watts: float


@dataclass
class ApplianceLoad:
    """
    One appliance the household has added to its consumption list.

    The category is an open label: custom appliances may introduce any value,
    so it is only ever used for grouping and display.

    Attributes:
        appliance_id: Stable key shared with the catalog entry (or custom id).
        name: Display name.
        category: Free-form grouping label.
        default_watts: Catalog power rating in W.
        quantity: Number of identical units (>= 1).
        hours_per_day: Daily usage in hours, within [0.1, 24].
        watts: User override of the power rating; ``None`` means use
            ``default_watts``.
    """
    appliance_id: str
    name: str
    category: str
    default_watts: float
    quantity: int = 1
    hours_per_day: float = DEFAULT_HOURS_PER_DAY
    watts: float | None = None

    @property
    def effective_watts(self) -> float:
        """Power rating actually used for energy figures."""
        return self.default_watts if self.watts is None else self.watts

    @property
    def daily_energy_wh(self) -> float:
        """Daily energy of the load: quantity x watts x hours."""
        return self.quantity * self.effective_watts * self.hours_per_day

    def adjust_quantity(self, delta: int) -> None:
        """
        Change the quantity by ``delta`` without going below one unit.

        Args:
            delta: Signed increment (e.g. +1 / -1 from stepper buttons).
        """
        self.quantity = max(1, self.quantity + int(delta))

    def set_hours(self, hours: float) -> None:
        """Set daily hours, clamped to [0.1, 24]."""
        self.hours_per_day = min(MAX_HOURS_PER_DAY, max(MIN_HOURS_PER_DAY, float(hours)))

    def set_watts(self, watts: float) -> None:
        """Override the power rating; negative values are clamped to zero."""
        self.watts = max(0.0, float(watts))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "appliance_id": self.appliance_id,
            "name": self.name,
            "category": self.category,
            "default_watts": self.default_watts,
            "quantity": self.quantity,
            "hours_per_day": self.hours_per_day,
            "watts": self.effective_watts,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ApplianceLoad":
        """
        Rebuild a load from its serialized form.

        ``default_watts`` falls back to ``watts`` for payloads that only carry
        the actual rating, and the clamping rules of the setters are applied so
        stored data can never produce a negative or zero-quantity load.

        Args:
            data: Mapping with at least ``appliance_id`` (or ``id``) and ``name``.

        Returns:
            ApplianceLoad instance.
        """
        appliance_id = data.get("appliance_id", data.get("id"))
        if not appliance_id:
            raise ValueError("Appliance payload requires an 'appliance_id'.")
        watts = data.get("watts")
        default_watts = data.get("default_watts", watts if watts is not None else 0.0)
        load = cls(
            appliance_id=str(appliance_id),
            name=str(data.get("name") or appliance_id),
            category=str(data.get("category") or CUSTOM_CATEGORY),
            default_watts=max(0.0, float(default_watts)),
            quantity=max(1, int(data.get("quantity", 1))),
        )
        load.set_hours(data.get("hours_per_day", DEFAULT_HOURS_PER_DAY))
        if watts is not None:
            load.set_watts(watts)
        return load


def load_from_catalog(appliance: CatalogAppliance) -> ApplianceLoad:
    """
    Seed a new load from a catalog entry (quantity 1, 4 h/day, default watts).
    """
    return ApplianceLoad(
        appliance_id=appliance.appliance_id,
        name=appliance.name,
        category=appliance.category,
        default_watts=appliance.default_watts,
        watts=appliance.default_watts,
    )


def create_custom_appliance(
    name: str,
    watts: float,
    category: str = CUSTOM_CATEGORY,
    *,
    appliance_id: str | None = None,
) -> CatalogAppliance:
    """
    Build a user-defined appliance that is not part of the static catalog.

    Args:
        name: Display name, must not be blank.
        watts: Power rating in W (negative values are clamped to zero).
        category: Free-form label; defaults to "Other".
        appliance_id: Explicit id; generated as ``custom_<epoch ms>`` when omitted.

    Returns:
        CatalogAppliance ready to be passed to ``add_appliance``.

    Raises:
        ValueError: If ``name`` is blank.
    """
    if not name or not name.strip():
        raise ValueError("Custom appliance name must not be empty.")
    return CatalogAppliance(
        appliance_id=appliance_id or f"custom_{int(time.time() * 1000)}",
        name=name.strip(),
        category=category or CUSTOM_CATEGORY,
        default_watts=max(0.0, float(watts)),
    )


def add_appliance(loads: List[ApplianceLoad], appliance: CatalogAppliance) -> ApplianceLoad:
    """
    Add an appliance to the list, or bump the quantity if it is already there.

    Args:
        loads: Current household list (mutated in place).
        appliance: Catalog or custom appliance to add.

    Returns:
        The new or updated ApplianceLoad.
    """
    for load in loads:
        if load.appliance_id == appliance.appliance_id:
            load.adjust_quantity(1)
            return load
    load = load_from_catalog(appliance)
    loads.append(load)
    return load


def remove_appliance(loads: List[ApplianceLoad], appliance_id: str) -> bool:
    """
    Remove the load with ``appliance_id``.

    Returns:
        True when a load was removed.
    """
    for index, load in enumerate(loads):
        if load.appliance_id == appliance_id:
            del loads[index]
            return True
    return False
