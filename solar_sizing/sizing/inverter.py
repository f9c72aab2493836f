from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

# Inverter AC capacity may sit 15% below the DC array nameplate.
DC_AC_SIZING_FACTOR = 0.85

MAX_DC_VOLTAGE_SINGLE_PHASE_V = 550.0
MAX_DC_VOLTAGE_THREE_PHASE_V = 1000.0


class PhaseType(str, Enum):
    SINGLE_PHASE = "single-phase"
    THREE_PHASE = "three-phase"

    @classmethod
    def parse(cls, value: Any) -> "PhaseType":
        """
        Accept enum members, canonical values and the short catalog spellings.

        Args:
            value: e.g. ``"single-phase"``, ``"1-Phase"``, ``"3P"``.

        Returns:
            Matching PhaseType.

        Raises:
            ValueError: If the value cannot be interpreted.
        """
        if isinstance(value, cls):
            return value
        token = str(value).strip().lower().replace("_", "-").replace(" ", "-")
        if token in ("single-phase", "1-phase", "1p", "single", "1"):
            return cls.SINGLE_PHASE
        if token in ("three-phase", "3-phase", "3p", "three", "3"):
            return cls.THREE_PHASE
        raise ValueError(f"Unknown inverter phase type: {value!r}")


@dataclass(frozen=True)
class InverterOption:
    """
    Inverter catalog entry.

    Attributes:
        capacity_kw: Rated AC capacity in kW.
        label: Commercial model name.
        brand: Manufacturer.
        phase_type: Grid connection type; drives the DC input voltage limit.
    """
    capacity_kw: float
    label: str
    brand: str
    phase_type: PhaseType = PhaseType.SINGLE_PHASE

    @property
    def max_dc_voltage_v(self) -> float:
        return max_dc_voltage_for(self.phase_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capacity_kw": self.capacity_kw,
            "label": self.label,
            "brand": self.brand,
            "phase_type": self.phase_type.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InverterOption":
        return cls(
            capacity_kw=float(data["capacity_kw"]),
            label=str(data["label"]),
            brand=str(data.get("brand") or ""),
            phase_type=PhaseType.parse(data.get("phase_type", PhaseType.SINGLE_PHASE)),
        )


def max_dc_voltage_for(phase_type: PhaseType) -> float:
    """Maximum DC input voltage policy for a given inverter phase type."""
    if phase_type == PhaseType.THREE_PHASE:
        return MAX_DC_VOLTAGE_THREE_PHASE_V
    return MAX_DC_VOLTAGE_SINGLE_PHASE_V


def select_inverter(
    required_system_size_kwp: float,
    catalog: Sequence[InverterOption],
) -> Optional[InverterOption]:
    """
    Pick the smallest inverter able to serve the array.

    An entry qualifies when ``capacity_kw >= 0.85 * required_system_size_kwp``.
    Entries are scanned in ascending capacity (catalog order is preserved for
    equal capacities, so the first listed wins a tie).

    Args:
        required_system_size_kwp: DC array size in kWp.
        catalog: Inverter options, nominally ordered by ascending capacity.
            The sequence is never modified.

    Returns:
        The first qualifying inverter, the largest entry when the array
        exceeds every capacity, or None when the catalog is empty.
    """
    if not catalog:
        return None
    ordered = sorted(catalog, key=lambda option: option.capacity_kw)
    threshold_kw = required_system_size_kwp * DC_AC_SIZING_FACTOR
    for option in ordered:
        if option.capacity_kw >= threshold_kw:
            return option
    return ordered[-1]
