from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from .inverter import InverterOption, PhaseType
from .strings import StringDesign

DC_CABLE = "DC 4.0 mm² (Solar Cable)"
PANEL_VMP_V = 41.5
PANEL_ISC_A = 11.5
# Capacity assumed for cable sizing before an inverter is known.
FALLBACK_INVERTER_KW = 5.0

# (max inverter kW, AC cable, breaker), first matching row wins.
SINGLE_PHASE_AC_TABLE: Tuple[Tuple[float, str, str], ...] = (
    (3.0, "2x2.5 mm² + E", "20A"),
    (5.5, "2x6.0 mm² + E", "40A"),
    (10.0, "2x10.0 mm² + E", "63A"),
)
SINGLE_PHASE_AC_DEFAULT = ("2x4.0 mm² + E", "32A")

THREE_PHASE_AC_TABLE: Tuple[Tuple[float, str, str], ...] = (
    (10.0, "4x4.0 mm² + E", "25A (3P)"),
)
THREE_PHASE_AC_DEFAULT = ("4x10.0 mm² + E", "40A (3P)")


@dataclass(frozen=True)
class TechnicalSheet:
    """
    Installer-facing electrical summary of the proposed system.

    Attributes:
        dc_cable: PV string cable.
        ac_cable: Inverter to distribution board cable.
        breaker: AC protection breaker rating.
        phase_label: Grid connection shown to the installer.
        string_voc_v: Open-circuit voltage of the longest string.
        string_vmp_v: Working voltage of the longest string.
        isc_a: Short-circuit current per string.
    """
    dc_cable: str
    ac_cable: str
    breaker: str
    phase_label: str
    string_voc_v: float
    string_vmp_v: float
    isc_a: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def ac_protection(inverter: Optional[InverterOption]) -> Tuple[str, str]:
    """
    AC cable and breaker for the inverter output.

    Args:
        inverter: Selected inverter; None is treated as a 5 kW single-phase unit.

    Returns:
        (cable, breaker) pair.
    """
    capacity_kw = inverter.capacity_kw if inverter is not None else FALLBACK_INVERTER_KW
    if inverter is not None and inverter.phase_type == PhaseType.THREE_PHASE:
        table, default = THREE_PHASE_AC_TABLE, THREE_PHASE_AC_DEFAULT
    else:
        table, default = SINGLE_PHASE_AC_TABLE, SINGLE_PHASE_AC_DEFAULT
    for max_kw, cable, breaker in table:
        if capacity_kw <= max_kw:
            return cable, breaker
    return default


def build_technical_sheet(
    inverter: Optional[InverterOption],
    string_design: StringDesign,
) -> TechnicalSheet:
    """Assemble cabling, protection and string electrical figures."""
    ac_cable, breaker = ac_protection(inverter)
    three_phase = inverter is not None and inverter.phase_type == PhaseType.THREE_PHASE
    return TechnicalSheet(
        dc_cable=DC_CABLE,
        ac_cable=ac_cable,
        breaker=breaker,
        phase_label="3-phase (380V)" if three_phase else "1-phase (220V)",
        string_voc_v=round(string_design.string_voltage_v, 1),
        string_vmp_v=round(string_design.panels_per_string * PANEL_VMP_V, 1),
        isc_a=PANEL_ISC_A,
    )
