"""
DC string / MPPT wiring plan for the PV array.

The planner works with nominal design constants rather than datasheet values:
every panel is treated as a 50 V open-circuit source and a 1.15 margin covers
the Voc rise on cold mornings. At most two strings are ever produced, one per
MPPT input, which matches the two-tracker residential inverters in the
catalog.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

from .inverter import PhaseType, max_dc_voltage_for

PANEL_VOC_V = 50.0
TEMP_SAFETY_FACTOR = 1.15
MAX_STRINGS = 2


@dataclass(frozen=True)
class StringDesign:
    """
    Series/parallel layout of the array.

    Attributes:
        total_strings: 1 or 2.
        panels_per_string: Panels in the (largest) string.
        panels_in_smaller_string: Panels in the second string (0 for a
            single-string layout).
        connection_description: Human-readable layout summary.
        input_mode_description: How the inverter MPPT inputs are used.
        string_voltage_v: Nominal Voc of the longest string.
        max_panels_per_string: Voltage-limited string length for the inverter.
        balanced: True when both strings have the same length.
        within_voltage_limit: False when the larger string is longer than
            ``max_panels_per_string`` (arrays beyond two full strings).
    """
    total_strings: int
    panels_per_string: int
    panels_in_smaller_string: int
    connection_description: str
    input_mode_description: str
    string_voltage_v: float
    max_panels_per_string: int
    balanced: bool
    within_voltage_limit: bool

    @property
    def mppt_inputs_used(self) -> int:
        return self.total_strings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def max_panels_per_string(phase_type: PhaseType) -> int:
    """
    Longest series string the inverter input tolerates.

    Args:
        phase_type: Inverter phase type (sets 550 V or 1000 V input limit).

    Returns:
        floor(max_voltage / (panel Voc x temperature factor)).
    """
    return math.floor(max_dc_voltage_for(phase_type) / (PANEL_VOC_V * TEMP_SAFETY_FACTOR))


def plan_strings(number_of_panels: int, phase_type: PhaseType) -> StringDesign:
    """
    Split the array into one or two series strings.

    Arrays that fit a single string use one MPPT input. Larger arrays are split
    in two halves (the larger half gets the odd panel) on two independent MPPT
    inputs; equal halves are the recommended balanced layout.

    Args:
        number_of_panels: Panel count from the sizing step (>= 0).
        phase_type: Phase type of the selected inverter.

    Returns:
        StringDesign for the array.
    """
    limit = max_panels_per_string(phase_type)
    if number_of_panels <= limit:
        return StringDesign(
            total_strings=1,
            panels_per_string=number_of_panels,
            panels_in_smaller_string=0,
            connection_description=f"1 string x {number_of_panels} panels in series",
            input_mode_description="Single MPPT input (one string, series connection)",
            string_voltage_v=number_of_panels * PANEL_VOC_V,
            max_panels_per_string=limit,
            balanced=True,
            within_voltage_limit=True,
        )

    larger = math.ceil(number_of_panels / MAX_STRINGS)
    smaller = number_of_panels // MAX_STRINGS
    balanced = larger == smaller
    if balanced:
        connection = f"2 strings x {larger} panels in series"
        input_mode = "2 independent MPPT inputs (balanced, recommended)"
    else:
        connection = f"2 strings: {larger} + {smaller} panels in series"
        input_mode = "2 independent MPPT inputs (unbalanced strings)"
    return StringDesign(
        total_strings=MAX_STRINGS,
        panels_per_string=larger,
        panels_in_smaller_string=smaller,
        connection_description=connection,
        input_mode_description=input_mode,
        string_voltage_v=larger * PANEL_VOC_V,
        max_panels_per_string=limit,
        balanced=balanced,
        within_voltage_limit=larger <= limit,
    )
