from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .reporting import generate_report
from .sizing.appliances import ApplianceLoad
from .sizing.engine import CalculationResult, SizingConfig


class ResultBuilder:
    """
    Handle persistence of consultation deliverables on disk.
    """

    def __init__(self, output_root: str | Path = "results") -> None:
        """
        Args:
            output_root: Base directory for generated assets.
        """
        self.output_root = Path(output_root)

    def build_consultation(
        self,
        label: str,
        *,
        loads: Sequence[ApplianceLoad],
        config: SizingConfig,
        result: CalculationResult,
        advice: str | None = None,
    ) -> Path:
        """
        Save the consultation report for one household.

        Args:
            label: Name used for the output directory.
            loads: Appliance loads (empty in bill mode).
            config: Sizing configuration.
            result: Engine output.
            advice: Optional advisory text appended to the report.
        """
        return generate_report(
            label,
            loads,
            config,
            result,
            advice=advice,
            output_root=self.output_root,
        )
