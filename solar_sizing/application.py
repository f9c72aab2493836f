from __future__ import annotations

import logging
from typing import Any, Dict, List

from .advisory import AdvisoryTextGenerator, GeminiAdvisor
from .persistence import PersistenceService
from .result_builder import ResultBuilder
from .session_setup import SessionData, SessionDataError, SizingSession, build_sizing_session
from .sizing.catalogs import INVERTER_CATALOG
from .sizing.engine import CalculationResult, compute_sizing
from .sizing.inverter import InverterOption

logger = logging.getLogger(__name__)

ADHOC_LABEL = "adhoc"


def _build_summary(label: str, session: SizingSession, result: CalculationResult) -> Dict[str, Any]:
    """
    Assemble the JSON-friendly view of a calculation.

    Args:
        label: Session name or "adhoc".
        session: Parsed household inputs.
        result: Engine output.

    Returns:
        Dictionary with the label, the inputs and the result.
    """
    return {
        "label": label,
        "inputs": session.to_dict(),
        "result": result.to_dict(),
    }


class SizingApplication:
    """
    High-level orchestrator used by the CLI and the FastAPI surface.
    """

    def __init__(
        self,
        *,
        save_outputs: bool = False,
        persistence: PersistenceService | None = None,
        advisor: AdvisoryTextGenerator | None = None,
        result_builder: ResultBuilder | None = None,
    ) -> None:
        """
        Args:
            save_outputs: When True, ResultBuilder writes consultation reports.
            persistence: Optional PersistenceService for DB storage.
            advisor: Advisory text generator; GeminiAdvisor is created lazily when None.
            result_builder: Optional ResultBuilder for report files.
        """
        self.save_outputs = save_outputs
        self.persistence = persistence
        self.advisor = advisor
        self.result_builder = result_builder

    def inverter_catalog(self) -> List[InverterOption]:
        """Inverters stored in the database, or the built-in catalog when none are stored."""
        if self.persistence:
            stored = self.persistence.load_inverter_catalog()
            if stored:
                return stored
        return list(INVERTER_CATALOG)

    def _compute(self, session: SizingSession) -> CalculationResult:
        return compute_sizing(
            session.mode,
            session.appliances,
            session.monthly_bill_amount,
            session.config,
            inverter_catalog=self.inverter_catalog(),
        )

    def _get_advisor(self) -> AdvisoryTextGenerator:
        if self.advisor is None:
            self.advisor = GeminiAdvisor()
        return self.advisor

    def _run(
        self,
        session: SizingSession,
        *,
        label: str,
        with_advice: bool,
        saved_session=None,
    ) -> Dict[str, Any]:
        result = self._compute(session)
        logger.info(
            "Sizing '%s': %.0f Wh/day -> %.1f kWp, %d panels, inverter %s",
            label,
            result.total_daily_consumption_wh,
            result.required_system_size_kwp,
            result.number_of_panels,
            result.recommended_inverter.label if result.recommended_inverter else "none",
        )
        summary = _build_summary(label, session, result)

        advice = None
        if with_advice:
            advisory = self._get_advisor().generate(session.appliances, session.config, result)
            advice = advisory.text
            summary["advice"] = advice
            summary["advice_available"] = advisory.succeeded

        output_dir = None
        if self.save_outputs and self.result_builder:
            output_dir = self.result_builder.build_consultation(
                label,
                loads=session.appliances,
                config=session.config,
                result=result,
                advice=advice,
            )

        if self.persistence:
            record = self.persistence.record_calculation(
                label,
                {key: summary[key] for key in ("inputs", "result")},
                session=saved_session,
                advice=advice,
                output_dir=str(output_dir) if output_dir else None,
            )
            summary["calculation_id"] = record.id

        summary["output_dir"] = str(output_dir) if output_dir else None
        return summary

    def calculate(self, session_data: SessionData = None, *, label: str = ADHOC_LABEL) -> Dict[str, Any]:
        """
        Size a system for the given household inputs.

        Args:
            session_data: Mapping, JSON path or None (defaults).
            label: Name stored with the calculation record.

        Returns:
            Summary dictionary with inputs, result and optional output path.

        Raises:
            SessionDataError: If the payload cannot be interpreted.
        """
        session = build_sizing_session(session_data)
        return self._run(session, label=label, with_advice=False)

    def consult(self, session_data: SessionData = None, *, label: str = ADHOC_LABEL) -> Dict[str, Any]:
        """
        Size a system and attach the advisory text.

        The advisory call never fails the consultation: on error the summary
        carries a fallback message and ``advice_available`` is False.
        """
        session = build_sizing_session(session_data)
        return self._run(session, label=label, with_advice=True)

    def run_saved_session(
        self,
        config_id: int | None = None,
        name: str | None = None,
        *,
        with_advice: bool = False,
    ) -> Dict[str, Any]:
        """
        Re-run a stored household session.

        Args:
            config_id: Saved session ID.
            name: Saved session name (used when config_id is None).
            with_advice: Also request the advisory text.

        Raises:
            RuntimeError: If no persistence service is configured.
            ValueError: If neither identifier is given.
            LookupError: If the session does not exist.
        """
        if not self.persistence:
            raise RuntimeError("Persistence is required to run saved sessions.")
        if config_id is None and not name:
            raise ValueError("Provide a session id or name.")

        if config_id is not None:
            record = self.persistence.get_session_by_id(config_id)
        else:
            record = self.persistence.get_session_by_name(name)
        if record is None:
            raise LookupError(f"Saved session not found: {config_id if config_id is not None else name}")

        try:
            session = build_sizing_session(record.data)
        except SessionDataError:
            logger.error("Saved session '%s' holds invalid data", record.name)
            raise
        summary = self._run(session, label=record.name, with_advice=with_advice, saved_session=record)
        summary["session_id"] = record.id
        return summary
