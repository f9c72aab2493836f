"""
Advisory text for the consultation report.

The sizing result, the appliance list and the configuration are summarized
into a prompt and sent to a text-generation service. The reply is free text
(Markdown) shown next to the numeric report. Any failure (missing key,
network error, unexpected payload) is turned into a fixed, user-readable
message: the numeric report never depends on this call.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import requests

from .config import AdvisorSettings, get_advisor_settings
from .sizing.appliances import ApplianceLoad
from .sizing.consumption import AVERAGE_UNIT_PRICE
from .sizing.engine import CalculationResult, SizingConfig

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "Error: the advisory API key is not configured. "
    "Set SOLAR_SIZING_API_KEY in the environment to enable expert advice."
)
EMPTY_RESPONSE_MESSAGE = "Sorry, the consultation could not be generated right now."
CONNECTION_ERROR_MESSAGE = (
    "An error occurred while contacting the advisory service. Please try again later."
)
UNDETERMINED_INVERTER = "Not yet determined"

SYSTEM_INSTRUCTIONS = """
You are an expert solar energy consultant for Vietnamese households.
Analyse the customer's electricity consumption and write a professional consultation report.
"""

TASK_PROMPT = """
Customer data:
- Region: {peak_sun_hours} peak sun hours/day.
- Planned panel: {panel_wattage}W.
- Expected consumption: {daily_kwh:.2f} kWh/day.

Proposed system:
- System size: {system_kwp} kWp.
- Number of panels: {number_of_panels}.
- Recommended inverter: {inverter_info}.{battery_line}

Appliances in the household:
{appliance_lines}

Required output (Markdown):
1. **Demand assessment**: short comment on the consumption level. Which appliances use the most energy?
2. **Configuration review**: is a {system_kwp} kWp system sufficient? Comment on the {inverter_info} inverter
   (e.g. is single-phase or three-phase appropriate for a household?).
3. **Economic benefit**: estimate monthly bill savings (electricity price ~{unit_price:,.0f} VND/kWh)
   and a rough payback period.
4. **Installation advice**: orientation (usually south-facing), panel cleaning and electrical safety.

Tone: professional and trustworthy.
"""


@dataclass(frozen=True)
class AdvisoryResult:
    """
    Outcome of an advisory request.

    Attributes:
        text: Advisory Markdown, or a fixed fallback message.
        succeeded: False when ``text`` is a fallback message.
    """
    text: str
    succeeded: bool


def _describe_inverter(result: CalculationResult) -> str:
    inverter = result.recommended_inverter
    if inverter is None:
        return UNDETERMINED_INVERTER
    return f"{inverter.label} ({inverter.phase_type.value})"


def build_consultation_prompt(
    appliances: Iterable[ApplianceLoad],
    config: SizingConfig,
    result: CalculationResult,
) -> str:
    """
    Render the prompt sent to the text-generation service.

    Args:
        appliances: Household loads (empty in bill mode).
        config: Sizing configuration.
        result: Engine output for the same inputs.

    Returns:
        Prompt text with system instructions and task.
    """
    lines = [
        f"- {load.name} (x{load.quantity}): {load.effective_watts:g}W, "
        f"{load.hours_per_day:g}h/day -> total {load.daily_energy_wh:,.0f} Wh"
        for load in appliances
    ]
    if not lines:
        lines = ["- No appliance list (consumption estimated from the monthly bill)"]
    battery_line = ""
    if result.recommended_battery_size_kwh is not None:
        battery_line = f"\n- Storage battery: {result.recommended_battery_size_kwh} kWh."
    task = TASK_PROMPT.format(
        peak_sun_hours=config.peak_sun_hours,
        panel_wattage=config.panel_wattage,
        daily_kwh=result.total_daily_consumption_wh / 1000.0,
        system_kwp=result.required_system_size_kwp,
        number_of_panels=result.number_of_panels,
        inverter_info=_describe_inverter(result),
        battery_line=battery_line,
        appliance_lines="\n".join(lines),
        unit_price=AVERAGE_UNIT_PRICE,
    )
    return SYSTEM_INSTRUCTIONS.strip() + "\n" + task


class AdvisoryTextGenerator(ABC):
    """
    Narrow interface toward the advisory service.

    Implementations must never raise: failures are reported through
    ``AdvisoryResult.succeeded`` with a fallback message.
    """

    @abstractmethod
    def generate(
        self,
        appliances: Iterable[ApplianceLoad],
        config: SizingConfig,
        result: CalculationResult,
    ) -> AdvisoryResult:
        raise NotImplementedError


class GeminiAdvisor(AdvisoryTextGenerator):
    """
    Advisory generator backed by the Gemini ``generateContent`` REST endpoint.

    Example:
        ```python
        advisor = GeminiAdvisor()  # settings from the environment
        advice = advisor.generate(loads, config, result)
        print(advice.text)
        ```
    """

    def __init__(
        self,
        settings: AdvisorSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Args:
            settings: Connection settings; read from the environment when None.
            session: Optional requests session (connection reuse, tests).
        """
        self.settings = settings or get_advisor_settings()
        self._http = session or requests.Session()

    def _request_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            # Plain summarization task: skip the thinking phase for a faster reply.
            "generationConfig": {"thinkingConfig": {"thinkingBudget": 0}},
        }

    @staticmethod
    def _extract_text(body: Mapping[str, Any]) -> str:
        candidates = body.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts).strip()

    def generate(
        self,
        appliances: Iterable[ApplianceLoad],
        config: SizingConfig,
        result: CalculationResult,
    ) -> AdvisoryResult:
        if not self.settings.api_key:
            logger.warning("Advisory API key missing; returning fallback message")
            return AdvisoryResult(MISSING_KEY_MESSAGE, succeeded=False)

        prompt = build_consultation_prompt(appliances, config, result)
        url = f"{self.settings.endpoint.rstrip('/')}/{self.settings.model}:generateContent"
        try:
            response = self._http.post(
                url,
                json=self._request_payload(prompt),
                headers={"x-goog-api-key": self.settings.api_key},
                timeout=self.settings.timeout_s,
            )
            response.raise_for_status()
            text = self._extract_text(response.json())
        except (requests.RequestException, ValueError, AttributeError, TypeError) as exc:
            logger.error("Advisory request failed: %s", exc, exc_info=True)
            return AdvisoryResult(CONNECTION_ERROR_MESSAGE, succeeded=False)

        if not text:
            logger.warning("Advisory service returned an empty reply")
            return AdvisoryResult(EMPTY_RESPONSE_MESSAGE, succeeded=False)
        return AdvisoryResult(text, succeeded=True)
