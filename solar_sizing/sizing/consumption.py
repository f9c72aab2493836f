from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from .appliances import ApplianceLoad

# Average residential tariff (VND per kWh) used to turn a bill into energy.
AVERAGE_UNIT_PRICE = 2500.0
DAYS_PER_MONTH = 30


class ConsumptionMode(str, Enum):
    DEVICE = "device"
    BILL = "bill"

    @classmethod
    def parse(cls, value: Any) -> "ConsumptionMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown consumption mode: {value!r} (expected 'device' or 'bill')") from exc


def device_consumption_wh(loads: Iterable[ApplianceLoad]) -> float:
    """Sum of quantity x watts x hours over all loads (0 for an empty list)."""
    return float(sum(load.daily_energy_wh for load in loads))


def bill_consumption_wh(monthly_bill_amount: float, unit_price: float = AVERAGE_UNIT_PRICE) -> float:
    """
    Convert a monthly bill into average daily energy.

    Args:
        monthly_bill_amount: Amount paid per month, in the tariff currency.
        unit_price: Average price per kWh.

    Returns:
        Daily energy in Wh: (bill / unit_price) * 1000 / 30.
    """
    if monthly_bill_amount <= 0:
        return 0.0
    return (monthly_bill_amount / unit_price) * 1000.0 / DAYS_PER_MONTH


def aggregate_consumption(
    mode: ConsumptionMode | str,
    appliance_loads: Iterable[ApplianceLoad] = (),
    monthly_bill_amount: float = 0.0,
) -> float:
    """
    Total daily consumption for the selected input mode.

    Args:
        mode: ``device`` sums the appliance list, ``bill`` converts the bill.
        appliance_loads: Loads used in device mode.
        monthly_bill_amount: Bill used in bill mode.

    Returns:
        Daily consumption in Wh (>= 0).
    """
    if ConsumptionMode.parse(mode) == ConsumptionMode.BILL:
        return bill_consumption_wh(monthly_bill_amount)
    return device_consumption_wh(appliance_loads)


def consumption_by_category(loads: Iterable[ApplianceLoad]) -> List[Tuple[str, float]]:
    """
    Group daily energy by appliance category.

    Returns:
        (category, Wh) pairs sorted by descending energy; categories keep
        their first-seen order on ties.
    """
    totals: Dict[str, float] = {}
    for load in loads:
        totals[load.category] = totals.get(load.category, 0.0) + load.daily_energy_wh
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)
