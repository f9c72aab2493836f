from __future__ import annotations

import math

# Share of one day's production kept as stored reserve.
BATTERY_RESERVE_FRACTION = 0.4
# Smallest commercially practical battery module.
MIN_BATTERY_SIZE_KWH = 2.4


def ceil_to_tenth(value: float) -> float:
    """
    Round up to the next 0.1.

    The product is rounded to 9 decimals before ``ceil`` so binary noise such
    as ``3.0 * 0.4 * 10 == 12.000000000000002`` does not push the result a full
    step up.
    """
    return math.ceil(round(value * 10.0, 9)) / 10.0


def recommend_battery_size(
    estimated_daily_production_kwh: float,
    include_battery: bool,
) -> float | None:
    """
    Size the optional storage bank.

    Args:
        estimated_daily_production_kwh: Daily PV production of the sized array.
        include_battery: Whether the household asked for storage.

    Returns:
        Capacity in kWh (40% of daily production, rounded up to 0.1 and never
        below 2.4), or None when no battery was requested.
    """
    if not include_battery:
        return None
    capacity_kwh = ceil_to_tenth(estimated_daily_production_kwh * BATTERY_RESERVE_FRACTION)
    if capacity_kwh < MIN_BATTERY_SIZE_KWH:
        return MIN_BATTERY_SIZE_KWH
    return capacity_kwh
