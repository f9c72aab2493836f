from __future__ import annotations

import pytest
from pathlib import Path
import sys

from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from solar_sizing.db.session import Base, build_engine, build_session_factory, init_db  # noqa: E402
from solar_sizing.persistence import PersistenceService  # noqa: E402
from solar_sizing.advisory import AdvisoryResult, AdvisoryTextGenerator  # noqa: E402


@pytest.fixture()
def sqlite_session_factory():
    """Provide a session factory bound to an in-memory SQLite database."""
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    init_db(engine)
    yield build_session_factory(engine)
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def persistence(sqlite_session_factory):
    """Provide a PersistenceService bound to the temporary SQLite DB."""
    return PersistenceService(session_factory=sqlite_session_factory)


class StubAdvisor(AdvisoryTextGenerator):
    """Advisor returning canned text and recording its calls."""

    def __init__(self, text: str = "Use south-facing panels.", succeeded: bool = True) -> None:
        self.text = text
        self.succeeded = succeeded
        self.calls = []

    def generate(self, appliances, config, result):
        self.calls.append((list(appliances), config, result))
        return AdvisoryResult(self.text, succeeded=self.succeeded)


@pytest.fixture()
def stub_advisor() -> StubAdvisor:
    return StubAdvisor()


@pytest.fixture()
def device_session_data() -> dict:
    """Household with a 1 kW heater used 5 h/day (5 kWh/day) in the central region."""
    return {
        "mode": "device",
        "appliances": [
            {
                "appliance_id": "heater",
                "name": "Heater",
                "category": "Household",
                "watts": 1000,
                "hours_per_day": 5,
            }
        ],
        "region_index": 1,
        "config": {"panel_wattage": 450, "system_efficiency": 0.8},
    }


@pytest.fixture()
def bill_session_data() -> dict:
    """Household described by a 1,000,000 VND monthly bill."""
    return {
        "mode": "bill",
        "monthly_bill_amount": 1_000_000,
        "region_index": 1,
        "config": {"include_battery": True},
    }


@pytest.fixture()
def catalog_session_data() -> dict:
    """Household built from catalog appliances only."""
    return {
        "mode": "device",
        "appliances": [
            {"appliance_id": "ac_1hp", "quantity": 2, "hours_per_day": 8},
            {"appliance_id": "fridge_small", "hours_per_day": 24},
            {"appliance_id": "lights_led", "quantity": 10, "hours_per_day": 6},
        ],
        "region_index": 2,
    }
