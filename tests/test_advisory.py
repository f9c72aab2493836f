from __future__ import annotations

import requests

from solar_sizing.advisory import (
    CONNECTION_ERROR_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
    MISSING_KEY_MESSAGE,
    GeminiAdvisor,
    build_consultation_prompt,
)
from solar_sizing.config import AdvisorSettings
from solar_sizing.sizing.appliances import ApplianceLoad
from solar_sizing.sizing.engine import SizingConfig, compute_sizing


class FakeResponse:
    def __init__(self, payload=None, status_error=None, json_error=None):
        self._payload = payload
        self._status_error = status_error
        self._json_error = json_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        if self._json_error:
            raise self._json_error
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def _inputs(include_battery=False):
    loads = [ApplianceLoad("ac_1hp", "Air conditioner", "Cooling", 750.0, quantity=2, hours_per_day=8)]
    config = SizingConfig(include_battery=include_battery)
    return loads, config, compute_sizing("device", loads, 0.0, config)


def _settings(key="secret"):
    return AdvisorSettings(api_key=key, model="test-model", timeout_s=3.0, endpoint="https://example.test/models/")


def test_prompt_contains_household_and_system():
    loads, config, result = _inputs(include_battery=True)
    prompt = build_consultation_prompt(loads, config, result)

    assert "Air conditioner (x2): 750W, 8h/day -> total 12,000 Wh" in prompt
    assert f"{result.required_system_size_kwp} kWp" in prompt
    assert result.recommended_inverter.label in prompt
    assert "Storage battery" in prompt
    assert "2,500 VND/kWh" in prompt


def test_prompt_for_bill_mode_has_placeholder_line():
    config = SizingConfig()
    result = compute_sizing("bill", [], 1_000_000, config)
    prompt = build_consultation_prompt([], config, result)
    assert "No appliance list" in prompt
    assert "Storage battery" not in prompt


def test_missing_key_returns_fallback_without_request():
    session = FakeSession()
    advisor = GeminiAdvisor(settings=_settings(key=None), session=session)

    advice = advisor.generate(*_inputs())

    assert advice.text == MISSING_KEY_MESSAGE
    assert advice.succeeded is False
    assert session.calls == []


def test_successful_request():
    body = {"candidates": [{"content": {"parts": [{"text": "## Assessment\n"}, {"text": "Looks good."}]}}]}
    session = FakeSession(response=FakeResponse(payload=body))
    advisor = GeminiAdvisor(settings=_settings(), session=session)

    advice = advisor.generate(*_inputs())

    assert advice.succeeded is True
    assert advice.text == "## Assessment\nLooks good."
    url, kwargs = session.calls[0]
    assert url == "https://example.test/models/test-model:generateContent"
    assert kwargs["headers"] == {"x-goog-api-key": "secret"}
    assert kwargs["timeout"] == 3.0
    assert kwargs["json"]["contents"][0]["parts"][0]["text"].startswith("You are an expert")


def test_empty_reply_returns_fallback():
    session = FakeSession(response=FakeResponse(payload={"candidates": []}))
    advice = GeminiAdvisor(settings=_settings(), session=session).generate(*_inputs())
    assert advice.text == EMPTY_RESPONSE_MESSAGE
    assert advice.succeeded is False


def test_connection_error_returns_fallback():
    session = FakeSession(error=requests.ConnectionError("boom"))
    advice = GeminiAdvisor(settings=_settings(), session=session).generate(*_inputs())
    assert advice.text == CONNECTION_ERROR_MESSAGE
    assert advice.succeeded is False


def test_http_error_returns_fallback():
    response = FakeResponse(status_error=requests.HTTPError("403 Forbidden"))
    advice = GeminiAdvisor(settings=_settings(), session=FakeSession(response=response)).generate(*_inputs())
    assert advice.text == CONNECTION_ERROR_MESSAGE


def test_invalid_json_returns_fallback():
    response = FakeResponse(json_error=ValueError("not json"))
    advice = GeminiAdvisor(settings=_settings(), session=FakeSession(response=response)).generate(*_inputs())
    assert advice.text == CONNECTION_ERROR_MESSAGE
