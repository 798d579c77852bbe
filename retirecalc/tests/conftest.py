from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from flask import Flask
from flask.testing import FlaskClient

from retirecalc.app import create_app
from retirecalc.config import Settings

CRM_ENDPOINT = "https://crm.example.test/v1/activities/create"


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = '{"activities":[]}'):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Stands in for requests.Session and records every POST."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class RecordingDispatcher:
    def __init__(self):
        self.submitted = []

    def submit(self, lead, source_ip=None):
        self.submitted.append((lead, source_ip))
        return None


def plan_payload(**overrides: Any) -> Dict[str, Any]:
    plan = {
        "currentAge": 30,
        "retirementAge": 65,
        "currentSavings": 10000,
        "annualSalary": 60000,
        "monthlyContribution": 500,
        "annualReturn": 7,
        "inflationRate": 3,
        "annualExpenses": 40000,
        "yearsInRetirement": 25,
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "country": "United States",
        "phoneCode": "+1",
        "phone": "555 0100",
    }
    plan.update(overrides)
    return plan


@pytest.fixture()
def settings() -> Settings:
    return Settings(ortto_api_key="test-key", ortto_endpoint=CRM_ENDPOINT)


@pytest.fixture()
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def app(settings: Settings, fake_session: FakeSession) -> Flask:
    flask_app = create_app(settings, http_session=fake_session)
    flask_app.config["TESTING"] = True
    yield flask_app
    flask_app.extensions["lead_dispatcher"].shutdown()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def dispatcher(app: Flask) -> RecordingDispatcher:
    recorder = RecordingDispatcher()
    real = app.extensions["lead_dispatcher"]
    app.extensions["lead_dispatcher"] = recorder
    yield recorder
    app.extensions["lead_dispatcher"] = real
