from __future__ import annotations

import pytest

from conftest import plan_payload
from retirecalc.core.validation import require_valid, validate_inputs
from retirecalc.errors import InputValidationError
from retirecalc.schemas.plan import PlanInput


def make_plan(**overrides) -> PlanInput:
    return PlanInput(**plan_payload(**overrides))


def test_valid_plan_passes():
    assert validate_inputs(make_plan()) is None


def test_current_age_lower_bound():
    assert validate_inputs(make_plan(currentAge=18)) is None
    assert validate_inputs(make_plan(currentAge=17)) == "Current age must be between 18 and 100."


def test_retirement_age_equal_to_current_age_fails():
    message = validate_inputs(make_plan(currentAge=40, retirementAge=40))
    assert message == "Retirement age must be greater than current age."


def test_retirement_age_range():
    assert validate_inputs(make_plan(retirementAge=101)) == "Retirement age must be between 19 and 100."


def test_first_failing_rule_wins():
    plan = make_plan(currentAge=17, retirementAge=10, currentSavings=-5, email="nope")
    assert validate_inputs(plan) == "Current age must be between 18 and 100."


@pytest.mark.parametrize("field", ["currentSavings", "annualSalary", "monthlyContribution"])
def test_negative_money_rejected(field):
    assert validate_inputs(make_plan(**{field: -1})) == "Money values cannot be negative."


def test_zero_expenses_rejected():
    message = validate_inputs(make_plan(annualExpenses=0))
    assert message == "Annual retirement expenses must be greater than 0."


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({"annualReturn": 30.5}, "Expected annual return must be between 0% and 30%."),
        ({"annualReturn": float("nan")}, "Expected annual return must be between 0% and 30%."),
        ({"inflationRate": -0.1}, "Expected inflation rate must be between 0% and 15%."),
        ({"employerMatch": 101}, "Employer match must be between 0% and 100%."),
        ({"currentAge": 101}, "Current age must be between 18 and 100."),
        ({"retirementAge": 18}, "Retirement age must be between 19 and 100."),
        ({"employerMatch": -1}, "Employer match must be between 0% and 100%."),
        ({"yearsInRetirement": 0}, "Expected years in retirement must be between 1 and 50."),
        ({"yearsInRetirement": 51}, "Expected years in retirement must be between 1 and 50."),
        ({"lastName": "   "}, "Please enter your first name and last name."),
        ({"email": "ada.example.com"}, "Please enter a valid email address."),
        ({"country": ""}, "Please select your country."),
        ({"phone": " "}, "Please enter your phone number."),
    ],
)
def test_rule_messages(overrides, expected):
    assert validate_inputs(make_plan(**overrides)) == expected


def test_employer_match_not_checked_when_absent():
    assert validate_inputs(make_plan(employerMatch=None)) is None
    assert validate_inputs(make_plan(employerMatch=100)) is None


def test_email_check_is_loose():
    assert validate_inputs(make_plan(email="a@b")) is None


def test_currency_must_match_country():
    assert validate_inputs(make_plan(country="Canada", currency="CAD")) is None
    message = validate_inputs(make_plan(country="Canada", currency="USD"))
    assert message == "Currency is not available for the selected country."


def test_unknown_country_falls_back_to_default_currencies():
    assert validate_inputs(make_plan(country="Atlantis", currency="USD")) is None
    message = validate_inputs(make_plan(country="Atlantis", currency="EUR"))
    assert message == "Currency is not available for the selected country."


def test_currency_not_checked_when_absent():
    assert validate_inputs(make_plan(country="Canada", currency=None)) is None


def test_require_valid_raises_with_message():
    with pytest.raises(InputValidationError) as excinfo:
        require_valid(make_plan(currentAge=17))
    assert excinfo.value.message == "Current age must be between 18 and 100."
