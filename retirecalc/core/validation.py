"""Ordered input rules for a retirement plan.

Rules run in a fixed order and only the first failure is reported, so the
order below is the order users see messages in.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from retirecalc.core.currency import is_currency_allowed
from retirecalc.errors import InputValidationError
from retirecalc.schemas.plan import PlanInput

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("currentSavings", "annualSalary", "monthlyContribution")


def _between(value: float, low: float, high: float) -> bool:
    # NaN compares false against everything, so it never lands in a range
    return math.isfinite(value) and low <= value <= high


def validate_inputs(plan: PlanInput) -> Optional[str]:
    """Return the first violated rule's message, or None when the plan is valid."""
    # Ages
    if not _between(plan.currentAge, 18, 100):
        return "Current age must be between 18 and 100."
    if not _between(plan.retirementAge, 19, 100):
        return "Retirement age must be between 19 and 100."
    if plan.retirementAge <= plan.currentAge:
        return "Retirement age must be greater than current age."

    # Money
    for field in MONEY_FIELDS:
        value = getattr(plan, field)
        if not math.isfinite(value) or value < 0:
            return "Money values cannot be negative."
    if not math.isfinite(plan.annualExpenses) or plan.annualExpenses <= 0:
        return "Annual retirement expenses must be greater than 0."

    # Percent ranges
    if not _between(plan.annualReturn, 0, 30):
        return "Expected annual return must be between 0% and 30%."
    if not _between(plan.inflationRate, 0, 15):
        return "Expected inflation rate must be between 0% and 15%."
    if plan.employerMatch is not None and not _between(plan.employerMatch, 0, 100):
        return "Employer match must be between 0% and 100%."

    if not _between(plan.yearsInRetirement, 1, 50):
        return "Expected years in retirement must be between 1 and 50."

    # Contact
    if not plan.firstName.strip() or not plan.lastName.strip():
        return "Please enter your first name and last name."
    if "@" not in plan.email:
        return "Please enter a valid email address."
    if not plan.country:
        return "Please select your country."
    if not plan.phone.strip():
        return "Please enter your phone number."

    if plan.currency is not None and not is_currency_allowed(plan.country, plan.currency):
        return "Currency is not available for the selected country."

    return None


def require_valid(plan: PlanInput) -> PlanInput:
    """Raise InputValidationError unless every rule passes."""
    message = validate_inputs(plan)
    if message is not None:
        logger.info("plan rejected: %s", message)
        raise InputValidationError(message)
    return plan
