"""
Server-rendered calculator page.

GET shows the form; POST validates it, runs the projection, renders the
results view with the chart and hands the lead to the background relay.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, render_template, request

from retirecalc.core.chart import render_chart_png
from retirecalc.core.currency import (
    COUNTRY_CURRENCIES,
    allowed_currencies,
    default_currency,
    format_money,
)
from retirecalc.core.projection import (
    OUT_OF_RANGE_MESSAGE,
    build_analysis,
    calculate_retirement,
    projection_in_range,
)
from retirecalc.core.relay import client_ip, lead_from_calculation
from retirecalc.core.validation import validate_inputs
from retirecalc.schemas.plan import PlanInput

logger = logging.getLogger(__name__)

pages_bp = Blueprint("pages", __name__)

INVALID_NUMBER_MESSAGE = "Please enter valid numbers."

DEFAULT_FORM: Dict[str, str] = {
    "currentAge": "30",
    "retirementAge": "65",
    "currentSavings": "10000",
    "annualSalary": "60000",
    "monthlyContribution": "500",
    "employerMatch": "3",
    "annualReturn": "7",
    "inflationRate": "3",
    "annualExpenses": "40000",
    "yearsInRetirement": "25",
    "firstName": "",
    "lastName": "",
    "email": "",
    "country": "United States",
    "currency": "USD",
    "phoneCode": "+1",
    "phone": "",
}

INT_FIELDS = ("currentAge", "retirementAge", "yearsInRetirement")
FLOAT_FIELDS = (
    "currentSavings",
    "annualSalary",
    "monthlyContribution",
    "employerMatch",
    "annualReturn",
    "inflationRate",
    "annualExpenses",
)
TEXT_FIELDS = ("firstName", "lastName", "email", "country", "phoneCode", "phone")


def _parse_number(s: Optional[str]) -> float:
    cleaned = (s or "").strip()
    for token in (",", "$", "£", "€", "₹", "%", " "):
        cleaned = cleaned.replace(token, "")
    # an empty box counts as zero
    if not cleaned:
        return 0.0
    return float(cleaned)


def _parse_whole(s: Optional[str]) -> int:
    value = _parse_number(s)
    if not value.is_integer():
        raise ValueError(f"expected a whole number, got {s!r}")
    return int(value)


def parse_form(form: Dict[str, str]) -> PlanInput:
    """Parse the HTML form into a PlanInput. Raises ValueError on bad numbers."""
    values: Dict[str, Any] = {}
    for field in INT_FIELDS:
        values[field] = _parse_whole(form.get(field))
    for field in FLOAT_FIELDS:
        values[field] = _parse_number(form.get(field))
    for field in TEXT_FIELDS:
        values[field] = form.get(field, "")
    values["currency"] = form.get("currency") or default_currency(values["country"])
    return PlanInput(**values)


def _render(form: Dict[str, str], error: Optional[str] = None, **results: Any):
    return render_template(
        "index.html",
        form=form,
        error=error,
        countries=list(COUNTRY_CURRENCIES),
        currencies=allowed_currencies(form.get("country")),
        money=format_money,
        **results,
    )


@pages_bp.get("/")
def index():
    return _render(dict(DEFAULT_FORM))


@pages_bp.post("/")
def submit():
    form = {**DEFAULT_FORM, **request.form.to_dict()}

    try:
        plan = parse_form(form)
    except ValueError:
        return _render(form, error=INVALID_NUMBER_MESSAGE)

    error = validate_inputs(plan)
    if error is not None:
        logger.info("form rejected: %s", error)
        return _render(form, error=error)

    results = calculate_retirement(plan)
    if not projection_in_range(results):
        logger.info("form rejected: projection out of range")
        return _render(form, error=OUT_OF_RANGE_MESSAGE)

    analysis = build_analysis(plan, results)
    chart_png = render_chart_png(results, plan.currency or "USD")

    dispatcher = current_app.extensions["lead_dispatcher"]
    dispatcher.submit(
        lead_from_calculation(plan, results),
        client_ip(request.headers.get("X-Forwarded-For")),
    )

    return _render(
        form,
        plan=plan,
        results=results,
        analysis=analysis,
        chart_png=chart_png,
    )
