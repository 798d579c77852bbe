"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from retirecalc.core.currency import allowed_currencies, default_currency
from retirecalc.core.health import get_health
from retirecalc.core.projection import (
    OUT_OF_RANGE_MESSAGE,
    build_analysis,
    calculate_retirement,
    projection_in_range,
)
from retirecalc.core.relay import client_ip
from retirecalc.core.validation import require_valid
from retirecalc.errors import InputValidationError, RelayUpstreamError
from retirecalc.schemas.lead import LeadRequest
from retirecalc.schemas.plan import CalculationResponse, CurrencyOptions, PlanInput

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    response = get_health(current_app.config["SETTINGS"])
    return jsonify(response.model_dump())


@api_bp.post("/calculate")
def calculate() -> Any:
    """Validate a plan and return its projection plus the narrative summary."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    plan = PlanInput.model_validate(raw_payload)

    try:
        require_valid(plan)
    except InputValidationError as exc:
        return jsonify({"error": exc.message}), HTTPStatus.BAD_REQUEST

    results = calculate_retirement(plan)
    if not projection_in_range(results):
        logger.info("calculation rejected: projection out of range")
        return jsonify({"error": OUT_OF_RANGE_MESSAGE}), HTTPStatus.BAD_REQUEST

    response = CalculationResponse(
        results=results,
        analysis=build_analysis(plan, results),
        currency=plan.currency or "USD",
    )
    return jsonify(response.model_dump())


@api_bp.get("/currencies")
def currencies() -> Any:
    """Currencies offered for a country; the first one is the default."""
    country = request.args.get("country", "")
    response = CurrencyOptions(
        country=country,
        currencies=allowed_currencies(country),
        default=default_currency(country),
    )
    return jsonify(response.model_dump())


@api_bp.route("/lead", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def lead() -> Any:
    """Relay a submitted lead to the CRM and echo the remote status."""
    if request.method != "POST":
        return jsonify({"error": "Method not allowed"}), HTTPStatus.METHOD_NOT_ALLOWED

    try:
        relay = current_app.extensions.get("lead_relay")
        if relay is None:
            settings = current_app.config["SETTINGS"]
            return (
                jsonify({"error": "Missing env vars", "missing": settings.missing_relay_settings()}),
                HTTPStatus.INTERNAL_SERVER_ERROR,
            )

        payload = request.get_json(silent=True) or {}
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict) or not data.get("email"):
            return jsonify({"error": "Missing email in payload.data.email"}), HTTPStatus.BAD_REQUEST

        try:
            lead_request = LeadRequest.model_validate(payload)
        except ValidationError as exc:
            return (
                jsonify({"error": "Invalid payload", "detail": exc.errors(include_url=False)}),
                HTTPStatus.BAD_REQUEST,
            )

        source_ip = client_ip(request.headers.get("X-Forwarded-For"))
        result = relay.forward(lead_request, source_ip)
        status = HTTPStatus.OK if result.ok else HTTPStatus.INTERNAL_SERVER_ERROR
        return jsonify(result.model_dump()), status

    except RelayUpstreamError as exc:
        logger.warning("CRM unreachable: %s", exc)
        return jsonify({"error": "Server error", "details": str(exc)}), HTTPStatus.INTERNAL_SERVER_ERROR
    except Exception as exc:
        logger.exception("lead relay failed")
        return jsonify({"error": "Server error", "details": str(exc)}), HTTPStatus.INTERNAL_SERVER_ERROR
