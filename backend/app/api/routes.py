"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, jsonify, request
from loguru import logger
from pydantic import ValidationError

from backend import __version__
from backend.core.scenarios import IncomeSchedule
from backend.core.simulation import simulate
from backend.core.solver import RequiredContributionParams, required_monthly_to_hit
from backend.domain.roadmap import build_roadmap, default_inputs
from backend.schemas.health import HealthResponse
from backend.schemas.roadmap import (
    RequiredContributionResponse,
    RoadmapInputs,
    SimulationRequest,
)

api_bp = Blueprint("api", __name__)


class MalformedBody(Exception):
    pass


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning(f"Rejected request to {request.path}: {exc.error_count()} validation error(s)")
    detail = exc.errors(include_url=False, include_context=False)
    return jsonify({"detail": detail}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(MalformedBody)
def _handle_malformed_body(exc: MalformedBody):
    logger.warning(f"Rejected request to {request.path}: {exc}")
    return jsonify({"detail": str(exc)}), HTTPStatus.BAD_REQUEST


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise MalformedBody("request body must be a JSON object")
    return payload


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = HealthResponse(message="pong", version=__version__)
    return jsonify(response.model_dump())


@api_bp.get("/defaults")
def defaults() -> Any:
    """The dashboard's prefilled inputs."""
    return jsonify(default_inputs().model_dump(mode="json"))


@api_bp.post("/roadmap")
def roadmap() -> Any:
    """All three scenarios toward both targets plus the required contribution."""
    inputs = RoadmapInputs.model_validate(_json_body())
    report = build_roadmap(inputs)
    return jsonify(report.model_dump(mode="json"))


@api_bp.post("/simulate")
def simulation() -> Any:
    payload = SimulationRequest.model_validate(_json_body())
    result = simulate(
        start=payload.start,
        month_count=payload.month_count,
        annual_return_rate=payload.annual_return_rate,
        monthly_expenses=payload.monthly_expenses,
        start_balances=payload.start_balances,
        income_fn=IncomeSchedule(**payload.income.model_dump()),
        lump_sums=payload.lump_sums,
        invest_buffer=payload.invest_buffer,
        target=payload.target,
    )
    return jsonify(result.model_dump(mode="json"))


@api_bp.post("/required-contribution")
def required_contribution() -> Any:
    params = RequiredContributionParams.model_validate(_json_body())
    monthly = required_monthly_to_hit(params)
    response = RequiredContributionResponse(
        required_monthly=monthly,
        required_monthly_display=max(0.0, monthly),
    )
    return jsonify(response.model_dump())
