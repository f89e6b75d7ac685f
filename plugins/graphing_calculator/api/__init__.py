"""API routes for the Graphing Calculator plugin.

One :class:`PlotSession` lives on each Flask application. Every route that
touches it holds the session lock, so concurrent requests are applied one at
a time.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Literal

from flask import Blueprint, Response, current_app, request

from common.errors import ConflictAppError, ValidationAppError
from common.logging import get_logger
from common.responses import fail, ok
from common.validation import SchemaModel, ValidationError, parse_model, require_finite

from ..core import (
    GraphingError,
    GraphingSettings,
    PlotSession,
    Sample,
    SessionError,
    StackMachine,
    compile_source,
    load_settings,
)

logger = get_logger("graphing_calculator.api")

_STATE_KEY = "graphing_calculator.session"


class SessionPayload(SchemaModel):
    expressions: list[str]
    angle_unit: Literal["radian", "degree"] = "radian"


class SamplesPayload(SchemaModel):
    x_start: float
    x_end: float


class ModePayload(SchemaModel):
    angle_unit: Literal["radian", "degree"]


class EvaluatePayload(SchemaModel):
    expression: str
    x: float
    angle_unit: Literal["radian", "degree"] = "radian"


@dataclass(slots=True)
class _SessionSlot:
    session: PlotSession
    lock: threading.Lock


api_bp = Blueprint("graphing_calculator_api", __name__, url_prefix="/api/graphing_calculator")


def _settings() -> GraphingSettings:
    raw = current_app.config.get("PLUGIN_SETTINGS", {}).get("graphing_calculator", {})
    return load_settings(raw)


def _slot() -> _SessionSlot:
    slot = current_app.extensions.get(_STATE_KEY)
    if slot is None:
        slot = current_app.extensions.setdefault(
            _STATE_KEY, _SessionSlot(PlotSession(_settings()), threading.Lock())
        )
    return slot


def _finite_or_none(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


def _serialize_samples(samples: list[Sample]) -> list[list[float | None]]:
    return [[sample.x, _finite_or_none(sample.y)] for sample in samples]


def _invalid_request(exc: ValidationError) -> Response:
    return fail(
        ValidationAppError(
            message=str(exc),
            code="graphing.invalid_request",
            details=getattr(exc, "details", None),
        )
    )


@api_bp.post("/session")
def create_session() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(SessionPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)

    slot = _slot()
    with slot.lock:
        try:
            outcomes = slot.session.initialize(payload.expressions)
        except SessionError as exc:
            return fail(ValidationAppError(message=str(exc), code="graphing.too_many_expressions"))
        session = slot.session
        session.set_angle_unit(payload.angle_unit)
        return ok(
            {
                "results": [
                    {"expression": item.expression, "ok": item.ok, "error": item.error}
                    for item in outcomes
                ],
                "compiled": len(session),
                "angle_unit": session.angle_unit,
                "step": session.step,
            }
        )


@api_bp.delete("/session")
def reset_session() -> Response:
    slot = _slot()
    with slot.lock:
        slot.session.reset()
    return ok({"reset": True})


@api_bp.post("/samples")
def samples() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(SamplesPayload, raw_payload)
        x_start = require_finite(payload.x_start, "x_start")
        x_end = require_finite(payload.x_end, "x_end")
    except ValidationError as exc:
        return _invalid_request(exc)

    slot = _slot()
    settings = slot.session.settings
    if x_end <= x_start:
        return fail(ValidationAppError(message="x_end must be greater than x_start", code="graphing.invalid_range"))
    if x_end - x_start > settings.max_viewport_width:
        return fail(
            ValidationAppError(
                message=f"Viewport may be at most {settings.max_viewport_width:g} units wide",
                code="graphing.invalid_range",
            )
        )

    with slot.lock:
        session = slot.session
        if not len(session):
            return fail(ConflictAppError(message="No expressions have been compiled", code="graphing.no_session"))
        series = session.plot(x_start, x_end)
        return ok(
            {
                "step": session.step,
                "epsilon": session.epsilon,
                "angle_unit": session.angle_unit,
                "series": [
                    {
                        "index": item.index,
                        "expression": item.expression,
                        "cached": item.cached,
                        "samples": _serialize_samples(item.samples),
                    }
                    for item in series
                ],
            }
        )


@api_bp.post("/expand")
def expand() -> Response:
    slot = _slot()
    with slot.lock:
        session = slot.session
        if not len(session):
            return fail(ConflictAppError(message="No expressions have been compiled", code="graphing.no_session"))
        sizes = session.expand()
    return ok({"cache_sizes": sizes, "max_cache_size": session.settings.max_cache_size})


@api_bp.post("/mode")
def mode() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(ModePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    slot = _slot()
    with slot.lock:
        changed = slot.session.set_angle_unit(payload.angle_unit)
    return ok({"angle_unit": payload.angle_unit, "changed": changed})


@api_bp.post("/evaluate")
def evaluate() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(EvaluatePayload, raw_payload)
        x = require_finite(payload.x, "x")
    except ValidationError as exc:
        return _invalid_request(exc)

    settings = _settings()
    try:
        program = compile_source(payload.expression, settings.epsilon_for_step(settings.fine_step))
    except GraphingError as exc:
        logger.info("evaluate rejected %r: %s", payload.expression, exc)
        return fail(ValidationAppError(message=str(exc), code="graphing.invalid_expression"))
    value = StackMachine(program, angle_unit=payload.angle_unit).evaluate(x)
    result = _finite_or_none(value)
    return ok(
        {
            "expression": payload.expression,
            "x": x,
            "result": result,
            "defined": result is not None,
            "instructions": program.listing(),
            "angle_unit": payload.angle_unit,
        }
    )


blueprints = [api_bp]


__all__ = [
    "blueprints",
    "create_session",
    "reset_session",
    "samples",
    "expand",
    "mode",
    "evaluate",
]
