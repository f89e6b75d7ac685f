"""Validation primitives for plugin APIs."""

from __future__ import annotations

import math
from typing import Any, Mapping, TypeVar

import pydantic
from pydantic import BaseModel


class ValidationError(ValueError):
    """Raised when validation fails."""

    def __init__(self, message: str, *, details: Any | None = None):
        super().__init__(message)
        self.details = details


class SchemaModel(BaseModel):
    """Strict base model for request/response validation."""

    model_config = pydantic.ConfigDict(extra="forbid", str_strip_whitespace=True)


TModel = TypeVar("TModel", bound=SchemaModel)


def parse_model(model: type[TModel], payload: Mapping[str, Any] | None) -> TModel:
    payload = payload or {}
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        raise ValidationError("Invalid request payload", details=details) from exc


def require_finite(value: float, field: str) -> float:
    """Return ``value`` as a float, rejecting NaN and infinities."""

    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number")
    return value


__all__ = [
    "ValidationError",
    "SchemaModel",
    "parse_model",
    "require_finite",
]
