"""Response helpers shared by the finance controllers."""

from __future__ import annotations

from flask import jsonify
from pydantic import BaseModel, ValidationError

from perfin.domains.finance.errors import FinanceError


def error_response(exc: FinanceError):
    return jsonify(exc.to_dict()), exc.status


def validation_failed(exc: ValidationError):
    return (
        jsonify(
            {
                "ok": False,
                "error": "validation_error",
                "message": "Request payload is invalid.",
                "details": exc.errors(include_url=False, include_context=False, include_input=False),
            }
        ),
        400,
    )


def parse_body(schema: type[BaseModel], payload: dict):
    """Validate ``payload``; returns ``(model, None)`` or ``(None, error_response)``."""
    try:
        return schema.model_validate(payload), None
    except ValidationError as exc:
        return None, validation_failed(exc)
