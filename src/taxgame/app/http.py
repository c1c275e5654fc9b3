"""HTTP helper utilities for the preview server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flask import jsonify


@dataclass(frozen=True)
class ProblemResponse:
    """Small JSON error body returned instead of Flask's HTML error pages."""

    error: str
    status: int
    message: str | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        return payload

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), self.status


def problem_response(error: str, *, status: int, message: str | None = None) -> ProblemResponse:
    return ProblemResponse(error=error, status=status, message=message)


__all__ = ["ProblemResponse", "problem_response"]
