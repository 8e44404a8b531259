# app/core/errors.py
"""
Typed failures raised by the service layer.

Routers let these propagate; the handlers registered in ``app.main`` turn
them into the JSON error envelope with the matching status code.
"""
from typing import Any, Dict, Optional


class SchoolError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, "error": self.detail}


class ValidationError(SchoolError):
    status_code = 400

    def __init__(self, detail: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(detail)
        self.errors = errors or {}

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFoundError(SchoolError):
    status_code = 404


class ConflictError(SchoolError):
    status_code = 409

    def __init__(self, detail: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(detail)
        self.context = context

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.context is not None:
            payload["context"] = self.context
        return payload


class CapacityError(ConflictError):
    """A conflict caused by running out of something: copies, seats, amount due."""

    def __init__(self, detail: str, available: float, requested: float):
        super().__init__(detail, context={"available": available, "requested": requested})
        self.available = available
        self.requested = requested


class TransientExternalError(Exception):
    """Outbound gateway failure. Callers log it and carry on."""
