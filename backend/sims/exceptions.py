"""
SIMS exception hierarchy

Every domain error raised by the services derives from SIMSException and is
rendered by the handler registered in sims.main as:

    {"error": "<ERROR_CODE>", "message": "...", "details": {...}}
"""
from typing import Any, Dict, Optional


class SIMSException(Exception):
    """Base class for all SIMS domain errors."""

    error_code = "SIMS_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(SIMSException):
    """A numeric field is missing, negative or otherwise unusable."""

    error_code = "INVALID_INPUT"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if field is not None:
            details.setdefault("field", field)
        super().__init__(message, details)
        self.field = field


class NotFoundError(SIMSException):
    """A referenced record does not exist."""

    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            f"{resource} with ID {resource_id} does not exist",
            {"resource": resource, "id": resource_id},
        )
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(SIMSException):
    """The write would duplicate an existing record."""

    error_code = "CONFLICT"
    status_code = 409


class UnachievableMarginError(SIMSException):
    """Desired profit margin plus platform fees leave nothing to cover cost."""

    error_code = "UNACHIEVABLE_MARGIN"
    status_code = 422

    def __init__(self, desired_profit_margin: float, platform_fees: float):
        super().__init__(
            "Unachievable margin configuration: desired profit margin "
            f"({desired_profit_margin}%) plus platform fees ({platform_fees}%) "
            "must be below 100%",
            {
                "desired_profit_margin": desired_profit_margin,
                "platform_fees": platform_fees,
            },
        )
        self.desired_profit_margin = desired_profit_margin
        self.platform_fees = platform_fees
