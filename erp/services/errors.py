# erp/services/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """
    Domain error raised by services; the HTTP layer turns it into a Problem body.

    - error_code: stable machine code
    - status:     HTTP status the problem is rendered with
    - context:    offending ids / quantities, so callers can act without a second lookup
    """

    error_code = "service_error"
    status = 400

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})


class NotFoundError(ServiceError):
    error_code = "not_found"
    status = 404


class BadRequestError(ServiceError):
    error_code = "bad_request"
    status = 400


class InsufficientStockError(BadRequestError):
    error_code = "insufficient_stock"


class CapacityExceededError(BadRequestError):
    error_code = "capacity_exceeded"


class MissingInventoryError(BadRequestError):
    error_code = "inventory_missing"
