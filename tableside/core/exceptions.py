"""
Typed errors raised by the ordering and floor-plan core.

Every core operation either returns its result or raises exactly one of the
errors below. The API layer maps them onto HTTP responses in ``tableside.main``.
"""

from typing import Any, Dict, List, Optional, Sequence
import uuid


class TablesideError(Exception):
    """Base error with a stable machine-readable code"""

    error_code = "TABLESIDE_ERROR"

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if error_code is not None:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a response payload"""
        return {"detail": self.detail, "error_code": self.error_code}


class ValidationError(TablesideError):
    """Malformed input, e.g. an empty order or a non-positive quantity"""

    error_code = "VALIDATION_ERROR"


class NotFoundError(TablesideError):
    """Referenced record does not exist"""

    error_code = "NOT_FOUND"


class ConflictError(TablesideError):
    """Business-rule conflict, e.g. a second open order on one table"""

    error_code = "CONFLICT"

    def __init__(self, detail: str, order_id: Optional[uuid.UUID] = None):
        super().__init__(detail)
        self.order_id = order_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.order_id is not None:
            data["order_id"] = str(self.order_id)
        return data


class InvalidTransitionError(TablesideError):
    """Requested order status is not the successor of the current one"""

    error_code = "INVALID_TRANSITION"

    def __init__(self, current_status: Any, requested_status: Any):
        self.current_status = _status_value(current_status)
        self.requested_status = _status_value(requested_status)
        super().__init__(
            f"Cannot transition from {self.current_status} to {self.requested_status}"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "current_status": self.current_status,
            "requested_status": self.requested_status,
        })
        return data


class PositionError(TablesideError):
    """Placement would break the floor-plan boundary or overlap rules"""

    error_code = "POSITION_ERROR"

    def __init__(self, violations: Sequence[str], detail: Optional[str] = None):
        self.violations: List[str] = list(violations)
        super().__init__(detail or "Invalid table position: " + ", ".join(self.violations))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["violations"] = self.violations
        return data


class InvariantViolationError(TablesideError):
    """Stored data contradicts a modelling invariant; not user-recoverable"""

    error_code = "INVARIANT_VIOLATION"

    def __init__(self, detail: str, table_id: Optional[uuid.UUID] = None,
                 order_ids: Optional[Sequence[uuid.UUID]] = None):
        super().__init__(detail)
        self.table_id = table_id
        self.order_ids = list(order_ids or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.table_id is not None:
            data["table_id"] = str(self.table_id)
        data["order_ids"] = [str(order_id) for order_id in self.order_ids]
        return data


def _status_value(status: Any) -> str:
    return getattr(status, "value", str(status))
