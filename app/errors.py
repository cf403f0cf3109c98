"""
Domain exceptions for the rewards ledger.

Operations raise these; routers convert them into HTTP responses with
``to_http_error``.
"""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException


class RewardsError(Exception):
    """Base exception for all ledger errors."""
    status_code = 400

    def detail(self):
        return str(self)


class ValidationError(RewardsError):
    """Raised when an input is missing or out of range."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def detail(self):
        return {"error": "validation_error", "field": self.field, "message": self.message}


class NotFoundError(RewardsError):
    """Raised when a receipt, withdrawal or vendor id is unknown."""
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientBalanceError(RewardsError):
    """Raised when a withdrawal asks for more points than are available."""

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"Insufficient points available: requested {requested}, available {available}"
        )
        self.requested = requested
        self.available = available

    def detail(self):
        return {
            "error": "Insufficient points available",
            "requested": self.requested,
            "available": self.available,
        }


class InvalidStatusTransitionError(RewardsError):
    """Raised when forward-only transitions are enforced and a move goes backwards."""
    status_code = 409

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(f"Cannot move {entity} from {current} to {target}")
        self.entity = entity
        self.current = current
        self.target = target

    def detail(self):
        return {"error": str(self), "from": self.current, "to": self.target}


class StorageError(RewardsError):
    """Raised when the database call behind an operation fails."""
    status_code = 500

    def __init__(self, action: Optional[str] = None):
        super().__init__(f"Storage failure during {action}" if action else "Storage failure")
        self.action = action

    def detail(self):
        return "Internal server error"


def to_http_error(exc: RewardsError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.detail())
