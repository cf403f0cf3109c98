"""
Status vocabularies and the forward-only transition graph.

By default every administrative status call is an unconditional overwrite.
With ``enforce_forward_only`` the graphs below are the only moves allowed;
re-setting the current status is always accepted so notes can be amended.
"""
from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar

from app.errors import InvalidStatusTransitionError, ValidationError
from app.rewards.schemas import ReceiptStatus, WithdrawalStatus

E = TypeVar("E", bound=Enum)

RECEIPT_TRANSITIONS: dict[ReceiptStatus, set[ReceiptStatus]] = {
    ReceiptStatus.PENDING: {ReceiptStatus.APPROVED, ReceiptStatus.REJECTED},
    ReceiptStatus.APPROVED: set(),
    ReceiptStatus.REJECTED: set(),
}

WITHDRAWAL_TRANSITIONS: dict[WithdrawalStatus, set[WithdrawalStatus]] = {
    WithdrawalStatus.PENDING: {WithdrawalStatus.APPROVED, WithdrawalStatus.REJECTED},
    WithdrawalStatus.APPROVED: {WithdrawalStatus.COMPLETED, WithdrawalStatus.REJECTED},
    WithdrawalStatus.COMPLETED: set(),
    WithdrawalStatus.REJECTED: set(),
}


def parse_status(value, enum_cls: Type[E], field: str = "status") -> E:
    """Return ``enum_cls(value)`` or raise a field-level ``ValidationError``."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(field, f"must be one of: {allowed}") from None


def check_transition(
    entity: str,
    graph: dict,
    current: Enum,
    target: Enum,
    enforce_forward_only: bool,
) -> None:
    if not enforce_forward_only or current == target:
        return
    if target not in graph.get(current, set()):
        raise InvalidStatusTransitionError(entity, current.value, target.value)
