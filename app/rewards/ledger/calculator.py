"""
Derived visitor balances.

Nothing here is stored: every call aggregates the receipt and withdrawal
ledgers as they are at that moment.
"""
from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import storage_guard
from app.rewards.ledger.receipts import require_visitor
from app.rewards.models.receipt import ReceiptModel
from app.rewards.models.withdrawal import WithdrawalRequestModel
from app.rewards.schemas import ReceiptStatus, UserRewards, WithdrawalStatus

# withdrawals whose points are no longer available to the visitor
RESERVED_WITHDRAWAL_STATUSES = (
    WithdrawalStatus.PENDING.value,
    WithdrawalStatus.APPROVED.value,
)
SPENT_WITHDRAWAL_STATUSES = (WithdrawalStatus.COMPLETED.value,)


def _totals_by_status(db: Session, column, points_column, visitor_column, visitor_id: str):
    rows = (
        db.query(column, func.count(), func.coalesce(func.sum(points_column), 0))
        .filter(visitor_column == visitor_id)
        .group_by(column)
        .all()
    )
    return {status: (int(count), int(points or 0)) for status, count, points in rows}


def get_user_rewards(db: Session, visitor_id: str) -> UserRewards:
    require_visitor(visitor_id)
    with storage_guard(db, "get_user_rewards"):
        receipts = _totals_by_status(
            db, ReceiptModel.status, ReceiptModel.points_earned,
            ReceiptModel.visitor_id, visitor_id,
        )
        withdrawals = _totals_by_status(
            db, WithdrawalRequestModel.status, WithdrawalRequestModel.points_amount,
            WithdrawalRequestModel.visitor_id, visitor_id,
        )

    total_points = receipts.get(ReceiptStatus.APPROVED.value, (0, 0))[1]
    pending_points = receipts.get(ReceiptStatus.PENDING.value, (0, 0))[1]
    total_receipts = sum(count for count, _ in receipts.values())

    withdrawn = sum(withdrawals.get(s, (0, 0))[1] for s in SPENT_WITHDRAWAL_STATUSES)
    reserved = sum(withdrawals.get(s, (0, 0))[1] for s in RESERVED_WITHDRAWAL_STATUSES)

    return UserRewards(
        visitor_id=visitor_id,
        total_points=total_points,
        total_receipts=total_receipts,
        pending_points=pending_points,
        available_for_withdrawal=total_points - withdrawn - reserved,
    )
