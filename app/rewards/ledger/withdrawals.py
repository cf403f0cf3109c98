"""
Withdrawal requests: balance-checked creation, administrative processing,
listing.
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from app.database import storage_guard, utcnow
from app.errors import InsufficientBalanceError, NotFoundError, ValidationError
from app.rewards.ledger.calculator import get_user_rewards
from app.rewards.ledger.locks import visitor_locks
from app.rewards.ledger.points import money_for_points
from app.rewards.ledger.receipts import require_visitor
from app.rewards.ledger.transitions import WITHDRAWAL_TRANSITIONS, check_transition, parse_status
from app.rewards.models.withdrawal import WithdrawalRequestModel
from app.rewards.schemas import PaymentMethod, WithdrawalStatus

logger = logging.getLogger(__name__)


def request_withdrawal(
    db: Session,
    visitor_id: str,
    points_amount: int,
    payment_method,
    payment_details: str,
    min_points: int = 0,
) -> WithdrawalRequestModel:
    """Create a pending withdrawal if the visitor can cover it.

    ``min_points`` is the per-request policy floor; the HTTP layer passes
    ``settings.MIN_WITHDRAWAL_POINTS``.

    Raises:
        ValidationError: malformed points, method or details, or below ``min_points``.
        InsufficientBalanceError: ``points_amount`` exceeds the available balance.
    """
    require_visitor(visitor_id)
    if isinstance(points_amount, bool) or not isinstance(points_amount, int) or points_amount <= 0:
        raise ValidationError("pointsAmount", "must be a positive integer")
    if points_amount < min_points:
        raise ValidationError("pointsAmount", f"minimum withdrawal is {min_points} points")
    method = parse_status(payment_method, PaymentMethod, field="paymentMethod")
    if not isinstance(payment_details, str) or not payment_details.strip():
        raise ValidationError("paymentDetails", "must not be empty")

    with visitor_locks.hold(visitor_id):
        available = get_user_rewards(db, visitor_id).available_for_withdrawal
        if points_amount > available:
            logger.info(
                "Withdrawal refused  visitor=%s  requested=%d  available=%d",
                visitor_id, points_amount, available,
            )
            raise InsufficientBalanceError(points_amount, available)

        withdrawal = WithdrawalRequestModel(
            id=str(uuid.uuid4()),
            visitor_id=visitor_id,
            points_amount=points_amount,
            money_amount=money_for_points(points_amount),
            payment_method=method.value,
            payment_details=payment_details.strip(),
            status=WithdrawalStatus.PENDING.value,
            created_at=utcnow(),
        )
        with storage_guard(db, "request_withdrawal"):
            db.add(withdrawal)
            db.commit()
            db.refresh(withdrawal)

    logger.info(
        "Stored withdrawal %s  visitor=%s  points=%d  money=%s",
        withdrawal.id, visitor_id, points_amount, withdrawal.money_amount,
    )
    return withdrawal


def get_withdrawal(db: Session, withdrawal_id: str) -> WithdrawalRequestModel:
    with storage_guard(db, "get_withdrawal"):
        row = (
            db.query(WithdrawalRequestModel)
            .filter(WithdrawalRequestModel.id == withdrawal_id)
            .first()
        )
    if not row:
        logger.warning("Withdrawal request not found: %s", withdrawal_id)
        raise NotFoundError("Withdrawal request", withdrawal_id)
    return row


def set_withdrawal_status(
    db: Session,
    withdrawal_id: str,
    status,
    admin_notes: Optional[str] = None,
    enforce_forward_only: bool = False,
) -> WithdrawalRequestModel:
    target = parse_status(status, WithdrawalStatus)
    withdrawal = get_withdrawal(db, withdrawal_id)
    current = parse_status(withdrawal.status, WithdrawalStatus)
    check_transition("withdrawal", WITHDRAWAL_TRANSITIONS, current, target, enforce_forward_only)

    if current == WithdrawalStatus.COMPLETED and target != current:
        # the payout already happened; the derived balance will release the points again
        logger.warning(
            "Completed withdrawal %s moved to %s; %d points return to visitor %s",
            withdrawal_id, target.value, withdrawal.points_amount, withdrawal.visitor_id,
        )

    withdrawal.status = target.value
    withdrawal.admin_notes = admin_notes
    withdrawal.processed_at = utcnow()
    with storage_guard(db, "set_withdrawal_status"):
        db.commit()
        db.refresh(withdrawal)
    logger.info("Withdrawal %s: %s -> %s", withdrawal_id, current.value, target.value)
    return withdrawal


def list_withdrawals(db: Session, visitor_id: Optional[str] = None) -> list[WithdrawalRequestModel]:
    """A visitor's requests, or every request when ``visitor_id`` is None; newest first."""
    query = db.query(WithdrawalRequestModel)
    if visitor_id is not None:
        query = query.filter(WithdrawalRequestModel.visitor_id == require_visitor(visitor_id))
    with storage_guard(db, "list_withdrawals"):
        return query.order_by(WithdrawalRequestModel.created_at.desc()).all()
