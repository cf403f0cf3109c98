"""
Rewards and withdrawal endpoints (visitor scope).

GET  /api/rewards       — derived point balances
POST /api/withdrawals   — convert points to money
GET  /api/withdrawals   — the caller's withdrawal requests
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.deps import get_visitor_id
from app.errors import RewardsError, to_http_error
from app.rewards import ledger
from app.rewards.schemas import UserRewards, WithdrawalCreateRequest, WithdrawalRequest

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/rewards ─────────────────────────────────────────────────────
@router.get("/rewards", response_model=UserRewards)
def get_rewards(
    visitor_id: str = Depends(get_visitor_id),
    db: Session = Depends(get_db),
):
    try:
        return ledger.get_user_rewards(db, visitor_id)
    except RewardsError as e:
        raise to_http_error(e)


# ── POST /api/withdrawals ────────────────────────────────────────────────
@router.post("/withdrawals", response_model=WithdrawalRequest, status_code=201)
def request_withdrawal(
    req: WithdrawalCreateRequest,
    visitor_id: str = Depends(get_visitor_id),
    db: Session = Depends(get_db),
):
    try:
        withdrawal = ledger.request_withdrawal(
            db,
            visitor_id=visitor_id,
            points_amount=req.points_amount,
            payment_method=req.payment_method,
            payment_details=req.payment_details,
            min_points=settings.MIN_WITHDRAWAL_POINTS,
        )
    except RewardsError as e:
        raise to_http_error(e)
    return WithdrawalRequest.model_validate(withdrawal)


# ── GET /api/withdrawals ─────────────────────────────────────────────────
@router.get("/withdrawals", response_model=List[WithdrawalRequest])
def list_withdrawals(
    visitor_id: str = Depends(get_visitor_id),
    db: Session = Depends(get_db),
):
    try:
        rows = ledger.list_withdrawals(db, visitor_id)
    except RewardsError as e:
        raise to_http_error(e)
    return [WithdrawalRequest.model_validate(w) for w in rows]
