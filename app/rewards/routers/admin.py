"""
Administrative review of receipts and withdrawals.

GET   /api/admin/receipts                    — every receipt
PATCH /api/admin/receipts/{id}/status        — approve / reject a receipt
GET   /api/admin/withdrawals                 — every withdrawal request
PATCH /api/admin/withdrawals/{id}/status     — advance a withdrawal

All routes require an authenticated admin session.
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.deps import require_admin
from app.errors import RewardsError, to_http_error
from app.rewards import ledger
from app.rewards.schemas import Receipt, StatusUpdateRequest, WithdrawalRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@router.get("/receipts", response_model=List[Receipt])
def list_all_receipts(db: Session = Depends(get_db)):
    try:
        rows = ledger.list_receipts(db)
    except RewardsError as e:
        raise to_http_error(e)
    return [Receipt.model_validate(r) for r in rows]


@router.patch("/receipts/{receipt_id}/status", response_model=Receipt)
def update_receipt_status(
    receipt_id: str,
    req: StatusUpdateRequest,
    db: Session = Depends(get_db),
):
    try:
        receipt = ledger.set_receipt_status(
            db,
            receipt_id,
            req.status,
            admin_notes=req.admin_notes,
            enforce_forward_only=settings.ENFORCE_FORWARD_ONLY_TRANSITIONS,
        )
    except RewardsError as e:
        raise to_http_error(e)
    return Receipt.model_validate(receipt)


@router.get("/withdrawals", response_model=List[WithdrawalRequest])
def list_all_withdrawals(db: Session = Depends(get_db)):
    try:
        rows = ledger.list_withdrawals(db)
    except RewardsError as e:
        raise to_http_error(e)
    return [WithdrawalRequest.model_validate(w) for w in rows]


@router.patch("/withdrawals/{withdrawal_id}/status", response_model=WithdrawalRequest)
def update_withdrawal_status(
    withdrawal_id: str,
    req: StatusUpdateRequest,
    db: Session = Depends(get_db),
):
    try:
        withdrawal = ledger.set_withdrawal_status(
            db,
            withdrawal_id,
            req.status,
            admin_notes=req.admin_notes,
            enforce_forward_only=settings.ENFORCE_FORWARD_ONLY_TRANSITIONS,
        )
    except RewardsError as e:
        raise to_http_error(e)
    return WithdrawalRequest.model_validate(withdrawal)
