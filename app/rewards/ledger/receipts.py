"""
Receipt lifecycle: submission, administrative review, listing.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from decimal import InvalidOperation
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.database import storage_guard, utcnow
from app.errors import NotFoundError, ValidationError
from app.rewards.ledger.points import (
    MAX_PURCHASE_AMOUNT,
    has_cents_precision,
    points_for_purchase,
    to_decimal,
)
from app.rewards.ledger.transitions import RECEIPT_TRANSITIONS, check_transition, parse_status
from app.rewards.models.receipt import ReceiptModel
from app.rewards.schemas import ReceiptStatus

logger = logging.getLogger(__name__)


def require_visitor(visitor_id: Optional[str]) -> str:
    if not isinstance(visitor_id, str) or not visitor_id:
        raise ValidationError("visitorId", "visitor identity is required")
    return visitor_id


def _parse_purchase_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError("purchaseDate", "must be a valid calendar date (YYYY-MM-DD)")


def submit_receipt(
    db: Session,
    visitor_id: str,
    vendor_name: str,
    purchase_amount,
    purchase_date,
    image_url: Optional[str] = None,
    ocr_data: Optional[dict[str, Any]] = None,
) -> ReceiptModel:
    """Record a pending receipt and fix its points value.

    ``purchase_date`` may be a ``date`` or an ISO ``YYYY-MM-DD`` string.
    """
    require_visitor(visitor_id)
    if not isinstance(vendor_name, str) or not vendor_name.strip():
        raise ValidationError("vendorName", "must not be empty")
    try:
        amount = to_decimal(purchase_amount)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("purchaseAmount", "must be a number") from None
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("purchaseAmount", "must be greater than 0")
    if amount >= MAX_PURCHASE_AMOUNT:
        raise ValidationError("purchaseAmount", f"must be less than {MAX_PURCHASE_AMOUNT:,.0f}")
    if not has_cents_precision(amount):
        raise ValidationError("purchaseAmount", "must have at most two decimal places")
    purchased_on = _parse_purchase_date(purchase_date)

    receipt = ReceiptModel(
        id=str(uuid.uuid4()),
        visitor_id=visitor_id,
        vendor_name=vendor_name.strip(),
        purchase_amount=amount,
        purchase_date=purchased_on,
        image_url=image_url or None,
        points_earned=points_for_purchase(amount),
        status=ReceiptStatus.PENDING.value,
        ocr_data=ocr_data,
        created_at=utcnow(),
    )
    with storage_guard(db, "submit_receipt"):
        db.add(receipt)
        db.commit()
        db.refresh(receipt)
    logger.info(
        "Stored receipt %s  visitor=%s  amount=%s  points=%d",
        receipt.id, visitor_id, amount, receipt.points_earned,
    )
    return receipt


def get_receipt(db: Session, receipt_id: str) -> ReceiptModel:
    with storage_guard(db, "get_receipt"):
        row = db.query(ReceiptModel).filter(ReceiptModel.id == receipt_id).first()
    if not row:
        logger.warning("Receipt not found: %s", receipt_id)
        raise NotFoundError("Receipt", receipt_id)
    return row


def set_receipt_status(
    db: Session,
    receipt_id: str,
    status,
    admin_notes: Optional[str] = None,
    enforce_forward_only: bool = False,
) -> ReceiptModel:
    """Overwrite a receipt's review fields. ``points_earned`` is left alone."""
    target = parse_status(status, ReceiptStatus)
    receipt = get_receipt(db, receipt_id)
    current = parse_status(receipt.status, ReceiptStatus)
    check_transition("receipt", RECEIPT_TRANSITIONS, current, target, enforce_forward_only)

    receipt.status = target.value
    receipt.admin_notes = admin_notes
    receipt.reviewed_at = utcnow()
    with storage_guard(db, "set_receipt_status"):
        db.commit()
        db.refresh(receipt)
    logger.info("Receipt %s: %s -> %s", receipt_id, current.value, target.value)
    return receipt


def list_receipts(db: Session, visitor_id: Optional[str] = None) -> list[ReceiptModel]:
    """Receipts for one visitor, or every receipt when ``visitor_id`` is None; newest first."""
    query = db.query(ReceiptModel)
    if visitor_id is not None:
        query = query.filter(ReceiptModel.visitor_id == require_visitor(visitor_id))
    with storage_guard(db, "list_receipts"):
        return query.order_by(ReceiptModel.created_at.desc()).all()
