"""
Receipt endpoints (visitor scope).

POST /api/receipts       — submit a receipt, earns points once approved
GET  /api/receipts       — the caller's receipts, newest first
POST /api/receipts/ocr   — read vendor/amount/date off a receipt image
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.community.models.vendor import VendorModel
from app.database import get_db
from app.deps import get_visitor_id
from app.errors import RewardsError, to_http_error
from app.rewards import ledger
from app.rewards.models.receipt import ReceiptModel
from app.rewards.ocr import OcrError, absolute_image_url, analyze_receipt_image
from app.rewards.schemas import OcrRequest, OcrResponse, Receipt, ReceiptCreateRequest

logger = logging.getLogger(__name__)
router = APIRouter()


def to_receipt(model: ReceiptModel) -> Receipt:
    return Receipt.model_validate(model)


# ── GET /api/receipts ────────────────────────────────────────────────────
@router.get("/receipts", response_model=List[Receipt])
def list_receipts(
    visitor_id: str = Depends(get_visitor_id),
    db: Session = Depends(get_db),
):
    try:
        rows = ledger.list_receipts(db, visitor_id)
    except RewardsError as e:
        raise to_http_error(e)
    return [to_receipt(r) for r in rows]


# ── POST /api/receipts ───────────────────────────────────────────────────
@router.post("/receipts", response_model=Receipt, status_code=201)
def submit_receipt(
    req: ReceiptCreateRequest,
    visitor_id: str = Depends(get_visitor_id),
    db: Session = Depends(get_db),
):
    try:
        receipt = ledger.submit_receipt(
            db,
            visitor_id=visitor_id,
            vendor_name=req.vendor_name,
            purchase_amount=req.purchase_amount,
            purchase_date=req.purchase_date,
            image_url=req.image_url,
            ocr_data=req.ocr_data,
        )
    except RewardsError as e:
        raise to_http_error(e)
    return to_receipt(receipt)


# ── POST /api/receipts/ocr ───────────────────────────────────────────────
@router.post("/receipts/ocr", response_model=OcrResponse)
def ocr_receipt(
    req: OcrRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    if not req.image_url:
        raise HTTPException(status_code=400, detail="imageUrl is required")

    vendor_names = [
        name for (name,) in
        db.query(VendorModel.name).filter(VendorModel.status == "approved").order_by(VendorModel.name)
    ]
    image_url = absolute_image_url(req.image_url, str(request.base_url))
    try:
        data = analyze_receipt_image(image_url, vendor_names)
    except OcrError as e:
        logger.error("OCR analysis failed for %s: %s", image_url, e)
        raise HTTPException(status_code=502, detail="Failed to analyze receipt")
    return OcrResponse(success=True, data=data)
