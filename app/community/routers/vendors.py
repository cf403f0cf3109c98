"""
Partner vendor directory endpoints.

GET   /api/vendors                       — approved vendors (public)
POST  /api/vendors                       — register a vendor, pending review
GET   /api/admin/vendors                 — every vendor (admin)
PATCH /api/admin/vendors/{id}/status     — approve / reject (admin)
"""
from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.community.models.vendor import VendorModel
from app.community.schemas import Vendor, VendorCreate, VendorStatus, VendorStatusUpdate
from app.database import get_db
from app.deps import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


# ── GET /api/vendors ──────────────────────────────────────────────────────
@router.get("/vendors", response_model=List[Vendor])
def list_approved_vendors(db: Session = Depends(get_db)):
    rows = (
        db.query(VendorModel)
        .filter(VendorModel.status == VendorStatus.APPROVED.value)
        .order_by(VendorModel.name)
        .all()
    )
    return [Vendor.model_validate(v) for v in rows]


# ── POST /api/vendors ─────────────────────────────────────────────────────
@router.post("/vendors", response_model=Vendor, status_code=201)
def register_vendor(req: VendorCreate, db: Session = Depends(get_db)):
    vendor = VendorModel(
        id=str(uuid.uuid4()),
        status=VendorStatus.PENDING.value,
        **req.model_dump(),
    )
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    logger.info("Registered vendor %s (%s), pending review", vendor.id, vendor.name)
    return Vendor.model_validate(vendor)


# ── GET /api/admin/vendors ────────────────────────────────────────────────
@router.get("/admin/vendors", response_model=List[Vendor], dependencies=[Depends(require_admin)])
def list_all_vendors(db: Session = Depends(get_db)):
    rows = db.query(VendorModel).order_by(VendorModel.created_at.desc()).all()
    return [Vendor.model_validate(v) for v in rows]


# ── PATCH /api/admin/vendors/{vendor_id}/status ───────────────────────────
@router.patch(
    "/admin/vendors/{vendor_id}/status",
    response_model=Vendor,
    dependencies=[Depends(require_admin)],
)
def update_vendor_status(
    vendor_id: str,
    req: VendorStatusUpdate,
    db: Session = Depends(get_db),
):
    vendor = db.query(VendorModel).filter(VendorModel.id == vendor_id).first()
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    vendor.status = req.status.value
    db.commit()
    db.refresh(vendor)
    logger.info("Vendor %s status -> %s", vendor_id, vendor.status)
    return Vendor.model_validate(vendor)
