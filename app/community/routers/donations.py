"""
Donation and fund transparency endpoints.

GET  /api/donations/recent          — latest donations
POST /api/donations                 — record a donation
GET  /api/fund/stats                — totals for the transparency page
GET  /api/fund/allocations          — spending records
POST /api/admin/fund/allocations    — add a spending record (admin)
"""
from __future__ import annotations

import logging
import math
import uuid
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.community.models.donation import DonationModel, FundAllocationModel
from app.community.schemas import (
    Donation,
    DonationCreate,
    FundAllocation,
    FundAllocationCreate,
    FundStats,
)
from app.config import settings
from app.database import get_db
from app.deps import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()

# roughly 10 currency units buys one sapling
CURRENCY_PER_TREE = 10
# shown before any allocation has been recorded
DEFAULT_PROJECTS_SUPPORTED = 3


def calculate_fund_stats(
    donations: list[DonationModel], allocations: list[FundAllocationModel]
) -> FundStats:
    total_raised = sum((Decimal(d.amount) for d in donations), Decimal(0))
    total_spent = sum((Decimal(a.amount) for a in allocations), Decimal(0))
    categories = {a.category for a in allocations}
    return FundStats(
        total_raised=float(total_raised),
        total_spent=float(total_spent),
        donor_count=len(donations),
        trees_planted=math.floor(total_raised / CURRENCY_PER_TREE),
        projects_supported=len(categories) or DEFAULT_PROJECTS_SUPPORTED,
    )


# ── GET /api/donations/recent ─────────────────────────────────────────────
@router.get("/donations/recent", response_model=List[Donation])
def recent_donations(db: Session = Depends(get_db)):
    rows = (
        db.query(DonationModel)
        .order_by(DonationModel.created_at.desc())
        .limit(settings.RECENT_DONATIONS_LIMIT)
        .all()
    )
    return [Donation.model_validate(d) for d in rows]


# ── POST /api/donations ───────────────────────────────────────────────────
@router.post("/donations", response_model=Donation, status_code=201)
def create_donation(req: DonationCreate, db: Session = Depends(get_db)):
    donation = DonationModel(
        id=str(uuid.uuid4()),
        amount=req.amount,
        donor_name=None if req.is_anonymous else (req.donor_name or None),
        message=req.message,
        is_anonymous=req.is_anonymous,
    )
    db.add(donation)
    db.commit()
    db.refresh(donation)
    logger.info("Stored donation %s  amount=%s  anonymous=%s", donation.id, req.amount, req.is_anonymous)
    return Donation.model_validate(donation)


# ── GET /api/fund/stats ───────────────────────────────────────────────────
@router.get("/fund/stats", response_model=FundStats)
def fund_stats(db: Session = Depends(get_db)):
    donations = db.query(DonationModel).all()
    allocations = db.query(FundAllocationModel).all()
    return calculate_fund_stats(donations, allocations)


# ── GET /api/fund/allocations ─────────────────────────────────────────────
@router.get("/fund/allocations", response_model=List[FundAllocation])
def list_allocations(db: Session = Depends(get_db)):
    rows = db.query(FundAllocationModel).order_by(FundAllocationModel.created_at.desc()).all()
    return [FundAllocation.model_validate(a) for a in rows]


# ── POST /api/admin/fund/allocations ──────────────────────────────────────
@router.post(
    "/admin/fund/allocations",
    response_model=FundAllocation,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def create_allocation(req: FundAllocationCreate, db: Session = Depends(get_db)):
    allocation = FundAllocationModel(
        id=str(uuid.uuid4()),
        title=req.title,
        description=req.description,
        amount=req.amount,
        category=req.category.value,
        image_url=req.image_url,
        date=req.date,
    )
    db.add(allocation)
    db.commit()
    db.refresh(allocation)
    logger.info("Stored fund allocation %s (%s, %s)", allocation.id, allocation.category, req.amount)
    return FundAllocation.model_validate(allocation)
