"""
Vendor, donation, fund and admin-account schemas.
"""
from __future__ import annotations

from datetime import date as date_type, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from app.rewards.schemas.base import CamelModel


class VendorStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AllocationCategory(str, Enum):
    TREES = "trees"
    EDUCATION = "education"
    EQUIPMENT = "equipment"
    ADMIN = "admin"


# ---------------------------------------------------------------------------
# Vendors
# ---------------------------------------------------------------------------

class VendorCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None


class Vendor(VendorCreate):
    id: str
    status: str
    created_at: datetime


class VendorStatusUpdate(CamelModel):
    status: VendorStatus


# ---------------------------------------------------------------------------
# Donations / fund transparency
# ---------------------------------------------------------------------------

class DonationCreate(CamelModel):
    amount: Decimal = Field(..., gt=0)
    donor_name: Optional[str] = None
    message: Optional[str] = None
    is_anonymous: bool = False


class Donation(CamelModel):
    id: str
    amount: float
    donor_name: Optional[str] = None
    message: Optional[str] = None
    is_anonymous: bool
    created_at: datetime


class FundAllocationCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: str
    amount: Decimal = Field(..., gt=0)
    category: AllocationCategory
    image_url: Optional[str] = None
    date: date_type


class FundAllocation(CamelModel):
    id: str
    title: str
    description: str
    amount: float
    category: str
    image_url: Optional[str] = None
    date: date_type
    created_at: datetime


class FundStats(CamelModel):
    total_raised: float = 0
    total_spent: float = 0
    donor_count: int = 0
    trees_planted: int = 0
    projects_supported: int = 0


# ---------------------------------------------------------------------------
# Admin accounts
# ---------------------------------------------------------------------------

class AdminCredentials(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


class AdminSetupRequest(AdminCredentials):
    name: Optional[str] = None


class AdminInfo(CamelModel):
    id: str
    username: str
    name: Optional[str] = None
    role: Optional[str] = None


class AdminLoginResponse(CamelModel):
    success: bool = True
    admin: AdminInfo


class AdminSessionResponse(CamelModel):
    authenticated: bool
    admin: Optional[AdminInfo] = None


class AdminSetupResponse(CamelModel):
    success: bool = True
    message: str
    admin: AdminInfo
