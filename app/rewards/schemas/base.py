"""
Pydantic v2 models for the receipt ledger and the rewards calculator.

JSON field names are camelCase; requests accept snake_case too.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Status vocabularies
# ---------------------------------------------------------------------------

class ReceiptStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    MOBILE_PAYMENT = "mobile_payment"


# ---------------------------------------------------------------------------
# Receipts
# ---------------------------------------------------------------------------

class ReceiptCreateRequest(CamelModel):
    vendor_name: str = ""
    purchase_amount: Decimal
    # kept as text so an impossible date reaches the ledger's field check
    purchase_date: str = Field(..., description="YYYY-MM-DD")
    image_url: Optional[str] = None
    ocr_data: Optional[dict[str, Any]] = None


class Receipt(CamelModel):
    id: str
    visitor_id: str
    vendor_name: str
    purchase_amount: float
    purchase_date: date
    image_url: Optional[str] = None
    points_earned: int
    status: str
    ocr_data: Optional[dict[str, Any]] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    reviewed_at: Optional[datetime] = None


class StatusUpdateRequest(CamelModel):
    status: str
    admin_notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Rewards / withdrawals
# ---------------------------------------------------------------------------

class UserRewards(CamelModel):
    """Balances derived from the ledgers at call time."""
    visitor_id: str
    total_points: int = 0
    total_receipts: int = 0
    pending_points: int = 0
    available_for_withdrawal: int = 0


class WithdrawalCreateRequest(CamelModel):
    points_amount: int
    payment_method: str
    payment_details: str = ""


class WithdrawalRequest(CamelModel):
    id: str
    visitor_id: str
    points_amount: int
    money_amount: float
    payment_method: str
    payment_details: str
    status: str
    admin_notes: Optional[str] = None
    created_at: datetime
    processed_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# OCR
# ---------------------------------------------------------------------------

class OcrRequest(CamelModel):
    image_url: Optional[str] = None


class OcrData(CamelModel):
    vendor_name: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[str] = None
    confidence: float = 0
    is_partner_vendor: bool = False
    raw_vendor_name: Optional[str] = None


class OcrResponse(CamelModel):
    success: bool = True
    data: OcrData
