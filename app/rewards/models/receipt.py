"""
SQLAlchemy model for submitted purchase receipts.
"""
from sqlalchemy import Column, Date, DateTime, Integer, JSON, Numeric, String, Text

from app.database import Base, utcnow


class ReceiptModel(Base):
    __tablename__ = "receipts"

    id = Column(String, primary_key=True)
    visitor_id = Column(String, nullable=False, index=True)
    vendor_name = Column(String, nullable=False)
    purchase_amount = Column(Numeric(12, 2), nullable=False)
    purchase_date = Column(Date, nullable=False)
    image_url = Column(String)
    # fixed at submission, never recomputed on review
    points_earned = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="pending", index=True)  # pending, approved, rejected
    ocr_data = Column(JSON)
    admin_notes = Column(Text)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    reviewed_at = Column(DateTime)
