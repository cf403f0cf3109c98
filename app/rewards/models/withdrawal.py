"""
SQLAlchemy model for points-to-money withdrawal requests.
"""
from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text

from app.database import Base, utcnow


class WithdrawalRequestModel(Base):
    __tablename__ = "withdrawal_requests"

    id = Column(String, primary_key=True)
    visitor_id = Column(String, nullable=False, index=True)
    points_amount = Column(Integer, nullable=False)
    money_amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(String, nullable=False)  # bank_transfer, mobile_payment
    payment_details = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="pending", index=True)  # pending, approved, rejected, completed
    admin_notes = Column(Text)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    processed_at = Column(DateTime)
