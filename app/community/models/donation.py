"""
Donations received and how the money was spent.
"""
from sqlalchemy import Boolean, Column, Date, DateTime, Numeric, String, Text

from app.database import Base, utcnow


class DonationModel(Base):
    __tablename__ = "donations"

    id = Column(String, primary_key=True)
    amount = Column(Numeric(12, 2), nullable=False)
    donor_name = Column(String)  # always NULL for anonymous donations
    message = Column(Text)
    is_anonymous = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)


class FundAllocationModel(Base):
    """Spending record shown on the transparency page."""
    __tablename__ = "fund_allocations"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String, nullable=False)  # trees, education, equipment, admin
    image_url = Column(String)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
