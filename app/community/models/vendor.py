"""
Partner vendor directory.
"""
from sqlalchemy import Column, DateTime, String, Text

from app.database import Base, utcnow


class VendorModel(Base):
    __tablename__ = "vendors"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text)
    address = Column(String)
    phone = Column(String)
    email = Column(String)
    website = Column(String)
    logo_url = Column(String)
    status = Column(String, nullable=False, default="pending")  # pending, approved, rejected
    created_at = Column(DateTime, default=utcnow, nullable=False)
