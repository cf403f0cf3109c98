"""
Administrator accounts.
"""
from sqlalchemy import Column, DateTime, String

from app.database import Base, utcnow


class AdminUserModel(Base):
    __tablename__ = "admin_users"

    id = Column(String, primary_key=True)
    username = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)  # bcrypt
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="admin")  # admin, superadmin
    created_at = Column(DateTime, default=utcnow, nullable=False)
