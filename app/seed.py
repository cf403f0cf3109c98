"""
Demo data for a fresh database: partner vendors, donations, fund
allocations and, when credentials are configured, an administrator.
"""
from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from app.community.models import AdminUserModel, DonationModel, FundAllocationModel, VendorModel
from app.community.routers.admin_auth import create_admin
from app.config import settings

logger = logging.getLogger(__name__)

VENDORS = [
    {
        "name": "GreenBaku Nursery",
        "description": "Premium tree and plant nursery in the heart of Baku. Specializing in native Azerbaijani species.",
        "address": "45 Nizami Street, Baku",
        "phone": "+994 12 456 7890",
        "email": "info@greenbaku.az",
        "website": "https://greenbaku.az",
    },
    {
        "name": "Azerbaijan Flora Center",
        "description": "Azerbaijan's largest garden center with over 500 plant varieties.",
        "address": "78 Ataturk Avenue, Baku",
        "phone": "+994 12 555 1234",
        "email": "sales@azflora.az",
        "website": "https://azflora.az",
    },
    {
        "name": "EcoPlant Baku",
        "description": "Eco-friendly plant shop focused on sustainability and local species.",
        "address": "12 Green Valley Road, Baku",
        "phone": "+994 12 789 0123",
        "email": "hello@ecoplant.az",
    },
    {
        "name": "Nature's Gift Garden",
        "description": "Family-owned nursery with decades of experience in tree cultivation.",
        "address": "156 Khojaly Avenue, Baku",
        "phone": "+994 12 234 5678",
        "email": "contact@naturesgift.az",
    },
    {
        "name": "Caspian Botanicals",
        "description": "Specialized in rare and exotic plants suitable for Azerbaijan's climate.",
        "address": "89 Seaside Boulevard, Baku",
        "phone": "+994 12 345 6789",
        "email": "info@caspianbotanicals.az",
        "website": "https://caspianbotanicals.az",
    },
]

DONATIONS = [
    {"amount": "100", "donor_name": "Eldar M.", "message": "For a greener Baku!"},
    {"amount": "50", "donor_name": "Nigar A.", "message": "Keep up the great work!"},
    {"amount": "25", "is_anonymous": True},
    {"amount": "200", "donor_name": "Kamran H.", "message": "Happy to support!"},
    {"amount": "75", "donor_name": "Sevinj R."},
    {"amount": "150", "donor_name": "Farid K.", "message": "Azerbaijan needs more trees!"},
]

ALLOCATIONS = [
    {
        "title": "Tree Planting Project - Baku Parks",
        "description": "Planted 50 trees in Baku city parks including Fountains Square and Highland Park.",
        "amount": "250",
        "category": "trees",
        "date": date(2024, 3, 15),
    },
    {
        "title": "Environmental Education Workshop",
        "description": "Conducted workshop for 100+ students on environmental awareness and tree planting.",
        "amount": "75",
        "category": "education",
        "date": date(2024, 4, 20),
    },
    {
        "title": "Planting Equipment Purchase",
        "description": "Purchased shovels, gloves, and watering equipment for community planting events.",
        "amount": "120",
        "category": "equipment",
        "date": date(2024, 5, 10),
    },
]


def seed_demo_data(db: Session) -> None:
    """Fill empty tables; tables that already hold rows are left alone."""
    if db.query(VendorModel).count() == 0:
        for data in VENDORS:
            db.add(VendorModel(id=str(uuid.uuid4()), status="approved", **data))
        logger.info("Seeded %d vendors", len(VENDORS))

    if db.query(DonationModel).count() == 0:
        for data in DONATIONS:
            db.add(
                DonationModel(
                    id=str(uuid.uuid4()),
                    amount=Decimal(data["amount"]),
                    donor_name=data.get("donor_name"),
                    message=data.get("message"),
                    is_anonymous=data.get("is_anonymous", False),
                )
            )
        logger.info("Seeded %d donations", len(DONATIONS))

    if db.query(FundAllocationModel).count() == 0:
        for data in ALLOCATIONS:
            db.add(FundAllocationModel(id=str(uuid.uuid4()), **{**data, "amount": Decimal(data["amount"])}))
        logger.info("Seeded %d fund allocations", len(ALLOCATIONS))

    db.commit()

    if settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD and db.query(AdminUserModel).count() == 0:
        create_admin(
            db,
            settings.ADMIN_USERNAME,
            settings.ADMIN_PASSWORD,
            name="GreenRewards Admin",
            role="superadmin",
        )
