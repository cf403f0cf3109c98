from app.community.models.admin_user import AdminUserModel
from app.community.models.donation import DonationModel, FundAllocationModel
from app.community.models.vendor import VendorModel

__all__ = ["AdminUserModel", "DonationModel", "FundAllocationModel", "VendorModel"]
