from app.community.schemas.base import (  # noqa: F401
    AdminCredentials,
    AdminInfo,
    AdminLoginResponse,
    AdminSessionResponse,
    AdminSetupRequest,
    AdminSetupResponse,
    AllocationCategory,
    Donation,
    DonationCreate,
    FundAllocation,
    FundAllocationCreate,
    FundStats,
    Vendor,
    VendorCreate,
    VendorStatus,
    VendorStatusUpdate,
)
