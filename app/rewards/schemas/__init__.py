from app.rewards.schemas.base import (  # noqa: F401
    CamelModel,
    OcrData,
    OcrRequest,
    OcrResponse,
    PaymentMethod,
    Receipt,
    ReceiptCreateRequest,
    ReceiptStatus,
    StatusUpdateRequest,
    UserRewards,
    WithdrawalCreateRequest,
    WithdrawalRequest,
    WithdrawalStatus,
)
