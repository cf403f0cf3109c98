from app.rewards.models.receipt import ReceiptModel
from app.rewards.models.withdrawal import WithdrawalRequestModel

__all__ = ["ReceiptModel", "WithdrawalRequestModel"]
