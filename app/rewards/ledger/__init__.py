"""
Points/withdrawal ledger.

Receipts carry a points value fixed at submission; balances are always
derived from the receipt and withdrawal tables, never stored.
"""
from app.rewards.ledger.calculator import get_user_rewards
from app.rewards.ledger.points import (
    MIN_WITHDRAWAL_POINTS,
    POINTS_PER_CURRENCY_UNIT,
    POINTS_TO_CURRENCY_DIVISOR,
    money_for_points,
    points_for_purchase,
)
from app.rewards.ledger.receipts import (
    get_receipt,
    list_receipts,
    set_receipt_status,
    submit_receipt,
)
from app.rewards.ledger.withdrawals import (
    get_withdrawal,
    list_withdrawals,
    request_withdrawal,
    set_withdrawal_status,
)

__all__ = [
    "MIN_WITHDRAWAL_POINTS",
    "POINTS_PER_CURRENCY_UNIT",
    "POINTS_TO_CURRENCY_DIVISOR",
    "get_receipt",
    "get_user_rewards",
    "get_withdrawal",
    "list_receipts",
    "list_withdrawals",
    "money_for_points",
    "points_for_purchase",
    "request_withdrawal",
    "set_receipt_status",
    "set_withdrawal_status",
    "submit_receipt",
]
