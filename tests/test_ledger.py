"""
Unit tests for the points/withdrawal ledger — receipt lifecycle, derived
balances, withdrawal checks and status transitions.
"""
import logging
import threading
from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.database import Base
from app.errors import (
    InsufficientBalanceError,
    InvalidStatusTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from app.rewards import ledger
from app.rewards.ledger.locks import VisitorLocks, visitor_locks
from app.rewards.models import ReceiptModel


def _earn(db, visitor_id, amount):
    """Submit and approve a receipt worth ``amount``."""
    receipt = ledger.submit_receipt(db, visitor_id, "GreenBaku Nursery", amount, "2024-05-01")
    return ledger.set_receipt_status(db, receipt.id, "approved")


def _withdraw(db, visitor_id, points, **kwargs):
    return ledger.request_withdrawal(
        db, visitor_id, points, "bank_transfer", "AZ21NABZ00000000137010001944", **kwargs
    )


# =====================================================================
# Conversion constants
# =====================================================================
class TestPoints:
    def test_constants(self):
        assert ledger.POINTS_PER_CURRENCY_UNIT == 10
        assert ledger.POINTS_TO_CURRENCY_DIVISOR == 100
        assert ledger.MIN_WITHDRAWAL_POINTS == 500
        assert settings.MIN_WITHDRAWAL_POINTS == ledger.MIN_WITHDRAWAL_POINTS

    @pytest.mark.parametrize(
        "amount, points",
        [("12.50", 125), ("19.99", 199), ("0.05", 0), ("0.10", 1), (3, 30), (2.3, 23), (1.15, 11)],
    )
    def test_points_are_floored(self, amount, points):
        assert ledger.points_for_purchase(amount) == points

    def test_money_for_points(self):
        assert ledger.money_for_points(125) == Decimal("1.25")
        assert ledger.money_for_points(500) == Decimal("5.00")
        assert ledger.money_for_points(1) == Decimal("0.01")


# =====================================================================
# Receipt lifecycle
# =====================================================================
class TestSubmitReceipt:
    def test_pending_with_fixed_points(self, db, visitor_id):
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", Decimal("12.50"), "2024-05-01")
        assert receipt.status == "pending"
        assert receipt.points_earned == 125
        assert receipt.visitor_id == visitor_id
        assert receipt.purchase_date == date(2024, 5, 1)
        assert receipt.reviewed_at is None
        assert receipt.created_at is not None

    def test_accepts_date_object_and_image(self, db, visitor_id):
        receipt = ledger.submit_receipt(
            db, visitor_id, "EcoPlant Baku", 7, date(2024, 1, 2), image_url="/objects/uploads/abc"
        )
        assert receipt.purchase_date == date(2024, 1, 2)
        assert receipt.image_url == "/objects/uploads/abc"
        assert receipt.points_earned == 70

    def test_stores_ocr_data(self, db, visitor_id):
        ocr = {"vendorName": "EcoPlant Baku", "amount": 7.5, "confidence": 0.9}
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", 7.5, "2024-01-02", ocr_data=ocr)
        db.expire_all()
        assert ledger.get_receipt(db, receipt.id).ocr_data == ocr

    @pytest.mark.parametrize("amount", [0, -1, "-0.01", Decimal("0")])
    def test_non_positive_amount_rejected(self, db, visitor_id, amount):
        with pytest.raises(ValidationError) as exc:
            ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", amount, "2024-05-01")
        assert exc.value.field == "purchaseAmount"
        assert db.query(ReceiptModel).count() == 0

    @pytest.mark.parametrize("amount", ["abc", None, "NaN", True])
    def test_non_numeric_amount_rejected(self, db, visitor_id, amount):
        with pytest.raises(ValidationError) as exc:
            ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", amount, "2024-05-01")
        assert exc.value.field == "purchaseAmount"

    @pytest.mark.parametrize("amount", ["12.999", "0.001", 12.345])
    def test_sub_cent_amount_rejected(self, db, visitor_id, amount):
        with pytest.raises(ValidationError) as exc:
            ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", amount, "2024-05-01")
        assert exc.value.field == "purchaseAmount"
        assert db.query(ReceiptModel).count() == 0

    @pytest.mark.parametrize("amount", ["12.50", "12.500", "19.99", 2.3])
    def test_stored_amount_matches_points(self, db, visitor_id, amount):
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", amount, "2024-05-01")
        db.expire_all()
        stored = ledger.get_receipt(db, receipt.id)
        assert stored.points_earned == ledger.points_for_purchase(stored.purchase_amount)

    @pytest.mark.parametrize("amount", ["1e10", "1e20", "10000000000.00"])
    def test_amount_above_column_limit_rejected(self, db, visitor_id, amount):
        with pytest.raises(ValidationError) as exc:
            ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", amount, "2024-05-01")
        assert exc.value.field == "purchaseAmount"
        assert db.query(ReceiptModel).count() == 0

    def test_largest_amount_accepted(self, db, visitor_id):
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", "9999999999.99", "2024-05-01")
        assert receipt.points_earned == 99999999999

    @pytest.mark.parametrize("vendor", ["", "   ", None])
    def test_vendor_required(self, db, visitor_id, vendor):
        with pytest.raises(ValidationError) as exc:
            ledger.submit_receipt(db, visitor_id, vendor, 10, "2024-05-01")
        assert exc.value.field == "vendorName"

    @pytest.mark.parametrize("purchase_date", ["2024-02-30", "yesterday", "", None, "2024/05/01"])
    def test_invalid_date_rejected(self, db, visitor_id, purchase_date):
        with pytest.raises(ValidationError) as exc:
            ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", 10, purchase_date)
        assert exc.value.field == "purchaseDate"

    def test_visitor_required(self, db):
        with pytest.raises(ValidationError) as exc:
            ledger.submit_receipt(db, "", "EcoPlant Baku", 10, "2024-05-01")
        assert exc.value.field == "visitorId"


class TestReceiptStatus:
    def test_points_survive_every_status_change(self, db, visitor_id):
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", "33.33", "2024-05-01")
        for status in ["approved", "rejected", "pending", "approved"]:
            updated = ledger.set_receipt_status(db, receipt.id, status, admin_notes=f"now {status}")
            assert updated.points_earned == 333
            assert updated.status == status
            assert updated.admin_notes == f"now {status}"
            assert updated.reviewed_at is not None

    def test_notes_overwritten(self, db, visitor_id):
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", 10, "2024-05-01")
        ledger.set_receipt_status(db, receipt.id, "rejected", admin_notes="blurry photo")
        updated = ledger.set_receipt_status(db, receipt.id, "approved")
        assert updated.admin_notes is None

    def test_unknown_id(self, db):
        with pytest.raises(NotFoundError):
            ledger.set_receipt_status(db, "missing", "approved")

    def test_invalid_status(self, db, visitor_id):
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", 10, "2024-05-01")
        with pytest.raises(ValidationError) as exc:
            ledger.set_receipt_status(db, receipt.id, "completed")
        assert exc.value.field == "status"

    def test_forward_only_blocks_re_review(self, db, visitor_id):
        receipt = _earn(db, visitor_id, 10)
        with pytest.raises(InvalidStatusTransitionError):
            ledger.set_receipt_status(db, receipt.id, "rejected", enforce_forward_only=True)
        with pytest.raises(InvalidStatusTransitionError):
            ledger.set_receipt_status(db, receipt.id, "pending", enforce_forward_only=True)
        assert ledger.get_receipt(db, receipt.id).status == "approved"

    def test_forward_only_allows_same_status(self, db, visitor_id):
        receipt = _earn(db, visitor_id, 10)
        updated = ledger.set_receipt_status(
            db, receipt.id, "approved", admin_notes="double-checked", enforce_forward_only=True
        )
        assert updated.admin_notes == "double-checked"

    def test_forward_only_allows_review_from_pending(self, db, visitor_id):
        receipt = ledger.submit_receipt(db, visitor_id, "EcoPlant Baku", 10, "2024-05-01")
        updated = ledger.set_receipt_status(db, receipt.id, "rejected", enforce_forward_only=True)
        assert updated.status == "rejected"


class TestListReceipts:
    def test_newest_first_and_scoped_to_visitor(self, db, visitor_id):
        older = ledger.submit_receipt(db, visitor_id, "A", 1, "2024-05-01")
        newer = ledger.submit_receipt(db, visitor_id, "B", 2, "2024-05-02")
        ledger.submit_receipt(db, "someone-else", "C", 3, "2024-05-03")
        older.created_at = newer.created_at - timedelta(minutes=5)
        db.commit()

        rows = ledger.list_receipts(db, visitor_id)
        assert [r.id for r in rows] == [newer.id, older.id]

    def test_all_visitors(self, db, visitor_id):
        ledger.submit_receipt(db, visitor_id, "A", 1, "2024-05-01")
        ledger.submit_receipt(db, "someone-else", "C", 3, "2024-05-03")
        assert len(ledger.list_receipts(db)) == 2

    def test_visitor_id_is_case_sensitive(self, db):
        ledger.submit_receipt(db, "Visitor-A", "A", 1, "2024-05-01")
        assert ledger.list_receipts(db, "visitor-a") == []


# =====================================================================
# Derived balances
# =====================================================================
class TestUserRewards:
    def test_empty(self, db, visitor_id):
        rewards = ledger.get_user_rewards(db, visitor_id)
        assert rewards.visitor_id == visitor_id
        assert rewards.total_points == 0
        assert rewards.pending_points == 0
        assert rewards.total_receipts == 0
        assert rewards.available_for_withdrawal == 0

    def test_totals_cover_non_rejected_receipts(self, db, visitor_id):
        a = ledger.submit_receipt(db, visitor_id, "A", "10.00", "2024-05-01")
        b = ledger.submit_receipt(db, visitor_id, "B", "20.55", "2024-05-01")
        c = ledger.submit_receipt(db, visitor_id, "C", "5.00", "2024-05-01")
        ledger.submit_receipt(db, visitor_id, "D", "1.00", "2024-05-01")
        ledger.set_receipt_status(db, a.id, "approved")
        ledger.set_receipt_status(db, b.id, "approved")
        ledger.set_receipt_status(db, c.id, "rejected")

        rewards = ledger.get_user_rewards(db, visitor_id)
        assert rewards.total_points == 100 + 205
        assert rewards.pending_points == 10
        assert rewards.total_receipts == 4
        non_rejected = sum(
            r.points_earned for r in ledger.list_receipts(db, visitor_id) if r.status != "rejected"
        )
        assert rewards.total_points + rewards.pending_points == non_rejected

    def test_other_visitors_do_not_leak(self, db, visitor_id):
        _earn(db, "someone-else", 100)
        _withdraw(db, "someone-else", 600)
        assert ledger.get_user_rewards(db, visitor_id).available_for_withdrawal == 0

    def test_repeat_calls_identical(self, db, visitor_id):
        _earn(db, visitor_id, 80)
        _withdraw(db, visitor_id, 300)
        assert ledger.get_user_rewards(db, visitor_id) == ledger.get_user_rewards(db, visitor_id)

    def test_withdrawal_statuses(self, db, visitor_id):
        _earn(db, visitor_id, 100)  # 1000 points
        pending = _withdraw(db, visitor_id, 100)
        approved = _withdraw(db, visitor_id, 200)
        completed = _withdraw(db, visitor_id, 300)
        rejected = _withdraw(db, visitor_id, 50)
        ledger.set_withdrawal_status(db, approved.id, "approved")
        ledger.set_withdrawal_status(db, completed.id, "completed")
        ledger.set_withdrawal_status(db, rejected.id, "rejected")
        assert pending.status == "pending"

        rewards = ledger.get_user_rewards(db, visitor_id)
        assert rewards.total_points == 1000
        assert rewards.available_for_withdrawal == 1000 - 100 - 200 - 300
        assert rewards.available_for_withdrawal <= rewards.total_points


# =====================================================================
# Withdrawals
# =====================================================================
class TestRequestWithdrawal:
    def test_reserves_points_immediately(self, db, visitor_id):
        _earn(db, visitor_id, 100)
        before = ledger.get_user_rewards(db, visitor_id).available_for_withdrawal
        withdrawal = _withdraw(db, visitor_id, 400)
        after = ledger.get_user_rewards(db, visitor_id).available_for_withdrawal
        assert before - after == 400
        assert withdrawal.status == "pending"
        assert withdrawal.money_amount == Decimal("4.00")
        assert withdrawal.processed_at is None

    def test_exact_balance_succeeds(self, db, visitor_id):
        _earn(db, visitor_id, "54.30")
        withdrawal = _withdraw(db, visitor_id, 543)
        assert withdrawal.points_amount == 543
        assert ledger.get_user_rewards(db, visitor_id).available_for_withdrawal == 0

    def test_one_point_over_fails(self, db, visitor_id):
        _earn(db, visitor_id, "54.30")
        with pytest.raises(InsufficientBalanceError) as exc:
            _withdraw(db, visitor_id, 544)
        assert exc.value.requested == 544
        assert exc.value.available == 543
        assert ledger.list_withdrawals(db, visitor_id) == []

    def test_pending_receipts_are_not_spendable(self, db, visitor_id):
        ledger.submit_receipt(db, visitor_id, "A", 100, "2024-05-01")
        with pytest.raises(InsufficientBalanceError):
            _withdraw(db, visitor_id, 1)

    def test_minimum_policy(self, db, visitor_id):
        _earn(db, visitor_id, 100)
        with pytest.raises(ValidationError) as exc:
            _withdraw(db, visitor_id, 499, min_points=500)
        assert exc.value.field == "pointsAmount"
        assert _withdraw(db, visitor_id, 500, min_points=500).points_amount == 500

    @pytest.mark.parametrize("points", [0, -5, 1.5, "100", True])
    def test_points_must_be_positive_integer(self, db, visitor_id, points):
        _earn(db, visitor_id, 100)
        with pytest.raises(ValidationError) as exc:
            _withdraw(db, visitor_id, points)
        assert exc.value.field == "pointsAmount"

    def test_payment_method_checked(self, db, visitor_id):
        _earn(db, visitor_id, 100)
        with pytest.raises(ValidationError) as exc:
            ledger.request_withdrawal(db, visitor_id, 100, "crypto", "wallet")
        assert exc.value.field == "paymentMethod"

    def test_payment_details_required(self, db, visitor_id):
        _earn(db, visitor_id, 100)
        with pytest.raises(ValidationError) as exc:
            ledger.request_withdrawal(db, visitor_id, 100, "mobile_payment", "  ")
        assert exc.value.field == "paymentDetails"

    def test_lock_released_after_failure(self, db, visitor_id):
        with pytest.raises(InsufficientBalanceError):
            _withdraw(db, visitor_id, 10)
        assert len(visitor_locks) == 0


class TestWithdrawalStatus:
    def test_rejection_releases_points(self, db, visitor_id):
        _earn(db, visitor_id, 10)
        withdrawal = _withdraw(db, visitor_id, 100)
        assert ledger.get_user_rewards(db, visitor_id).available_for_withdrawal == 0
        updated = ledger.set_withdrawal_status(db, withdrawal.id, "rejected", admin_notes="bad IBAN")
        assert updated.processed_at is not None
        assert updated.admin_notes == "bad IBAN"
        assert ledger.get_user_rewards(db, visitor_id).available_for_withdrawal == 100

    def test_money_amount_never_recomputed(self, db, visitor_id):
        _earn(db, visitor_id, 10)
        withdrawal = _withdraw(db, visitor_id, 100)
        for status in ["approved", "completed"]:
            assert ledger.set_withdrawal_status(db, withdrawal.id, status).money_amount == Decimal("1.00")

    def test_completed_moved_back_releases_points_with_warning(self, db, visitor_id, caplog):
        _earn(db, visitor_id, 10)
        withdrawal = _withdraw(db, visitor_id, 100)
        ledger.set_withdrawal_status(db, withdrawal.id, "completed")
        with caplog.at_level(logging.WARNING, logger="app.rewards.ledger.withdrawals"):
            ledger.set_withdrawal_status(db, withdrawal.id, "rejected")
        assert "Completed withdrawal" in caplog.text
        assert ledger.get_user_rewards(db, visitor_id).available_for_withdrawal == 100

    def test_unknown_id(self, db):
        with pytest.raises(NotFoundError):
            ledger.set_withdrawal_status(db, "missing", "approved")

    def test_invalid_status(self, db, visitor_id):
        _earn(db, visitor_id, 10)
        withdrawal = _withdraw(db, visitor_id, 100)
        with pytest.raises(ValidationError):
            ledger.set_withdrawal_status(db, withdrawal.id, "paid")

    @pytest.mark.parametrize(
        "path, blocked",
        [
            (["completed"], None),
            (["approved", "pending"], "pending"),
            (["approved", "completed", "rejected"], "rejected"),
            (["rejected", "approved"], "approved"),
        ],
    )
    def test_forward_only(self, db, visitor_id, path, blocked):
        _earn(db, visitor_id, 10)
        withdrawal = _withdraw(db, visitor_id, 100)
        if blocked is None:
            # pending can not jump straight to completed
            with pytest.raises(InvalidStatusTransitionError):
                ledger.set_withdrawal_status(db, withdrawal.id, path[0], enforce_forward_only=True)
            return
        for status in path[:-1]:
            ledger.set_withdrawal_status(db, withdrawal.id, status, enforce_forward_only=True)
        with pytest.raises(InvalidStatusTransitionError) as exc:
            ledger.set_withdrawal_status(db, withdrawal.id, blocked, enforce_forward_only=True)
        assert exc.value.target == blocked

    def test_forward_only_happy_path(self, db, visitor_id):
        _earn(db, visitor_id, 10)
        withdrawal = _withdraw(db, visitor_id, 100)
        ledger.set_withdrawal_status(db, withdrawal.id, "approved", enforce_forward_only=True)
        done = ledger.set_withdrawal_status(db, withdrawal.id, "completed", enforce_forward_only=True)
        assert done.status == "completed"

    def test_list_all_and_per_visitor(self, db, visitor_id):
        _earn(db, visitor_id, 10)
        _earn(db, "someone-else", 10)
        mine = _withdraw(db, visitor_id, 100)
        _withdraw(db, "someone-else", 100)
        assert [w.id for w in ledger.list_withdrawals(db, visitor_id)] == [mine.id]
        assert len(ledger.list_withdrawals(db)) == 2


# =====================================================================
# Storage failures
# =====================================================================
class TestStorageErrors:
    def test_commit_failure_becomes_storage_error(self, db, visitor_id, monkeypatch):
        def broken_commit():
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "commit", broken_commit)
        with pytest.raises(StorageError):
            ledger.submit_receipt(db, visitor_id, "A", 10, "2024-05-01")


# =====================================================================
# Scenarios
# =====================================================================
class TestScenarios:
    def test_receipt_to_withdrawal_round(self, db, visitor_id):
        # A: submit 12.50
        receipt = ledger.submit_receipt(db, visitor_id, "GreenBaku Nursery", "12.50", "2024-05-01")
        assert receipt.points_earned == 125
        assert receipt.status == "pending"
        rewards = ledger.get_user_rewards(db, visitor_id)
        assert (rewards.total_points, rewards.pending_points, rewards.available_for_withdrawal) == (0, 125, 0)

        # B: approve
        ledger.set_receipt_status(db, receipt.id, "approved")
        rewards = ledger.get_user_rewards(db, visitor_id)
        assert (rewards.total_points, rewards.pending_points, rewards.available_for_withdrawal) == (125, 0, 125)

        # E: one point too many
        with pytest.raises(InsufficientBalanceError):
            _withdraw(db, visitor_id, 126)

        # C: withdraw everything
        withdrawal = _withdraw(db, visitor_id, 125)
        assert withdrawal.money_amount == Decimal("1.25")
        assert withdrawal.status == "pending"
        assert ledger.get_user_rewards(db, visitor_id).available_for_withdrawal == 0

        # D: rejection releases the points
        ledger.set_withdrawal_status(db, withdrawal.id, "rejected")
        assert ledger.get_user_rewards(db, visitor_id).available_for_withdrawal == 125


# =====================================================================
# Concurrency
# =====================================================================
class TestConcurrentWithdrawals:
    def test_same_visitor_can_not_overdraw(self, tmp_path, visitor_id):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'ledger.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        Base.metadata.create_all(bind=engine)
        Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        setup = Session()
        _earn(setup, visitor_id, 100)  # 1000 points
        setup.close()

        successes, refusals = [], []

        def attempt():
            session = Session()
            try:
                successes.append(_withdraw(session, visitor_id, 600).id)
            except InsufficientBalanceError:
                refusals.append(True)
            finally:
                session.close()

        threads = [threading.Thread(target=attempt) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(successes) == 1
        assert len(refusals) == 4

        check = Session()
        assert ledger.get_user_rewards(check, visitor_id).available_for_withdrawal == 400
        check.close()
        engine.dispose()

    def test_locks_are_per_visitor(self):
        locks = VisitorLocks()
        with locks.hold("a"):
            entered = threading.Event()

            def other():
                with locks.hold("b"):
                    entered.set()

            t = threading.Thread(target=other)
            t.start()
            assert entered.wait(timeout=5)
            t.join()
        assert len(locks) == 0
