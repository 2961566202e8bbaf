"""Tests for overdue classification."""

from datetime import date

import pytest

from libraryloans.db.schemas import Loan, LoanStatus
from libraryloans.lending.overdue import (
    days_overdue,
    days_until_due,
    effective_status,
    is_overdue,
)

TODAY = date(2024, 1, 1)


def make_loan(due: date, status: LoanStatus = LoanStatus.ACTIVE, **overrides) -> Loan:
    data = dict(
        id="l1",
        user_id="u1",
        user_name="Alice",
        book_id="b1",
        book_title="Dune",
        loan_date=date(2019, 12, 1),
        due_date=due,
        status=status,
    )
    data.update(overrides)
    return Loan(**data)


class TestEffectiveStatus:
    """Tests for the displayed status."""

    def test_past_due_active_shows_overdue(self):
        """Test an active loan past due displays as overdue without a write."""
        loan = make_loan(date(2020, 1, 1))

        assert effective_status(loan, TODAY) == LoanStatus.OVERDUE
        assert loan.status == LoanStatus.ACTIVE

    def test_due_today_not_overdue(self):
        """Test a loan due today is still active."""
        assert effective_status(make_loan(TODAY), TODAY) == LoanStatus.ACTIVE

    def test_future_due_active(self):
        """Test a loan due later is active."""
        assert effective_status(make_loan(date(2024, 1, 8)), TODAY) == LoanStatus.ACTIVE

    @pytest.mark.parametrize("due", [date(2020, 1, 1), date(2024, 1, 1), date(2030, 1, 1)])
    def test_returned_is_final(self, due):
        """Test returned wins regardless of the due date."""
        loan = make_loan(due, LoanStatus.RETURNED, return_date=date(2020, 1, 2))
        assert effective_status(loan, TODAY) == LoanStatus.RETURNED

    def test_manual_overdue_passes_through(self):
        """Test an edited overdue status with a future due date is shown as stored."""
        loan = make_loan(date(2030, 1, 1), LoanStatus.OVERDUE)
        assert effective_status(loan, TODAY) == LoanStatus.OVERDUE

    def test_recomputed_each_read(self):
        """Test moving the due date changes the status on the next read."""
        loan = make_loan(date(2020, 1, 1))
        assert effective_status(loan, TODAY) == LoanStatus.OVERDUE

        loan.due_date = TODAY
        assert effective_status(loan, TODAY) == LoanStatus.ACTIVE


class TestDayCounts:
    """Tests for day arithmetic helpers."""

    def test_days_overdue(self):
        """Test counting days past due."""
        loan = make_loan(date(2023, 12, 25))
        assert is_overdue(loan, TODAY)
        assert days_overdue(loan, TODAY) == 7
        assert days_until_due(loan, TODAY) == -7

    def test_not_overdue_counts_zero(self):
        """Test loans not past due report zero days overdue."""
        assert days_overdue(make_loan(date(2024, 1, 5)), TODAY) == 0
        assert days_until_due(make_loan(date(2024, 1, 5)), TODAY) == 4

    def test_returned_never_overdue(self):
        """Test a returned loan is never counted as overdue."""
        loan = make_loan(date(2020, 1, 1), LoanStatus.RETURNED, return_date=date(2020, 2, 1))
        assert not is_overdue(loan, TODAY)
        assert days_overdue(loan, TODAY) == 0
