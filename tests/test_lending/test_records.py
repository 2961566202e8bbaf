"""Tests for LoanRecordStore."""

from datetime import date

import pytest

from libraryloans.db.schemas import Loan, LoanStatus
from libraryloans.db.store import CollectionStore
from libraryloans.lending.errors import DuplicateId, NotFound
from libraryloans.lending.records import LoanRecordStore


def make_loan(loan_id: str, **overrides) -> Loan:
    data = dict(
        id=loan_id,
        user_id="u1",
        user_name="Alice",
        book_id="b1",
        book_title="Dune",
        loan_date=date(2024, 1, 1),
        due_date=date(2024, 1, 8),
    )
    data.update(overrides)
    return Loan(**data)


@pytest.fixture
def records(store: CollectionStore) -> LoanRecordStore:
    return LoanRecordStore(store)


class TestLoanRecordStore:
    """Tests for keyed loan storage."""

    def test_insert_and_get(self, records):
        """Test inserting then reading a loan."""
        records.insert(make_loan("l1"))

        loan = records.get("l1")
        assert loan.user_name == "Alice"
        assert len(records) == 1

    def test_insert_duplicate(self, records):
        """Test duplicate ids are refused."""
        records.insert(make_loan("l1"))

        with pytest.raises(DuplicateId):
            records.insert(make_loan("l1", user_name="Someone else"))
        assert records.get("l1").user_name == "Alice"

    def test_update_in_place(self, records):
        """Test update keeps the record's position."""
        for loan_id in ("l1", "l2", "l3"):
            records.insert(make_loan(loan_id))

        records.update(make_loan("l2", status=LoanStatus.OVERDUE))

        assert [loan.id for loan in records.all()] == ["l1", "l2", "l3"]
        assert records.get("l2").status == LoanStatus.OVERDUE

    def test_update_missing(self, records):
        """Test updating an unknown loan."""
        with pytest.raises(NotFound):
            records.update(make_loan("ghost"))

    def test_remove_returns_record(self, records):
        """Test remove hands back the removed loan."""
        records.insert(make_loan("l1", status=LoanStatus.RETURNED, return_date=date(2024, 1, 3)))

        removed = records.remove("l1")

        assert removed.status == LoanStatus.RETURNED
        assert len(records) == 0
        with pytest.raises(NotFound):
            records.get("l1")

    def test_remove_missing(self, records):
        """Test removing an unknown loan."""
        with pytest.raises(NotFound):
            records.remove("ghost")

    def test_all_insertion_order(self, records):
        """Test iteration follows insertion order."""
        for loan_id in ("c", "a", "b"):
            records.insert(make_loan(loan_id))

        assert [loan.id for loan in records.all()] == ["c", "a", "b"]

    def test_all_is_fresh_per_call(self, records):
        """Test each call reflects the current state, and is single-use."""
        records.insert(make_loan("l1"))
        first = records.all()
        assert [loan.id for loan in first] == ["l1"]
        assert list(first) == []

        records.insert(make_loan("l2"))
        assert [loan.id for loan in records.all()] == ["l1", "l2"]
