"""Tests for borrower notices."""

from datetime import date
from urllib.parse import parse_qs, urlparse

import pytest

from libraryloans.db.schemas import Loan, LoanStatus
from libraryloans.lending.errors import NotFound
from libraryloans.lending.notices import (
    compose_reminder,
    format_date,
    normalize_phone,
    project,
    reminder_link,
)

TODAY = date(2024, 1, 10)


@pytest.fixture
def loan() -> Loan:
    return Loan(
        id="l1",
        user_id="u1",
        user_name="Alice Souza",
        book_id="b1",
        book_title="Dom Casmurro",
        loan_date=date(2023, 12, 20),
        due_date=date(2024, 1, 3),
    )


class TestProject:
    """Tests for the read-only projection."""

    def test_projection_uses_effective_status(self, loan):
        """Test the notice shows overdue even though the record says active."""
        notice = project(loan, TODAY)

        assert notice.user_name == "Alice Souza"
        assert notice.book_title == "Dom Casmurro"
        assert notice.due_date == date(2024, 1, 3)
        assert notice.effective_status == LoanStatus.OVERDUE
        assert notice.days_overdue == 7

    def test_projection_not_overdue(self, loan):
        """Test a loan within its period."""
        notice = project(loan, date(2024, 1, 2))
        assert notice.effective_status == LoanStatus.ACTIVE
        assert notice.days_overdue == 0


class TestComposeReminder:
    """Tests for reminder text."""

    def test_reminder_contents(self, loan):
        """Test the message names the borrower, book, date and status."""
        message = compose_reminder(project(loan, TODAY), "Escola Municipal")

        assert "Hello Alice Souza" in message
        assert "Escola Municipal" in message
        assert "*Dom Casmurro*" in message
        assert "03/01/2024" in message
        assert "Overdue" in message

    def test_format_date(self):
        """Test day-first formatting."""
        assert format_date(date(2024, 2, 9)) == "09/02/2024"


class TestPhone:
    """Tests for phone normalisation and links."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("(11) 98765-4321", "5511987654321"),
            ("11 3456-7890", "551134567890"),
            ("+55 11 98765-4321", "5511987654321"),
            ("+1 555 123 4567 89", "1555123456789"),
        ],
    )
    def test_normalize(self, raw, expected):
        """Test digits are kept and a country code added to national numbers."""
        assert normalize_phone(raw) == expected

    def test_normalize_empty(self):
        """Test a value without digits is rejected."""
        with pytest.raises(ValueError):
            normalize_phone("n/a")

    def test_link(self, loan):
        """Test the link carries the number and the encoded message."""
        message = compose_reminder(project(loan, TODAY), "Library")
        link = reminder_link("(11) 98765-4321", message)

        parsed = urlparse(link)
        assert parsed.netloc == "wa.me"
        assert parsed.path == "/5511987654321"
        assert parse_qs(parsed.query)["text"] == [message]

    def test_link_without_phone(self):
        """Test borrowers without a phone cannot be messaged."""
        with pytest.raises(NotFound):
            reminder_link(None, "hi")
