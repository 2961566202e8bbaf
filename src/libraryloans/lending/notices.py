"""Borrower notices.

Builds the reminder sent to a borrower about a loan and the messaging link
used to deliver it. Notices only see the ``LoanNotice`` projection, never the
stored records.
"""

import re
from datetime import date
from typing import Optional
from urllib.parse import quote

from ..db.schemas import Loan, LoanStatus
from .errors import NotFound
from .overdue import days_overdue, effective_status
from .schemas import LoanNotice

MESSAGING_URL = "https://wa.me/{phone}?text={text}"

# Numbers of this length are national numbers missing the country code
NATIONAL_NUMBER_LENGTHS = (10, 11)
DEFAULT_COUNTRY_CODE = "55"

STATUS_LABELS = {
    LoanStatus.ACTIVE: "On loan",
    LoanStatus.RETURNED: "Returned",
    LoanStatus.OVERDUE: "Overdue",
}


def project(loan: Loan, today: date) -> LoanNotice:
    """Build the read-only view of a loan as of ``today``."""
    return LoanNotice(
        loan_id=loan.id,
        user_id=loan.user_id,
        user_name=loan.user_name,
        book_title=loan.book_title,
        loan_date=loan.loan_date,
        due_date=loan.due_date,
        effective_status=effective_status(loan, today),
        days_overdue=days_overdue(loan, today),
    )


def format_date(value: date) -> str:
    """Format a date as DD/MM/YYYY."""
    return value.strftime("%d/%m/%Y")


def compose_reminder(notice: LoanNotice, institution: str) -> str:
    """Compose the reminder text for a borrower."""
    return (
        f"Hello {notice.user_name}, a notice from {institution}:\n\n"
        f"Regarding the book: *{notice.book_title}*\n"
        f"Expected return date: {format_date(notice.due_date)}\n"
        f"Current status: {STATUS_LABELS[notice.effective_status]}\n\n"
        "Please return the book or renew the loan."
    )


def normalize_phone(raw: Optional[str], country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Reduce a phone number to digits and add the country code if missing.

    Raises:
        ValueError: If no digits remain
    """
    digits = re.sub(r"\D", "", raw or "")
    if not digits:
        raise ValueError(f"Not a phone number: {raw!r}")
    if len(digits) in NATIONAL_NUMBER_LENGTHS:
        digits = country_code + digits
    return digits


def reminder_link(phone: Optional[str], message: str) -> str:
    """Build the messaging link that opens a chat with the reminder.

    Raises:
        NotFound: If the borrower has no phone on record
    """
    if not phone:
        raise NotFound("Phone number", "borrower has no phone on record")
    return MESSAGING_URL.format(phone=normalize_phone(phone), text=quote(message, safe=""))
