"""Overdue classification.

Overdue is a view, never a stored transition: the status shown for a loan is
derived from its persisted status, its due date and today's date every time
it is read. List, filter, report and notice code all go through
``effective_status`` so they can never disagree.
"""

from datetime import date

from ..db.schemas import Loan, LoanStatus


def is_overdue(loan: Loan, today: date) -> bool:
    """Check if an unreturned loan is past its due date.

    Date-only comparison; a loan due today is not overdue.
    """
    if loan.status == LoanStatus.RETURNED:
        return False
    return loan.due_date < today


def effective_status(loan: Loan, today: date) -> LoanStatus:
    """Status to display for a loan on a given day.

    Args:
        loan: Loan record
        today: Current date

    Returns:
        ``RETURNED`` when the loan was returned, ``OVERDUE`` when it is past
        due, otherwise the persisted status unchanged
    """
    if loan.status == LoanStatus.RETURNED:
        return LoanStatus.RETURNED
    if is_overdue(loan, today):
        return LoanStatus.OVERDUE
    return loan.status


def days_overdue(loan: Loan, today: date) -> int:
    """Days past due (0 if not overdue)."""
    if not is_overdue(loan, today):
        return 0
    return (today - loan.due_date).days


def days_until_due(loan: Loan, today: date) -> int:
    """Days until due (negative if overdue)."""
    return (loan.due_date - today).days
