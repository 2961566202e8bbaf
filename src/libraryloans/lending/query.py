"""Filtering and pagination for loan listings."""

import math
from datetime import date
from typing import Any, Iterable, Sequence

from ..db.schemas import Loan
from .overdue import effective_status
from .schemas import LoanQuery, Page


def matches(loan: Loan, query: LoanQuery, today: date) -> bool:
    """Check a single loan against every filter in the query.

    Args:
        loan: Loan record
        query: Filter parameters
        today: Current date, used for the effective status

    Returns:
        True if all set filters match
    """
    if query.text:
        term = query.text.lower()
        if term not in loan.user_name.lower() and term not in loan.book_title.lower():
            return False

    if query.status is not None and effective_status(loan, today) != query.status:
        return False

    # ISO dates order lexicographically
    due = loan.due_date.isoformat()
    if query.due_from is not None and due < query.due_from.isoformat():
        return False
    if query.due_to is not None and due > query.due_to.isoformat():
        return False

    return True


def filter_loans(loans: Iterable[Loan], query: LoanQuery, today: date) -> list[Loan]:
    """Loans matching the query, in their original order."""
    return [loan for loan in loans if matches(loan, query, today)]


def total_pages(count: int, page_size: int) -> int:
    """Number of pages for ``count`` items; at least 1."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[Any], page: int, page_size: int) -> Page:
    """Return one 1-indexed page of items.

    Args:
        items: Filtered items
        page: Page number, starting at 1
        page_size: Items per page

    Returns:
        Page with the slice clipped to bounds (empty past the last page)
    """
    if page < 1:
        raise ValueError("page must be at least 1")
    pages = total_pages(len(items), page_size)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total=len(items),
        total_pages=pages,
    )


def search(loans: Iterable[Loan], query: LoanQuery, today: date) -> Page:
    """Filter loans, then return the requested page."""
    return paginate(filter_loans(loans, query, today), query.page, query.page_size)
