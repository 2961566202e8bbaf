"""Errors raised by the lending core."""

from typing import Optional


class LendingError(Exception):
    """Base class for lending errors."""

    pass


class NotFound(LendingError):
    """A loan, item or borrower id does not exist."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class DuplicateId(LendingError):
    """A record with the same id is already stored."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Duplicate id: {record_id}")


class OutOfStock(LendingError):
    """Ledger refused to take a copy from an item with none available."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"No available copies left for item {item_id}")


class NoCopiesAvailable(LendingError):
    """A loan was requested for an item with no lendable copy."""

    def __init__(self, item_id: str, title: str = ""):
        self.item_id = item_id
        self.title = title
        label = f'"{title}"' if title else item_id
        super().__init__(f"No copies of {label} are available for loan")


class AlreadyReturned(LendingError):
    """The loan was already returned."""

    def __init__(self, loan_id: str):
        self.loan_id = loan_id
        super().__init__(f"Loan {loan_id} has already been returned")


class InconsistentState(LendingError):
    """Stored loans and inventory disagree."""

    def __init__(self, message: str, issues: Optional[list] = None):
        self.issues = issues or []
        super().__init__(message)
