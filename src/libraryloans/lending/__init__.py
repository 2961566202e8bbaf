"""Loan lifecycle and inventory consistency.

Provides functionality for:
- Lending, returning, renewing and deleting loans with matching inventory
- Deriving overdue status at read time
- Filtering and paging loan listings
- Borrower notices and consistency checks
"""

from .errors import (
    AlreadyReturned,
    DuplicateId,
    InconsistentState,
    LendingError,
    NoCopiesAvailable,
    NotFound,
    OutOfStock,
)
from .integrity import IntegrityChecker, IntegrityReport
from .ledger import InventoryLedger
from .manager import LoanLifecycleManager
from .overdue import effective_status
from .query import filter_loans, paginate, search
from .records import LoanRecordStore
from .schemas import LoanCreate, LoanEdit, LoanNotice, LoanQuery, Page

__all__ = [
    "AlreadyReturned",
    "DuplicateId",
    "InconsistentState",
    "LendingError",
    "NoCopiesAvailable",
    "NotFound",
    "OutOfStock",
    "IntegrityChecker",
    "IntegrityReport",
    "InventoryLedger",
    "LoanLifecycleManager",
    "effective_status",
    "filter_loans",
    "paginate",
    "search",
    "LoanRecordStore",
    "LoanCreate",
    "LoanEdit",
    "LoanNotice",
    "LoanQuery",
    "Page",
]
