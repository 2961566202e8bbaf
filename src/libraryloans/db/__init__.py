"""Database module for local SQLite storage."""

from .models import CollectionRecord
from .schemas import Borrower, Item, Loan, LoanStatus
from .sqlite import Database, get_db
from .store import CollectionStore

__all__ = [
    "CollectionRecord",
    "Borrower",
    "Item",
    "Loan",
    "LoanStatus",
    "Database",
    "get_db",
    "CollectionStore",
]
