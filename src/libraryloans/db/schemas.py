"""Pydantic schemas for the records kept in the collection store.

Records are persisted as JSON with camelCase field names (``userId``,
``bookTitle``, ``dueDate``) and exposed to Python with snake_case attributes.
Both spellings are accepted on input.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Collection names in the key-value store
LOANS = "loans"
BOOKS = "books"
USERS = "users"


class LoanStatus(str, Enum):
    """Persisted status of a loan."""

    ACTIVE = "active"
    RETURNED = "returned"
    OVERDUE = "overdue"


class StoredRecord(BaseModel):
    """Base for records serialized into a collection."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the JSON document stored in the collection."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Loan(StoredRecord):
    """A record of one item lent to one borrower.

    ``user_name`` and ``book_title`` are snapshots taken when the loan is
    created and are never refreshed afterwards.
    """

    id: str
    user_id: str
    user_name: str
    book_id: str
    book_title: str
    loan_date: date
    due_date: date
    status: LoanStatus = LoanStatus.ACTIVE
    return_date: Optional[date] = None


class Item(StoredRecord):
    """Catalog entry as seen by the inventory ledger.

    The catalog owns many more fields than these; unknown fields are kept so
    that a ledger write never drops them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str
    title: str
    available: int = 0


class Borrower(StoredRecord):
    """Library user as seen by the lending core."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
