"""Loan lifecycle manager.

Every lifecycle operation touches two collections: the loan records and the
item availability counts. Each runs inside ``lifecycle_operation()``, a single
database session, so both writes commit together or neither does.
"""

import logging
from contextlib import contextmanager
from datetime import date, timedelta
from typing import Generator, Optional
from uuid import uuid4

from ..clock import Clock, SystemClock
from ..config import get_config
from ..db.schemas import USERS, Borrower, Loan, LoanStatus
from ..db.sqlite import Database, get_db
from ..db.store import CollectionStore
from .errors import AlreadyReturned, NoCopiesAvailable, NotFound
from .ledger import InventoryLedger
from .records import LoanRecordStore
from .schemas import LoanCreate, LoanEdit

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a UUID string for new loans."""
    return str(uuid4())


def crosses_returned(previous: LoanStatus, current: LoanStatus) -> bool:
    """Whether a status change moves a loan into or out of ``returned``."""
    return (previous == LoanStatus.RETURNED) != (current == LoanStatus.RETURNED)


class LoanLifecycleManager:
    """Creates, returns, renews, edits and deletes loans."""

    def __init__(
        self,
        db: Optional[Database] = None,
        clock: Optional[Clock] = None,
        renewal_days: Optional[int] = None,
    ):
        """Initialize lifecycle manager.

        Args:
            db: Database instance
            clock: Source of today's date
            renewal_days: Default renewal period (config value if not given)
        """
        self.db = db or get_db()
        self.clock = clock or SystemClock()
        self.renewal_days = (
            renewal_days if renewal_days is not None else get_config().renewal_days
        )

    @contextmanager
    def lifecycle_operation(
        self,
    ) -> Generator[tuple[InventoryLedger, LoanRecordStore], None, None]:
        """Bind a ledger and a record store to one transaction.

        Both collections are committed when the block exits normally and
        rolled back together if it raises.
        """
        with self.db.get_store() as store:
            yield InventoryLedger(store), LoanRecordStore(store)

    @staticmethod
    def _get_borrower(store: CollectionStore, user_id: str) -> Borrower:
        for doc in store.get(USERS, []):
            if doc.get("id") == user_id:
                return Borrower.model_validate(doc)
        raise NotFound("User", user_id)

    @staticmethod
    def _restore_copy(ledger: InventoryLedger, loan: Loan) -> None:
        # The catalog may have dropped the item since it was lent
        try:
            ledger.increment(loan.book_id)
        except NotFound:
            logger.warning(
                "Item %s of loan %s is no longer in the catalog; no copy restored",
                loan.book_id, loan.id,
            )

    # -------------------------------------------------------------------------
    # Guarded transitions
    # -------------------------------------------------------------------------

    def create(
        self,
        user_id: str,
        item_id: str,
        loan_date: date,
        due_date: date,
    ) -> Loan:
        """Lend one copy of an item to a borrower.

        Args:
            user_id: Borrower ID
            item_id: Catalog item ID
            loan_date: Day the loan starts
            due_date: Day the item is expected back

        Returns:
            Created loan, status ``active``

        Raises:
            NoCopiesAvailable: If the item has no available copy; nothing
                is written
            NotFound: If the borrower or item does not exist
        """
        data = LoanCreate(
            user_id=user_id, item_id=item_id, loan_date=loan_date, due_date=due_date
        )

        with self.lifecycle_operation() as (ledger, records):
            borrower = self._get_borrower(ledger.store, data.user_id)
            item = ledger.get(data.item_id)
            if item.available <= 0:
                raise NoCopiesAvailable(item.id, item.title)

            loan = Loan(
                id=generate_id(),
                user_id=borrower.id,
                user_name=borrower.name,
                book_id=item.id,
                book_title=item.title,
                loan_date=data.loan_date,
                due_date=data.due_date,
                status=LoanStatus.ACTIVE,
            )
            # Record first, then take the copy
            records.insert(loan)
            remaining = ledger.decrement(item.id)

        logger.info(
            "Loan %s created: %r to %s, due %s (%d left)",
            loan.id, loan.book_title, loan.user_name, loan.due_date, remaining,
        )
        return loan

    def mark_returned(self, loan_id: str) -> Loan:
        """Mark a loan as returned and put its copy back.

        If the item has since left the catalog the loan is still returned
        and no copy is restored.

        Args:
            loan_id: Loan ID

        Returns:
            Updated loan

        Raises:
            AlreadyReturned: If the loan was already returned; inventory is
                left untouched
            NotFound: If the loan does not exist
        """
        with self.lifecycle_operation() as (ledger, records):
            loan = records.get(loan_id)
            if loan.status == LoanStatus.RETURNED:
                raise AlreadyReturned(loan_id)

            loan.status = LoanStatus.RETURNED
            loan.return_date = self.clock.today()
            records.update(loan)
            self._restore_copy(ledger, loan)

        logger.info("Loan %s returned on %s", loan.id, loan.return_date)
        return loan

    def renew(self, loan_id: str, days: Optional[int] = None) -> Loan:
        """Extend a loan from today.

        Sets the due date to today plus ``days`` and the status back to
        ``active``. This is how an overdue loan is cleared. Inventory is not
        touched.

        Args:
            loan_id: Loan ID
            days: Renewal period (default policy period if None)

        Returns:
            Updated loan

        Raises:
            AlreadyReturned: If the loan was already returned
            NotFound: If the loan does not exist
        """
        if days is None:
            days = self.renewal_days

        with self.lifecycle_operation() as (_, records):
            loan = records.get(loan_id)
            if loan.status == LoanStatus.RETURNED:
                raise AlreadyReturned(loan_id)

            loan.due_date = self.clock.today() + timedelta(days=days)
            loan.status = LoanStatus.ACTIVE
            records.update(loan)

        logger.info("Loan %s renewed until %s", loan.id, loan.due_date)
        return loan

    def delete(self, loan_id: str) -> Loan:
        """Delete a loan record.

        A loan that was never returned still holds a copy, so deleting it
        puts that copy back. A returned loan already gave its copy back, and an
        item that has left the catalog gets nothing back.

        Args:
            loan_id: Loan ID

        Returns:
            The removed loan

        Raises:
            NotFound: If the loan does not exist
        """
        with self.lifecycle_operation() as (ledger, records):
            loan = records.remove(loan_id)
            if loan.status != LoanStatus.RETURNED:
                self._restore_copy(ledger, loan)

        logger.info("Loan %s deleted (status was %s)", loan.id, loan.status.value)
        return loan

    # -------------------------------------------------------------------------
    # Administrative override
    # -------------------------------------------------------------------------

    def edit_fields(
        self,
        loan_id: str,
        loan_date: Optional[date] = None,
        due_date: Optional[date] = None,
        status: Optional[LoanStatus] = None,
    ) -> Loan:
        """Overwrite dates and status with no checks and no inventory change.

        Setting ``returned`` here does not restore a copy, and moving a
        returned loan back to ``active`` does not take one. Either leaves
        the inventory out of step with the loans until fixed by hand.

        Args:
            loan_id: Loan ID
            loan_date: New loan date
            due_date: New due date
            status: New persisted status

        Returns:
            Updated loan

        Raises:
            NotFound: If the loan does not exist
        """
        loan, _ = self.edit_fields_tracked(loan_id, loan_date, due_date, status)
        return loan

    def edit_fields_tracked(
        self,
        loan_id: str,
        loan_date: Optional[date] = None,
        due_date: Optional[date] = None,
        status: Optional[LoanStatus] = None,
    ) -> tuple[Loan, LoanStatus]:
        """Same as ``edit_fields`` but also return the status before the edit."""
        data = LoanEdit(loan_date=loan_date, due_date=due_date, status=status)

        with self.lifecycle_operation() as (_, records):
            loan = records.get(loan_id)
            previous = loan.status

            for field, value in data.model_dump(exclude_none=True).items():
                setattr(loan, field, value)
            records.update(loan)

        if crosses_returned(previous, loan.status):
            logger.warning(
                "Loan %s status edited from %s to %s without an inventory change; "
                "availability of item %s may no longer match its loans",
                loan.id, previous.value, loan.status.value, loan.book_id,
            )
        return loan, previous

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, loan_id: str) -> Loan:
        """Get a loan by ID.

        Raises:
            NotFound: If the loan does not exist
        """
        with self.lifecycle_operation() as (_, records):
            return records.get(loan_id)

    def list_loans(self) -> list[Loan]:
        """All loans in insertion order."""
        with self.lifecycle_operation() as (_, records):
            return list(records.all())

    def available(self, item_id: str) -> int:
        """Available copies of an item."""
        with self.lifecycle_operation() as (ledger, _):
            return ledger.available(item_id)

    def get_borrower(self, user_id: str) -> Borrower:
        """Look up the borrower of a loan.

        Raises:
            NotFound: If the user does not exist
        """
        with self.db.get_store() as store:
            return self._get_borrower(store, user_id)
