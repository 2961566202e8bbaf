"""Loan and inventory consistency checking.

Finds stored states that the guarded lifecycle operations never produce,
usually the result of an administrative field edit or a manual change to the
catalog.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from ..db.schemas import Item, Loan, LoanStatus
from ..db.sqlite import Database, get_db
from .errors import InconsistentState
from .ledger import InventoryLedger
from .records import LoanRecordStore


class IssueSeverity(str, Enum):
    """Severity level for integrity issues."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class IntegrityIssue:
    """An integrity issue found during checking."""

    severity: IssueSeverity
    category: str
    message: str
    loan_id: Optional[str] = None
    item_id: Optional[str] = None

    def __str__(self) -> str:
        """String representation."""
        prefix = f"[{self.severity.value.upper()}]"
        return f"{prefix} {self.category}: {self.message}"


@dataclass
class IntegrityReport:
    """Report from integrity check."""

    checked_at: str
    loan_count: int = 0
    item_count: int = 0
    outstanding: dict[str, int] = field(default_factory=dict)
    issues: list[IntegrityIssue] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True when no error-level issue was found."""
        return self.error_count == 0

    @property
    def error_count(self) -> int:
        """Count of error issues."""
        return sum(1 for i in self.issues if i.severity == IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        """Count of warning issues."""
        return sum(1 for i in self.issues if i.severity == IssueSeverity.WARNING)

    def get_issues_by_category(self, category: str) -> list[IntegrityIssue]:
        """Get issues of a specific category."""
        return [i for i in self.issues if i.category == category]

    def raise_for_issues(self) -> None:
        """Raise if any error-level issue was found.

        Raises:
            InconsistentState: Listing the error issues
        """
        errors = [i for i in self.issues if i.severity == IssueSeverity.ERROR]
        if errors:
            summary = "; ".join(i.message for i in errors)
            raise InconsistentState(f"{len(errors)} consistency error(s): {summary}", errors)


class IntegrityChecker:
    """Checks loans against the inventory they draw from."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize integrity checker.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def check_database(self) -> IntegrityReport:
        """Run all checks against the stored collections."""
        with self.db.get_store() as store:
            loans = list(LoanRecordStore(store).all())
            items = InventoryLedger(store).items()
        return self.check(loans, items)

    def check(self, loans: Iterable[Loan], items: Iterable[Item]) -> IntegrityReport:
        """Run all checks on the given records.

        Args:
            loans: Loan records
            items: Catalog items

        Returns:
            IntegrityReport with all issues found
        """
        loans = list(loans)
        items = list(items)
        report = IntegrityReport(
            checked_at=datetime.now().isoformat(),
            loan_count=len(loans),
            item_count=len(items),
        )

        report.issues.extend(self._check_available(items))
        report.issues.extend(self._check_return_dates(loans))
        report.issues.extend(self._check_duplicate_ids(loans))
        report.issues.extend(self._check_item_references(loans, items))

        report.outstanding = self.outstanding_by_item(loans)
        for item_id, count in report.outstanding.items():
            report.issues.append(IntegrityIssue(
                severity=IssueSeverity.INFO,
                category="outstanding",
                message=f"{count} copy(ies) of item {item_id} out on loan",
                item_id=item_id,
            ))

        return report

    @staticmethod
    def outstanding_by_item(loans: Iterable[Loan]) -> dict[str, int]:
        """Count loans per item that still hold a copy."""
        return dict(Counter(
            loan.book_id for loan in loans if loan.status != LoanStatus.RETURNED
        ))

    def _check_available(self, items: list[Item]) -> list[IntegrityIssue]:
        """Available counts must never be negative."""
        return [
            IntegrityIssue(
                severity=IssueSeverity.ERROR,
                category="available",
                message=f"Item {item.id} has negative availability ({item.available})",
                item_id=item.id,
            )
            for item in items
            if item.available < 0
        ]

    def _check_return_dates(self, loans: list[Loan]) -> list[IntegrityIssue]:
        """Return date is set exactly when the loan is returned."""
        issues = []
        for loan in loans:
            returned = loan.status == LoanStatus.RETURNED
            if returned and loan.return_date is None:
                issues.append(IntegrityIssue(
                    severity=IssueSeverity.ERROR,
                    category="return_date",
                    message=f"Loan {loan.id} is returned but has no return date",
                    loan_id=loan.id,
                ))
            elif not returned and loan.return_date is not None:
                issues.append(IntegrityIssue(
                    severity=IssueSeverity.ERROR,
                    category="return_date",
                    message=f"Loan {loan.id} is {loan.status.value} but has a return date",
                    loan_id=loan.id,
                ))
        return issues

    def _check_duplicate_ids(self, loans: list[Loan]) -> list[IntegrityIssue]:
        """Loan ids must be unique."""
        counts = Counter(loan.id for loan in loans)
        return [
            IntegrityIssue(
                severity=IssueSeverity.ERROR,
                category="duplicate_id",
                message=f"Loan id {loan_id} appears {count} times",
                loan_id=loan_id,
            )
            for loan_id, count in counts.items()
            if count > 1
        ]

    def _check_item_references(
        self, loans: list[Loan], items: list[Item]
    ) -> list[IntegrityIssue]:
        """Loans should point at items that still exist."""
        known = {item.id for item in items}
        return [
            IntegrityIssue(
                severity=IssueSeverity.WARNING,
                category="orphaned_loan",
                message=f"Loan {loan.id} refers to missing item {loan.book_id}",
                loan_id=loan.id,
                item_id=loan.book_id,
            )
            for loan in loans
            if loan.book_id not in known
        ]
