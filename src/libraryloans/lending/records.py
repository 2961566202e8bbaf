"""Loan record storage keyed by loan id."""

from typing import Iterator

from ..db.schemas import LOANS, Loan
from ..db.store import CollectionStore
from .errors import DuplicateId, NotFound


class LoanRecordStore:
    """The set of loan records, in insertion order."""

    def __init__(self, store: CollectionStore, collection: str = LOANS):
        self.store = store
        self.collection = collection

    def _load(self) -> list[Loan]:
        return [Loan.model_validate(doc) for doc in self.store.get(self.collection, [])]

    def _save(self, loans: list[Loan]) -> None:
        self.store.put(self.collection, [loan.to_document() for loan in loans])

    @staticmethod
    def _index(loans: list[Loan], loan_id: str) -> int:
        for i, loan in enumerate(loans):
            if loan.id == loan_id:
                return i
        raise NotFound("Loan", loan_id)

    def get(self, loan_id: str) -> Loan:
        """Get a loan by ID.

        Raises:
            NotFound: If no loan has this id
        """
        loans = self._load()
        return loans[self._index(loans, loan_id)]

    def insert(self, loan: Loan) -> Loan:
        """Append a new loan.

        Raises:
            DuplicateId: If a loan with the same id exists
        """
        loans = self._load()
        if any(existing.id == loan.id for existing in loans):
            raise DuplicateId(loan.id)
        loans.append(loan)
        self._save(loans)
        return loan

    def update(self, loan: Loan) -> Loan:
        """Replace a stored loan in place.

        Raises:
            NotFound: If no loan has this id
        """
        loans = self._load()
        loans[self._index(loans, loan.id)] = loan
        self._save(loans)
        return loan

    def remove(self, loan_id: str) -> Loan:
        """Remove a loan and return the removed record.

        Raises:
            NotFound: If no loan has this id
        """
        loans = self._load()
        removed = loans.pop(self._index(loans, loan_id))
        self._save(loans)
        return removed

    def all(self) -> Iterator[Loan]:
        """Iterate over a snapshot of the stored loans.

        The snapshot is taken on the first ``next()``; call again for a fresh
        sequence reflecting later writes.
        """
        yield from self._load()

    def __len__(self) -> int:
        return len(self.store.get(self.collection, []))
