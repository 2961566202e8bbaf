"""Whole-collection key-value access on top of a database session.

A collection is read as a list of JSON documents and written back in full.
There is no partial update and no concurrency token; atomicity across
collections comes only from the session the store is bound to.
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import CollectionRecord


class CollectionStore:
    """Key-value store of whole collections bound to one session."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, name: str, default: Optional[list[Any]] = None) -> list[Any]:
        """Return the documents of a collection.

        Args:
            name: Collection name
            default: Returned when the collection has never been written

        Returns:
            List of JSON documents
        """
        record = self.session.get(CollectionRecord, name)
        if record is None:
            return list(default) if default is not None else []
        return json.loads(record.payload)

    def put(self, name: str, documents: list[Any]) -> None:
        """Replace a collection with the given documents.

        Args:
            name: Collection name
            documents: JSON-serializable documents
        """
        record = self.session.get(CollectionRecord, name)
        if record is None:
            record = CollectionRecord(name=name)
            self.session.add(record)
        record.payload = json.dumps(documents, ensure_ascii=False)
        record.updated_at = datetime.now(timezone.utc).isoformat()
        # Flush so later reads in the same session see this write
        self.session.flush()

    def names(self) -> list[str]:
        """List the names of all stored collections."""
        stmt = select(CollectionRecord.name).order_by(CollectionRecord.name)
        return list(self.session.execute(stmt).scalars().all())
