"""SQLite database operations.

Handles database connection, session management, and whole-collection
import/export.
"""

import json
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base
from .store import CollectionStore


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     LIBRARYLOANS_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "LIBRARYLOANS_DB_PATH",
                str(Path.home() / ".libraryloans" / "library.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def get_store(self) -> Generator[CollectionStore, None, None]:
        """Get a collection store whose writes commit or roll back together."""
        with self.get_session() as session:
            yield CollectionStore(session)

    # ========================================================================
    # Collection Operations
    # ========================================================================

    def get_collection(self, name: str, default: Optional[list[Any]] = None) -> list[Any]:
        """Read one collection in its own session."""
        with self.get_store() as store:
            return store.get(name, default)

    def put_collection(self, name: str, documents: list[Any]) -> None:
        """Replace one collection in its own session."""
        with self.get_store() as store:
            store.put(name, documents)

    def export_collections(self, output_path: Path) -> dict[str, int]:
        """Write every collection to a JSON file.

        Args:
            output_path: Path for output file

        Returns:
            Mapping of collection name to number of documents written
        """
        with self.get_store() as store:
            data = {name: store.get(name) for name in store.names()}

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        return {name: len(docs) for name, docs in data.items()}

    def import_collections(self, input_path: Path) -> dict[str, int]:
        """Replace collections with the contents of a JSON file.

        The file holds an object mapping collection names to arrays. All
        collections in the file are written in one transaction; collections
        not named in the file are left alone.

        Args:
            input_path: Path to JSON file

        Returns:
            Mapping of collection name to number of documents written
        """
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict) or not all(
            isinstance(docs, list) for docs in data.values()
        ):
            raise ValueError("Import file must map collection names to arrays")

        with self.get_store() as store:
            for name, docs in data.items():
                store.put(name, docs)

        return {name: len(docs) for name, docs in data.items()}


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
