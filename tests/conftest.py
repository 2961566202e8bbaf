"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the libraryloans application,
including in-memory databases, a pinned clock and a seeded catalog.
"""

from datetime import date
from typing import Generator

import pytest

from libraryloans.clock import FixedClock
from libraryloans.config import reset_config
from libraryloans.db.schemas import BOOKS, USERS
from libraryloans.db.sqlite import Database, reset_db
from libraryloans.db.store import CollectionStore
from libraryloans.lending.manager import LoanLifecycleManager


TODAY = date(2024, 1, 1)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def db() -> Generator[Database, None, None]:
    """Create an in-memory database for testing."""
    reset_db()
    reset_config()

    database = Database(":memory:")
    database.create_tables()
    yield database

    reset_db()


@pytest.fixture
def store(db: Database) -> Generator[CollectionStore, None, None]:
    """Create a collection store bound to one session."""
    with db.get_store() as s:
        yield s


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_books() -> list[dict]:
    """Catalog documents as written by the catalog screens."""
    return [
        {"id": "b1", "title": "Dom Casmurro", "author": "Machado de Assis", "available": 2},
        {"id": "b2", "title": "The Hobbit", "author": "J.R.R. Tolkien", "available": 1},
        {"id": "b3", "title": "Out of Print", "author": "Nobody", "available": 0},
    ]


@pytest.fixture
def sample_users() -> list[dict]:
    """User documents as written by user management."""
    return [
        {"id": "u1", "name": "Alice Souza", "phone": "(11) 98765-4321", "role": "student"},
        {"id": "u2", "name": "Bruno Lima", "role": "staff"},
    ]


@pytest.fixture
def seeded_db(db: Database, sample_books: list[dict], sample_users: list[dict]) -> Database:
    """Database with a small catalog and two users."""
    db.put_collection(BOOKS, sample_books)
    db.put_collection(USERS, sample_users)
    return db


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2024-01-01."""
    return FixedClock(TODAY)


@pytest.fixture
def manager(seeded_db: Database, clock: FixedClock) -> LoanLifecycleManager:
    """Create a lifecycle manager on the seeded database."""
    return LoanLifecycleManager(seeded_db, clock=clock, renewal_days=7)
