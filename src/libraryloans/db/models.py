"""SQLAlchemy ORM models for local SQLite database.

Tables:
- collections: One row per named collection, holding the whole collection
  as a JSON array
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CollectionRecord(Base):
    """Collection model - a named list of JSON documents, replaced as a whole."""

    __tablename__ = "collections"

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="[]")  # JSON array
    updated_at: Mapped[str] = mapped_column(
        String(26),
        default=lambda: datetime.now(timezone.utc).isoformat(),
        onupdate=lambda: datetime.now(timezone.utc).isoformat(),
    )

    def __repr__(self) -> str:
        return f"<CollectionRecord(name='{self.name}')>"
