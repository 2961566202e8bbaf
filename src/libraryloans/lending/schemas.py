"""Pydantic schemas for lending operations and loan listings."""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..db.schemas import LoanStatus


# Page sizes offered by the loan list
PAGE_SIZE_CHOICES = (10, 25, 50)


class LoanCreate(BaseModel):
    """Schema for creating a loan."""

    user_id: str = Field(..., min_length=1)
    item_id: str = Field(..., min_length=1)
    loan_date: date
    due_date: date


class LoanEdit(BaseModel):
    """Schema for the administrative field edit.

    No cross-field validation: an administrator may set any combination.
    """

    loan_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[LoanStatus] = None


class LoanNotice(BaseModel):
    """Read-only projection of a loan for notices and printed reports."""

    loan_id: str
    user_id: str
    user_name: str
    book_title: str
    loan_date: date
    due_date: date
    effective_status: LoanStatus
    days_overdue: int = 0


class LoanQuery(BaseModel):
    """Filter and page parameters for a loan listing."""

    model_config = ConfigDict(extra="forbid")

    text: str = ""
    status: Optional[LoanStatus] = None
    due_from: Optional[date] = None
    due_to: Optional[date] = None
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1)

    def refine(self, **changes: Any) -> "LoanQuery":
        """Return a copy with some parameters changed.

        Changing any filter or the page size moves back to the first page;
        changing only ``page`` keeps the filters as they are.
        """
        data = self.model_dump()
        data.update(changes)
        refined = LoanQuery.model_validate(data)

        resets = [
            name for name in changes
            if name != "page" and getattr(refined, name) != getattr(self, name)
        ]
        if resets:
            refined.page = 1
        return refined


class Page(BaseModel):
    """One page of a listing."""

    items: list[Any]
    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
