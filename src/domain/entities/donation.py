"""Donation domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4


@dataclass
class Contact:
    """An individual donor, owned by one workspace."""

    workspace_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)


@dataclass
class Business:
    """An organisation donor, owned by one workspace."""

    workspace_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)


@dataclass
class Donation:
    """Domain entity for a Donation.

    A donation belongs to exactly one donor: either a contact or a business.
    """

    workspace_id: UUID
    amount: Decimal
    status: str
    id: UUID = field(default_factory=uuid4)
    contact_id: UUID | None = None
    business_id: UUID | None = None
    notes: str | None = None
    payment_type: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        if (self.contact_id is None) == (self.business_id is None):
            raise ValueError("A donation must belong to exactly one of contact or business")
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def apply_update(self, amount: Decimal | None = None, status: str | None = None) -> None:
        """Apply a partial update; None leaves a field unchanged."""
        if amount is not None:
            self.amount = amount
        if status is not None:
            self.status = status
        self.updated_at = datetime.utcnow()


class FilterOperator(StrEnum):
    """Comparison operators accepted in list filters."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    CONTAINS = "contains"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


# Fields that may appear in list filters and sorts
FILTERABLE_FIELDS = frozenset({"amount", "status", "payment_type", "notes", "created_at"})
SORTABLE_FIELDS = frozenset({"amount", "status", "payment_type", "created_at", "updated_at"})


@dataclass(frozen=True)
class DonationFilter:
    field: str
    operator: FilterOperator
    value: Any


@dataclass(frozen=True)
class DonationSort:
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class DonationQuery:
    """List query: optional paging, free-text search, filters and sorts.

    ``page=None`` means "return everything" (the unpaginated listing).
    """

    page: int | None = None
    page_size: int = 25
    search: str | None = None
    filters: tuple[DonationFilter, ...] = ()
    sort: tuple[DonationSort, ...] = ()

    @property
    def offset(self) -> int:
        return ((self.page or 1) - 1) * self.page_size


@dataclass
class DonationPage:
    """One page of donations plus the total matching count."""

    items: list[Donation]
    total: int
    page: int | None = None
    page_size: int | None = None
