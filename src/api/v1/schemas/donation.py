"""Pydantic schemas for Donation API."""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from core.exceptions import InvalidQueryError
from domain.entities.donation import (
    FILTERABLE_FIELDS,
    SORTABLE_FIELDS,
    Donation,
    DonationFilter,
    DonationSort,
    FilterOperator,
    SortDirection,
)


class DonationCreate(BaseModel):
    """Schema for recording a donation against a contact or business."""

    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    status: str = Field(..., min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=5000)
    payment_type: Optional[str] = Field(
        None,
        max_length=50,
        validation_alias=AliasChoices("payment_type", "paymentType"),
    )


class DonationUpdate(BaseModel):
    """Schema for a partial donation update (amount and/or status)."""

    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    status: Optional[str] = Field(None, min_length=1, max_length=50)


class DonationResponse(BaseModel):
    """Schema for Donation response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "workspace_id": "223e4567-e89b-12d3-a456-426614174000",
                "contact_id": "323e4567-e89b-12d3-a456-426614174000",
                "business_id": None,
                "amount": "250.00",
                "status": "Completed",
                "notes": "Spring appeal",
                "payment_type": "Check",
                "created_at": "2026-03-01T10:00:00",
                "updated_at": "2026-03-01T10:00:00",
            }
        },
    )

    id: UUID
    workspace_id: UUID
    contact_id: Optional[UUID] = None
    business_id: Optional[UUID] = None
    amount: Decimal
    status: str
    notes: Optional[str] = None
    payment_type: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, donation: Donation) -> "DonationResponse":
        return cls.model_validate(donation)


class DonationListResponse(BaseModel):
    """Schema for a (possibly paginated) list of donations."""

    donations: list[DonationResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class DonationDetailResponse(BaseModel):
    """Schema for a single donation response."""

    donation: DonationResponse


class DonationDeleteResponse(BaseModel):
    """Schema for a delete acknowledgement."""

    success: bool


def _coerce_filter_value(field: str, raw: str) -> Any:
    if field == "amount":
        try:
            return Decimal(raw)
        except InvalidOperation:
            raise InvalidQueryError(f"Invalid amount in filter: {raw}", raw) from None
    if field == "created_at":
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            raise InvalidQueryError(f"Invalid date in filter: {raw}", raw) from None
    return raw


def parse_filter(raw: str) -> DonationFilter:
    """Parse ``field:op:value`` (or ``field:value`` meaning eq)."""
    parts = raw.split(":", 2)
    if len(parts) == 2:
        field, op, value = parts[0], FilterOperator.EQ.value, parts[1]
    elif len(parts) == 3:
        field, op, value = parts
    else:
        raise InvalidQueryError("Filters must look like field:op:value", raw)

    if field not in FILTERABLE_FIELDS:
        raise InvalidQueryError(f"Cannot filter on field: {field}", raw)
    try:
        operator = FilterOperator(op)
    except ValueError:
        raise InvalidQueryError(f"Unknown filter operator: {op}", raw) from None

    return DonationFilter(field=field, operator=operator, value=_coerce_filter_value(field, value))


def parse_sort(raw: str) -> DonationSort:
    """Parse ``field`` or ``field:asc|desc``."""
    field, _, direction = raw.partition(":")
    if field not in SORTABLE_FIELDS:
        raise InvalidQueryError(f"Cannot sort on field: {field}", raw)
    try:
        return DonationSort(field=field, direction=SortDirection(direction or "asc"))
    except ValueError:
        raise InvalidQueryError(f"Unknown sort direction: {direction}", raw) from None
