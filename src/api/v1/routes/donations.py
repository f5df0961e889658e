"""Donation API routes.

Donations hang off a donor (contact or business) for listing and creation,
and are addressed directly by ID for updates and deletes.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_donation_service
from api.v1.schemas.donation import (
    DonationCreate,
    DonationDeleteResponse,
    DonationDetailResponse,
    DonationListResponse,
    DonationResponse,
    DonationUpdate,
    parse_filter,
    parse_sort,
)
from core.config import settings
from core.rate_limit import limiter
from domain.entities.donation import DonationPage, DonationQuery
from domain.services.donation_service import DonationService

router = APIRouter(tags=["donations"])


def get_donation_query(
    page: Annotated[int | None, Query(ge=1, description="1-based page; omit for the full list")] = None,
    page_size: Annotated[int | None, Query(ge=1, le=settings.max_page_size)] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    filter: Annotated[
        list[str] | None, Query(description="Repeatable field:op:value, e.g. amount:gte:100")
    ] = None,
    sort: Annotated[list[str] | None, Query(description="Repeatable field[:asc|desc]")] = None,
) -> DonationQuery:
    """Build a DonationQuery from list query parameters."""
    if search is not None:
        search = search.strip() or None
    return DonationQuery(
        page=page,
        page_size=page_size or settings.default_page_size,
        search=search,
        filters=tuple(parse_filter(raw) for raw in filter or ()),
        sort=tuple(parse_sort(raw) for raw in sort or ()),
    )


ListQuery = Annotated[DonationQuery, Depends(get_donation_query)]


def _list_response(result: DonationPage) -> DonationListResponse:
    meta: dict[str, int] = {"total": result.total}
    if result.page is not None:
        meta["page"] = result.page
        meta["page_size"] = result.page_size or settings.default_page_size
    return DonationListResponse(
        donations=[DonationResponse.from_entity(d) for d in result.items],
        meta=meta,
    )


# --- Contact donations ---


@router.get(
    "/contacts/{contact_id}/donations",
    response_model=DonationListResponse,
    summary="List a contact's donations",
    responses={404: {"description": "Contact not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_contact_donations(
    request: Request,
    contact_id: UUID,
    user: CurrentUser,
    query: ListQuery,
    service: DonationService = Depends(get_donation_service),
) -> DonationListResponse:
    """Get donations made by a contact. Requires membership in its workspace."""
    result = await service.list_for_contact(contact_id, user.id, query)
    return _list_response(result)


@router.post(
    "/contacts/{contact_id}/donations",
    response_model=DonationDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a contact donation",
    responses={
        403: {"description": "Insufficient permissions (Basic User+ only)"},
        404: {"description": "Contact not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def create_contact_donation(
    request: Request,
    contact_id: UUID,
    body: DonationCreate,
    user: CurrentUser,
    service: DonationService = Depends(get_donation_service),
) -> DonationDetailResponse:
    """Record a donation from a contact."""
    donation = await service.create_for_contact(
        contact_id,
        user.id,
        amount=body.amount,
        status=body.status,
        notes=body.notes,
        payment_type=body.payment_type,
    )
    return DonationDetailResponse(donation=DonationResponse.from_entity(donation))


# --- Business donations ---


@router.get(
    "/businesses/{business_id}/donations",
    response_model=DonationListResponse,
    summary="List a business's donations",
    responses={404: {"description": "Business not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_business_donations(
    request: Request,
    business_id: UUID,
    user: CurrentUser,
    query: ListQuery,
    service: DonationService = Depends(get_donation_service),
) -> DonationListResponse:
    """Get donations made by a business. Requires membership in its workspace."""
    result = await service.list_for_business(business_id, user.id, query)
    return _list_response(result)


@router.post(
    "/businesses/{business_id}/donations",
    response_model=DonationDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a business donation",
    responses={
        403: {"description": "Insufficient permissions (Basic User+ only)"},
        404: {"description": "Business not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def create_business_donation(
    request: Request,
    business_id: UUID,
    body: DonationCreate,
    user: CurrentUser,
    service: DonationService = Depends(get_donation_service),
) -> DonationDetailResponse:
    """Record a donation from a business."""
    donation = await service.create_for_business(
        business_id,
        user.id,
        amount=body.amount,
        status=body.status,
        notes=body.notes,
        payment_type=body.payment_type,
    )
    return DonationDetailResponse(donation=DonationResponse.from_entity(donation))


# --- Workspace donations ---


@router.get(
    "/workspaces/{workspace_id}/donations",
    response_model=DonationListResponse,
    summary="List all donations in a workspace",
    responses={403: {"description": "Not a member"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_workspace_donations(
    request: Request,
    workspace_id: UUID,
    user: CurrentUser,
    query: ListQuery,
    service: DonationService = Depends(get_donation_service),
) -> DonationListResponse:
    """Get a page of donations across the workspace with search, filters and sort."""
    result = await service.list_for_workspace(workspace_id, user.id, query)
    return _list_response(result)


# --- Single donation ---


@router.api_route(
    "/donations/{donation_id}",
    methods=["PUT", "PATCH"],
    response_model=DonationDetailResponse,
    summary="Update a donation",
    responses={
        403: {"description": "Insufficient permissions (Basic User+ only)"},
        404: {"description": "Donation not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def update_donation(
    request: Request,
    donation_id: UUID,
    body: DonationUpdate,
    user: CurrentUser,
    service: DonationService = Depends(get_donation_service),
) -> DonationDetailResponse:
    """Update a donation's amount and/or status."""
    donation = await service.update(donation_id, user.id, amount=body.amount, status=body.status)
    return DonationDetailResponse(donation=DonationResponse.from_entity(donation))


@router.delete(
    "/donations/{donation_id}",
    response_model=DonationDeleteResponse,
    summary="Delete a donation",
    responses={
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Donation not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_donation(
    request: Request,
    donation_id: UUID,
    user: CurrentUser,
    service: DonationService = Depends(get_donation_service),
) -> DonationDeleteResponse:
    """Delete a donation. Requires Admin+ role."""
    deleted = await service.delete(donation_id, user.id)
    return DonationDeleteResponse(success=deleted)
