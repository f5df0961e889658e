"""Donation data source for the client."""

import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from client.http import ApiClient
from domain.entities.donation import Donation, DonationFilter, DonationPage, DonationSort

logger = logging.getLogger(__name__)


def _parse_donation(data: dict[str, Any]) -> Donation:
    def optional_uuid(key: str) -> UUID | None:
        value = data.get(key)
        return UUID(str(value)) if value else None

    return Donation(
        id=UUID(str(data["id"])),
        workspace_id=UUID(str(data["workspace_id"])),
        contact_id=optional_uuid("contact_id"),
        business_id=optional_uuid("business_id"),
        amount=Decimal(str(data["amount"])),
        status=data["status"],
        notes=data.get("notes"),
        payment_type=data.get("payment_type"),
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


def _format_filter(f: DonationFilter) -> str:
    value = f.value.isoformat() if isinstance(f.value, datetime) else f.value
    return f"{f.field}:{f.operator.value}:{value}"


def _list_params(
    page: int | None,
    page_size: int | None,
    search: str | None,
    filters: Sequence[DonationFilter],
    sort: Sequence[DonationSort],
) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    if page is not None:
        params.append(("page", str(page)))
    if page_size is not None:
        params.append(("page_size", str(page_size)))
    if search:
        params.append(("search", search))
    params.extend(("filter", _format_filter(f)) for f in filters)
    params.extend(("sort", f"{s.field}:{s.direction.value}") for s in sort)
    return params


class DonationClient:
    """Donation CRUD against the REST API.

    Every failure surfaces as :class:`client.http.ApiError`; nothing is
    retried here.
    """

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def fetch_contact_donations(
        self,
        contact_id: UUID | str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> list[Donation]:
        body = await self._api.request(
            "GET",
            f"/api/v1/contacts/{contact_id}/donations",
            action="Failed to fetch donations",
            params=_list_params(page, page_size, None, (), ()),
        )
        donations = [_parse_donation(d) for d in body.get("donations", [])]
        logger.debug("Found %d donations for contact %s", len(donations), contact_id)
        return donations

    async def fetch_business_donations(
        self,
        business_id: UUID | str,
        page: int | None = None,
        page_size: int | None = None,
    ) -> list[Donation]:
        body = await self._api.request(
            "GET",
            f"/api/v1/businesses/{business_id}/donations",
            action="Failed to fetch donations",
            params=_list_params(page, page_size, None, (), ()),
        )
        donations = [_parse_donation(d) for d in body.get("donations", [])]
        logger.debug("Found %d donations for business %s", len(donations), business_id)
        return donations

    async def fetch_workspace_donations(
        self,
        workspace_id: UUID | str,
        page: int | None = None,
        page_size: int | None = None,
        search: str | None = None,
        filters: Sequence[DonationFilter] = (),
        sort: Sequence[DonationSort] = (),
    ) -> DonationPage:
        """One page (or, without ``page``, all) of a workspace's donations."""
        body = await self._api.request(
            "GET",
            f"/api/v1/workspaces/{workspace_id}/donations",
            action="Failed to fetch donations",
            params=_list_params(page, page_size, search, filters, sort),
        )
        items = [_parse_donation(d) for d in body.get("donations", [])]
        meta = body.get("meta") or {}
        return DonationPage(
            items=items,
            total=meta.get("total", len(items)),
            page=meta.get("page"),
            page_size=meta.get("page_size"),
        )

    async def create_contact_donation(
        self,
        contact_id: UUID | str,
        amount: Decimal,
        status: str,
        notes: str | None = None,
        payment_type: str | None = None,
    ) -> Donation:
        body = await self._api.request(
            "POST",
            f"/api/v1/contacts/{contact_id}/donations",
            action="Failed to create donation",
            json=_create_body(amount, status, notes, payment_type),
        )
        return _parse_donation(body["donation"])

    async def create_business_donation(
        self,
        business_id: UUID | str,
        amount: Decimal,
        status: str,
        notes: str | None = None,
        payment_type: str | None = None,
    ) -> Donation:
        body = await self._api.request(
            "POST",
            f"/api/v1/businesses/{business_id}/donations",
            action="Failed to create donation",
            json=_create_body(amount, status, notes, payment_type),
        )
        return _parse_donation(body["donation"])

    async def create_donation(self, contact_id: UUID | str, amount: Decimal, status: str) -> Donation:
        """Older two-field form of :meth:`create_contact_donation`."""
        return await self.create_contact_donation(contact_id, amount, status)

    async def update_donation(
        self,
        donation_id: UUID | str,
        amount: Decimal | None = None,
        status: str | None = None,
    ) -> Donation:
        payload: dict[str, Any] = {}
        if amount is not None:
            payload["amount"] = str(amount)
        if status is not None:
            payload["status"] = status
        body = await self._api.request(
            "PUT",
            f"/api/v1/donations/{donation_id}",
            action="Failed to update donation",
            json=payload,
        )
        return _parse_donation(body["donation"])

    async def delete_donation(self, donation_id: UUID | str) -> bool:
        body = await self._api.request(
            "DELETE",
            f"/api/v1/donations/{donation_id}",
            action="Failed to delete donation",
        )
        return bool(body.get("success"))


def _create_body(
    amount: Decimal, status: str, notes: str | None, payment_type: str | None
) -> dict[str, Any]:
    body: dict[str, Any] = {"amount": str(amount), "status": status}
    if notes is not None:
        body["notes"] = notes
    if payment_type is not None:
        body["payment_type"] = payment_type
    return body
