"""Integration tests for Donations API."""

from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.models import (
    BusinessModel,
    ContactModel,
    UserWorkspaceModel,
    WorkspaceModel,
)


async def _workspace(client: AsyncClient) -> str:
    response = await client.post("/api/v1/workspaces", json={"name": f"Donations {uuid4().hex[:8]}"})
    return response.json()["data"]["id"]


async def _contact(session_factory: async_sessionmaker[AsyncSession], workspace_id: str) -> UUID:
    async with session_factory() as session:
        contact = ContactModel(workspace_id=UUID(workspace_id), name="Ada Donor")
        session.add(contact)
        await session.commit()
        return contact.id


async def _business(session_factory: async_sessionmaker[AsyncSession], workspace_id: str) -> UUID:
    async with session_factory() as session:
        business = BusinessModel(workspace_id=UUID(workspace_id), name="Acme Ltd")
        session.add(business)
        await session.commit()
        return business.id


async def _donate(client: AsyncClient, contact_id: UUID, amount: str, **extra) -> dict:
    response = await client.post(
        f"/api/v1/contacts/{contact_id}/donations",
        json={"amount": amount, "status": extra.pop("status", "Completed"), **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()["donation"]


@pytest.fixture
async def workspace_id(authenticated_client: AsyncClient) -> str:
    return await _workspace(authenticated_client)


@pytest.fixture
async def contact_id(
    session_factory: async_sessionmaker[AsyncSession], workspace_id: str
) -> UUID:
    return await _contact(session_factory, workspace_id)


class TestContactDonations:
    @pytest.mark.asyncio
    async def test_create_and_list(self, authenticated_client: AsyncClient, contact_id: UUID) -> None:
        created = await _donate(
            authenticated_client, contact_id, "25.00", notes="Gala", paymentType="Card"
        )

        assert Decimal(created["amount"]) == Decimal("25.00")
        assert created["contact_id"] == str(contact_id)
        assert created["business_id"] is None
        assert created["payment_type"] == "Card"

        response = await authenticated_client.get(f"/api/v1/contacts/{contact_id}/donations")

        assert response.status_code == 200
        body = response.json()
        assert [d["id"] for d in body["donations"]] == [created["id"]]
        assert body["meta"] == {"total": 1}

    @pytest.mark.asyncio
    async def test_create_rejects_non_positive_amount(
        self, authenticated_client: AsyncClient, contact_id: UUID
    ) -> None:
        response = await authenticated_client.post(
            f"/api/v1/contacts/{contact_id}/donations",
            json={"amount": "0", "status": "Completed"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_contact_is_404(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(f"/api/v1/contacts/{uuid4()}/donations")

        assert response.status_code == 404
        assert response.json()["error_code"] == "CONTACT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_contact_in_foreign_workspace_is_404(
        self,
        authenticated_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        async with session_factory() as session:
            workspace = WorkspaceModel(name="Elsewhere")
            session.add(workspace)
            await session.commit()
        foreign_contact = await _contact(session_factory, str(workspace.id))

        response = await authenticated_client.get(f"/api/v1/contacts/{foreign_contact}/donations")

        assert response.status_code == 404


class TestBusinessDonations:
    @pytest.mark.asyncio
    async def test_create_and_list(
        self,
        authenticated_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        workspace_id: str,
    ) -> None:
        business_id = await _business(session_factory, workspace_id)

        response = await authenticated_client.post(
            f"/api/v1/businesses/{business_id}/donations",
            json={"amount": "1000", "status": "Pledged"},
        )

        assert response.status_code == 201
        donation = response.json()["donation"]
        assert donation["business_id"] == str(business_id)
        assert donation["contact_id"] is None

        listed = await authenticated_client.get(f"/api/v1/businesses/{business_id}/donations")
        assert listed.json()["meta"]["total"] == 1

    @pytest.mark.asyncio
    async def test_unknown_business_is_404(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(
            f"/api/v1/businesses/{uuid4()}/donations",
            json={"amount": "5", "status": "Completed"},
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "BUSINESS_NOT_FOUND"


class TestWorkspaceDonationList:
    @pytest.mark.asyncio
    async def test_pagination_reports_page_meta(
        self, authenticated_client: AsyncClient, workspace_id: str, contact_id: UUID
    ) -> None:
        for amount in ("10", "20", "30"):
            await _donate(authenticated_client, contact_id, amount)

        response = await authenticated_client.get(
            f"/api/v1/workspaces/{workspace_id}/donations",
            params={"page": 2, "page_size": 2, "sort": "amount:asc"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["meta"] == {"total": 3, "page": 2, "page_size": 2}
        assert [Decimal(d["amount"]) for d in body["donations"]] == [Decimal("30")]

    @pytest.mark.asyncio
    async def test_filter_and_sort(
        self, authenticated_client: AsyncClient, workspace_id: str, contact_id: UUID
    ) -> None:
        await _donate(authenticated_client, contact_id, "5")
        await _donate(authenticated_client, contact_id, "50")
        await _donate(authenticated_client, contact_id, "500", status="Pledged")

        response = await authenticated_client.get(
            f"/api/v1/workspaces/{workspace_id}/donations",
            params=[
                ("filter", "amount:gte:10"),
                ("filter", "status:Completed"),
                ("sort", "amount:desc"),
            ],
        )

        assert response.status_code == 200
        assert [Decimal(d["amount"]) for d in response.json()["donations"]] == [Decimal("50")]

    @pytest.mark.asyncio
    async def test_search_matches_notes(
        self, authenticated_client: AsyncClient, workspace_id: str, contact_id: UUID
    ) -> None:
        await _donate(authenticated_client, contact_id, "15", notes="Spring gala table")
        await _donate(authenticated_client, contact_id, "15", notes="Monthly gift")

        response = await authenticated_client.get(
            f"/api/v1/workspaces/{workspace_id}/donations", params={"search": "  GALA "}
        )

        notes = [d["notes"] for d in response.json()["donations"]]
        assert notes == ["Spring gala table"]

    @pytest.mark.asyncio
    async def test_invalid_filter_field_is_400(
        self, authenticated_client: AsyncClient, workspace_id: str
    ) -> None:
        response = await authenticated_client.get(
            f"/api/v1/workspaces/{workspace_id}/donations", params={"filter": "password:eq:x"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_QUERY"

    @pytest.mark.asyncio
    async def test_non_member_is_forbidden(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(f"/api/v1/workspaces/{uuid4()}/donations")

        assert response.status_code == 403


class TestDonationMutations:
    @pytest.mark.asyncio
    async def test_put_and_patch_update_donation(
        self, authenticated_client: AsyncClient, contact_id: UUID
    ) -> None:
        donation = await _donate(authenticated_client, contact_id, "40", notes="Keep me")

        put = await authenticated_client.put(
            f"/api/v1/donations/{donation['id']}", json={"status": "Refunded"}
        )
        patch = await authenticated_client.patch(
            f"/api/v1/donations/{donation['id']}", json={"amount": "45.50"}
        )

        assert put.status_code == 200
        assert put.json()["donation"]["status"] == "Refunded"
        updated = patch.json()["donation"]
        assert Decimal(updated["amount"]) == Decimal("45.50")
        assert updated["status"] == "Refunded"
        assert updated["notes"] == "Keep me"

    @pytest.mark.asyncio
    async def test_update_unknown_donation_is_404(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.put(
            f"/api/v1/donations/{uuid4()}", json={"status": "Refunded"}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "DONATION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_delete_donation(self, authenticated_client: AsyncClient, contact_id: UUID) -> None:
        donation = await _donate(authenticated_client, contact_id, "12")

        response = await authenticated_client.delete(f"/api/v1/donations/{donation['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        again = await authenticated_client.delete(f"/api/v1/donations/{donation['id']}")
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_volunteer_can_read_but_not_create(
        self,
        authenticated_client: AsyncClient,
        session_factory: async_sessionmaker[AsyncSession],
        test_user,
    ) -> None:
        async with session_factory() as session:
            workspace = WorkspaceModel(name="Volunteer WS")
            session.add(workspace)
            await session.flush()
            session.add(
                UserWorkspaceModel(user_id=test_user.id, workspace_id=workspace.id, role="Volunteer")
            )
            await session.commit()
        contact = await _contact(session_factory, str(workspace.id))

        response = await authenticated_client.post(
            f"/api/v1/contacts/{contact}/donations", json={"amount": "5", "status": "Completed"}
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

        listed = await authenticated_client.get(f"/api/v1/contacts/{contact}/donations")
        assert listed.status_code == 200
