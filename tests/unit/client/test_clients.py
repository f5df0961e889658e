"""Unit tests for the HTTP client services using httpx.MockTransport."""

import json
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import httpx
import pytest

from client.config import ClientSettings
from client.donations import DonationClient
from client.http import ApiClient, ApiError
from client.workspaces import WorkspaceClient
from domain.entities.donation import DonationFilter, DonationSort, FilterOperator, SortDirection
from domain.entities.workspace import WorkspaceRole

SETTINGS = ClientSettings(api_base_url="http://test", timeout=5)

WORKSPACE_ID = str(uuid4())
CONTACT_ID = str(uuid4())


def donation_json(**overrides):
    data = {
        "id": str(uuid4()),
        "workspace_id": WORKSPACE_ID,
        "contact_id": CONTACT_ID,
        "business_id": None,
        "amount": "25.00",
        "status": "Completed",
        "notes": None,
        "payment_type": "Card",
        "created_at": "2026-03-01T10:00:00",
        "updated_at": "2026-03-01T10:00:00",
    }
    data.update(overrides)
    return data


def api_with(handler) -> ApiClient:
    return ApiClient(token="tok", settings=SETTINGS, transport=httpx.MockTransport(handler))


class TestApiClient:
    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"ok": True})

        async with api_with(handler) as api:
            assert await api.request("GET", "/x", action="Failed") == {"ok": True}
        assert seen["auth"] == "Bearer tok"

    @pytest.mark.asyncio
    async def test_error_message_from_json_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error_code": "CONTACT_NOT_FOUND", "message": "Contact not found"})

        async with api_with(handler) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.request("GET", "/x", action="Failed to fetch donations")
        assert exc_info.value.message == "Contact not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_error_message_falls_back_to_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>bad gateway</html>")

        async with api_with(handler) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.request("GET", "/x", action="Failed to fetch donations")
        assert str(exc_info.value) == "Failed to fetch donations: 502 Bad Gateway"

    @pytest.mark.asyncio
    async def test_json_without_message_keeps_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(405, json={"detail": "Method Not Allowed"})

        async with api_with(handler) as api:
            with pytest.raises(ApiError) as exc_info:
                await api.request("DELETE", "/x", action="Failed to delete donation")
        assert exc_info.value.message == "Failed to delete donation: 405 Method Not Allowed"
        assert exc_info.value.status_code == 405

    @pytest.mark.asyncio
    async def test_workspace_cookie_is_sent(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["cookie"] = request.headers.get("cookie")
            return httpx.Response(200, json={})

        async with api_with(handler) as api:
            api.set_workspace(WORKSPACE_ID)
            await api.request("GET", "/x", action="Failed")
        assert seen["cookie"] == f"currentWorkspaceId={WORKSPACE_ID}"


class TestWorkspaceClient:
    @pytest.mark.asyncio
    async def test_fetch_user_workspaces_keeps_order_and_roles(self):
        first, second = str(uuid4()), str(uuid4())

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v1/workspaces"
            return httpx.Response(
                200,
                json={
                    "data": [
                        {
                            "id": first,
                            "name": "One",
                            "role": "Super Admin",
                            "created_by": None,
                            "created_at": "2026-01-01T00:00:00",
                            "updated_at": "2026-01-01T00:00:00",
                        },
                        {
                            "id": second,
                            "name": "Two",
                            "role": "Volunteer",
                            "created_by": first,
                            "created_at": "2026-01-02T00:00:00",
                            "updated_at": "2026-01-02T00:00:00",
                        },
                    ],
                    "meta": {"total": 2},
                },
            )

        async with api_with(handler) as api:
            workspaces = await WorkspaceClient(api).fetch_user_workspaces()

        assert [str(w.id) for w in workspaces] == [first, second]
        assert workspaces[0].role == WorkspaceRole.SUPER_ADMIN
        assert workspaces[1].role == WorkspaceRole.VOLUNTEER
        assert workspaces[1].created_at == datetime(2026, 1, 2)


class TestDonationClient:
    @pytest.mark.asyncio
    async def test_fetch_contact_donations(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == f"/api/v1/contacts/{CONTACT_ID}/donations"
            return httpx.Response(200, json={"donations": [donation_json()], "meta": {"total": 1}})

        async with api_with(handler) as api:
            donations = await DonationClient(api).fetch_contact_donations(CONTACT_ID)

        assert len(donations) == 1
        assert donations[0].amount == Decimal("25.00")
        assert str(donations[0].contact_id) == CONTACT_ID

    @pytest.mark.asyncio
    async def test_fetch_workspace_donations_encodes_query(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = request.url.params
            return httpx.Response(
                200,
                json={
                    "donations": [donation_json()],
                    "meta": {"total": 41, "page": 2, "page_size": 20},
                },
            )

        async with api_with(handler) as api:
            page = await DonationClient(api).fetch_workspace_donations(
                WORKSPACE_ID,
                page=2,
                page_size=20,
                search="gala",
                filters=[
                    DonationFilter("amount", FilterOperator.GTE, Decimal("10")),
                    DonationFilter("status", FilterOperator.EQ, "Completed"),
                ],
                sort=[DonationSort("amount", SortDirection.DESC)],
            )

        params = seen["params"]
        assert params["page"] == "2"
        assert params["page_size"] == "20"
        assert params["search"] == "gala"
        assert params.get_list("filter") == ["amount:gte:10", "status:eq:Completed"]
        assert params.get_list("sort") == ["amount:desc"]
        assert page.total == 41
        assert page.page == 2
        assert page.page_size == 20

    @pytest.mark.asyncio
    async def test_create_contact_donation_posts_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"donation": donation_json(notes="Gala")})

        async with api_with(handler) as api:
            donation = await DonationClient(api).create_contact_donation(
                CONTACT_ID, Decimal("25.00"), "Completed", notes="Gala", payment_type="Card"
            )

        assert seen["method"] == "POST"
        assert seen["body"] == {
            "amount": "25.00",
            "status": "Completed",
            "notes": "Gala",
            "payment_type": "Card",
        }
        assert donation.notes == "Gala"

    @pytest.mark.asyncio
    async def test_legacy_create_donation_targets_contact(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"donation": donation_json()})

        async with api_with(handler) as api:
            await DonationClient(api).create_donation(CONTACT_ID, Decimal("5"), "Pledged")

        assert seen["path"] == f"/api/v1/contacts/{CONTACT_ID}/donations"
        assert seen["body"] == {"amount": "5", "status": "Pledged"}

    @pytest.mark.asyncio
    async def test_update_sends_only_given_fields(self):
        seen = {}
        donation_id = str(uuid4())

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"donation": donation_json(id=donation_id, status="Refunded")})

        async with api_with(handler) as api:
            updated = await DonationClient(api).update_donation(donation_id, status="Refunded")

        assert seen["method"] == "PUT"
        assert seen["body"] == {"status": "Refunded"}
        assert updated.status == "Refunded"

    @pytest.mark.asyncio
    async def test_delete_returns_success_flag(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            return httpx.Response(200, json={"success": True})

        async with api_with(handler) as api:
            assert await DonationClient(api).delete_donation(uuid4()) is True

    @pytest.mark.asyncio
    async def test_errors_surface_as_api_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"message": "Insufficient permissions. Required role: Admin"})

        async with api_with(handler) as api:
            with pytest.raises(ApiError, match="Required role: Admin"):
                await DonationClient(api).delete_donation(uuid4())
