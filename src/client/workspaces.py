"""Workspace membership data source."""

from datetime import datetime
from typing import Any
from uuid import UUID

from client.http import ApiClient
from domain.entities.workspace import WorkspaceRole, WorkspaceSummary


def _parse_summary(data: dict[str, Any]) -> WorkspaceSummary:
    created_by = data.get("created_by")
    return WorkspaceSummary(
        id=UUID(str(data["id"])),
        name=data["name"],
        role=WorkspaceRole.from_label(data.get("role") or WorkspaceRole.VOLUNTEER.label),
        created_by=UUID(str(created_by)) if created_by else None,
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


class WorkspaceClient:
    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def fetch_user_workspaces(self) -> list[WorkspaceSummary]:
        """The signed-in user's workspaces, in membership order."""
        body = await self._api.request(
            "GET", "/api/v1/workspaces", action="Failed to fetch workspaces"
        )
        return [_parse_summary(item) for item in body.get("data", [])]

    async def select_workspace(self, workspace_id: UUID | str) -> WorkspaceSummary:
        """Tell the server about an explicit choice so the cookie follows it."""
        body = await self._api.request(
            "POST",
            f"/api/v1/workspaces/{workspace_id}/select",
            action="Failed to select workspace",
        )
        summary = _parse_summary(body["data"])
        self._api.set_workspace(str(summary.id))
        return summary
