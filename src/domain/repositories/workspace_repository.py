"""Workspace repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.user import WorkspaceMemberDetail
from domain.entities.workspace import (
    Workspace,
    WorkspaceMembership,
    WorkspaceRole,
    WorkspaceSummary,
)


class IWorkspaceRepository(Protocol):
    """Repository interface for Workspace entities and memberships."""

    async def get(self, id: UUID) -> Workspace | None:
        """Get a workspace by ID."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[WorkspaceSummary]:
        """Get all workspaces a user belongs to, in membership order."""
        ...

    async def create(self, workspace: Workspace) -> Workspace:
        """Create a new workspace."""
        ...

    async def update(self, workspace: Workspace) -> Workspace:
        """Update an existing workspace."""
        ...

    async def get_membership(
        self, workspace_id: UUID, user_id: UUID
    ) -> WorkspaceMembership | None:
        """Get the membership for a (workspace, user) pair."""
        ...

    async def get_membership_by_id(self, id: UUID) -> WorkspaceMembership | None:
        """Get a membership by its own ID."""
        ...

    async def get_members(self, workspace_id: UUID) -> list[WorkspaceMemberDetail]:
        """Get all memberships of a workspace joined with user records."""
        ...

    async def add_member(self, membership: WorkspaceMembership) -> WorkspaceMembership:
        """Add a member to a workspace."""
        ...

    async def update_member_role(self, id: UUID, role: WorkspaceRole) -> WorkspaceMembership:
        """Update the role on a membership."""
        ...

    async def remove_member(self, id: UUID) -> bool:
        """Delete a membership by ID."""
        ...
