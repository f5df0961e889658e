"""Workspace service layer with business logic."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from core.exceptions import (
    AlreadyAMemberError,
    CannotDowngradeSelfError,
    CannotRemoveSelfError,
    InsufficientPermissionsError,
    InvalidRoleError,
    MemberNotFoundError,
    NotAMemberError,
    WorkspaceNotFoundError,
)
from domain.entities.user import WorkspaceMemberDetail
from domain.entities.workspace import (
    Workspace,
    WorkspaceContext,
    WorkspaceMembership,
    WorkspaceRole,
    WorkspaceSummary,
    has_permission,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.selection import resolve_current

logger = logging.getLogger(__name__)


@dataclass
class InviteResult:
    """Outcome of an invite: unknown emails are reported, not raised."""

    success: bool
    message: str
    user_added: bool = False


class WorkspaceService:
    """Service layer for Workspace business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_all_for_user(self, user_id: UUID) -> list[WorkspaceSummary]:
        """Get all workspaces a user is a member of, in membership order."""
        async with self._uow_factory() as uow:
            return await uow.workspaces.get_all_for_user(user_id)  # type: ignore[no-any-return]

    async def resolve_context(
        self, user_id: UUID, cookie_workspace_id: Any = None
    ) -> WorkspaceContext:
        """Resolve the current workspace for one request.

        Only the cookie value and the first-membership fallback take part;
        there is no in-memory prior selection on the server.
        """
        workspaces = await self.get_all_for_user(user_id)
        current = resolve_current(workspaces, persisted_id=cookie_workspace_id)
        if cookie_workspace_id and current is not None and str(current.id) != str(
            cookie_workspace_id
        ):
            logger.debug(
                "Workspace cookie %s not among memberships of user %s, using %s",
                cookie_workspace_id,
                user_id,
                current.id,
            )
        return WorkspaceContext(workspaces=workspaces, current=current)

    async def get_by_id(self, workspace_id: UUID, user_id: UUID) -> Workspace:
        """Get a workspace by ID, verifying user membership."""
        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(workspace_id))

            await self._require_role(uow, workspace_id, user_id, WorkspaceRole.VOLUNTEER)
            return workspace

    async def select(self, workspace_id: UUID, user_id: UUID) -> WorkspaceSummary:
        """Validate an explicit workspace choice and return the member's view of it."""
        for workspace in await self.get_all_for_user(user_id):
            if workspace.id == workspace_id:
                return workspace
        raise NotAMemberError(str(workspace_id))

    async def create(self, user_id: UUID, name: str) -> Workspace:
        """Create a new workspace and add the creator as Super Admin."""
        async with self._uow_factory() as uow:
            workspace = Workspace(name=name, created_by=user_id)
            created = await uow.workspaces.create(workspace)

            await uow.workspaces.add_member(
                WorkspaceMembership(
                    workspace_id=created.id,
                    user_id=user_id,
                    role=WorkspaceRole.SUPER_ADMIN,
                )
            )

            await uow.commit()
            logger.info("Created workspace %s for user %s", created.id, user_id)
            return created

    async def update(self, workspace_id: UUID, user_id: UUID, name: str | None = None) -> Workspace:
        """Rename a workspace. Requires Admin+ role."""
        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(workspace_id))

            await self._require_role(uow, workspace_id, user_id, WorkspaceRole.ADMIN)

            if name is not None:
                workspace.name = name
            workspace.updated_at = datetime.utcnow()

            updated = await uow.workspaces.update(workspace)
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def get_members(
        self, workspace_id: UUID, user_id: UUID
    ) -> tuple[Workspace, list[WorkspaceMemberDetail]]:
        """Get a workspace and its members. Requires membership."""
        async with self._uow_factory() as uow:
            await self._require_role(uow, workspace_id, user_id, WorkspaceRole.VOLUNTEER)

            workspace = await uow.workspaces.get(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(workspace_id))

            members = await uow.workspaces.get_members(workspace_id)
            return workspace, members

    async def invite_user(
        self,
        workspace_id: UUID,
        user_id: UUID,
        email: str,
        role_label: str,
    ) -> InviteResult:
        """Add an existing user to the workspace by email. Requires Admin+ role.

        Users who have not signed up yet are reported back, not invited.
        """
        role = self._parse_role(role_label)
        email = email.strip().lower()

        async with self._uow_factory() as uow:
            actor = await self._require_role(uow, workspace_id, user_id, WorkspaceRole.ADMIN)
            if not has_permission(actor.role, role):
                raise InsufficientPermissionsError(role.label)

            invitee = await uow.users.get_by_email(email)
            if not invitee:
                logger.info("Invite to workspace %s skipped: no user for %s", workspace_id, email)
                return InviteResult(
                    success=False,
                    message="User not found. Please ask them to sign up first.",
                )

            existing = await uow.workspaces.get_membership(workspace_id, invitee.id)
            if existing:
                raise AlreadyAMemberError(str(invitee.id))

            await uow.workspaces.add_member(
                WorkspaceMembership(workspace_id=workspace_id, user_id=invitee.id, role=role)
            )
            await uow.commit()

            logger.info(
                "User %s added to workspace %s as %s by %s",
                invitee.id,
                workspace_id,
                role.label,
                user_id,
            )
            return InviteResult(success=True, message="User added to workspace", user_added=True)

    async def remove_user(self, workspace_id: UUID, user_id: UUID, target_user_id: UUID) -> bool:
        """Remove another member from the workspace. Requires Admin+ role.

        Members cannot remove themselves here, and nobody can remove a member
        who outranks them.
        """
        if user_id == target_user_id:
            raise CannotRemoveSelfError()

        async with self._uow_factory() as uow:
            actor = await self._require_role(uow, workspace_id, user_id, WorkspaceRole.ADMIN)

            target = await uow.workspaces.get_membership(workspace_id, target_user_id)
            if not target:
                raise MemberNotFoundError(str(target_user_id))

            if target.role > actor.role:
                raise InsufficientPermissionsError(target.role.label)

            removed = await uow.workspaces.remove_member(target.id)
            await uow.commit()

            logger.info("User %s removed from workspace %s by %s", target_user_id, workspace_id, user_id)
            return removed  # type: ignore[no-any-return]

    async def update_role(
        self,
        workspace_id: UUID,
        user_id: UUID,
        membership_id: UUID,
        role_label: str,
    ) -> WorkspaceMembership:
        """Change the role on a membership of this workspace. Requires Admin+ role.

        A Super Admin cannot downgrade themselves, and nobody can grant a role
        above their own or change a member who outranks them.
        """
        role = self._parse_role(role_label)

        async with self._uow_factory() as uow:
            actor = await self._require_role(uow, workspace_id, user_id, WorkspaceRole.ADMIN)

            target = await uow.workspaces.get_membership_by_id(membership_id)
            if not target or target.workspace_id != workspace_id:
                raise MemberNotFoundError(str(membership_id))

            if (
                target.user_id == user_id
                and target.role == WorkspaceRole.SUPER_ADMIN
                and role != WorkspaceRole.SUPER_ADMIN
            ):
                raise CannotDowngradeSelfError()

            if target.role > actor.role or role > actor.role:
                raise InsufficientPermissionsError(max(target.role, role).label)

            updated = await uow.workspaces.update_member_role(membership_id, role)
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def get_user_role(self, workspace_id: UUID, user_id: UUID) -> WorkspaceRole | None:
        """Get a user's role in a workspace, or None if not a member."""
        async with self._uow_factory() as uow:
            member = await uow.workspaces.get_membership(workspace_id, user_id)
            return member.role if member else None

    # --- Internal helpers ---

    async def _require_role(
        self,
        uow: IUnitOfWork,
        workspace_id: UUID,
        user_id: UUID,
        required_role: WorkspaceRole,
    ) -> WorkspaceMembership:
        """Verify the user has at least the required role. Raises on failure."""
        member = await uow.workspaces.get_membership(workspace_id, user_id)
        if not member:
            raise NotAMemberError(str(workspace_id))
        if not has_permission(member.role, required_role):
            raise InsufficientPermissionsError(required_role.label)
        return member

    @staticmethod
    def _parse_role(label: str) -> WorkspaceRole:
        try:
            return WorkspaceRole.from_label(label)
        except ValueError:
            raise InvalidRoleError(label) from None
