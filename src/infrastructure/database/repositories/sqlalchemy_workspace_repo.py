"""SQLAlchemy implementation of Workspace repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.entities.user import User, WorkspaceMemberDetail
from domain.entities.workspace import (
    Workspace,
    WorkspaceMembership,
    WorkspaceRole,
    WorkspaceSummary,
)
from infrastructure.database.models import UserModel, UserWorkspaceModel, WorkspaceModel


class SQLAlchemyWorkspaceRepository:
    """SQLAlchemy implementation of IWorkspaceRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Workspace | None:
        """Get a workspace by ID."""
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_user(self, user_id: UUID) -> list[WorkspaceSummary]:
        """Get all workspaces a user belongs to, oldest membership first."""
        stmt = (
            select(WorkspaceModel, UserWorkspaceModel.role)
            .join(
                UserWorkspaceModel,
                UserWorkspaceModel.workspace_id == WorkspaceModel.id,
            )
            .where(UserWorkspaceModel.user_id == user_id)
            .order_by(UserWorkspaceModel.created_at, UserWorkspaceModel.id)
        )
        result = await self._session.execute(stmt)
        return [
            WorkspaceSummary(
                id=model.id,
                name=model.name,
                role=WorkspaceRole.from_label(role),
                created_by=model.created_by_id,
                created_at=model.created_at,
                updated_at=model.updated_at,
            )
            for model, role in result.all()
        ]

    async def create(self, workspace: Workspace) -> Workspace:
        """Create a new workspace."""
        model = self._to_model(workspace)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, workspace: Workspace) -> Workspace:
        """Update an existing workspace."""
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == workspace.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Workspace {workspace.id} not found")

        model.name = workspace.name
        model.updated_at = workspace.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def get_membership(
        self, workspace_id: UUID, user_id: UUID
    ) -> WorkspaceMembership | None:
        """Get the membership for a (workspace, user) pair."""
        stmt = select(UserWorkspaceModel).where(
            UserWorkspaceModel.workspace_id == workspace_id,
            UserWorkspaceModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._membership_to_entity(model) if model else None

    async def get_membership_by_id(self, id: UUID) -> WorkspaceMembership | None:
        """Get a membership by its own ID."""
        stmt = select(UserWorkspaceModel).where(UserWorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._membership_to_entity(model) if model else None

    async def get_members(self, workspace_id: UUID) -> list[WorkspaceMemberDetail]:
        """Get all memberships of a workspace, with user records loaded."""
        stmt = (
            select(UserWorkspaceModel)
            .options(selectinload(UserWorkspaceModel.user))
            .where(UserWorkspaceModel.workspace_id == workspace_id)
            .order_by(UserWorkspaceModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._member_detail(model) for model in result.scalars()]

    async def add_member(self, membership: WorkspaceMembership) -> WorkspaceMembership:
        """Add a member to a workspace."""
        model = self._membership_to_model(membership)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._membership_to_entity(model)

    async def update_member_role(self, id: UUID, role: WorkspaceRole) -> WorkspaceMembership:
        """Update the role on a membership."""
        stmt = select(UserWorkspaceModel).where(UserWorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError("Membership not found")

        model.role = role.label
        await self._session.flush()
        await self._session.refresh(model)
        return self._membership_to_entity(model)

    async def remove_member(self, id: UUID) -> bool:
        """Delete a membership by ID."""
        stmt = select(UserWorkspaceModel).where(UserWorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: WorkspaceModel) -> Workspace:
        """Convert ORM model to domain entity."""
        return Workspace(
            id=model.id,
            name=model.name,
            created_by=model.created_by_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Workspace) -> WorkspaceModel:
        """Convert domain entity to ORM model."""
        return WorkspaceModel(
            id=entity.id,
            name=entity.name,
            created_by_id=entity.created_by,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _membership_to_entity(self, model: UserWorkspaceModel) -> WorkspaceMembership:
        """Convert membership ORM model to domain entity."""
        return WorkspaceMembership(
            id=model.id,
            workspace_id=model.workspace_id,
            user_id=model.user_id,
            role=WorkspaceRole.from_label(model.role),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _membership_to_model(self, entity: WorkspaceMembership) -> UserWorkspaceModel:
        """Convert membership domain entity to ORM model."""
        return UserWorkspaceModel(
            id=entity.id,
            workspace_id=entity.workspace_id,
            user_id=entity.user_id,
            role=entity.role.label,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _member_detail(self, model: UserWorkspaceModel) -> WorkspaceMemberDetail:
        user: UserModel | None = model.user
        return WorkspaceMemberDetail(
            id=model.id,
            user_id=model.user_id,
            workspace_id=model.workspace_id,
            role=WorkspaceRole.from_label(model.role),
            created_at=model.created_at,
            updated_at=model.updated_at,
            user=(
                User(
                    id=user.id,
                    email=user.email,
                    username=user.username,
                    display_name=user.display_name,
                    avatar_url=user.avatar_url,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
                if user
                else None
            ),
        )
