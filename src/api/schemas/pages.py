"""Page data returned by the server-side page loaders."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from api.v1.schemas.workspace import WorkspaceResponse
from domain.entities.user import User, WorkspaceMemberDetail
from domain.entities.workspace import ROLE_LABELS
from infrastructure.auth.provider import TokenUser


class SessionInfo(BaseModel):
    active: bool = True


class PageUser(BaseModel):
    """The signed-in user as seen by pages."""

    id: UUID
    email: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_token_user(cls, user: TokenUser) -> "PageUser":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            username=user.username,
        )

    @classmethod
    def from_user(cls, user: User) -> "PageUser":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            username=user.username,
            avatar_url=user.avatar_url,
        )


class LayoutData(BaseModel):
    """Root layout data shared by every page."""

    session: Optional[SessionInfo] = None
    user: Optional[PageUser] = None
    token: Optional[str] = None
    workspaces: list[WorkspaceResponse] = Field(default_factory=list)
    current_workspace: Optional[WorkspaceResponse] = None


class ProtectedPageData(BaseModel):
    """Data for pages that only require a signed-in user."""

    session: SessionInfo
    user: PageUser


class MemberResponse(BaseModel):
    """A workspace membership with the member's user record."""

    id: UUID
    user_id: UUID
    workspace_id: UUID
    role: str
    created_at: datetime
    updated_at: datetime
    user: Optional[PageUser] = None

    @classmethod
    def from_detail(cls, member: WorkspaceMemberDetail) -> "MemberResponse":
        return cls(
            id=member.id,
            user_id=member.user_id,
            workspace_id=member.workspace_id,
            role=member.role.label,
            created_at=member.created_at,
            updated_at=member.updated_at,
            user=PageUser.from_user(member.user) if member.user else None,
        )


class PeoplePageData(BaseModel):
    """Workspace people settings page."""

    members: list[MemberResponse] = Field(default_factory=list)
    workspace: Optional[WorkspaceResponse] = None
    workspace_roles: list[str] = Field(default_factory=lambda: list(ROLE_LABELS))
    no_workspace_selected: bool = False
    no_workspace_access: bool = False


class InviteActionResponse(BaseModel):
    """Result of the invite-user form action."""

    success: bool
    message: str
    user_added: bool = False
