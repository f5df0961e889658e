"""User domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from domain.entities.workspace import WorkspaceRole


@dataclass
class User:
    """Domain entity for an application user."""

    id: UUID = field(default_factory=uuid4)
    email: str = ""
    username: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Normalize email and keep updated_at >= created_at."""
        self.email = self.email.strip().lower()
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class WorkspaceMemberDetail:
    """A membership joined with the member's user record, for the people page."""

    id: UUID
    user_id: UUID
    workspace_id: UUID
    role: WorkspaceRole
    created_at: datetime
    updated_at: datetime
    user: User | None = None
