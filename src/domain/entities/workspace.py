"""Workspace domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from uuid import UUID, uuid4


class WorkspaceRole(IntEnum):
    """Workspace role hierarchy. Higher value = more permissions.

    Use >= comparison for permission checks:
        user_role >= WorkspaceRole.ADMIN  # True if Admin or Super Admin
    """

    VOLUNTEER = 10
    BASIC_USER = 20
    ADMIN = 30
    SUPER_ADMIN = 40

    @property
    def label(self) -> str:
        """Human-readable role label as stored and shown in the UI."""
        return _ROLE_LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "WorkspaceRole":
        """Parse a role label. Raises ValueError for unknown labels."""
        for role, role_label in _ROLE_LABELS.items():
            if role_label == label:
                return role
        raise ValueError(f"Unknown workspace role: {label!r}")


_ROLE_LABELS = {
    WorkspaceRole.SUPER_ADMIN: "Super Admin",
    WorkspaceRole.ADMIN: "Admin",
    WorkspaceRole.BASIC_USER: "Basic User",
    WorkspaceRole.VOLUNTEER: "Volunteer",
}

# Highest privilege first, the order the people page lists them in
ROLE_LABELS: list[str] = [role.label for role in sorted(WorkspaceRole, reverse=True)]


def has_permission(user_role: WorkspaceRole, required_role: WorkspaceRole) -> bool:
    """Check if a user role meets the required permission level."""
    return user_role >= required_role


@dataclass
class Workspace:
    """Domain entity for a Workspace."""

    name: str
    created_by: UUID | None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


@dataclass
class WorkspaceSummary:
    """A workspace as seen by one of its members (workspace fields + role)."""

    id: UUID
    name: str
    role: WorkspaceRole
    created_by: UUID | None
    created_at: datetime
    updated_at: datetime


@dataclass
class WorkspaceMembership:
    """Domain entity for a (user, workspace, role) association."""

    workspace_id: UUID
    user_id: UUID
    role: WorkspaceRole = WorkspaceRole.BASIC_USER
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class WorkspaceContext:
    """Per-request workspace state: all memberships plus the resolved current one."""

    workspaces: list[WorkspaceSummary]
    current: WorkspaceSummary | None = None

    @property
    def current_id(self) -> UUID | None:
        return self.current.id if self.current else None
