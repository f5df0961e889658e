"""Pydantic schemas for Workspace API."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.workspace import Workspace, WorkspaceSummary


class WorkspaceCreate(BaseModel):
    """Schema for creating a Workspace."""

    name: str = Field(..., min_length=1, max_length=255)


class WorkspaceUpdate(BaseModel):
    """Schema for updating a Workspace (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)


class WorkspaceResponse(BaseModel):
    """Schema for Workspace response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Riverside Food Bank",
                "role": "Super Admin",
                "created_by": "456e4567-e89b-12d3-a456-426614174000",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str
    role: Optional[str] = None
    created_by: Optional[UUID]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_summary(cls, summary: WorkspaceSummary) -> "WorkspaceResponse":
        return cls(
            id=summary.id,
            name=summary.name,
            role=summary.role.label,
            created_by=summary.created_by,
            created_at=summary.created_at,
            updated_at=summary.updated_at,
        )

    @classmethod
    def from_workspace(cls, workspace: Workspace, role: Optional[str] = None) -> "WorkspaceResponse":
        return cls(
            id=workspace.id,
            name=workspace.name,
            role=role,
            created_by=workspace.created_by,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )


class WorkspaceListResponse(BaseModel):
    """Schema for list of Workspaces response."""

    data: List[WorkspaceResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class WorkspaceDetailResponse(BaseModel):
    """Schema for single Workspace response."""

    data: WorkspaceResponse
