"""Workspace API routes."""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Request, Response, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_workspace_service
from api.v1.schemas.workspace import (
    WorkspaceCreate,
    WorkspaceDetailResponse,
    WorkspaceListResponse,
    WorkspaceResponse,
    WorkspaceUpdate,
)
from core.config import settings
from core.rate_limit import limiter
from domain.entities.workspace import WorkspaceRole
from domain.services.workspace_service import WorkspaceService

logger = structlog.get_logger()

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.get(
    "",
    response_model=WorkspaceListResponse,
    summary="List user's workspaces",
    responses={200: {"description": "Workspaces the user belongs to, in membership order"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_workspaces(
    request: Request,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceListResponse:
    """Get all workspaces the authenticated user is a member of."""
    workspaces = await service.get_all_for_user(user.id)
    data = [WorkspaceResponse.from_summary(ws) for ws in workspaces]
    return WorkspaceListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=WorkspaceDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace",
    responses={201: {"description": "Workspace created, creator is Super Admin"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_workspace(
    request: Request,
    body: WorkspaceCreate,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Create a new workspace. The creator becomes its Super Admin."""
    workspace = await service.create(user_id=user.id, name=body.name)
    return WorkspaceDetailResponse(
        data=WorkspaceResponse.from_workspace(workspace, role=WorkspaceRole.SUPER_ADMIN.label)
    )


@router.get(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Get a workspace",
    responses={
        200: {"description": "Workspace found"},
        403: {"description": "Not a member"},
        404: {"description": "Workspace not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_workspace(
    request: Request,
    workspace_id: UUID,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Get a workspace by ID. Requires membership."""
    workspace = await service.get_by_id(workspace_id, user.id)
    role = await service.get_user_role(workspace_id, user.id)
    return WorkspaceDetailResponse(
        data=WorkspaceResponse.from_workspace(workspace, role=role.label if role else None)
    )


@router.patch(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Rename a workspace",
    responses={
        200: {"description": "Workspace updated"},
        403: {"description": "Insufficient permissions (Admin+ only)"},
        404: {"description": "Workspace not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_workspace(
    request: Request,
    workspace_id: UUID,
    body: WorkspaceUpdate,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Update a workspace. Requires Admin+ role."""
    workspace = await service.update(workspace_id, user.id, name=body.name)
    role = await service.get_user_role(workspace_id, user.id)
    return WorkspaceDetailResponse(
        data=WorkspaceResponse.from_workspace(workspace, role=role.label if role else None)
    )


@router.post(
    "/{workspace_id}/select",
    response_model=WorkspaceDetailResponse,
    summary="Select the current workspace",
    responses={
        200: {"description": "Selection stored in the workspace cookie"},
        403: {"description": "Not a member"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def select_workspace(
    request: Request,
    response: Response,
    workspace_id: UUID,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Make a workspace the current one and persist the choice in a cookie."""
    workspace = await service.select(workspace_id, user.id)
    response.set_cookie(
        key=settings.workspace_cookie_name,
        value=str(workspace.id),
        max_age=settings.workspace_cookie_max_age,
        path="/",
        samesite="lax",
    )
    logger.info("workspace_selected", workspace_id=str(workspace.id), user_id=str(user.id))
    return WorkspaceDetailResponse(data=WorkspaceResponse.from_summary(workspace))
