"""Form actions for the workspace people settings page.

Every action works on the workspace resolved for the request (cookie, then
first membership) and requires the actor to be Admin or Super Admin there.
"""

from typing import Annotated, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Form, Request

from api.dependencies.auth import CurrentUser
from api.dependencies.workspace import RequestWorkspace
from api.schemas.pages import InviteActionResponse
from api.v1.dependencies import get_workspace_service
from api.v1.schemas.common import ActionResponse
from core.exceptions import MemberNotFoundError, MissingFieldError, NoWorkspaceSelectedError
from core.rate_limit import limiter
from domain.entities.workspace import WorkspaceContext
from domain.services.workspace_service import WorkspaceService

logger = structlog.get_logger()

router = APIRouter(prefix="/app/settings/workspace/people/actions", tags=["pages"])

FormField = Annotated[Optional[str], Form()]


def _current_workspace_id(context: WorkspaceContext) -> UUID:
    if context.current is None:
        raise NoWorkspaceSelectedError()
    return context.current.id


def _parse_id(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise MemberNotFoundError(value) from None


@router.post(
    "/invite-user",
    response_model=InviteActionResponse,
    summary="Add an existing user to the workspace",
    responses={400: {"description": "Missing field, bad role or already a member"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def invite_user(
    request: Request,
    user: CurrentUser,
    context: RequestWorkspace,
    email: FormField = None,
    role: FormField = None,
    service: WorkspaceService = Depends(get_workspace_service),
) -> InviteActionResponse:
    workspace_id = _current_workspace_id(context)
    if not email or not role:
        raise MissingFieldError("Email and role are required")

    result = await service.invite_user(workspace_id, user.id, email, role)
    logger.info(
        "invite_user_action",
        workspace_id=str(workspace_id),
        success=result.success,
        user_added=result.user_added,
    )
    return InviteActionResponse(
        success=result.success, message=result.message, user_added=result.user_added
    )


@router.post(
    "/remove-user",
    response_model=ActionResponse,
    summary="Remove a member from the workspace",
    responses={
        400: {"description": "Missing user ID or removing yourself"},
        404: {"description": "User not found in this workspace"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_user(
    request: Request,
    user: CurrentUser,
    context: RequestWorkspace,
    user_id: FormField = None,
    service: WorkspaceService = Depends(get_workspace_service),
) -> ActionResponse:
    workspace_id = _current_workspace_id(context)
    if not user_id:
        raise MissingFieldError("User ID is required")

    await service.remove_user(workspace_id, user.id, _parse_id(user_id))
    return ActionResponse(success=True, message="User removed from workspace")


@router.post(
    "/update-role",
    response_model=ActionResponse,
    summary="Change a member's role",
    responses={
        400: {"description": "Missing field, bad role or self-downgrade"},
        404: {"description": "User not found in this workspace"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_role(
    request: Request,
    user: CurrentUser,
    context: RequestWorkspace,
    user_workspace_id: FormField = None,
    role: FormField = None,
    service: WorkspaceService = Depends(get_workspace_service),
) -> ActionResponse:
    workspace_id = _current_workspace_id(context)
    if not user_workspace_id or not role:
        raise MissingFieldError("User workspace ID and role are required")

    await service.update_role(workspace_id, user.id, _parse_id(user_workspace_id), role)
    return ActionResponse(success=True, message="Role updated")
