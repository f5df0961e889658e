"""Per-request workspace resolution for page loaders and form actions."""

from typing import Annotated

from fastapi import Depends, Request

from api.dependencies.auth import OptionalUser
from api.v1.dependencies import get_workspace_service
from core.config import settings
from domain.entities.workspace import WorkspaceContext
from domain.services.workspace_service import WorkspaceService


async def get_workspace_context(
    request: Request,
    user: OptionalUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceContext:
    """Resolve the user's memberships and current workspace from the cookie.

    Anonymous requests get an empty context. Each request resolves on its
    own; nothing is cached between requests.
    """
    if user is None:
        return WorkspaceContext(workspaces=[])

    cookie_value = request.cookies.get(settings.workspace_cookie_name)
    context = await service.resolve_context(user.id, cookie_value)
    request.state.workspace_id = context.current_id
    return context


RequestWorkspace = Annotated[WorkspaceContext, Depends(get_workspace_context)]
