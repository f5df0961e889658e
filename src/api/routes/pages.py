"""Server-side page loaders.

Each loader returns the data a page needs as JSON. Protected pages send
anonymous visitors to ``/login`` with a 303, the login page sends signed-in
users on to ``/app``.
"""

from typing import Union

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from api.dependencies.auth import OptionalUser, SessionToken
from api.dependencies.workspace import RequestWorkspace
from api.schemas.pages import (
    LayoutData,
    MemberResponse,
    PageUser,
    PeoplePageData,
    ProtectedPageData,
    SessionInfo,
)
from api.v1.dependencies import get_workspace_service
from api.v1.schemas.workspace import WorkspaceResponse
from core.config import settings
from core.exceptions import NotAMemberError
from core.rate_limit import limiter
from domain.services.workspace_service import WorkspaceService
from infrastructure.auth.provider import TokenUser

logger = structlog.get_logger()

router = APIRouter(tags=["pages"])

LOGIN_PATH = "/login"
APP_PATH = "/app"


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=303)


def _protected(user: TokenUser) -> ProtectedPageData:
    return ProtectedPageData(session=SessionInfo(), user=PageUser.from_token_user(user))


@router.get("/layout", response_model=LayoutData, summary="Root layout data")
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def layout(
    request: Request,
    user: OptionalUser,
    token: SessionToken,
    service: WorkspaceService = Depends(get_workspace_service),
) -> LayoutData:
    """Session, user, memberships and the current workspace for every page.

    A failing membership lookup is logged and the page still renders with
    no workspaces.
    """
    if user is None:
        return LayoutData()

    data = LayoutData(session=SessionInfo(), user=PageUser.from_token_user(user), token=token)
    cookie_value = request.cookies.get(settings.workspace_cookie_name)
    try:
        context = await service.resolve_context(user.id, cookie_value)
    except SQLAlchemyError:
        logger.exception("workspace_fetch_failed", user_id=str(user.id))
        return data

    data.workspaces = [WorkspaceResponse.from_summary(ws) for ws in context.workspaces]
    if context.current is not None:
        data.current_workspace = WorkspaceResponse.from_summary(context.current)
    return data


@router.get(
    "/app",
    response_model=None,
    summary="Application home",
    responses={200: {"model": ProtectedPageData}, 303: {"description": "Redirect to /login"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def app_home(
    request: Request, user: OptionalUser
) -> Union[ProtectedPageData, RedirectResponse]:
    if user is None:
        return _redirect(LOGIN_PATH)
    return _protected(user)


@router.get(
    "/onboarding",
    response_model=None,
    summary="Onboarding",
    responses={200: {"model": ProtectedPageData}, 303: {"description": "Redirect to /login"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def onboarding(
    request: Request, user: OptionalUser
) -> Union[ProtectedPageData, RedirectResponse]:
    if user is None:
        return _redirect(LOGIN_PATH)
    return _protected(user)


@router.get(
    "/engage",
    response_model=None,
    summary="Engage area",
    responses={200: {"model": ProtectedPageData}, 303: {"description": "Redirect to /login"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def engage(
    request: Request, user: OptionalUser
) -> Union[ProtectedPageData, RedirectResponse]:
    if user is None:
        return _redirect(LOGIN_PATH)
    return _protected(user)


@router.get(
    "/login",
    response_model=None,
    summary="Login page",
    responses={303: {"description": "Already signed in, redirect to /app"}},
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def login(request: Request, user: OptionalUser) -> Union[dict, RedirectResponse]:
    if user is not None:
        return _redirect(APP_PATH)
    return {}


@router.get(
    "/app/settings/workspace/people",
    response_model=None,
    summary="Workspace people settings",
    responses={200: {"model": PeoplePageData}, 303: {"description": "Redirect to /login"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def people_page(
    request: Request,
    user: OptionalUser,
    context: RequestWorkspace,
    service: WorkspaceService = Depends(get_workspace_service),
) -> Union[PeoplePageData, RedirectResponse]:
    """Members of the current workspace, with their roles."""
    if user is None:
        return _redirect(LOGIN_PATH)

    if context.current is None:
        return PeoplePageData(no_workspace_selected=True)

    try:
        workspace, members = await service.get_members(context.current.id, user.id)
    except NotAMemberError:
        logger.warning(
            "workspace_access_denied",
            workspace_id=str(context.current.id),
            user_id=str(user.id),
        )
        return PeoplePageData(no_workspace_access=True)

    return PeoplePageData(
        members=[MemberResponse.from_detail(m) for m in members],
        workspace=WorkspaceResponse.from_workspace(workspace, role=context.current.role.label),
    )
