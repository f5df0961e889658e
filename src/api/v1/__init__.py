"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.donations import router as donations_router
from api.v1.routes.workspaces import router as workspaces_router

router = APIRouter()
router.include_router(workspaces_router)
router.include_router(donations_router)
