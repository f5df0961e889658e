"""Shared fixtures for unit tests."""

from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.workspace import WorkspaceRole, WorkspaceSummary


class FakeUnitOfWork:
    """Fake Unit of Work with AsyncMock repositories for unit testing."""

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.workspaces = AsyncMock()
        self.donations = AsyncMock()
        self.donors = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_summary(
    name: str,
    role: WorkspaceRole = WorkspaceRole.BASIC_USER,
    workspace_id: UUID | None = None,
    offset_minutes: int = 0,
) -> WorkspaceSummary:
    """Build a WorkspaceSummary whose created_at orders by ``offset_minutes``."""
    created = datetime(2026, 1, 1) + timedelta(minutes=offset_minutes)
    return WorkspaceSummary(
        id=workspace_id or uuid4(),
        name=name,
        role=role,
        created_by=None,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def workspace_id() -> UUID:
    """A random workspace ID."""
    return uuid4()


@pytest.fixture
def actor_id() -> UUID:
    """A random actor ID (distinct from user_id)."""
    return uuid4()
