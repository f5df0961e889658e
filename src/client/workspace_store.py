"""Client-side workspace store.

Keeps the user's workspaces and the current selection in a
:class:`client.state.StateContainer`, and remembers the selection in durable
storage under ``currentWorkspaceId`` so it survives restarts.

Every operation is a single whole-state replacement. ``refresh_workspaces``
may interleave with the synchronous setters while its fetch is in flight; it
reads the latest state and stored selection only once the fetch returns.
Overlapping refreshes are not cancelled: the one that finishes last wins.
"""

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from client.http import ApiError
from client.state import StateContainer
from client.storage import KeyValueStorage
from domain.entities.workspace import WorkspaceSummary
from domain.selection import resolve_current

logger = logging.getLogger(__name__)

STORAGE_KEY = "currentWorkspaceId"
REFRESH_FAILED = "Failed to refresh workspaces"

FetchWorkspaces = Callable[[], Awaitable[Sequence[WorkspaceSummary]]]


@dataclass(frozen=True)
class WorkspaceState:
    current_workspace: WorkspaceSummary | None = None
    workspaces: tuple[WorkspaceSummary, ...] = field(default_factory=tuple)
    is_loading: bool = False
    error: str | None = None


class WorkspaceStore:
    """Workspace list, current selection, loading flag and last error."""

    def __init__(
        self,
        storage: KeyValueStorage,
        fetch_workspaces: FetchWorkspaces,
        container: StateContainer[WorkspaceState] | None = None,
    ) -> None:
        self._storage = storage
        self._fetch_workspaces = fetch_workspaces
        self._state = container or StateContainer(WorkspaceState())
        self._in_flight = 0

    @property
    def state(self) -> WorkspaceState:
        return self._state.get()

    def subscribe(self, listener: Callable[[WorkspaceState], None]) -> Callable[[], None]:
        return self._state.subscribe(listener)

    def set_workspaces(
        self, workspaces: Sequence[WorkspaceSummary], current_id: Any = None
    ) -> WorkspaceSummary | None:
        """Replace the list and resolve the current workspace.

        Order: ``current_id``, then the stored selection, then the previous
        selection if still present, then the first workspace.
        """
        current = self._resolve(workspaces, explicit_id=current_id)
        self._state.update(
            lambda state: dataclasses.replace(
                state,
                workspaces=tuple(workspaces),
                current_workspace=current,
                is_loading=False,
            )
        )
        return current

    def set_current_workspace(
        self, workspace_id: Any, workspace_data: WorkspaceSummary | None = None
    ) -> WorkspaceSummary | None:
        """Make a workspace current and remember the choice.

        ``workspace_data`` is used as-is when given; otherwise the id must be
        in the current list. An unknown id leaves the state untouched.
        """
        workspace = workspace_data or next(
            (w for w in self.state.workspaces if str(w.id) == str(workspace_id)), None
        )
        if workspace is None:
            logger.warning("Workspace %s is not in the current list, selection unchanged", workspace_id)
            return None

        self._storage.set_item(STORAGE_KEY, str(workspace.id))
        self._state.update(lambda state: dataclasses.replace(state, current_workspace=workspace))
        return workspace

    def set_loading(self, is_loading: bool) -> None:
        self._state.update(lambda state: dataclasses.replace(state, is_loading=is_loading))

    def set_error(self, error: str | None) -> None:
        self._state.update(lambda state: dataclasses.replace(state, error=error))

    def reset(self) -> None:
        """Forget the stored selection and return to the initial state."""
        self._storage.remove_item(STORAGE_KEY)
        self._state.set(WorkspaceState())

    def update_current_workspace(self, **changes: Any) -> WorkspaceSummary | None:
        """Apply field changes to the current workspace and its list entry together.

        Raises:
            ValueError: if ``changes`` includes ``id``; identity is fixed.
        """
        if "id" in changes:
            raise ValueError("A workspace id cannot be changed")
        current = self.state.current_workspace
        if current is None:
            return None

        updated = dataclasses.replace(current, **changes)
        self._state.update(
            lambda state: dataclasses.replace(
                state,
                current_workspace=updated,
                workspaces=tuple(updated if w.id == current.id else w for w in state.workspaces),
            )
        )
        return updated

    async def refresh_workspaces(self) -> None:
        """Reload the list from the data source and re-resolve the selection.

        On failure the list and selection are kept and ``error`` is set.
        """
        self._in_flight += 1
        self._state.update(lambda state: dataclasses.replace(state, is_loading=True, error=None))

        try:
            try:
                workspaces = await self._fetch_workspaces()
            finally:
                self._in_flight -= 1
        except Exception as e:
            logger.exception("Error refreshing workspaces")
            message = e.message if isinstance(e, ApiError) and e.message else REFRESH_FAILED
            self._state.update(
                lambda state: dataclasses.replace(
                    state, error=message, is_loading=self._in_flight > 0
                )
            )
            return

        current = self._resolve(workspaces)
        self._state.update(
            lambda state: dataclasses.replace(
                state,
                workspaces=tuple(workspaces),
                current_workspace=current,
                is_loading=self._in_flight > 0,
                error=None,
            )
        )

    def _resolve(
        self, workspaces: Sequence[WorkspaceSummary], explicit_id: Any = None
    ) -> WorkspaceSummary | None:
        prior = self.state.current_workspace
        current = resolve_current(
            workspaces,
            explicit_id=explicit_id,
            persisted_id=self._storage.get_item(STORAGE_KEY),
            prior_id=prior.id if prior else None,
        )
        if current is not None:
            self._storage.set_item(STORAGE_KEY, str(current.id))
        return current
