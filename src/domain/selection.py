"""Current-workspace resolution shared by the server loader and the client store.

Priority, highest first:

1. ``explicit_id`` - a selection the caller just made
2. ``persisted_id`` - the value kept in client storage or the workspace cookie
3. ``prior_id`` - whatever was current in memory before this pass
4. the first workspace, in the order the data source returned them

An identifier that does not match any workspace is skipped silently and the
next priority is tried. An empty workspace list always resolves to ``None``.
"""

from collections.abc import Sequence
from typing import Any, Protocol, TypeVar


class Identified(Protocol):
    @property
    def id(self) -> Any: ...


W = TypeVar("W", bound=Identified)


def _find(workspaces: Sequence[W], workspace_id: Any) -> W | None:
    if workspace_id is None or workspace_id == "":
        return None
    # Cookies and local storage hand back strings; entities carry UUIDs
    wanted = str(workspace_id)
    for workspace in workspaces:
        if str(workspace.id) == wanted:
            return workspace
    return None


def resolve_current(
    workspaces: Sequence[W],
    explicit_id: Any = None,
    persisted_id: Any = None,
    prior_id: Any = None,
) -> W | None:
    """Pick the current workspace from ``workspaces``, or None if it is empty."""
    if not workspaces:
        return None

    for candidate in (explicit_id, persisted_id, prior_id):
        match = _find(workspaces, candidate)
        if match is not None:
            return match

    return workspaces[0]
