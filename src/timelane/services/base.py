"""BaseService — foundation for the CLI-facing services.

Every service receives a :class:`Workspace` at construction time and
reaches the item store through it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from timelane.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from timelane.infrastructure.workspace import Workspace


class BaseService:
    """Base for service-layer classes.

    Usage::

        class TimelineService(BaseService):
            def list_items(self) -> ServiceResult:
                if (missing := self._require_workspace("list_items")) is not None:
                    return missing
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _require_workspace(self, op: str) -> ServiceResult | None:
        """Failure result when the workspace has no database yet, else None."""
        if self._workspace.is_initialized:
            return None
        return ServiceResult.failure(
            op,
            ErrorCode.NO_WORKSPACE,
            f"No timeline found under {self._workspace.root}. Run 'timelane init' first.",
        )
