"""Workspace management for per-job working directories."""

import re
import shutil
import tempfile
import threading
import uuid
from pathlib import Path

from flightcontrol.core.config.settings import get_settings
from flightcontrol.core.exceptions.errors import WorkspaceError
from flightcontrol.core.logger.logger import get_logger
from flightcontrol.models.workspace import WorkspaceConfig, WorkspaceInfo, WorkspaceStatus

logger = get_logger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class WorkspaceManager:
    """Manages temporary workspaces, one per build job.

    Jobs acquire workspaces from worker threads, so the registry is
    guarded by a lock.
    """

    def __init__(self, config: WorkspaceConfig | None = None) -> None:
        """Initialize the workspace manager.

        Args:
            config: Workspace configuration. Uses global settings if not provided.
        """
        if config is None:
            settings = get_settings()
            config = WorkspaceConfig(
                base_dir=settings.workspace.base_dir,
                max_workspaces=settings.workspace.max_workspaces,
                auto_cleanup=settings.workspace.auto_cleanup,
                prefix=settings.workspace.prefix,
            )

        self.config = config
        self._workspaces: dict[str, WorkspaceInfo] = {}
        self._lock = threading.Lock()

    @property
    def active_count(self) -> int:
        """Return count of active workspaces."""
        return sum(
            1
            for ws in self._workspaces.values()
            if ws.status == WorkspaceStatus.ACTIVE
        )

    @property
    def workspaces(self) -> dict[str, WorkspaceInfo]:
        """Return all workspace info."""
        with self._lock:
            return self._workspaces.copy()

    def _generate_name(self, hint: str | None = None) -> str:
        """Generate a unique workspace name, optionally embedding a readable hint."""
        suffix = uuid.uuid4().hex[:8]
        if hint:
            safe_hint = _UNSAFE_NAME_CHARS.sub("-", hint).strip("-")
            if safe_hint:
                return f"{self.config.prefix}{safe_hint}_{suffix}"
        return f"{self.config.prefix}{suffix}"

    def _get_base_dir(self) -> Path:
        if self.config.base_dir:
            base_dir = self.config.base_dir
            base_dir.mkdir(parents=True, exist_ok=True)
            return base_dir
        return Path(tempfile.gettempdir())

    def create(
        self,
        name: str | None = None,
        hint: str | None = None,
    ) -> WorkspaceInfo:
        """Create a new, empty workspace directory.

        Args:
            name: Optional workspace name. Auto-generated if not provided.
            hint: Readable fragment for generated names (e.g. ``owner-name``).

        Returns:
            WorkspaceInfo for the created workspace.

        Raises:
            WorkspaceError: If workspace cannot be created.
        """
        with self._lock:
            if self.active_count >= self.config.max_workspaces:
                raise WorkspaceError(
                    f"Maximum workspace limit reached ({self.config.max_workspaces})",
                    details={"active_count": self.active_count},
                )

            workspace_name = name or self._generate_name(hint)

            if workspace_name in self._workspaces:
                raise WorkspaceError(
                    f"Workspace already exists: {workspace_name}",
                    workspace_name=workspace_name,
                )

            workspace_path = self._get_base_dir() / workspace_name

            try:
                workspace_path.mkdir(parents=True, exist_ok=True)
                logger.debug(f"Created workspace directory: {workspace_path}")
            except OSError as e:
                raise WorkspaceError(
                    f"Failed to create workspace directory: {workspace_path}",
                    workspace_name=workspace_name,
                    workspace_path=str(workspace_path),
                    details={"error": str(e)},
                ) from e

            info = WorkspaceInfo(
                name=workspace_name,
                path=workspace_path,
            )
            self._workspaces[workspace_name] = info

        logger.debug(f"Created workspace: {workspace_name} at {workspace_path}")
        return info

    def cleanup(self, name: str, remove: bool = True) -> bool:
        """Clean up a workspace.

        Args:
            name: Workspace name to clean up.
            remove: Delete the directory; False only drops it from the registry.

        Returns:
            True if cleanup succeeded.

        Raises:
            WorkspaceError: If workspace not found.
        """
        with self._lock:
            info = self._workspaces.pop(name, None)
        if not info:
            raise WorkspaceError(
                f"Workspace not found: {name}",
                workspace_name=name,
            )

        info.mark_cleanup()

        try:
            if remove and info.path.exists():
                shutil.rmtree(info.path)
                logger.debug(f"Removed workspace directory: {info.path}")
        except OSError as e:
            # Still disposed: the registry no longer tracks it
            logger.warning(f"Failed to remove workspace directory: {info.path} - {e}")
        finally:
            info.mark_disposed()

        logger.debug(f"Cleaned up workspace: {name}")
        return True

    def release(self, name: str) -> None:
        """Release a job's workspace and free its slot.

        The directory is removed only when auto cleanup is enabled.
        """
        try:
            self.cleanup(name, remove=self.config.auto_cleanup)
        except WorkspaceError as e:
            logger.warning(f"Failed to cleanup workspace {name}: {e}")
