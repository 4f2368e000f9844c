"""Source fetcher - acquires repositories into private working directories."""

import shutil
from pathlib import Path

from flightcontrol.core.config.settings import get_settings
from flightcontrol.core.logger.logger import get_logger
from flightcontrol.models.fetcher import AssetSource, FetchResult
from flightcontrol.models.workspace import WorkspaceConfig
from flightcontrol.source.git_operations import GitOperations
from flightcontrol.source.workspace import WorkspaceManager

logger = get_logger(__name__)

# Never copied from a local source tree
_ALWAYS_IGNORED = {".git", ".gradle", "__pycache__", ".idea"}
# Only ignored at the root: stale outputs of a previous build
_ROOT_OUTPUT_DIRS = {"build", "target"}


def _local_copy_ignore(root: Path):
    """Build a ``copytree`` ignore callable for a local source tree."""
    root = root.resolve()

    def _ignore(directory: str, names: list[str]) -> set[str]:
        ignored = {n for n in names if n in _ALWAYS_IGNORED}
        if Path(directory).resolve() == root:
            ignored |= {n for n in names if n in _ROOT_OUTPUT_DIRS}
        return ignored

    return _ignore


class SourceFetcher:
    """Acquires a locator (Git URL or local directory) into a workspace."""

    def __init__(
        self,
        workspace_manager: WorkspaceManager | None = None,
        git_operations: GitOperations | None = None,
        default_depth: int | None = None,
    ) -> None:
        """Initialize the source fetcher.

        Args:
            workspace_manager: Workspace manager instance.
            git_operations: Git operations instance.
            default_depth: Default clone depth for Git operations.
        """
        settings = get_settings()

        self.workspace_manager = workspace_manager or WorkspaceManager(
            WorkspaceConfig(
                base_dir=settings.workspace.base_dir,
                max_workspaces=settings.workspace.max_workspaces,
                auto_cleanup=settings.workspace.auto_cleanup,
                prefix=settings.workspace.prefix,
            )
        )
        self.git_operations = git_operations or GitOperations()
        self.default_depth = (
            default_depth if default_depth is not None else settings.git.default_depth
        )

    @property
    def max_workspaces(self) -> int:
        """Upper bound on concurrently held workspaces."""
        return self.workspace_manager.config.max_workspaces

    def fetch_from_git(
        self,
        repo_url: str,
        depth: int | None = None,
        hint: str | None = None,
    ) -> FetchResult:
        """Clone a Git repository into a fresh workspace.

        Args:
            repo_url: URL of the Git repository.
            depth: Clone depth (0 = full clone).
            hint: Readable fragment for the workspace name.

        Returns:
            FetchResult with source path or error.
        """
        clone_depth = depth if depth is not None else self.default_depth
        workspace_name: str | None = None

        try:
            workspace = self.workspace_manager.create(hint=hint)
            workspace_name = workspace.name

            repo = self.git_operations.clone(
                repo_url=repo_url,
                target_path=workspace.path,
                depth=clone_depth,
            )

            metadata = {
                "repo_url": repo_url,
                "current_ref": self.git_operations.get_current_ref(repo),
                "commit_info": self.git_operations.get_commit_info(repo),
                "clone_depth": clone_depth,
            }

            return FetchResult.success_result(
                source_path=workspace.path,
                workspace_name=workspace.name,
                source_type=AssetSource.GIT,
                metadata=metadata,
            )

        except Exception as e:
            if workspace_name:
                self.workspace_manager.release(workspace_name)

            return FetchResult.failure_result(
                error_message=f"Failed to fetch from Git: {repo_url} - {e}",
                source_type=AssetSource.GIT,
                metadata={"repo_url": repo_url, "error_type": type(e).__name__},
            )

    def fetch_from_local(
        self,
        local_path: Path,
        copy_to_workspace: bool = True,
        hint: str | None = None,
    ) -> FetchResult:
        """Use a local directory as the source of a job.

        The tree is copied into a workspace by default so a build never
        writes into the caller's checkout.

        Args:
            local_path: Path to the local source code.
            copy_to_workspace: Whether to copy files to a workspace.
            hint: Readable fragment for the workspace name.

        Returns:
            FetchResult with source path or error.
        """
        if not local_path.exists():
            return FetchResult.failure_result(
                error_message=f"Local path does not exist: {local_path}",
                source_type=AssetSource.LOCAL,
            )

        if not local_path.is_dir():
            return FetchResult.failure_result(
                error_message=f"Local path is not a directory: {local_path}",
                source_type=AssetSource.LOCAL,
            )

        workspace_name: str | None = None
        try:
            if copy_to_workspace:
                workspace = self.workspace_manager.create(hint=hint)
                workspace_name = workspace.name

                shutil.copytree(
                    local_path,
                    workspace.path,
                    dirs_exist_ok=True,
                    ignore=_local_copy_ignore(local_path),
                )
                source_path = workspace.path
            else:
                source_path = local_path

            metadata = {"original_path": str(local_path), "copied": copy_to_workspace}
            if self.git_operations.is_git_repo(local_path):
                repo = self.git_operations.open_repo(local_path)
                metadata["is_git_repo"] = True
                metadata["current_ref"] = self.git_operations.get_current_ref(repo)
            else:
                metadata["is_git_repo"] = False

            return FetchResult.success_result(
                source_path=source_path,
                workspace_name=workspace_name,
                source_type=AssetSource.LOCAL,
                metadata=metadata,
            )

        except Exception as e:
            if workspace_name:
                self.workspace_manager.release(workspace_name)

            return FetchResult.failure_result(
                error_message=f"Failed to fetch from local path: {local_path} - {e}",
                source_type=AssetSource.LOCAL,
                metadata={"local_path": str(local_path), "error_type": type(e).__name__},
            )

    def fetch(
        self,
        locator: str,
        depth: int | None = None,
        hint: str | None = None,
    ) -> FetchResult:
        """Auto-detect the locator type and fetch.

        Existing local directories are copied; anything else is cloned.

        Args:
            locator: Git URL or local path.
            depth: Clone depth (only for Git sources).
            hint: Readable fragment for the workspace name.

        Returns:
            FetchResult with source path or error.
        """
        source_path = Path(locator).expanduser()
        if source_path.is_dir():
            return self.fetch_from_local(local_path=source_path, hint=hint)

        return self.fetch_from_git(repo_url=locator, depth=depth, hint=hint)

    def release(self, workspace_name: str) -> None:
        """Hand a job's workspace back once the job is finished."""
        self.workspace_manager.release(workspace_name)
