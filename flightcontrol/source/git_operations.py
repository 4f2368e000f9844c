"""Git operations wrapper with optional retry support."""

import shutil
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from flightcontrol.core.config.settings import get_settings
from flightcontrol.core.exceptions.errors import GitError
from flightcontrol.core.logger.logger import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class GitOperations:
    """Handles Git clone operations for build jobs."""

    def __init__(
        self,
        retry_attempts: int | None = None,
        retry_delay: int | None = None,
    ) -> None:
        """Initialize Git operations.

        Args:
            retry_attempts: Clone attempts per repository (1 = no retry).
            retry_delay: Delay between attempts in seconds.
        """
        settings = get_settings()

        self.retry_attempts = retry_attempts or settings.git.retry_attempts
        self.retry_delay = retry_delay or settings.git.retry_delay

    def _retry_operation(
        self,
        operation: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Execute an operation, retrying up to ``retry_attempts`` times.

        Raises:
            GitError: If every attempt fails.
        """
        last_error: Exception | None = None

        for attempt in range(1, self.retry_attempts + 1):
            try:
                return operation(*args, **kwargs)
            except (GitCommandError, OSError) as e:
                last_error = e
                if self.retry_attempts > 1:
                    logger.warning(
                        f"Git operation failed (attempt {attempt}/{self.retry_attempts}): {e}"
                    )
                if attempt < self.retry_attempts:
                    logger.info(f"Retrying in {self.retry_delay} seconds...")
                    time.sleep(self.retry_delay)

        raise GitError(
            f"Git operation failed after {self.retry_attempts} attempt(s)",
            details={"last_error": str(last_error)},
        )

    @staticmethod
    def _reset_target(target_path: Path) -> None:
        """Empty a clone target left behind by a failed attempt."""
        if target_path.exists() and any(target_path.iterdir()):
            shutil.rmtree(target_path)
            target_path.mkdir(parents=True)

    def clone(
        self,
        repo_url: str,
        target_path: Path,
        depth: int = 0,
    ) -> Repo:
        """Clone a Git repository.

        Args:
            repo_url: URL of the repository to clone.
            target_path: Empty local directory to clone into.
            depth: Clone depth (0 = full clone).

        Returns:
            Cloned Repo object.

        Raises:
            GitError: If clone fails.
        """
        logger.debug(f"Cloning {repo_url} into {target_path}")

        clone_kwargs: dict[str, Any] = {
            "url": repo_url,
            "to_path": str(target_path),
        }
        if depth > 0:
            clone_kwargs["depth"] = depth

        def _clone() -> Repo:
            self._reset_target(target_path)
            return Repo.clone_from(**clone_kwargs)

        try:
            repo = self._retry_operation(_clone)
        except GitError as e:
            e.details["repo_url"] = repo_url
            raise

        logger.debug(f"Cloned {repo_url} to {target_path}")
        return repo

    def is_git_repo(self, path: Path) -> bool:
        """Check if a path is a Git repository."""
        try:
            Repo(path)
            return True
        except (InvalidGitRepositoryError, NoSuchPathError):
            return False

    def open_repo(self, path: Path) -> Repo:
        """Open an existing Git repository.

        Raises:
            GitError: If repository cannot be opened.
        """
        try:
            return Repo(path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitError(
                f"Not a valid Git repository: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

    def get_current_ref(self, repo: Repo) -> str:
        """Return the active branch name, or the short SHA when detached."""
        try:
            if repo.head.is_detached:
                return repo.head.commit.hexsha[:8]
            return repo.active_branch.name
        except TypeError:
            return repo.head.commit.hexsha[:8]

    def get_commit_info(self, repo: Repo) -> dict:
        """Get current commit information.

        Args:
            repo: Repo object.

        Returns:
            Dictionary with sha, short_sha, message, author and committed_date.
        """
        commit = repo.head.commit
        return {
            "sha": commit.hexsha,
            "short_sha": commit.hexsha[:8],
            "message": commit.message.strip() if commit.message else "",
            "author": str(commit.author) if commit.author else "",
            "committed_date": commit.committed_datetime.isoformat() if commit.committed_datetime else None,
        }
