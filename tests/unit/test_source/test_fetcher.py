"""Tests for SourceFetcher."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from flightcontrol.models.fetcher import AssetSource, FetchResult
from flightcontrol.source.fetcher import SourceFetcher
from flightcontrol.source.git_operations import GitOperations
from flightcontrol.source.workspace import WorkspaceManager


def _fetcher(workspace_manager: WorkspaceManager) -> SourceFetcher:
    return SourceFetcher(
        workspace_manager=workspace_manager,
        git_operations=GitOperations(retry_attempts=1, retry_delay=1),
        default_depth=0,
    )


class TestFetchFromLocal:
    """Tests for local directory sources."""

    def test_fetch_from_local_directory(
        self, sample_git_repo: Path, workspace_manager: WorkspaceManager
    ) -> None:
        """Test that a local tree is copied into a workspace."""
        result = _fetcher(workspace_manager).fetch_from_local(
            local_path=sample_git_repo,
            hint="acme-widget",
        )

        assert result.success is True
        assert result.source_type == AssetSource.LOCAL
        assert result.workspace_name is not None
        assert result.workspace_name.startswith("test_acme-widget_")
        assert result.source_path is not None
        assert (result.source_path / "build.gradle").is_file()
        assert result.metadata["is_git_repo"] is True

    def test_copy_skips_vcs_and_build_output(
        self, gradle_project: Path, workspace_manager: WorkspaceManager
    ) -> None:
        """Test that .git and stale root build output are not copied."""
        (gradle_project / ".git").mkdir()
        (gradle_project / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        (gradle_project / "build" / "libs").mkdir(parents=True)
        (gradle_project / "build" / "libs" / "stale-all.jar").write_bytes(b"stale")
        nested_build = gradle_project / "src" / "build"
        nested_build.mkdir(parents=True)
        (nested_build / "Keep.java").write_text("class Keep {}\n")

        result = _fetcher(workspace_manager).fetch_from_local(local_path=gradle_project)

        assert result.success is True
        assert not (result.source_path / ".git").exists()
        assert not (result.source_path / "build").exists()
        assert (result.source_path / "src" / "build" / "Keep.java").is_file()
        assert (result.source_path / "gradlew").is_file()
        assert result.metadata["is_git_repo"] is False

    def test_fetch_from_local_nonexistent_path(self, workspace_manager: WorkspaceManager) -> None:
        """Test fetching from non-existent path."""
        result = _fetcher(workspace_manager).fetch_from_local(local_path=Path("/nonexistent/path"))

        assert result.success is False
        assert "does not exist" in result.error_message

    def test_fetch_from_local_file_path(
        self, temp_dir: Path, workspace_manager: WorkspaceManager
    ) -> None:
        """Test fetching from a file path (not directory) fails."""
        file_path = temp_dir / "test_file.txt"
        file_path.write_text("test content")

        result = _fetcher(workspace_manager).fetch_from_local(local_path=file_path)

        assert result.success is False
        assert "not a directory" in result.error_message

    def test_fetch_from_local_no_copy(
        self, sample_git_repo: Path, workspace_manager: WorkspaceManager
    ) -> None:
        """Test using a local tree in place."""
        result = _fetcher(workspace_manager).fetch_from_local(
            local_path=sample_git_repo,
            copy_to_workspace=False,
        )

        assert result.success is True
        assert result.source_path == sample_git_repo
        assert result.workspace_name is None
        assert workspace_manager.active_count == 0


class TestFetchFromGit:
    """Tests for Git sources."""

    def test_clone_local_repository(
        self, sample_git_repo: Path, workspace_manager: WorkspaceManager
    ) -> None:
        """Test cloning a repository into a workspace."""
        result = _fetcher(workspace_manager).fetch_from_git(
            repo_url=str(sample_git_repo),
            hint="acme-widget",
        )

        assert result.success is True
        assert result.source_type == AssetSource.GIT
        assert (result.source_path / "build.gradle").is_file()
        assert result.metadata["commit_info"]["message"] == "Initial commit"
        assert result.metadata["clone_depth"] == 0

    def test_clone_failure_releases_workspace(
        self, temp_dir: Path, workspace_manager: WorkspaceManager
    ) -> None:
        """Test that a failed clone returns a failure and frees its workspace."""
        result = _fetcher(workspace_manager).fetch_from_git(
            repo_url=str(temp_dir / "no-such-repo"),
        )

        assert result.success is False
        assert result.source_type == AssetSource.GIT
        assert "Failed to fetch from Git" in result.error_message
        assert result.metadata["error_type"] == "GitError"
        assert workspace_manager.active_count == 0


class TestFetch:
    """Tests for locator auto-detection."""

    def test_existing_directory_is_local(
        self, gradle_project: Path, workspace_manager: WorkspaceManager
    ) -> None:
        """Test that an existing directory is copied, not cloned."""
        result = _fetcher(workspace_manager).fetch(str(gradle_project))

        assert result.success is True
        assert result.source_type == AssetSource.LOCAL

    def test_url_is_cloned(self, workspace_manager: WorkspaceManager) -> None:
        """Test that anything else goes through Git with the given options."""
        fetcher = _fetcher(workspace_manager)
        expected = FetchResult.failure_result(error_message="stub", source_type=AssetSource.GIT)

        with patch.object(fetcher, "fetch_from_git", return_value=expected) as mock_git:
            result = fetcher.fetch("https://example.com/acme/widget.git", 1, "acme-widget")

        assert result is expected
        mock_git.assert_called_once_with(
            repo_url="https://example.com/acme/widget.git",
            depth=1,
            hint="acme-widget",
        )

    def test_default_depth_is_used(self, temp_dir: Path, workspace_manager: WorkspaceManager) -> None:
        """Test that a missing depth falls back to the fetcher default."""
        git_operations = MagicMock(spec=GitOperations)
        fetcher = SourceFetcher(
            workspace_manager=workspace_manager,
            git_operations=git_operations,
            default_depth=3,
        )

        fetcher.fetch_from_git("https://example.com/acme/widget.git")

        assert git_operations.clone.call_args.kwargs["depth"] == 3


class TestLifecycle:
    """Tests for workspace hand-back."""

    def test_max_workspaces(self, workspace_manager: WorkspaceManager) -> None:
        """Test that the workspace limit is exposed."""
        assert _fetcher(workspace_manager).max_workspaces == 5

    def test_release(self, sample_git_repo: Path, workspace_manager: WorkspaceManager) -> None:
        """Test releasing a fetched workspace."""
        fetcher = _fetcher(workspace_manager)
        result = fetcher.fetch_from_local(local_path=sample_git_repo)

        fetcher.release(result.workspace_name)

        assert not result.source_path.exists()
        assert workspace_manager.active_count == 0
