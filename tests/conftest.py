"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Generator

import pytest
from git import Repo

from flightcontrol.models.fetcher import AssetSource, FetchResult
from flightcontrol.models.workspace import WorkspaceConfig
from flightcontrol.source.workspace import WorkspaceManager

# Stand-in Gradle wrappers: the real tool is never needed by the suite
GRADLE_SUCCESS_SCRIPT = """#!/bin/sh
mkdir -p build/libs
echo "fake jar $$" > build/libs/widget-all.jar
echo "BUILD SUCCESSFUL"
"""

GRADLE_FAILURE_SCRIPT = """#!/bin/sh
echo foo
echo bar >&2
exit 1
"""

GRADLE_NO_ARTIFACT_SCRIPT = """#!/bin/sh
mkdir -p build/libs
echo "thin" > build/libs/widget.jar
echo "BUILD SUCCESSFUL"
"""


class FakeFetcher:
    """Stands in for SourceFetcher.

    Locators registered in ``sources`` are copied from their template
    directory into a fresh workspace; anything else fails to fetch.
    """

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir
        self.sources: dict[str, Path] = {}
        self.fetched: list[str] = []
        self.released: list[str] = []
        self._lock = threading.Lock()
        self._counter = 0

    def fetch(
        self,
        locator: str,
        depth: int | None = None,
        hint: str | None = None,
    ) -> FetchResult:
        with self._lock:
            self.fetched.append(locator)
            self._counter += 1
            workspace_name = f"fake_{self._counter}"

        template = self.sources.get(locator)
        if template is None:
            return FetchResult.failure_result(
                error_message=f"Repository not found: {locator}",
                source_type=AssetSource.GIT,
            )

        target = self.base_dir / workspace_name
        shutil.copytree(template, target)
        return FetchResult.success_result(
            source_path=target,
            workspace_name=workspace_name,
            source_type=AssetSource.GIT,
        )

    def release(self, workspace_name: str) -> None:
        with self._lock:
            self.released.append(workspace_name)
        shutil.rmtree(self.base_dir / workspace_name, ignore_errors=True)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def workspace_config(temp_dir: Path) -> WorkspaceConfig:
    """Create a workspace configuration for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        WorkspaceConfig instance.
    """
    return WorkspaceConfig(
        base_dir=temp_dir / "workspaces",
        max_workspaces=5,
        auto_cleanup=True,
        prefix="test_",
    )


@pytest.fixture
def workspace_manager(workspace_config: WorkspaceConfig) -> WorkspaceManager:
    """Create a workspace manager for testing."""
    return WorkspaceManager(config=workspace_config)


@pytest.fixture
def mod_folder(temp_dir: Path) -> Path:
    """Output directory for collected artifacts (not created up front)."""
    return temp_dir / "modules"


@pytest.fixture
def gradle_project_factory(temp_dir: Path) -> Callable[..., Path]:
    """Return a factory writing a Gradle project with a scripted wrapper.

    Returns:
        Callable ``(name, script=GRADLE_SUCCESS_SCRIPT) -> Path``.
    """

    def _create(name: str, script: str = GRADLE_SUCCESS_SCRIPT) -> Path:
        project = temp_dir / "projects" / name
        project.mkdir(parents=True)
        (project / "build.gradle").write_text("plugins { id 'java' }\n")
        (project / "gradlew").write_text(script)
        return project

    return _create


@pytest.fixture
def gradle_project(gradle_project_factory: Callable[..., Path]) -> Path:
    """A Gradle project whose wrapper produces ``build/libs/widget-all.jar``."""
    return gradle_project_factory("widget")


@pytest.fixture
def failing_gradle_project(gradle_project_factory: Callable[..., Path]) -> Path:
    """A Gradle project whose wrapper prints foo/bar and exits 1."""
    return gradle_project_factory("broken", GRADLE_FAILURE_SCRIPT)


@pytest.fixture
def thin_gradle_project(gradle_project_factory: Callable[..., Path]) -> Path:
    """A Gradle project that builds but never produces a fat jar."""
    return gradle_project_factory("thin", GRADLE_NO_ARTIFACT_SCRIPT)


@pytest.fixture
def fake_fetcher(temp_dir: Path) -> FakeFetcher:
    """A FakeFetcher whose workspaces live under the temp directory."""
    base_dir = temp_dir / "fake_workspaces"
    base_dir.mkdir()
    return FakeFetcher(base_dir)


@pytest.fixture
def sample_git_repo(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a Git repository holding a minimal Gradle project.

    Yields:
        Path to the sample Git repository.
    """
    repo_path = temp_dir / "acme" / "widget"
    repo_path.mkdir(parents=True)

    repo = Repo.init(repo_path)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")

    (repo_path / "build.gradle").write_text("plugins { id 'java' }\n")
    (repo_path / "settings.gradle").write_text("rootProject.name = 'widget'\n")
    src_dir = repo_path / "src" / "main" / "java"
    src_dir.mkdir(parents=True)
    (src_dir / "Widget.java").write_text("public class Widget {}\n")

    repo.index.add(["build.gradle", "settings.gradle", "src/main/java/Widget.java"])
    repo.index.commit("Initial commit")

    yield repo_path

    # Cleanup is handled by temp_dir fixture


@pytest.fixture
def empty_temp_dir(temp_dir: Path) -> Path:
    """Create an empty directory for testing."""
    empty_dir = temp_dir / "empty"
    empty_dir.mkdir()
    return empty_dir
