"""
Base Strategy - Abstract base class for build-system strategies.

Every supported build system (Gradle, Maven) inherits from this class and
describes how to invoke its tool and where its packaged artifact lands.
"""

import asyncio
import contextlib
import os
import shutil
import time
from abc import ABC, abstractmethod
from pathlib import Path

from flightcontrol.core.exceptions.errors import (
    ArtifactNotFoundError,
    BuildFailedError,
    FileOperationError,
)
from flightcontrol.core.logger.logger import get_logger
from flightcontrol.models.build import BuildResult, BuildSystemKind

logger = get_logger(__name__)

# Owner and group may execute the wrapper script
WRAPPER_MODE = 0o770


class BuildStrategy(ABC):
    """
    Abstract base class for build-system strategies.

    Subclasses set the class attributes and implement ``command``; the
    generic build/locate/copy behaviour lives here.
    """

    # Strategy metadata (override in subclasses)
    kind: BuildSystemKind
    marker_files: tuple[str, ...] = ()
    output_dir: str = "build"
    artifact_suffix: str = ".jar"
    env_vars: dict[str, str] = {}
    wrapper_script: str | None = None
    windows_wrapper_script: str | None = None

    def __init__(
        self,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ):
        """
        Initialize the strategy.

        Args:
            timeout: Maximum build duration in seconds (None = wait forever).
            env: Extra environment variables for the build tool.
        """
        self.timeout = timeout or None
        self.extra_env = env or {}

    @property
    def name(self) -> str:
        return self.kind.value

    @classmethod
    def matches(cls, file_names: set[str]) -> bool:
        """Check whether any marker file is among a directory's file names."""
        return any(marker in file_names for marker in cls.marker_files)

    @abstractmethod
    def command(self, work_dir: Path) -> list[str]:
        """
        Build the argv that invokes the build tool.

        Args:
            work_dir: Repository working directory.

        Returns:
            Command and arguments.
        """

    def wrapper_path(self, work_dir: Path) -> Path | None:
        """Return where the project's bundled wrapper script would live, if the tool has one."""
        script = self.windows_wrapper_script if os.name == "nt" else self.wrapper_script
        return work_dir / script if script else None

    def launcher(self, work_dir: Path, tool: str) -> str:
        """Prefer the bundled wrapper, falling back to ``tool`` on PATH."""
        wrapper = self.wrapper_path(work_dir)
        if wrapper is not None and wrapper.is_file():
            return str(wrapper.resolve())
        fallback = shutil.which(tool) or tool
        logger.debug(f"No {self.name} wrapper in {work_dir}, falling back to {fallback}")
        return fallback

    def prepare(self, work_dir: Path) -> None:
        """Make the wrapper script executable; checkouts may drop the mode bit."""
        wrapper = self.wrapper_path(work_dir)
        if wrapper is None or os.name == "nt" or not wrapper.is_file():
            return
        logger.debug(f"Applying {oct(WRAPPER_MODE)} permissions to {wrapper}")
        try:
            os.chmod(wrapper, WRAPPER_MODE)
        except OSError as e:
            raise FileOperationError(
                f"Failed to make {self.name} wrapper executable: {e}",
                path=str(wrapper),
            ) from e

    def _environment(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self.env_vars)
        env.update(self.extra_env)
        return env

    async def build(self, work_dir: Path) -> BuildResult:
        """
        Run the build tool in ``work_dir`` and wait for it to finish.

        Output is captured in full rather than streamed.

        Args:
            work_dir: Repository working directory.

        Returns:
            BuildResult for a zero exit code.

        Raises:
            FileOperationError: If preparation fails.
            BuildFailedError: On a non-zero exit, a missing exit code, a
                launch failure or a timeout.
        """
        self.prepare(work_dir)
        cmd = self.command(work_dir)
        logger.debug(f"Running {' '.join(cmd)} in {work_dir}")

        start_time = time.time()
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=work_dir,
                env=self._environment(),
            )
        except OSError as e:
            raise BuildFailedError(
                f"Failed to launch {self.name} build tool: {e}",
                stderr=str(e),
                details={"command": cmd},
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise BuildFailedError(
                f"Build timed out after {self.timeout} seconds",
                stderr=f"Command timed out after {self.timeout} seconds",
                details={"command": cmd},
            )

        stdout_str = stdout.decode("utf-8", errors="replace")
        stderr_str = stderr.decode("utf-8", errors="replace")
        return_code = process.returncode

        if return_code != 0:
            raise BuildFailedError(
                f"Failed to compile module with {self.name} (exit code {return_code})",
                stdout=stdout_str,
                stderr=stderr_str,
                return_code=return_code,
            )

        return BuildResult(
            command=cmd,
            return_code=return_code,
            stdout=stdout_str,
            stderr=stderr_str,
            duration_seconds=time.time() - start_time,
        )

    def locate_artifact(self, work_dir: Path) -> Path:
        """
        Find the packaged artifact produced by a successful build.

        Only the immediate entries of the output directory are considered.
        When several files match, the first by sorted name wins and the
        others are logged.

        Args:
            work_dir: Repository working directory.

        Returns:
            Path to the artifact.

        Raises:
            ArtifactNotFoundError: If no file matches.
        """
        search_dir = work_dir / self.output_dir
        pattern = f"*{self.artifact_suffix}"

        if not search_dir.is_dir():
            raise ArtifactNotFoundError(
                f"Build output directory does not exist: {search_dir}",
                search_dir=str(search_dir),
                pattern=pattern,
            )

        candidates = sorted(
            (p for p in search_dir.iterdir() if p.is_file() and p.name.endswith(self.artifact_suffix)),
            key=lambda p: p.name,
        )
        if not candidates:
            raise ArtifactNotFoundError(
                f"No artifact matching '{pattern}' in {search_dir}",
                search_dir=str(search_dir),
                pattern=pattern,
            )

        if len(candidates) > 1:
            ignored = ", ".join(p.name for p in candidates[1:])
            logger.warning(
                f"Multiple artifacts match '{pattern}' in {search_dir}; "
                f"using {candidates[0].name}, ignoring {ignored}"
            )

        return candidates[0]

    def copy(self, artifact_path: Path, destination: Path) -> None:
        """
        Copy an artifact to its destination, overwriting any existing file.

        Bytes go to a sibling ``.part`` file first and are renamed into
        place, so readers never observe a half-written artifact.

        Raises:
            FileOperationError: If the copy fails.
        """
        partial = destination.with_name(destination.name + ".part")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(artifact_path, partial)
            os.replace(partial, destination)
        except OSError as e:
            with contextlib.suppress(OSError):
                partial.unlink(missing_ok=True)
            raise FileOperationError(
                f"Failed to copy artifact to {destination}: {e}",
                path=str(destination),
                details={"artifact": str(artifact_path)},
            ) from e
