"""Custom exception definitions for flightcontrol."""

from typing import Any


class FlightControlError(Exception):
    """Base exception for all flightcontrol errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class MalformedLocatorError(FlightControlError):
    """Raised when a locator cannot yield an artifact identity."""

    def __init__(
        self,
        message: str,
        locator: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize malformed locator error.

        Args:
            message: Error message.
            locator: The offending locator.
            details: Additional error details.
        """
        details = details or {}
        if locator is not None:
            details["locator"] = locator
        super().__init__(message, details)


class GitError(FlightControlError):
    """Exception raised for Git operation errors."""

    def __init__(
        self,
        message: str,
        repo_url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize Git error.

        Args:
            message: Error message.
            repo_url: Repository URL that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if repo_url:
            details["repo_url"] = repo_url
        super().__init__(message, details)


class WorkspaceError(FlightControlError):
    """Exception raised for workspace management errors."""

    def __init__(
        self,
        message: str,
        workspace_name: str | None = None,
        workspace_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize workspace error.

        Args:
            message: Error message.
            workspace_name: Name of the workspace.
            workspace_path: Path to the workspace.
            details: Additional error details.
        """
        details = details or {}
        if workspace_name:
            details["workspace_name"] = workspace_name
        if workspace_path:
            details["workspace_path"] = workspace_path
        super().__init__(message, details)


class FetchError(FlightControlError):
    """Exception raised when a repository cannot be acquired."""

    def __init__(
        self,
        message: str,
        source_type: str | None = None,
        source_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize fetch error.

        Args:
            message: Error message.
            source_type: Type of source (git/local).
            source_path: Path or URL of the source.
            details: Additional error details.
        """
        details = details or {}
        if source_type:
            details["source_type"] = source_type
        if source_path:
            details["source_path"] = source_path
        super().__init__(message, details)


class UnsupportedProjectError(FlightControlError):
    """Raised when no build strategy recognises a working directory."""

    def __init__(
        self,
        message: str = "Unable to build module as the project type is not supported",
        work_dir: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if work_dir:
            details["work_dir"] = work_dir
        super().__init__(message, details)


class BuildFailedError(FlightControlError):
    """Raised when the external build tool exits unsuccessfully.

    The full captured output is kept on the instance rather than in
    ``details`` so that ``str()`` stays readable.
    """

    def __init__(
        self,
        message: str,
        stdout: str = "",
        stderr: str = "",
        return_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize build failure.

        Args:
            message: Error message.
            stdout: Captured standard output of the build tool.
            stderr: Captured standard error of the build tool.
            return_code: Exit code, or None if the process had none.
            details: Additional error details.
        """
        details = details or {}
        details["return_code"] = return_code
        super().__init__(message, details)
        self.stdout = stdout
        self.stderr = stderr
        self.return_code = return_code


class ArtifactNotFoundError(FlightControlError):
    """Raised when a build succeeded but produced no matching artifact."""

    def __init__(
        self,
        message: str,
        search_dir: str | None = None,
        pattern: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if search_dir:
            details["search_dir"] = search_dir
        if pattern:
            details["pattern"] = pattern
        super().__init__(message, details)


class FileOperationError(FlightControlError):
    """Raised for filesystem failures while preparing or collecting a build."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class ConfigurationError(FlightControlError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)
