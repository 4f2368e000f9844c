"""Exception definitions module."""

from flightcontrol.core.exceptions.errors import (
    ArtifactNotFoundError,
    BuildFailedError,
    ConfigurationError,
    FetchError,
    FileOperationError,
    FlightControlError,
    GitError,
    MalformedLocatorError,
    UnsupportedProjectError,
    WorkspaceError,
)

__all__ = [
    "FlightControlError",
    "MalformedLocatorError",
    "GitError",
    "WorkspaceError",
    "FetchError",
    "UnsupportedProjectError",
    "BuildFailedError",
    "ArtifactNotFoundError",
    "FileOperationError",
    "ConfigurationError",
]
