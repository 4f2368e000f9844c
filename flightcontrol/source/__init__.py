"""Source acquisition: cloning or copying repositories into job workspaces."""

from flightcontrol.source.fetcher import SourceFetcher
from flightcontrol.source.git_operations import GitOperations
from flightcontrol.source.workspace import WorkspaceManager

__all__ = [
    "SourceFetcher",
    "GitOperations",
    "WorkspaceManager",
]
