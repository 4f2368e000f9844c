"""Data models module."""

from flightcontrol.models.build import BuildResult, BuildSystemKind
from flightcontrol.models.fetcher import AssetSource, FetchResult
from flightcontrol.models.job import (
    ArtifactIdentity,
    BatchReport,
    BuildOutcome,
    JobState,
    OutcomeStatus,
    RepositoryJob,
)
from flightcontrol.models.workspace import WorkspaceConfig, WorkspaceInfo, WorkspaceStatus

__all__ = [
    "ArtifactIdentity",
    "BatchReport",
    "BuildOutcome",
    "BuildResult",
    "BuildSystemKind",
    "JobState",
    "OutcomeStatus",
    "RepositoryJob",
    "AssetSource",
    "FetchResult",
    "WorkspaceConfig",
    "WorkspaceInfo",
    "WorkspaceStatus",
]
