"""Workspace-related data models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class WorkspaceStatus(str, Enum):
    """Lifecycle of a job's workspace."""

    ACTIVE = "active"
    CLEANUP = "cleanup"
    DISPOSED = "disposed"


class WorkspaceConfig(BaseModel):
    """Configuration for workspace management."""

    base_dir: Path | None = Field(
        default=None,
        description="Base directory for workspaces (None = system temp)",
    )
    max_workspaces: int = Field(
        default=32,
        ge=1,
        le=256,
        description="Maximum number of workspaces held at once",
    )
    auto_cleanup: bool = Field(
        default=True,
        description="Remove workspace directories once they are released",
    )
    prefix: str = Field(
        default="flightcontrol_",
        description="Prefix for workspace directory names",
    )


class WorkspaceInfo(BaseModel):
    """A private working directory owned by one build job."""

    name: str
    path: Path
    status: WorkspaceStatus = WorkspaceStatus.ACTIVE

    def mark_cleanup(self) -> None:
        self.status = WorkspaceStatus.CLEANUP

    def mark_disposed(self) -> None:
        self.status = WorkspaceStatus.DISPOSED
