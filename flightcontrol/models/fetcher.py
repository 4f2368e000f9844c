"""Source acquisition data models."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class AssetSource(str, Enum):
    """Where a repository was acquired from."""

    GIT = "git"
    LOCAL = "local"


class FetchResult(BaseModel):
    """Result of acquiring a repository into a working directory."""

    success: bool = Field(description="Whether the fetch operation succeeded")
    source_path: Path | None = Field(
        default=None,
        description="Working directory holding the fetched sources",
    )
    workspace_name: str | None = Field(
        default=None,
        description="Name of the workspace containing the sources",
    )
    source_type: AssetSource | None = Field(
        default=None,
        description="Type of source that was fetched",
    )
    error_message: str | None = Field(
        default=None,
        description="Error message if fetch failed",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata about the fetch",
    )

    model_config = {
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def success_result(
        cls,
        source_path: Path,
        workspace_name: str | None,
        source_type: AssetSource,
        metadata: dict[str, Any] | None = None,
    ) -> "FetchResult":
        """Create a successful fetch result."""
        return cls(
            success=True,
            source_path=source_path,
            workspace_name=workspace_name,
            source_type=source_type,
            metadata=metadata or {},
        )

    @classmethod
    def failure_result(
        cls,
        error_message: str,
        source_type: AssetSource | None = None,
        workspace_name: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "FetchResult":
        """Create a failed fetch result.

        Args:
            error_message: Error description.
            source_type: Type of source (if known).
            workspace_name: Workspace left behind by the attempt, if any.
            metadata: Additional metadata.

        Returns:
            Failed FetchResult instance.
        """
        return cls(
            success=False,
            error_message=error_message,
            source_type=source_type,
            workspace_name=workspace_name,
            metadata=metadata or {},
        )
