"""Explicit configuration handed to the orchestrator and each of its jobs."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from flightcontrol.core.config.settings import Settings


class OrchestratorConfig(BaseModel):
    """Run-wide options of a build batch."""

    output_dir: Path = Field(description="Directory receiving collected artifacts")
    force_rebuild: bool = Field(
        default=False,
        description="Rebuild even when the artifact already exists",
    )
    max_concurrent: int = Field(
        default=4,
        ge=0,
        description="Maximum concurrent jobs (0 = one slot per repository)",
    )
    build_timeout: float | None = Field(
        default=None,
        ge=0,
        description="Build tool timeout in seconds (None or 0 = no timeout)",
    )
    artifact_extension: str = Field(default="jar")
    clone_depth: int | None = Field(
        default=None,
        ge=0,
        description="Clone depth override (None = fetcher default)",
    )

    model_config = {"frozen": True}

    @field_validator("artifact_extension", mode="before")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        v = str(v).strip().lstrip(".")
        if not v:
            raise ValueError("artifact_extension must not be empty")
        return v

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> "OrchestratorConfig":
        """Build a config from settings; ``None`` overrides are ignored."""
        values: dict[str, Any] = {
            "output_dir": settings.build.mod_folder,
            "force_rebuild": settings.build.recompile,
            "max_concurrent": settings.build.max_concurrent,
            "build_timeout": settings.build.timeout or None,
            "artifact_extension": settings.build.artifact_extension,
            "clone_depth": settings.git.default_depth,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
