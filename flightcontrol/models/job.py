"""
Job Models

Data models for build jobs: artifact identity, per-job state machine,
terminal outcomes and the batch report.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from flightcontrol.core.exceptions.errors import BuildFailedError
from flightcontrol.models.build import BuildSystemKind


class ArtifactIdentity(BaseModel):
    """Canonical (owner, name) pair of a repository; the artifact cache key."""

    owner: str = Field(description="Lowercase repository owner")
    name: str = Field(description="Lowercase repository name without extension")

    model_config = {"frozen": True}

    @property
    def slug(self) -> str:
        """Return ``owner/name`` for log messages."""
        return f"{self.owner}/{self.name}"

    def filename(self, extension: str) -> str:
        """Return the artifact filename ``owner-name.ext``."""
        return f"{self.owner}-{self.name}.{extension}"

    def destination(self, output_dir: Path, extension: str) -> Path:
        """Return where the artifact for this identity is collected."""
        return Path(output_dir) / self.filename(extension)

    def __str__(self) -> str:
        return self.slug


class JobState(str, Enum):
    """Lifecycle of a repository job."""

    PENDING = "pending"
    FETCHING = "fetching"
    SKIPPED = "skipped"
    DETECTING = "detecting"
    BUILDING = "building"
    COLLECTING = "collecting"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({JobState.SKIPPED, JobState.DONE, JobState.FAILED})

_TRANSITIONS: dict[JobState, frozenset[JobState]] = {
    JobState.PENDING: frozenset({JobState.FETCHING, JobState.SKIPPED, JobState.FAILED}),
    JobState.FETCHING: frozenset({JobState.DETECTING, JobState.SKIPPED, JobState.FAILED}),
    JobState.DETECTING: frozenset({JobState.BUILDING, JobState.FAILED}),
    JobState.BUILDING: frozenset({JobState.COLLECTING, JobState.FAILED}),
    JobState.COLLECTING: frozenset({JobState.DONE, JobState.FAILED}),
}


class OutcomeStatus(str, Enum):
    """Terminal result kinds of a job."""

    SKIPPED = "skipped"
    COMPILED = "compiled"
    FAILED = "failed"


class BuildOutcome(BaseModel):
    """Terminal result of one job: skipped, compiled or failed."""

    status: OutcomeStatus
    artifact_path: Path | None = Field(
        default=None,
        description="Collected artifact (compiled outcomes only)",
    )
    error_type: str | None = Field(default=None, description="Exception class name")
    error_message: str | None = Field(default=None, description="Failure description")
    stdout: str | None = Field(default=None, description="Build tool stdout on build failure")
    stderr: str | None = Field(default=None, description="Build tool stderr on build failure")

    model_config = {"frozen": True}

    @classmethod
    def skipped(cls) -> "BuildOutcome":
        return cls(status=OutcomeStatus.SKIPPED)

    @classmethod
    def compiled(cls, artifact_path: Path) -> "BuildOutcome":
        return cls(status=OutcomeStatus.COMPILED, artifact_path=artifact_path)

    @classmethod
    def failed(cls, error: BaseException) -> "BuildOutcome":
        """Create a failed outcome from the exception that ended the job.

        Build failures keep the captured tool output.
        """
        stdout = stderr = None
        if isinstance(error, BuildFailedError):
            stdout, stderr = error.stdout, error.stderr
        return cls(
            status=OutcomeStatus.FAILED,
            error_type=type(error).__name__,
            error_message=getattr(error, "message", None) or str(error),
            stdout=stdout,
            stderr=stderr,
        )


class RepositoryJob(BaseModel):
    """One unit of work: a locator driven through fetch, detect, build and collect."""

    id: str = Field(default_factory=lambda: f"job_{uuid.uuid4().hex[:8]}")
    locator: str = Field(description="Source locator, e.g. a VCS URL")
    identity: ArtifactIdentity | None = Field(default=None)
    destination: Path | None = Field(default=None, description="Output artifact path")
    work_dir: Path | None = Field(default=None, description="Populated after fetch")
    workspace_name: str | None = Field(default=None)
    build_system: BuildSystemKind | None = Field(default=None)
    state: JobState = Field(default=JobState.PENDING)
    outcome: BuildOutcome | None = Field(default=None)
    started_at: datetime | None = Field(default=None)
    completed_at: datetime | None = Field(default=None)

    model_config = {
        "arbitrary_types_allowed": True,
    }

    @property
    def label(self) -> str:
        """``owner/name`` once named, otherwise the raw locator."""
        return self.identity.slug if self.identity else self.locator

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def _transition(self, state: JobState) -> None:
        allowed = _TRANSITIONS.get(self.state, frozenset())
        if state not in allowed:
            raise ValueError(
                f"Invalid job transition {self.state.value} -> {state.value} for {self.label}"
            )
        if self.started_at is None:
            self.started_at = datetime.now(UTC)
        self.state = state
        if state in TERMINAL_STATES:
            self.completed_at = datetime.now(UTC)

    def mark_fetching(self) -> None:
        self._transition(JobState.FETCHING)

    def mark_skipped(self) -> None:
        self._transition(JobState.SKIPPED)
        self.outcome = BuildOutcome.skipped()

    def mark_detecting(self, work_dir: Path, workspace_name: str | None = None) -> None:
        self._transition(JobState.DETECTING)
        self.work_dir = work_dir
        self.workspace_name = workspace_name

    def mark_building(self, build_system: BuildSystemKind) -> None:
        self._transition(JobState.BUILDING)
        self.build_system = build_system

    def mark_collecting(self) -> None:
        self._transition(JobState.COLLECTING)

    def mark_done(self, artifact_path: Path) -> None:
        self._transition(JobState.DONE)
        self.outcome = BuildOutcome.compiled(artifact_path)

    def mark_failed(self, error: BaseException) -> None:
        self._transition(JobState.FAILED)
        self.outcome = BuildOutcome.failed(error)


class BatchReport(BaseModel):
    """Per-job outcomes of one orchestrator run."""

    jobs: list[RepositoryJob] = Field(default_factory=list)
    duration_seconds: float = Field(default=0.0)
    collisions: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Destination paths claimed by more than one locator",
    )

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for job in self.jobs if job.outcome and job.outcome.status == status)

    @property
    def compiled_count(self) -> int:
        return self._count(OutcomeStatus.COMPILED)

    @property
    def skipped_count(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failed_count(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    @property
    def has_failures(self) -> bool:
        return self.failed_count > 0

    def get_job(self, locator: str) -> RepositoryJob | None:
        """Return the first job created for ``locator``."""
        for job in self.jobs:
            if job.locator == locator:
                return job
        return None
