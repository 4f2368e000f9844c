"""
Build Orchestrator

Drives every repository job through fetch, detect, build and collect,
running the jobs concurrently and isolating their failures.
"""

import asyncio
import time
from collections import defaultdict
from collections.abc import Callable, Iterable
from typing import Any

from flightcontrol.build.cache import should_skip
from flightcontrol.build.detector import BuildSystemDetector
from flightcontrol.build.naming import name as name_locator
from flightcontrol.build.strategies import BuildStrategy, get_strategy
from flightcontrol.core.exceptions.errors import (
    BuildFailedError,
    FetchError,
    FlightControlError,
    MalformedLocatorError,
    UnsupportedProjectError,
)
from flightcontrol.core.logger.logger import get_logger
from flightcontrol.models.build import BuildSystemKind
from flightcontrol.models.job import BatchReport, RepositoryJob
from flightcontrol.orchestrator.config import OrchestratorConfig
from flightcontrol.source.fetcher import SourceFetcher


def normalize_output(text: str) -> str:
    """Turn CRLF line endings and literal ``\\r\\n`` escapes into plain newlines."""
    return text.replace("\r\n", "\n").replace("\\r\\n", "\n")


class BuildOrchestrator:
    """
    Runs a flat batch of independent repository jobs.

    Per job: name -> skip check -> fetch -> detect -> build -> locate ->
    copy. Every error is caught at the job boundary and recorded on the
    job; nothing a job raises reaches its siblings or the batch.
    """

    def __init__(
        self,
        config: OrchestratorConfig,
        fetcher: SourceFetcher | None = None,
        detector: BuildSystemDetector | None = None,
        strategy_factory: Callable[..., BuildStrategy] = get_strategy,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Run-wide options.
            fetcher: Source acquisition collaborator.
            detector: Build-system detector.
            strategy_factory: Maps a BuildSystemKind (plus keyword options)
                to a strategy instance.
        """
        self.logger = get_logger(__name__)
        self.config = config
        self.fetcher = fetcher or SourceFetcher(default_depth=config.clone_depth)
        self.detector = detector or BuildSystemDetector()
        self.strategy_factory = strategy_factory

    def create_jobs(self, locators: Iterable[str]) -> list[RepositoryJob]:
        """Create one job per locator and derive its identity and destination.

        Locators that cannot be named fail here, as their own jobs.
        """
        jobs: list[RepositoryJob] = []
        for locator in locators:
            job = RepositoryJob(locator=locator)
            try:
                job.identity = name_locator(locator)
                job.destination = job.identity.destination(
                    self.config.output_dir, self.config.artifact_extension
                )
            except MalformedLocatorError as e:
                self._fail(job, e)
            jobs.append(job)
        return jobs

    def find_collisions(self, jobs: list[RepositoryJob]) -> dict[str, list[str]]:
        """Return destinations claimed by more than one locator."""
        claims: dict[str, list[str]] = defaultdict(list)
        for job in jobs:
            if job.destination is not None:
                claims[str(job.destination)].append(job.locator)

        collisions = {dest: locs for dest, locs in claims.items() if len(locs) > 1}
        for dest, locs in collisions.items():
            self.logger.warning(
                f"{len(locs)} repositories resolve to {dest}; the last to finish wins: "
                + ", ".join(locs)
            )
        return collisions

    def _concurrency_limit(self, job_count: int) -> int:
        limit = self.config.max_concurrent or job_count
        # Each running job holds one workspace
        max_workspaces = getattr(self.fetcher, "max_workspaces", None)
        if isinstance(max_workspaces, int) and max_workspaces < limit:
            self.logger.debug(f"Limiting concurrency to {max_workspaces} workspaces")
            limit = max_workspaces
        return max(1, limit)

    async def run(self, locators: Iterable[str]) -> BatchReport:
        """
        Build every locator and wait for all jobs to finish.

        Args:
            locators: Repository locators, processed independently.

        Returns:
            BatchReport with one terminal job per locator.
        """
        start_time = time.monotonic()
        self.logger.info("Flight controller preparing for takeoff")

        jobs = self.create_jobs(locators)
        collisions = self.find_collisions(jobs)
        pending = [job for job in jobs if not job.is_terminal]

        if pending:
            semaphore = asyncio.Semaphore(self._concurrency_limit(len(pending)))
            results = await asyncio.gather(
                *(self._run_with_semaphore(job, semaphore) for job in pending),
                return_exceptions=True,
            )
            for job, result in zip(pending, results):
                if isinstance(result, BaseException):
                    self._fail(job, result)

        report = BatchReport(
            jobs=jobs,
            duration_seconds=time.monotonic() - start_time,
            collisions=collisions,
        )
        self.logger.info(
            f"Done. Took {report.duration_seconds:.2f} seconds "
            f"({report.compiled_count} compiled, {report.skipped_count} skipped, "
            f"{report.failed_count} failed)"
        )
        self.logger.info("Ready for takeoff!")
        return report

    def run_sync(self, locators: Iterable[str]) -> BatchReport:
        """Blocking wrapper around ``run``."""
        return asyncio.run(self.run(locators))

    async def _run_with_semaphore(
        self,
        job: RepositoryJob,
        semaphore: asyncio.Semaphore,
    ) -> RepositoryJob:
        async with semaphore:
            return await self.run_job(job)

    async def run_job(self, job: RepositoryJob) -> RepositoryJob:
        """
        Drive one named job to a terminal state. Never raises.

        Args:
            job: A job created by ``create_jobs``.

        Returns:
            The same job, now skipped, done or failed.
        """
        try:
            await self._execute(job)
        except FlightControlError as e:
            self._fail(job, e)
        except Exception as e:
            self.logger.error(f"Unexpected error for module '{job.label}': {e}", exc_info=True)
            self._fail(job, e)
        return job

    def _fail(self, job: RepositoryJob, error: BaseException) -> None:
        if job.is_terminal:
            # Raised after the job already finished, e.g. while releasing its workspace
            self.logger.warning(f"Error after module '{job.label}' finished: {error}")
            return
        job.mark_failed(error)
        self._log_failure(job, error)

    async def _execute(self, job: RepositoryJob) -> None:
        if job.identity is None or job.destination is None:
            raise MalformedLocatorError("Job has no artifact identity", locator=job.locator)

        if should_skip(job.destination, self.config.force_rebuild):
            job.mark_skipped()
            self.logger.info(f"Module '{job.label}' exists, skipping")
            return

        job.mark_fetching()
        self.logger.info(f"Cloning repository '{job.label}'")
        hint = f"{job.identity.owner}-{job.identity.name}"
        fetch_result = await asyncio.to_thread(
            self.fetcher.fetch, job.locator, self.config.clone_depth, hint
        )
        if not fetch_result.success or fetch_result.source_path is None:
            raise FetchError(
                fetch_result.error_message or f"Failed to fetch {job.locator}",
                source_type=fetch_result.source_type.value if fetch_result.source_type else None,
                source_path=job.locator,
            )

        try:
            work_dir = fetch_result.source_path
            job.mark_detecting(work_dir, fetch_result.workspace_name)

            kind = await asyncio.to_thread(self.detector.detect, work_dir)
            if kind is None:
                raise UnsupportedProjectError(work_dir=str(work_dir))

            strategy = self._create_strategy(kind)
            job.mark_building(kind)
            self.logger.info(f"Compiling module '{job.label}' with {kind.value}")
            build_result = await strategy.build(work_dir)
            self.logger.debug(f"Module '{job.label}' built: {build_result.to_dict()}")

            job.mark_collecting()
            artifact = await asyncio.to_thread(strategy.locate_artifact, work_dir)
            self.logger.debug(f"Copying {artifact} to {job.destination} for '{job.label}'")
            await asyncio.to_thread(strategy.copy, artifact, job.destination)

            job.mark_done(job.destination)
            self.logger.info(
                f"Module '{job.label}' compiled in {build_result.duration_seconds:.1f}s "
                f"-> {job.destination}"
            )
        finally:
            if fetch_result.workspace_name:
                await asyncio.to_thread(self.fetcher.release, fetch_result.workspace_name)

    def _create_strategy(self, kind: BuildSystemKind) -> BuildStrategy:
        options: dict[str, Any] = {}
        if self.config.build_timeout:
            options["timeout"] = self.config.build_timeout
        return self.strategy_factory(kind, **options)

    def _log_failure(self, job: RepositoryJob, error: BaseException) -> None:
        if isinstance(error, MalformedLocatorError):
            self.logger.warning(f"Ignoring malformed locator '{job.locator}': {error}")
        elif isinstance(error, FetchError):
            self.logger.warning(f"Failed to clone repository '{job.label}' at '{job.locator}': {error}")
        elif isinstance(error, BuildFailedError):
            self.logger.warning(
                f"Failed to compile module '{job.label}' ({error.message}):\n"
                f"\tstdout: {normalize_output(error.stdout)}\n"
                f"\tstderr: {normalize_output(error.stderr)}"
            )
        else:
            self.logger.warning(f"Failed to compile module '{job.label}': {error}")
