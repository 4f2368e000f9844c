"""Main CLI entry point for flightcontrol."""

from pathlib import Path

import click

from flightcontrol.build.detector import BuildSystemDetector
from flightcontrol.cli.display import (
    show_banner,
    show_batch_report,
    show_detection,
    show_error,
    show_info,
)
from flightcontrol.core.config.settings import Settings
from flightcontrol.core.exceptions.errors import ConfigurationError
from flightcontrol.core.logger.logger import setup_logging
from flightcontrol.models.workspace import WorkspaceConfig
from flightcontrol.orchestrator import BuildOrchestrator, OrchestratorConfig
from flightcontrol.source import GitOperations, SourceFetcher, WorkspaceManager


def build_fetcher(settings: Settings) -> SourceFetcher:
    """Create a source fetcher wired to the loaded settings."""
    workspace_manager = WorkspaceManager(
        WorkspaceConfig(
            base_dir=settings.workspace.base_dir,
            max_workspaces=settings.workspace.max_workspaces,
            auto_cleanup=settings.workspace.auto_cleanup,
            prefix=settings.workspace.prefix,
        )
    )
    git_operations = GitOperations(
        retry_attempts=settings.git.retry_attempts,
        retry_delay=settings.git.retry_delay,
    )
    return SourceFetcher(
        workspace_manager=workspace_manager,
        git_operations=git_operations,
        default_depth=settings.git.default_depth,
    )


def _load_settings(config_path: str | None, log_level: str | None) -> Settings:
    settings = Settings.load(Path(config_path) if config_path else None)
    if log_level:
        settings.logging.level = log_level.upper()
    return settings


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str | None,
    log_level: str | None,
    version: bool,
) -> None:
    """flightcontrol - Fetch, build and collect Gradle/Maven repositories.

    Every repository is built independently; one failing build never
    stops the others.
    """
    if version:
        from flightcontrol import __version__

        click.echo(f"flightcontrol version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    try:
        settings = _load_settings(config_path, log_level)
    except ConfigurationError as e:
        show_error("Configuration Error", str(e))
        ctx.exit(2)

    setup_logging(settings.logging)
    ctx.obj = settings


@main.command()
@click.option(
    "--repo",
    "-r",
    "repos",
    multiple=True,
    help="Repository locator (Git URL or local directory); repeatable",
)
@click.option("--recompile", is_flag=True, help="Rebuild even if the artifact exists")
@click.option(
    "--mod-folder",
    "-m",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory receiving the built artifacts",
)
@click.option("--jobs", "-j", type=click.IntRange(min=0), help="Maximum concurrent builds (0 = unbounded)")
@click.option("--timeout", type=click.IntRange(min=0), help="Build timeout in seconds (0 = none)")
@click.option("--depth", "-d", type=click.IntRange(min=0), help="Clone depth (0 for full)")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any build failed")
@click.pass_context
def build(
    ctx: click.Context,
    repos: tuple[str, ...],
    recompile: bool,
    mod_folder: Path | None,
    jobs: int | None,
    timeout: int | None,
    depth: int | None,
    strict: bool,
) -> None:
    """Build repositories and collect their artifacts.

    Each artifact is copied to MOD_FOLDER/owner-name.jar. Existing
    artifacts are skipped unless --recompile is given.

    Example:
        flightcontrol build -r https://github.com/acme/widget.git -m ./modules
    """
    settings: Settings = ctx.obj
    show_banner()

    config = OrchestratorConfig.from_settings(
        settings,
        output_dir=mod_folder,
        force_rebuild=recompile or None,
        max_concurrent=jobs,
        build_timeout=timeout,
        clone_depth=depth,
    )
    show_info(
        "Build Plan",
        f"{len(repos)} repositories -> {config.output_dir}"
        + (" (recompile)" if config.force_rebuild else ""),
    )

    orchestrator = BuildOrchestrator(config, fetcher=build_fetcher(settings))
    report = orchestrator.run_sync(repos)

    show_batch_report(report)

    if strict and report.has_failures:
        ctx.exit(1)


@main.command()
@click.option(
    "--path",
    "-p",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Repository working directory",
)
def detect(path: Path) -> None:
    """Show which build system a directory would be built with.

    Example:
        flightcontrol detect --path ./widget
    """
    kinds = BuildSystemDetector().detect_all(path)
    show_detection(path, kinds)


if __name__ == "__main__":
    main()
