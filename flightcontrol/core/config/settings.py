"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flightcontrol.core.config.loader import ConfigLoader
from flightcontrol.core.exceptions.errors import ConfigurationError


def _invalid_settings(error: ValidationError, source: str) -> ConfigurationError:
    return ConfigurationError(
        f"Invalid configuration in {source}: {error.error_count()} invalid value(s)",
        config_key=source,
        details={
            "model": error.title,
            "errors": [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in error.errors()
            ],
        },
    )


class BuildSettings(BaseSettings):
    """Build orchestration settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTCONTROL_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mod_folder: Path = Field(
        default=Path("/modules"),
        description="Output directory for built artifacts",
    )
    recompile: bool = Field(
        default=False,
        description="Rebuild even when an artifact already exists",
    )
    max_concurrent: int = Field(
        default=4,
        ge=0,
        description="Maximum concurrent jobs (0 = one slot per repository)",
    )
    timeout: int = Field(
        default=1800,
        ge=0,
        description="Build tool timeout in seconds (0 = no timeout)",
    )
    artifact_extension: str = Field(
        default="jar",
        description="Extension of collected artifacts",
    )

    @field_validator("artifact_extension", mode="before")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Strip a leading dot and reject empty extensions."""
        v = str(v).strip().lstrip(".")
        if not v:
            raise ValueError("artifact_extension must not be empty")
        return v


class WorkspaceSettings(BaseSettings):
    """Workspace configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTCONTROL_WORKSPACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_dir: Path | None = Field(
        default=None,
        description="Base directory for workspaces",
    )
    max_workspaces: int = Field(
        default=32,
        ge=1,
        le=256,
        description="Maximum concurrent workspaces",
    )
    auto_cleanup: bool = Field(
        default=True,
        description="Remove workspaces once a job finishes",
    )
    prefix: str = Field(
        default="flightcontrol_",
        description="Workspace directory name prefix",
    )

    @field_validator("base_dir", mode="before")
    @classmethod
    def validate_base_dir(cls, v: str | None) -> Path | None:
        """Validate and convert base_dir to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class GitSettings(BaseSettings):
    """Git operation configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTCONTROL_GIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_depth: int = Field(
        default=1,
        ge=0,
        description="Default clone depth (0 = full)",
    )
    retry_attempts: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Clone attempts per repository",
    )
    retry_delay: int = Field(
        default=5,
        ge=1,
        le=60,
        description="Retry delay in seconds",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTCONTROL_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FLIGHTCONTROL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    build: BuildSettings = Field(default_factory=BuildSettings)
    workspace: WorkspaceSettings = Field(default_factory=WorkspaceSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.

        Raises:
            ConfigurationError: If the file cannot be read or a value is invalid.
        """
        loader = ConfigLoader(path)
        loader.load()

        try:
            return cls(
                build=BuildSettings(**loader.get_section("build")),
                workspace=WorkspaceSettings(**loader.get_section("workspace")),
                git=GitSettings(**loader.get_section("git")),
                logging=LoggingSettings(**loader.get_section("logging")),
            )
        except ValidationError as e:
            raise _invalid_settings(e, str(path)) from e

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from an explicit file or the default locations.

        Priority: explicit YAML > default YAML locations > environment/.env > defaults

        Args:
            path: Optional explicit YAML configuration file.

        Returns:
            Settings instance.
        """
        config_path = path or ConfigLoader.find_default()
        if config_path is not None:
            return cls.from_yaml(config_path)

        try:
            return cls()
        except ValidationError as e:
            raise _invalid_settings(e, "environment") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
