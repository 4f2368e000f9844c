"""Tests for configuration loading and settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from flightcontrol.core.config.loader import ConfigLoader
from flightcontrol.core.config.settings import BuildSettings, LoggingSettings, Settings
from flightcontrol.core.exceptions.errors import ConfigurationError
from flightcontrol.orchestrator.config import OrchestratorConfig


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_load_and_get(self, temp_dir: Path) -> None:
        """Test loading YAML and dot-notation lookups."""
        config_file = temp_dir / "flightcontrol.yaml"
        config_file.write_text("build:\n  mod_folder: /srv/modules\n  max_concurrent: 2\n")

        loader = ConfigLoader(config_file)
        loader.load()

        assert loader.get("build.mod_folder") == "/srv/modules"
        assert loader.get("build.missing", "fallback") == "fallback"
        assert loader.get_section("build")["max_concurrent"] == 2
        assert loader.get_section("git") == {}

    def test_empty_file(self, temp_dir: Path) -> None:
        """Test that an empty file is an empty config."""
        config_file = temp_dir / "empty.yaml"
        config_file.write_text("")

        assert ConfigLoader(config_file).load() == {}

    def test_missing_file(self, temp_dir: Path) -> None:
        """Test that a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader(temp_dir / "missing.yaml").load()

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        """Test that broken YAML raises ConfigurationError."""
        config_file = temp_dir / "broken.yaml"
        config_file.write_text("build: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigLoader(config_file).load()

    def test_non_mapping_root(self, temp_dir: Path) -> None:
        """Test that a list at the root is rejected."""
        config_file = temp_dir / "list.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigLoader(config_file).load()

    def test_no_path(self) -> None:
        """Test that a loader without a path yields nothing."""
        assert ConfigLoader().load() == {}


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test built-in defaults."""
        monkeypatch.delenv("FLIGHTCONTROL_BUILD_MOD_FOLDER", raising=False)
        settings = Settings()

        assert settings.build.mod_folder == Path("/modules")
        assert settings.build.recompile is False
        assert settings.build.artifact_extension == "jar"
        assert settings.build.timeout == 1800
        assert settings.git.default_depth == 1
        assert settings.workspace.auto_cleanup is True
        assert settings.logging.level == "INFO"

    def test_from_yaml(self, temp_dir: Path) -> None:
        """Test loading every section from YAML."""
        config_file = temp_dir / "flightcontrol.yaml"
        config_file.write_text(
            "build:\n"
            "  mod_folder: /srv/modules\n"
            "  recompile: true\n"
            "  artifact_extension: .zip\n"
            "workspace:\n"
            "  max_workspaces: 8\n"
            "git:\n"
            "  retry_attempts: 3\n"
            "logging:\n"
            "  level: debug\n"
        )

        settings = Settings.from_yaml(config_file)

        assert settings.build.mod_folder == Path("/srv/modules")
        assert settings.build.recompile is True
        assert settings.build.artifact_extension == "zip"
        assert settings.workspace.max_workspaces == 8
        assert settings.git.retry_attempts == 3
        assert settings.logging.level == "DEBUG"

    def test_load_explicit_path(self, temp_dir: Path) -> None:
        """Test that an explicit path wins over default locations."""
        config_file = temp_dir / "custom.yaml"
        config_file.write_text("build:\n  max_concurrent: 7\n")

        assert Settings.load(config_file).build.max_concurrent == 7

    def test_load_without_files(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test falling back to defaults when no config file exists."""
        monkeypatch.chdir(temp_dir)
        monkeypatch.setattr(ConfigLoader, "find_default", staticmethod(lambda: None))

        assert Settings.load().build.max_concurrent == 4

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variables with the section prefix."""
        monkeypatch.setenv("FLIGHTCONTROL_BUILD_MAX_CONCURRENT", "9")
        assert BuildSettings().max_concurrent == 9

    def test_invalid_log_level(self) -> None:
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_empty_extension_rejected(self) -> None:
        """Test that an empty artifact extension is rejected."""
        with pytest.raises(ValidationError):
            BuildSettings(artifact_extension=".")

    def test_out_of_range_value_in_yaml(self, temp_dir: Path) -> None:
        """Test that a schema-invalid value is reported as a configuration error."""
        config_file = temp_dir / "invalid.yaml"
        config_file.write_text("build:\n  max_concurrent: -1\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration") as exc_info:
            Settings.from_yaml(config_file)

        assert exc_info.value.details["config_key"] == str(config_file)
        assert exc_info.value.details["model"] == "BuildSettings"
        assert exc_info.value.details["errors"][0].startswith("max_concurrent:")

    def test_invalid_environment_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a bad environment override is a configuration error."""
        monkeypatch.setattr(ConfigLoader, "find_default", staticmethod(lambda: None))
        monkeypatch.setenv("FLIGHTCONTROL_BUILD_TIMEOUT", "-5")

        with pytest.raises(ConfigurationError, match="environment"):
            Settings.load()


class TestOrchestratorConfig:
    """Tests for OrchestratorConfig.from_settings."""

    def test_from_settings(self) -> None:
        """Test that settings map onto run options."""
        settings = Settings(build=BuildSettings(mod_folder=Path("/srv/modules"), timeout=0))

        config = OrchestratorConfig.from_settings(settings)

        assert config.output_dir == Path("/srv/modules")
        assert config.build_timeout is None
        assert config.clone_depth == settings.git.default_depth

    def test_overrides_ignore_none(self) -> None:
        """Test that only explicit overrides replace settings."""
        settings = Settings(build=BuildSettings(max_concurrent=2))

        config = OrchestratorConfig.from_settings(
            settings,
            output_dir=Path("/tmp/out"),
            max_concurrent=None,
            force_rebuild=True,
        )

        assert config.output_dir == Path("/tmp/out")
        assert config.max_concurrent == 2
        assert config.force_rebuild is True

    def test_config_is_frozen(self) -> None:
        """Test that run options cannot change mid-run."""
        config = OrchestratorConfig(output_dir=Path("/modules"))
        with pytest.raises(ValidationError):
            config.force_rebuild = True  # type: ignore[misc]
