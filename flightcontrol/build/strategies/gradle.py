"""Gradle build strategy: ``gradlew build`` producing a ``-all.jar`` fat jar."""

from pathlib import Path

from flightcontrol.build.strategies.base import BuildStrategy
from flightcontrol.build.strategies.registry import register_strategy
from flightcontrol.models.build import BuildSystemKind


@register_strategy
class GradleStrategy(BuildStrategy):
    """Builds Gradle projects with the bundled wrapper, or ``gradle`` on PATH."""

    kind = BuildSystemKind.GRADLE
    marker_files = ("build.gradle", "build.gradle.kts")
    output_dir = "build/libs"
    artifact_suffix = "-all.jar"
    wrapper_script = "gradlew"
    windows_wrapper_script = "gradlew.bat"

    def command(self, work_dir: Path) -> list[str]:
        return [self.launcher(work_dir, "gradle"), "build"]
