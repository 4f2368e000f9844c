"""Maven build strategy: ``mvn package`` producing a jar-with-dependencies."""

from pathlib import Path

from flightcontrol.build.strategies.base import BuildStrategy
from flightcontrol.build.strategies.registry import register_strategy
from flightcontrol.models.build import BuildSystemKind


@register_strategy
class MavenStrategy(BuildStrategy):
    """Builds Maven projects with ``mvnw`` when present, otherwise ``mvn``."""

    kind = BuildSystemKind.MAVEN
    marker_files = ("pom.xml",)
    output_dir = "target"
    artifact_suffix = "-jar-with-dependencies.jar"
    env_vars = {"MAVEN_OPTS": "-Xmx2g"}
    wrapper_script = "mvnw"
    windows_wrapper_script = "mvnw.cmd"

    def command(self, work_dir: Path) -> list[str]:
        return [self.launcher(work_dir, "mvn"), "package", "-DskipTests", "--batch-mode"]
