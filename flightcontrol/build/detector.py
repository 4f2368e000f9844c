"""Build system detection.

Classifies a repository working directory by the marker files at its top
level. Markers come from the registered strategies, so supporting a new
build system never touches the detector or the orchestrator.
"""

from pathlib import Path

from flightcontrol.build.strategies import BuildStrategy, registered_strategies
from flightcontrol.core.logger.logger import get_logger
from flightcontrol.models.build import BuildSystemKind

logger = get_logger(__name__)


class BuildSystemDetector:
    """Detects the build system of a working directory.

    Only immediate file entries are inspected; a directory named like a
    marker does not count.
    """

    def __init__(self, strategies: list[type[BuildStrategy]] | None = None):
        """Initialize the detector.

        Args:
            strategies: Strategy classes in priority order. Defaults to the
                registry.
        """
        self._strategies = strategies

    @property
    def strategies(self) -> list[type[BuildStrategy]]:
        return self._strategies if self._strategies is not None else registered_strategies()

    def _file_names(self, source_path: Path) -> set[str]:
        if not source_path.is_dir():
            logger.debug(f"Cannot detect build system, not a directory: {source_path}")
            return set()
        return {entry.name for entry in source_path.iterdir() if entry.is_file()}

    def detect(self, source_path: Path) -> BuildSystemKind | None:
        """Return the first matching build system, or None.

        Args:
            source_path: Repository working directory.
        """
        file_names = self._file_names(source_path)
        for strategy in self.strategies:
            if strategy.matches(file_names):
                logger.debug(f"Detected {strategy.kind.value} project in {source_path}")
                return strategy.kind
        return None

    def detect_all(self, source_path: Path) -> list[BuildSystemKind]:
        """Return every matching build system in priority order."""
        file_names = self._file_names(source_path)
        return [s.kind for s in self.strategies if s.matches(file_names)]


def detect_build_system(source_path: Path) -> BuildSystemKind | None:
    """Convenience function to detect a build system with the registry."""
    return BuildSystemDetector().detect(source_path)
