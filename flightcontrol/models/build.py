"""Build-system data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class BuildSystemKind(str, Enum):
    """Build systems a strategy exists for."""

    GRADLE = "gradle"
    MAVEN = "maven"


@dataclass
class BuildResult:
    """Result of a successful build tool invocation.

    Failures are raised as ``BuildFailedError`` instead.

    Attributes:
        command: The argv that was executed.
        return_code: Exit code of the build tool.
        stdout: Standard output from the build.
        stderr: Standard error from the build.
        duration_seconds: Time taken for the build.
    """

    command: list[str]
    return_code: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "command": " ".join(self.command),
            "return_code": self.return_code,
            "duration_seconds": self.duration_seconds,
        }
