"""Build-system abstraction: naming, detection, strategies and skip policy.

This module provides:
- Artifact identity derivation from locators
- Build system detection from marker files
- Per-build-system strategies (build, locate artifact, copy)
- The existence-based artifact skip policy
"""

from flightcontrol.build.cache import should_skip
from flightcontrol.build.detector import BuildSystemDetector, detect_build_system
from flightcontrol.build.naming import name
from flightcontrol.build.strategies import (
    BuildStrategy,
    GradleStrategy,
    MavenStrategy,
    get_strategy,
    register_strategy,
    registered_strategies,
)
from flightcontrol.models.build import BuildResult, BuildSystemKind

__all__ = [
    "BuildSystemKind",
    "BuildResult",
    "BuildSystemDetector",
    "detect_build_system",
    "BuildStrategy",
    "GradleStrategy",
    "MavenStrategy",
    "get_strategy",
    "register_strategy",
    "registered_strategies",
    "name",
    "should_skip",
]
