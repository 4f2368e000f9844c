"""Build strategies, one per supported build system.

Importing this package registers the built-in strategies. Gradle is
registered first and therefore wins when both markers are present.
"""

from flightcontrol.build.strategies.base import BuildStrategy
from flightcontrol.build.strategies.registry import (
    get_strategy,
    register_strategy,
    registered_strategies,
)
from flightcontrol.build.strategies.gradle import GradleStrategy
from flightcontrol.build.strategies.maven import MavenStrategy

__all__ = [
    "BuildStrategy",
    "GradleStrategy",
    "MavenStrategy",
    "get_strategy",
    "register_strategy",
    "registered_strategies",
]
